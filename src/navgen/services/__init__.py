"""Process, filesystem and user-interaction services."""
