"""Watch mode for regenerating on source changes."""

from navgen.live.watch import SourceWatcher

__all__ = ["SourceWatcher"]
