"""TypeScript source model and value-shape compilation."""
