"""Directory parsing, caching and search."""
