"""Web interface for the directory search."""
