"""Command-line interface for meshops."""
