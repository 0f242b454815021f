"""Command-line interface for antigravity-detect."""
