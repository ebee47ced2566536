"""Command-line interface for rtotrack."""
