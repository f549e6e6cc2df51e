"""Command-line surface of the board service."""
