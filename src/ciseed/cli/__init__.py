"""Command-line interface for ciseed."""
