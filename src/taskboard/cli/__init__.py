"""Command-line entrypoint, bootstrap and console."""
