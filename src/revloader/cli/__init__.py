"""Command-line interface for the revision loader."""
