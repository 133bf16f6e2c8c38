"""Command-line interface for podshelf."""
