"""Command-line interface for doc2markdown."""
