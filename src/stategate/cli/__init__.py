"""Command-line interface for stategate."""
