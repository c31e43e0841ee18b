"""Command line interface for stock allocation."""
