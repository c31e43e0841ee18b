"""CLI command implementations for the stockalloc application."""

from stockalloc.cli.commands.validate import display_load_error, validate_command

__all__ = ["display_load_error", "validate_command"]
