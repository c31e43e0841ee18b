"""Validate command for allocation request files."""

from pathlib import Path
from typing import Annotated

import typer

from stockalloc.application.config import (
    ConfigError,
    config_to_line,
    config_to_pieces,
    load_config,
)
from stockalloc.domain import InvalidInputError, requirement_for_line
from stockalloc.domain.services import available_length, check_availability


def display_load_error(error: ConfigError) -> None:
    """Print a loading error with its details to stderr."""
    typer.echo("Errors:", err=True)
    if error.error_type == "json_parse":
        for detail in error.details:
            typer.echo(
                f"  Line {detail.get('line', '?')}, Column {detail.get('column', '?')}: "
                f"{detail.get('message', 'Unknown error')}",
                err=True,
            )
    elif error.error_type == "validation":
        for detail in error.details:
            typer.echo(f"  {detail.get('path', 'unknown')}: {detail.get('message')}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)


def validate_command(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON allocation request to validate"),
    ],
) -> None:
    """Validate an allocation request file.

    Exit codes:
        0 - Request is valid and stock covers the requirement
        1 - Request has errors
        2 - Request is valid but available stock is short

    Example:
        stockalloc validate requisition-42.json
    """
    typer.echo(f"Validating {config_file}...")

    try:
        config = load_config(config_file)
        line = config_to_line(config)
        requirement = requirement_for_line(line)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)
    except InvalidInputError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    pieces = config_to_pieces(config)
    stock = available_length(pieces)
    typer.echo(f"Required: {requirement.required_length_mm:.1f} mm")
    typer.echo(f"Available stock: {stock:.1f} mm in {sum(p.is_available for p in pieces)} pieces")

    if not check_availability(pieces, requirement.required_length_mm):
        typer.echo("Warning: available stock does not cover the requirement", err=True)
        raise typer.Exit(code=2)
    typer.echo("Request is valid.")
