"""Typer CLI for stock piece allocation."""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer

from stockalloc.application import AllocationWorkspace, SelectionController
from stockalloc.application.config import (
    AllocationConfiguration,
    ConfigError,
    config_to_line,
    config_to_pieces,
    config_to_preselection,
    config_to_settings,
    load_config,
)
from stockalloc.cli.commands import display_load_error, validate_command
from stockalloc.domain import (
    AllocationError,
    AllocationSettings,
    InvalidInputError,
    RequisitionLine,
    ShortfallNotAcknowledgedError,
    cuts_available,
)
from stockalloc.domain.services import cut_breakdown
from stockalloc.infrastructure import (
    CoverageFormatter,
    CutBreakdownFormatter,
    InMemoryInventory,
    SelectionFormatter,
)

app = typer.Typer(
    name="stockalloc",
    help="Allocate raw-material stock pieces to cutting requirements.",
)

app.command(name="validate")(validate_command)


def _load(config_file: Path) -> tuple[AllocationConfiguration, RequisitionLine]:
    try:
        config = load_config(config_file)
        return config, config_to_line(config)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)
    except InvalidInputError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def allocate(
    config_file: Annotated[Path, typer.Argument(help="Path to the JSON allocation request")],
    confirm: Annotated[
        bool, typer.Option("--confirm", help="Confirm the selection and print the pairs")
    ] = False,
    acknowledge_shortfall: Annotated[
        bool,
        typer.Option("--acknowledge-shortfall", help="Allow confirming a partial allocation"),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Select stock pieces for a requisition line.

    Uses the pre-selection from the request if present, otherwise the
    least-waste auto-select.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config, line = _load(config_file)
    inventory = InMemoryInventory({line.material_id: config_to_pieces(config)})
    workspace = AllocationWorkspace(inventory, inventory, config_to_settings(config))

    try:
        controller = workspace.open_line(line, config_to_preselection(config))
    except InvalidInputError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(SelectionFormatter().format(controller))
    typer.echo()
    typer.echo(CoverageFormatter().format(controller.summary))

    if not confirm:
        return

    try:
        allocation = workspace.confirm(line.line_id, acknowledge_shortfall=acknowledge_shortfall)
    except ShortfallNotAcknowledgedError as e:
        typer.echo(f"Warning: {e}", err=True)
        typer.echo("Re-run with --acknowledge-shortfall to confirm anyway.", err=True)
        raise typer.Exit(code=2)
    except AllocationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo()
    typer.echo(json.dumps(allocation.to_dict(), indent=2))


@app.command()
def cuts(
    stock: Annotated[float, typer.Option("--stock", "-s", help="Stock piece length in mm")],
    cut: Annotated[float, typer.Option("--cut", "-c", help="Length of one cut in mm")],
    min_usable: Annotated[
        float, typer.Option("--min-usable", help="Shortest reusable offcut in mm")
    ] = 300.0,
) -> None:
    """Show how many cuts fit in one stock piece."""
    if stock < 0:
        typer.echo("Error: stock length must be non-negative", err=True)
        raise typer.Exit(code=1)
    row = cut_breakdown(stock, cut, settings=AllocationSettings(min_usable_length_mm=min_usable))
    typer.echo(f"Cuts: {cuts_available(stock, cut)}")
    typer.echo(f"Used: {row.used_length_mm:.1f} mm")
    typer.echo(f"Leftover: {row.leftover_mm:.1f} mm")
    if row.waste_percent is None:
        typer.echo("Waste: - (piece unusable for this cut)")
    else:
        kind = "reusable offcut" if row.reusable_offcut else "scrap"
        typer.echo(f"Waste: {row.waste_percent:.1f}% ({kind})")


@app.command()
def breakdown(
    config_file: Annotated[Path, typer.Argument(help="Path to the JSON allocation request")],
    piece: Annotated[str, typer.Option("--piece", "-p", help="Piece id to break down")],
) -> None:
    """Show the per-plan cut breakdown of one piece."""
    config, line = _load(config_file)
    controller = SelectionController(line, config_to_pieces(config), config_to_settings(config))
    try:
        rows = controller.breakdown(piece)
    except InvalidInputError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(CutBreakdownFormatter().format(piece, rows))


if __name__ == "__main__":
    app()
