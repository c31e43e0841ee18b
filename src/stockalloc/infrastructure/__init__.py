"""Infrastructure layer - in-memory inventory and text formatters."""

from .formatters import CoverageFormatter, CutBreakdownFormatter, SelectionFormatter
from .inventory import InMemoryInventory

__all__ = [
    "CoverageFormatter",
    "CutBreakdownFormatter",
    "InMemoryInventory",
    "SelectionFormatter",
]
