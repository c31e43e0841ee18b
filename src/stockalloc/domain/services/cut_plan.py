"""Cut-plan arithmetic for a single stock piece.

All functions are pure. Multi-part requirements are handled by computing
each plan independently against the same piece length.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..value_objects import AllocationSettings, CutPlan

__all__ = ["CutBreakdown", "breakdown_for_piece", "cut_breakdown", "cuts_available"]


def _micrometres(length_mm: float) -> int:
    return round(length_mm * 1000)


def cuts_available(stock_length_mm: float, cut_length_mm: float) -> int:
    """Number of whole cuts of ``cut_length_mm`` that fit in the stock.

    Lengths are divided as whole micrometres, so exact decimal multiples
    such as 1200.6 / 200.1 come out even. A non-positive cut length yields
    0 rather than an error, so a malformed plan simply shows as unusable.

    Examples:
        >>> cuts_available(999, 333)
        3
        >>> cuts_available(1200.6, 200.1)
        6
        >>> cuts_available(100, 333)
        0
    """
    stock = _micrometres(stock_length_mm)
    cut = _micrometres(cut_length_mm)
    if cut <= 0 or stock <= 0:
        return 0
    return stock // cut


def _leftover_mm(stock_length_mm: float, cut_length_mm: float, cuts: int) -> float:
    return (_micrometres(stock_length_mm) - cuts * _micrometres(cut_length_mm)) / 1000


@dataclass(frozen=True)
class CutBreakdown:
    """Result of cutting one plan out of one piece.

    Attributes:
        stock_length_mm: Length of the stock piece.
        cut_length_mm: Length of one finished cut.
        cuts: Whole cuts obtainable.
        required_cuts: Cuts the plan asks for.
        label: Plan label for display.
        reusable_offcut: Leftover is long enough to return to stock.
    """

    stock_length_mm: float
    cut_length_mm: float
    cuts: int
    required_cuts: int = 0
    label: str = ""
    reusable_offcut: bool = False

    @property
    def used_length_mm(self) -> float:
        return self.cuts * self.cut_length_mm

    @property
    def leftover_mm(self) -> float:
        return _leftover_mm(self.stock_length_mm, self.cut_length_mm, self.cuts)

    @property
    def waste_percent(self) -> float | None:
        """Leftover as a share of the stock; None when nothing can be cut."""
        if self.cuts == 0:
            return None
        return self.leftover_mm / self.stock_length_mm * 100

    @property
    def is_satisfied(self) -> bool:
        """True when the piece yields at least the required cuts."""
        return self.cuts > 0 and self.cuts >= self.required_cuts

    @property
    def surplus_cuts(self) -> int:
        return max(0, self.cuts - self.required_cuts)


def cut_breakdown(
    stock_length_mm: float,
    cut_length_mm: float,
    required_cuts: int = 0,
    label: str = "",
    settings: AllocationSettings | None = None,
) -> CutBreakdown:
    """Compute the breakdown of one cut length against one stock length."""
    settings = settings or AllocationSettings()
    cuts = cuts_available(stock_length_mm, cut_length_mm)
    leftover = _leftover_mm(stock_length_mm, cut_length_mm, cuts)
    return CutBreakdown(
        stock_length_mm=stock_length_mm,
        cut_length_mm=cut_length_mm,
        cuts=cuts,
        required_cuts=required_cuts,
        label=label,
        reusable_offcut=cuts > 0 and leftover >= settings.min_usable_length_mm,
    )


def breakdown_for_piece(
    stock_length_mm: float,
    plans: Sequence[CutPlan],
    settings: AllocationSettings | None = None,
) -> tuple[CutBreakdown, ...]:
    """Per-plan breakdown table for a candidate piece.

    Each plan is evaluated on its own against the full piece length; the
    rows do not share the piece between them.

    Args:
        stock_length_mm: Length of the candidate piece.
        plans: Cut plans of the requisition line.
        settings: Offcut threshold; defaults apply when omitted.

    Returns:
        One CutBreakdown per plan, in plan order.
    """
    return tuple(
        cut_breakdown(
            stock_length_mm,
            plan.piece_length_mm,
            required_cuts=plan.pieces_count,
            label=plan.label or f"Plan {index}",
            settings=settings,
        )
        for index, plan in enumerate(plans, start=1)
    )
