"""Value objects for the stock allocation domain.

Stock pieces, cut plans and requirement targets are immutable. They are
produced by the surrounding inventory system and only read by this engine.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum

# Lengths closer than this are treated as equal.
LENGTH_TOLERANCE_MM = 1e-6


class PieceStatus(str, Enum):
    """Lifecycle status of a physical stock piece."""

    AVAILABLE = "Available"
    RESERVED = "Reserved"
    IN_USE = "InUse"
    CONSUMED = "Consumed"


@dataclass(frozen=True)
class StockPiece:
    """A physically tracked unit of raw material (rod, bar, pipe).

    Attributes:
        piece_id: Stable, externally assigned identifier.
        current_length_mm: Remaining usable length in millimetres.
        current_weight_kg: Remaining weight in kilograms.
        status: Lifecycle status. Only AVAILABLE pieces are candidates.
        storage_location: Warehouse location, if known.
        received_date: Receipt date used for FIFO ordering.
        usage_percentage: Informational, derived upstream.
    """

    piece_id: str
    current_length_mm: float
    current_weight_kg: float = 0.0
    status: PieceStatus = PieceStatus.AVAILABLE
    storage_location: str | None = None
    received_date: date | None = None
    usage_percentage: float = 0.0

    def __post_init__(self) -> None:
        if not self.piece_id:
            raise ValueError("Piece id must not be empty")
        if not math.isfinite(self.current_length_mm) or self.current_length_mm <= 0:
            raise ValueError("Piece length must be positive")
        if self.current_weight_kg < 0:
            raise ValueError("Piece weight must be non-negative")

    @property
    def is_available(self) -> bool:
        """True if the piece may be picked for a new allocation."""
        return self.status is PieceStatus.AVAILABLE

    @property
    def fifo_key(self) -> tuple[date, str]:
        """Sort key placing older stock first; undated pieces go last."""
        return (self.received_date or date.max, self.piece_id)

    def weight_for(self, length_mm: float) -> float:
        """Prorated weight of ``length_mm`` taken from this piece."""
        return length_mm / self.current_length_mm * self.current_weight_kg


@dataclass(frozen=True)
class CutPlan:
    """Cutting requirement for one child part.

    Attributes:
        piece_length_mm: Length of one finished cut.
        pieces_count: Number of cuts needed.
        wastage_percent_allowance: Display value only, not used for matching.
        label: Child part name, for breakdown tables.
    """

    piece_length_mm: float
    pieces_count: int
    wastage_percent_allowance: float = 0.0
    label: str = ""

    def __post_init__(self) -> None:
        if self.pieces_count < 0:
            raise ValueError("Pieces count must be non-negative")
        if self.wastage_percent_allowance < 0:
            raise ValueError("Wastage allowance must be non-negative")

    @property
    def total_length_mm(self) -> float:
        """Total length of all cuts in this plan."""
        return self.piece_length_mm * self.pieces_count

    @property
    def gross_piece_length_mm(self) -> float:
        """Per-cut length including the wastage allowance."""
        return self.piece_length_mm * (1 + self.wastage_percent_allowance / 100)


@dataclass(frozen=True)
class RequirementContext:
    """The length target a selection must cover.

    Attributes:
        required_length_mm: Total length needed, always positive.
        cut_plans: Cut plans the total was derived from, if any.
    """

    required_length_mm: float
    cut_plans: tuple[CutPlan, ...] = ()

    def __post_init__(self) -> None:
        if not math.isfinite(self.required_length_mm) or self.required_length_mm <= 0:
            raise ValueError("Required length must be positive")

    @property
    def is_multi_part(self) -> bool:
        """True when more than one child part shares this requirement."""
        return len(self.cut_plans) > 1


@dataclass(frozen=True)
class AllocationSettings:
    """Tunable constants for selection and cut breakdowns.

    Attributes:
        fifo_tolerance: Relative waste band inside which older stock wins.
        min_usable_length_mm: Leftovers at least this long are reusable
            offcuts; shorter ones are scrap.
    """

    fifo_tolerance: float = 0.05
    min_usable_length_mm: float = 300.0

    def __post_init__(self) -> None:
        if self.fifo_tolerance < 0:
            raise ValueError("FIFO tolerance must be non-negative")
        if self.min_usable_length_mm < 0:
            raise ValueError("Minimum usable length must be non-negative")


@dataclass(frozen=True)
class AllocatedPiece:
    """A (piece id, allocated length) pair handed to persistence."""

    piece_id: str
    allocated_length_mm: float


@dataclass(frozen=True)
class SuggestedPiece:
    """One greedy pick with the length to take and its estimated waste."""

    piece: StockPiece
    suggested_length_mm: float
    waste_percent: float


@dataclass(frozen=True)
class AllocationSummary:
    """Read-only coverage projection of a selection.

    Attributes:
        required_length_mm: Target length.
        total_pieces: Number of selected pieces.
        total_length_mm: Sum of allocated lengths.
        total_weight_kg: Prorated weight of the allocated lengths.
        selected_stock_length_mm: Full current length of the selected
            pieces, allocated or not.
    """

    required_length_mm: float
    total_pieces: int
    total_length_mm: float
    total_weight_kg: float
    selected_stock_length_mm: float = 0.0

    @property
    def fulfillment_percent(self) -> float:
        """Coverage percentage, capped at 100."""
        if self.is_covered:
            return 100.0
        return min(100.0, self.total_length_mm / self.required_length_mm * 100)

    @property
    def stock_coverage_percent(self) -> float:
        """Full length of the selected pieces against the requirement, uncapped."""
        return self.selected_stock_length_mm / self.required_length_mm * 100

    @property
    def offcut_mm(self) -> float:
        """Selected stock length left over after the allocations."""
        return max(0.0, self.selected_stock_length_mm - self.total_length_mm)

    @property
    def shortfall_mm(self) -> float:
        if self.is_covered:
            return 0.0
        return self.required_length_mm - self.total_length_mm

    @property
    def excess_mm(self) -> float:
        excess = self.total_length_mm - self.required_length_mm
        return excess if excess > LENGTH_TOLERANCE_MM else 0.0

    @property
    def wastage_percent(self) -> float:
        """Excess as a share of the allocated length."""
        if self.total_length_mm == 0:
            return 0.0
        return self.excess_mm / self.total_length_mm * 100

    @property
    def is_covered(self) -> bool:
        return self.total_length_mm >= self.required_length_mm - LENGTH_TOLERANCE_MM


@dataclass(frozen=True)
class RequisitionLine:
    """One consumer's demand for a material.

    Attributes:
        line_id: Identifier of the requisition line.
        material_id: Material whose stock pieces may be used.
        cut_plans: One plan for a single part, several for a multi-part line.
        required_length_mm: Explicit total; derived from the plans if None.
        locked: Pieces were fixed by an upstream planning step.
    """

    line_id: str
    material_id: str
    cut_plans: tuple[CutPlan, ...] = ()
    required_length_mm: float | None = None
    locked: bool = False

    def __post_init__(self) -> None:
        if not self.line_id:
            raise ValueError("Line id must not be empty")
        if not self.cut_plans and self.required_length_mm is None:
            raise ValueError("A requisition line needs cut plans or a required length")
