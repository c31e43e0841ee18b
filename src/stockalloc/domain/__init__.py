"""Domain layer - stock pieces, cut plans, selections and coverage."""

from .exceptions import (
    AllocationError,
    EmptySelectionError,
    InvalidInputError,
    LockedLineError,
    PersistenceRejectedError,
    SelectionStateError,
    ShortfallNotAcknowledgedError,
)
from .selection import Selection, summarize
from .services import (
    CutBreakdown,
    MaterialShape,
    StockProfile,
    auto_select,
    breakdown_for_piece,
    check_availability,
    cuts_available,
    requirement_for_line,
    suggest_pieces,
)
from .value_objects import (
    LENGTH_TOLERANCE_MM,
    AllocatedPiece,
    AllocationSettings,
    AllocationSummary,
    CutPlan,
    PieceStatus,
    RequirementContext,
    RequisitionLine,
    StockPiece,
    SuggestedPiece,
)

__all__ = [
    "LENGTH_TOLERANCE_MM",
    "AllocatedPiece",
    "AllocationError",
    "AllocationSettings",
    "AllocationSummary",
    "CutBreakdown",
    "CutPlan",
    "EmptySelectionError",
    "InvalidInputError",
    "LockedLineError",
    "MaterialShape",
    "PersistenceRejectedError",
    "PieceStatus",
    "RequirementContext",
    "RequisitionLine",
    "Selection",
    "SelectionStateError",
    "ShortfallNotAcknowledgedError",
    "StockPiece",
    "StockProfile",
    "SuggestedPiece",
    "auto_select",
    "breakdown_for_piece",
    "check_availability",
    "cuts_available",
    "requirement_for_line",
    "suggest_pieces",
    "summarize",
]
