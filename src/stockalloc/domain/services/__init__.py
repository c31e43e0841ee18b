"""Pure domain services: cut arithmetic, selection heuristic, requirements."""

from .auto_select import (
    auto_select,
    eligible_pieces,
    rank_candidates,
    suggest_pieces,
    waste_key,
)
from .cut_plan import CutBreakdown, breakdown_for_piece, cut_breakdown, cuts_available
from .geometry import MaterialShape, StockProfile, length_for_weight, weight_for_length
from .requirements import (
    aggregate_requirements,
    available_length,
    check_availability,
    requirement_for_line,
    requirement_from_plans,
    requirement_from_weight,
)

__all__ = [
    "CutBreakdown",
    "MaterialShape",
    "StockProfile",
    "aggregate_requirements",
    "auto_select",
    "available_length",
    "breakdown_for_piece",
    "check_availability",
    "cut_breakdown",
    "cuts_available",
    "eligible_pieces",
    "length_for_weight",
    "rank_candidates",
    "requirement_for_line",
    "requirement_from_plans",
    "requirement_from_weight",
    "suggest_pieces",
    "waste_key",
    "weight_for_length",
]
