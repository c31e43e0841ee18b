"""Deriving length requirements from cut plans and weights."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Sequence

from ..exceptions import InvalidInputError
from ..value_objects import CutPlan, RequirementContext, RequisitionLine, StockPiece
from .geometry import StockProfile, length_for_weight

__all__ = [
    "aggregate_requirements",
    "available_length",
    "check_availability",
    "requirement_for_line",
    "requirement_from_plans",
    "requirement_from_weight",
]


def requirement_from_plans(plans: Sequence[CutPlan]) -> RequirementContext:
    """Total length of all cuts across the plans.

    Raises:
        InvalidInputError: If a plan has a non-positive cut length or the
            total is not positive.
    """
    for plan in plans:
        if plan.piece_length_mm <= 0:
            raise InvalidInputError(
                f"Cut length must be positive (got {plan.piece_length_mm})"
            )
    total = sum(plan.total_length_mm for plan in plans)
    if total <= 0:
        raise InvalidInputError("Required length must be positive")
    return RequirementContext(required_length_mm=total, cut_plans=tuple(plans))


def requirement_from_weight(weight_kg: float, profile: StockProfile) -> RequirementContext:
    """Length requirement equivalent to a required weight."""
    length = length_for_weight(weight_kg, profile)
    if length <= 0:
        raise InvalidInputError(
            f"Cannot convert {weight_kg} kg of {profile.shape.value} to a length"
        )
    return RequirementContext(required_length_mm=length)


def requirement_for_line(line: RequisitionLine) -> RequirementContext:
    """Requirement of a requisition line.

    An explicit total on the line takes precedence over the plan sum.
    """
    if line.required_length_mm is not None:
        if line.required_length_mm <= 0:
            raise InvalidInputError("Required length must be positive")
        return RequirementContext(
            required_length_mm=line.required_length_mm, cut_plans=line.cut_plans
        )
    return requirement_from_plans(line.cut_plans)


def aggregate_requirements(lines: Iterable[RequisitionLine]) -> dict[str, float]:
    """Sum required lengths per material id, in first-seen order."""
    totals: dict[str, float] = defaultdict(float)
    for line in lines:
        totals[line.material_id] += requirement_for_line(line).required_length_mm
    return dict(totals)


def available_length(pieces: Iterable[StockPiece]) -> float:
    """Summed length of the available pieces."""
    return sum(p.current_length_mm for p in pieces if p.is_available)


def check_availability(pieces: Iterable[StockPiece], required_length_mm: float) -> bool:
    """True if the available stock can cover the requirement in total."""
    return available_length(pieces) >= required_length_mm
