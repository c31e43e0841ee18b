"""Conversion of configuration models into domain objects."""

from __future__ import annotations

from stockalloc.contracts.dtos import PreselectionEntry
from stockalloc.domain import (
    AllocationSettings,
    CutPlan,
    RequisitionLine,
    StockPiece,
    StockProfile,
)
from stockalloc.domain.services import requirement_from_weight

from .schema import AllocationConfiguration, StockProfileConfig

__all__ = [
    "config_to_line",
    "config_to_pieces",
    "config_to_preselection",
    "config_to_profile",
    "config_to_settings",
]


def config_to_pieces(config: AllocationConfiguration) -> list[StockPiece]:
    return [
        StockPiece(
            piece_id=p.piece_id,
            current_length_mm=p.current_length_mm,
            current_weight_kg=p.current_weight_kg,
            status=p.status,
            storage_location=p.storage_location,
            received_date=p.received_date,
            usage_percentage=p.usage_percentage,
        )
        for p in config.pieces
    ]


def config_to_profile(profile: StockProfileConfig) -> StockProfile:
    return StockProfile(
        shape=profile.shape,
        diameter_mm=profile.diameter_mm,
        inner_diameter_mm=profile.inner_diameter_mm,
        density_g_cm3=profile.density_g_cm3,
    )


def config_to_line(config: AllocationConfiguration) -> RequisitionLine:
    """Build the requisition line, converting a weight target to a length.

    Raises:
        InvalidInputError: If the weight cannot be converted (sheet profiles).
    """
    line = config.line
    required_length = line.required_length_mm
    if line.required_weight_kg is not None and line.profile is not None:
        requirement = requirement_from_weight(
            line.required_weight_kg, config_to_profile(line.profile)
        )
        required_length = requirement.required_length_mm
    return RequisitionLine(
        line_id=line.line_id,
        material_id=line.material_id,
        cut_plans=tuple(
            CutPlan(
                piece_length_mm=plan.piece_length_mm,
                pieces_count=plan.pieces_count,
                wastage_percent_allowance=plan.wastage_percent_allowance,
                label=plan.label,
            )
            for plan in line.cut_plans
        ),
        required_length_mm=required_length,
        locked=line.locked,
    )


def config_to_preselection(config: AllocationConfiguration) -> list[PreselectionEntry]:
    return [
        PreselectionEntry(piece_id=e.piece_id, allocated_length_mm=e.allocated_length_mm)
        for e in config.preselection
    ]


def config_to_settings(config: AllocationConfiguration) -> AllocationSettings:
    return AllocationSettings(
        fifo_tolerance=config.settings.fifo_tolerance,
        min_usable_length_mm=config.settings.min_usable_length_mm,
    )
