"""Weight and length conversion for round stock profiles."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

__all__ = ["MaterialShape", "StockProfile", "length_for_weight", "weight_for_length"]


class MaterialShape(str, Enum):
    """Cross-section shapes of raw material."""

    ROD = "Rod"
    FORGED = "Forged"
    PIPE = "Pipe"
    SHEET = "Sheet"


@dataclass(frozen=True)
class StockProfile:
    """Cross-section and density of a raw material.

    Attributes:
        shape: Cross-section shape.
        diameter_mm: Outer diameter for rods, forgings and pipes.
        inner_diameter_mm: Bore of a pipe.
        density_g_cm3: Material density (steel is about 7.85).
    """

    shape: MaterialShape
    diameter_mm: float = 0.0
    inner_diameter_mm: float = 0.0
    density_g_cm3: float = 7.85

    def __post_init__(self) -> None:
        if self.diameter_mm < 0 or self.inner_diameter_mm < 0:
            raise ValueError("Diameters must be non-negative")
        if self.inner_diameter_mm > self.diameter_mm:
            raise ValueError("Inner diameter cannot exceed outer diameter")
        if self.density_g_cm3 < 0:
            raise ValueError("Density must be non-negative")

    @property
    def area_cm2(self) -> float:
        """Cross-sectional area in square centimetres.

        Sheets have no meaningful linear cross-section and report 0.
        """
        outer_radius_cm = self.diameter_mm / 10 / 2
        if self.shape in (MaterialShape.ROD, MaterialShape.FORGED):
            return math.pi * outer_radius_cm**2
        if self.shape is MaterialShape.PIPE:
            inner_radius_cm = self.inner_diameter_mm / 10 / 2
            return math.pi * (outer_radius_cm**2 - inner_radius_cm**2)
        return 0.0


def length_for_weight(weight_kg: float, profile: StockProfile) -> float:
    """Length in mm that weighs ``weight_kg``.

    ``L(mm) = W(kg) * 1e6 / (density(g/cm3) * A(cm2))``. Returns 0.0 when
    the profile cannot be converted (sheets, zero area or density).
    """
    area = profile.area_cm2
    if weight_kg <= 0 or area <= 0 or profile.density_g_cm3 <= 0:
        return 0.0
    return weight_kg * 1_000_000 / (profile.density_g_cm3 * area)


def weight_for_length(length_mm: float, profile: StockProfile) -> float:
    """Weight in kg of ``length_mm`` of material."""
    if length_mm <= 0:
        return 0.0
    return length_mm * profile.density_g_cm3 * profile.area_cm2 / 1_000_000
