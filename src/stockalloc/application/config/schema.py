"""Pydantic configuration schema for allocation request files.

An allocation request file describes one requisition line, the stock
pieces of its material and an optional pre-selection. It uses Pydantic v2
for validation and serialization.

The PieceStatus and MaterialShape enums are reused from the domain layer
to keep values consistent.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from stockalloc.domain.services.geometry import MaterialShape
from stockalloc.domain.value_objects import PieceStatus

# Version 1.0: single line, pieces, pre-selection
# Version 1.1: weight-based requirements and settings block
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0", "1.1"})


def _coerce_id(v: object) -> object:
    """Accept numeric ids from upstream systems as strings."""
    if isinstance(v, int) and not isinstance(v, bool):
        return str(v)
    return v


class StockPieceConfig(BaseModel):
    """A stock piece as exported by the inventory catalog."""

    model_config = ConfigDict(extra="forbid")

    piece_id: str = Field(..., min_length=1)
    current_length_mm: float = Field(..., gt=0, description="Remaining length in mm")
    current_weight_kg: float = Field(default=0.0, ge=0)
    status: PieceStatus = PieceStatus.AVAILABLE
    storage_location: str | None = None
    received_date: date | None = None
    usage_percentage: float = Field(default=0.0, ge=0, le=100)

    @field_validator("piece_id", mode="before")
    @classmethod
    def coerce_piece_id(cls, v: object) -> object:
        return _coerce_id(v)


class CutPlanConfig(BaseModel):
    """One child part's cutting requirement."""

    model_config = ConfigDict(extra="forbid")

    piece_length_mm: float = Field(..., gt=0, description="Length of one cut in mm")
    pieces_count: int = Field(..., ge=1)
    wastage_percent_allowance: float = Field(default=0.0, ge=0, le=100)
    label: str = ""


class StockProfileConfig(BaseModel):
    """Cross-section used to turn a required weight into a length."""

    model_config = ConfigDict(extra="forbid")

    shape: MaterialShape
    diameter_mm: float = Field(default=0.0, ge=0)
    inner_diameter_mm: float = Field(default=0.0, ge=0)
    density_g_cm3: float = Field(default=7.85, gt=0)

    @model_validator(mode="after")
    def validate_bore(self) -> StockProfileConfig:
        if self.inner_diameter_mm > self.diameter_mm:
            raise ValueError("inner_diameter_mm cannot exceed diameter_mm")
        return self


class RequisitionLineConfig(BaseModel):
    """The requisition line to allocate.

    Exactly one way of stating the requirement is needed: an explicit
    length, a weight with a profile, or cut plans. An explicit length may
    be combined with cut plans for multi-part lines.
    """

    model_config = ConfigDict(extra="forbid")

    line_id: str = Field(..., min_length=1)
    material_id: str = Field(..., min_length=1)
    required_length_mm: float | None = Field(default=None, gt=0)
    required_weight_kg: float | None = Field(default=None, gt=0)
    profile: StockProfileConfig | None = None
    cut_plans: list[CutPlanConfig] = Field(default_factory=list)
    locked: bool = False

    @field_validator("line_id", "material_id", mode="before")
    @classmethod
    def coerce_ids(cls, v: object) -> object:
        return _coerce_id(v)

    @model_validator(mode="after")
    def validate_requirement(self) -> RequisitionLineConfig:
        if self.required_weight_kg is not None:
            if self.profile is None:
                raise ValueError("required_weight_kg needs a profile")
            if self.required_length_mm is not None:
                raise ValueError("Give required_length_mm or required_weight_kg, not both")
        elif self.required_length_mm is None and not self.cut_plans:
            raise ValueError(
                "Line needs required_length_mm, required_weight_kg or cut_plans"
            )
        return self


class PreselectionConfig(BaseModel):
    """A previously chosen piece."""

    model_config = ConfigDict(extra="forbid")

    piece_id: str = Field(..., min_length=1)
    allocated_length_mm: float | None = Field(default=None, ge=0)

    @field_validator("piece_id", mode="before")
    @classmethod
    def coerce_piece_id(cls, v: object) -> object:
        return _coerce_id(v)


class AllocationSettingsConfig(BaseModel):
    """Tunables for auto-select and cut breakdowns."""

    model_config = ConfigDict(extra="forbid")

    fifo_tolerance: float = Field(
        default=0.05,
        ge=0,
        le=1,
        description="Relative waste band in which older stock is preferred",
    )
    min_usable_length_mm: float = Field(
        default=300.0,
        ge=0,
        description="Shortest leftover still counted as a reusable offcut",
    )


class AllocationConfiguration(BaseModel):
    """Root model of an allocation request file.

    Attributes:
        schema_version: Version string in format "major.minor".
        line: Requisition line to allocate.
        pieces: Stock pieces of the line's material.
        preselection: Optional seed replacing auto-select.
        settings: Optional tunables.

    Example:
        >>> config = AllocationConfiguration(
        ...     schema_version="1.0",
        ...     line=RequisitionLineConfig(line_id="L1", material_id="EN8-40", required_length_mm=2500),
        ...     pieces=[StockPieceConfig(piece_id="P1", current_length_mm=3000)],
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(..., pattern=r"^\d+\.\d+$")
    line: RequisitionLineConfig
    pieces: list[StockPieceConfig] = Field(default_factory=list)
    preselection: list[PreselectionConfig] = Field(default_factory=list)
    settings: AllocationSettingsConfig = Field(default_factory=AllocationSettingsConfig)

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Accept supported versions and newer minors of a supported major."""
        if v in SUPPORTED_VERSIONS:
            return v
        major_version = int(v.split(".")[0])
        supported_majors = {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}
        if major_version in supported_majors:
            return v
        raise ValueError(
            f"Unsupported schema version {v!r}. "
            f"Supported versions: {', '.join(sorted(SUPPORTED_VERSIONS))}"
        )

    @model_validator(mode="after")
    def validate_unique_pieces(self) -> AllocationConfiguration:
        seen: set[str] = set()
        for piece in self.pieces:
            if piece.piece_id in seen:
                raise ValueError(f"Duplicate piece_id {piece.piece_id!r}")
            seen.add(piece.piece_id)
        return self
