"""Data transfer objects crossing the engine boundary."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from stockalloc.domain.value_objects import AllocatedPiece


@dataclass(frozen=True)
class PreselectionEntry:
    """A previously chosen piece used to seed a selection.

    Attributes:
        piece_id: Piece to pre-select.
        allocated_length_mm: Length to earmark; the default length is used
            when None.
    """

    piece_id: str
    allocated_length_mm: float | None = None


@dataclass(frozen=True)
class ConfirmedAllocation:
    """Finalized selection handed to the persistence collaborator.

    Attributes:
        line_id: Requisition line the pieces are allocated to.
        material_id: Material of the pieces.
        pieces: (piece id, allocated length) pairs in selection order.
        shortfall_mm: Uncovered length at confirm time.
        shortfall_acknowledged: The operator accepted a partial allocation.
    """

    line_id: str
    material_id: str
    pieces: tuple[AllocatedPiece, ...] = field(default_factory=tuple)
    shortfall_mm: float = 0.0
    shortfall_acknowledged: bool = False

    @property
    def total_length_mm(self) -> float:
        return sum(p.allocated_length_mm for p in self.pieces)

    def to_preselection(self) -> list[PreselectionEntry]:
        """Seed entries for reopening the same requirement."""
        return [
            PreselectionEntry(piece_id=p.piece_id, allocated_length_mm=p.allocated_length_mm)
            for p in self.pieces
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "line_id": self.line_id,
            "material_id": self.material_id,
            "pieces": [
                {"piece_id": p.piece_id, "allocated_length_mm": p.allocated_length_mm}
                for p in self.pieces
            ],
            "total_length_mm": self.total_length_mm,
            "shortfall_mm": self.shortfall_mm,
            "shortfall_acknowledged": self.shortfall_acknowledged,
        }
