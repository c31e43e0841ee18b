"""Mutable working selection of stock pieces for one requirement."""

from __future__ import annotations

import logging
import math
from typing import Iterable, Iterator

from .exceptions import InvalidInputError
from .value_objects import (
    LENGTH_TOLERANCE_MM,
    AllocatedPiece,
    AllocationSummary,
    StockPiece,
)

logger = logging.getLogger(__name__)

__all__ = ["Selection", "summarize"]


class Selection:
    """Selected pieces and the length earmarked from each.

    The selected ids and the allocated-length map are one structure, so a
    piece is selected exactly when it has an allocated length. Every
    mutation clamps lengths to ``[0, piece.current_length_mm]``.

    Attributes:
        required_length_mm: Length the selection is meant to cover.
    """

    def __init__(self, required_length_mm: float, pieces: Iterable[StockPiece]) -> None:
        """Create an empty selection over a pool of selectable pieces.

        Args:
            required_length_mm: Target length, used for default lengths.
            pieces: Pieces that may be selected. Eligibility filtering is
                the caller's job.
        """
        if not math.isfinite(required_length_mm) or required_length_mm <= 0:
            raise InvalidInputError("Required length must be positive")
        self.required_length_mm = required_length_mm
        self._pool: dict[str, StockPiece] = {p.piece_id: p for p in pieces}
        self._allocations: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._allocations)

    def __contains__(self, piece_id: object) -> bool:
        return piece_id in self._allocations

    def __iter__(self) -> Iterator[tuple[StockPiece, float]]:
        """Yield (piece, allocated length) in selection order."""
        for piece_id, length in self._allocations.items():
            yield self._pool[piece_id], length

    @property
    def pool(self) -> tuple[StockPiece, ...]:
        """All pieces that may be selected."""
        return tuple(self._pool.values())

    @property
    def selected_ids(self) -> tuple[str, ...]:
        return tuple(self._allocations)

    @property
    def allocated_lengths(self) -> dict[str, float]:
        """Copy of the piece id to allocated length map."""
        return dict(self._allocations)

    @property
    def total_length_mm(self) -> float:
        return sum(self._allocations.values())

    def piece(self, piece_id: str) -> StockPiece:
        """Look up a pool piece, rejecting unknown ids."""
        try:
            return self._pool[piece_id]
        except KeyError:
            raise InvalidInputError(f"Unknown or ineligible piece: {piece_id!r}") from None

    def allocated_length(self, piece_id: str) -> float:
        if piece_id not in self._allocations:
            raise InvalidInputError(f"Piece {piece_id!r} is not selected")
        return self._allocations[piece_id]

    def default_length_for(self, piece_id: str) -> float:
        """Length a newly added piece receives without over-covering.

        Takes what is still missing from the other selected pieces, capped
        at the piece length. If nothing is missing the whole piece is used,
        so a manual pick is never silently zeroed.
        """
        piece = self.piece(piece_id)
        others = sum(
            length for pid, length in self._allocations.items() if pid != piece_id
        )
        remaining = max(0.0, self.required_length_mm - others)
        if remaining <= LENGTH_TOLERANCE_MM:
            return piece.current_length_mm
        return min(piece.current_length_mm, remaining)

    def add(self, piece_id: str, length_mm: float | None = None) -> float:
        """Select a piece with a given or default length.

        Returns:
            The allocated length after clamping.
        """
        if length_mm is None:
            length_mm = self.default_length_for(piece_id)
        clamped = self._clamp(piece_id, length_mm)
        self._allocations[piece_id] = clamped
        return clamped

    def remove(self, piece_id: str) -> None:
        if piece_id not in self._allocations:
            raise InvalidInputError(f"Piece {piece_id!r} is not selected")
        del self._allocations[piece_id]

    def toggle(self, piece_id: str) -> bool:
        """Deselect a selected piece, or select it with its default length.

        Returns:
            True if the piece is selected afterwards.
        """
        if piece_id in self._allocations:
            self.remove(piece_id)
            logger.debug("Deselected piece %s", piece_id)
            return False
        length = self.add(piece_id)
        logger.debug("Selected piece %s with %.1f mm", piece_id, length)
        return True

    def set_allocated_length(self, piece_id: str, requested_mm: float) -> float:
        """Resize the allocation of a selected piece.

        The request is clamped to ``[0, piece.current_length_mm]``.

        Raises:
            InvalidInputError: If the piece is not selected or the request
                is not a number. The selection is left unchanged.
        """
        if piece_id not in self._allocations:
            raise InvalidInputError(f"Piece {piece_id!r} is not selected")
        clamped = self._clamp(piece_id, requested_mm)
        self._allocations[piece_id] = clamped
        return clamped

    def clear(self) -> None:
        self._allocations.clear()

    def allocations(self) -> tuple[AllocatedPiece, ...]:
        """Current (piece id, length) pairs in selection order."""
        return tuple(
            AllocatedPiece(piece_id=pid, allocated_length_mm=length)
            for pid, length in self._allocations.items()
        )

    def summary(self) -> AllocationSummary:
        """Recompute the coverage summary from the current state."""
        return summarize(self)

    def _clamp(self, piece_id: str, length_mm: float) -> float:
        piece = self.piece(piece_id)
        if length_mm is None or math.isnan(length_mm):
            raise InvalidInputError(f"Invalid length for piece {piece_id!r}: {length_mm!r}")
        return min(max(0.0, float(length_mm)), piece.current_length_mm)


def summarize(selection: Selection) -> AllocationSummary:
    """Project a selection into totals and coverage flags.

    Weight is prorated per piece by the share of its length that is
    allocated. Nothing is cached; call again after every change.
    """
    total_length = 0.0
    total_weight = 0.0
    stock_length = 0.0
    for piece, length in selection:
        total_length += length
        total_weight += piece.weight_for(length)
        stock_length += piece.current_length_mm
    return AllocationSummary(
        required_length_mm=selection.required_length_mm,
        total_pieces=len(selection),
        total_length_mm=total_length,
        total_weight_kg=total_weight,
        selected_stock_length_mm=stock_length,
    )
