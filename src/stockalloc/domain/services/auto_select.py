"""Greedy least-waste piece selection.

Pieces that can cover the whole requirement alone are ranked by relative
overshoot, tightest fit first. Fits whose overshoot differs by no more than
the FIFO tolerance are treated as equal and the older piece wins. Pieces
too short to cover the requirement alone rank after every piece that can,
oldest first, and are only used to accumulate towards the total.

This is a single pass without backtracking. It is not a minimal-waste
cutting-stock solver.
"""

from __future__ import annotations

import functools
import logging
import math
from typing import Iterable, Sequence

from ..selection import Selection
from ..value_objects import (
    LENGTH_TOLERANCE_MM,
    AllocationSettings,
    StockPiece,
    SuggestedPiece,
)

logger = logging.getLogger(__name__)

__all__ = [
    "auto_select",
    "eligible_pieces",
    "rank_candidates",
    "suggest_pieces",
    "waste_key",
]


def eligible_pieces(pieces: Iterable[StockPiece]) -> list[StockPiece]:
    """Available pieces only."""
    return [p for p in pieces if p.is_available]


def waste_key(piece: StockPiece, required_length_mm: float) -> float:
    """Relative overshoot of a piece over the requirement.

    Returns ``math.inf`` for pieces shorter than the requirement.
    """
    if piece.current_length_mm >= required_length_mm:
        return (piece.current_length_mm - required_length_mm) / required_length_mm
    return math.inf


def _compare_fifo(a: StockPiece, b: StockPiece) -> int:
    ka, kb = a.fifo_key, b.fifo_key
    return (ka > kb) - (ka < kb)


def rank_candidates(
    pieces: Iterable[StockPiece],
    required_length_mm: float,
    settings: AllocationSettings | None = None,
) -> list[StockPiece]:
    """Order eligible pieces by preference.

    Args:
        pieces: Candidate pieces in any order; non-available ones are dropped.
        required_length_mm: Target length.
        settings: Supplies the FIFO tolerance.

    Returns:
        Available pieces, most preferred first.
    """
    tolerance = (settings or AllocationSettings()).fifo_tolerance
    keys: dict[str, float] = {}

    def compare(a: StockPiece, b: StockPiece) -> int:
        wa, wb = keys[a.piece_id], keys[b.piece_id]
        if math.isfinite(wa) and math.isfinite(wb):
            if abs(wa - wb) > tolerance:
                return -1 if wa < wb else 1
            return _compare_fifo(a, b)
        if math.isfinite(wa):
            return -1
        if math.isfinite(wb):
            return 1
        return _compare_fifo(a, b)

    # Canonical order first so the result does not depend on input order.
    candidates = sorted(eligible_pieces(pieces), key=lambda p: p.fifo_key)
    for piece in candidates:
        keys[piece.piece_id] = waste_key(piece, required_length_mm)
    return sorted(candidates, key=functools.cmp_to_key(compare))


def suggest_pieces(
    pieces: Iterable[StockPiece],
    required_length_mm: float,
    settings: AllocationSettings | None = None,
) -> list[SuggestedPiece]:
    """Walk the ranked candidates until the requirement is covered.

    Each pick takes the smaller of its length and what is still missing.
    If candidates run out first, the picks cover only what exists.
    """
    suggestions: list[SuggestedPiece] = []
    accumulated = 0.0
    for piece in rank_candidates(pieces, required_length_mm, settings):
        remaining = required_length_mm - accumulated
        if remaining <= LENGTH_TOLERANCE_MM:
            break
        if piece.current_length_mm >= remaining:
            suggestions.append(
                SuggestedPiece(
                    piece=piece,
                    suggested_length_mm=remaining,
                    waste_percent=(piece.current_length_mm - remaining) / remaining * 100,
                )
            )
            accumulated = required_length_mm
            break
        suggestions.append(
            SuggestedPiece(
                piece=piece, suggested_length_mm=piece.current_length_mm, waste_percent=0.0
            )
        )
        accumulated += piece.current_length_mm

    if required_length_mm - accumulated > LENGTH_TOLERANCE_MM:
        logger.debug(
            "Candidates exhausted at %.1f of %.1f mm", accumulated, required_length_mm
        )
    return suggestions


def auto_select(
    required_length_mm: float,
    pieces: Sequence[StockPiece],
    settings: AllocationSettings | None = None,
) -> Selection:
    """Build a selection from the greedy suggestions.

    The returned selection's pool holds every available piece, so callers
    can still toggle in pieces the heuristic skipped.

    Args:
        required_length_mm: Target length, must be positive.
        pieces: Candidate pieces for the material.
        settings: Selection tunables.

    Returns:
        A selection that may cover only part of the requirement.
    """
    pool = eligible_pieces(pieces)
    selection = Selection(required_length_mm, pool)
    for suggestion in suggest_pieces(pool, required_length_mm, settings):
        selection.add(suggestion.piece.piece_id, suggestion.suggested_length_mm)
    logger.debug(
        "Auto-selected %d of %d pieces for %.1f mm",
        len(selection),
        len(pool),
        required_length_mm,
    )
    return selection
