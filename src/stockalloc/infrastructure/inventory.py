"""In-memory inventory implementing the repository and persistence protocols.

Used by the CLI and by tests. Commits are check-and-reserve under a lock,
so two lines racing for the same piece cannot both win.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Iterable

from stockalloc.contracts.dtos import ConfirmedAllocation
from stockalloc.domain import PersistenceRejectedError, PieceStatus, StockPiece

logger = logging.getLogger(__name__)

__all__ = ["InMemoryInventory"]


class InMemoryInventory:
    """Stock pieces grouped by material, with reservations per line.

    Attributes:
        commits: Every allocation accepted, in order.
    """

    def __init__(self, pieces_by_material: dict[str, Iterable[StockPiece]] | None = None) -> None:
        self._lock = threading.Lock()
        self._pieces: dict[str, dict[str, StockPiece]] = {}
        self._reserved_by: dict[str, str] = {}
        self.commits: list[ConfirmedAllocation] = []
        for material_id, pieces in (pieces_by_material or {}).items():
            self.add_pieces(material_id, pieces)

    def add_pieces(self, material_id: str, pieces: Iterable[StockPiece]) -> None:
        with self._lock:
            bucket = self._pieces.setdefault(material_id, {})
            for piece in pieces:
                bucket[piece.piece_id] = piece

    def get_pieces(self, material_id: str) -> list[StockPiece]:
        with self._lock:
            return list(self._pieces.get(material_id, {}).values())

    def reserved_for(self, line_id: str) -> list[str]:
        """Piece ids currently reserved to a line."""
        with self._lock:
            return [pid for pid, lid in self._reserved_by.items() if lid == line_id]

    def set_status(self, material_id: str, piece_id: str, status: PieceStatus) -> None:
        """Change a piece's status, as another process consuming it would."""
        with self._lock:
            bucket = self._pieces[material_id]
            bucket[piece_id] = replace(bucket[piece_id], status=status)
            if status is PieceStatus.AVAILABLE:
                self._reserved_by.pop(piece_id, None)

    def commit(self, allocation: ConfirmedAllocation) -> None:
        """Reserve every piece of the allocation or none of them.

        A piece qualifies if it is Available, or already reserved to the
        same line (a re-confirm after reopening), and is long enough.

        Raises:
            PersistenceRejectedError: If any piece does not qualify.
        """
        with self._lock:
            bucket = self._pieces.get(allocation.material_id, {})
            rejected: list[str] = []
            for pair in allocation.pieces:
                piece = bucket.get(pair.piece_id)
                if piece is None or pair.allocated_length_mm > piece.current_length_mm:
                    rejected.append(pair.piece_id)
                elif not piece.is_available and (
                    self._reserved_by.get(pair.piece_id) != allocation.line_id
                ):
                    rejected.append(pair.piece_id)
            if rejected:
                raise PersistenceRejectedError(
                    f"Pieces no longer available: {', '.join(rejected)}",
                    rejected_piece_ids=tuple(rejected),
                )

            # Release this line's previous reservation before re-reserving.
            keep = {pair.piece_id for pair in allocation.pieces}
            for piece_id, line_id in list(self._reserved_by.items()):
                if line_id == allocation.line_id and piece_id not in keep:
                    del self._reserved_by[piece_id]
                    bucket[piece_id] = replace(bucket[piece_id], status=PieceStatus.AVAILABLE)

            for pair in allocation.pieces:
                bucket[pair.piece_id] = replace(bucket[pair.piece_id], status=PieceStatus.RESERVED)
                self._reserved_by[pair.piece_id] = allocation.line_id
            self.commits.append(allocation)
        logger.debug(
            "Reserved %d pieces for line %s", len(allocation.pieces), allocation.line_id
        )
