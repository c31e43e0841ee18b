"""Tests for the in-memory inventory."""

from __future__ import annotations

import pytest

from stockalloc.contracts import AllocationPersistence, StockPieceRepository
from stockalloc.contracts.dtos import ConfirmedAllocation
from stockalloc.domain import AllocatedPiece, PersistenceRejectedError, PieceStatus
from stockalloc.infrastructure import InMemoryInventory


def _allocation(line_id: str, *pairs: tuple[str, float]) -> ConfirmedAllocation:
    return ConfirmedAllocation(
        line_id=line_id,
        material_id="M-40",
        pieces=tuple(AllocatedPiece(pid, length) for pid, length in pairs),
    )


def _status(inventory: InMemoryInventory, piece_id: str) -> PieceStatus:
    (piece,) = [p for p in inventory.get_pieces("M-40") if p.piece_id == piece_id]
    return piece.status


class TestInMemoryInventory:
    """Tests for repository reads and check-and-reserve commits."""

    def test_satisfies_protocols(self, inventory: InMemoryInventory) -> None:
        assert isinstance(inventory, StockPieceRepository)
        assert isinstance(inventory, AllocationPersistence)

    def test_get_pieces(self, inventory: InMemoryInventory) -> None:
        ids = {p.piece_id for p in inventory.get_pieces("M-40")}
        assert ids == {"P-3000", "P-2600", "P-1200", "P-RES"}
        assert inventory.get_pieces("UNKNOWN") == []

    def test_commit_reserves_pieces(self, inventory: InMemoryInventory) -> None:
        allocation = _allocation("L-1", ("P-2600", 2500.0))
        inventory.commit(allocation)
        assert _status(inventory, "P-2600") is PieceStatus.RESERVED
        assert inventory.reserved_for("L-1") == ["P-2600"]
        assert inventory.commits == [allocation]

    def test_commit_is_all_or_nothing(self, inventory: InMemoryInventory) -> None:
        with pytest.raises(PersistenceRejectedError) as exc_info:
            inventory.commit(_allocation("L-1", ("P-2600", 2500.0), ("P-RES", 100.0)))
        assert exc_info.value.rejected_piece_ids == ("P-RES",)
        assert _status(inventory, "P-2600") is PieceStatus.AVAILABLE
        assert inventory.commits == []

    def test_rejects_unknown_piece(self, inventory: InMemoryInventory) -> None:
        with pytest.raises(PersistenceRejectedError, match="GONE"):
            inventory.commit(_allocation("L-1", ("GONE", 100.0)))

    def test_rejects_allocation_longer_than_piece(self, inventory: InMemoryInventory) -> None:
        with pytest.raises(PersistenceRejectedError):
            inventory.commit(_allocation("L-1", ("P-1200", 1300.0)))

    def test_rejects_piece_reserved_by_other_line(self, inventory: InMemoryInventory) -> None:
        inventory.commit(_allocation("L-1", ("P-2600", 2500.0)))
        with pytest.raises(PersistenceRejectedError) as exc_info:
            inventory.commit(_allocation("L-2", ("P-2600", 2500.0)))
        assert exc_info.value.rejected_piece_ids == ("P-2600",)

    def test_recommit_by_same_line_releases_dropped_pieces(
        self, inventory: InMemoryInventory
    ) -> None:
        inventory.commit(_allocation("L-1", ("P-2600", 2000.0), ("P-1200", 500.0)))
        inventory.commit(_allocation("L-1", ("P-2600", 2500.0)))
        assert inventory.reserved_for("L-1") == ["P-2600"]
        assert _status(inventory, "P-1200") is PieceStatus.AVAILABLE
        assert len(inventory.commits) == 2

    def test_set_status_available_releases_reservation(
        self, inventory: InMemoryInventory
    ) -> None:
        inventory.commit(_allocation("L-1", ("P-2600", 2500.0)))
        inventory.set_status("M-40", "P-2600", PieceStatus.AVAILABLE)
        assert inventory.reserved_for("L-1") == []
        inventory.commit(_allocation("L-2", ("P-2600", 2500.0)))
        assert inventory.reserved_for("L-2") == ["P-2600"]
