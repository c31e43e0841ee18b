"""Protocols for the collaborators the engine depends on.

The inventory catalog and the persistence service live outside this
package. Implementations are injected, so the engine never embeds stock
data of its own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from stockalloc.domain.value_objects import StockPiece

    from .dtos import ConfirmedAllocation


@runtime_checkable
class StockPieceRepository(Protocol):
    """Supplies candidate stock pieces for a material.

    Example:
        ```python
        class CatalogRepository:
            def get_pieces(self, material_id: str) -> list[StockPiece]:
                return [to_piece(row) for row in catalog.query(material_id)]
        ```
    """

    def get_pieces(self, material_id: str) -> list[StockPiece]:
        """Return every tracked piece of a material, in any order.

        Args:
            material_id: Material identifier.

        Returns:
            Pieces with their current length, weight and status. Filtering
            by status is done by the engine.
        """
        ...


@runtime_checkable
class AllocationPersistence(Protocol):
    """Applies a confirmed allocation to the authoritative inventory.

    Implementations perform the check-and-reserve. The engine does not
    assume the pairs were applied unless ``commit`` returns normally.
    """

    def commit(self, allocation: ConfirmedAllocation) -> None:
        """Reserve the pieces of a confirmed allocation.

        Args:
            allocation: Pairs of piece id and allocated length.

        Raises:
            PersistenceRejectedError: If any piece is no longer available.
        """
        ...
