"""Repository-backed coordination of several requisition lines."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from stockalloc.contracts.dtos import ConfirmedAllocation, PreselectionEntry
from stockalloc.domain import (
    AllocationSettings,
    AllocationSummary,
    InvalidInputError,
    LockedLineError,
    PersistenceRejectedError,
    SelectionStateError,
)
from stockalloc.domain.services import aggregate_requirements

from .controller import LineState, SelectionController

if TYPE_CHECKING:
    from stockalloc.contracts.protocols import AllocationPersistence, StockPieceRepository
    from stockalloc.domain import RequisitionLine

logger = logging.getLogger(__name__)

__all__ = ["AllocationWorkspace"]


class AllocationWorkspace:
    """Opens, edits and confirms selections for many requisition lines.

    Each line gets its own controller and candidate snapshot, so lines of
    the same material never share mutable state. A locked line stays
    read-only while another line of the same material is edited freely.

    Example:
        ```python
        workspace = AllocationWorkspace(repository, persistence)
        workspace.open_line(line)
        workspace.controller(line.line_id).toggle("P-7")
        workspace.confirm(line.line_id, acknowledge_shortfall=True)
        ```
    """

    def __init__(
        self,
        repository: StockPieceRepository,
        persistence: AllocationPersistence,
        settings: AllocationSettings | None = None,
    ) -> None:
        self.repository = repository
        self.persistence = persistence
        self.settings = settings or AllocationSettings()
        self._controllers: dict[str, SelectionController] = {}

    @property
    def line_ids(self) -> tuple[str, ...]:
        return tuple(self._controllers)

    def controller(self, line_id: str) -> SelectionController:
        try:
            return self._controllers[line_id]
        except KeyError:
            raise InvalidInputError(f"Line {line_id!r} is not open") from None

    def open_line(
        self,
        line: RequisitionLine,
        preselection: Sequence[PreselectionEntry] | None = None,
    ) -> SelectionController:
        """Fetch candidates for a line and open its selection.

        Raises:
            SelectionStateError: If the line is already being edited.
        """
        existing = self._controllers.get(line.line_id)
        if existing is not None and existing.state is LineState.EDITING:
            raise SelectionStateError("open", existing.state.value)

        pieces = self.repository.get_pieces(line.material_id)
        logger.debug(
            "Fetched %d pieces of material %s for line %s",
            len(pieces),
            line.material_id,
            line.line_id,
        )
        controller = SelectionController(line, pieces, self.settings)
        controller.open(preselection)
        self._controllers[line.line_id] = controller
        return controller

    def refresh_line(self, line_id: str) -> SelectionController:
        """Re-fetch candidates, keeping the choices that are still valid.

        Used after persistence rejected a confirm because stock moved.
        Pieces that are no longer Available are dropped from the seed.
        """
        current = self.controller(line_id)
        if current.is_locked:
            raise LockedLineError(line_id, "refresh")
        pieces = self.repository.get_pieces(current.line.material_id)
        available = {p.piece_id for p in pieces if p.is_available}
        seed = [
            PreselectionEntry(piece_id=a.piece_id, allocated_length_mm=a.allocated_length_mm)
            for a in current.allocations
            if a.piece_id in available
        ]
        dropped = len(current.allocations) - len(seed)
        if dropped:
            logger.info("Dropped %d unavailable pieces from line %s", dropped, line_id)
        controller = SelectionController(current.line, pieces, self.settings)
        controller.open(seed)
        self._controllers[line_id] = controller
        return controller

    def confirm(self, line_id: str, *, acknowledge_shortfall: bool = False) -> ConfirmedAllocation:
        """Confirm one line through the workspace's persistence."""
        controller = self.controller(line_id)
        try:
            return controller.confirm(
                self.persistence, acknowledge_shortfall=acknowledge_shortfall
            )
        except PersistenceRejectedError as e:
            logger.info(
                "Line %s rejected for pieces %s; refresh and retry",
                line_id,
                ", ".join(e.rejected_piece_ids) or "unknown",
            )
            raise

    def cancel(self, line_id: str) -> None:
        """Discard a line's selection and forget it."""
        self.controller(line_id).cancel()
        del self._controllers[line_id]

    def summaries(self) -> dict[str, AllocationSummary]:
        """Current summary of every open line."""
        return {line_id: c.summary for line_id, c in self._controllers.items()}

    def demand_by_material(self) -> dict[str, float]:
        """Total required length per material across the open lines."""
        return aggregate_requirements(c.line for c in self._controllers.values())
