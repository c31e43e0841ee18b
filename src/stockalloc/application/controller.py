"""Per-line selection state machine.

A controller owns the working selection of one requisition line::

    EMPTY --open()--> EDITING --confirm()--> COMMITTED --reopen()--> EDITING
                      EDITING --cancel()---> DISCARDED --open()----> EDITING

Locked lines go straight to LOCKED on open and never accept a mutation.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Sequence

from stockalloc.contracts.dtos import ConfirmedAllocation, PreselectionEntry
from stockalloc.domain import (
    AllocatedPiece,
    AllocationSettings,
    AllocationSummary,
    CutBreakdown,
    EmptySelectionError,
    InvalidInputError,
    LockedLineError,
    PersistenceRejectedError,
    RequisitionLine,
    Selection,
    SelectionStateError,
    ShortfallNotAcknowledgedError,
    StockPiece,
    auto_select,
    breakdown_for_piece,
    requirement_for_line,
)

if TYPE_CHECKING:
    from stockalloc.contracts.protocols import AllocationPersistence

logger = logging.getLogger(__name__)

__all__ = ["LineState", "SelectionController"]


class LineState(str, Enum):
    """States of a requisition line's selection."""

    EMPTY = "empty"
    EDITING = "editing"
    COMMITTED = "committed"
    DISCARDED = "discarded"
    LOCKED = "locked"


class SelectionController:
    """Applies user overrides on top of the greedy baseline for one line.

    The summary is recomputed from the selection on every read, so it can
    never go stale after a toggle or resize.

    Attributes:
        line: The requisition line being allocated.
        requirement: Length target derived from the line.
        settings: Tunables for auto-select and breakdowns.
    """

    def __init__(
        self,
        line: RequisitionLine,
        pieces: Sequence[StockPiece],
        settings: AllocationSettings | None = None,
    ) -> None:
        """Initialize the controller for a line and its candidate pieces.

        Args:
            line: Requisition line; its ``locked`` flag is taken as given.
            pieces: Every piece of the line's material as fetched from the
                repository.
            settings: Selection tunables.

        Raises:
            InvalidInputError: If the line's required length is not positive.
        """
        self.line = line
        self.requirement = requirement_for_line(line)
        self.settings = settings or AllocationSettings()
        self._pieces: dict[str, StockPiece] = {p.piece_id: p for p in pieces}
        self._selection: Selection | None = None
        self._confirmed: ConfirmedAllocation | None = None
        self._state = LineState.EMPTY

    @property
    def line_id(self) -> str:
        return self.line.line_id

    @property
    def state(self) -> LineState:
        return self._state

    @property
    def is_locked(self) -> bool:
        return self.line.locked

    @property
    def confirmed(self) -> ConfirmedAllocation | None:
        """The last allocation accepted by persistence, if any."""
        return self._confirmed

    @property
    def selected_ids(self) -> tuple[str, ...]:
        return self._selection.selected_ids if self._selection else ()

    @property
    def allocated_lengths(self) -> dict[str, float]:
        return self._selection.allocated_lengths if self._selection else {}

    @property
    def allocations(self) -> tuple[AllocatedPiece, ...]:
        return self._selection.allocations() if self._selection else ()

    @property
    def candidates(self) -> tuple[StockPiece, ...]:
        """Pieces that can currently be toggled into the selection."""
        return self._selection.pool if self._selection else ()

    @property
    def summary(self) -> AllocationSummary:
        if self._selection is None:
            return AllocationSummary(
                required_length_mm=self.requirement.required_length_mm,
                total_pieces=0,
                total_length_mm=0.0,
                total_weight_kg=0.0,
            )
        return self._selection.summary()

    def open(self, preselection: Sequence[PreselectionEntry] | None = None) -> AllocationSummary:
        """Start a session from a pre-selection or from auto-select.

        A non-empty pre-selection always wins over the auto-select result.
        Entries naming unknown pieces are skipped; if none survive, the
        greedy baseline is used instead.

        Args:
            preselection: Previously confirmed or in-progress choice.

        Returns:
            Summary of the opened selection.

        Raises:
            SelectionStateError: If a session is already open or committed.
        """
        if self._state not in (LineState.EMPTY, LineState.DISCARDED):
            raise SelectionStateError("open", self._state.value)

        entries = list(preselection or ())
        if self.is_locked:
            self._selection = self._seed(entries, include_unavailable=True)
            self._state = LineState.LOCKED
            logger.debug("Opened locked line %s with %d pieces", self.line_id, len(self._selection))
            return self.summary

        seeded = self._seed(entries) if entries else None
        if seeded is not None and len(seeded) > 0:
            self._selection = seeded
        else:
            if entries:
                logger.warning(
                    "No pre-selected piece of line %s is known; using auto-select",
                    self.line_id,
                )
            self._selection = auto_select(
                self.requirement.required_length_mm,
                list(self._pieces.values()),
                self.settings,
            )
        self._state = LineState.EDITING
        logger.debug("Opened line %s with %d pieces", self.line_id, len(self._selection))
        return self.summary

    def reopen(self) -> AllocationSummary:
        """Return a committed line to editing, seeded from its confirmation."""
        if self._state is not LineState.COMMITTED or self._confirmed is None:
            raise SelectionStateError("reopen", self._state.value)
        self._state = LineState.EMPTY
        return self.open(self._confirmed.to_preselection())

    def toggle(self, piece_id: str) -> AllocationSummary:
        """Select or deselect a piece."""
        self._editable("toggle").toggle(piece_id)
        return self.summary

    def set_allocated_length(self, piece_id: str, requested_mm: float) -> AllocationSummary:
        """Resize a selected piece's allocation, clamped to the piece length."""
        self._editable("resize").set_allocated_length(piece_id, requested_mm)
        return self.summary

    def auto_select(self) -> AllocationSummary:
        """Discard manual edits and rebuild the greedy baseline."""
        selection = self._editable("auto-select")
        baseline = auto_select(
            self.requirement.required_length_mm,
            list(selection.pool),
            self.settings,
        )
        selection.clear()
        for piece, length in baseline:
            selection.add(piece.piece_id, length)
        return self.summary

    def breakdown(self, piece_id: str) -> tuple[CutBreakdown, ...]:
        """Per-plan cut breakdown of one known piece."""
        piece = self._pieces.get(piece_id)
        if piece is None:
            raise InvalidInputError(f"Unknown piece: {piece_id!r}")
        return breakdown_for_piece(
            piece.current_length_mm, self.requirement.cut_plans, self.settings
        )

    def confirm(
        self,
        persistence: AllocationPersistence,
        *,
        acknowledge_shortfall: bool = False,
    ) -> ConfirmedAllocation:
        """Hand the resolved selection to persistence.

        Under-coverage is allowed only with ``acknowledge_shortfall``;
        excess is allowed silently. Pieces resized to zero are left out of
        the emitted pairs.

        Args:
            persistence: Collaborator performing the check-and-reserve.
            acknowledge_shortfall: Operator accepted a partial allocation.

        Returns:
            The allocation persistence accepted.

        Raises:
            EmptySelectionError: If no piece has a positive allocation.
            ShortfallNotAcknowledgedError: If short and not acknowledged.
            PersistenceRejectedError: If persistence refused the pairs. The
                line stays in EDITING so the caller can retry.
        """
        selection = self._editable("confirm")
        pieces = tuple(p for p in selection.allocations() if p.allocated_length_mm > 0)
        if not pieces:
            raise EmptySelectionError()

        summary = self.summary
        if not summary.is_covered:
            if not acknowledge_shortfall:
                raise ShortfallNotAcknowledgedError(
                    summary.shortfall_mm, summary.fulfillment_percent
                )
            logger.warning(
                "Confirming line %s with %.1f mm shortfall (%.1f%% fulfilled)",
                self.line_id,
                summary.shortfall_mm,
                summary.fulfillment_percent,
            )

        allocation = ConfirmedAllocation(
            line_id=self.line_id,
            material_id=self.line.material_id,
            pieces=pieces,
            shortfall_mm=summary.shortfall_mm,
            shortfall_acknowledged=not summary.is_covered,
        )
        try:
            persistence.commit(allocation)
        except PersistenceRejectedError as e:
            logger.warning("Allocation for line %s rejected: %s", self.line_id, e)
            raise

        self._confirmed = allocation
        self._state = LineState.COMMITTED
        logger.info(
            "Confirmed %d pieces (%.1f mm) for line %s",
            len(pieces),
            allocation.total_length_mm,
            self.line_id,
        )
        return allocation

    def cancel(self) -> None:
        """Discard the working selection without persisting anything."""
        if self.is_locked:
            raise LockedLineError(self.line_id, "cancel")
        if self._state is LineState.COMMITTED:
            raise SelectionStateError("cancel", self._state.value)
        self._selection = None
        self._state = LineState.DISCARDED
        logger.info("Discarded selection for line %s", self.line_id)

    def _editable(self, operation: str) -> Selection:
        if self.is_locked:
            raise LockedLineError(self.line_id, operation)
        if self._state is not LineState.EDITING or self._selection is None:
            raise SelectionStateError(operation, self._state.value)
        return self._selection

    def _seed(
        self,
        entries: Sequence[PreselectionEntry],
        include_unavailable: bool = False,
    ) -> Selection:
        """Build a selection from pre-selection entries.

        Pre-selected pieces stay selectable even when no longer Available,
        since they are typically reserved to this very line.
        """
        wanted = {e.piece_id for e in entries}
        pool = [
            p
            for p in self._pieces.values()
            if p.is_available or p.piece_id in wanted or include_unavailable
        ]
        selection = Selection(self.requirement.required_length_mm, pool)
        for entry in entries:
            if entry.piece_id not in self._pieces:
                logger.warning(
                    "Skipping unknown pre-selected piece %s on line %s",
                    entry.piece_id,
                    self.line_id,
                )
                continue
            selection.add(entry.piece_id, entry.allocated_length_mm)
        return selection
