"""Exceptions raised by the allocation engine."""

from __future__ import annotations


class AllocationError(Exception):
    """Base class for allocation engine errors."""


class InvalidInputError(AllocationError, ValueError):
    """Raised for rejected input. No state was changed."""


class LockedLineError(AllocationError):
    """Raised when a locked requisition line is asked to change.

    A locked line's pieces were fixed by an upstream planning step, so
    any mutation attempt means the caller's view is out of sync.
    """

    def __init__(self, line_id: str, operation: str) -> None:
        self.line_id = line_id
        self.operation = operation
        super().__init__(
            f"Requisition line {line_id!r} is locked; {operation} is not permitted"
        )


class SelectionStateError(AllocationError):
    """Raised when an operation is not valid in the selection's current state."""

    def __init__(self, operation: str, state: str) -> None:
        self.operation = operation
        self.state = state
        super().__init__(f"Cannot {operation} while selection is {state}")


class EmptySelectionError(InvalidInputError):
    """Raised when confirming a selection with no pieces."""

    def __init__(self) -> None:
        super().__init__("Select at least one piece before confirming")


class ShortfallNotAcknowledgedError(AllocationError):
    """Raised when a short selection is confirmed without acknowledgement."""

    def __init__(self, shortfall_mm: float, fulfillment_percent: float) -> None:
        self.shortfall_mm = shortfall_mm
        self.fulfillment_percent = fulfillment_percent
        super().__init__(
            f"Selection is {shortfall_mm:.1f} mm short "
            f"({fulfillment_percent:.1f}% fulfilled); acknowledge to proceed"
        )


class PersistenceRejectedError(AllocationError):
    """Raised by persistence when a confirmed allocation cannot be applied.

    Attributes:
        rejected_piece_ids: Pieces that were no longer available.
    """

    def __init__(self, message: str, rejected_piece_ids: tuple[str, ...] = ()) -> None:
        self.rejected_piece_ids = rejected_piece_ids
        super().__init__(message)
