"""Contracts module - protocols and shared DTOs for cross-layer communication.

By depending on protocols rather than concrete implementations, the
application layer stays independent of where stock data comes from and
where confirmed allocations go.
"""

from .dtos import (
    ConfirmedAllocation as ConfirmedAllocation,
    PreselectionEntry as PreselectionEntry,
)
from .protocols import (
    AllocationPersistence as AllocationPersistence,
    StockPieceRepository as StockPieceRepository,
)
