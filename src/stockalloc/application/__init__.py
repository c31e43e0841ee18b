"""Application layer - selection sessions and configuration."""

from .controller import LineState, SelectionController
from .workspace import AllocationWorkspace

__all__ = [
    "AllocationWorkspace",
    "LineState",
    "SelectionController",
]
