"""Pytest configuration and shared fixtures for allocation tests."""

from __future__ import annotations

from datetime import date

import pytest

from stockalloc.domain import CutPlan, PieceStatus, RequisitionLine, StockPiece
from stockalloc.infrastructure import InMemoryInventory


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: tests exercising several layers together"
    )


# =============================================================================
# Shared stock fixtures
# =============================================================================


@pytest.fixture
def mixed_pieces() -> list[StockPiece]:
    """Three available pieces of 3000, 2600 and 1200 mm, oldest first."""
    return [
        StockPiece("P-3000", 3000.0, 30.0, received_date=date(2024, 1, 10)),
        StockPiece("P-2600", 2600.0, 26.0, received_date=date(2024, 2, 10)),
        StockPiece("P-1200", 1200.0, 12.0, received_date=date(2024, 3, 10)),
    ]


@pytest.fixture
def short_pieces() -> list[StockPiece]:
    """Two pieces that only cover a large requirement together."""
    return [
        StockPiece("S-1000", 1000.0, 10.0, received_date=date(2024, 1, 1)),
        StockPiece("S-1500", 1500.0, 15.0, received_date=date(2024, 2, 1)),
    ]


@pytest.fixture
def line() -> RequisitionLine:
    """Unlocked line needing 2500 mm of material M-40."""
    return RequisitionLine(line_id="L-1", material_id="M-40", required_length_mm=2500.0)


@pytest.fixture
def locked_line() -> RequisitionLine:
    return RequisitionLine(
        line_id="L-LOCK", material_id="M-40", required_length_mm=2500.0, locked=True
    )


@pytest.fixture
def plan_line() -> RequisitionLine:
    """Multi-part line whose requirement comes from its cut plans."""
    return RequisitionLine(
        line_id="L-PLANS",
        material_id="M-40",
        cut_plans=(
            CutPlan(200.0, 5, label="Shaft"),
            CutPlan(150.0, 3, label="Collar"),
        ),
    )


@pytest.fixture
def inventory(mixed_pieces: list[StockPiece]) -> InMemoryInventory:
    """Inventory holding the mixed pieces under M-40 plus one reserved piece."""
    reserved = StockPiece("P-RES", 2500.0, 25.0, status=PieceStatus.RESERVED)
    return InMemoryInventory({"M-40": [*mixed_pieces, reserved]})
