"""Tests for summarize()."""

from __future__ import annotations

import pytest

from stockalloc.domain import Selection, StockPiece, summarize


class TestSummarize:
    """Tests for coverage projection of a selection."""

    def test_empty_selection(self, mixed_pieces: list[StockPiece]) -> None:
        summary = summarize(Selection(2500.0, mixed_pieces))
        assert summary.total_pieces == 0
        assert summary.total_length_mm == 0.0
        assert summary.total_weight_kg == 0.0
        assert summary.fulfillment_percent == 0.0
        assert not summary.is_covered

    def test_weight_is_prorated_per_piece(self, mixed_pieces: list[StockPiece]) -> None:
        selection = Selection(2500.0, mixed_pieces)
        selection.add("P-3000", 1500.0)
        selection.add("P-1200", 600.0)
        summary = summarize(selection)
        assert summary.total_pieces == 2
        assert summary.total_length_mm == pytest.approx(2100.0)
        assert summary.total_weight_kg == pytest.approx(15.0 + 6.0)
        assert summary.selected_stock_length_mm == pytest.approx(4200.0)

    def test_follows_latest_edit(self, mixed_pieces: list[StockPiece]) -> None:
        selection = Selection(2500.0, mixed_pieces)
        selection.toggle("P-1200")
        assert not selection.summary().is_covered
        selection.toggle("P-3000")
        assert selection.summary().is_covered
        selection.set_allocated_length("P-3000", 3000.0)
        summary = selection.summary()
        assert summary.total_length_mm == pytest.approx(4200.0)
        assert summary.excess_mm == pytest.approx(1700.0)
        assert summary.fulfillment_percent == 100.0
