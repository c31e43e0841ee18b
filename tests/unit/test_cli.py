"""Unit tests for the stockalloc CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from stockalloc.cli.main import app


runner = CliRunner()


def _write(tmp_path: Path, data: dict[str, Any], name: str = "request.json") -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def covered_request(tmp_path: Path) -> Path:
    return _write(
        tmp_path,
        {
            "schema_version": "1.0",
            "line": {"line_id": "L-1", "material_id": "M-40", "required_length_mm": 2500},
            "pieces": [
                {"piece_id": "P-3000", "current_length_mm": 3000, "received_date": "2024-01-10"},
                {"piece_id": "P-2600", "current_length_mm": 2600, "received_date": "2024-02-10"},
                {"piece_id": "P-1200", "current_length_mm": 1200, "received_date": "2024-03-10"},
            ],
        },
    )


@pytest.fixture
def short_request(tmp_path: Path) -> Path:
    return _write(
        tmp_path,
        {
            "schema_version": "1.0",
            "line": {"line_id": "L-2", "material_id": "M-40", "required_length_mm": 5000},
            "pieces": [
                {"piece_id": "S-1000", "current_length_mm": 1000},
                {"piece_id": "S-1500", "current_length_mm": 1500},
            ],
        },
    )


class TestHelp:
    """Tests for CLI help output."""

    def test_lists_commands(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("allocate", "cuts", "breakdown", "validate"):
            assert command in result.output

    def test_allocate_help_shows_options(self) -> None:
        result = runner.invoke(app, ["allocate", "--help"])
        assert result.exit_code == 0
        assert "--confirm" in result.output
        assert "--acknowledge-shortfall" in result.output


class TestAllocateCommand:
    """Tests for the allocate command."""

    def test_shows_selection(self, covered_request: Path) -> None:
        result = runner.invoke(app, ["allocate", str(covered_request)])
        assert result.exit_code == 0
        assert "SELECTION" in result.output
        assert "ALLOCATION SUMMARY" in result.output
        assert "COVERED" in result.output

    def test_confirm_prints_pairs(self, covered_request: Path) -> None:
        result = runner.invoke(app, ["allocate", str(covered_request), "--confirm"])
        assert result.exit_code == 0
        assert '"piece_id": "P-2600"' in result.output
        assert '"allocated_length_mm": 2500.0' in result.output

    def test_preselection_is_used(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            {
                "schema_version": "1.0",
                "line": {"line_id": "L-1", "material_id": "M-40", "required_length_mm": 2500},
                "pieces": [
                    {"piece_id": "P-3000", "current_length_mm": 3000},
                    {"piece_id": "P-2600", "current_length_mm": 2600},
                ],
                "preselection": [{"piece_id": "P-3000", "allocated_length_mm": 2500}],
            },
        )
        result = runner.invoke(app, ["allocate", str(path), "--confirm"])
        assert result.exit_code == 0
        assert '"piece_id": "P-3000"' in result.output
        assert '"piece_id": "P-2600"' not in result.output

    def test_short_without_acknowledgement(self, short_request: Path) -> None:
        result = runner.invoke(app, ["allocate", str(short_request), "--confirm"])
        assert result.exit_code == 2
        assert "SHORT by 2500.0 mm" in result.output
        assert "--acknowledge-shortfall" in result.output

    def test_short_with_acknowledgement(self, short_request: Path) -> None:
        result = runner.invoke(
            app, ["allocate", str(short_request), "--confirm", "--acknowledge-shortfall"]
        )
        assert result.exit_code == 0
        assert '"shortfall_acknowledged": true' in result.output
        assert '"shortfall_mm": 2500.0' in result.output

    def test_locked_line_cannot_be_confirmed(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            {
                "schema_version": "1.0",
                "line": {
                    "line_id": "L-1",
                    "material_id": "M-40",
                    "required_length_mm": 1000,
                    "locked": True,
                },
                "pieces": [{"piece_id": "P-1", "current_length_mm": 1000, "status": "Reserved"}],
                "preselection": [{"piece_id": "P-1", "allocated_length_mm": 1000}],
            },
        )
        result = runner.invoke(app, ["allocate", str(path)])
        assert result.exit_code == 0
        assert "SELECTION (locked)" in result.output

        result = runner.invoke(app, ["allocate", str(path), "--confirm"])
        assert result.exit_code == 1
        assert "locked" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["allocate", str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_unconvertible_weight(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            {
                "schema_version": "1.1",
                "line": {
                    "line_id": "L-1",
                    "material_id": "M-40",
                    "required_weight_kg": 10,
                    "profile": {"shape": "Sheet"},
                },
                "pieces": [],
            },
        )
        result = runner.invoke(app, ["allocate", str(path)])
        assert result.exit_code == 1
        assert "Cannot convert" in result.output


class TestCutsCommand:
    """Tests for the cuts command."""

    def test_scrap_leftover(self) -> None:
        result = runner.invoke(app, ["cuts", "--stock", "1000", "--cut", "300"])
        assert result.exit_code == 0
        assert "Cuts: 3" in result.output
        assert "Leftover: 100.0 mm" in result.output
        assert "Waste: 10.0% (scrap)" in result.output

    def test_reusable_offcut(self) -> None:
        result = runner.invoke(app, ["cuts", "-s", "1000", "-c", "600"])
        assert result.exit_code == 0
        assert "(reusable offcut)" in result.output

    def test_min_usable_option(self) -> None:
        result = runner.invoke(app, ["cuts", "-s", "1000", "-c", "600", "--min-usable", "500"])
        assert "(scrap)" in result.output

    def test_unusable_piece(self) -> None:
        result = runner.invoke(app, ["cuts", "--stock", "100", "--cut", "333"])
        assert result.exit_code == 0
        assert "Cuts: 0" in result.output
        assert "unusable" in result.output

    def test_negative_stock(self) -> None:
        result = runner.invoke(app, ["cuts", "--stock=-5", "--cut", "100"])
        assert result.exit_code == 1


class TestBreakdownCommand:
    """Tests for the breakdown command."""

    @pytest.fixture
    def plan_request(self, tmp_path: Path) -> Path:
        return _write(
            tmp_path,
            {
                "schema_version": "1.0",
                "line": {
                    "line_id": "L-1",
                    "material_id": "M-40",
                    "cut_plans": [
                        {"piece_length_mm": 200, "pieces_count": 5, "label": "Shaft"},
                        {"piece_length_mm": 150, "pieces_count": 3, "label": "Collar"},
                    ],
                },
                "pieces": [{"piece_id": "P-1200", "current_length_mm": 1200}],
            },
        )

    def test_breakdown(self, plan_request: Path) -> None:
        result = runner.invoke(app, ["breakdown", str(plan_request), "--piece", "P-1200"])
        assert result.exit_code == 0
        assert "CUT BREAKDOWN - piece P-1200" in result.output
        assert "Shaft" in result.output
        assert "OK (+1)" in result.output
        assert "OK (+5)" in result.output

    def test_unknown_piece(self, plan_request: Path) -> None:
        result = runner.invoke(app, ["breakdown", str(plan_request), "-p", "NOPE"])
        assert result.exit_code == 1
        assert "Unknown piece" in result.output


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_request(self, covered_request: Path) -> None:
        result = runner.invoke(app, ["validate", str(covered_request)])
        assert result.exit_code == 0
        assert "Required: 2500.0 mm" in result.output
        assert "Available stock: 6800.0 mm in 3 pieces" in result.output
        assert "Request is valid." in result.output

    def test_short_stock(self, short_request: Path) -> None:
        result = runner.invoke(app, ["validate", str(short_request)])
        assert result.exit_code == 2
        assert "does not cover" in result.output

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{ not json")
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 1
        assert "Line 1" in result.output

    def test_schema_error(self, tmp_path: Path) -> None:
        path = _write(tmp_path, {"schema_version": "1.0", "line": {"line_id": "L-1"}})
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 1
        assert "line.material_id" in result.output
