"""Plain-text formatters for selections, coverage and cut breakdowns."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from stockalloc.application.controller import SelectionController
    from stockalloc.domain import AllocationSummary, CutBreakdown


class CoverageFormatter:
    """Formats the covered/short/excess banner of a summary."""

    def status(self, summary: AllocationSummary) -> str:
        if summary.total_pieces == 0:
            return "NO PIECES SELECTED"
        if not summary.is_covered:
            return f"SHORT by {summary.shortfall_mm:.1f} mm"
        if summary.excess_mm > 0:
            return f"COVERED with {summary.excess_mm:.1f} mm excess"
        return "COVERED"

    def format(self, summary: AllocationSummary) -> str:
        lines = [
            "ALLOCATION SUMMARY",
            "=" * 50,
            f"{'Required':<20} {summary.required_length_mm:>12.1f} mm",
            f"{'Allocated':<20} {summary.total_length_mm:>12.1f} mm",
            f"{'Pieces':<20} {summary.total_pieces:>12}",
            f"{'Weight':<20} {summary.total_weight_kg:>12.2f} kg",
            f"{'Fulfillment':<20} {summary.fulfillment_percent:>12.1f} %",
            f"{'Wastage':<20} {summary.wastage_percent:>12.1f} %",
            f"{'Offcut':<20} {summary.offcut_mm:>12.1f} mm",
            "-" * 50,
            self.status(summary),
        ]
        return "\n".join(lines)


class SelectionFormatter:
    """Formats the candidate table of a selection session.

    Selected pieces are marked with ``*`` and show their allocated length.
    """

    def format(self, controller: SelectionController) -> str:
        candidates = controller.candidates
        if not candidates:
            return "No eligible pieces."

        allocated = controller.allocated_lengths
        header = "SELECTION" + (" (locked)" if controller.is_locked else "")
        lines = [
            header,
            "=" * 78,
            f"{'':<2}{'Piece':<14} {'Length':>10} {'Weight':>9} {'Allocated':>11} "
            f"{'Received':<12} {'Location'}",
            "-" * 78,
        ]
        for piece in candidates:
            mark = "*" if piece.piece_id in allocated else ""
            alloc = allocated.get(piece.piece_id)
            alloc_text = f"{alloc:.1f}" if alloc is not None else "-"
            received = piece.received_date.isoformat() if piece.received_date else "-"
            lines.append(
                f"{mark:<2}{piece.piece_id:<14} {piece.current_length_mm:>10.1f} "
                f"{piece.current_weight_kg:>9.2f} {alloc_text:>11} "
                f"{received:<12} {piece.storage_location or '-'}"
            )
        return "\n".join(lines)


class CutBreakdownFormatter:
    """Formats per-plan cut breakdowns of one piece."""

    def format(self, piece_id: str, rows: Sequence[CutBreakdown]) -> str:
        if not rows:
            return f"No cut plans to break down for piece {piece_id}."
        lines = [
            f"CUT BREAKDOWN - piece {piece_id} ({rows[0].stock_length_mm:.1f} mm)",
            "=" * 78,
            f"{'Plan':<16} {'Cut':>8} {'Need':>5} {'Cuts':>5} {'Used':>9} "
            f"{'Leftover':>9} {'Waste':>7}  Status",
            "-" * 78,
        ]
        for row in rows:
            waste = f"{row.waste_percent:.1f}%" if row.waste_percent is not None else "-"
            if row.is_satisfied:
                status = "OK" if row.surplus_cuts == 0 else f"OK (+{row.surplus_cuts})"
            else:
                status = "SHORT"
            if row.reusable_offcut:
                status += ", offcut"
            lines.append(
                f"{row.label:<16} {row.cut_length_mm:>8.1f} {row.required_cuts:>5} "
                f"{row.cuts:>5} {row.used_length_mm:>9.1f} {row.leftover_mm:>9.1f} "
                f"{waste:>7}  {status}"
            )
        return "\n".join(lines)
