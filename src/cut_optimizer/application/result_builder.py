"""Projection of engine results into output DTOs."""

from __future__ import annotations

from cut_optimizer.infrastructure.evaluator import summarize, utilization, waste_area
from cut_optimizer.infrastructure.layout import Layout, OptimizationResult

from .dtos import (
    OffcutOutput,
    OptimizationOutput,
    PlacementOutput,
    SheetOutput,
    SummaryOutput,
)


class ResultBuilder:
    """Converts an OptimizationResult into an OptimizationOutput.

    No optimization happens here: sheets keep their opening order,
    placements keep their placement order, and lengths stay in the
    request's units.

    Attributes:
        min_offcut_size: Free rectangles with a side shorter than this are
            not reported as offcuts.
        units: Length unit echoed in the output.
    """

    def __init__(self, min_offcut_size: float = 0.0, units: str | None = None) -> None:
        self.min_offcut_size = min_offcut_size
        self.units = units

    def build(self, result: OptimizationResult) -> OptimizationOutput:
        summary = summarize(result)
        return OptimizationOutput(
            units=self.units,
            heuristic=result.heuristic,
            complete=result.complete,
            sheets=[self._sheet(layout) for layout in result.layouts],
            unplaced=[piece.piece_id for piece in result.unplaced],
            summary=SummaryOutput(
                sheets_used=summary.sheets_used,
                pieces_placed=summary.pieces_placed,
                pieces_unplaced=summary.pieces_unplaced,
                total_waste_area=summary.total_waste_area,
                total_cost=summary.total_cost,
                utilization=summary.utilization,
            ),
        )

    def _sheet(self, layout: Layout) -> SheetOutput:
        sheet = layout.sheet_type
        return SheetOutput(
            sheet_id=layout.sheet_id,
            stock_id=sheet.id,
            width=sheet.width,
            height=sheet.height,
            cost=sheet.cost,
            waste_area=waste_area(layout),
            utilization=utilization(layout),
            placements=[
                PlacementOutput(
                    piece_id=p.piece.piece_id,
                    x=p.x,
                    y=p.y,
                    width=p.width,
                    height=p.height,
                    rotated=p.rotated,
                )
                for p in layout.placements
            ],
            offcuts=[
                OffcutOutput(x=r.x, y=r.y, width=r.width, height=r.height)
                for r in layout.free_rectangles
                if min(r.width, r.height) >= self.min_offcut_size
            ],
        )
