"""Layout evaluation: waste, utilization and cost.

These functions are pure and are used both to rank competing heuristic
results and to fill the summary of the final result.
"""

from __future__ import annotations

from dataclasses import dataclass

from .layout import Layout, OptimizationResult


@dataclass(frozen=True)
class ResultSummary:
    """Totals over an optimization result.

    Attributes:
        sheets_used: Number of sheets opened.
        pieces_placed: Number of piece copies placed.
        pieces_unplaced: Number of piece copies that could not be placed.
        total_area: Combined area of all sheets used.
        placed_area: Combined area of all placed pieces.
        total_waste_area: Sheet area not covered by placed pieces.
        total_cost: Combined cost of the sheets used.
        utilization: Fraction of used sheet area covered by pieces.
    """

    sheets_used: int
    pieces_placed: int
    pieces_unplaced: int
    total_area: float
    placed_area: float
    total_waste_area: float
    total_cost: float
    utilization: float


def sheet_area(layout: Layout) -> float:
    """Area of the sheet a layout was cut from."""
    return layout.sheet_type.width * layout.sheet_type.height


def placed_area(layout: Layout) -> float:
    """Combined area of the pieces placed on a sheet."""
    return sum(p.area for p in layout.placements)


def waste_area(layout: Layout) -> float:
    """Sheet area not covered by placed pieces."""
    return sheet_area(layout) - placed_area(layout)


def utilization(layout: Layout) -> float:
    """Fraction of a sheet covered by placed pieces (0.0 - 1.0)."""
    area = sheet_area(layout)
    if area == 0:
        return 0.0
    return 1 - waste_area(layout) / area


def total_waste(result: OptimizationResult) -> float:
    """Waste summed over every sheet used."""
    return sum(waste_area(layout) for layout in result.layouts)


def total_cost(result: OptimizationResult) -> float:
    """Cost of every sheet used."""
    return sum(layout.sheet_type.cost for layout in result.layouts)


def rank_key(result: OptimizationResult) -> tuple[int, int, float]:
    """Ranking key for competing results; lower is better.

    Fewest unplaced pieces first, then fewest sheets, then least waste.
    """
    return (len(result.unplaced), result.sheets_used, total_waste(result))


def summarize(result: OptimizationResult) -> ResultSummary:
    """Compute the totals reported with a result."""
    area = sum(sheet_area(layout) for layout in result.layouts)
    used = sum(placed_area(layout) for layout in result.layouts)
    return ResultSummary(
        sheets_used=result.sheets_used,
        pieces_placed=sum(layout.piece_count for layout in result.layouts),
        pieces_unplaced=len(result.unplaced),
        total_area=area,
        placed_area=used,
        total_waste_area=area - used,
        total_cost=total_cost(result),
        utilization=used / area if area else 0.0,
    )
