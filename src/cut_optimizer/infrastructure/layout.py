"""Layout data models produced by the optimization engine.

All dataclasses are frozen (immutable) to ensure thread safety and so
results can be handed back from worker processes unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass

from cut_optimizer.domain.value_objects import (
    FreeRectangle,
    PieceInstance,
    Placement,
    StockSheet,
)


@dataclass(frozen=True)
class Layout:
    """Layout of pieces on a single opened sheet.

    Attributes:
        sheet_id: Zero-based id of the sheet, in the order sheets were opened.
        sheet_type: Stock sheet type the sheet was taken from.
        placements: Pieces placed on this sheet.
        free_rectangles: Reusable regions left after placement.
        scrap_area: Area lost to kerf and unusable fragments.
    """

    sheet_id: int
    sheet_type: StockSheet
    placements: tuple[Placement, ...]
    free_rectangles: tuple[FreeRectangle, ...] = ()
    scrap_area: float = 0

    def __post_init__(self) -> None:
        if self.sheet_id < 0:
            raise ValueError("Sheet id must be non-negative")

    @property
    def piece_count(self) -> int:
        """Number of pieces placed on this sheet."""
        return len(self.placements)


@dataclass(frozen=True)
class OptimizationResult:
    """Outcome of optimizing a problem.

    Attributes:
        layouts: One layout per sheet used, ordered by sheet id.
        unplaced: Piece copies that could not be placed on any sheet.
        heuristic: Name of the heuristic run that produced this result,
            or None if no run completed.
        runs_completed: Heuristic runs that finished.
        runs_total: Heuristic runs that were scheduled.
    """

    layouts: tuple[Layout, ...]
    unplaced: tuple[PieceInstance, ...]
    heuristic: str | None = None
    runs_completed: int = 0
    runs_total: int = 0

    @property
    def sheets_used(self) -> int:
        return len(self.layouts)

    @property
    def placements(self) -> tuple[Placement, ...]:
        """All placements across every sheet."""
        return tuple(p for layout in self.layouts for p in layout.placements)

    @property
    def complete(self) -> bool:
        """True if every scheduled heuristic run finished."""
        return self.runs_completed == self.runs_total

    def with_run_counts(self, completed: int, total: int) -> "OptimizationResult":
        """Copy of this result carrying the optimizer's run bookkeeping."""
        return OptimizationResult(
            layouts=self.layouts,
            unplaced=self.unplaced,
            heuristic=self.heuristic,
            runs_completed=completed,
            runs_total=total,
        )
