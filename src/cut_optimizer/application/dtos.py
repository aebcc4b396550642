"""Output DTOs describing an optimization result on the wire."""

from __future__ import annotations

from pydantic import Field

from cut_optimizer.application.config.schema import CamelModel


class PlacementOutput(CamelModel):
    """A piece placed on a sheet."""

    piece_id: str = Field(..., description="Identifier of the placed piece")
    x: float = Field(..., description="Left edge from the sheet's left side")
    y: float = Field(..., description="Bottom edge from the sheet's bottom side")
    width: float = Field(..., description="Width as placed")
    height: float = Field(..., description="Height as placed")
    rotated: bool = Field(..., description="Whether the piece was turned 90 degrees")


class OffcutOutput(CamelModel):
    """A reusable free rectangle left on a sheet."""

    x: float
    y: float
    width: float
    height: float


class SheetOutput(CamelModel):
    """One sheet used by the result."""

    sheet_id: int = Field(..., description="Sheet number in opening order")
    stock_id: str = Field(..., description="Identifier of the stock sheet type")
    width: float = Field(..., description="Sheet width")
    height: float = Field(..., description="Sheet height")
    cost: float = Field(..., description="Cost of the sheet")
    waste_area: float = Field(..., description="Area not covered by pieces")
    utilization: float = Field(..., description="Fraction of the sheet used")
    placements: list[PlacementOutput] = Field(default_factory=list)
    offcuts: list[OffcutOutput] = Field(default_factory=list)


class SummaryOutput(CamelModel):
    """Totals over the whole result."""

    sheets_used: int
    pieces_placed: int
    pieces_unplaced: int
    total_waste_area: float
    total_cost: float
    utilization: float


class OptimizationOutput(CamelModel):
    """Response for an optimization request."""

    units: str | None = Field(default=None, description="Length unit of the request")
    heuristic: str | None = Field(
        default=None, description="Ordering strategy of the winning run"
    )
    complete: bool = Field(
        ..., description="False if the budget ran out before all runs finished"
    )
    sheets: list[SheetOutput] = Field(default_factory=list)
    unplaced: list[str] = Field(
        default_factory=list, description="Piece id of every copy that was not placed"
    )
    summary: SummaryOutput
