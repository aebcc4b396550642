"""Pydantic schema for optimization requests.

The same schema validates HTTP request bodies and request files given to
the command line. Field names are camelCase on the wire; the legacy
names (``length``, ``price``, ``externalId``, ``cutWidth``) are
accepted as well.
"""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cut_optimizer.domain.value_objects import PatternDirection


class CamelModel(BaseModel):
    """Base model using camelCase names on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class StockSheetSchema(CamelModel):
    """A stock sheet type available for cutting."""

    id: str | int | None = Field(
        default=None,
        validation_alias=AliasChoices("id", "externalId"),
        description="Sheet type identifier (defaults to stock-<n>)",
    )
    width: float = Field(..., description="Sheet width")
    height: float = Field(
        ...,
        validation_alias=AliasChoices("height", "length"),
        description="Sheet height (or length)",
    )
    quantity: int | None = Field(
        default=None, description="Sheets available; omit for unlimited"
    )
    cost: float = Field(
        default=0.0,
        validation_alias=AliasChoices("cost", "price"),
        description="Cost of one sheet",
    )
    pattern_direction: PatternDirection = Field(
        default=PatternDirection.NONE, description="Pattern running across the sheet"
    )


class CutPieceSchema(CamelModel):
    """A piece to cut, possibly in several copies."""

    id: str | int | None = Field(
        default=None,
        validation_alias=AliasChoices("id", "externalId"),
        description="Piece identifier (defaults to piece-<n>)",
    )
    width: float = Field(..., description="Piece width")
    height: float = Field(
        ...,
        validation_alias=AliasChoices("height", "length"),
        description="Piece height (or length)",
    )
    quantity: int = Field(default=1, description="Number of copies")
    can_rotate: bool = Field(default=True, description="Allow 90 degree rotation")
    pattern_direction: PatternDirection = Field(
        default=PatternDirection.NONE, description="Pattern the piece must keep"
    )


class OptimizeRequest(CamelModel):
    """Request to optimize a cut list against stock sheets."""

    method: Literal["guillotine"] = Field(
        default="guillotine", description="Cutting method"
    )
    random_seed: int = Field(default=1, description="Seed for shuffled orderings")
    cut_width: float = Field(default=0.0, description="Saw kerf between cuts")
    units: str | None = Field(
        default=None, description="Length unit, echoed back in the result"
    )
    time_limit: float | None = Field(
        default=None, gt=0, description="Computation budget in seconds"
    )
    max_heuristics: int | None = Field(
        default=None, ge=1, description="Maximum number of heuristic runs"
    )
    random_orderings: int = Field(
        default=0, ge=0, le=100, description="Extra seeded shuffled orderings"
    )
    allow_mixed_stock_sizes: bool = Field(
        default=True, description="Allow one result to use several sheet types"
    )
    min_offcut_size: float = Field(
        default=0.0, ge=0, description="Minimum side of reported offcuts"
    )
    stock_pieces: list[StockSheetSchema] = Field(
        ..., description="Available stock sheet types"
    )
    cut_pieces: list[CutPieceSchema] = Field(..., description="Pieces to cut")
