"""Problem model: validation and expansion of optimizer input."""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass
from typing import Sequence

from .value_objects import CutPiece, PieceInstance, StockSheet

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Raised when optimizer input is malformed.

    Attributes:
        errors: One message per problem found in the input.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("Invalid optimizer input: " + "; ".join(errors))


@dataclass(frozen=True)
class Problem:
    """Validated optimizer input.

    Attributes:
        instances: Every piece copy, in deterministic insertion order.
        sheet_types: Available stock sheet types in declaration order.
        kerf: Width of material lost to each saw cut.
    """

    instances: tuple[PieceInstance, ...]
    sheet_types: tuple[StockSheet, ...]
    kerf: float = 0.0

    @property
    def piece_area(self) -> float:
        """Total area of all piece copies."""
        return sum(instance.area for instance in self.instances)


def _positive(value: float) -> bool:
    return value > 0 and math.isfinite(value)


def _non_negative(value: float) -> bool:
    return value >= 0 and math.isfinite(value)


def _validate_pieces(pieces: Sequence[CutPiece]) -> list[str]:
    errors: list[str] = []
    for piece in pieces:
        if not (_positive(piece.width) and _positive(piece.height)):
            errors.append(
                f"Cut piece '{piece.id}' dimensions must be positive and finite "
                f"(got {piece.width}x{piece.height})"
            )
        if piece.quantity < 0:
            errors.append(
                f"Cut piece '{piece.id}' quantity must be non-negative "
                f"(got {piece.quantity})"
            )
    for piece_id, count in Counter(p.id for p in pieces).items():
        if count > 1:
            errors.append(f"Duplicate cut piece id '{piece_id}'")
    return errors


def _validate_sheets(sheets: Sequence[StockSheet]) -> list[str]:
    errors: list[str] = []
    if not sheets:
        errors.append("At least one stock sheet type is required")
    for sheet in sheets:
        if not (_positive(sheet.width) and _positive(sheet.height)):
            errors.append(
                f"Stock sheet '{sheet.id}' dimensions must be positive and finite "
                f"(got {sheet.width}x{sheet.height})"
            )
        if sheet.quantity is not None and sheet.quantity < 0:
            errors.append(
                f"Stock sheet '{sheet.id}' quantity must be non-negative "
                f"(got {sheet.quantity})"
            )
        if not _non_negative(sheet.cost):
            errors.append(
                f"Stock sheet '{sheet.id}' cost must be non-negative and finite "
                f"(got {sheet.cost})"
            )
    for sheet_id, count in Counter(s.id for s in sheets).items():
        if count > 1:
            errors.append(f"Duplicate stock sheet id '{sheet_id}'")
    return errors


def expand_pieces(pieces: Sequence[CutPiece]) -> tuple[PieceInstance, ...]:
    """Expand pieces with quantity N into N individual piece copies.

    Copies are indexed in input order: all copies of the first piece,
    then all copies of the second, and so on.
    """
    instances: list[PieceInstance] = []
    for piece in pieces:
        for copy in range(piece.quantity):
            instances.append(PieceInstance(index=len(instances), piece=piece, copy=copy))
    return tuple(instances)


def build_problem(
    pieces: Sequence[CutPiece],
    sheets: Sequence[StockSheet],
    kerf: float = 0.0,
) -> Problem:
    """Validate raw input and build the problem model.

    Args:
        pieces: Cut pieces to produce.
        sheets: Stock sheet types available.
        kerf: Saw blade width removed between adjacent cuts.

    Returns:
        Problem with expanded piece copies and the sheet type table.

    Raises:
        ValidationError: If any dimension is non-positive or not finite, any
            quantity or cost is negative, ids repeat, or no sheet type is given.
    """
    errors = _validate_pieces(pieces) + _validate_sheets(sheets)
    if not _non_negative(kerf):
        errors.append(f"Cut width must be non-negative and finite (got {kerf})")
    if errors:
        raise ValidationError(errors)

    instances = expand_pieces(pieces)
    logger.debug(
        "Built problem with %d piece copies and %d sheet types",
        len(instances),
        len(sheets),
    )
    return Problem(instances=instances, sheet_types=tuple(sheets), kerf=kerf)
