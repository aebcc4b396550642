"""Domain layer - value objects and the validated problem model."""

from .problem import Problem, ValidationError, build_problem, expand_pieces
from .value_objects import (
    CutPiece,
    FreeRectangle,
    PatternDirection,
    PieceInstance,
    Placement,
    StockSheet,
)

__all__ = [
    "CutPiece",
    "FreeRectangle",
    "PatternDirection",
    "PieceInstance",
    "Placement",
    "Problem",
    "StockSheet",
    "ValidationError",
    "build_problem",
    "expand_pieces",
]
