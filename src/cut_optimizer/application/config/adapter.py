"""Adapters from the request schema to domain and engine objects."""

from __future__ import annotations

from cut_optimizer.domain import CutPiece, Problem, StockSheet, build_problem
from cut_optimizer.infrastructure.optimizer import OptimizerOptions

from .schema import OptimizeRequest


def _identifier(value: str | int | None, prefix: str, position: int) -> str:
    if value is None:
        return f"{prefix}-{position + 1}"
    return str(value)


def request_to_problem(request: OptimizeRequest) -> Problem:
    """Build the validated problem model from a request.

    Raises:
        ValidationError: If the request describes an invalid problem.
    """
    sheets = [
        StockSheet(
            id=_identifier(sheet.id, "stock", i),
            width=sheet.width,
            height=sheet.height,
            quantity=sheet.quantity,
            cost=sheet.cost,
            pattern_direction=sheet.pattern_direction,
        )
        for i, sheet in enumerate(request.stock_pieces)
    ]
    pieces = [
        CutPiece(
            id=_identifier(piece.id, "piece", i),
            width=piece.width,
            height=piece.height,
            quantity=piece.quantity,
            can_rotate=piece.can_rotate,
            pattern_direction=piece.pattern_direction,
        )
        for i, piece in enumerate(request.cut_pieces)
    ]
    return build_problem(pieces, sheets, kerf=request.cut_width)


def request_to_options(
    request: OptimizeRequest,
    time_limit: float | None = None,
    max_workers: int = 1,
) -> OptimizerOptions:
    """Build optimizer options from a request.

    Args:
        request: The optimization request.
        time_limit: Upper bound imposed by the caller (e.g. the server
            timeout); the tighter of this and the request's limit wins.
        max_workers: Worker processes to run heuristics on.
    """
    limits = [t for t in (request.time_limit, time_limit) if t is not None]
    return OptimizerOptions(
        time_limit=min(limits) if limits else None,
        max_heuristics=request.max_heuristics,
        random_orderings=request.random_orderings,
        random_seed=request.random_seed,
        allow_mixed_stock_sizes=request.allow_mixed_stock_sizes,
        max_workers=max_workers,
    )
