"""Application commands (use cases) for cut optimization."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cut_optimizer.application.config import (
    OptimizeRequest,
    request_to_options,
    request_to_problem,
)
from cut_optimizer.infrastructure.layout import OptimizationResult
from cut_optimizer.infrastructure.optimizer import HeuristicOptimizer

from .dtos import OptimizationOutput
from .result_builder import ResultBuilder

logger = logging.getLogger(__name__)


@dataclass
class OptimizeOutcome:
    """Engine result together with its wire representation."""

    result: OptimizationResult
    output: OptimizationOutput


class OptimizeCommand:
    """Command to optimize a cut list described by a request.

    Attributes:
        max_workers: Worker processes used for heuristic runs.
    """

    def __init__(self, max_workers: int = 1) -> None:
        self.max_workers = max_workers

    def execute(
        self,
        request: OptimizeRequest,
        time_limit: float | None = None,
    ) -> OptimizeOutcome:
        """Validate the request, optimize it and build the output.

        Args:
            request: The optimization request.
            time_limit: Optional cap on the computation budget in seconds.

        Returns:
            OptimizeOutcome with the engine result and output DTO.

        Raises:
            ValidationError: If the request describes an invalid problem.
        """
        problem = request_to_problem(request)
        options = request_to_options(
            request, time_limit=time_limit, max_workers=self.max_workers
        )
        result = HeuristicOptimizer(options).optimize(problem)

        builder = ResultBuilder(
            min_offcut_size=request.min_offcut_size, units=request.units
        )
        return OptimizeOutcome(result=result, output=builder.build(result))
