"""Application layer - use cases and orchestration."""

from .commands import OptimizeCommand, OptimizeOutcome
from .dtos import OptimizationOutput
from .result_builder import ResultBuilder

__all__ = [
    "OptimizationOutput",
    "OptimizeCommand",
    "OptimizeOutcome",
    "ResultBuilder",
]
