"""Infrastructure layer - the optimization engine and its renderers."""

from .cut_diagram_renderer import CutDiagramRenderer
from .errors import BudgetExceeded, LayoutInvariantError
from .evaluator import ResultSummary, rank_key, summarize
from .free_space import Candidate, FreeSpaceTracker
from .layout import Layout, OptimizationResult
from .optimizer import ORDERINGS, HeuristicOptimizer, OptimizerOptions, Ordering
from .placement import EngineRun, PlacementEngine, SheetInstance

__all__ = [
    # Engine
    "Candidate",
    "EngineRun",
    "FreeSpaceTracker",
    "HeuristicOptimizer",
    "ORDERINGS",
    "OptimizerOptions",
    "Ordering",
    "PlacementEngine",
    "SheetInstance",
    # Results
    "Layout",
    "OptimizationResult",
    "ResultSummary",
    "rank_key",
    "summarize",
    # Errors
    "BudgetExceeded",
    "LayoutInvariantError",
    # Rendering
    "CutDiagramRenderer",
]
