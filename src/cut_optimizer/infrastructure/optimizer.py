"""Multi-heuristic optimizer.

The placement engine is greedy, so its result depends on the order pieces
arrive in. The optimizer runs it once per ordering strategy, each run on
its own private state, and keeps the best result. Runs can be spread over
a process pool; the only shared step is the final reduction.
"""

from __future__ import annotations

import logging
import random
import time
from concurrent.futures import Future, ProcessPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, Sequence

from cut_optimizer.domain.problem import Problem
from cut_optimizer.domain.value_objects import PieceInstance, StockSheet

from .errors import BudgetExceeded, LayoutInvariantError
from .evaluator import rank_key
from .layout import OptimizationResult
from .placement import PlacementEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptimizerOptions:
    """Options bounding and shaping the heuristic search.

    Attributes:
        time_limit: Wall-clock budget in seconds, or None for no limit.
        max_heuristics: Maximum number of runs, or None for all of them.
        random_orderings: Number of seeded shuffled orderings to add.
        random_seed: Seed for the shuffled orderings.
        allow_mixed_stock_sizes: If False, each run may only use one
            sheet type.
        max_workers: Worker processes; 1 runs everything in-process.
    """

    time_limit: float | None = None
    max_heuristics: int | None = None
    random_orderings: int = 0
    random_seed: int = 1
    allow_mixed_stock_sizes: bool = True
    max_workers: int = 1

    def __post_init__(self) -> None:
        if self.time_limit is not None and not self.time_limit > 0:
            raise ValueError("Time limit must be positive")
        if self.max_heuristics is not None and self.max_heuristics < 1:
            raise ValueError("Max heuristics must be at least 1")
        if self.random_orderings < 0:
            raise ValueError("Random orderings must be non-negative")
        if self.max_workers < 1:
            raise ValueError("Max workers must be at least 1")


@dataclass(frozen=True)
class Ordering:
    """A named piece ordering strategy.

    Attributes:
        name: Strategy name reported with the result.
        order: Function returning the pieces in placement order.
    """

    name: str
    order: Callable[[Sequence[PieceInstance]], list[PieceInstance]]


def _descending(key: Callable[[PieceInstance], float]):
    """Order by key, largest first; insertion index breaks ties."""

    def order(pieces: Sequence[PieceInstance]) -> list[PieceInstance]:
        return sorted(pieces, key=lambda p: (-key(p), p.index))

    return order


ORDERINGS: tuple[Ordering, ...] = (
    Ordering("area_desc", _descending(lambda p: p.area)),
    Ordering("width_desc", _descending(lambda p: p.width)),
    Ordering("height_desc", _descending(lambda p: p.height)),
    Ordering("perimeter_desc", _descending(lambda p: p.width + p.height)),
    Ordering("longest_side_desc", _descending(lambda p: max(p.width, p.height))),
)


def _shuffled(seed: int):
    def order(pieces: Sequence[PieceInstance]) -> list[PieceInstance]:
        shuffled = sorted(pieces, key=lambda p: p.index)
        random.Random(seed).shuffle(shuffled)
        return shuffled

    return order


def build_orderings(options: OptimizerOptions) -> list[Ordering]:
    """Fixed orderings followed by the seeded shuffles."""
    orderings = list(ORDERINGS)
    for n in range(options.random_orderings):
        orderings.append(Ordering(f"shuffle_{n + 1}", _shuffled(options.random_seed + n)))
    return orderings


@dataclass(frozen=True)
class _Run:
    name: str
    pieces: tuple[PieceInstance, ...]
    sheet_types: tuple[StockSheet, ...]


def _execute_run(
    run: _Run, kerf: float, deadline: float | None
) -> OptimizationResult:
    """Run the placement engine once on private state.

    Module-level so it can be sent to worker processes.
    """
    engine = PlacementEngine(run.sheet_types, kerf=kerf, deadline=deadline)
    outcome = engine.run(run.pieces)
    return OptimizationResult(
        layouts=outcome.to_layouts(),
        unplaced=tuple(outcome.unplaced),
        heuristic=run.name,
    )


class HeuristicOptimizer:
    """Runs the placement engine under several orderings and keeps the best.

    Attributes:
        options: Budget and search options.
    """

    def __init__(self, options: OptimizerOptions | None = None) -> None:
        self.options = options or OptimizerOptions()

    def optimize(self, problem: Problem) -> OptimizationResult:
        """Find the best layout the heuristics can produce.

        Args:
            problem: Validated problem model.

        Returns:
            The winning result: fewest unplaced pieces, then fewest sheets,
            then least waste, then earliest run. If no run finished within
            the budget, a result with every piece unplaced.
        """
        runs = self._plan_runs(problem)
        deadline = None
        if self.options.time_limit is not None:
            deadline = time.monotonic() + self.options.time_limit

        logger.info(
            "Optimizing %d pieces over %d sheet types with %d heuristic runs",
            len(problem.instances),
            len(problem.sheet_types),
            len(runs),
        )

        if self.options.max_workers > 1 and len(runs) > 1:
            results = self._run_parallel(runs, problem.kerf, deadline)
        else:
            results = self._run_sequential(runs, problem.kerf, deadline)

        completed = [r for r in results if r is not None]
        best = select_best(completed)
        if best is None:
            logger.warning("No heuristic run completed; reporting all pieces unplaced")
            best = OptimizationResult(layouts=(), unplaced=problem.instances)

        logger.info(
            "Best run '%s': %d sheets, %d unplaced (%d of %d runs completed)",
            best.heuristic,
            best.sheets_used,
            len(best.unplaced),
            len(completed),
            len(runs),
        )
        return best.with_run_counts(len(completed), len(runs))

    def _plan_runs(self, problem: Problem) -> list[_Run]:
        if self.options.allow_mixed_stock_sizes:
            pools = [("", problem.sheet_types)]
        else:
            pools = [(f"@{sheet.id}", (sheet,)) for sheet in problem.sheet_types]

        runs: list[_Run] = []
        for ordering in build_orderings(self.options):
            pieces = tuple(ordering.order(problem.instances))
            for suffix, sheet_types in pools:
                runs.append(_Run(ordering.name + suffix, pieces, tuple(sheet_types)))

        if self.options.max_heuristics is not None:
            runs = runs[: self.options.max_heuristics]
        return runs

    def _run_sequential(
        self, runs: list[_Run], kerf: float, deadline: float | None
    ) -> list[OptimizationResult | None]:
        results: list[OptimizationResult | None] = []
        for run in runs:
            if deadline is not None and time.monotonic() > deadline:
                logger.info("Budget exhausted before run '%s'", run.name)
                results.append(None)
                continue
            try:
                results.append(_execute_run(run, kerf, deadline))
            except BudgetExceeded:
                logger.info("Run '%s' cancelled at deadline", run.name)
                results.append(None)
            except LayoutInvariantError as e:
                logger.error("Run '%s' produced an invalid layout: %s", run.name, e)
                results.append(None)
        return results

    def _run_parallel(
        self, runs: list[_Run], kerf: float, deadline: float | None
    ) -> list[OptimizationResult | None]:
        results: list[OptimizationResult | None] = [None] * len(runs)
        workers = min(self.options.max_workers, len(runs))
        executor = ProcessPoolExecutor(max_workers=workers)
        try:
            futures: list[Future] = [
                executor.submit(_execute_run, run, kerf, deadline) for run in runs
            ]
            timeout = None
            if deadline is not None:
                timeout = max(0.0, deadline - time.monotonic())
            _, not_done = wait(futures, timeout=timeout)
            if not_done:
                logger.info("Budget exhausted; cancelling %d pending runs", len(not_done))
                for future in not_done:
                    future.cancel()
                # Runs already in flight stop at their next deadline check.
                wait(not_done)

            for index, future in enumerate(futures):
                if future.cancelled():
                    continue
                try:
                    results[index] = future.result()
                except BudgetExceeded:
                    logger.info("Run '%s' cancelled at deadline", runs[index].name)
                except LayoutInvariantError as e:
                    logger.error(
                        "Run '%s' produced an invalid layout: %s", runs[index].name, e
                    )
        finally:
            executor.shutdown(wait=True, cancel_futures=True)
        return results


def select_best(results: Sequence[OptimizationResult]) -> OptimizationResult | None:
    """Reduce completed results to the winner.

    Results are compared in run order with a strict comparison, so the
    first-evaluated result wins any remaining tie.
    """
    best: OptimizationResult | None = None
    for result in results:
        if best is None or rank_key(result) < rank_key(best):
            best = result
    return best
