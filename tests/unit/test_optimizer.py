"""Tests for the multi-heuristic optimizer.

Tests cover:
- Ordering strategies and seeded shuffles
- Run planning (mixed stock sizes, max heuristics)
- Winner selection and tie-breaking
- Budget exhaustion and invariant failures
- Process pool execution
"""

from __future__ import annotations

import logging
import time

import pytest

from cut_optimizer.domain import CutPiece, StockSheet, build_problem
from cut_optimizer.infrastructure import (
    ORDERINGS,
    BudgetExceeded,
    HeuristicOptimizer,
    Layout,
    LayoutInvariantError,
    OptimizationResult,
    OptimizerOptions,
)
from cut_optimizer.infrastructure import optimizer as optimizer_module
from cut_optimizer.infrastructure.optimizer import build_orderings, select_best


@pytest.fixture
def mixed_problem():
    """Pieces of varied sizes on a single unlimited sheet type."""
    pieces = [
        CutPiece(id="a", width=60, height=20, quantity=2),
        CutPiece(id="b", width=30, height=45),
        CutPiece(id="c", width=25, height=25, quantity=3),
        CutPiece(id="d", width=80, height=10),
    ]
    return build_problem(pieces, [StockSheet(id="s", width=100, height=100)], kerf=1)


def _signature(result: OptimizationResult) -> list[tuple]:
    return [
        (p.sheet_id, p.piece.index, p.x, p.y, p.rotated) for p in result.placements
    ]


class TestOrderings:
    """Tests for piece ordering strategies."""

    def test_fixed_ordering_names(self) -> None:
        assert [o.name for o in ORDERINGS] == [
            "area_desc",
            "width_desc",
            "height_desc",
            "perimeter_desc",
            "longest_side_desc",
        ]

    def test_ties_keep_insertion_order(self, mixed_problem) -> None:
        ordered = ORDERINGS[0].order(mixed_problem.instances)
        c_copies = [p.index for p in ordered if p.piece_id == "c"]

        assert c_copies == sorted(c_copies)
        assert ordered[0].piece_id == "b"

    def test_shuffles_are_seeded(self, mixed_problem) -> None:
        options = OptimizerOptions(random_orderings=2, random_seed=7)
        first = build_orderings(options)
        second = build_orderings(options)

        assert [o.name for o in first][-2:] == ["shuffle_1", "shuffle_2"]
        for a, b in zip(first, second):
            assert a.order(mixed_problem.instances) == b.order(mixed_problem.instances)


class TestOptimizerOptions:
    """Tests for option validation."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"time_limit": 0},
            {"time_limit": float("nan")},
            {"max_heuristics": 0},
            {"random_orderings": -1},
            {"max_workers": 0},
        ],
    )
    def test_invalid_options(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            OptimizerOptions(**kwargs)


class TestHeuristicOptimizer:
    """Tests for HeuristicOptimizer.optimize."""

    def test_every_piece_accounted_for(self, mixed_problem) -> None:
        result = HeuristicOptimizer().optimize(mixed_problem)

        indices = [p.piece.index for p in result.placements]
        indices += [p.index for p in result.unplaced]
        assert sorted(indices) == list(range(len(mixed_problem.instances)))

    def test_deterministic(self, mixed_problem) -> None:
        options = OptimizerOptions(random_orderings=3, random_seed=11)
        first = HeuristicOptimizer(options).optimize(mixed_problem)
        second = HeuristicOptimizer(options).optimize(mixed_problem)

        assert first.heuristic == second.heuristic
        assert _signature(first) == _signature(second)

    def test_first_run_wins_ties(self) -> None:
        problem = build_problem(
            [CutPiece(id="p", width=500, height=500)],
            [StockSheet(id="a", width=1000, height=1000, quantity=1)],
        )
        result = HeuristicOptimizer().optimize(problem)

        assert result.heuristic == "area_desc"
        assert result.runs_completed == result.runs_total == 5
        assert result.complete

    def test_max_heuristics_truncates_runs(self, mixed_problem) -> None:
        options = OptimizerOptions(max_heuristics=2, random_orderings=4)
        result = HeuristicOptimizer(options).optimize(mixed_problem)

        assert result.runs_total == 2

    def test_random_orderings_add_runs(self, mixed_problem) -> None:
        options = OptimizerOptions(random_orderings=2)
        result = HeuristicOptimizer(options).optimize(mixed_problem)

        assert result.runs_total == 7

    def test_unmixed_stock_uses_one_sheet_type(self) -> None:
        problem = build_problem(
            [CutPiece(id="p", width=100, height=100, quantity=4)],
            [
                StockSheet(id="small", width=100, height=100),
                StockSheet(id="big", width=200, height=200),
            ],
        )
        mixed = HeuristicOptimizer().optimize(problem)
        unmixed = HeuristicOptimizer(
            OptimizerOptions(allow_mixed_stock_sizes=False)
        ).optimize(problem)

        assert mixed.sheets_used == 4
        assert unmixed.runs_total == 10
        assert unmixed.heuristic == "area_desc@big"
        assert unmixed.sheets_used == 1
        assert {layout.sheet_type.id for layout in unmixed.layouts} == {"big"}

    def test_no_completed_run_reports_everything_unplaced(
        self, mixed_problem, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def expired(run, kerf, deadline):
            raise BudgetExceeded("deadline")

        monkeypatch.setattr(optimizer_module, "_execute_run", expired)
        result = HeuristicOptimizer().optimize(mixed_problem)

        assert result.layouts == ()
        assert result.unplaced == mixed_problem.instances
        assert result.heuristic is None
        assert not result.complete
        assert result.runs_completed == 0

    def test_invariant_failure_excludes_run(
        self, mixed_problem, monkeypatch: pytest.MonkeyPatch, caplog
    ) -> None:
        caplog.set_level(logging.ERROR, logger="cut_optimizer.infrastructure.optimizer")
        original = optimizer_module._execute_run

        def broken_first(run, kerf, deadline):
            if run.name == "area_desc":
                raise LayoutInvariantError("overlap", sheet_id=0)
            return original(run, kerf, deadline)

        monkeypatch.setattr(optimizer_module, "_execute_run", broken_first)
        result = HeuristicOptimizer().optimize(mixed_problem)

        assert result.heuristic != "area_desc"
        assert result.runs_completed == 4
        assert "invalid layout" in caplog.text

    def test_budget_keeps_best_completed_run(
        self, mixed_problem, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        original = optimizer_module._execute_run
        finished: list[OptimizationResult] = []

        def budget_after_two(run, kerf, deadline):
            if len(finished) >= 2:
                raise BudgetExceeded("deadline")
            result = original(run, kerf, deadline)
            finished.append(result)
            return result

        monkeypatch.setattr(optimizer_module, "_execute_run", budget_after_two)
        result = HeuristicOptimizer().optimize(mixed_problem)

        assert [r.heuristic for r in finished] == ["area_desc", "width_desc"]
        assert result.heuristic == select_best(finished).heuristic
        assert _signature(result) == _signature(select_best(finished))
        assert result.runs_completed == 2
        assert result.runs_total == 5
        assert not result.complete

    def test_expired_budget_returns_quickly(self, mixed_problem) -> None:
        options = OptimizerOptions(time_limit=1e-9)
        result = HeuristicOptimizer(options).optimize(mixed_problem)

        assert result.runs_completed <= result.runs_total
        indices = [p.piece.index for p in result.placements]
        indices += [p.index for p in result.unplaced]
        assert sorted(indices) == list(range(len(mixed_problem.instances)))

    @pytest.mark.slow
    def test_process_pool_matches_sequential(self, mixed_problem) -> None:
        sequential = HeuristicOptimizer(OptimizerOptions(random_orderings=2)).optimize(
            mixed_problem
        )
        parallel = HeuristicOptimizer(
            OptimizerOptions(random_orderings=2, max_workers=2)
        ).optimize(mixed_problem)

        assert parallel.heuristic == sequential.heuristic
        assert _signature(parallel) == _signature(sequential)
        assert parallel.runs_completed == 7

    @pytest.mark.slow
    def test_process_pool_respects_budget(self) -> None:
        pieces = [
            CutPiece(id=f"p{n}", width=5 + (n * 7) % 40, height=5 + (n * 11) % 35, quantity=3)
            for n in range(200)
        ]
        problem = build_problem(pieces, [StockSheet(id="s", width=120, height=120)], kerf=1)
        options = OptimizerOptions(time_limit=0.05, random_orderings=10, max_workers=2)

        started = time.monotonic()
        result = HeuristicOptimizer(options).optimize(problem)

        assert time.monotonic() - started < 30
        assert result.runs_total == 15
        assert result.runs_completed <= result.runs_total
        assert result.complete == (result.runs_completed == result.runs_total)
        indices = [p.piece.index for p in result.placements]
        indices += [p.index for p in result.unplaced]
        assert sorted(indices) == list(range(len(problem.instances)))
        for layout in result.layouts:
            for i, first in enumerate(layout.placements):
                assert first.right_edge <= layout.sheet_type.width
                assert first.top_edge <= layout.sheet_type.height
                for second in layout.placements[i + 1 :]:
                    assert not first.overlaps(second)


class TestSelectBest:
    """Tests for the result reduction."""

    def _result(self, name: str, sheets: int, unplaced: int = 0) -> OptimizationResult:
        sheet = StockSheet(id="s", width=10, height=10)
        problem = build_problem(
            [CutPiece(id="p", width=1, height=1, quantity=unplaced)], [sheet]
        )
        layouts = tuple(Layout(sheet_id=i, sheet_type=sheet, placements=()) for i in range(sheets))
        return OptimizationResult(layouts=layouts, unplaced=problem.instances, heuristic=name)

    def test_fewest_unplaced_first(self) -> None:
        best = select_best([self._result("a", 1, unplaced=1), self._result("b", 3)])
        assert best.heuristic == "b"

    def test_fewest_sheets_next(self) -> None:
        best = select_best([self._result("a", 3), self._result("b", 2)])
        assert best.heuristic == "b"

    def test_first_wins_exact_tie(self) -> None:
        best = select_best([self._result("a", 2), self._result("b", 2)])
        assert best.heuristic == "a"

    def test_empty(self) -> None:
        assert select_best([]) is None
