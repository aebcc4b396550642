"""End-to-end optimization scenarios and layout properties.

These tests run the whole pipeline (problem model, optimizer, placement
engine, evaluator) and check the properties every layout must satisfy.
"""

from __future__ import annotations

import itertools
import math

import pytest

from cut_optimizer.domain import CutPiece, StockSheet, build_problem
from cut_optimizer.infrastructure import HeuristicOptimizer, OptimizationResult, OptimizerOptions
from cut_optimizer.infrastructure.evaluator import summarize, utilization, waste_area


def _optimize(pieces, sheets, kerf: float = 0, **options) -> OptimizationResult:
    problem = build_problem(pieces, sheets, kerf=kerf)
    return HeuristicOptimizer(OptimizerOptions(**options)).optimize(problem)


def assert_valid_layout(result: OptimizationResult, piece_count: int) -> None:
    """Check the geometric properties of every sheet in a result."""
    for layout in result.layouts:
        sheet = layout.sheet_type
        for placement in layout.placements:
            assert placement.x >= 0 and placement.y >= 0
            assert placement.right_edge <= sheet.width
            assert placement.top_edge <= sheet.height
            if placement.rotated:
                assert placement.piece.piece.can_rotate
        for first, second in itertools.combinations(layout.placements, 2):
            assert not first.overlaps(second)

        placed = sum(p.area for p in layout.placements)
        free = sum(r.area for r in layout.free_rectangles)
        assert math.isclose(placed + free + layout.scrap_area, sheet.width * sheet.height)

    indices = [p.piece.index for p in result.placements] + [p.index for p in result.unplaced]
    assert sorted(indices) == list(range(piece_count))


class TestScenarios:
    """The reference scenarios."""

    def test_single_piece_on_single_sheet(self) -> None:
        result = _optimize(
            [CutPiece(id="p1", width=500, height=500)],
            [StockSheet(id="a", width=1000, height=1000, quantity=1)],
        )

        assert result.sheets_used == 1
        layout = result.layouts[0]
        placement = layout.placements[0]
        assert (placement.x, placement.y, placement.width, placement.height) == (0, 0, 500, 500)
        assert waste_area(layout) == 750_000
        assert utilization(layout) == pytest.approx(0.25)

    def test_piece_larger_than_every_sheet(self) -> None:
        result = _optimize(
            [CutPiece(id="huge", width=1500, height=1500)],
            [StockSheet(id="a", width=1000, height=1000)],
        )

        assert result.sheets_used == 0
        assert [p.piece_id for p in result.unplaced] == ["huge"]

    def test_two_pieces_fill_sheet_exactly(self) -> None:
        result = _optimize(
            [
                CutPiece(id="left", width=400, height=300),
                CutPiece(id="right", width=400, height=300),
            ],
            [StockSheet(id="a", width=800, height=300, quantity=1)],
        )

        assert result.sheets_used == 1
        layout = result.layouts[0]
        assert len(layout.placements) == 2
        assert not layout.placements[0].overlaps(layout.placements[1])
        assert waste_area(layout) == 0
        assert_valid_layout(result, 2)

    def test_rotation_disallowed_is_unplaced(self) -> None:
        result = _optimize(
            [CutPiece(id="p", width=300, height=100, can_rotate=False)],
            [StockSheet(id="a", width=100, height=300)],
        )

        assert result.sheets_used == 0
        assert [p.piece_id for p in result.unplaced] == ["p"]

    def test_rotation_allowed_is_placed(self) -> None:
        result = _optimize(
            [CutPiece(id="p", width=300, height=100)],
            [StockSheet(id="a", width=100, height=300)],
        )

        assert result.unplaced == ()
        assert result.layouts[0].placements[0].rotated


class TestLayoutProperties:
    """Properties checked on larger, mixed inputs."""

    @pytest.fixture
    def cabinet_parts(self) -> list[CutPiece]:
        return [
            CutPiece(id="side", width=23.25, height=34.5, quantity=4),
            CutPiece(id="bottom", width=23.25, height=22.5, quantity=2),
            CutPiece(id="shelf", width=22.5, height=11.25, quantity=6),
            CutPiece(id="back", width=24, height=34.5, quantity=2, can_rotate=False),
            CutPiece(id="stretcher", width=22.5, height=4, quantity=4),
        ]

    @pytest.mark.parametrize("kerf", [0, 0.125])
    def test_properties_hold(self, cabinet_parts: list[CutPiece], kerf: float) -> None:
        result = _optimize(
            cabinet_parts,
            [StockSheet(id="ply", width=48, height=96, cost=55)],
            kerf=kerf,
            random_orderings=3,
        )

        assert result.unplaced == ()
        assert_valid_layout(result, 18)

    def test_limited_stock_reports_unplaced(self, cabinet_parts: list[CutPiece]) -> None:
        result = _optimize(
            cabinet_parts,
            [StockSheet(id="ply", width=48, height=96, quantity=1)],
        )

        assert result.sheets_used == 1
        assert result.unplaced
        assert_valid_layout(result, 18)

    def test_mixed_sheet_types(self, cabinet_parts: list[CutPiece]) -> None:
        result = _optimize(
            cabinet_parts,
            [
                StockSheet(id="full", width=48, height=96, quantity=2, cost=55),
                StockSheet(id="half", width=48, height=48, cost=30),
            ],
        )

        assert result.unplaced == ()
        assert_valid_layout(result, 18)
        assert summarize(result).total_cost == sum(layout.sheet_type.cost for layout in result.layouts)

    def test_deterministic(self, cabinet_parts: list[CutPiece]) -> None:
        sheets = [StockSheet(id="ply", width=48, height=96)]
        first = _optimize(cabinet_parts, sheets, kerf=0.125, random_orderings=5, random_seed=3)
        second = _optimize(cabinet_parts, sheets, kerf=0.125, random_orderings=5, random_seed=3)

        def positions(result: OptimizationResult) -> list[tuple]:
            return [(p.sheet_id, p.piece.index, p.x, p.y, p.rotated) for p in result.placements]

        assert first.heuristic == second.heuristic
        assert positions(first) == positions(second)
