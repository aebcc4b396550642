"""Tests for the guillotine free-space tracker.

Tests cover:
- Candidate search with and without rotation
- Best-area-fit scoring
- Split selection and kerf accounting
- Commit preconditions
"""

from __future__ import annotations

import pytest

from cut_optimizer.domain import CutPiece, FreeRectangle, PieceInstance, Placement
from cut_optimizer.infrastructure import FreeSpaceTracker, LayoutInvariantError


def _placement(width: float, height: float, x: float = 0, y: float = 0) -> Placement:
    piece = PieceInstance(0, CutPiece(id="p", width=width, height=height))
    return Placement(piece=piece, sheet_id=0, x=x, y=y)


class TestFindCandidates:
    """Tests for FreeSpaceTracker.find_candidates."""

    def test_upright_fit_only(self) -> None:
        tracker = FreeSpaceTracker(100, 50)
        candidates = tracker.find_candidates(60, 40, rotation_allowed=True)

        assert len(candidates) == 1
        assert not candidates[0].rotated

    def test_rotated_fit(self) -> None:
        tracker = FreeSpaceTracker(100, 50)
        candidates = tracker.find_candidates(40, 90, rotation_allowed=True)

        assert len(candidates) == 1
        assert candidates[0].rotated
        assert (candidates[0].width, candidates[0].height) == (90, 40)

    def test_rotation_not_allowed(self) -> None:
        tracker = FreeSpaceTracker(100, 50)
        assert tracker.find_candidates(40, 90, rotation_allowed=False) == []

    def test_square_piece_tried_once(self) -> None:
        tracker = FreeSpaceTracker(100, 50)
        assert len(tracker.find_candidates(30, 30, rotation_allowed=True)) == 1

    def test_upright_preferred_on_equal_score(self) -> None:
        tracker = FreeSpaceTracker(100, 100)
        candidates = tracker.find_candidates(20, 40, rotation_allowed=True)

        assert [c.rotated for c in candidates] == [False, True]

    def test_best_area_fit_first(self) -> None:
        tracker = FreeSpaceTracker(100, 50)
        tracker.commit(0, _placement(30, 20))

        # Free space is now 70x50 on the right and 30x30 above the piece.
        candidates = tracker.find_candidates(30, 30, rotation_allowed=True)

        assert candidates[0].rect == FreeRectangle(0, 20, 30, 30)
        assert candidates[0].score[0] == 0


class TestCommit:
    """Tests for FreeSpaceTracker.commit and the guillotine split."""

    def test_split_keeps_larger_square_leftover(self) -> None:
        tracker = FreeSpaceTracker(100, 50)
        new_rects = tracker.commit(0, _placement(30, 20))

        assert new_rects == (
            FreeRectangle(30, 0, 70, 50),
            FreeRectangle(0, 20, 30, 30),
        )
        assert tracker.used_area == 600
        assert tracker.scrap_area == 0
        assert tracker.free_area + tracker.used_area == tracker.area

    def test_tie_prefers_horizontal_split(self) -> None:
        tracker = FreeSpaceTracker(100, 100)
        new_rects = tracker.commit(0, _placement(50, 50))

        assert new_rects == (
            FreeRectangle(0, 50, 100, 50),
            FreeRectangle(50, 0, 50, 50),
        )

    def test_full_width_piece_leaves_one_rectangle(self) -> None:
        tracker = FreeSpaceTracker(100, 50)
        new_rects = tracker.commit(0, _placement(100, 20))

        assert new_rects == (FreeRectangle(0, 20, 100, 30),)

    def test_exact_fit_leaves_nothing(self) -> None:
        tracker = FreeSpaceTracker(100, 50)
        assert tracker.commit(0, _placement(100, 50)) == ()
        assert tracker.free_rects == []

    def test_kerf_goes_to_scrap(self) -> None:
        tracker = FreeSpaceTracker(100, 50, kerf=2)
        new_rects = tracker.commit(0, _placement(30, 20))

        assert new_rects == (
            FreeRectangle(32, 0, 68, 50),
            FreeRectangle(0, 22, 30, 28),
        )
        # A 2x50 strip beside the piece and a 30x2 strip above it.
        assert tracker.scrap_area == 160
        assert tracker.used_area + tracker.free_area + tracker.scrap_area == tracker.area

    def test_kerf_wider_than_leftover(self) -> None:
        tracker = FreeSpaceTracker(100, 50, kerf=5)
        new_rects = tracker.commit(0, _placement(98, 50))

        assert new_rects == ()
        assert tracker.scrap_area == 100

    def test_placement_not_at_origin(self) -> None:
        tracker = FreeSpaceTracker(100, 50)
        with pytest.raises(LayoutInvariantError, match="origin"):
            tracker.commit(0, _placement(10, 10, x=5))

    def test_placement_too_large(self) -> None:
        tracker = FreeSpaceTracker(100, 50)
        with pytest.raises(LayoutInvariantError, match="does not fit"):
            tracker.commit(0, _placement(120, 10))

    def test_copy_is_independent(self) -> None:
        tracker = FreeSpaceTracker(100, 50)
        clone = tracker.copy()
        clone.commit(0, _placement(30, 20))

        assert tracker.free_rects == [FreeRectangle(0, 0, 100, 50)]
        assert tracker.used_area == 0
        assert len(clone.free_rects) == 2
