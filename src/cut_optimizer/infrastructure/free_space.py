"""Free-space tracking for a single sheet under the guillotine constraint.

The free space of a sheet is kept as a flat list of disjoint
FreeRectangles. Placing a piece consumes one rectangle and splits the
remainder with one straight cut into at most two new rectangles, so every
layout produced this way can be cut edge-to-edge on a panel saw.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cut_optimizer.domain.value_objects import FreeRectangle, Placement

from .errors import LayoutInvariantError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """A free rectangle able to host a piece in a given orientation.

    Attributes:
        index: Index of the rectangle in the tracker's free list.
        rect: The free rectangle.
        rotated: True if the piece must be turned 90 degrees.
        width: Piece width as placed.
        height: Piece height as placed.
    """

    index: int
    rect: FreeRectangle
    rotated: bool
    width: float
    height: float

    @property
    def score(self) -> tuple[float, float, float, float, bool, int]:
        """Sort key: best area fit, then best short side fit, then position.

        Lower is better. Remaining ties prefer the upright orientation and
        then the earlier rectangle, so equal inputs always pick the same
        candidate.
        """
        leftover_area = self.rect.area - self.width * self.height
        short_side = min(self.rect.width - self.width, self.rect.height - self.height)
        return (
            leftover_area,
            short_side,
            self.rect.y,
            self.rect.x,
            self.rotated,
            self.index,
        )


class FreeSpaceTracker:
    """Tracks the unused regions of one sheet instance.

    Attributes:
        width: Sheet width.
        height: Sheet height.
        kerf: Saw blade width removed between a piece and its leftovers.
        free_rects: Disjoint free rectangles, addressed by index.
        used_area: Area covered by committed placements.
        scrap_area: Area lost to kerf and to fragments too thin to keep.
    """

    def __init__(self, width: float, height: float, kerf: float = 0.0) -> None:
        self.width = width
        self.height = height
        self.kerf = kerf
        self.free_rects: list[FreeRectangle] = [FreeRectangle(0, 0, width, height)]
        self.used_area: float = 0
        self.scrap_area: float = 0

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def free_area(self) -> float:
        return sum(rect.area for rect in self.free_rects)

    def copy(self) -> "FreeSpaceTracker":
        """Create an independent copy of this tracker."""
        clone = FreeSpaceTracker(self.width, self.height, self.kerf)
        clone.free_rects = list(self.free_rects)
        clone.used_area = self.used_area
        clone.scrap_area = self.scrap_area
        return clone

    def find_candidates(
        self,
        width: float,
        height: float,
        rotation_allowed: bool,
        upright_allowed: bool = True,
    ) -> list[Candidate]:
        """Find every free rectangle that can host a piece.

        Args:
            width: Piece width in its original orientation.
            height: Piece height in its original orientation.
            rotation_allowed: Whether the rotated orientation may be used.
            upright_allowed: Whether the original orientation may be used.

        Returns:
            Candidates sorted best first. An empty list means no fit.
        """
        orientations: list[tuple[bool, float, float]] = []
        if upright_allowed:
            orientations.append((False, width, height))
        if rotation_allowed and width != height:
            orientations.append((True, height, width))

        candidates: list[Candidate] = []
        for index, rect in enumerate(self.free_rects):
            for rotated, placed_width, placed_height in orientations:
                if rect.can_hold(placed_width, placed_height):
                    candidates.append(
                        Candidate(
                            index=index,
                            rect=rect,
                            rotated=rotated,
                            width=placed_width,
                            height=placed_height,
                        )
                    )

        candidates.sort(key=lambda c: c.score)
        return candidates

    def commit(self, index: int, placement: Placement) -> tuple[FreeRectangle, ...]:
        """Place a piece in a free rectangle and split the remainder.

        The piece goes in the rectangle's bottom-left corner. The leftover
        L-shape is split by one guillotine cut into at most two rectangles;
        zero-width or zero-height leftovers are dropped.

        Args:
            index: Index of the free rectangle to consume.
            placement: Placement at that rectangle's origin.

        Returns:
            The new free rectangles created by the split.

        Raises:
            LayoutInvariantError: If the placement is not at the rectangle's
                origin or does not fit inside it.
        """
        rect = self.free_rects[index]
        if placement.x != rect.x or placement.y != rect.y:
            raise LayoutInvariantError(
                f"Placement at ({placement.x}, {placement.y}) is not at the "
                f"origin of free rectangle ({rect.x}, {rect.y})",
                sheet_id=placement.sheet_id,
            )
        if not rect.can_hold(placement.width, placement.height):
            raise LayoutInvariantError(
                f"Piece {placement.width}x{placement.height} does not fit free "
                f"rectangle {rect.width}x{rect.height}",
                sheet_id=placement.sheet_id,
            )

        del self.free_rects[index]
        new_rects = self._split(rect, placement.width, placement.height)
        self.free_rects.extend(new_rects)

        piece_area = placement.width * placement.height
        self.used_area += piece_area
        self.scrap_area += rect.area - piece_area - sum(r.area for r in new_rects)
        return new_rects

    def _split(
        self, rect: FreeRectangle, width: float, height: float
    ) -> tuple[FreeRectangle, ...]:
        """Choose the guillotine split for a piece placed in a rectangle.

        The horizontal split cuts across the full rectangle width above the
        piece; the vertical split cuts the full height beside it. The split
        whose larger leftover has the larger shorter side wins, then the one
        whose larger leftover has more area, then the horizontal split.
        """
        kerf = self.kerf
        right_width = rect.width - width - kerf
        top_height = rect.height - height - kerf

        horizontal = _non_degenerate(
            FreeRectangle(rect.x, rect.y + height + kerf, rect.width, top_height),
            FreeRectangle(rect.x + width + kerf, rect.y, right_width, height),
        )
        vertical = _non_degenerate(
            FreeRectangle(rect.x + width + kerf, rect.y, right_width, rect.height),
            FreeRectangle(rect.x, rect.y + height + kerf, width, top_height),
        )

        if _split_quality(vertical) > _split_quality(horizontal):
            logger.debug("Vertical split of %sx%s at x=%s", rect.width, rect.height, rect.x + width)
            return vertical
        logger.debug("Horizontal split of %sx%s at y=%s", rect.width, rect.height, rect.y + height)
        return horizontal


def _non_degenerate(*rects: FreeRectangle) -> tuple[FreeRectangle, ...]:
    return tuple(r for r in rects if r.width > 0 and r.height > 0)


def _split_quality(rects: tuple[FreeRectangle, ...]) -> tuple[float, float]:
    if not rects:
        return (0, 0)
    larger = max(rects, key=lambda r: r.area)
    return (min(larger.width, larger.height), larger.area)
