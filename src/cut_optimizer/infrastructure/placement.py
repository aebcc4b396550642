"""Greedy placement engine for guillotine cutting.

The engine places piece copies one at a time in the order it is given.
Each piece goes to the best-fitting free rectangle across every opened
sheet; only when nothing fits is a new sheet opened. The result quality
depends on the piece order, which is why the optimizer runs the engine
under several orderings.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Sequence

from cut_optimizer.domain.value_objects import PieceInstance, Placement, StockSheet

from .errors import BudgetExceeded, LayoutInvariantError
from .free_space import Candidate, FreeSpaceTracker
from .layout import Layout

logger = logging.getLogger(__name__)


@dataclass
class SheetInstance:
    """A sheet opened during a run.

    Attributes:
        id: Zero-based id in opening order.
        sheet_type: Stock sheet type this sheet was taken from.
        tracker: Free space of this sheet.
        placements: Pieces placed so far.
    """

    id: int
    sheet_type: StockSheet
    tracker: FreeSpaceTracker
    placements: list[Placement] = field(default_factory=list)

    def find_candidates(self, piece: PieceInstance) -> list[Candidate]:
        """Free rectangles of this sheet that can host a piece copy."""
        return self.tracker.find_candidates(
            piece.width,
            piece.height,
            rotation_allowed=piece.can_orient(self.sheet_type, rotated=True),
            upright_allowed=piece.can_orient(self.sheet_type, rotated=False),
        )

    def place(self, piece: PieceInstance, candidate: Candidate) -> Placement:
        """Commit a piece copy into a candidate rectangle."""
        placement = Placement(
            piece=piece,
            sheet_id=self.id,
            x=candidate.rect.x,
            y=candidate.rect.y,
            rotated=candidate.rotated,
        )
        self.tracker.commit(candidate.index, placement)
        self.placements.append(placement)
        return placement

    def to_layout(self) -> Layout:
        return Layout(
            sheet_id=self.id,
            sheet_type=self.sheet_type,
            placements=tuple(self.placements),
            free_rectangles=tuple(self.tracker.free_rects),
            scrap_area=self.tracker.scrap_area,
        )


@dataclass
class EngineRun:
    """State at the end of one placement run.

    Attributes:
        sheets: Sheets opened, in opening order.
        unplaced: Piece copies that could not be placed.
    """

    sheets: list[SheetInstance]
    unplaced: list[PieceInstance]

    def to_layouts(self) -> tuple[Layout, ...]:
        return tuple(sheet.to_layout() for sheet in self.sheets)


class PlacementEngine:
    """Places an ordered sequence of piece copies onto stock sheets.

    Attributes:
        sheet_types: Sheet types that may be opened.
        kerf: Saw blade width.
        deadline: time.monotonic() value after which the run is abandoned.
    """

    def __init__(
        self,
        sheet_types: Sequence[StockSheet],
        kerf: float = 0.0,
        deadline: float | None = None,
    ) -> None:
        self.sheet_types = tuple(sheet_types)
        self.kerf = kerf
        self.deadline = deadline
        # Smallest sheet first; declaration order breaks ties.
        self._opening_order = sorted(
            range(len(self.sheet_types)),
            key=lambda i: (self.sheet_types[i].area, i),
        )

    def run(self, pieces: Sequence[PieceInstance]) -> EngineRun:
        """Place pieces in order, opening sheets as needed.

        Args:
            pieces: Piece copies in the order they should be placed.

        Returns:
            EngineRun with the opened sheets and the unplaced pieces.

        Raises:
            BudgetExceeded: If the deadline passes before all pieces are placed.
            LayoutInvariantError: If the finished layout fails verification.
        """
        sheets: list[SheetInstance] = []
        unplaced: list[PieceInstance] = []
        remaining = [sheet.quantity for sheet in self.sheet_types]

        for piece in pieces:
            self._check_deadline()

            if self._place_on_open_sheet(piece, sheets):
                continue

            sheet = self._open_sheet(piece, remaining, len(sheets))
            if sheet is None:
                logger.debug(
                    "Piece '%s' #%d (%sx%s) fits no available sheet",
                    piece.piece_id,
                    piece.copy,
                    piece.width,
                    piece.height,
                )
                unplaced.append(piece)
                continue

            sheets.append(sheet)
            candidates = sheet.find_candidates(piece)
            if not candidates:
                raise LayoutInvariantError(
                    f"Piece '{piece.piece_id}' does not fit the sheet opened for it",
                    sheet_id=sheet.id,
                )
            sheet.place(piece, candidates[0])

        run = EngineRun(sheets=sheets, unplaced=unplaced)
        for sheet in sheets:
            verify_sheet(sheet)
        return run

    def _check_deadline(self) -> None:
        if self.deadline is not None and time.monotonic() > self.deadline:
            raise BudgetExceeded("Heuristic run exceeded its deadline")

    def _place_on_open_sheet(
        self, piece: PieceInstance, sheets: list[SheetInstance]
    ) -> bool:
        """Place a piece at the best position across all open sheets."""
        best: tuple[SheetInstance, Candidate] | None = None
        for sheet in sheets:
            candidates = sheet.find_candidates(piece)
            if not candidates:
                continue
            # Strict comparison keeps the lowest sheet id on equal scores.
            if best is None or candidates[0].score < best[1].score:
                best = (sheet, candidates[0])

        if best is None:
            return False

        sheet, candidate = best
        placement = sheet.place(piece, candidate)
        logger.debug(
            "Placed '%s' #%d on sheet %d at (%s, %s)%s",
            piece.piece_id,
            piece.copy,
            sheet.id,
            placement.x,
            placement.y,
            " rotated" if placement.rotated else "",
        )
        return True

    def _open_sheet(
        self,
        piece: PieceInstance,
        remaining: list[int | None],
        sheet_id: int,
    ) -> SheetInstance | None:
        """Open the smallest available sheet type the piece fits on alone."""
        for type_index in self._opening_order:
            if remaining[type_index] == 0:
                continue
            sheet_type = self.sheet_types[type_index]
            if not piece.fits_alone(sheet_type):
                continue

            count = remaining[type_index]
            if count is not None:
                remaining[type_index] = count - 1
            logger.debug("Opened sheet %d of type '%s'", sheet_id, sheet_type.id)
            return SheetInstance(
                id=sheet_id,
                sheet_type=sheet_type,
                tracker=FreeSpaceTracker(sheet_type.width, sheet_type.height, self.kerf),
            )
        return None


def verify_sheet(sheet: SheetInstance) -> None:
    """Check the geometric invariants of a finished sheet.

    Raises:
        LayoutInvariantError: If a piece lies outside the sheet, two pieces
            overlap, a free rectangle overlaps a piece, or placed, free and
            scrap areas do not add up to the sheet area.
    """
    width = sheet.sheet_type.width
    height = sheet.sheet_type.height
    placements = sheet.placements

    for placement in placements:
        if placement.right_edge > width or placement.top_edge > height:
            raise LayoutInvariantError(
                f"Piece '{placement.piece.piece_id}' extends outside sheet {sheet.id}",
                sheet_id=sheet.id,
            )

    for i, first in enumerate(placements):
        for second in placements[i + 1:]:
            if first.overlaps(second):
                raise LayoutInvariantError(
                    f"Pieces '{first.piece.piece_id}' and '{second.piece.piece_id}' "
                    f"overlap on sheet {sheet.id}",
                    sheet_id=sheet.id,
                )

    for rect in sheet.tracker.free_rects:
        for placement in placements:
            if rect.overlaps(placement.x, placement.y, placement.width, placement.height):
                raise LayoutInvariantError(
                    f"Free space overlaps piece '{placement.piece.piece_id}' "
                    f"on sheet {sheet.id}",
                    sheet_id=sheet.id,
                )

    tracker = sheet.tracker
    accounted = tracker.used_area + tracker.free_area + tracker.scrap_area
    if not math.isclose(accounted, tracker.area, rel_tol=1e-9):
        raise LayoutInvariantError(
            f"Area mismatch on sheet {sheet.id}: {accounted} accounted "
            f"of {tracker.area}",
            sheet_id=sheet.id,
        )
