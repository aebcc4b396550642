"""Value objects for the cut optimizer domain.

All dataclasses are frozen (immutable) so they can be shared between
heuristic runs and sent to worker processes without copying concerns.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PatternDirection(str, Enum):
    """Direction of a material pattern (wood grain, brushed finish, etc.)."""

    NONE = "none"
    PARALLEL_TO_WIDTH = "parallelToWidth"
    PARALLEL_TO_LENGTH = "parallelToLength"

    def rotated(self) -> "PatternDirection":
        """Pattern direction after a 90 degree rotation."""
        if self is PatternDirection.PARALLEL_TO_WIDTH:
            return PatternDirection.PARALLEL_TO_LENGTH
        if self is PatternDirection.PARALLEL_TO_LENGTH:
            return PatternDirection.PARALLEL_TO_WIDTH
        return self


@dataclass(frozen=True)
class CutPiece:
    """A rectangular piece to be cut, possibly in several copies.

    Attributes:
        id: External identifier reported back in placements.
        width: Piece width.
        height: Piece height (called length on the wire).
        quantity: Number of identical copies to cut.
        can_rotate: Whether the piece may be turned 90 degrees.
        pattern_direction: Pattern the piece must keep aligned with its sheet.
    """

    id: str
    width: float
    height: float
    quantity: int = 1
    can_rotate: bool = True
    pattern_direction: PatternDirection = PatternDirection.NONE

    @property
    def area(self) -> float:
        """Area of a single copy."""
        return self.width * self.height


@dataclass(frozen=True)
class StockSheet:
    """A type of stock sheet pieces can be cut from.

    Attributes:
        id: External identifier of the sheet type.
        width: Sheet width.
        height: Sheet height.
        quantity: Sheets available, or None for an unlimited supply.
        cost: Price of one sheet.
        pattern_direction: Pattern running across the sheet.
    """

    id: str
    width: float
    height: float
    quantity: int | None = None
    cost: float = 0.0
    pattern_direction: PatternDirection = PatternDirection.NONE

    @property
    def area(self) -> float:
        """Area of one sheet."""
        return self.width * self.height


@dataclass(frozen=True)
class PieceInstance:
    """One physical copy of a cut piece.

    Attributes:
        index: Position in the expanded piece list, used as the
            deterministic tie-breaker when pieces are re-ordered.
        piece: The cut piece this copy belongs to.
        copy: Zero-based copy number within the piece's quantity.
    """

    index: int
    piece: CutPiece
    copy: int = 0

    @property
    def piece_id(self) -> str:
        return self.piece.id

    @property
    def width(self) -> float:
        return self.piece.width

    @property
    def height(self) -> float:
        return self.piece.height

    @property
    def area(self) -> float:
        return self.piece.area

    def can_orient(self, sheet: StockSheet, rotated: bool) -> bool:
        """Check whether this piece may be placed on a sheet type in an orientation.

        Rotation needs the piece's rotation flag. A patterned piece must
        end up with its (rotation-adjusted) pattern matching the sheet's.
        """
        if rotated and not self.piece.can_rotate:
            return False
        pattern = self.piece.pattern_direction
        if pattern is PatternDirection.NONE:
            return True
        if rotated:
            pattern = pattern.rotated()
        return pattern == sheet.pattern_direction

    def fits_alone(self, sheet: StockSheet) -> bool:
        """Check whether this piece fits on an empty sheet of the given type."""
        if self.can_orient(sheet, rotated=False):
            if self.width <= sheet.width and self.height <= sheet.height:
                return True
        if self.width != self.height and self.can_orient(sheet, rotated=True):
            if self.height <= sheet.width and self.width <= sheet.height:
                return True
        return False


@dataclass(frozen=True)
class FreeRectangle:
    """An unused rectangular region of a sheet."""

    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def right_edge(self) -> float:
        return self.x + self.width

    @property
    def top_edge(self) -> float:
        return self.y + self.height

    def can_hold(self, width: float, height: float) -> bool:
        """Check whether a width x height rectangle fits inside."""
        return width <= self.width and height <= self.height

    def overlaps(self, x: float, y: float, width: float, height: float) -> bool:
        """Check whether the interior of this rectangle meets another."""
        return (
            self.x < x + width
            and x < self.right_edge
            and self.y < y + height
            and y < self.top_edge
        )


@dataclass(frozen=True)
class Placement:
    """A piece copy placed at a position on an opened sheet.

    Coordinates are measured from the sheet's bottom-left corner.

    Attributes:
        piece: The placed piece copy.
        sheet_id: Id of the sheet instance holding the piece.
        x: Horizontal position of the piece's left edge.
        y: Vertical position of the piece's bottom edge.
        rotated: True if the piece is turned 90 degrees.
    """

    piece: PieceInstance
    sheet_id: int
    x: float
    y: float
    rotated: bool = False

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError("Position coordinates must be non-negative")

    @property
    def width(self) -> float:
        """Width as placed (accounts for rotation)."""
        return self.piece.height if self.rotated else self.piece.width

    @property
    def height(self) -> float:
        """Height as placed (accounts for rotation)."""
        return self.piece.width if self.rotated else self.piece.height

    @property
    def right_edge(self) -> float:
        return self.x + self.width

    @property
    def top_edge(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def overlaps(self, other: "Placement") -> bool:
        """Check whether two placed pieces share any interior area."""
        return (
            self.x < other.right_edge
            and other.x < self.right_edge
            and self.y < other.top_edge
            and other.y < self.top_edge
        )
