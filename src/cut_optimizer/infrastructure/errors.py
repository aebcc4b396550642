"""Exceptions raised by the optimization engine."""


class BudgetExceeded(Exception):
    """Raised inside a heuristic run when its deadline has passed."""


class LayoutInvariantError(Exception):
    """Raised when the engine produces an impossible layout.

    This signals a defect in the engine itself (overlapping pieces,
    pieces outside the sheet, or unbalanced area accounting), never
    a problem with the input.

    Attributes:
        sheet_id: Sheet instance where the defect was found, if known.
    """

    def __init__(self, message: str, sheet_id: int | None = None) -> None:
        self.sheet_id = sheet_id
        super().__init__(message)
