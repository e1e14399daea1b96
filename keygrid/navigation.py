"""Edit focus state machine for keyboard navigation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .model import COLUMN_COUNT, CellCoordinate, GridModel


@dataclass(frozen=True)
class NoFocus:
    """No cell is accepting input."""


@dataclass(frozen=True)
class FocusedAt:
    row: int
    column: int

    @property
    def coordinate(self) -> CellCoordinate:
        return CellCoordinate(self.row, self.column)


Focus = Union[NoFocus, FocusedAt]

NO_FOCUS = NoFocus()


class NavigationController:
    """Tracks the single cell in edit mode and moves it like a spreadsheet.

    Enter moves down, Tab moves right and Shift+Tab moves left, wrapping
    between rows at the column edges. Focus only decides which cell is
    editable; cell text is committed to the grid on every keystroke.
    """

    def __init__(self, grid: GridModel):
        self.grid = grid
        self._focus: Focus = NO_FOCUS

    @property
    def focus(self) -> Focus:
        return self._focus

    @property
    def is_focused(self) -> bool:
        return isinstance(self._focus, FocusedAt)

    def focus_cell(self, target_row: int, target_column: int) -> Focus:
        """Focus a cell, growing the worksheet and clamping the column."""
        if target_row < 0:
            return self._focus
        self.grid.ensure_row_exists(target_row)
        column = min(max(target_column, 0), COLUMN_COUNT - 1)
        self._focus = FocusedAt(target_row, column)
        return self._focus

    def advance_on_confirm(self) -> Focus:
        focus = self._focus
        if not isinstance(focus, FocusedAt):
            return focus
        return self.focus_cell(focus.row + 1, focus.column)

    def advance_on_step(self, forward: bool = True) -> Focus:
        focus = self._focus
        if not isinstance(focus, FocusedAt):
            return focus
        next_row = focus.row
        next_column = focus.column + (1 if forward else -1)
        if next_column >= COLUMN_COUNT:
            next_column = 0
            next_row += 1
        elif next_column < 0:
            next_column = COLUMN_COUNT - 1
            # Shift+Tab from the first cell stays on row 0
            next_row = max(0, focus.row - 1)
        return self.focus_cell(next_row, next_column)

    def move(self, delta_row: int, delta_column: int) -> Focus:
        focus = self._focus
        if not isinstance(focus, FocusedAt):
            return focus
        return self.focus_cell(focus.row + delta_row, focus.column + delta_column)

    def blur_if_outside(self, candidate_target: Optional[CellCoordinate]) -> Focus:
        """Drop focus unless it is moving to another cell of this grid."""
        if candidate_target is not None and self._is_grid_cell(candidate_target):
            return self._focus
        self._focus = NO_FOCUS
        return self._focus

    def _is_grid_cell(self, coordinate: CellCoordinate) -> bool:
        row, column = coordinate
        return 0 <= row < len(self.grid) and 0 <= column < COLUMN_COUNT
