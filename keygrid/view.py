"""Viewport layout for drawing the worksheet in a terminal."""

from dataclasses import dataclass
from typing import Optional

from .constants import GridConstants
from .duplicates import DuplicateIndex
from .model import COLUMN_COUNT, COLUMN_ORDER, Worksheet
from .navigation import FocusedAt, Focus

# Segment styles understood by TerminalInterface
STYLE_HEADER = "header"
STYLE_GUTTER = "gutter"
STYLE_SEPARATOR = "separator"
STYLE_CELL = "cell"
STYLE_DUPLICATE = "duplicate"
STYLE_FOCUS = "focus"
STYLE_FOCUS_DUPLICATE = "focus_duplicate"

ELLIPSIS = "…"


@dataclass(frozen=True)
class Segment:
    text: str
    style: str


def _printable(text: str) -> str:
    """Map control characters to spaces so a cell stays one line."""
    return ''.join(ch if ord(ch) >= 32 else ' ' for ch in text)


def _editing_tail(text: str, width: int) -> str:
    """The end of text that fits in width while leaving room for the cursor."""
    text = _printable(text)
    if len(text) >= width:
        return text[-(width - 1):] if width > 1 else ""
    return text


def format_cell(text: str, width: int, focused: bool = False) -> str:
    """Fit text into width columns.

    Unfocused cells are cut with an ellipsis. The focused cell shows the
    end of its value with room for the edit cursor after it.
    """
    if focused:
        return _editing_tail(text, width).ljust(width)
    text = _printable(text)
    if len(text) > width:
        return text[:width - 1] + ELLIPSIS
    return text.ljust(width)


class GridView:
    """Scrollable window over the worksheet.

    render() lays out a header line and one line per visible row, each a
    list of styled segments, and records where the edit cursor belongs.
    """

    def __init__(self, num_rows: int = 24, num_columns: int = 80):
        self.num_rows = num_rows  # Lines available, header included
        self.num_columns = num_columns
        self.first_row = 0
        self.first_column = 0
        self.lines: list[list[Segment]] = []
        self.cursor_y: Optional[int] = None
        self.cursor_x: Optional[int] = None

    @property
    def visible_row_count(self) -> int:
        return max(1, self.num_rows - GridConstants.HEADER_ROWS)

    @property
    def visible_column_count(self) -> int:
        usable = self.num_columns - GridConstants.ROW_NUMBER_WIDTH
        fit = usable // (GridConstants.CELL_WIDTH + len(GridConstants.CELL_SEPARATOR))
        return min(COLUMN_COUNT, max(1, fit))

    def scroll_to(self, row: int, column: int) -> None:
        """Adjust the scroll offsets so (row, column) is on screen."""
        rows = self.visible_row_count
        if row < self.first_row:
            self.first_row = row
        elif row >= self.first_row + rows:
            self.first_row = row - rows + 1

        cols = self.visible_column_count
        if column < self.first_column:
            self.first_column = column
        elif column >= self.first_column + cols:
            self.first_column = column - cols + 1
        self.first_column = max(0, min(self.first_column, COLUMN_COUNT - cols))

    def visible_columns(self) -> range:
        start = self.first_column
        return range(start, min(COLUMN_COUNT, start + self.visible_column_count))

    def visible_rows(self) -> range:
        return range(self.first_row, self.first_row + self.visible_row_count)

    def render(self, worksheet: Worksheet, duplicates: DuplicateIndex, focus: Focus) -> list[list[Segment]]:
        if isinstance(focus, FocusedAt):
            self.scroll_to(focus.row, focus.column)
        else:
            self.first_row = max(0, min(self.first_row, len(worksheet) - 1))

        width = GridConstants.CELL_WIDTH
        gutter = GridConstants.ROW_NUMBER_WIDTH
        sep = GridConstants.CELL_SEPARATOR
        columns = self.visible_columns()

        self.cursor_y = None
        self.cursor_x = None

        header = [Segment("#".ljust(gutter), STYLE_GUTTER)]
        for col_idx in columns:
            header.append(Segment(sep, STYLE_SEPARATOR))
            header.append(Segment(format_cell(COLUMN_ORDER[col_idx], width), STYLE_HEADER))
        lines = [header]

        for y, row_idx in enumerate(self.visible_rows(), start=GridConstants.HEADER_ROWS):
            if row_idx >= len(worksheet):
                lines.append([])
                continue
            row = worksheet.rows[row_idx]
            line = [Segment(f"{row_idx + 1:>{gutter - 1}} ", STYLE_GUTTER)]
            x = gutter
            for col_idx in columns:
                line.append(Segment(sep, STYLE_SEPARATOR))
                x += len(sep)
                value = row.values[col_idx]
                focused = (isinstance(focus, FocusedAt)
                           and focus.row == row_idx and focus.column == col_idx)
                duplicate = duplicates.is_duplicate(row_idx, col_idx)
                text = format_cell(value, width, focused=focused)
                if focused:
                    style = STYLE_FOCUS_DUPLICATE if duplicate else STYLE_FOCUS
                    self.cursor_y = y
                    self.cursor_x = x + len(_editing_tail(value, width))
                elif duplicate:
                    style = STYLE_DUPLICATE
                else:
                    style = STYLE_CELL
                line.append(Segment(text, style))
                x += width
            lines.append(line)

        self.lines = lines
        return lines
