"""Clipboard text parsing and multi-cell paste application."""

from __future__ import annotations

import re

from .model import Worksheet

_LINE_BREAK = re.compile(r"\r\n|\n|\r")
_CELL_SEPARATOR = "\t"


def parse_clipboard_text(raw_text: str) -> list[list[str]]:
    """Split clipboard text into rows of cell values.

    Rows break on CRLF, LF or CR; cells on tabs. Values are kept verbatim.
    An empty payload yields an empty grid, meaning "nothing to paste".
    A trailing line break yields a last row with a single empty value.
    """
    if not raw_text:
        return []
    return [line.split(_CELL_SEPARATOR) for line in _LINE_BREAK.split(raw_text)]


def apply_paste(worksheet: Worksheet, start_row: int, start_column: int,
                grid: list[list[str]]) -> Worksheet:
    """Return worksheet with grid written at (start_row, start_column).

    See Worksheet.pasted for growth and clipping rules.
    """
    return worksheet.pasted(start_row, start_column, grid)
