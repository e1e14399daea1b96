"""Keygrid - a terminal worksheet for keyword lists with duplicate highlighting."""

from .model import (
    COLUMN_COUNT,
    COLUMN_ORDER,
    CellCoordinate,
    GridModel,
    OutOfRangeError,
    Row,
    Worksheet,
    create_empty_row,
)
from .duplicates import DuplicateIndex, DuplicateTracker, normalize_value
from .navigation import NO_FOCUS, FocusedAt, NavigationController, NoFocus
from .paste import apply_paste, parse_clipboard_text
from .storage import WorksheetStorage

__all__ = [
    'COLUMN_COUNT',
    'COLUMN_ORDER',
    'CellCoordinate',
    'GridModel',
    'OutOfRangeError',
    'Row',
    'Worksheet',
    'create_empty_row',
    'DuplicateIndex',
    'DuplicateTracker',
    'normalize_value',
    'NO_FOCUS',
    'FocusedAt',
    'NavigationController',
    'NoFocus',
    'apply_paste',
    'parse_clipboard_text',
    'WorksheetStorage',
]
