"""Worksheet data model: column schema, rows and the grid owner."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, NamedTuple, Sequence, Union

from .constants import GridConstants

logger = logging.getLogger(__name__)

COLUMN_ORDER: tuple[str, ...] = (
    'Keyword',
    'Prefix',
    'Suffix',
    'Middle',
    'City',
    'FirstName',
    '3 letter',
    '4 letter',
    'Extensions',
)
COLUMN_COUNT = len(COLUMN_ORDER)

Column = Union[str, int]


class CellCoordinate(NamedTuple):
    row: int
    column: int


class OutOfRangeError(IndexError):
    """Raised when a row (or column index) does not exist."""


def column_index(column: Column) -> int:
    """Resolve a column name or position to its position in the schema."""
    if isinstance(column, str):
        try:
            return COLUMN_ORDER.index(column)
        except ValueError:
            raise KeyError(column) from None
    if not 0 <= column < COLUMN_COUNT:
        raise OutOfRangeError(f"column {column} outside 0..{COLUMN_COUNT - 1}")
    return column


@dataclass(frozen=True)
class Row:
    """One worksheet row: exactly one text value per schema column."""

    values: tuple[str, ...]

    def __post_init__(self):
        if len(self.values) != COLUMN_COUNT:
            raise ValueError(
                f"row needs {COLUMN_COUNT} values, got {len(self.values)}"
            )

    def __getitem__(self, column: Column) -> str:
        return self.values[column_index(column)]

    def __iter__(self) -> Iterator[str]:
        return iter(COLUMN_ORDER)

    def __len__(self) -> int:
        return COLUMN_COUNT

    def keys(self) -> tuple[str, ...]:
        return COLUMN_ORDER

    def items(self) -> Iterator[tuple[str, str]]:
        return zip(COLUMN_ORDER, self.values)

    def replace(self, column: Column, text: str) -> "Row":
        idx = column_index(column)
        if self.values[idx] == text:
            return self
        return Row(self.values[:idx] + (text,) + self.values[idx + 1:])

    def to_dict(self) -> dict[str, str]:
        return dict(zip(COLUMN_ORDER, self.values))


_EMPTY_ROW = Row(("",) * COLUMN_COUNT)


def create_empty_row() -> Row:
    """Build the row every addition starts from."""
    # Rows are immutable, so all empty rows can share one instance
    return _EMPTY_ROW


@dataclass(frozen=True)
class Worksheet:
    """Immutable snapshot of the ordered rows."""

    rows: tuple[Row, ...] = ()

    @classmethod
    def empty(cls, count: int = GridConstants.INITIAL_ROW_COUNT) -> "Worksheet":
        return cls(tuple(create_empty_row() for _ in range(count)))

    @classmethod
    def from_values(cls, rows: Sequence[Sequence[str]]) -> "Worksheet":
        """Build a worksheet from positional row values (handy in tests)."""
        return cls(tuple(Row(tuple(values)) for values in rows))

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def row(self, index: int) -> Row:
        if not 0 <= index < len(self.rows):
            raise OutOfRangeError(f"row {index} outside 0..{len(self.rows) - 1}")
        return self.rows[index]

    def cell(self, row: int, column: Column) -> str:
        return self.row(row)[column]

    def with_cell(self, row: int, column: Column, text: str) -> "Worksheet":
        current = self.row(row)
        updated = current.replace(column, text)
        if updated is current:
            return self
        return Worksheet(self.rows[:row] + (updated,) + self.rows[row + 1:])

    def padded_to(self, target_row: int) -> "Worksheet":
        """Return a worksheet where target_row is a valid index."""
        if target_row < len(self.rows):
            return self
        missing = target_row - len(self.rows) + 1
        return self.extended(missing)

    def extended(self, count: int) -> "Worksheet":
        if count <= 0:
            return self
        return Worksheet(self.rows + tuple(create_empty_row() for _ in range(count)))

    def pasted(self, start_row: int, start_column: int,
               grid: Sequence[Sequence[str]]) -> "Worksheet":
        """Write grid with its top-left value at (start_row, start_column).

        Rows are appended one at a time as the paste reaches past the end.
        Values landing outside the schema's columns are dropped.
        """
        if not grid:
            return self

        rows = list(self.rows)
        dropped = 0
        for row_offset, values in enumerate(grid):
            target_row = start_row + row_offset
            if target_row < 0:
                dropped += len(values)
                continue
            while target_row >= len(rows):
                rows.append(create_empty_row())

            updated = rows[target_row]
            for col_offset, value in enumerate(values):
                target_col = start_column + col_offset
                if target_col < 0 or target_col >= COLUMN_COUNT:
                    dropped += 1
                    continue
                updated = updated.replace(target_col, value)
            rows[target_row] = updated

        if dropped:
            logger.debug(f"Paste at ({start_row}, {start_column}) dropped {dropped} value(s)")
        return Worksheet(tuple(rows))


WorksheetListener = Callable[[Worksheet], None]


class GridModel:
    """Owns the current worksheet snapshot and all mutations of it.

    Every mutation replaces the snapshot with a new immutable Worksheet and
    notifies listeners (duplicate tracking, persistence) in registration
    order. Mutations that change nothing keep the snapshot and stay silent.
    """

    def __init__(self, worksheet: Worksheet | None = None):
        self._worksheet = worksheet if worksheet is not None else Worksheet.empty()
        self._listeners: list[WorksheetListener] = []

    @property
    def worksheet(self) -> Worksheet:
        return self._worksheet

    def __len__(self) -> int:
        return len(self._worksheet)

    def add_listener(self, listener: WorksheetListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: WorksheetListener) -> None:
        self._listeners.remove(listener)

    def get(self, row: int, column: Column) -> str:
        return self._worksheet.cell(row, column)

    def set(self, row: int, column: Column, text: str) -> None:
        """Overwrite one cell. The row must already exist."""
        self._commit(self._worksheet.with_cell(row, column, text))

    def ensure_row_exists(self, target_row: int) -> None:
        """Grow just enough for target_row to be a valid index."""
        grown = self._worksheet.padded_to(target_row)
        if grown is not self._worksheet:
            logger.debug(f"Growing worksheet from {len(self._worksheet)} to {len(grown)} rows")
        self._commit(grown)

    def append_rows(self, count: int) -> None:
        self._commit(self._worksheet.extended(count))

    def apply_paste(self, start_row: int, start_column: int, grid: list[list[str]]) -> None:
        """Apply a parsed paste grid as one edit."""
        self._commit(self._worksheet.pasted(start_row, start_column, grid))

    def _commit(self, worksheet: Worksheet) -> None:
        if worksheet is self._worksheet:
            return
        self._worksheet = worksheet
        for listener in list(self._listeners):
            listener(worksheet)
