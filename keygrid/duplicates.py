"""Duplicate detection over normalized cell values."""

from __future__ import annotations

import logging
from typing import Optional

from .model import COLUMN_COUNT, CellCoordinate, Column, Worksheet, column_index

logger = logging.getLogger(__name__)


def normalize_value(value: str) -> str:
    """Trim surrounding whitespace and case-fold for comparison."""
    return value.strip().casefold()


class DuplicateIndex:
    """Normalized value -> coordinates holding it, for one worksheet snapshot.

    Built in one row-major pass; empty normalized values are never indexed,
    so blank cells can never form a duplicate group. Values are compared
    across all columns.
    """

    def __init__(self, groups: dict[str, tuple[CellCoordinate, ...]],
                 keys: dict[CellCoordinate, str]):
        self._groups = groups
        self._keys = keys

    @classmethod
    def build(cls, worksheet: Worksheet) -> "DuplicateIndex":
        collected: dict[str, list[CellCoordinate]] = {}
        keys: dict[CellCoordinate, str] = {}
        for row_idx, row in enumerate(worksheet):
            for col_idx, value in enumerate(row.values):
                normalized = normalize_value(value)
                if not normalized:
                    continue
                coord = CellCoordinate(row_idx, col_idx)
                collected.setdefault(normalized, []).append(coord)
                keys[coord] = normalized
        groups = {value: tuple(coords) for value, coords in collected.items()}
        return cls(groups, keys)

    def _key_for(self, row: int, column: Column) -> Optional[str]:
        try:
            col_idx = column_index(column)
        except IndexError:
            return None
        return self._keys.get(CellCoordinate(row, col_idx))

    def is_duplicate(self, row: int, column: Column) -> bool:
        key = self._key_for(row, column)
        if key is None:
            return False
        return len(self._groups[key]) >= 2

    def group_for(self, row: int, column: Column) -> tuple[CellCoordinate, ...]:
        key = self._key_for(row, column)
        if key is None:
            return ()
        return self._groups[key]

    def duplicate_cells(self) -> set[CellCoordinate]:
        return {
            coord
            for coords in self._groups.values()
            if len(coords) >= 2
            for coord in coords
        }

    @property
    def groups(self) -> dict[str, tuple[CellCoordinate, ...]]:
        return dict(self._groups)


class DuplicateTracker:
    """Memoizes the index of the most recent worksheet snapshot.

    Snapshots are immutable, so identity is a complete cache key: any
    mutation hands out a new Worksheet object and forces a rebuild.
    """

    def __init__(self):
        self._worksheet: Optional[Worksheet] = None
        self._index: Optional[DuplicateIndex] = None

    def index_for(self, worksheet: Worksheet) -> DuplicateIndex:
        if self._index is None or worksheet is not self._worksheet:
            self._index = DuplicateIndex.build(worksheet)
            self._worksheet = worksheet
            logger.debug(
                f"Rebuilt duplicate index over {len(worksheet)}x{COLUMN_COUNT} cells"
            )
        return self._index
