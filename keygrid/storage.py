"""Worksheet persistence in a durable key-value byte store.

The worksheet is stored under one fixed key as a JSON array of row objects.
Reads fall back to a fresh worksheet on any problem and writes never raise,
so the in-memory worksheet stays authoritative for the session.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

import platformdirs

from .constants import GridConstants
from .model import COLUMN_ORDER, Row, Worksheet

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Minimal byte store interface."""

    def get(self, key: str) -> Optional[bytes]:
        raise NotImplementedError

    def set(self, key: str, value: bytes) -> None:
        raise NotImplementedError


class MemoryKeyValueStore(KeyValueStore):
    """In-process store; nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._data: Dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = value


class FileKeyValueStore(KeyValueStore):
    """One file per key in the user's data directory.

    Writes go to a temporary file in the same directory which is then
    renamed over the target, so a crash never leaves a half-written value.
    """

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        if directory is None:
            directory = platformdirs.user_data_dir(
                GridConstants.APP_NAME, GridConstants.APP_AUTHOR
            )
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        return self._directory / f"{key}.json"

    def get(self, key: str) -> Optional[bytes]:
        try:
            return self.path_for(key).read_bytes()
        except FileNotFoundError:
            return None

    def set(self, key: str, value: bytes) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        target = self.path_for(key)
        temp_filename = None
        try:
            with tempfile.NamedTemporaryFile(
                mode='wb',
                dir=self._directory,
                prefix=GridConstants.ATOMIC_SAVE_PREFIX + target.name,
                suffix=GridConstants.ATOMIC_SAVE_SUFFIX,
                delete=False
            ) as temp_file:
                temp_filename = temp_file.name
                temp_file.write(value)
                temp_file.flush()
                os.fsync(temp_file.fileno())

            # Atomic rename
            os.replace(temp_filename, target)
        except OSError:
            if temp_filename is not None:
                try:
                    os.remove(temp_filename)
                except OSError:
                    pass
            raise


def serialize_worksheet(worksheet: Worksheet) -> bytes:
    """Encode the worksheet as a JSON array of row objects."""
    payload = [row.to_dict() for row in worksheet]
    return json.dumps(payload, ensure_ascii=False).encode('utf-8')


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def deserialize_worksheet(data: Union[bytes, str]) -> Worksheet:
    """Decode a stored worksheet.

    Values are trimmed, missing columns become empty and unknown keys are
    ignored.

    Raises:
        ValueError: If the data is not a non-empty JSON array of objects.
    """
    try:
        parsed = json.loads(data)
    except UnicodeDecodeError as e:
        raise ValueError(f"stored worksheet is not UTF-8: {e}") from e
    except RecursionError as e:
        raise ValueError(f"stored worksheet is nested too deeply: {e}") from e
    # json.JSONDecodeError is a ValueError and propagates as-is

    if not isinstance(parsed, list) or not parsed:
        raise ValueError("stored worksheet is not a non-empty list")

    rows = []
    for position, entry in enumerate(parsed):
        if not isinstance(entry, dict):
            raise ValueError(f"stored row {position} is not an object")
        rows.append(Row(tuple(_cell_text(entry.get(column)) for column in COLUMN_ORDER)))
    return Worksheet(tuple(rows))


class WorksheetStorage:
    """Loads the worksheet at startup and writes it through on every change."""

    def __init__(self, store: Optional[KeyValueStore] = None,
                 key: str = GridConstants.STORAGE_KEY):
        self.store = store if store is not None else FileKeyValueStore()
        self.key = key

    def load(self) -> Worksheet:
        """Return the stored worksheet, or a fresh one if none is usable."""
        try:
            data = self.store.get(self.key)
        except OSError as e:
            logger.warning(f"Could not read saved worksheet, starting empty: {e}")
            return self._fresh()

        if data is None:
            return self._fresh()

        try:
            worksheet = deserialize_worksheet(data)
        except ValueError as e:
            logger.warning(f"Failed to load saved worksheet data, falling back to empty rows: {e}")
            return self._fresh()

        logger.debug(f"Loaded worksheet with {len(worksheet)} rows")
        return worksheet

    def save(self, worksheet: Worksheet) -> bool:
        """Persist the full worksheet.

        Returns:
            True if the write succeeded, False otherwise.
        """
        try:
            self.store.set(self.key, serialize_worksheet(worksheet))
        except (OSError, UnicodeError) as e:
            logger.warning(f"Failed to persist worksheet data: {e}")
            return False
        return True

    @staticmethod
    def _fresh() -> Worksheet:
        return Worksheet.empty(GridConstants.INITIAL_ROW_COUNT)
