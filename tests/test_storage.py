"""Unit tests for worksheet persistence."""

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import pytest

from keygrid.constants import GridConstants
from keygrid.model import COLUMN_ORDER, Worksheet
from keygrid.storage import (
    FileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    WorksheetStorage,
    deserialize_worksheet,
    serialize_worksheet,
)


def _sample_worksheet():
    return Worksheet.from_values([
        ["seo", "pre", "", "", "Paris", "Ann", "abc", "abcd", ".com"],
        ["", "", "", "", "", "", "", "", ""],
        ["café", "", "", "", "Zürich", "", "", "", ""],
    ])


class TestSerialization(unittest.TestCase):

    def test_rows_are_objects_in_schema_order(self):
        payload = json.loads(serialize_worksheet(_sample_worksheet()))
        self.assertEqual(len(payload), 3)
        self.assertEqual(list(payload[0].keys()), list(COLUMN_ORDER))
        self.assertEqual(payload[0]['City'], 'Paris')
        self.assertEqual(payload[2]['City'], 'Zürich')

    def test_round_trip(self):
        worksheet = _sample_worksheet()
        self.assertEqual(deserialize_worksheet(serialize_worksheet(worksheet)), worksheet)

    def test_values_are_trimmed_on_read(self):
        data = json.dumps([{"Keyword": "  seo  ", "City": "\tParis\n"}])
        worksheet = deserialize_worksheet(data)
        self.assertEqual(worksheet.cell(0, 'Keyword'), 'seo')
        self.assertEqual(worksheet.cell(0, 'City'), 'Paris')

    def test_missing_null_and_unknown_keys(self):
        data = json.dumps([{"Keyword": None, "Country": "FR", "3 letter": 123}])
        worksheet = deserialize_worksheet(data)
        self.assertEqual(worksheet.cell(0, 'Keyword'), '')
        self.assertEqual(worksheet.cell(0, 'Prefix'), '')
        self.assertEqual(worksheet.cell(0, '3 letter'), '123')
        self.assertEqual(len(worksheet.rows[0].values), len(COLUMN_ORDER))

    def test_malformed_payloads_raise_value_error(self):
        for data in (b"not json", b"{}", b"[]", b'"text"', b"[1, 2]", b"[null]", b"\xff\xfe\x00"):
            with self.subTest(data=data):
                with self.assertRaises(ValueError):
                    deserialize_worksheet(data)


class TestWorksheetStorageLoad(unittest.TestCase):

    def test_absent_value_gives_eight_empty_rows(self):
        storage = WorksheetStorage(MemoryKeyValueStore())
        self.assertEqual(storage.load(), Worksheet.empty(8))

    def test_malformed_value_falls_back(self):
        for data in (b"{broken", b"[]", b'{"rows": []}', b"[42]"):
            with self.subTest(data=data):
                store = MemoryKeyValueStore({GridConstants.STORAGE_KEY: data})
                with self.assertLogs('keygrid.storage', level='WARNING'):
                    worksheet = WorksheetStorage(store).load()
                self.assertEqual(worksheet, Worksheet.empty(8))

    def test_deeply_nested_value_falls_back(self):
        data = b"[" * 100000 + b"]" * 100000
        store = MemoryKeyValueStore({GridConstants.STORAGE_KEY: data})
        with self.assertLogs('keygrid.storage', level='WARNING'):
            worksheet = WorksheetStorage(store).load()
        self.assertEqual(worksheet, Worksheet.empty(8))

    def test_read_error_falls_back(self):
        class BrokenStore(KeyValueStore):
            def get(self, key):
                raise PermissionError("denied")

        with self.assertLogs('keygrid.storage', level='WARNING'):
            worksheet = WorksheetStorage(BrokenStore()).load()
        self.assertEqual(len(worksheet), 8)

    def test_loads_saved_worksheet(self):
        store = MemoryKeyValueStore()
        storage = WorksheetStorage(store)
        self.assertTrue(storage.save(_sample_worksheet()))
        self.assertEqual(WorksheetStorage(store).load(), _sample_worksheet())

    def test_uses_fixed_key(self):
        store = MemoryKeyValueStore()
        WorksheetStorage(store).save(Worksheet.empty(1))
        self.assertIsNotNone(store.get("excel_worksheet_data"))


class TestWorksheetStorageSave(unittest.TestCase):

    def test_write_failure_is_swallowed(self):
        class FullStore(MemoryKeyValueStore):
            def set(self, key, value):
                raise OSError(28, "No space left on device")

        with self.assertLogs('keygrid.storage', level='WARNING'):
            result = WorksheetStorage(FullStore()).save(_sample_worksheet())
        self.assertFalse(result)

    def test_unencodable_text_is_swallowed(self):
        worksheet = Worksheet.empty(1)
        worksheet = worksheet.with_cell(0, 0, "\ud800")
        with self.assertLogs('keygrid.storage', level='WARNING'):
            self.assertFalse(WorksheetStorage(MemoryKeyValueStore()).save(worksheet))


class TestFileKeyValueStore:
    """File store tests using pytest's tmp_path."""

    def test_missing_key_reads_none(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        assert store.get("nothing") is None

    def test_set_creates_directory_and_file(self, tmp_path):
        store = FileKeyValueStore(tmp_path / "nested" / "dir")
        store.set("k", b"[1]")
        assert store.get("k") == b"[1]"
        assert store.path_for("k").exists()

    def test_set_overwrites_without_leaving_temp_files(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        store.set("k", b"first")
        store.set("k", b"second")
        assert store.get("k") == b"second"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]

    def test_failed_rename_cleans_up_and_raises(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        with patch("keygrid.storage.os.replace", side_effect=OSError("boom")):
            with pytest.raises(OSError):
                store.set("k", b"data")
        assert list(tmp_path.iterdir()) == []

    def test_default_directory_comes_from_platformdirs(self):
        with patch("keygrid.storage.platformdirs.user_data_dir", return_value="/tmp/kg-data") as user_dir:
            store = FileKeyValueStore()
        user_dir.assert_called_once_with("keygrid", "keygrid")
        assert store.directory == Path("/tmp/kg-data")


class TestStorageOnDisk(unittest.TestCase):
    """End-to-end persistence through a real directory."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_save_then_load_in_new_session(self):
        WorksheetStorage(FileKeyValueStore(self.temp_dir)).save(_sample_worksheet())
        loaded = WorksheetStorage(FileKeyValueStore(self.temp_dir)).load()
        self.assertEqual(loaded, _sample_worksheet())

    def test_corrupt_file_falls_back(self):
        path = Path(self.temp_dir) / "excel_worksheet_data.json"
        path.write_bytes(b"[{\"Keyword\": ")
        with self.assertLogs('keygrid.storage', level='WARNING'):
            loaded = WorksheetStorage(FileKeyValueStore(self.temp_dir)).load()
        self.assertEqual(loaded, Worksheet.empty(8))
