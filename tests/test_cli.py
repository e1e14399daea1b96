"""Tests for command line handling and the version string."""

import logging
import re
from unittest.mock import patch

import pytest

from keygrid import __main__ as cli
from keygrid import version
from keygrid.storage import FileKeyValueStore, MemoryKeyValueStore


def test_parse_defaults():
    options = cli.parse_args([])
    assert options == {
        'version': False,
        'keytest': False,
        'data_dir': None,
        'no_save': False,
        'log': None,
        'log_level': 'INFO',
    }


def test_parse_flags_and_values():
    options = cli.parse_args(['--no-save', '--data-dir', '/tmp/grid', '--log', 'kg.log',
                              '--log-level', 'debug', '-V'])
    assert options['no_save'] is True
    assert options['data_dir'] == '/tmp/grid'
    assert options['log'] == 'kg.log'
    assert options['log_level'] == 'debug'
    assert options['version'] is True


def test_parse_unknown_argument():
    with pytest.raises(SystemExit, match="unknown argument"):
        cli.parse_args(['--bogus'])


def test_parse_missing_value():
    with pytest.raises(SystemExit, match="needs a value"):
        cli.parse_args(['--data-dir'])


def test_bad_log_level(tmp_path):
    with pytest.raises(SystemExit, match="unknown log level"):
        cli.configure_logging(str(tmp_path / "kg.log"), "chatty")


def test_logging_to_file(tmp_path):
    log_file = tmp_path / "kg.log"
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    root.handlers = []
    try:
        cli.configure_logging(str(log_file), "debug")
        logging.getLogger("keygrid.test").debug("hello from the grid")
        for handler in root.handlers:
            handler.flush()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = handlers
        root.setLevel(level)
    assert "hello from the grid" in log_file.read_text()


def test_version_flag(capsys):
    with patch.object(cli, 'get_version_string', return_value="keygrid 1.2.3 (abc1234 2026-01-01)"):
        cli.main(['--version'])
    assert capsys.readouterr().out.strip() == "keygrid 1.2.3 (abc1234 2026-01-01)"


def test_main_uses_memory_store_with_no_save():
    with patch('keygrid.editor.Editor') as editor_cls:
        cli.main(['--no-save'])
    storage = editor_cls.call_args.kwargs['storage']
    assert isinstance(storage.store, MemoryKeyValueStore)
    editor_cls.return_value.run.assert_called_once()


def test_main_uses_data_dir(tmp_path):
    with patch('keygrid.editor.Editor') as editor_cls:
        cli.main(['--data-dir', str(tmp_path)])
    storage = editor_cls.call_args.kwargs['storage']
    assert isinstance(storage.store, FileKeyValueStore)
    assert storage.store.directory == tmp_path


def test_version_string_format():
    info = version.BuildInfo(commit="0123456789abcdef", date="2026-01-02T03:04:05+00:00", dirty=True)
    with patch.object(version, 'get_build_info', return_value=info), \
         patch.object(version, 'get_package_version', return_value="0.1.0"):
        text = version.get_version_string()
    assert text == "keygrid 0.1.0 (0123456-dirty 2026-01-02T03:04:05+00:00)"


def test_version_string_without_build_info():
    info = version.BuildInfo(commit=None, date=None, dirty=False)
    with patch.object(version, 'get_build_info', return_value=info):
        text = version.get_version_string()
    assert re.fullmatch(r"keygrid \S+ \(unknown unknown\)", text)
