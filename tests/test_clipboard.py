"""Tests for system clipboard access."""

from unittest.mock import patch

import pyperclip

from keygrid.clipboard import ClipboardManager


def test_paste_returns_clipboard_text():
    with patch("keygrid.clipboard.pyperclip.paste", return_value="a\tb"):
        assert ClipboardManager.paste_text() == "a\tb"


def test_paste_failure_returns_empty_text(caplog):
    with patch("keygrid.clipboard.pyperclip.paste",
               side_effect=pyperclip.PyperclipException("no mechanism")):
        assert ClipboardManager.paste_text() == ""
    assert "Could not read clipboard" in caplog.text


def test_paste_none_is_empty_text():
    with patch("keygrid.clipboard.pyperclip.paste", return_value=None):
        assert ClipboardManager.paste_text() == ""


def test_copy_text():
    with patch("keygrid.clipboard.pyperclip.copy") as copy:
        assert ClipboardManager.copy_text("Paris") is True
    copy.assert_called_once_with("Paris")


def test_copy_failure_is_reported():
    with patch("keygrid.clipboard.pyperclip.copy",
               side_effect=pyperclip.PyperclipException("no mechanism")):
        assert ClipboardManager.copy_text("Paris") is False
