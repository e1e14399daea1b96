"""Test keyboard input handling."""

import pytest
from unittest.mock import Mock
from keygrid.keyboard import KeyboardHandler, KeyEvent, KeyType, paste_tokens_to_text


class MockTerminal:
    """Mock terminal interface for testing."""

    def __init__(self):
        self._key_queue = []

    def get_key(self, timeout=None):
        """Mock get_key that returns from queue."""
        if self._key_queue:
            return self._key_queue.pop(0)
        return None

    def add_key(self, key):
        self._key_queue.append(key)


@pytest.fixture
def handler():
    return KeyboardHandler(MockTerminal())


def test_no_key_returns_none(handler):
    assert handler.get_key_event(timeout=0) is None


def test_tab_is_special(handler):
    for token in ('<TAB>', '\t', '<Ctrl-i>'):
        event = handler.parse_key(token)
        assert event.key_type == KeyType.SPECIAL
        assert event.value == 'tab'


def test_shift_tab_is_shift_special(handler):
    for token in ('<Shift-TAB>', '<KEY_BTAB>'):
        event = handler.parse_key(token)
        assert event.key_type == KeyType.SHIFT_SPECIAL
        assert event.value == 'tab'
        assert event.is_shift


def test_enter_variants(handler):
    for token in ('<Ctrl-j>', '<Ctrl-m>', '<ENTER>', '\n', '\r'):
        event = handler.parse_key(token)
        assert event.key_type == KeyType.SPECIAL
        assert event.value == 'enter'


def test_arrows_and_paging(handler):
    assert handler.parse_key('<UP>').value == 'up'
    assert handler.parse_key('<LEFT>').value == 'left'
    assert handler.parse_key('<PAGEDOWN>').value == 'page_down'
    assert handler.parse_key('<PAGEUP>').value == 'page_up'


def test_ctrl_letters(handler):
    event = handler.parse_key('<Ctrl-v>')
    assert event.key_type == KeyType.CTRL
    assert event.value == 'v'
    assert event.is_ctrl
    raw = handler.parse_key('\x0e')  # Ctrl-N as a raw byte
    assert raw.key_type == KeyType.CTRL
    assert raw.value == 'n'


def test_escape_and_function_keys(handler):
    assert handler.parse_key('<ESC>').value == 'escape'
    assert handler.parse_key('\x1b').value == 'escape'
    f1 = handler.parse_key('<F1>')
    assert f1.key_type == KeyType.SPECIAL
    assert f1.value == 'f1'


def test_backspace_variants(handler):
    assert handler.parse_key('<BACKSPACE>').value == 'backspace'
    assert handler.parse_key('\x7f').value == 'backspace'


def test_regular_characters(handler):
    event = handler.parse_key('é')
    assert event.key_type == KeyType.REGULAR
    assert event.value == 'é'
    assert handler.parse_key('<SPACE>').value == ' '
    assert handler.parse_key('<').value == '<'


def test_paste_event_becomes_text(handler):
    paste = Mock()
    paste.events = ['a', '<TAB>', 'b', '<Ctrl-j>', 'c', '<SPACE>', 'd']
    handler.terminal.add_key(paste)
    event = handler.get_key_event()
    assert event.key_type == KeyType.PASTE
    assert event.value == "a\tb\nc d"


def test_paste_tokens_skip_other_named_keys():
    assert paste_tokens_to_text(['x', '<UP>', '<Ctrl-m>', '<Ctrl-j>', 'y']) == "x\r\ny"


def test_key_event_defaults():
    event = KeyEvent(key_type=KeyType.REGULAR, value='a', raw='a')
    assert not (event.is_alt or event.is_ctrl or event.is_shift)
