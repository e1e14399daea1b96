"""Keyboard input handling using curtsies-style tokens."""

from typing import Optional
from dataclasses import dataclass
from enum import Enum


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    ALT = "alt"
    CTRL = "ctrl"
    SPECIAL = "special"
    SHIFT_SPECIAL = "shift_special"  # Shift + Tab, Shift + arrows
    PASTE = "paste"  # Bracketed/burst paste; value holds the pasted text


@dataclass
class KeyEvent:
    """Represents a parsed keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'tab') or pasted text
    raw: str  # The raw key string from curtsies
    is_alt: bool = False
    is_ctrl: bool = False
    is_shift: bool = False
    is_sequence: bool = False
    code: Optional[int] = None


SPECIAL_KEYS = {
    'left', 'right', 'up', 'down', 'home', 'end', 'enter', 'backspace', 'delete',
    'page_up', 'page_down', 'insert', 'tab',
}

# Tokens inside a paste burst that stand for a character
_PASTE_TOKEN_TEXT = {
    '<TAB>': '\t',
    '<Ctrl-j>': '\n',
    '<Ctrl-m>': '\r',
    '<ENTER>': '\n',
    '<SPACE>': ' ',
    '<Ctrl-i>': '\t',
}


def paste_tokens_to_text(tokens) -> str:
    """Rebuild pasted text from the key tokens of a curtsies paste event."""
    out = []
    for token in tokens:
        token = str(token)
        if token in _PASTE_TOKEN_TEXT:
            out.append(_PASTE_TOKEN_TEXT[token])
        elif token.startswith('<') and token.endswith('>') and len(token) > 2:
            # Other named keys carry no text
            continue
        else:
            out.append(token)
    return ''.join(out)


class KeyboardHandler:
    """Handles keyboard input using curtsies-style key names."""

    def __init__(self, terminal_interface):
        """Initialize with a terminal interface."""
        self.terminal = terminal_interface

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        """Get next key event and map curtsies-style names to KeyEvent."""
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        return self.parse_key(key)

    def parse_key(self, key) -> KeyEvent:
        """Parse a curtsies key token (or paste event) into a KeyEvent."""
        events = getattr(key, 'events', None)
        if events is not None:
            text = paste_tokens_to_text(events)
            return KeyEvent(key_type=KeyType.PASTE, value=text, raw=text, is_sequence=True)

        key_str = str(key)

        # Curtsies-style key names like '<LEFT>', '<Ctrl-x>', '<Shift-TAB>'
        if key_str.startswith('<') and key_str.endswith('>') and len(key_str) > 2:
            name = key_str[1:-1]
            lower = name.lower()
            # Support both '-' and '+' as modifier separators (e.g., '<Esc+u>')
            lower = lower.replace('+', '-')
            parts = lower.split('-') if '-' in lower else [lower]
            mods = set()
            base = parts[-1]
            if len(parts) > 1:
                mods = set(parts[:-1])
            if 'meta' in mods or 'esc' in mods:
                mods.add('alt')
            if base in ('pageup', 'page_up'):
                base = 'page_up'
            elif base in ('pagedown', 'page_down'):
                base = 'page_down'
            elif base in ('btab', 'key_btab'):
                base = 'tab'
                mods.add('shift')

            if base in ('space', 'spacebar', 'spc') and not mods:
                return KeyEvent(key_type=KeyType.REGULAR, value=' ', raw=' ')
            if 'ctrl' in mods and len(base) == 1:
                # Ctrl-J / Ctrl-M are what terminals send for Enter
                if base in ('j', 'm'):
                    return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str, is_sequence=True)
                if base == 'i':
                    return KeyEvent(key_type=KeyType.SPECIAL, value='tab', raw=key_str, is_sequence=True)
                return KeyEvent(key_type=KeyType.CTRL, value=base, raw=key_str, is_ctrl=True)
            if 'alt' in mods:
                if base in SPECIAL_KEYS or len(base) == 1:
                    return KeyEvent(key_type=KeyType.ALT, value=base, raw=key_str, is_alt=True)
            if 'shift' in mods and base in SPECIAL_KEYS:
                return KeyEvent(key_type=KeyType.SHIFT_SPECIAL, value=base, raw=key_str, is_shift=True, is_sequence=True)
            if base in SPECIAL_KEYS:
                return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str, is_sequence=True)
            if base in ('esc', 'escape'):
                return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw='\x1b')
            # Fallback: treat unknown token as special (e.g., 'f1')
            return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str, is_sequence=True)

        if key_str == '\t':
            return KeyEvent(key_type=KeyType.SPECIAL, value='tab', raw=key_str)

        # Single-byte ASCII control chars (Ctrl-<letter>)
        if len(key_str) == 1:
            o = ord(key_str)
            if 1 <= o <= 26:  # Ctrl-A .. Ctrl-Z (exclude ESC=27)
                ch = chr(ord('a') + o - 1)
                if ch in ('j', 'm'):
                    return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str)
                return KeyEvent(key_type=KeyType.CTRL, value=ch, raw=key_str, is_ctrl=True)
            if o == 127:
                return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=key_str)

        # Bare ESC
        if key_str == '\x1b':
            return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw='\x1b')

        # Regular character
        return KeyEvent(
            key_type=KeyType.REGULAR,
            value=key_str,
            raw=key_str,
            is_sequence=False
        )
