"""Terminal interface using Blessed for display and Curtsies for input."""

import blessed
from typing import Optional
import sys
import select

from .constants import GridConstants
from .view import (
    Segment,
    STYLE_DUPLICATE,
    STYLE_FOCUS,
    STYLE_FOCUS_DUPLICATE,
    STYLE_GUTTER,
    STYLE_HEADER,
    STYLE_SEPARATOR,
)


class TerminalInterface:
    """Handles terminal I/O using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None
        self._curtsies_active: bool = False

    def setup(self):
        """Enter fullscreen mode and prepare terminal."""
        print(self.term.enter_fullscreen)
        print(self.term.hide_cursor)
        print(self.term.clear)
        self.is_fullscreen = True
        if self._curtsies_input is None:
            try:
                from curtsies import Input  # type: ignore
                # Enter raw mode immediately so reads work
                self._curtsies_input = Input(keynames='curtsies')  # type: ignore
                self._curtsies_input.__enter__()
                self._curtsies_active = True
            except Exception:
                # Justification: curtsies may fail to initialize without a
                # real tty (CI, pipes). Run without input rather than crash.
                self._curtsies_input = None
                self._curtsies_active = False

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self.is_fullscreen:
            print(self.term.exit_fullscreen)
            print(self.term.normal_cursor)
            self.is_fullscreen = False
        if self._curtsies_input is not None:
            try:
                if self._curtsies_active:
                    self._curtsies_input.__exit__(None, None, None)  # type: ignore
            except Exception:
                # Justification: teardown should never crash the app. Any
                # failure to exit raw mode is non-fatal at this point.
                pass
            finally:
                self._curtsies_input = None
                self._curtsies_active = False

    def clear_screen(self):
        """Clear the entire screen."""
        print(self.term.clear)

    def style(self, name: str) -> str:
        """Return the terminal attribute sequence for a segment style."""
        if name == STYLE_HEADER:
            return self.term.bold
        if name in (STYLE_GUTTER, STYLE_SEPARATOR):
            return self.term.dim
        if name == STYLE_DUPLICATE:
            return self.term.black_on_yellow
        if name == STYLE_FOCUS:
            return self.term.reverse
        if name == STYLE_FOCUS_DUPLICATE:
            return self.term.reverse + self.term.yellow
        return ""

    def compose_line(self, segments: list[Segment], width: int) -> str:
        """Render styled segments, clipped to width columns."""
        out = []
        remaining = width
        for segment in segments:
            if remaining <= 0:
                break
            text = segment.text[:remaining]
            remaining -= len(text)
            attrs = self.style(segment.style)
            if attrs:
                out.append(attrs + text + self.term.normal)
            else:
                out.append(text)
        if remaining > 0:
            out.append(' ' * remaining)
        return ''.join(out)

    def draw_frame(self, lines: list[list[Segment]], cursor_y: Optional[int],
                   cursor_x: Optional[int], status_override: Optional[str] = None):
        """Draw the grid lines, the status line and place the cursor.

        Args:
            lines: Styled segments per screen line
            cursor_y: Edit cursor row, or None to hide the cursor
            cursor_x: Edit cursor column
            status_override: Message to show instead of the help hint
        """
        print(self.term.home + self.term.clear, end='')

        for y, segments in enumerate(lines):
            print(self.term.move(y, 0) + self.compose_line(segments, self.term.width), end='')

        print(self.term.move(self.term.height - 1, 0), end='')
        if status_override:
            print(status_override[:self.term.width].ljust(self.term.width), end='')
        else:
            help_text = GridConstants.HELP_HINT
            print(' ' * self.term.width, end='')
            print(self.term.move(self.term.height - 1, self.term.width - len(help_text) - 1), end='')
            print(help_text, end='')

        if cursor_y is not None and cursor_x is not None:
            print(self.term.move(cursor_y, cursor_x) + self.term.normal_cursor, end='', flush=True)
        else:
            print(self.term.hide_cursor, end='', flush=True)

    def draw_error_message(self, message1: str, message2: str = ""):
        """Draw an error message in the center of the screen.

        Args:
            message1: Primary error message
            message2: Secondary information
        """
        print(self.term.home + self.term.clear, end='')

        center_y = self.term.height // 2

        box_width = max(len(message1), len(message2)) + 4
        left_margin = max(0, (self.term.width - box_width) // 2)

        print(self.term.move(center_y - 2, left_margin) + "╔" + "═" * (box_width - 2) + "╗", end='')
        print(self.term.move(center_y - 1, left_margin) + "║ " + message1.center(box_width - 4) + " ║", end='')
        if message2:
            print(self.term.move(center_y, left_margin) + "║ " + message2.center(box_width - 4) + " ║", end='')
            print(self.term.move(center_y + 1, left_margin) + "╚" + "═" * (box_width - 2) + "╝", end='')
        else:
            print(self.term.move(center_y, left_margin) + "╚" + "═" * (box_width - 2) + "╝", end='')

        help_text = "Ctrl-Q to quit | Resize terminal to continue"
        help_pos = max(0, (self.term.width - len(help_text)) // 2)
        print(self.term.move(self.term.height - 1, help_pos), end='')
        print(help_text, end='', flush=True)

    def get_key(self, timeout=None):
        """Get a single keypress from the user.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            The curtsies key name as a string, a curtsies PasteEvent for
            pasted bursts, or None if nothing arrived.
        """
        if self._curtsies_input is None:
            return None
        if timeout is not None:
            t = 0.0 if timeout == 0 else float(timeout)
            r, _, _ = select.select([sys.stdin], [], [], t)
            if not r:
                return None
        evt = next(self._curtsies_input)
        if hasattr(evt, 'events'):
            return evt
        return str(evt)

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Terminal height in rows (excluding status line)."""
        return self.term.height - 1  # Reserve one line for status
