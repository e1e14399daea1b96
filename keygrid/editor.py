"""Main editor controller for the worksheet grid."""

import logging
import os
import sys
import select
import signal
import termios
from typing import Optional

from .commands import CommandRegistry
from .constants import GridConstants
from .duplicates import DuplicateIndex, DuplicateTracker
from .keyboard import KeyboardHandler, KeyEvent, KeyType
from .model import COLUMN_ORDER, Column, GridModel
from .navigation import FocusedAt, NavigationController
from .paste import parse_clipboard_text
from .storage import WorksheetStorage
from .terminal import TerminalInterface
from .view import GridView

logger = logging.getLogger(__name__)

HELP_LINES = [
    "",
    "NAVIGATION                   EDITING",
    "  Enter      Move down         Type       Append to cell",
    "  Tab        Next cell         Backspace  Delete last char",
    "  Shift-Tab  Previous cell     Delete     Clear cell",
    "  Arrows     Move focus        Ctrl-K     Clear cell",
    "  PgUp/PgDn  Move a page       Ctrl-V     Paste clipboard",
    "  Esc        Leave the cell    Ctrl-C     Copy cell",
    "",
    "WORKSHEET",
    "  Ctrl-N     Add 100 rows",
    "  Ctrl-Q     Quit (changes are saved as you type)",
    "  F1         Help",
    "",
    "Yellow cells share their value with another cell",
    "(ignoring case and surrounding spaces).",
]


class Editor:
    """Main worksheet application controller."""

    def __init__(self, storage: Optional[WorksheetStorage] = None):
        """Initialize the editor components.

        Args:
            storage: Where the worksheet is loaded from and saved to.
                Defaults to the per-user data directory.
        """
        self.terminal = TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.storage = storage if storage is not None else WorksheetStorage()
        self.grid = GridModel(self.storage.load())
        self.grid.add_listener(self._on_worksheet_changed)
        self.navigation = NavigationController(self.grid)
        self.duplicates = DuplicateTracker()
        self.view = GridView()
        self.view.num_rows = self.terminal.height
        self.view.num_columns = self.terminal.width
        self.command_registry = CommandRegistry()  # Command pattern for key handling
        self.running = False
        self.error_mode = False  # True when terminal is too narrow
        self.status_message = None
        self.help_visible = False
        self.save_failed = False
        # Create pipe for resize signaling
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()
        self._ctrl_c_pressed = False

    # --- Worksheet wiring ---

    def _on_worksheet_changed(self, worksheet):
        """Write every committed change through to storage."""
        ok = self.storage.save(worksheet)
        if not ok and not self.save_failed:
            self.status_message = GridConstants.SAVE_FAILED_MESSAGE
        self.save_failed = not ok

    def report(self, message: str) -> None:
        """Set the status message unless a save failure is being announced."""
        if self.status_message == GridConstants.SAVE_FAILED_MESSAGE:
            return
        self.status_message = message

    @property
    def duplicate_index(self) -> DuplicateIndex:
        """Index for the current snapshot, rebuilt whenever it changed."""
        return self.duplicates.index_for(self.grid.worksheet)

    def is_duplicate(self, row: int, column: Column) -> bool:
        return self.duplicate_index.is_duplicate(row, column)

    def paste_text(self, text: str) -> bool:
        """Paste clipboard text with its top-left value at the focused cell.

        With nothing focused the paste lands at the top-left cell.

        Returns:
            True if the worksheet changed
        """
        before = self.grid.worksheet
        focus = self.navigation.focus
        if not isinstance(focus, FocusedAt):
            focus = self.navigation.focus_cell(0, 0)
        grid = parse_clipboard_text(text)
        if not grid:
            self.report("Clipboard is empty")
            return False
        self.grid.apply_paste(focus.row, focus.column, grid)
        width = max(len(values) for values in grid)
        self.report(f"Pasted {len(grid)}x{width} cells")
        logger.debug(f"Pasted {len(grid)}x{width} grid at ({focus.row}, {focus.column})")
        return self.grid.worksheet is not before

    def status_line(self) -> str:
        """Describe the focused cell for the status line."""
        focus = self.navigation.focus
        if not isinstance(focus, FocusedAt):
            return f" {len(self.grid)} rows | Enter or an arrow key to start editing"
        column = COLUMN_ORDER[focus.column]
        text = f" R{focus.row + 1} {column}"
        matches = len(self.duplicate_index.group_for(focus.row, focus.column))
        if matches >= 2:
            text += f" | {matches} cells share this value"
        return text

    # --- Event loop ---

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame # Unused
        # Write to pipe to wake up select()
        os.write(self._resize_pipe_w, GridConstants.RESIZE_PIPE_MARKER)

    def _handle_sigint(self, signum, frame):
        """Handle SIGINT (Ctrl-C) - treat as copy command."""
        del signum, frame # Unused
        self._ctrl_c_pressed = True
        os.write(self._resize_pipe_w, GridConstants.CTRL_C_PIPE_MARKER)

    def run(self):
        """Run the main editor loop."""
        self.terminal.setup()
        self.running = True
        self._ctrl_c_pressed = False

        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)
        original_int_handler = signal.signal(signal.SIGINT, self._handle_sigint)

        try:
            with self.terminal.term.cbreak():
                # Disable flow control AFTER entering cbreak mode
                old_settings = None
                try:
                    old_settings = termios.tcgetattr(sys.stdin)
                    new_settings = list(old_settings)
                    # Disable IXON/IXOFF so Ctrl-Q reaches us
                    new_settings[0] &= ~(termios.IXON | termios.IXOFF)
                    # Disable IEXTEN so Ctrl-V (VLNEXT) is not intercepted by tty
                    try:
                        new_settings[3] &= ~termios.IEXTEN
                    except AttributeError:
                        pass
                    termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
                except (termios.error, AttributeError, OSError):
                    pass

                need_draw = True

                while self.running:
                    if need_draw:
                        self._draw_current()
                        need_draw = False

                    ready, _, _ = select.select([0, self._resize_pipe_r], [], [])

                    if self._resize_pipe_r in ready:
                        os.read(self._resize_pipe_r, 1024)
                        if self._ctrl_c_pressed:
                            self._ctrl_c_pressed = False
                            ctrl_c_event = KeyEvent(
                                key_type=KeyType.CTRL,
                                value='c',
                                raw='\x03',
                                is_ctrl=True
                            )
                            self._handle_key_event(ctrl_c_event)
                        need_draw = True
                    elif 0 in ready:
                        key_event = self.keyboard.get_key_event(timeout=0)
                        if key_event:
                            self._handle_key_event(key_event)
                            need_draw = True

                if old_settings:
                    try:
                        termios.tcsetattr(sys.stdin, termios.TCSANOW, old_settings)
                    except (termios.error, OSError):
                        pass

        except KeyboardInterrupt:
            pass
        finally:
            signal.signal(signal.SIGWINCH, original_winch_handler)
            signal.signal(signal.SIGINT, original_int_handler)
            os.close(self._resize_pipe_r)
            os.close(self._resize_pipe_w)
            self.terminal.cleanup()

    def _draw_current(self):
        """Draw the grid, the help screen or the too-narrow error."""
        self.view.num_rows = self.terminal.height
        self.view.num_columns = self.terminal.width
        if self.terminal.width < GridConstants.MIN_TERMINAL_WIDTH:
            self.error_mode = True
            self._draw_error()
            return
        self.error_mode = False
        self._draw()

    def _draw(self):
        """Draw the current editor state to terminal."""
        if self.help_visible:
            self._draw_help()
            return

        self.view.render(self.grid.worksheet, self.duplicate_index, self.navigation.focus)
        if self.status_message:
            status = f" {self.status_message}"
        else:
            status = self.status_line()
        self.terminal.draw_frame(
            self.view.lines,
            self.view.cursor_y,
            self.view.cursor_x,
            status_override=status,
        )

    def _draw_error(self):
        """Draw error message when terminal is too narrow."""
        self.terminal.draw_error_message(
            GridConstants.TERMINAL_TOO_NARROW_MESSAGE.format(GridConstants.MIN_TERMINAL_WIDTH),
            GridConstants.CURRENT_WIDTH_MESSAGE.format(self.terminal.width)
        )

    def _draw_help(self):
        """Draw the help screen."""
        term = self.terminal.term

        print(term.clear, end='')

        title = "KEYGRID HELP"
        try:
            width = int(getattr(term, 'width', 80))
        except (TypeError, ValueError):
            width = 80
        title_pos = max(0, (width - len(title)) // 2)
        print(f"{term.move(1, title_pos)}{term.bold}{title}{term.normal}", end='')

        try:
            height = int(getattr(term, 'height', 24))
        except (TypeError, ValueError):
            height = 24
        content_start_y = max(3, (height - len(HELP_LINES)) // 2)

        max_line_length = max(len(line) for line in HELP_LINES)
        left_margin = max(0, (width - max_line_length) // 2)

        for i, line in enumerate(HELP_LINES):
            print(f"{term.move(content_start_y + i, left_margin)}{line}", end='')

        print(f"{term.move(height - 1, 0)} Press any key to continue", end='')
        print(term.hide_cursor, end='', flush=True)

    def show_help(self):
        """Show the help screen."""
        self.help_visible = True

    def hide_help(self):
        """Hide the help screen and return to the grid."""
        self.help_visible = False

    def _handle_key_event(self, key_event: KeyEvent):
        """Handle a keyboard event.

        Args:
            key_event: KeyEvent object with parsed key information
        """
        if self.help_visible:
            self.hide_help()
            return

        self.status_message = None

        # Only quitting works while the terminal is too narrow
        if self.error_mode:
            if key_event.key_type == KeyType.CTRL and key_event.value == 'q':
                self.running = False
            return

        self.command_registry.execute(self, key_event)
