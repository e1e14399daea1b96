"""Command pattern implementation for editor actions."""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Optional, TYPE_CHECKING
from .clipboard import ClipboardManager
from .constants import GridConstants
from .keyboard import KeyType
from .navigation import FocusedAt

if TYPE_CHECKING:
    from .editor import Editor
    from .keyboard import KeyEvent


class EditorCommand(ABC):
    """Base class for editor commands."""

    @abstractmethod
    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Execute the command.

        Args:
            editor: Editor instance
            key_event: The key event that triggered this command

        Returns:
            True if the command modified the worksheet
        """
        pass


class MovementCommand(EditorCommand):
    """Base class for focus movement commands.

    With nothing focused, the first movement key focuses the top-left cell.
    """

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        rows_before = len(editor.grid)
        if not editor.navigation.is_focused:
            editor.navigation.focus_cell(0, 0)
        else:
            self._move(editor, key_event)
        # Growth on navigation is a worksheet change too
        return len(editor.grid) != rows_before

    @abstractmethod
    def _move(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the movement."""
        pass


class ConfirmCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.navigation.advance_on_confirm()


class NextFieldCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.navigation.advance_on_step(forward=True)


class PreviousFieldCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.navigation.advance_on_step(forward=False)


class UpCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.navigation.move(-1, 0)


class DownCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.navigation.move(1, 0)


class LeftCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.navigation.move(0, -1)


class RightCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.navigation.move(0, 1)


class PageDownCommand(MovementCommand):
    def _move(self, editor, key_event):
        editor.navigation.move(editor.view.visible_row_count, 0)


class PageUpCommand(MovementCommand):
    def _move(self, editor, key_event):
        focus = editor.navigation.focus
        step = min(editor.view.visible_row_count, focus.row)
        editor.navigation.move(-step, 0)


class EditCommand(EditorCommand):
    """Base class for commands that change the focused cell."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        focus = editor.navigation.focus
        if not isinstance(focus, FocusedAt):
            return False
        before = editor.grid.worksheet
        self._edit(editor, focus, key_event)
        return editor.grid.worksheet is not before

    @abstractmethod
    def _edit(self, editor: 'Editor', focus: FocusedAt, key_event: 'KeyEvent'):
        """Perform the edit."""
        pass


class InsertTextCommand(EditCommand):
    def _edit(self, editor, focus, key_event):
        char = key_event.value
        # Filter out control characters
        if not char or ord(char[0]) < 32:
            return
        current = editor.grid.get(focus.row, focus.column)
        editor.grid.set(focus.row, focus.column, current + char)


class BackspaceCommand(EditCommand):
    def _edit(self, editor, focus, key_event):
        current = editor.grid.get(focus.row, focus.column)
        if current:
            editor.grid.set(focus.row, focus.column, current[:-1])


class ClearCellCommand(EditCommand):
    def _edit(self, editor, focus, key_event):
        editor.grid.set(focus.row, focus.column, "")


class PasteCommand(EditorCommand):
    """Paste the system clipboard at the focused cell."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        return editor.paste_text(ClipboardManager.paste_text())


class TerminalPasteCommand(EditorCommand):
    """Paste text the terminal delivered as a burst of keystrokes."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        return editor.paste_text(key_event.value)


class SystemCommand(EditorCommand):
    """Base class for system commands like quit, help, add rows."""

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """System commands report changes through the return value of _execute_system."""
        return bool(self._execute_system(editor, key_event))

    @abstractmethod
    def _execute_system(self, editor: 'Editor', key_event: 'KeyEvent'):
        """Perform the system action."""
        pass


class QuitCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        # Every change is already written through, nothing to confirm
        editor.running = False


class HelpCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.show_help()


class BlurCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        editor.navigation.blur_if_outside(None)


class AddRowsCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        count = GridConstants.BULK_ADD_ROW_COUNT
        editor.grid.append_rows(count)
        editor.report(f"Added {count} rows ({len(editor.grid)} total)")
        return True


class CopyCommand(SystemCommand):
    def _execute_system(self, editor, key_event):
        focus = editor.navigation.focus
        if not isinstance(focus, FocusedAt):
            editor.report("No cell selected")
            return
        value = editor.grid.get(focus.row, focus.column)
        if ClipboardManager.copy_text(value):
            editor.report("Cell copied")
        else:
            editor.report("Clipboard unavailable")


class CommandRegistry:
    """Registry for mapping key combinations to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], EditorCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Spreadsheet navigation
        self.register((KeyType.SPECIAL, 'enter'), ConfirmCommand())
        self.register((KeyType.SPECIAL, 'tab'), NextFieldCommand())
        self.register((KeyType.SHIFT_SPECIAL, 'tab'), PreviousFieldCommand())
        self.register((KeyType.SPECIAL, 'up'), UpCommand())
        self.register((KeyType.SPECIAL, 'down'), DownCommand())
        self.register((KeyType.SPECIAL, 'left'), LeftCommand())
        self.register((KeyType.SPECIAL, 'right'), RightCommand())
        self.register((KeyType.SPECIAL, 'page_down'), PageDownCommand())
        self.register((KeyType.SPECIAL, 'page_up'), PageUpCommand())

        # Editing commands
        self.register((KeyType.SPECIAL, 'backspace'), BackspaceCommand())
        self.register((KeyType.SPECIAL, 'delete'), ClearCellCommand())
        self.register((KeyType.CTRL, 'k'), ClearCellCommand())
        self.register((KeyType.CTRL, 'v'), PasteCommand())
        self.register((KeyType.CTRL, 'c'), CopyCommand())

        # System commands
        self.register((KeyType.CTRL, 'n'), AddRowsCommand())
        self.register((KeyType.CTRL, 'q'), QuitCommand())
        self.register((KeyType.SPECIAL, 'escape'), BlurCommand())
        self.register((KeyType.SPECIAL, 'f1'), HelpCommand())

    def register(self, key: Tuple[KeyType, str], command: EditorCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[EditorCommand]:
        """Get the command for a key combination."""
        return self._commands.get((key_type, value))

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Execute the command for the given key event.

        Returns:
            True if the worksheet was modified
        """
        if key_event.key_type == KeyType.PASTE:
            return TerminalPasteCommand().execute(editor, key_event)

        if key_event.is_alt:
            command = self.get_command(KeyType.ALT, key_event.value)
        else:
            command = self.get_command(key_event.key_type, key_event.value)

        if command:
            return command.execute(editor, key_event)

        # Handle regular text input
        if key_event.key_type == KeyType.REGULAR:
            return InsertTextCommand().execute(editor, key_event)

        return False
