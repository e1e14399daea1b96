"""System clipboard integration (plain text)."""

import logging

import pyperclip

logger = logging.getLogger(__name__)


class ClipboardManager:
    """Reads and writes the system clipboard as text/plain.

    Uses pyperclip, which picks the platform mechanism (pbcopy, xclip,
    wl-clipboard, Windows API). A missing mechanism is reported, not raised.
    """

    @staticmethod
    def copy_text(text: str) -> bool:
        """Copy text to the system clipboard.

        Returns:
            True if the clipboard was updated
        """
        try:
            pyperclip.copy(text)
            return True
        except pyperclip.PyperclipException as e:
            logger.warning(f"Could not copy to clipboard: {e}")
            return False

    @staticmethod
    def paste_text() -> str:
        """Return the clipboard's plain text, or "" if unavailable."""
        try:
            content = pyperclip.paste()
        except pyperclip.PyperclipException as e:
            logger.warning(f"Could not read clipboard: {e}")
            return ""
        return content or ""
