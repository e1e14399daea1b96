"""Constants and configuration for the keygrid editor."""

class GridConstants:
    """Central configuration constants for the editor."""

    # Worksheet lifecycle
    INITIAL_ROW_COUNT = 8  # Rows in a fresh worksheet
    BULK_ADD_ROW_COUNT = 100  # Rows appended by the "add rows" command

    # Persistence
    STORAGE_KEY = "excel_worksheet_data"  # Fixed key in the byte store
    APP_NAME = "keygrid"
    APP_AUTHOR = "keygrid"
    ATOMIC_SAVE_PREFIX = "."  # Prefix for temporary save files
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files

    # Grid layout
    ROW_NUMBER_WIDTH = 6  # Gutter holding 1-based row numbers
    CELL_WIDTH = 14  # Characters per cell, excluding the separator
    CELL_SEPARATOR = "│"
    HEADER_ROWS = 1  # Column header line above the first data row

    # Terminal requirements
    MIN_TERMINAL_WIDTH = 40  # Gutter plus at least two cells

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize
    CTRL_C_PIPE_MARKER = b'C'  # Byte written to pipe to signal Ctrl-C

    # Status messages
    TERMINAL_TOO_NARROW_MESSAGE = "Terminal too narrow! Need at least {} columns."
    CURRENT_WIDTH_MESSAGE = "Current width: {} columns."
    HELP_HINT = "F1 for help"
    SAVE_FAILED_MESSAGE = "Autosave failed; changes are kept for this session"
