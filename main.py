#!/usr/bin/env python3
"""Keygrid - a terminal worksheet for keyword lists.

Usage:
    python main.py [--data-dir DIR] [--no-save] [--log FILE]

Controls:
    Enter: Move down a row (new rows appear as needed)
    Tab / Shift-Tab: Next / previous cell, wrapping between rows
    Ctrl-V: Paste tab-separated text at the focused cell
    Ctrl-N: Add 100 rows
    Ctrl-Q: Quit (every change is saved as you type)
"""

from keygrid.__main__ import main


if __name__ == "__main__":
    main()
