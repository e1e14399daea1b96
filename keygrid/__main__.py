"""Keygrid CLI entry point.

Allows running via `python -m keygrid` and provides the console script
defined in `pyproject.toml`.

Options:
    --version, -V       Print the version and exit
    --keytest           Show how key presses are parsed (ESC quits)
    --data-dir DIR      Keep the saved worksheet in DIR
    --no-save           Edit without loading or saving anything
    --log FILE          Write log records to FILE
    --log-level LEVEL   Log level for --log (default: INFO)
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .version import get_version_string

USAGE = "usage: keygrid [--version] [--keytest] [--data-dir DIR] [--no-save] [--log FILE] [--log-level LEVEL]"


def run_keyboard_test() -> None:
    """Print the KeyEvent produced for each key press until ESC."""
    from .terminal import TerminalInterface
    from .keyboard import KeyboardHandler, KeyType

    print("Keyboard test mode - press keys to see parsed events.")
    print("Quit with ESC.")

    term = TerminalInterface()
    term.setup()
    kb = KeyboardHandler(term)
    try:
        while True:
            ev = kb.get_key_event(timeout=None)
            if not ev:
                continue
            if ev.key_type == KeyType.SPECIAL and ev.value == 'escape':
                print("Exiting keyboard test.")
                break
            raw = ev.raw.encode('unicode_escape').decode('ascii')
            flags = [name for name, on in (('alt', ev.is_alt), ('ctrl', ev.is_ctrl),
                                           ('shift', ev.is_shift)) if on]
            line = f"type={ev.key_type.value} value={ev.value!r} raw='{raw}'"
            if flags:
                line += f" flags={'+'.join(flags)}"
            print(line)
    finally:
        term.cleanup()


def configure_logging(log_file: Optional[str], level_name: str) -> None:
    """Send log records to a file; the terminal belongs to the UI."""
    if not log_file:
        logging.getLogger().addHandler(logging.NullHandler())
        return
    level = getattr(logging, level_name.upper(), None)
    if not isinstance(level, int):
        raise SystemExit(f"keygrid: unknown log level {level_name!r}")
    logging.basicConfig(
        filename=log_file,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def parse_args(args: list[str]) -> dict:
    # Very small arg parsing, in the spirit of the rest of the CLI
    options = {
        'version': False,
        'keytest': False,
        'data_dir': None,
        'no_save': False,
        'log': None,
        'log_level': 'INFO',
    }
    valued = {'--data-dir': 'data_dir', '--log': 'log', '--log-level': 'log_level'}
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ('--version', '-V'):
            options['version'] = True
        elif arg in ('--keytest', '--keyboard-test'):
            options['keytest'] = True
        elif arg == '--no-save':
            options['no_save'] = True
        elif arg in valued:
            if i + 1 >= len(args):
                raise SystemExit(f"keygrid: {arg} needs a value\n{USAGE}")
            options[valued[arg]] = args[i + 1]
            i += 1
        else:
            raise SystemExit(f"keygrid: unknown argument {arg!r}\n{USAGE}")
        i += 1
    return options


def main(argv: Optional[list[str]] = None) -> None:
    options = parse_args(sys.argv[1:] if argv is None else argv)
    if options['version']:
        print(get_version_string())
        return
    if options['keytest']:
        run_keyboard_test()
        return

    configure_logging(options['log'], options['log_level'])

    # Lazy import to avoid importing UI deps for --version
    from .editor import Editor
    from .storage import FileKeyValueStore, MemoryKeyValueStore, WorksheetStorage

    if options['no_save']:
        store = MemoryKeyValueStore()
    else:
        store = FileKeyValueStore(options['data_dir'])
    editor = Editor(storage=WorksheetStorage(store))
    editor.run()


if __name__ == "__main__":  # pragma: no cover
    main()
