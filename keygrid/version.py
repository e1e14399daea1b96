"""Version string shown by `keygrid --version`.

Combines the distribution version with the commit the code came from: a
live git checkout wins, then the file stamped by the build hook.
"""

from __future__ import annotations

import importlib.metadata
import subprocess
from pathlib import Path
from typing import NamedTuple, Optional


class BuildInfo(NamedTuple):
    commit: Optional[str]
    date: Optional[str]
    dirty: bool


def _git(*args: str) -> Optional[str]:
    here = Path(__file__).resolve().parent
    try:
        out = subprocess.check_output(["git", *args], cwd=str(here), stderr=subprocess.DEVNULL)
    except (subprocess.CalledProcessError, FileNotFoundError, OSError):
        return None
    return out.decode().strip()


def _from_git_checkout() -> Optional[BuildInfo]:
    commit = _git("rev-parse", "HEAD")
    if not commit:
        return None
    date = _git("show", "-s", "--format=%cI", "HEAD") or None
    dirty = bool(_git("status", "--porcelain", "--", "."))
    return BuildInfo(commit=commit, date=date, dirty=dirty)


def _from_build_stamp() -> Optional[BuildInfo]:
    try:
        from . import _build_info  # type: ignore
    except ImportError:
        return None
    commit = getattr(_build_info, "COMMIT", None)
    date = getattr(_build_info, "DATE", None)
    if not (commit or date):
        return None
    return BuildInfo(commit=commit, date=date, dirty=False)


def get_build_info() -> BuildInfo:
    return (_from_git_checkout() or _from_build_stamp()
            or BuildInfo(commit=None, date=None, dirty=False))


def get_package_version() -> str:
    try:
        return importlib.metadata.version("keygrid")
    except importlib.metadata.PackageNotFoundError:
        return "0+unknown"


def get_version_string() -> str:
    info = get_build_info()
    commit = info.commit[:7] if info.commit else "unknown"
    dirty_suffix = "-dirty" if info.dirty else ""
    return f"keygrid {get_package_version()} ({commit}{dirty_suffix} {info.date or 'unknown'})"
