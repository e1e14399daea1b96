"""Hatchling build hook that stamps keygrid/_build_info.py."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

from hatchling.builders.hooks.plugin.interface import BuildHookInterface

BUILD_INFO = "keygrid/_build_info.py"


class CustomBuildHook(BuildHookInterface):
    """Records the git commit and commit date the wheel was built from."""

    def initialize(self, version: str, build_data: dict[str, Any]) -> None:
        root = Path(self.root)
        commit = self._git(root, "rev-parse", "HEAD")
        date = self._git(root, "show", "-s", "--format=%cI", "HEAD")
        (root / BUILD_INFO).write_text(
            "# Auto-generated at build time.\n"
            f"COMMIT = {commit!r}\n"
            f"DATE = {date!r}\n",
            encoding="utf-8",
        )
        build_data.setdefault("artifacts", []).append(BUILD_INFO)

    @staticmethod
    def _git(root: Path, *args: str) -> str | None:
        try:
            out = subprocess.check_output(["git", *args], cwd=str(root), stderr=subprocess.DEVNULL)
        except (subprocess.CalledProcessError, FileNotFoundError, OSError):
            # Source tarballs build without git
            return None
        return out.decode().strip() or None
