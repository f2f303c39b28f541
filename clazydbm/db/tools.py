"""Locating and running the external query tools (litecli, mycli, pgcli)."""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class ToolRunner(Protocol):
    """Protocol for finding and running interactive tools in the foreground."""

    def which(self, executable: str) -> str | None:
        ...

    def run(self, command: list[str]) -> int:
        ...


@dataclass
class SubprocessToolRunner(ToolRunner):
    """Default runner; the child inherits the released terminal."""

    def which(self, executable: str) -> str | None:
        return shutil.which(executable)

    def run(self, command: list[str]) -> int:
        completed = subprocess.run(command, check=False)
        return completed.returncode
