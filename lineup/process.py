"""External command execution for package managers and hook installers."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

from .log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Exit status and captured output of a finished command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):
    """Runs ``command args...`` in ``cwd`` and waits for it to exit."""

    def __call__(self, command: str, args: Sequence[str], cwd: Path) -> CommandResult: ...


def run_command(command: str, args: Sequence[str], cwd: Path) -> CommandResult:
    """Default runner: blocking subprocess, output captured as text.

    A missing executable raises FileNotFoundError (an OSError).
    """
    logger.debug("running {} {} in {}", command, " ".join(args), cwd)
    result = subprocess.run(
        [command, *args],
        cwd=cwd,
        capture_output=True,
        text=True,
    )
    logger.debug("{} exited with {}", command, result.returncode)
    return CommandResult(result.returncode, result.stdout, result.stderr)
