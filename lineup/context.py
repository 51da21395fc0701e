"""Per-rule execution context: the only filesystem and process surface rules use."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

from .errors import CommandFailed, MalformedDocument
from .jsonmerge import StructureError
from .models import Severity
from .process import CommandResult, CommandRunner, run_command


@dataclass
class RuleContext:
    """Built fresh by the runner for each rule invocation."""

    root: Path
    fix_mode: bool = False
    options: Any = None
    severity: Severity | None = None
    runner: CommandRunner = field(default=run_command)

    def option(self, key: str, default: Any = None) -> Any:
        """Rule option from config; non-mapping options are ignored."""
        if isinstance(self.options, dict):
            return self.options.get(key, default)
        return default

    def exists(self, path: Path) -> bool:
        return path.exists()

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, content: str) -> None:
        """Write content, creating parent directories as needed."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    def remove(self, path: Path) -> None:
        path.unlink()

    def make_executable(self, path: Path) -> None:
        """chmod 0755 where the platform has POSIX permissions."""
        if os.name != "posix":
            return
        path.chmod(0o755)

    def read_json(self, path: Path) -> Any:
        """Parse a JSON document for editing; bad syntax raises MalformedDocument."""
        content = self.read_text(path)
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise MalformedDocument(path, str(e)) from e

    def read_json_object(self, path: Path) -> dict:
        """Like read_json, but the document must be a JSON object."""
        data = self.read_json(path)
        if not isinstance(data, dict):
            raise MalformedDocument(path, str(StructureError((), "object", data)))
        return data

    def write_json(self, path: Path, data: Any) -> None:
        self.write_text(path, dump_json(data))

    def run(self, command: str, args: Sequence[str], cwd: Path, description: str) -> CommandResult:
        """Run an external tool; non-zero exit raises CommandFailed."""
        result = self.runner(command, list(args), cwd)
        if not result.ok:
            raise CommandFailed(description, command, result.returncode, result.stderr)
        return result


def dump_json(data: Any) -> str:
    """Two-space indented JSON with a trailing newline, key order preserved."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
