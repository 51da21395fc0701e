"""Run-level failures. Check-time problems are findings, not exceptions."""

from __future__ import annotations

from pathlib import Path


class LineupError(Exception):
    """Base for every error lineup raises on purpose."""


class EngineError(LineupError):
    pass


class PathNotFound(EngineError):
    def __init__(self, path: str | Path):
        self.path = str(path)
        super().__init__(f"Path does not exist: {self.path}")


class ConfigError(LineupError):
    """Configuration file could not be read or has the wrong shape."""


class RuleError(LineupError):
    pass


class FixNotSupported(RuleError):
    def __init__(self, rule_id: str):
        self.rule_id = rule_id
        super().__init__(f"Fix not supported for rule '{rule_id}'")


class MalformedDocument(RuleError):
    """A document a fix needs to edit is not valid JSON (or not the expected shape)."""

    def __init__(self, path: str | Path, detail: str):
        self.path = str(path)
        self.detail = detail
        super().__init__(f"Invalid JSON in {self.path}: {detail}")


class CommandFailed(RuleError):
    """An external tool exited non-zero; stderr is kept verbatim."""

    def __init__(self, description: str, command: str, returncode: int, stderr: str):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"{description}: {stderr}")
