"""Base type for rules."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from ..context import RuleContext
from ..errors import FixNotSupported
from ..models import CheckEntry, FixEntry, LintResult, RuleInfo, Severity


class Rule(ABC):
    """A named set of checks over a directory tree, with optional fixes.

    Subclasses declare ``id``, ``name``, ``description``, ``default_severity``,
    ``CHECKS`` and ``FIXES`` as class attributes and implement ``check``.
    Rules that declare fixes also implement ``fix``.
    """

    id: str = ""
    name: str = ""
    description: str = ""
    default_severity: Severity = Severity.ERROR

    CHECKS: tuple[CheckEntry, ...] = ()
    FIXES: tuple[FixEntry, ...] = ()

    def checks(self) -> list[CheckEntry]:
        return list(self.CHECKS)

    def fixes(self) -> list[FixEntry]:
        return list(self.FIXES)

    def can_fix(self) -> bool:
        return bool(self.FIXES)

    def info(self) -> RuleInfo:
        return RuleInfo(
            id=self.id,
            name=self.name,
            description=self.description,
            default_severity=self.default_severity,
            can_fix=self.can_fix(),
            checks=tuple(self.CHECKS),
            fixes=tuple(self.FIXES),
        )

    @abstractmethod
    def check(self, context: RuleContext) -> list[LintResult]:
        """Inspect the tree under context.root. Must not modify anything."""

    def fix(self, context: RuleContext) -> int:
        """Apply fixes under context.root; return the number of changes made."""
        raise FixNotSupported(self.id)

    # Helpers for consistent result creation

    def result(
        self,
        context: RuleContext,
        check_id: str,
        message: str,
        path: Path,
        *,
        severity: Severity | None = None,
        suggestion: str | None = None,
        fixable_by: tuple[str, ...] = (),
        line: int | None = None,
    ) -> LintResult:
        """Finding for a failed predicate. A configured severity overrides the rule's own."""
        self._validate_ids(check_id, fixable_by)
        effective = context.severity or severity or self.default_severity
        return LintResult(
            rule_id=self.id,
            check_id=check_id,
            severity=effective,
            message=message,
            path=str(path),
            line=line,
            suggestion=suggestion,
            fixable_by=tuple(fixable_by),
        )

    def unreadable(self, check_id: str, path: Path, what: str, detail: str) -> LintResult:
        """File exists but cannot be read: always an error, never fixable."""
        self._validate_ids(check_id, ())
        return LintResult(
            rule_id=self.id,
            check_id=check_id,
            severity=Severity.ERROR,
            message=f"Cannot read {what}: {detail}",
            path=str(path),
        )

    def malformed(self, check_id: str, path: Path, what: str, detail: str, syntax: str = "JSON") -> LintResult:
        """File exists but does not parse: always an error, never fixable."""
        self._validate_ids(check_id, ())
        return LintResult(
            rule_id=self.id,
            check_id=check_id,
            severity=Severity.ERROR,
            message=f"Invalid {syntax} in {what}: {detail}",
            path=str(path),
            suggestion=f"Fix {syntax} syntax errors",
        )

    def bad_structure(self, check_id: str, path: Path, what: str, detail: str) -> LintResult:
        """Valid JSON with the wrong shape: an error the fixes will not touch."""
        self._validate_ids(check_id, ())
        return LintResult(
            rule_id=self.id,
            check_id=check_id,
            severity=Severity.ERROR,
            message=f"Unexpected structure in {what}: {detail}",
            path=str(path),
            suggestion=f"Edit {what} by hand",
        )

    def load_json(
        self, context: RuleContext, path: Path, check_id: str, what: str
    ) -> tuple[Any, LintResult | None]:
        """Read and parse a JSON file for checking.

        Returns ``(data, None)`` on success or ``(None, finding)`` when the file
        cannot be read or parsed.
        """
        content, problem = self.read_text(context, path, check_id, what)
        if problem is not None:
            return None, problem
        try:
            return json.loads(content), None
        except json.JSONDecodeError as e:
            return None, self.malformed(check_id, path, what, str(e))

    def read_text(self, context: RuleContext, path: Path, check_id: str, what: str) -> tuple[str | None, LintResult | None]:
        """Read a text file for checking; ``(None, finding)`` if unreadable."""
        try:
            return context.read_text(path), None
        except OSError as e:
            return None, self.unreadable(check_id, path, what, e.strerror or str(e))
        except UnicodeDecodeError as e:
            return None, self.unreadable(check_id, path, what, str(e))

    def _validate_ids(self, check_id: str, fixable_by: tuple[str, ...]) -> None:
        if check_id not in {c.id for c in self.CHECKS}:
            raise ValueError(f"{self.id}: undeclared check id '{check_id}'")
        declared = {f.id for f in self.FIXES}
        for fix_id in fixable_by:
            if fix_id not in declared:
                raise ValueError(f"{self.id}: undeclared fix id '{fix_id}'")
