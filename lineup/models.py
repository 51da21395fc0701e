"""Findings, reports and configuration records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Reporting order: error first, info last."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.ERROR: 0, Severity.WARNING: 1, Severity.INFO: 2}


@dataclass(frozen=True)
class CheckEntry:
    """One verifiable condition a rule evaluates."""

    id: str
    description: str

    def to_dict(self) -> dict:
        return {"id": self.id, "description": self.description}


@dataclass(frozen=True)
class FixEntry:
    """A remediation a rule can apply, and the checks it resolves."""

    id: str
    description: str
    addresses: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {"id": self.id, "description": self.description, "addresses": list(self.addresses)}


@dataclass(frozen=True)
class LintResult:
    """A single finding produced by a rule check."""

    rule_id: str
    check_id: str
    severity: Severity
    message: str
    path: str
    line: int | None = None
    suggestion: str | None = None
    fixable_by: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "rule_id": self.rule_id,
            "check_id": self.check_id,
            "severity": self.severity.value,
            "message": self.message,
            "path": self.path,
            "line": self.line,
            "suggestion": self.suggestion,
            "fixable_by": list(self.fixable_by),
        }


@dataclass(frozen=True)
class LintReport:
    """Aggregated findings of one run. Counts are derived from results."""

    results: tuple[LintResult, ...]
    error_count: int
    warning_count: int
    info_count: int
    fixed_count: int = 0

    @classmethod
    def from_results(cls, results: list[LintResult], fixed_count: int = 0) -> LintReport:
        return cls(
            results=tuple(results),
            error_count=sum(1 for r in results if r.severity == Severity.ERROR),
            warning_count=sum(1 for r in results if r.severity == Severity.WARNING),
            info_count=sum(1 for r in results if r.severity == Severity.INFO),
            fixed_count=fixed_count,
        )

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    def to_dict(self) -> dict:
        return {
            "results": [r.to_dict() for r in self.results],
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "info_count": self.info_count,
            "fixed_count": self.fixed_count,
        }


@dataclass(frozen=True)
class RuleInfo:
    """Static description of a rule, for listing."""

    id: str
    name: str
    description: str
    default_severity: Severity
    can_fix: bool
    checks: tuple[CheckEntry, ...] = ()
    fixes: tuple[FixEntry, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "default_severity": self.default_severity.value,
            "can_fix": self.can_fix,
            "checks": [c.to_dict() for c in self.checks],
            "fixes": [f.to_dict() for f in self.fixes],
        }


@dataclass
class RuleConfig:
    """Per-rule settings from the configuration file."""

    enabled: bool = True
    severity: Severity | None = None
    options: Any = None


@dataclass
class Config:
    """Rule id -> RuleConfig. Empty means every rule enabled with defaults."""

    rules: dict[str, RuleConfig] = field(default_factory=dict)

    def rule(self, rule_id: str) -> RuleConfig:
        return self.rules.get(rule_id) or RuleConfig()
