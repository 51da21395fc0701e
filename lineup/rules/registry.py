"""Ordered registry of rules. Order matters: earlier fixes can satisfy later checks."""

from __future__ import annotations

from typing import Iterator

from .base import Rule


class RuleRegistry:
    """Rules in registration order, looked up by id."""

    def __init__(self, rules: list[Rule] | None = None):
        self._rules: list[Rule] = []
        for rule in rules or []:
            self.register(rule)

    def register(self, rule: Rule) -> None:
        if self.get(rule.id) is not None:
            raise ValueError(f"Rule already registered: {rule.id}")
        self._rules.append(rule)

    def get(self, rule_id: str) -> Rule | None:
        for rule in self._rules:
            if rule.id == rule_id:
                return rule
        return None

    def all(self) -> list[Rule]:
        return list(self._rules)

    def ids(self) -> list[str]:
        return [rule.id for rule in self._rules]

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)


def builtin_registry() -> RuleRegistry:
    """Fresh registry holding the built-in rules.

    husky-init comes before cspell-config: its fix creates the .husky
    directory that cspell-config's pre-commit check and fix rely on.
    """
    from .claude_settings import ClaudeSettingsRule
    from .cspell_config import CspellConfigRule
    from .eslint_config_agent import EslintConfigAgentRule
    from .husky_init import HuskyInitRule
    from .pnpm_usage import PnpmUsageRule

    return RuleRegistry([
        ClaudeSettingsRule(),
        HuskyInitRule(),
        CspellConfigRule(),
        EslintConfigAgentRule(),
        PnpmUsageRule(),
    ])
