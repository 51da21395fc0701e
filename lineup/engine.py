"""Rule engine: runs the registry in order against a directory tree."""

from __future__ import annotations

from pathlib import Path

from .context import RuleContext
from .errors import PathNotFound
from .log import get_logger
from .models import Config, LintReport, LintResult, RuleInfo
from .process import CommandRunner, run_command
from .rules.registry import RuleRegistry, builtin_registry

logger = get_logger(__name__)


class Runner:
    """Runs every enabled rule, in registry order, and aggregates a report."""

    def __init__(
        self,
        config: Config | None = None,
        registry: RuleRegistry | None = None,
        runner: CommandRunner = run_command,
    ):
        self.config = config or Config()
        self.registry = registry if registry is not None else builtin_registry()
        self.runner = runner
        for rule_id in self.config.rules:
            if self.registry.get(rule_id) is None:
                logger.warning("config mentions unknown rule '{}', ignoring", rule_id)

    def run(self, path: str | Path) -> LintReport:
        """Check only."""
        return self._run(path, fix_mode=False)

    def run_with_fix(self, path: str | Path) -> LintReport:
        """Check, then fix each rule that can.

        Findings are those observed before each rule's fix ran. A failing fix
        aborts the run; fixes already applied by earlier rules stay on disk.
        """
        return self._run(path, fix_mode=True)

    def list_rules(self) -> list[RuleInfo]:
        return [rule.info() for rule in self.registry]

    def _run(self, path: str | Path, fix_mode: bool) -> LintReport:
        root = Path(path)
        if not root.exists():
            raise PathNotFound(path)

        results: list[LintResult] = []
        fixed = 0
        for rule in self.registry:
            rule_config = self.config.rule(rule.id)
            if not rule_config.enabled:
                logger.debug("skipping disabled rule {}", rule.id)
                continue

            context = RuleContext(
                root=root,
                fix_mode=fix_mode,
                options=rule_config.options,
                severity=rule_config.severity,
                runner=self.runner,
            )
            found = rule.check(context)
            logger.debug("{}: {} finding(s)", rule.id, len(found))
            results.extend(found)

            if fix_mode and rule.can_fix():
                count = rule.fix(context)
                logger.debug("{}: {} fix(es) applied", rule.id, count)
                fixed += count

        return LintReport.from_results(results, fixed)
