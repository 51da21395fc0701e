"""Rule: JS projects use eslint-config-agent as their only ESLint configuration."""

from __future__ import annotations

from pathlib import Path

from ..context import RuleContext
from ..log import get_logger
from ..models import CheckEntry, FixEntry, LintResult, Severity
from ..walker import find_manifests
from .base import Rule

logger = get_logger(__name__)

CHECK_DEPENDENCY_EXISTS = "eslint-config-agent-dependency"
CHECK_CONFIG_FILE_EXISTS = "eslint-config-mjs-exists"
CHECK_CONFIG_USES_AGENT = "eslint-config-uses-agent"
CHECK_NO_OVERRIDES = "no-custom-overrides"
CHECK_NO_LEGACY_CONFIG = "no-legacy-eslint-config"

FIX_INSTALL_DEPENDENCY = "install-eslint-config-agent"
FIX_CREATE_CONFIG = "create-eslint-config-mjs"
FIX_REMOVE_LEGACY = "remove-legacy-eslint-configs"

PACKAGE = "eslint-config-agent"
CONFIG_FILE = "eslint.config.mjs"
LEGACY_CONFIGS = (
    ".eslintrc",
    ".eslintrc.js",
    ".eslintrc.cjs",
    ".eslintrc.json",
    ".eslintrc.yml",
    ".eslintrc.yaml",
    "eslint.config.js",
)
CONFIG_CONTENT = 'import config from "eslint-config-agent";\n\nexport default config;\n'


def is_js_project(package: object) -> bool:
    """A package.json with dependencies or scripts describes something to lint."""
    if not isinstance(package, dict):
        return False
    return any(key in package for key in ("dependencies", "devDependencies", "scripts"))


def has_eslint_config_agent(package: dict) -> bool:
    for key in ("dependencies", "devDependencies"):
        deps = package.get(key)
        if isinstance(deps, dict) and PACKAGE in deps:
            return True
    return False


def has_overrides(content: str) -> bool:
    """Spreads or a rules block mean the shared config is being extended."""
    return "..." in content or "rules:" in content


class EslintConfigAgentRule(Rule):
    id = "eslint-config-agent"
    name = "ESLint Config Agent"
    description = "Ensures projects use eslint-config-agent as the only ESLint configuration without any overrides"
    default_severity = Severity.ERROR

    CHECKS = (
        CheckEntry(CHECK_DEPENDENCY_EXISTS, "Verify eslint-config-agent is in devDependencies"),
        CheckEntry(CHECK_CONFIG_FILE_EXISTS, "Verify eslint.config.mjs file exists"),
        CheckEntry(CHECK_CONFIG_USES_AGENT, "Verify eslint.config.mjs imports from eslint-config-agent"),
        CheckEntry(CHECK_NO_OVERRIDES, "Verify eslint.config.mjs has no custom overrides or rules"),
        CheckEntry(CHECK_NO_LEGACY_CONFIG, "Verify no legacy ESLint config files exist (.eslintrc, etc.)"),
    )
    FIXES = (
        FixEntry(FIX_INSTALL_DEPENDENCY, "Install eslint-config-agent@latest via pnpm", (CHECK_DEPENDENCY_EXISTS,)),
        FixEntry(
            FIX_CREATE_CONFIG,
            "Create or update eslint.config.mjs to use eslint-config-agent as the only config",
            (CHECK_CONFIG_FILE_EXISTS, CHECK_CONFIG_USES_AGENT, CHECK_NO_OVERRIDES),
        ),
        FixEntry(
            FIX_REMOVE_LEGACY,
            "Remove legacy ESLint config files (.eslintrc, .eslintrc.js, etc.)",
            (CHECK_NO_LEGACY_CONFIG,),
        ),
    )

    def check(self, context: RuleContext) -> list[LintResult]:
        results: list[LintResult] = []
        for package_json in find_manifests(context.root, "package.json"):
            results.extend(self._check_package(context, package_json))
        return results

    def _check_package(self, context: RuleContext, package_json: Path) -> list[LintResult]:
        package, problem = self.load_json(context, package_json, CHECK_DEPENDENCY_EXISTS, "package.json")
        if problem is not None:
            return [problem]
        if not is_js_project(package):
            return []

        results: list[LintResult] = []
        project_dir = package_json.parent

        if not has_eslint_config_agent(package):
            results.append(self.result(
                context,
                CHECK_DEPENDENCY_EXISTS,
                "Missing eslint-config-agent in devDependencies",
                package_json,
                suggestion="Install eslint-config-agent using 'pnpm add -D eslint-config-agent@latest'",
                fixable_by=(FIX_INSTALL_DEPENDENCY,),
            ))

        for name in LEGACY_CONFIGS:
            legacy = project_dir / name
            if context.exists(legacy):
                results.append(self.result(
                    context,
                    CHECK_NO_LEGACY_CONFIG,
                    f"Found legacy ESLint config file: {name}",
                    legacy,
                    severity=Severity.WARNING,
                    suggestion=f"Remove {name} and use eslint.config.mjs with eslint-config-agent",
                    fixable_by=(FIX_REMOVE_LEGACY,),
                ))

        results.extend(self._check_config(context, project_dir))
        return results

    def _check_config(self, context: RuleContext, project_dir: Path) -> list[LintResult]:
        config_path = project_dir / CONFIG_FILE
        if not context.exists(config_path):
            return [self.result(
                context,
                CHECK_CONFIG_FILE_EXISTS,
                "Missing eslint.config.mjs file",
                project_dir,
                suggestion="Create eslint.config.mjs that exports eslint-config-agent as the only config",
                fixable_by=(FIX_CREATE_CONFIG,),
            )]

        content, problem = self.read_text(context, config_path, CHECK_CONFIG_FILE_EXISTS, CONFIG_FILE)
        if problem is not None:
            return [problem]

        results: list[LintResult] = []
        if PACKAGE not in content:
            results.append(self.result(
                context,
                CHECK_CONFIG_USES_AGENT,
                "eslint.config.mjs does not use eslint-config-agent",
                config_path,
                suggestion="Update eslint.config.mjs to use eslint-config-agent as the only config",
                fixable_by=(FIX_CREATE_CONFIG,),
            ))
        if has_overrides(content):
            results.append(self.result(
                context,
                CHECK_NO_OVERRIDES,
                "eslint.config.mjs contains custom overrides or rules",
                config_path,
                severity=Severity.WARNING,
                suggestion="Remove all custom overrides - eslint-config-agent should be the only config",
                fixable_by=(FIX_CREATE_CONFIG,),
            ))
        return results

    def fix(self, context: RuleContext) -> int:
        fixed = 0
        for package_json in find_manifests(context.root, "package.json"):
            fixed += self._fix_package(context, package_json)
        return fixed

    def _fix_package(self, context: RuleContext, package_json: Path) -> int:
        package = context.read_json(package_json)
        if not is_js_project(package):
            return 0

        fixed = 0
        project_dir = package_json.parent

        if not has_eslint_config_agent(package):
            context.run(
                "pnpm",
                ["add", "-D", f"{PACKAGE}@latest"],
                project_dir,
                f"Failed to install {PACKAGE}",
            )
            logger.info("installed {} in {}", PACKAGE, project_dir)
            fixed += 1

        for name in LEGACY_CONFIGS:
            legacy = project_dir / name
            if context.exists(legacy):
                context.remove(legacy)
                logger.info("removed {}", legacy)
                fixed += 1

        config_path = project_dir / CONFIG_FILE
        if not context.exists(config_path) or context.read_text(config_path).strip() != CONFIG_CONTENT.strip():
            context.write_text(config_path, CONFIG_CONTENT)
            logger.info("wrote {}", config_path)
            fixed += 1

        return fixed
