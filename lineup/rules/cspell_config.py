"""Rule: JS projects have cspell configured, installed and wired into pre-commit."""

from __future__ import annotations

from pathlib import Path

from ..context import RuleContext
from ..errors import MalformedDocument
from ..jsonmerge import StructureError, set_default
from ..log import get_logger
from ..models import CheckEntry, FixEntry, LintResult, Severity
from ..walker import find_manifests
from .base import Rule

logger = get_logger(__name__)

CHECK_CSPELL_JSON_EXISTS = "cspell-json-exists"
CHECK_CSPELL_DEPENDENCY = "cspell-dependency"
CHECK_CSPELL_PRE_COMMIT = "cspell-pre-commit-hook"

FIX_CREATE_CSPELL_JSON = "create-cspell-json"
FIX_ADD_CSPELL_DEPENDENCY = "add-cspell-dependency"
FIX_ADD_CSPELL_PRE_COMMIT = "add-cspell-pre-commit"

CSPELL_CONFIG_FILES = (
    "cspell.json",
    ".cspell.json",
    "cspell.yaml",
    "cspell.yml",
    "cspell.config.js",
    "cspell.config.cjs",
)
DEFAULT_CSPELL_VERSION = "^8.0.0"
CSPELL_COMMAND = 'pnpm exec cspell --no-progress "**/*.{ts,tsx,js,jsx,md,json}"'
# Any of these in a pre-commit hook counts as running the spell check
SPELL_HOOK_MARKERS = ("cspell", "pnpm spell", "npm run spell", "yarn spell")

DEFAULT_CSPELL_CONFIG = {
    "$schema": "https://raw.githubusercontent.com/streetsidesoftware/cspell/main/cspell.schema.json",
    "version": "0.2",
    "language": "en",
    "words": [],
    "ignorePaths": [
        "node_modules",
        "pnpm-lock.yaml",
        "package-lock.json",
        "yarn.lock",
        "dist",
        "build",
        "coverage",
        ".git",
    ],
}

PRE_COMMIT_TEMPLATE = '#!/usr/bin/env sh\n. "$(dirname -- "$0")/_/husky.sh"\n\n# Spell check\n{command}\n'


def has_cspell_dependency(package: dict) -> bool:
    for key in ("devDependencies", "dependencies"):
        deps = package.get(key)
        if isinstance(deps, dict) and "cspell" in deps:
            return True
    return False


def has_cspell_config(project_dir: Path) -> bool:
    return any((project_dir / name).exists() for name in CSPELL_CONFIG_FILES)


class CspellConfigRule(Rule):
    id = "cspell-config"
    name = "CSpell Configuration"
    description = (
        "Ensures projects have cspell configured for spell checking with appropriate "
        "dependencies and pre-commit hooks"
    )
    default_severity = Severity.WARNING

    CHECKS = (
        CheckEntry(CHECK_CSPELL_JSON_EXISTS, "Verify cspell configuration file exists (cspell.json, cspell.yaml, etc.)"),
        CheckEntry(CHECK_CSPELL_DEPENDENCY, "Verify cspell is in devDependencies"),
        CheckEntry(CHECK_CSPELL_PRE_COMMIT, "Verify cspell check is in pre-commit hook"),
    )
    FIXES = (
        FixEntry(FIX_CREATE_CSPELL_JSON, "Create a default cspell.json configuration file", (CHECK_CSPELL_JSON_EXISTS,)),
        FixEntry(FIX_ADD_CSPELL_DEPENDENCY, "Add cspell to devDependencies in package.json", (CHECK_CSPELL_DEPENDENCY,)),
        FixEntry(FIX_ADD_CSPELL_PRE_COMMIT, "Add cspell check to pre-commit hook", (CHECK_CSPELL_PRE_COMMIT,)),
    )

    def check(self, context: RuleContext) -> list[LintResult]:
        results: list[LintResult] = []
        for package_json in find_manifests(context.root, "package.json"):
            results.extend(self._check_project(context, package_json))
        return results

    def _check_project(self, context: RuleContext, package_json: Path) -> list[LintResult]:
        results: list[LintResult] = []
        project_dir = package_json.parent

        if not has_cspell_config(project_dir):
            results.append(self.result(
                context,
                CHECK_CSPELL_JSON_EXISTS,
                "Missing cspell configuration file (cspell.json, cspell.yaml, or cspell.config.js)",
                project_dir,
                suggestion="Create a cspell.json file to configure spell checking",
                fixable_by=(FIX_CREATE_CSPELL_JSON,),
            ))

        dependency = self._check_dependency(context, package_json)
        if dependency is not None:
            results.append(dependency)

        results.extend(self._check_pre_commit(context, project_dir))
        return results

    def _check_dependency(self, context: RuleContext, package_json: Path) -> LintResult | None:
        package, problem = self.load_json(context, package_json, CHECK_CSPELL_DEPENDENCY, "package.json")
        if problem is not None:
            return problem
        if not isinstance(package, dict):
            return self.bad_structure(
                CHECK_CSPELL_DEPENDENCY, package_json, "package.json", "top-level value must be an object"
            )
        if has_cspell_dependency(package):
            return None
        # add-cspell-dependency can only create or extend an object here
        dev_deps = package.get("devDependencies")
        if dev_deps is not None and not isinstance(dev_deps, dict):
            return self.bad_structure(
                CHECK_CSPELL_DEPENDENCY, package_json, "package.json", "'devDependencies' must be an object"
            )
        return self.result(
            context,
            CHECK_CSPELL_DEPENDENCY,
            "Missing cspell in devDependencies",
            package_json,
            suggestion="Add 'cspell' to devDependencies in package.json",
            fixable_by=(FIX_ADD_CSPELL_DEPENDENCY,),
        )

    def _check_pre_commit(self, context: RuleContext, project_dir: Path) -> list[LintResult]:
        husky_dir = project_dir / ".husky"
        pre_commit = husky_dir / "pre-commit"

        if context.exists(pre_commit):
            content, problem = self.read_text(context, pre_commit, CHECK_CSPELL_PRE_COMMIT, "pre-commit hook")
            if problem is not None:
                return [problem]
            if any(marker in content for marker in SPELL_HOOK_MARKERS):
                return []
            return [self.result(
                context,
                CHECK_CSPELL_PRE_COMMIT,
                "Pre-commit hook exists but does not include cspell check",
                pre_commit,
                suggestion="Add 'pnpm exec cspell --no-progress' or similar to pre-commit hook",
                fixable_by=(FIX_ADD_CSPELL_PRE_COMMIT,),
            )]

        if context.exists(husky_dir):
            return [self.result(
                context,
                CHECK_CSPELL_PRE_COMMIT,
                "Husky is configured but no pre-commit hook exists for cspell",
                husky_dir,
                suggestion="Create .husky/pre-commit with cspell check command",
                fixable_by=(FIX_ADD_CSPELL_PRE_COMMIT,),
            )]
        return []

    def fix(self, context: RuleContext) -> int:
        fixed = 0
        for package_json in find_manifests(context.root, "package.json"):
            project_dir = package_json.parent
            if self._create_config(context, project_dir):
                fixed += 1
            if self._add_dependency(context, package_json):
                fixed += 1
            if self._add_pre_commit(context, project_dir):
                fixed += 1
        return fixed

    def _create_config(self, context: RuleContext, project_dir: Path) -> bool:
        if has_cspell_config(project_dir):
            return False
        context.write_json(project_dir / "cspell.json", DEFAULT_CSPELL_CONFIG)
        logger.info("created {}", project_dir / "cspell.json")
        return True

    def _add_dependency(self, context: RuleContext, package_json: Path) -> bool:
        package = context.read_json_object(package_json)
        if has_cspell_dependency(package):
            return False
        version = context.option("version", DEFAULT_CSPELL_VERSION)
        try:
            set_default(package, ("devDependencies",), "cspell", version)
        except StructureError as e:
            raise MalformedDocument(package_json, str(e)) from e
        context.write_json(package_json, package)
        logger.info("added cspell {} to {}", version, package_json)
        return True

    def _add_pre_commit(self, context: RuleContext, project_dir: Path) -> bool:
        husky_dir = project_dir / ".husky"
        pre_commit = husky_dir / "pre-commit"

        # Without Husky there is nowhere to hook into
        if not context.exists(husky_dir):
            return False

        if context.exists(pre_commit):
            content = context.read_text(pre_commit)
            if any(marker in content for marker in SPELL_HOOK_MARKERS):
                return False
            context.write_text(pre_commit, f"{content.rstrip()}\n\n# Spell check\n{CSPELL_COMMAND}\n")
        else:
            context.write_text(pre_commit, PRE_COMMIT_TEMPLATE.format(command=CSPELL_COMMAND))
            context.make_executable(pre_commit)
        logger.info("added cspell to {}", pre_commit)
        return True
