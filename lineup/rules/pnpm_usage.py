"""Rule: JS projects use pnpm, not npm or yarn."""

from __future__ import annotations

import re
from pathlib import Path

from ..context import RuleContext
from ..log import get_logger
from ..models import CheckEntry, FixEntry, LintResult, Severity
from ..walker import find_manifests
from .base import Rule

logger = get_logger(__name__)

CHECK_YARN_LOCK_EXISTS = "yarn-lock-exists"
CHECK_PACKAGE_LOCK_EXISTS = "package-lock-exists"
CHECK_PACKAGE_MANAGER_FIELD = "package-manager-field"
CHECK_PNPM_SETUP = "pnpm-setup"
CHECK_SCRIPTS_NPM = "scripts-use-npm"
CHECK_SCRIPTS_YARN = "scripts-use-yarn"
CHECK_ENGINES_NPM = "engines-npm"
CHECK_ENGINES_YARN = "engines-yarn"

FIX_REMOVE_YARN_LOCK = "remove-yarn-lock"
FIX_REMOVE_PACKAGE_LOCK = "remove-package-lock"
FIX_UPDATE_PACKAGE_MANAGER = "update-package-manager"

DEFAULT_PNPM_VERSION = "9.0.0"

# lockfile name -> (check id, fix id, tool it belongs to)
FOREIGN_LOCKFILES = {
    "yarn.lock": (CHECK_YARN_LOCK_EXISTS, FIX_REMOVE_YARN_LOCK, "yarn"),
    "package-lock.json": (CHECK_PACKAGE_LOCK_EXISTS, FIX_REMOVE_PACKAGE_LOCK, "npm"),
}

# "npm run x" / "yarn build" as a command word, but not the "npm" inside "pnpm"
_TOOL_PATTERNS = {
    "npm": re.compile(r"(?<![\w@/-])npm(?=\s|$)"),
    "yarn": re.compile(r"(?<![\w@/-])yarn(?=\s|$)"),
}


def uses_tool(script: str, tool: str) -> bool:
    return bool(_TOOL_PATTERNS[tool].search(script))


class PnpmUsageRule(Rule):
    id = "pnpm-usage"
    name = "Pnpm Usage Validation"
    description = "Ensures projects use pnpm instead of npm or yarn for package management"
    default_severity = Severity.ERROR

    CHECKS = (
        CheckEntry(CHECK_YARN_LOCK_EXISTS, "Detect yarn.lock files indicating yarn usage"),
        CheckEntry(CHECK_PACKAGE_LOCK_EXISTS, "Detect package-lock.json files indicating npm usage"),
        CheckEntry(CHECK_PACKAGE_MANAGER_FIELD, "Verify packageManager field uses pnpm"),
        CheckEntry(CHECK_PNPM_SETUP, "Verify pnpm is set up (packageManager or pnpm-lock.yaml)"),
        CheckEntry(CHECK_SCRIPTS_NPM, "Detect scripts that use npm commands"),
        CheckEntry(CHECK_SCRIPTS_YARN, "Detect scripts that use yarn commands"),
        CheckEntry(CHECK_ENGINES_NPM, "Detect engines.npm field in package.json"),
        CheckEntry(CHECK_ENGINES_YARN, "Detect engines.yarn field in package.json"),
    )
    FIXES = (
        FixEntry(FIX_REMOVE_YARN_LOCK, "Remove yarn.lock file", (CHECK_YARN_LOCK_EXISTS,)),
        FixEntry(FIX_REMOVE_PACKAGE_LOCK, "Remove package-lock.json file", (CHECK_PACKAGE_LOCK_EXISTS,)),
        FixEntry(FIX_UPDATE_PACKAGE_MANAGER, "Update packageManager field to use pnpm", (CHECK_PACKAGE_MANAGER_FIELD,)),
    )

    def check(self, context: RuleContext) -> list[LintResult]:
        results: list[LintResult] = []
        for package_json in find_manifests(context.root, "package.json"):
            results.extend(self._check_package(context, package_json))
        return results

    def _check_package(self, context: RuleContext, package_json: Path) -> list[LintResult]:
        results: list[LintResult] = []
        project_dir = package_json.parent

        for lockfile, (check_id, fix_id, tool) in FOREIGN_LOCKFILES.items():
            lock_path = project_dir / lockfile
            if context.exists(lock_path):
                results.append(self.result(
                    context,
                    check_id,
                    f"Found {lockfile} - project appears to use {tool} instead of pnpm",
                    lock_path,
                    suggestion=f"Remove {lockfile} and use 'pnpm install' to generate pnpm-lock.yaml",
                    fixable_by=(fix_id,),
                ))

        package, problem = self.load_json(context, package_json, CHECK_PACKAGE_MANAGER_FIELD, "package.json")
        if problem is not None:
            results.append(problem)
            return results
        if not isinstance(package, dict):
            results.append(self.bad_structure(
                CHECK_PACKAGE_MANAGER_FIELD, package_json, "package.json", "top-level value must be an object"
            ))
            return results

        manager = package.get("packageManager")
        if isinstance(manager, str):
            if not manager.startswith("pnpm@"):
                results.append(self.result(
                    context,
                    CHECK_PACKAGE_MANAGER_FIELD,
                    f"packageManager is set to '{manager}' instead of pnpm",
                    package_json,
                    suggestion="Change packageManager to 'pnpm@<version>' (e.g., 'pnpm@9.0.0')",
                    fixable_by=(FIX_UPDATE_PACKAGE_MANAGER,),
                ))
        elif not context.exists(project_dir / "pnpm-lock.yaml"):
            results.append(self.result(
                context,
                CHECK_PNPM_SETUP,
                "No packageManager field and no pnpm-lock.yaml found",
                package_json,
                severity=Severity.WARNING,
                suggestion="Add 'packageManager' field with pnpm version or run 'pnpm install'",
            ))

        scripts = package.get("scripts")
        if isinstance(scripts, dict):
            for script_name, command in scripts.items():
                if not isinstance(command, str):
                    continue
                for tool, check_id in (("npm", CHECK_SCRIPTS_NPM), ("yarn", CHECK_SCRIPTS_YARN)):
                    if uses_tool(command, tool):
                        results.append(self.result(
                            context,
                            check_id,
                            f"Script '{script_name}' uses {tool} command - consider using pnpm",
                            package_json,
                            severity=Severity.WARNING,
                            suggestion=f"Replace '{tool}' with 'pnpm' in script commands",
                        ))

        engines = package.get("engines")
        if isinstance(engines, dict):
            for tool, check_id in (("npm", CHECK_ENGINES_NPM), ("yarn", CHECK_ENGINES_YARN)):
                if tool in engines:
                    results.append(self.result(
                        context,
                        check_id,
                        f"engines.{tool} field found - suggests {tool} dependency",
                        package_json,
                        severity=Severity.WARNING,
                        suggestion=f"Consider removing engines.{tool} and adding engines.pnpm instead",
                    ))
        return results

    def fix(self, context: RuleContext) -> int:
        fixed = 0
        for package_json in find_manifests(context.root, "package.json"):
            project_dir = package_json.parent
            for lockfile in FOREIGN_LOCKFILES:
                lock_path = project_dir / lockfile
                if context.exists(lock_path):
                    context.remove(lock_path)
                    logger.info("removed {}", lock_path)
                    fixed += 1
            if self._fix_package_manager(context, package_json):
                fixed += 1
        return fixed

    def _fix_package_manager(self, context: RuleContext, package_json: Path) -> bool:
        package = context.read_json_object(package_json)
        manager = package.get("packageManager")
        if not isinstance(manager, str) or manager.startswith("pnpm@"):
            return False
        package["packageManager"] = f"pnpm@{context.option('version', DEFAULT_PNPM_VERSION)}"
        context.write_json(package_json, package)
        logger.info("packageManager {} -> {} in {}", manager, package["packageManager"], package_json)
        return True
