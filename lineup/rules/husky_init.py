"""Rule: git repos have Husky (JS) or husky-rs (Rust) initialized for git hooks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from ..context import RuleContext
from ..errors import MalformedDocument
from ..jsonmerge import StructureError, lookup, set_default
from ..log import get_logger
from ..models import CheckEntry, FixEntry, LintResult, Severity
from ..walker import find_git_repos
from .base import Rule

logger = get_logger(__name__)

CHECK_HUSKY_DIR_EXISTS = "husky-dir-exists"
CHECK_PREPARE_SCRIPT = "prepare-script"
CHECK_HUSKY_RS_DEPENDENCY = "husky-rs-dependency"
CHECK_GIT_HOOKS_PRESENT = "git-hooks-present"

FIX_INIT_HUSKY = "init-husky"

HUSKY_DIR = ".husky"
HUSKY_RS = "husky-rs"
CARGO_DEPENDENCY_TABLES = ("dev-dependencies", "dependencies")
GIT_HOOKS = ("pre-commit", "commit-msg", "pre-push", "post-merge", "post-checkout")


class ProjectType(str, Enum):
    JAVASCRIPT = "javascript"
    RUST = "rust"


def detect_project_type(repo_root: Path) -> ProjectType | None:
    """package.json wins over Cargo.toml when both are present."""
    if (repo_root / "package.json").exists():
        return ProjectType.JAVASCRIPT
    if (repo_root / "Cargo.toml").exists():
        return ProjectType.RUST
    return None


class _Strategy(ABC):
    """Project-specific half of the rule. Findings are built through ``rule``."""

    tool = ""
    init_hint = ""
    add_hook_hint = ""

    def __init__(self, rule: Rule):
        self.rule = rule

    def check(self, context: RuleContext, repo_root: Path) -> list[LintResult]:
        manifest, problem = self.load_manifest(context, repo_root)
        if problem is not None:
            return [problem]

        husky_dir = repo_root / HUSKY_DIR
        if not context.exists(husky_dir):
            return [self.rule.result(
                context,
                CHECK_HUSKY_DIR_EXISTS,
                f"Missing .husky directory - {self.tool} is not initialized",
                repo_root,
                suggestion=self.init_hint,
                fixable_by=(FIX_INIT_HUSKY,),
            )]
        results = self.check_manifest(context, repo_root, manifest)
        if not _has_git_hook(husky_dir, context.option("hooks", GIT_HOOKS)):
            results.append(self.rule.result(
                context,
                CHECK_GIT_HOOKS_PRESENT,
                "No git hooks found in .husky directory",
                husky_dir,
                severity=Severity.INFO,
                suggestion=self.add_hook_hint,
            ))
        return results

    @abstractmethod
    def load_manifest(self, context: RuleContext, repo_root: Path) -> tuple[Any, LintResult | None]:
        """Parsed manifest, or a finding when it cannot be read, parsed or edited by the fix."""

    @abstractmethod
    def check_manifest(self, context: RuleContext, repo_root: Path, manifest: Any) -> list[LintResult]:
        """Findings about the manifest of an initialized repo."""

    @abstractmethod
    def fix(self, context: RuleContext, repo_root: Path) -> bool:
        """Initialize hooks in repo_root; True if anything changed."""


class _JavaScriptStrategy(_Strategy):
    tool = "Husky"
    init_hint = "Run 'npx husky init' or 'pnpm exec husky init' to initialize Husky"
    add_hook_hint = "Add hooks like 'echo \"npm test\" > .husky/pre-commit'"

    def load_manifest(self, context: RuleContext, repo_root: Path) -> tuple[Any, LintResult | None]:
        package_json = repo_root / "package.json"
        data, problem = self.rule.load_json(context, package_json, CHECK_PREPARE_SCRIPT, "package.json")
        if problem is not None:
            return None, problem
        if not isinstance(data, dict):
            return None, self.rule.bad_structure(
                CHECK_PREPARE_SCRIPT, package_json, "package.json", "top-level value must be an object"
            )
        # init-husky adds scripts.prepare; null or absent scripts is created
        scripts = data.get("scripts")
        if scripts is not None and not isinstance(scripts, dict):
            return None, self.rule.bad_structure(
                CHECK_PREPARE_SCRIPT, package_json, "package.json", "'scripts' must be an object"
            )
        return data, None

    def check_manifest(self, context: RuleContext, repo_root: Path, manifest: Any) -> list[LintResult]:
        prepare = lookup(manifest, ("scripts", "prepare"))
        if isinstance(prepare, str) and "husky" in prepare:
            return []
        return [self.rule.result(
            context,
            CHECK_PREPARE_SCRIPT,
            "Missing 'prepare' script with Husky in package.json",
            repo_root / "package.json",
            suggestion="Add '\"prepare\": \"husky\"' to scripts in package.json",
        )]

    def fix(self, context: RuleContext, repo_root: Path) -> bool:
        context.run("npx", ["husky", "init"], repo_root, "Husky init failed")
        package_json = repo_root / "package.json"
        if context.exists(package_json):
            data = context.read_json_object(package_json)
            try:
                changed = set_default(data, ("scripts",), "prepare", "husky")
            except StructureError as e:
                raise MalformedDocument(package_json, str(e)) from e
            if changed:
                context.write_json(package_json, data)
        return True


class _RustStrategy(_Strategy):
    tool = "husky-rs"
    init_hint = "Run 'cargo husky-rs init' to initialize husky-rs"
    add_hook_hint = "Add hooks using 'cargo husky-rs add pre-commit \"cargo test\"'"

    def load_manifest(self, context: RuleContext, repo_root: Path) -> tuple[Any, LintResult | None]:
        cargo_toml = repo_root / "Cargo.toml"
        content, problem = self.rule.read_text(context, cargo_toml, CHECK_HUSKY_RS_DEPENDENCY, "Cargo.toml")
        if problem is not None:
            return None, problem
        try:
            return tomllib.loads(content), None
        except tomllib.TOMLDecodeError as e:
            return None, self.rule.malformed(CHECK_HUSKY_RS_DEPENDENCY, cargo_toml, "Cargo.toml", str(e), syntax="TOML")

    def check_manifest(self, context: RuleContext, repo_root: Path, manifest: Any) -> list[LintResult]:
        if has_husky_rs(manifest):
            return []
        return [self.rule.result(
            context,
            CHECK_HUSKY_RS_DEPENDENCY,
            "Missing husky-rs in dev-dependencies",
            repo_root / "Cargo.toml",
            suggestion="Add 'husky-rs = \"<version>\"' to [dev-dependencies] in Cargo.toml",
        )]

    def fix(self, context: RuleContext, repo_root: Path) -> bool:
        context.run("cargo", ["husky-rs", "init"], repo_root, "husky-rs init failed")
        return True


def has_husky_rs(manifest: dict) -> bool:
    """husky-rs listed under [dev-dependencies] or [dependencies]."""
    for table in CARGO_DEPENDENCY_TABLES:
        deps = manifest.get(table)
        if isinstance(deps, dict) and HUSKY_RS in deps:
            return True
    return False


def _has_git_hook(husky_dir: Path, hook_names) -> bool:
    names = set(hook_names)
    try:
        return any(entry.name in names for entry in husky_dir.iterdir())
    except OSError:
        return False


class HuskyInitRule(Rule):
    id = "husky-init"
    name = "Husky Initialization"
    description = "Ensures git repositories have Husky (JS) or husky-rs (Rust) initialized for git hooks"
    default_severity = Severity.WARNING

    CHECKS = (
        CheckEntry(CHECK_HUSKY_DIR_EXISTS, "Verify .husky directory exists in JavaScript or Rust repositories"),
        CheckEntry(CHECK_PREPARE_SCRIPT, "Verify package.json has a 'prepare' script running husky"),
        CheckEntry(CHECK_HUSKY_RS_DEPENDENCY, "Verify Cargo.toml lists husky-rs"),
        CheckEntry(CHECK_GIT_HOOKS_PRESENT, "Verify at least one git hook exists in .husky"),
    )
    FIXES = (
        FixEntry(
            FIX_INIT_HUSKY,
            "Run 'npx husky init' (JavaScript) or 'cargo husky-rs init' (Rust)",
            (CHECK_HUSKY_DIR_EXISTS,),
        ),
    )

    def strategy(self, project_type: ProjectType) -> _Strategy:
        if project_type is ProjectType.JAVASCRIPT:
            return _JavaScriptStrategy(self)
        return _RustStrategy(self)

    def check(self, context: RuleContext) -> list[LintResult]:
        results: list[LintResult] = []
        for repo in find_git_repos(context.root):
            project_type = detect_project_type(repo)
            if project_type is None:
                continue
            results.extend(self.strategy(project_type).check(context, repo))
        return results

    def fix(self, context: RuleContext) -> int:
        fixed = 0
        for repo in find_git_repos(context.root):
            project_type = detect_project_type(repo)
            if project_type is None or context.exists(repo / HUSKY_DIR):
                continue
            logger.info("initializing {} hooks in {}", project_type.value, repo)
            if self.strategy(project_type).fix(context, repo):
                fixed += 1
        return fixed
