"""Rule: every git repo has .claude/settings.json with a Bash PreToolUse hook."""

from __future__ import annotations

import copy
from pathlib import Path

from ..context import RuleContext
from ..errors import MalformedDocument
from ..jsonmerge import StructureError, append_if_absent, ensure_array, has_key_matching
from ..log import get_logger
from ..models import CheckEntry, FixEntry, LintResult, Severity
from ..walker import find_git_repos
from .base import Rule

logger = get_logger(__name__)

CHECK_CLAUDE_DIR_EXISTS = "claude-dir-exists"
CHECK_SETTINGS_FILE_EXISTS = "settings-file-exists"
CHECK_HOOKS_OBJECT_EXISTS = "hooks-object-exists"
CHECK_PRE_TOOL_USE_EXISTS = "pre-tool-use-exists"
CHECK_BASH_MATCHER_EXISTS = "bash-matcher-exists"

FIX_CREATE_SETTINGS = "create-settings"
FIX_MERGE_HOOKS = "merge-hooks"

CLAUDE_DIR = ".claude"
SETTINGS_FILE = "settings.json"
HOOK_EVENT = "PreToolUse"
BASH_MATCHER = "Bash"

# Rejects `git push --no-verify` / `git push -n` issued by the agent
NO_VERIFY_GUARD = (
    "INPUT=$(cat); if echo \"$INPUT\" | grep -q 'git push' && echo \"$INPUT\" | grep -qE -- "
    "'--no-verify|-n[^a-z]'; then echo 'BLOCKED: --no-verify is not allowed on git push' >&2; exit 2; fi"
)

BASH_HOOK = {
    "matcher": BASH_MATCHER,
    "hooks": [
        {
            "type": "command",
            "command": NO_VERIFY_GUARD,
        }
    ],
}


def default_settings() -> dict:
    """Canonical settings document written when none exists."""
    return {"hooks": {HOOK_EVENT: [copy.deepcopy(BASH_HOOK)]}}


def merge_hooks(settings: dict) -> bool:
    """Add the Bash hook to ``settings`` without touching anything else.

    Returns True if the document changed. Raises StructureError when
    ``hooks`` or ``hooks.PreToolUse`` exist with the wrong type.
    """
    entries, changed = ensure_array(settings, ("hooks", HOOK_EVENT))
    added = append_if_absent(entries, copy.deepcopy(BASH_HOOK), has_key_matching("matcher", BASH_MATCHER))
    return changed or added


class ClaudeSettingsRule(Rule):
    id = "claude-settings-hooks"
    name = "Claude Settings Hooks"
    description = "Ensures all git repositories have .claude/settings.json with required hooks configuration"
    default_severity = Severity.ERROR

    CHECKS = (
        CheckEntry(CHECK_CLAUDE_DIR_EXISTS, "Verify .claude directory exists in git repositories"),
        CheckEntry(CHECK_SETTINGS_FILE_EXISTS, "Verify settings.json file exists in .claude directory"),
        CheckEntry(CHECK_HOOKS_OBJECT_EXISTS, "Verify 'hooks' configuration object exists in settings.json"),
        CheckEntry(CHECK_PRE_TOOL_USE_EXISTS, "Verify PreToolUse hook array is configured"),
        CheckEntry(CHECK_BASH_MATCHER_EXISTS, "Verify Bash matcher hook is present to prevent dangerous commands"),
    )
    FIXES = (
        FixEntry(
            FIX_CREATE_SETTINGS,
            "Create .claude/settings.json with default hooks configuration",
            (CHECK_CLAUDE_DIR_EXISTS, CHECK_SETTINGS_FILE_EXISTS),
        ),
        FixEntry(
            FIX_MERGE_HOOKS,
            "Deep merge required hooks into existing settings.json",
            (CHECK_HOOKS_OBJECT_EXISTS, CHECK_PRE_TOOL_USE_EXISTS, CHECK_BASH_MATCHER_EXISTS),
        ),
    )

    def check(self, context: RuleContext) -> list[LintResult]:
        results: list[LintResult] = []
        for repo in find_git_repos(context.root):
            results.extend(self._check_repo(context, repo))
        return results

    def _check_repo(self, context: RuleContext, repo_root: Path) -> list[LintResult]:
        claude_dir = repo_root / CLAUDE_DIR
        settings_path = claude_dir / SETTINGS_FILE

        if not context.exists(claude_dir):
            return [self.result(
                context,
                CHECK_CLAUDE_DIR_EXISTS,
                "Missing .claude directory in git repository",
                repo_root,
                suggestion="Create .claude/settings.json with required hooks configuration",
                fixable_by=(FIX_CREATE_SETTINGS,),
            )]

        if not context.exists(settings_path):
            return [self.result(
                context,
                CHECK_SETTINGS_FILE_EXISTS,
                "Missing settings.json in .claude directory",
                claude_dir,
                suggestion="Create settings.json with required hooks configuration",
                fixable_by=(FIX_CREATE_SETTINGS,),
            )]

        return self._check_settings(context, settings_path)

    def _check_settings(self, context: RuleContext, path: Path) -> list[LintResult]:
        settings, problem = self.load_json(context, path, CHECK_SETTINGS_FILE_EXISTS, "settings.json")
        if problem is not None:
            return [problem]
        if not isinstance(settings, dict):
            return [self.bad_structure(CHECK_SETTINGS_FILE_EXISTS, path, "settings.json", "top-level value must be an object")]

        hooks = settings.get("hooks")
        if hooks is None:
            return [self.result(
                context,
                CHECK_HOOKS_OBJECT_EXISTS,
                "Missing 'hooks' configuration object",
                path,
                suggestion="Add 'hooks' object with required hook configurations",
                fixable_by=(FIX_MERGE_HOOKS,),
            )]
        if not isinstance(hooks, dict):
            return [self.bad_structure(CHECK_HOOKS_OBJECT_EXISTS, path, "settings.json", "'hooks' must be an object")]

        entries = hooks.get(HOOK_EVENT)
        if entries is None:
            return [self.result(
                context,
                CHECK_PRE_TOOL_USE_EXISTS,
                "Missing PreToolUse hook configuration",
                path,
                severity=Severity.WARNING,
                suggestion="Add PreToolUse hooks to validate tool usage",
                fixable_by=(FIX_MERGE_HOOKS,),
            )]
        if not isinstance(entries, list):
            return [self.bad_structure(CHECK_PRE_TOOL_USE_EXISTS, path, "settings.json", "'hooks.PreToolUse' must be an array")]

        if not any(has_key_matching("matcher", BASH_MATCHER)(e) for e in entries):
            return [self.result(
                context,
                CHECK_BASH_MATCHER_EXISTS,
                "PreToolUse hooks missing Bash matcher",
                path,
                severity=Severity.WARNING,
                suggestion="Add a Bash matcher hook to prevent dangerous commands",
                fixable_by=(FIX_MERGE_HOOKS,),
            )]
        return []

    def fix(self, context: RuleContext) -> int:
        fixed = 0
        for repo in find_git_repos(context.root):
            settings_path = repo / CLAUDE_DIR / SETTINGS_FILE
            if not context.exists(settings_path):
                context.write_json(settings_path, default_settings())
                logger.info("created {}", settings_path)
                fixed += 1
                continue

            settings = context.read_json_object(settings_path)
            try:
                changed = merge_hooks(settings)
            except StructureError as e:
                raise MalformedDocument(settings_path, str(e)) from e
            if changed:
                context.write_json(settings_path, settings)
                logger.info("merged Bash hook into {}", settings_path)
                fixed += 1
        return fixed
