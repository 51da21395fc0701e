"""Tests for the husky-init rule and its JavaScript/Rust dispatch."""

import pytest

from lineup.context import RuleContext
from lineup.errors import CommandFailed
from lineup.models import Severity
from lineup.rules.husky_init import HuskyInitRule, ProjectType, _Strategy, detect_project_type

from helpers import FakeRunner, ids, read_json, write_json

RULE = HuskyInitRule()


def _js_repo(root, scripts=None):
    (root / ".git").mkdir(exist_ok=True)
    write_json(root / "package.json", {"name": "app", "scripts": scripts or {}})
    return root


def _rust_repo(root, cargo='[package]\nname = "app"\n'):
    (root / ".git").mkdir(exist_ok=True)
    (root / "Cargo.toml").write_text(cargo)
    return root


def test_detect_project_type(tmp_path):
    assert detect_project_type(tmp_path) is None
    (tmp_path / "Cargo.toml").write_text("")
    assert detect_project_type(tmp_path) is ProjectType.RUST
    (tmp_path / "package.json").write_text("{}")
    assert detect_project_type(tmp_path) is ProjectType.JAVASCRIPT


def test_repo_without_manifest_is_ignored(git_repo, ctx):
    assert RULE.check(ctx) == []


def test_manifest_without_git_is_ignored(tmp_path, ctx):
    write_json(tmp_path / "package.json", {"name": "app"})
    assert RULE.check(ctx) == []


def test_js_missing_husky(tmp_path, ctx):
    _js_repo(tmp_path)
    results = RULE.check(ctx)
    assert len(results) == 1
    r = results[0]
    assert r.check_id == "husky-dir-exists"
    assert r.severity == Severity.WARNING
    assert r.fixable_by == ("init-husky",)
    assert "Husky is not initialized" in r.message


def test_js_compliant(tmp_path, ctx):
    _js_repo(tmp_path, {"prepare": "husky"})
    (tmp_path / ".husky").mkdir()
    (tmp_path / ".husky" / "pre-commit").write_text("pnpm test\n")
    assert RULE.check(ctx) == []


def test_js_missing_prepare_and_hooks(tmp_path, ctx):
    _js_repo(tmp_path, {"test": "vitest"})
    (tmp_path / ".husky").mkdir()
    results = RULE.check(ctx)
    assert ids(results) == ["prepare-script", "git-hooks-present"]
    assert results[1].severity == Severity.INFO


def test_js_malformed_package_json(tmp_path, ctx):
    (tmp_path / ".git").mkdir()
    (tmp_path / "package.json").write_text("{")
    (tmp_path / ".husky").mkdir()
    (tmp_path / ".husky" / "pre-commit").write_text("x")
    results = RULE.check(ctx)
    assert len(results) == 1
    assert results[0].severity == Severity.ERROR
    assert results[0].fixable_by == ()


def test_js_wrong_shaped_scripts(tmp_path, ctx):
    (tmp_path / ".git").mkdir()
    write_json(tmp_path / "package.json", {"name": "app", "scripts": ["husky"]})
    results = RULE.check(ctx)
    assert len(results) == 1
    assert results[0].check_id == "prepare-script"
    assert results[0].severity == Severity.ERROR
    assert results[0].fixable_by == ()
    assert "'scripts' must be an object" in results[0].message


def test_js_null_scripts_fixed(tmp_path, fix_ctx, ctx):
    (tmp_path / ".git").mkdir()
    write_json(tmp_path / "package.json", {"name": "app", "scripts": None})
    assert ids(RULE.check(ctx)) == ["husky-dir-exists"]
    assert RULE.fix(fix_ctx) == 1
    assert read_json(tmp_path / "package.json")["scripts"] == {"prepare": "husky"}
    assert RULE.check(ctx) == []


def test_strategy_is_abstract():
    with pytest.raises(TypeError):
        _Strategy(RULE)


def test_rust_missing_husky(tmp_path, ctx):
    _rust_repo(tmp_path)
    results = RULE.check(ctx)
    assert ids(results) == ["husky-dir-exists"]
    assert "husky-rs is not initialized" in results[0].message


def test_rust_missing_dependency(tmp_path, ctx):
    _rust_repo(tmp_path)
    (tmp_path / ".husky").mkdir()
    (tmp_path / ".husky" / "pre-push").write_text("cargo test\n")
    assert ids(RULE.check(ctx)) == ["husky-rs-dependency"]


def test_rust_compliant(tmp_path, ctx):
    _rust_repo(tmp_path, '[package]\nname = "app"\n\n[dev-dependencies]\nhusky-rs = "0.1"\n')
    (tmp_path / ".husky").mkdir()
    (tmp_path / ".husky" / "pre-commit").write_text("cargo test\n")
    assert RULE.check(ctx) == []


def test_rust_dependency_must_be_declared(tmp_path, ctx):
    _rust_repo(tmp_path, '[package]\nname = "app"\n# husky-rs comes later\n')
    (tmp_path / ".husky").mkdir()
    (tmp_path / ".husky" / "pre-commit").write_text("cargo test\n")
    assert ids(RULE.check(ctx)) == ["husky-rs-dependency"]


def test_rust_malformed_cargo_toml(tmp_path, ctx):
    _rust_repo(tmp_path, "[package\n")
    (tmp_path / ".husky").mkdir()
    (tmp_path / ".husky" / "pre-commit").write_text("cargo test\n")
    results = RULE.check(ctx)
    assert len(results) == 1
    assert results[0].message.startswith("Invalid TOML in Cargo.toml")
    assert results[0].severity == Severity.ERROR
    assert results[0].fixable_by == ()


def test_javascript_wins_when_both_manifests(tmp_path, ctx):
    _js_repo(tmp_path)
    (tmp_path / "Cargo.toml").write_text("")
    results = RULE.check(ctx)
    assert "Husky is not initialized" in results[0].message


def test_hooks_option(tmp_path):
    _js_repo(tmp_path, {"prepare": "husky"})
    (tmp_path / ".husky").mkdir()
    (tmp_path / ".husky" / "pre-commit").write_text("x")
    context = RuleContext(root=tmp_path, options={"hooks": ["pre-push"]})
    assert ids(RULE.check(context)) == ["git-hooks-present"]


def test_fix_js_runs_husky_init_and_sets_prepare(tmp_path, runner, fix_ctx, ctx):
    _js_repo(tmp_path)
    assert RULE.fix(fix_ctx) == 1
    assert runner.calls == [("npx", ("husky", "init"), tmp_path)]
    assert read_json(tmp_path / "package.json")["scripts"]["prepare"] == "husky"
    assert RULE.check(ctx) == []


def test_fix_js_keeps_existing_prepare(tmp_path, fix_ctx):
    _js_repo(tmp_path, {"prepare": "node setup.js"})
    RULE.fix(fix_ctx)
    assert read_json(tmp_path / "package.json")["scripts"]["prepare"] == "node setup.js"


def test_fix_rust(tmp_path, runner, fix_ctx):
    _rust_repo(tmp_path)
    assert RULE.fix(fix_ctx) == 1
    assert runner.calls == [("cargo", ("husky-rs", "init"), tmp_path)]


def test_fix_skips_initialized_repos(tmp_path, runner, fix_ctx):
    _js_repo(tmp_path)
    (tmp_path / ".husky").mkdir()
    assert RULE.fix(fix_ctx) == 0
    assert runner.calls == []


def test_fix_is_idempotent(tmp_path, runner, fix_ctx):
    _js_repo(tmp_path)
    RULE.fix(fix_ctx)
    assert RULE.fix(fix_ctx) == 0
    assert len(runner.calls) == 1


def test_fix_command_failure_propagates(tmp_path):
    _js_repo(tmp_path)
    context = RuleContext(root=tmp_path, fix_mode=True, runner=FakeRunner(fail=("npx",)))
    with pytest.raises(CommandFailed) as exc:
        RULE.fix(context)
    assert str(exc.value) == "Husky init failed: boom"
    assert exc.value.returncode == 1
