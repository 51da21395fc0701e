"""Tests for the rule context helpers and the subprocess runner."""

import subprocess
from unittest.mock import patch

import pytest

from lineup.context import RuleContext, dump_json
from lineup.errors import CommandFailed, MalformedDocument
from lineup.process import CommandResult, run_command

from helpers import FakeRunner


def test_option_lookup(tmp_path):
    assert RuleContext(root=tmp_path, options={"version": "1"}).option("version") == "1"
    assert RuleContext(root=tmp_path, options={"version": "1"}).option("other", "d") == "d"
    assert RuleContext(root=tmp_path, options="not a mapping").option("version", "d") == "d"
    assert RuleContext(root=tmp_path).option("version") is None


def test_write_text_creates_parents(ctx, tmp_path):
    target = tmp_path / "a" / "b" / "file.txt"
    ctx.write_text(target, "hello")
    assert target.read_text() == "hello"


def test_dump_json_format():
    assert dump_json({"b": 1, "a": "é"}) == '{\n  "b": 1,\n  "a": "é"\n}\n'


def test_read_json_errors(ctx, tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{,}")
    with pytest.raises(MalformedDocument, match="Invalid JSON in"):
        ctx.read_json(bad)

    arr = tmp_path / "arr.json"
    arr.write_text("[]")
    assert ctx.read_json(arr) == []
    with pytest.raises(MalformedDocument, match="Expected object"):
        ctx.read_json_object(arr)


def test_read_missing_file_raises_oserror(ctx, tmp_path):
    with pytest.raises(FileNotFoundError):
        ctx.read_json(tmp_path / "missing.json")


def test_run_raises_on_failure(tmp_path):
    context = RuleContext(root=tmp_path, runner=FakeRunner(fail=("pnpm",)))
    with pytest.raises(CommandFailed) as exc:
        context.run("pnpm", ["install"], tmp_path, "Install failed")
    assert exc.value.stderr == "boom"
    assert exc.value.command == "pnpm"
    assert str(exc.value) == "Install failed: boom"


def test_run_returns_result(tmp_path, runner):
    context = RuleContext(root=tmp_path, runner=runner)
    result = context.run("echo", ["hi"], tmp_path, "echo failed")
    assert result.ok
    assert runner.calls == [("echo", ("hi",), tmp_path)]


def test_run_command_uses_subprocess(tmp_path):
    completed = subprocess.CompletedProcess(["pnpm", "add"], 3, stdout="out", stderr="err")
    with patch("lineup.process.subprocess.run", return_value=completed) as run:
        result = run_command("pnpm", ["add", "-D", "x"], tmp_path)
    run.assert_called_once_with(["pnpm", "add", "-D", "x"], cwd=tmp_path, capture_output=True, text=True)
    assert result == CommandResult(3, "out", "err")
    assert not result.ok
