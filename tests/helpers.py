"""Test doubles and small file helpers shared by the test modules."""

import json
from pathlib import Path

from lineup.process import CommandResult


class FakeRunner:
    """Records commands instead of running them, and mimics what the real tools do on disk."""

    def __init__(self, fail: tuple = ()):
        self.calls = []
        self.fail = set(fail)

    def __call__(self, command, args, cwd):
        args = tuple(args)
        cwd = Path(cwd)
        self.calls.append((command, args, cwd))
        if command in self.fail:
            return CommandResult(1, "", "boom")
        if command == "npx" and args == ("husky", "init"):
            (cwd / ".husky").mkdir(exist_ok=True)
            (cwd / ".husky" / "pre-commit").write_text("npm test\n")
        elif command == "cargo" and args == ("husky-rs", "init"):
            (cwd / ".husky").mkdir(exist_ok=True)
            (cwd / ".husky" / "pre-commit").write_text("cargo test\n")
        elif command == "pnpm" and args[:2] == ("add", "-D"):
            package_json = cwd / "package.json"
            data = json.loads(package_json.read_text())
            name = args[2].rsplit("@", 1)[0]
            data.setdefault("devDependencies", {})[name] = "^1.0.0"
            write_json(package_json, data)
        return CommandResult(0)


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n")
    return path


def read_json(path: Path):
    return json.loads(path.read_text())


def ids(results) -> list:
    """check_ids of a list of results, in order."""
    return [r.check_id for r in results]
