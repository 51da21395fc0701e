"""Directory walker shared by all rules. Never follows symlinks; prunes dependency caches."""

import os
from pathlib import Path
from typing import Iterable, Iterator

# Dependency caches: never reported on, never fixed inside
SKIP_DIRS = frozenset({"node_modules"})
GIT_DIR = ".git"


def walk(root: Path, skip: Iterable[str] = SKIP_DIRS) -> Iterator[Path]:
    """Yield every directory and file under root (root excluded), lazily.

    Directories named in ``skip`` are pruned before descending. ``.git`` is
    yielded but its contents are not.
    """
    skip = set(skip)
    for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
        base = Path(dirpath)
        dirnames[:] = sorted(d for d in dirnames if d not in skip)
        for d in dirnames:
            yield base / d
        for f in sorted(filenames):
            yield base / f
        if GIT_DIR in dirnames:
            dirnames.remove(GIT_DIR)


def find_git_repos(root: Path, skip: Iterable[str] = SKIP_DIRS) -> list[Path]:
    """Repo roots: parent of every ``.git`` directory (not worktree ``.git`` files)."""
    repos = []
    for p in walk(root, skip):
        if p.name == GIT_DIR and p.is_dir() and not p.is_symlink():
            repos.append(p.parent)
    return repos


def find_manifests(root: Path, name: str, skip: Iterable[str] = SKIP_DIRS) -> list[Path]:
    """Every regular file called ``name`` under root, e.g. package.json."""
    return [p for p in walk(root, skip) if p.name == name and p.is_file() and not p.is_symlink()]
