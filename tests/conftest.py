import pytest

from lineup.context import RuleContext

from helpers import FakeRunner


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def ctx(tmp_path, runner):
    """Check-mode context rooted at tmp_path."""
    return RuleContext(root=tmp_path, runner=runner)


@pytest.fixture
def fix_ctx(tmp_path, runner):
    return RuleContext(root=tmp_path, fix_mode=True, runner=runner)


@pytest.fixture
def git_repo(tmp_path):
    """tmp_path as a bare-bones git repo (just the .git directory)."""
    (tmp_path / ".git").mkdir()
    return tmp_path
