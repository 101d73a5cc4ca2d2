"""Pytest fixtures for git-task-keeper tests"""
import tempfile
from collections import defaultdict
from pathlib import Path

import git
import pytest

from git_task_keeper.config import Config
from git_task_keeper.models.results import CommandResult
from git_task_keeper.models.task import Repository, TaskDirectory
from git_task_keeper.services.git.gateway import GitGateway


class FakeGateway:
    """Scripted stand-in for GitGateway.

    ``responses[method]`` is either a list of CommandResults consumed in order
    or a callable receiving the call arguments. Unscripted calls succeed with
    empty output.
    """

    def __init__(self):
        self.responses = defaultdict(list)
        self.calls = []

    def script(self, method, *results):
        self.responses[method].extend(results)
        return self

    def _respond(self, method, *args):
        self.calls.append((method,) + args)
        response = self.responses.get(method)
        if callable(response):
            return response(*args)
        if response:
            return response.pop(0)
        return CommandResult(0, "")

    def methods_called(self):
        return [call[0] for call in self.calls]

    def verify_branch(self, repo_path, branch_name):
        return self._respond("verify_branch", repo_path, branch_name)

    def list_worktrees(self, repo_path):
        return self._respond("list_worktrees", repo_path)

    def add_worktree(self, repo_path, worktree_path, branch_name, create_branch):
        return self._respond("add_worktree", repo_path, worktree_path, branch_name, create_branch)

    def remove_worktree(self, repo_path, worktree_path):
        return self._respond("remove_worktree", repo_path, worktree_path)

    def prune_worktrees(self, repo_path):
        return self._respond("prune_worktrees", repo_path)

    def current_branch(self, worktree_path):
        self.calls.append(("current_branch", worktree_path))
        return None


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def config(temp_dir):
    """Configuration pointing at empty tasks/repos directories."""
    cfg = Config(
        tasks_base=str(temp_dir / "tasks"),
        repos_base=str(temp_dir / "repos"),
        sequential=True,
    )
    cfg.ensure_directories()
    return cfg


@pytest.fixture
def gateway():
    """Real gateway with a generous timeout."""
    return GitGateway(timeout=60)


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def make_bare_repo(config, temp_dir):
    """Factory creating ``<repos_base>/<name>.git`` with one commit on main.

    Extra branch names are created alongside main but never checked out.
    """
    def _make(name, branches=()):
        source_path = temp_dir / "sources" / name
        source_path.mkdir(parents=True)

        source = git.Repo.init(source_path)
        source.config_writer().set_value("user", "name", "Test User").release()
        source.config_writer().set_value("user", "email", "test@example.com").release()

        readme = source_path / "README.md"
        readme.write_text(f"# {name}\n")
        source.index.add(["README.md"])
        source.index.commit("Initial commit")
        source.git.branch("-M", "main")
        for branch in branches:
            source.git.branch(branch)

        bare_path = Path(config.repos_base) / f"{name}.git"
        bare = source.clone(str(bare_path), bare=True)
        bare.close()
        source.close()
        return Repository(name=name, path=str(bare_path))

    return _make


@pytest.fixture
def api_repo(make_bare_repo):
    return make_bare_repo("api", branches=["existing-branch"])


@pytest.fixture
def frontend_repo(make_bare_repo):
    return make_bare_repo("frontend")


@pytest.fixture
def make_task(config):
    """Factory creating an empty task directory."""
    def _make(name):
        path = Path(config.tasks_base) / name
        path.mkdir(parents=True, exist_ok=True)
        return TaskDirectory(name=name, path=str(path))

    return _make


@pytest.fixture
def fake_repo(temp_dir):
    """Repository whose path exists but is never touched by real git."""
    path = temp_dir / "fake.git"
    path.mkdir()
    return Repository(name="fake", path=str(path))


def _porcelain(*records):
    """Build porcelain worktree output from (path, branch, prunable) tuples."""
    blocks = []
    for path, branch, prunable in records:
        lines = [f"worktree {path}", "HEAD 0123456789abcdef0123456789abcdef01234567"]
        lines.append(f"branch refs/heads/{branch}" if branch else "detached")
        if prunable:
            lines.append("prunable gitdir file points to non-existent location")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"


@pytest.fixture
def porcelain():
    """Builder for porcelain worktree listings."""
    return _porcelain

