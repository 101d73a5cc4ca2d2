"""Backend command gateway: the only place git processes are started."""

from typing import List, Optional

import git

from git_task_keeper.exceptions import GitProcessError
from git_task_keeper.logging_config import get_logger
from git_task_keeper.models.results import CommandResult

logger = get_logger(__name__)

# `git rev-parse --verify --quiet` exits 1 when the ref does not exist
BRANCH_NOT_FOUND_EXIT_CODE = 1

# GitPython replaces stderr with this message when kill_after_timeout fires
_TIMEOUT_MARKER = "Timeout: the command"


class GitGateway:
    """Runs a fixed set of git commands against bare repositories.

    Every call returns a CommandResult (exit status plus combined output) and
    leaves interpretation to the caller. A git process that cannot be started
    or that exceeds ``timeout`` raises GitProcessError instead.
    """

    def __init__(self, timeout: Optional[float] = None, git_executable: str = "git"):
        """Initialize the gateway.

        Args:
            timeout: Seconds before a git command is killed (None = no limit)
            git_executable: Name or path of the git binary
        """
        self.timeout = timeout
        self.git_executable = git_executable

    def _execute(self, command: List[str]) -> CommandResult:
        logger.debug(f"Running: {' '.join(command)}")
        try:
            status, stdout, stderr = git.Git().execute(
                command,
                with_extended_output=True,
                with_exceptions=False,
                kill_after_timeout=self.timeout,
            )
        except git.exc.GitCommandNotFound as e:
            raise GitProcessError(command, f"git executable not found ({e})") from e
        except OSError as e:
            raise GitProcessError(command, str(e)) from e

        if self.timeout is not None and status != 0 and stderr.startswith(_TIMEOUT_MARKER):
            raise GitProcessError(command, f"timed out after {self.timeout}s", timed_out=True)

        # A blank line between the streams would read as a record separator
        output = "\n".join(part.rstrip() for part in (stdout, stderr) if part and part.strip())
        logger.debug(f"Exit {status}: {output}" if output else f"Exit {status}")
        return CommandResult(status=status, output=output)

    def run(self, repo_path: str, *args: str) -> CommandResult:
        """Run ``git --git-dir=<repo_path> <args>``."""
        return self._execute([self.git_executable, f"--git-dir={repo_path}", *args])

    def verify_branch(self, repo_path: str, branch_name: str) -> CommandResult:
        """Exit 0 if the local branch exists, BRANCH_NOT_FOUND_EXIT_CODE if not."""
        return self.run(repo_path, "rev-parse", "--verify", "--quiet", f"refs/heads/{branch_name}")

    def list_worktrees(self, repo_path: str) -> CommandResult:
        return self.run(repo_path, "worktree", "list", "--porcelain")

    def add_worktree(self, repo_path: str, worktree_path: str, branch_name: str, create_branch: bool) -> CommandResult:
        """Add a worktree, creating ``branch_name`` first when ``create_branch`` is set."""
        if create_branch:
            return self.run(repo_path, "worktree", "add", "-b", branch_name, worktree_path)
        return self.run(repo_path, "worktree", "add", worktree_path, branch_name)

    def remove_worktree(self, repo_path: str, worktree_path: str) -> CommandResult:
        """Force-remove a worktree; works when its directory is already gone."""
        return self.run(repo_path, "worktree", "remove", "--force", worktree_path)

    def prune_worktrees(self, repo_path: str) -> CommandResult:
        """Drop registry entries for missing worktrees immediately (no grace period)."""
        return self.run(repo_path, "worktree", "prune", "--expire=now")

    def current_branch(self, worktree_path: str) -> Optional[str]:
        """Branch checked out at ``worktree_path``.

        Returns:
            The branch name, ``detached@<sha>`` for a detached HEAD, or None if
            the path is not a git checkout.
        """
        result = self._execute([self.git_executable, "-C", worktree_path, "rev-parse", "--abbrev-ref", "HEAD"])
        if not result.ok:
            return None
        if result.output != "HEAD":
            return result.output

        commit = self._execute([self.git_executable, "-C", worktree_path, "rev-parse", "--short", "HEAD"])
        return f"detached@{commit.output}" if commit.ok and commit.output else "detached"
