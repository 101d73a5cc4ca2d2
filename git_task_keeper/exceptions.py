"""Custom exceptions for git-task-keeper"""

from enum import Enum
from typing import Optional, Sequence


class ErrorKind(Enum):
    """Failure categories callers branch on."""

    INFRASTRUCTURE = "infrastructure"
    CONFLICT = "conflict"
    RECLAMATION = "reclamation"
    NOT_FOUND = "not-found"


class GitTaskKeeperError(Exception):
    """Base exception for all git-task-keeper errors."""

    kind: Optional[ErrorKind] = None


class InfrastructureError(GitTaskKeeperError):
    """The backend could not be run, or failed in an unexpected way."""

    kind = ErrorKind.INFRASTRUCTURE


class GitProcessError(InfrastructureError):
    """Exception raised when the git process cannot be started or times out."""

    def __init__(self, command: Sequence[str], message: str, timed_out: bool = False):
        self.command = list(command)
        self.message = message
        self.timed_out = timed_out
        super().__init__(f"Could not run '{' '.join(self.command)}': {message}")


class GitOperationError(InfrastructureError):
    """Exception raised when a git command exits with an unexpected status."""

    def __init__(
        self,
        operation: str,
        repository: Optional[str] = None,
        message: Optional[str] = None,
        status: Optional[int] = None,
    ):
        self.operation = operation
        self.repository = repository
        self.message = message
        self.status = status

        error_msg = f"Git operation '{operation}' failed"
        if repository:
            error_msg += f" for repository '{repository}'"
        if status is not None:
            error_msg += f" (exit {status})"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class WorktreeCreationError(GitOperationError):
    """Exception raised when `git worktree add` fails."""

    def __init__(self, repository: str, path: str, message: Optional[str] = None, status: Optional[int] = None):
        self.path = path
        super().__init__("add_worktree", repository, message or "git worktree add failed", status)


class ConflictError(GitTaskKeeperError):
    """The requested worktree collides with existing state."""

    kind = ErrorKind.CONFLICT


class BranchInUseError(ConflictError):
    """Exception raised when a branch is checked out in a live worktree."""

    def __init__(self, branch: str, repository: str, path: Optional[str] = None):
        self.branch = branch
        self.repository = repository
        self.path = path

        error_msg = f"Branch '{branch}' of '{repository}' is already checked out in another worktree"
        if path:
            error_msg += f" ({path})"
        super().__init__(error_msg)


class WorktreeExistsError(ConflictError):
    """Exception raised when the target worktree directory already exists."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Worktree directory already exists: {path}")


class ReclamationError(GitTaskKeeperError):
    """Exception raised when a stale branch binding survives cleanup."""

    kind = ErrorKind.RECLAMATION

    def __init__(self, branch: str, repository: str, paths: Sequence[str] = ()):
        self.branch = branch
        self.repository = repository
        self.paths = list(paths)
        super().__init__(
            f"Branch '{branch}' still appears in the worktree list of '{repository}' after cleanup"
        )


class RepositoryNotFoundError(GitTaskKeeperError):
    """Exception raised when a repository path or name cannot be resolved."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, repository: str):
        self.repository = repository
        super().__init__(f"Bare repository not found: {repository}")


class TaskNotFoundError(GitTaskKeeperError):
    """Exception raised when an operation needs a task directory that is missing."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, task: str):
        self.task = task
        super().__init__(f"Task directory not found: {task}")
