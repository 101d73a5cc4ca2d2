"""Outcome types returned by the lifecycle services."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class CommandResult:
    """Exit status and combined stdout/stderr of one git command."""

    status: int
    output: str

    @property
    def ok(self) -> bool:
        return self.status == 0

    def message(self, fallback: str) -> str:
        """Backend output, or ``fallback`` when git printed nothing."""
        return self.output if self.output else fallback


class BranchResolution(Enum):
    """Whether a branch can be used for a new worktree."""

    AVAILABLE_NEW = "available-new"  # Branch does not exist yet
    AVAILABLE_REUSE = "available-reuse"  # Branch exists and no live worktree holds it
    BLOCKED = "blocked"  # Branch is checked out in a live worktree


@dataclass(frozen=True)
class RepositoryFailure:
    """A failed backend call attributed to one repository."""

    repository: str
    message: str

    def __str__(self) -> str:
        return f"{self.repository}: {self.message}"


@dataclass
class PruneReport:
    """Aggregate result of pruning several repositories."""

    pruned_count: int = 0
    failures: List[RepositoryFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def record_success(self) -> None:
        self.pruned_count += 1

    def record_failure(self, repository: str, message: str) -> None:
        self.failures.append(RepositoryFailure(repository, message))


@dataclass
class TaskDeletionReport:
    """Aggregate result of deleting a task directory."""

    task_name: str
    task_path: str
    found: bool = True
    removed: List[str] = field(default_factory=list)  # Worktree directory names
    failures: List[RepositoryFailure] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)  # Directories with no known repository
    prune_report: Optional[PruneReport] = None

    @property
    def attempted(self) -> int:
        """Number of backend removals that were issued."""
        return len(self.removed) + len(self.failures)

    @property
    def ok(self) -> bool:
        return self.found and not self.failures

    def record_removed(self, worktree_name: str) -> None:
        self.removed.append(worktree_name)

    def record_failure(self, repository: str, message: str) -> None:
        self.failures.append(RepositoryFailure(repository, message))
