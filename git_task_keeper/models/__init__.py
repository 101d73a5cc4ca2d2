"""Data models for git-task-keeper."""

from .registry import RegistryEntry
from .results import (
    BranchResolution,
    CommandResult,
    PruneReport,
    RepositoryFailure,
    TaskDeletionReport,
)
from .task import Repository, TaskDirectory, TaskWorktree, WorktreeBinding

__all__ = [
    "BranchResolution",
    "CommandResult",
    "PruneReport",
    "RegistryEntry",
    "Repository",
    "RepositoryFailure",
    "TaskDeletionReport",
    "TaskDirectory",
    "TaskWorktree",
    "WorktreeBinding",
]
