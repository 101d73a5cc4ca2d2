"""Worktree lifecycle services for git-task-keeper."""

from .branch_resolver import BranchResolver
from .pruner import BulkPruner
from .task_deletion import TaskDeletionOrchestrator
from .worktree_creator import WorktreeCreator

__all__ = [
    "BranchResolver",
    "BulkPruner",
    "TaskDeletionOrchestrator",
    "WorktreeCreator",
]
