"""Git backend access for git-task-keeper."""

from .gateway import BRANCH_NOT_FOUND_EXIT_CODE, GitGateway
from .registry import entries_for_branch, format_worktree_list, parse_worktree_list

__all__ = [
    "BRANCH_NOT_FOUND_EXIT_CODE",
    "GitGateway",
    "entries_for_branch",
    "format_worktree_list",
    "parse_worktree_list",
]
