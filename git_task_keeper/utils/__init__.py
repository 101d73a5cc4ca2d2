"""Utility functions for git-task-keeper.

This package provides utility modules:
- naming: Task and worktree naming rules
- parallel: Worker pool helpers for per-repository fan-out
"""

from .naming import (
    build_task_name,
    is_path_inside,
    parse_issue_string,
    resolve_task_dir,
    slugify,
    worktree_names,
)
from .parallel import get_optimal_worker_count, map_in_order

__all__ = [
    # Naming
    "build_task_name",
    "is_path_inside",
    "parse_issue_string",
    "resolve_task_dir",
    "slugify",
    "worktree_names",
    # Parallel
    "get_optimal_worker_count",
    "map_in_order",
]
