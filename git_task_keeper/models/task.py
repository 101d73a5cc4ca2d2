"""Repository, task and worktree binding models."""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Repository:
    """A bare repository discovered under the repos base directory."""

    name: str
    path: str

    def exists(self) -> bool:
        return os.path.isdir(self.path)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class TaskDirectory:
    """Per-issue directory holding one worktree per repository (plus suffixed extras)."""

    name: str
    path: str

    def exists(self) -> bool:
        return os.path.isdir(self.path)

    def child(self, name: str) -> str:
        return os.path.join(self.path, name)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class WorktreeBinding:
    """A worktree of ``repository`` checked out on ``branch_name`` inside ``task``."""

    task: TaskDirectory
    repository: Repository
    worktree_name: str
    branch_name: str

    @property
    def path(self) -> str:
        return self.task.child(self.worktree_name)

    def __str__(self) -> str:
        return f"{self.worktree_name} ({self.branch_name})"


@dataclass(frozen=True)
class TaskWorktree:
    """A directory found inside a task, with whatever branch it has checked out."""

    name: str
    path: str
    branch: Optional[str] = None  # None = not a git worktree
