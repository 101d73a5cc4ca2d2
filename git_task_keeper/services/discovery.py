"""Enumerates bare repositories, task directories and task worktrees."""

import os
from typing import List, Optional, Union

from git_task_keeper.config import normalize_path
from git_task_keeper.logging_config import get_logger
from git_task_keeper.models.task import Repository, TaskDirectory, TaskWorktree
from git_task_keeper.services.git.gateway import GitGateway

logger = get_logger(__name__)

GIT_METADATA_DIR = ".git"


def _subdirectories(path: str) -> List[os.DirEntry]:
    try:
        with os.scandir(path) as it:
            entries = [entry for entry in it if entry.is_dir(follow_symlinks=False)]
    except FileNotFoundError:
        logger.debug(f"Directory {path} does not exist")
        return []
    return sorted(entries, key=lambda entry: entry.name)


def is_bare_repository(path: str) -> bool:
    """A bare repository has a HEAD file and a refs directory at its top level."""
    return os.path.isfile(os.path.join(path, "HEAD")) and os.path.isdir(os.path.join(path, "refs"))


def repository_name(path: str) -> str:
    """Repository name from its directory, without a ``.git`` suffix."""
    name = os.path.basename(normalize_path(path))
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return name


def discover_repositories(repos_base: str) -> List[Repository]:
    """All bare repositories directly under ``repos_base``, sorted by name."""
    repositories = [
        Repository(name=repository_name(entry.path), path=entry.path)
        for entry in _subdirectories(repos_base)
        if is_bare_repository(entry.path)
    ]
    logger.debug(f"Found {len(repositories)} repositories in {repos_base}")
    return sorted(repositories, key=lambda repo: repo.name)


def list_tasks(tasks_base: str) -> List[TaskDirectory]:
    """All task directories under ``tasks_base``, sorted by name."""
    return [TaskDirectory(name=entry.name, path=entry.path) for entry in _subdirectories(tasks_base)]


def resolve_task(task: Union[TaskDirectory, str], tasks_base: str) -> TaskDirectory:
    """Turn a task name (case-insensitive) into a TaskDirectory under ``tasks_base``."""
    if isinstance(task, TaskDirectory):
        return task
    name = task.strip().lower()
    if not name or os.sep in name or name in (".", ".."):
        raise ValueError(f"Invalid task name: '{task}'")
    return TaskDirectory(name=name, path=os.path.join(normalize_path(tasks_base), name))


def task_children(task: TaskDirectory) -> List[os.DirEntry]:
    """Immediate subdirectories of a task, excluding git metadata."""
    return [entry for entry in _subdirectories(task.path) if entry.name != GIT_METADATA_DIR]


def list_task_worktrees(task: TaskDirectory, gateway: Optional[GitGateway] = None) -> List[TaskWorktree]:
    """Directories in a task with the branch each one has checked out."""
    gateway = gateway or GitGateway()
    return [
        TaskWorktree(name=entry.name, path=entry.path, branch=gateway.current_branch(entry.path))
        for entry in task_children(task)
    ]


def read_worktree_gitdir(worktree_path: str) -> Optional[str]:
    """Admin directory a linked worktree points at via its ``.git`` file."""
    git_file = os.path.join(worktree_path, GIT_METADATA_DIR)
    if not os.path.isfile(git_file):
        return None
    try:
        with open(git_file, encoding="utf-8") as f:
            first_line = f.readline().strip()
    except OSError as e:
        logger.debug(f"Could not read {git_file}: {e}")
        return None

    if not first_line.startswith("gitdir:"):
        return None
    gitdir = first_line[len("gitdir:"):].strip()
    if not os.path.isabs(gitdir):
        gitdir = os.path.join(worktree_path, gitdir)
    return os.path.normpath(gitdir)


def find_owner(worktree_path: str, repositories: List[Repository]) -> Optional[Repository]:
    """Repository a task subdirectory belongs to.

    The worktree's ``.git`` file pointing into a known repository wins;
    otherwise the directory name must equal a repository name.
    """
    gitdir = read_worktree_gitdir(worktree_path)
    if gitdir:
        for repo in repositories:
            admin_root = os.path.join(os.path.realpath(repo.path), "worktrees")
            if os.path.realpath(gitdir).startswith(admin_root + os.sep):
                return repo

    name = os.path.basename(worktree_path)
    return next((repo for repo in repositories if repo.name == name), None)
