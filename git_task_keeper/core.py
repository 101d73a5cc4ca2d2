"""Core functionality for git-task-keeper"""

import os
from typing import List, Optional, Union

from git_task_keeper.config import Config
from git_task_keeper.exceptions import RepositoryNotFoundError, TaskNotFoundError, WorktreeExistsError
from git_task_keeper.logging_config import get_logger
from git_task_keeper.models.results import PruneReport, TaskDeletionReport
from git_task_keeper.models.task import Repository, TaskDirectory, TaskWorktree, WorktreeBinding
from git_task_keeper.services.branch_resolver import BranchResolver
from git_task_keeper.services.discovery import (
    discover_repositories,
    list_task_worktrees,
    list_tasks,
    resolve_task,
)
from git_task_keeper.services.git.gateway import GitGateway
from git_task_keeper.services.pruner import BulkPruner
from git_task_keeper.services.task_deletion import TaskDeletionOrchestrator
from git_task_keeper.services.worktree_creator import WorktreeCreator
from git_task_keeper.utils.naming import build_task_name, parse_issue_string, resolve_task_dir, worktree_names

logger = get_logger(__name__)


class TaskKeeper:
    """Main entry point for managing task directories and their worktrees."""

    def __init__(self, config: Union[Config, dict], gateway: Optional[GitGateway] = None):
        """Initialize TaskKeeper.

        Args:
            config: Configuration dict or Config object
            gateway: Git gateway to use (defaults to one honoring command_timeout)
        """
        if isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config

        self.gateway = gateway or GitGateway(timeout=self.config.command_timeout)
        self.resolver = BranchResolver(self.gateway, reclaim_retries=self.config.reclaim_retries)
        self.creator = WorktreeCreator(self.gateway, self.resolver)
        self.pruner = BulkPruner(self.gateway, workers=self.config.workers, sequential=self.config.sequential)
        self.deleter = TaskDeletionOrchestrator(
            self.config, self.gateway, self.pruner, repository_source=self.list_repositories
        )

    # Discovery

    def list_repositories(self) -> List[Repository]:
        return discover_repositories(self.config.repos_base)

    def get_repository(self, name: str) -> Repository:
        """Look up a repository by name (a trailing ``.git`` is ignored).

        Raises:
            RepositoryNotFoundError: If no bare repository has that name
        """
        wanted = name[: -len(".git")] if name.endswith(".git") else name
        for repository in self.list_repositories():
            if repository.name == wanted:
                return repository
        raise RepositoryNotFoundError(os.path.join(self.config.repos_base, name))

    def list_tasks(self) -> List[TaskDirectory]:
        return list_tasks(self.config.tasks_base)

    def get_task(self, task: Union[TaskDirectory, str]) -> TaskDirectory:
        """Resolve a task name and require its directory to exist.

        Raises:
            TaskNotFoundError: If the task directory is missing
        """
        task_dir = resolve_task(task, self.config.tasks_base)
        if not task_dir.exists():
            raise TaskNotFoundError(task_dir.name)
        return task_dir

    def find_task(self, path: Optional[str] = None) -> Optional[TaskDirectory]:
        """The task containing ``path`` (default: current directory), if any."""
        task_path = resolve_task_dir(path or os.getcwd(), self.config.tasks_base)
        if task_path is None:
            return None
        return TaskDirectory(name=os.path.basename(task_path), path=task_path)

    def list_task_worktrees(self, task: Union[TaskDirectory, str]) -> List[TaskWorktree]:
        return list_task_worktrees(self.get_task(task), self.gateway)

    # Lifecycle

    def create_task(self, issue: str, suffix: Optional[str] = None) -> TaskDirectory:
        """Create (or reuse) the task directory for an issue.

        Args:
            issue: Issue key or number, optionally with an inline suffix
                ("123", "DEV-123", "DEV-123 fix login")
            suffix: Explicit suffix, overriding one parsed from ``issue``

        Raises:
            ValueError: If no issue key can be parsed
        """
        issue_key, inline_suffix = parse_issue_string(issue, self.config.issue_prefix)
        if not issue_key:
            raise ValueError("Issue key is required")

        name = build_task_name(issue_key, suffix if suffix is not None else inline_suffix)
        task_dir = TaskDirectory(name=name, path=os.path.join(self.config.tasks_base, name))
        if not task_dir.exists():
            os.makedirs(task_dir.path)
            logger.info(f"Created task directory: {task_dir.path}")
        return task_dir

    def create_worktree(
        self,
        task: Union[TaskDirectory, str],
        repository: Union[Repository, str],
        branch_name: str,
        worktree_name: Optional[str] = None,
    ) -> WorktreeBinding:
        """Create one worktree with an explicit branch and directory name."""
        task_dir = self.get_task(task)
        if not isinstance(repository, Repository):
            repository = self.get_repository(repository)
        return self.creator.create(task_dir, repository, branch_name, worktree_name)

    def add_worktree(
        self,
        task: Union[TaskDirectory, str],
        repository: Union[Repository, str],
        suffix: Optional[str] = None,
    ) -> WorktreeBinding:
        """Add a repository to a task using the naming convention.

        The first worktree of a repository is ``<repo>`` on branch ``<task>``.
        Once that exists, a suffix is required and the worktree becomes
        ``<repo>-<suffix>`` on branch ``<task>-<suffix>``.

        Raises:
            ValueError: If a suffix is needed but missing
            WorktreeExistsError: If the suffixed directory already exists
        """
        task_dir = self.get_task(task)
        if not isinstance(repository, Repository):
            repository = self.get_repository(repository)

        if suffix is None and os.path.lexists(task_dir.child(repository.name)):
            raise ValueError(f"Suffix is required to create another worktree for {repository.name}")

        worktree_name, branch_name = worktree_names(repository.name, task_dir.name, suffix)
        if os.path.lexists(task_dir.child(worktree_name)):
            raise WorktreeExistsError(task_dir.child(worktree_name))

        return self.creator.create(task_dir, repository, branch_name, worktree_name)

    def prune_all(self) -> PruneReport:
        """Prune stale worktree metadata in every repository."""
        return self.pruner.prune_all(self.list_repositories())

    def delete_task(self, task: Union[TaskDirectory, str], prune: bool = True) -> TaskDeletionReport:
        """Delete a task directory, its worktrees, then prune every repository."""
        return self.deleter.delete_task(task, prune=prune)
