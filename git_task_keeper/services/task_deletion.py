"""Deletes a task directory together with its worktrees."""

import shutil
from typing import Callable, List, Optional, Sequence, Union

from git_task_keeper.config import Config
from git_task_keeper.exceptions import GitProcessError
from git_task_keeper.logging_config import get_logger
from git_task_keeper.models.results import TaskDeletionReport
from git_task_keeper.models.task import Repository, TaskDirectory
from git_task_keeper.services.discovery import discover_repositories, find_owner, resolve_task, task_children
from git_task_keeper.services.git.gateway import GitGateway
from git_task_keeper.services.pruner import BulkPruner

logger = get_logger(__name__)

RepositorySource = Callable[[], Sequence[Repository]]


class TaskDeletionOrchestrator:
    """Removes every worktree in a task, deletes the directory, then prunes.

    The directory is deleted even when some backend removals fail: stale
    registry entries are cleaned up by the final prune, while a half-deleted
    task directory would only confuse the user. Failures are still reported.
    """

    def __init__(
        self,
        config: Config,
        gateway: GitGateway,
        pruner: Optional[BulkPruner] = None,
        repository_source: Optional[RepositorySource] = None,
    ):
        """Initialize the orchestrator.

        Args:
            config: Supplies tasks_base and repos_base
            gateway: Gateway used for the forced removals
            pruner: Pruner run over all repositories afterwards
            repository_source: Returns the configured repositories
                (defaults to scanning repos_base)
        """
        self.config = config
        self.gateway = gateway
        self.pruner = pruner or BulkPruner(gateway, config.workers, config.sequential)
        self.repository_source = repository_source or (lambda: discover_repositories(config.repos_base))

    def delete_task(self, task: Union[TaskDirectory, str], prune: bool = True) -> TaskDeletionReport:
        """Delete ``task`` and all of its worktrees.

        Args:
            task: TaskDirectory or task name (looked up under tasks_base)
            prune: Run the bulk prune across all repositories afterwards

        Returns:
            TaskDeletionReport; ``found`` is False (and nothing was touched)
            when the task directory does not exist
        """
        task_dir = resolve_task(task, self.config.tasks_base)
        report = TaskDeletionReport(task_name=task_dir.name, task_path=task_dir.path)

        if not task_dir.exists():
            logger.warning(f"Task directory not found: {task_dir.path}")
            report.found = False
            return report

        repositories: List[Repository] = list(self.repository_source())

        for child in task_children(task_dir):
            owner = find_owner(child.path, repositories)
            if owner is None:
                logger.warning(f"No bare repo registered for '{child.name}'; deleting directory only")
                report.skipped.append(child.name)
                continue
            self._remove_worktree(owner, child.name, child.path, report)

        try:
            shutil.rmtree(task_dir.path)
            logger.info(f"Deleted task directory {task_dir.path}")
        finally:
            # Removals above already touched the registries; prune even if rmtree fails
            if prune:
                report.prune_report = self.pruner.prune_all(repositories)

        return report

    def _remove_worktree(self, repository: Repository, name: str, path: str, report: TaskDeletionReport) -> None:
        try:
            result = self.gateway.remove_worktree(repository.path, path)
        except GitProcessError as e:
            logger.error(f"Failed to remove worktree {path}: {e}")
            report.record_failure(repository.name, str(e))
            return

        if result.ok:
            logger.info(f"Removed worktree {path}")
            report.record_removed(name)
        else:
            message = result.message("git worktree remove failed")
            logger.error(f"Failed to remove worktree {path}: {message}")
            report.record_failure(repository.name, message)
