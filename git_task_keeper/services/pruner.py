"""Prunes stale worktree metadata across many repositories."""

from typing import Optional, Sequence

from git_task_keeper.exceptions import GitProcessError
from git_task_keeper.logging_config import get_logger
from git_task_keeper.models.results import PruneReport
from git_task_keeper.models.task import Repository
from git_task_keeper.services.git.gateway import GitGateway
from git_task_keeper.utils.parallel import map_in_order

logger = get_logger(__name__)


class BulkPruner:
    """Runs `git worktree prune --expire=now` on every repository.

    A failure never stops the remaining repositories; each one is reported
    against its own name. Safe to run unconditionally after any deletion.
    """

    def __init__(self, gateway: GitGateway, workers: Optional[int] = None, sequential: bool = False):
        self.gateway = gateway
        self.workers = workers
        self.sequential = sequential

    def prune_repository(self, repository: Repository) -> Optional[str]:
        """Prune one repository.

        Returns:
            None on success, otherwise the error message
        """
        try:
            result = self.gateway.prune_worktrees(repository.path)
        except GitProcessError as e:
            logger.error(f"Failed to prune worktrees for {repository.name}: {e}")
            return str(e)

        if result.ok:
            logger.debug(f"Pruned worktrees for {repository.name}")
            return None

        message = result.message("git worktree prune failed")
        logger.error(f"Failed to prune worktrees for {repository.name}: {message}")
        return message

    def prune_all(self, repositories: Sequence[Repository]) -> PruneReport:
        """Prune every repository and aggregate the outcomes in input order."""
        repositories = list(repositories)
        report = PruneReport()

        # Two jobs for the same repository must not overlap
        sequential = self.sequential or len({repo.path for repo in repositories}) != len(repositories)
        errors = map_in_order(self.prune_repository, repositories, self.workers, sequential)

        for repository, error in zip(repositories, errors):
            if error is None:
                report.record_success()
            else:
                report.record_failure(repository.name, error)

        logger.info(f"Pruned {report.pruned_count} repo(s), {len(report.failures)} failure(s)")
        return report
