"""Decides whether a branch can back a new worktree."""

from typing import List

from git_task_keeper.exceptions import GitOperationError, ReclamationError
from git_task_keeper.logging_config import get_logger
from git_task_keeper.models.registry import RegistryEntry
from git_task_keeper.models.results import BranchResolution
from git_task_keeper.models.task import Repository
from git_task_keeper.services.git.gateway import BRANCH_NOT_FOUND_EXIT_CODE, GitGateway
from git_task_keeper.services.git.registry import entries_for_branch, parse_worktree_list

logger = get_logger(__name__)


class BranchResolver:
    """Classifies a branch as new, reusable, or blocked by a live worktree.

    A branch whose only worktree entries are prunable (the directory was
    deleted behind git's back) is reclaimed: the stale entries are removed,
    the repository is pruned, and a fresh listing must no longer mention the
    branch.
    """

    def __init__(self, gateway: GitGateway, reclaim_retries: int = 0):
        """Initialize the resolver.

        Args:
            gateway: Gateway used for every git call
            reclaim_retries: Extra runs of the cleanup sequence before a
                branch that is still listed becomes a ReclamationError
        """
        self.gateway = gateway
        self.reclaim_retries = reclaim_retries

    def branch_exists(self, repository: Repository, branch_name: str) -> bool:
        """Check for a local branch.

        Raises:
            GitOperationError: If git fails for any reason other than "not found"
        """
        result = self.gateway.verify_branch(repository.path, branch_name)
        if result.ok:
            return True
        if result.status == BRANCH_NOT_FOUND_EXIT_CODE:
            return False
        raise GitOperationError(
            "verify_branch", repository.name, result.message("git rev-parse failed"), result.status
        )

    def list_entries(self, repository: Repository) -> List[RegistryEntry]:
        """Parse a fresh worktree listing.

        Raises:
            GitOperationError: If `git worktree list` fails
        """
        result = self.gateway.list_worktrees(repository.path)
        if not result.ok:
            raise GitOperationError(
                "list_worktrees", repository.name, result.message("git worktree list failed"), result.status
            )
        return parse_worktree_list(result.output)

    def resolve(self, repository: Repository, branch_name: str) -> BranchResolution:
        """Classify ``branch_name`` in ``repository``, reclaiming stale entries if needed."""
        if not self.branch_exists(repository, branch_name):
            logger.debug(f"Branch {branch_name} not found in {repository.name}")
            return BranchResolution.AVAILABLE_NEW

        matches = entries_for_branch(self.list_entries(repository), branch_name)
        live = [entry for entry in matches if not entry.prunable]
        if live:
            logger.info(f"Branch {branch_name} is checked out at {live[0].path}")
            return BranchResolution.BLOCKED

        if matches:
            self._reclaim(repository, branch_name, matches)

        return BranchResolution.AVAILABLE_REUSE

    def _reclaim(self, repository: Repository, branch_name: str, stale: List[RegistryEntry]) -> None:
        """Remove stale entries, prune, then confirm the branch is free.

        The steps run strictly in order: prune relies on the removals and the
        re-listing relies on prune having finished.
        """
        attempts = 1 + self.reclaim_retries
        for attempt in range(1, attempts + 1):
            logger.info(
                f"Reclaiming branch {branch_name} in {repository.name} from "
                f"{len(stale)} stale worktree(s) (attempt {attempt}/{attempts})"
            )
            for entry in stale:
                if not entry.path:
                    continue
                result = self.gateway.remove_worktree(repository.path, entry.path)
                if not result.ok:
                    raise GitOperationError(
                        "remove_worktree",
                        repository.name,
                        f"Failed to remove stale worktree at {entry.path}: "
                        + result.message("git worktree remove failed"),
                        result.status,
                    )

            result = self.gateway.prune_worktrees(repository.path)
            if not result.ok:
                raise GitOperationError(
                    "prune_worktrees", repository.name, result.message("git worktree prune failed"), result.status
                )

            remaining = entries_for_branch(self.list_entries(repository), branch_name)
            if not remaining:
                logger.info(f"Reclaimed branch {branch_name} in {repository.name}")
                return

            # Only entries that are still stale are worth another attempt
            if any(not entry.prunable for entry in remaining):
                break
            stale = remaining

        raise ReclamationError(branch_name, repository.name, [entry.path for entry in remaining if entry.path])
