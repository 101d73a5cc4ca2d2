"""Creates a single worktree inside a task directory."""

import os
from typing import Optional

from git_task_keeper.exceptions import (
    BranchInUseError,
    RepositoryNotFoundError,
    WorktreeCreationError,
    WorktreeExistsError,
)
from git_task_keeper.logging_config import get_logger
from git_task_keeper.models.results import BranchResolution
from git_task_keeper.models.task import Repository, TaskDirectory, WorktreeBinding
from git_task_keeper.services.branch_resolver import BranchResolver
from git_task_keeper.services.git.gateway import GitGateway

logger = get_logger(__name__)


class WorktreeCreator:
    """Creation-only worktree service.

    An existing target directory is always rejected, even if it is a valid
    worktree of the same branch, so an unrelated directory is never adopted.
    """

    def __init__(self, gateway: GitGateway, resolver: Optional[BranchResolver] = None):
        self.gateway = gateway
        self.resolver = resolver or BranchResolver(gateway)

    def create(
        self,
        task: TaskDirectory,
        repository: Repository,
        branch_name: str,
        worktree_name: Optional[str] = None,
    ) -> WorktreeBinding:
        """Create ``<task>/<worktree_name>`` checked out on ``branch_name``.

        Args:
            task: Task directory receiving the worktree
            repository: Bare repository to check out from
            branch_name: Branch to create or attach to
            worktree_name: Directory name (defaults to the repository name)

        Returns:
            The new WorktreeBinding

        Raises:
            RepositoryNotFoundError: If the bare repository path is missing
            WorktreeExistsError: If the target directory already exists
            BranchInUseError: If a live worktree already has the branch
            ReclamationError: If stale entries for the branch could not be cleared
            WorktreeCreationError: If `git worktree add` fails
            GitOperationError: For any other unexpected git failure
        """
        binding = WorktreeBinding(task, repository, worktree_name or repository.name, branch_name)

        if not repository.exists():
            raise RepositoryNotFoundError(repository.path)

        if os.path.lexists(binding.path):
            raise WorktreeExistsError(binding.path)

        resolution = self.resolver.resolve(repository, branch_name)
        if resolution is BranchResolution.BLOCKED:
            raise BranchInUseError(branch_name, repository.name)

        create_branch = resolution is BranchResolution.AVAILABLE_NEW
        result = self.gateway.add_worktree(repository.path, binding.path, branch_name, create_branch)
        if not result.ok:
            raise WorktreeCreationError(
                repository.name, binding.path, result.message("git worktree add failed"), result.status
            )

        action = "new branch" if create_branch else "existing branch"
        logger.info(f"Created worktree {binding.path} on {action} {branch_name}")
        return binding
