"""Tests for WorktreeCreator"""
import os
import shutil
from pathlib import Path

import pytest

from git_task_keeper.exceptions import (
    BranchInUseError,
    ErrorKind,
    RepositoryNotFoundError,
    WorktreeCreationError,
    WorktreeExistsError,
)
from git_task_keeper.models.results import CommandResult
from git_task_keeper.models.task import Repository
from git_task_keeper.services.worktree_creator import WorktreeCreator


class TestWorktreeCreatorScripted:
    """Creation decisions driven by a scripted gateway."""

    def test_missing_repository(self, fake_gateway, make_task, temp_dir):
        task = make_task("dev-1")
        missing = Repository(name="ghost", path=str(temp_dir / "ghost.git"))

        with pytest.raises(RepositoryNotFoundError) as exc_info:
            WorktreeCreator(fake_gateway).create(task, missing, "dev-1")
        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert fake_gateway.calls == []

    def test_existing_target_is_rejected_before_any_git_call(self, fake_gateway, fake_repo, make_task):
        task = make_task("dev-1")
        os.mkdir(task.child("fake"))

        with pytest.raises(WorktreeExistsError) as exc_info:
            WorktreeCreator(fake_gateway).create(task, fake_repo, "dev-1")
        assert exc_info.value.kind is ErrorKind.CONFLICT
        assert exc_info.value.path == task.child("fake")
        assert fake_gateway.calls == []

    def test_dangling_symlink_counts_as_existing(self, fake_gateway, fake_repo, make_task, temp_dir):
        task = make_task("dev-1")
        os.symlink(str(temp_dir / "nowhere"), task.child("fake"))

        with pytest.raises(WorktreeExistsError):
            WorktreeCreator(fake_gateway).create(task, fake_repo, "dev-1")

    def test_blocked_branch(self, fake_gateway, fake_repo, make_task, porcelain):
        task = make_task("dev-1")
        fake_gateway.script("verify_branch", CommandResult(0, ""))
        fake_gateway.script("list_worktrees", CommandResult(0, porcelain(("/elsewhere/fake", "dev-1", False))))

        with pytest.raises(BranchInUseError) as exc_info:
            WorktreeCreator(fake_gateway).create(task, fake_repo, "dev-1")
        assert exc_info.value.branch == "dev-1"
        assert exc_info.value.repository == "fake"
        assert "add_worktree" not in fake_gateway.methods_called()

    def test_new_branch_is_created(self, fake_gateway, fake_repo, make_task):
        task = make_task("dev-1")
        fake_gateway.script("verify_branch", CommandResult(1, ""))

        binding = WorktreeCreator(fake_gateway).create(task, fake_repo, "dev-1")

        assert binding.path == task.child("fake")
        assert binding.branch_name == "dev-1"
        assert fake_gateway.calls[-1] == ("add_worktree", fake_repo.path, task.child("fake"), "dev-1", True)

    def test_existing_branch_is_attached(self, fake_gateway, fake_repo, make_task):
        task = make_task("dev-1")
        fake_gateway.script("verify_branch", CommandResult(0, ""))
        fake_gateway.script("list_worktrees", CommandResult(0, ""))

        WorktreeCreator(fake_gateway).create(task, fake_repo, "dev-1", worktree_name="fake-extra")

        assert fake_gateway.calls[-1] == ("add_worktree", fake_repo.path, task.child("fake-extra"), "dev-1", False)

    def test_add_failure(self, fake_gateway, fake_repo, make_task):
        task = make_task("dev-1")
        fake_gateway.script("verify_branch", CommandResult(1, ""))
        fake_gateway.script("add_worktree", CommandResult(128, "fatal: could not create directory"))

        with pytest.raises(WorktreeCreationError) as exc_info:
            WorktreeCreator(fake_gateway).create(task, fake_repo, "dev-1")
        assert exc_info.value.kind is ErrorKind.INFRASTRUCTURE
        assert exc_info.value.status == 128
        assert exc_info.value.path == task.child("fake")
        assert "could not create directory" in str(exc_info.value)


class TestWorktreeCreatorWithGit:
    """End-to-end creation against real bare repositories."""

    def test_creates_new_branch(self, gateway, api_repo, make_task):
        task = make_task("dev-123")
        binding = WorktreeCreator(gateway).create(task, api_repo, "dev-123")

        assert Path(binding.path, "README.md").exists()
        assert gateway.current_branch(binding.path) == "dev-123"
        assert gateway.verify_branch(api_repo.path, "dev-123").ok

    def test_attaches_never_checked_out_branch(self, gateway, api_repo, make_task):
        task = make_task("dev-123")
        binding = WorktreeCreator(gateway).create(task, api_repo, "existing-branch")

        assert gateway.current_branch(binding.path) == "existing-branch"

    def test_live_conflict(self, gateway, api_repo, make_task):
        creator = WorktreeCreator(gateway)
        creator.create(make_task("dev-123"), api_repo, "dev-123")

        other = make_task("dev-456")
        with pytest.raises(BranchInUseError):
            creator.create(other, api_repo, "dev-123")
        assert not os.path.exists(other.child("api"))

    def test_reuses_branch_after_external_deletion(self, gateway, api_repo, make_task):
        creator = WorktreeCreator(gateway)
        first = creator.create(make_task("dev-123"), api_repo, "dev-123")
        shutil.rmtree(first.path)

        second = creator.create(make_task("dev-123-retry"), api_repo, "dev-123")

        assert gateway.current_branch(second.path) == "dev-123"

    def test_second_create_of_same_target_is_rejected(self, gateway, api_repo, make_task):
        creator = WorktreeCreator(gateway)
        task = make_task("dev-123")
        creator.create(task, api_repo, "dev-123")

        with pytest.raises(WorktreeExistsError):
            creator.create(task, api_repo, "dev-123")
        # The original worktree is untouched
        assert gateway.current_branch(task.child("api")) == "dev-123"
