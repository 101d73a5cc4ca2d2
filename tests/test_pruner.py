"""Tests for BulkPruner"""
import threading

import pytest

from git_task_keeper.exceptions import GitProcessError
from git_task_keeper.models.results import CommandResult
from git_task_keeper.models.task import Repository
from git_task_keeper.services.pruner import BulkPruner


def _repos(*names):
    return [Repository(name=name, path=f"/repos/{name}.git") for name in names]


def _failing_for(*failing):
    def respond(repo_path):
        if any(repo_path.endswith(f"/{name}.git") for name in failing):
            return CommandResult(128, f"fatal: cannot prune {repo_path}")
        return CommandResult(0, "")

    return respond


class TestBulkPruner:
    """Aggregation of per-repository prune outcomes."""

    def test_empty_input(self, fake_gateway):
        report = BulkPruner(fake_gateway).prune_all([])
        assert report.pruned_count == 0
        assert report.failures == []
        assert report.ok

    def test_one_failure_does_not_stop_the_rest(self, fake_gateway):
        fake_gateway.responses["prune_worktrees"] = _failing_for("frontend")
        report = BulkPruner(fake_gateway, sequential=True).prune_all(_repos("api", "frontend"))

        assert report.pruned_count == 1
        assert len(report.failures) == 1
        assert report.failures[0].repository == "frontend"
        assert "cannot prune" in report.failures[0].message
        assert not report.ok

    def test_failure_without_output_gets_fallback_message(self, fake_gateway):
        fake_gateway.script("prune_worktrees", CommandResult(1, ""))
        report = BulkPruner(fake_gateway).prune_all(_repos("api"))
        assert report.failures[0].message == "git worktree prune failed"

    def test_every_repository_is_attempted(self, fake_gateway):
        repos = _repos("a", "b", "c", "d")
        BulkPruner(fake_gateway, workers=4).prune_all(repos)
        assert sorted(call[1] for call in fake_gateway.calls) == sorted(r.path for r in repos)

    @pytest.mark.parametrize("order", [("a", "b", "c"), ("c", "a", "b"), ("b", "c", "a")])
    def test_outcome_is_independent_of_order(self, fake_gateway, order):
        fake_gateway.responses["prune_worktrees"] = _failing_for("b")
        report = BulkPruner(fake_gateway, workers=3).prune_all(_repos(*order))

        assert report.pruned_count == 2
        assert [f.repository for f in report.failures] == ["b"]

    def test_parallel_matches_sequential(self, fake_gateway):
        repos = _repos("a", "b", "c", "d", "e")
        fake_gateway.responses["prune_worktrees"] = _failing_for("b", "e")

        sequential = BulkPruner(fake_gateway, sequential=True).prune_all(repos)
        parallel = BulkPruner(fake_gateway, workers=5).prune_all(repos)

        assert sequential == parallel
        assert [f.repository for f in parallel.failures] == ["b", "e"]

    def test_process_error_is_recorded_as_failure(self, fake_gateway):
        def respond(repo_path):
            raise GitProcessError(["git", "worktree", "prune"], "timed out", timed_out=True)

        fake_gateway.responses["prune_worktrees"] = respond
        report = BulkPruner(fake_gateway).prune_all(_repos("api"))

        assert report.pruned_count == 0
        assert "timed out" in report.failures[0].message

    def test_duplicate_repositories_never_overlap(self, fake_gateway):
        active = set()
        overlaps = []
        lock = threading.Lock()

        def respond(repo_path):
            with lock:
                if repo_path in active:
                    overlaps.append(repo_path)
                active.add(repo_path)
            with lock:
                active.discard(repo_path)
            return CommandResult(0, "")

        fake_gateway.responses["prune_worktrees"] = respond
        repos = _repos("api", "api", "api", "frontend")
        report = BulkPruner(fake_gateway, workers=4).prune_all(repos)

        assert overlaps == []
        assert report.pruned_count == 4

    def test_accepts_any_iterable(self, fake_gateway):
        report = BulkPruner(fake_gateway).prune_all(iter(_repos("api", "frontend")))
        assert report.pruned_count == 2


class TestBulkPrunerWithGit:
    """Pruning real repositories."""

    def test_prunes_registry_of_deleted_worktree(self, gateway, api_repo, frontend_repo, make_task):
        import shutil

        from git_task_keeper.services.git.registry import entries_for_branch, parse_worktree_list

        task = make_task("dev-1")
        target = task.child("api")
        assert gateway.add_worktree(api_repo.path, target, "dev-1", create_branch=True).ok
        shutil.rmtree(target)

        report = BulkPruner(gateway).prune_all([api_repo, frontend_repo])

        assert report.pruned_count == 2
        entries = parse_worktree_list(gateway.list_worktrees(api_repo.path).output)
        assert entries_for_branch(entries, "dev-1") == []

    def test_missing_repository_is_a_failure(self, gateway, api_repo, temp_dir):
        ghost = Repository(name="ghost", path=str(temp_dir / "ghost.git"))
        report = BulkPruner(gateway).prune_all([ghost, api_repo])

        assert report.pruned_count == 1
        assert [f.repository for f in report.failures] == ["ghost"]
