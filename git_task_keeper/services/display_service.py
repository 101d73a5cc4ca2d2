"""Display and formatting service for tasks, worktrees and reports"""
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from git_task_keeper.models.results import PruneReport, TaskDeletionReport
from git_task_keeper.models.task import Repository, TaskDirectory, TaskWorktree, WorktreeBinding

console = Console()


class DisplayService:
    def __init__(self, output: Optional[Console] = None):
        self.console = output or console

    def display_tasks(self, tasks: List[TaskDirectory]) -> None:
        if not tasks:
            self.console.print("No tasks found")
            return
        table = Table()
        table.add_column("Task")
        table.add_column("Path", style="dim")
        for task in tasks:
            table.add_row(task.name, task.path)
        self.console.print(table)

    def display_repositories(self, repositories: List[Repository], repos_base: str) -> None:
        if not repositories:
            self.console.print(f"[yellow]No bare repos found in {repos_base}[/yellow]")
            return
        table = Table()
        table.add_column("Repository")
        table.add_column("Path", style="dim")
        for repository in repositories:
            table.add_row(repository.name, repository.path)
        self.console.print(table)

    def display_task_worktrees(self, task: TaskDirectory, worktrees: List[TaskWorktree]) -> None:
        if not worktrees:
            self.console.print(f"[yellow]No repositories in task {task.name.upper()}[/yellow]")
            return
        table = Table(title=task.name.upper())
        table.add_column("Worktree")
        table.add_column("Branch")
        table.add_column("Path", style="dim")
        for worktree in worktrees:
            branch = worktree.branch or "[yellow]not a git worktree[/yellow]"
            table.add_row(worktree.name, branch, worktree.path)
        self.console.print(table)

    def display_binding(self, binding: WorktreeBinding) -> None:
        self.console.print(f"[green]Created worktree: {binding.worktree_name} ({binding.branch_name})[/green]")
        self.console.print(f"[dim]{binding.path}[/dim]")

    def display_prune_report(self, report: PruneReport) -> None:
        """Summarize a bulk prune."""
        if report.ok:
            self.console.print(f"[green]Pruned stale worktrees across {report.pruned_count} repo(s)[/green]")
            return
        self.console.print(
            f"[yellow]Pruned stale worktrees for {report.pruned_count} repo(s); "
            f"failed for {len(report.failures)}:[/yellow]"
        )
        for failure in report.failures:
            self.console.print(f"  [red]{failure}[/red]")

    def display_deletion_report(self, report: TaskDeletionReport) -> None:
        """Summarize a task deletion, listing per-worktree failures."""
        label = report.task_name.upper()
        if not report.found:
            self.console.print(f"[yellow]Task directory not found: {report.task_name}[/yellow]")
            return

        for name in report.skipped:
            self.console.print(f"[yellow]No bare repo registered for '{name}'; deleted directory only[/yellow]")

        if not report.failures:
            self.console.print(f"[green]Deleted task {label} ({len(report.removed)} worktree(s) removed)[/green]")
        else:
            self.console.print(f"[yellow]Deleted task {label} but some worktrees failed to remove:[/yellow]")
            for failure in report.failures:
                self.console.print(f"  [red]{failure}[/red]")

        if report.prune_report is not None and not report.prune_report.ok:
            self.display_prune_report(report.prune_report)
