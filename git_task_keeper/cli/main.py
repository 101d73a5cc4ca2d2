"""Command-line interface for git-task-keeper"""

import os
import sys
from typing import Optional, Sequence

from rich.console import Console

from git_task_keeper.cli.args import parse_args
from git_task_keeper.config import Config
from git_task_keeper.core import TaskKeeper
from git_task_keeper.exceptions import GitTaskKeeperError
from git_task_keeper.logging_config import setup_logging
from git_task_keeper.models.task import TaskDirectory
from git_task_keeper.services.display_service import DisplayService
from git_task_keeper.utils.naming import is_path_inside

console = Console()


def _target_task(keeper: TaskKeeper, name: Optional[str]) -> TaskDirectory:
    """Task named on the command line, or the one containing the current directory."""
    if name:
        return keeper.get_task(name)
    task = keeper.find_task()
    if task is None:
        raise ValueError("Not in a task directory; pass a task name")
    return task


def _cmd_new(keeper: TaskKeeper, args, display: DisplayService) -> int:
    task = keeper.create_task(args.issue, args.suffix)
    console.print(f"Task directory: {task.path}")

    status = 0
    for repo_name in args.repos:
        try:
            display.display_binding(keeper.add_worktree(task, repo_name))
        except (GitTaskKeeperError, ValueError) as e:
            console.print(f"[red]Error: {e}[/red]")
            status = 1
    return status


def _cmd_add(keeper: TaskKeeper, args, display: DisplayService) -> int:
    task = _target_task(keeper, args.task)
    display.display_binding(keeper.add_worktree(task, args.repo, args.suffix))
    return 0


def _cmd_tasks(keeper: TaskKeeper, args, display: DisplayService) -> int:
    display.display_tasks(keeper.list_tasks())
    return 0


def _cmd_repos(keeper: TaskKeeper, args, display: DisplayService) -> int:
    display.display_repositories(keeper.list_repositories(), keeper.config.repos_base)
    return 0


def _cmd_worktrees(keeper: TaskKeeper, args, display: DisplayService) -> int:
    task = _target_task(keeper, args.task)
    display.display_task_worktrees(task, keeper.list_task_worktrees(task))
    return 0


def _cmd_prune(keeper: TaskKeeper, args, display: DisplayService) -> int:
    repositories = keeper.list_repositories()
    if not repositories:
        console.print("No bare repositories configured for task manager")
        return 0
    report = keeper.pruner.prune_all(repositories)
    display.display_prune_report(report)
    return 0 if report.ok else 1


def _cmd_delete(keeper: TaskKeeper, args, display: DisplayService) -> int:
    task = _target_task(keeper, args.task)

    if not args.yes:
        answer = console.input(f"Delete task {task.name.upper()}? Type 'yes' to confirm: ")
        if not answer.lower().startswith("y"):
            console.print("[yellow]Task deletion cancelled[/yellow]")
            return 1

    # Do not leave the shell's working directory inside a deleted tree
    if is_path_inside(os.getcwd(), task.path):
        os.chdir(keeper.config.tasks_base)

    report = keeper.delete_task(task, prune=not args.no_prune)
    display.display_deletion_report(report)
    return 0 if report.ok else 1


COMMANDS = {
    "new": _cmd_new,
    "add": _cmd_add,
    "tasks": _cmd_tasks,
    "repos": _cmd_repos,
    "worktrees": _cmd_worktrees,
    "prune": _cmd_prune,
    "delete": _cmd_delete,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the application."""
    config = None
    try:
        parsed_args = parse_args(argv)

        # Flags win over the file; logging follows the merged result
        config = Config.load(
            parsed_args.config,
            tasks_base=parsed_args.tasks_base,
            repos_base=parsed_args.repos_base,
            command_timeout=parsed_args.timeout,
            workers=parsed_args.workers,
            sequential=parsed_args.sequential or None,
            verbose=parsed_args.verbose or None,
            debug=parsed_args.debug or None,
        )
        setup_logging(verbose=config.verbose, debug=config.debug)
        config.ensure_directories()

        if config.debug:
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")

        keeper = TaskKeeper(config)
        return COMMANDS[parsed_args.command](keeper, parsed_args, DisplayService(console))
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except (GitTaskKeeperError, ValueError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        if config is not None and config.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
