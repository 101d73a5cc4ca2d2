"""Command-line argument parsing for git-task-keeper."""

import argparse
from typing import Optional, Sequence

from git_task_keeper.__version__ import __version__


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="git-task-keeper",
        description="Per-task git worktrees on top of shared bare repositories",
        epilog="Layout: <repos_base>/<repo>/ holds bare repositories, "
        "<tasks_base>/<issue-key>[-<slug>]/<repo>[-<suffix>]/ holds worktrees.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--debug", action="store_true", help="Show every git command and write a debug log")
    parser.add_argument("--version", action="version", version=f"git-task-keeper {__version__}")
    parser.add_argument("--config", metavar="PATH", help="JSON config file (default: ~/.git-task-keeper/config.json)")
    parser.add_argument("--tasks-base", metavar="DIR", help="Directory holding task directories")
    parser.add_argument("--repos-base", metavar="DIR", help="Directory holding bare repositories")
    parser.add_argument("--timeout", type=float, metavar="SECONDS", help="Kill git commands running longer than this")
    parser.add_argument(
        "--workers",
        type=int,
        metavar="N",
        help="Number of parallel workers for pruning (default: auto-detect)",
    )
    parser.add_argument("--sequential", action="store_true", help="Prune repositories one at a time")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    new = subparsers.add_parser("new", help="Create a task directory and optionally add repositories")
    new.add_argument("issue", help="Issue key or number, e.g. DEV-123, 123 or 'DEV-123 fix login'")
    new.add_argument("--suffix", help="Slug appended to the task directory name")
    new.add_argument("--repo", dest="repos", action="append", default=[], metavar="NAME",
                     help="Repository to add as a worktree (repeatable)")

    add = subparsers.add_parser("add", help="Add a repository worktree to a task")
    add.add_argument("repo", help="Repository name")
    add.add_argument("--task", help="Task name (default: the task containing the current directory)")
    add.add_argument("--suffix", help="Required when the task already has a worktree of this repository")

    subparsers.add_parser("tasks", help="List task directories")
    subparsers.add_parser("repos", help="List bare repositories")

    worktrees = subparsers.add_parser("worktrees", help="List the worktrees of a task")
    worktrees.add_argument("--task", help="Task name (default: the task containing the current directory)")

    subparsers.add_parser("prune", help="Prune stale worktree metadata in every repository")

    delete = subparsers.add_parser("delete", help="Delete a task directory and its worktrees")
    delete.add_argument("task", nargs="?", help="Task name (default: the task containing the current directory)")
    delete.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")
    delete.add_argument("--no-prune", action="store_true", help="Do not prune repositories afterwards")

    return parser


def parse_args(argv: Optional[Sequence[str]] = None):
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
