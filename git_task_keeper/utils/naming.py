"""Naming rules for task directories, worktree directories and branches."""

import os
import re
from typing import Optional, Tuple

from git_task_keeper.config import normalize_path

_ISSUE_KEY_RE = re.compile(r"^([A-Z][A-Z0-9_]*-\d+)(?:-|\s+)(.+)$")
_HAS_PROJECT_RE = re.compile(r"^[A-Za-z]+-")


def slugify(value: Optional[str]) -> str:
    """Lowercase ``value`` and reduce it to ``[a-z0-9-]`` with single dashes."""
    slug = (value or "").lower()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^a-z0-9-]", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def build_task_name(issue_key: str, suffix: Optional[str] = None) -> str:
    """Task directory name: ``issue-key`` lowercased, optionally ``-slugified-suffix``."""
    slug = slugify(suffix)
    if slug:
        return f"{issue_key.lower()}-{slug}"
    return issue_key.lower()


def parse_issue_string(value: Optional[str], issue_prefix: Optional[str] = None) -> Tuple[Optional[str], str]:
    """Split user input into an issue key and a slug suffix.

    "123" becomes ("DEV-123", "") with prefix "DEV"; "dev-123 fix login" and
    "DEV-123-fix-login" both become ("DEV-123", "fix-login").

    Returns:
        (issue_key, suffix); issue_key is None when ``value`` is blank
    """
    value = (value or "").strip()
    if not value:
        return None, ""

    if not _HAS_PROJECT_RE.match(value) and issue_prefix:
        value = f"{issue_prefix}-{value}"

    value = value.upper()
    match = _ISSUE_KEY_RE.match(value)
    if match:
        return match.group(1), slugify(match.group(2))
    return value, ""


def worktree_names(repository_name: str, task_name: str, suffix: Optional[str] = None) -> Tuple[str, str]:
    """Worktree directory and branch names for a repository inside a task.

    The first worktree of a repository is ``<repo>`` on branch ``<task>``;
    additional ones need a suffix and become ``<repo>-<suffix>`` on
    ``<task>-<suffix>``.

    Raises:
        ValueError: If ``suffix`` is given but slugifies to nothing
    """
    if suffix is None:
        return repository_name, task_name

    slug = slugify(suffix)
    if not slug:
        raise ValueError(f"Suffix is required to create another worktree for {repository_name}")
    return f"{repository_name}-{slug}", f"{task_name}-{slug}"


def is_path_inside(path: str, root: str) -> bool:
    """True if ``path`` is ``root`` or below it."""
    path = normalize_path(path)
    root = normalize_path(root)
    if path == root:
        return True
    return path.startswith(root.rstrip(os.sep) + os.sep)


def resolve_task_dir(path: str, tasks_base: str) -> Optional[str]:
    """The task directory (a direct child of ``tasks_base``) containing ``path``."""
    base = normalize_path(tasks_base)
    target = normalize_path(path)
    if target == base or not is_path_inside(target, base):
        return None

    task_name = os.path.relpath(target, base).split(os.sep)[0]
    return os.path.join(base, task_name)
