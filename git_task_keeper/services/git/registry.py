"""Parser for `git worktree list --porcelain` output."""

from typing import Iterable, List, Optional

from git_task_keeper.models.registry import RegistryEntry


def _split_field(line: str, keyword: str) -> Optional[str]:
    """Return the value after ``keyword`` if ``line`` is that field, else None.

    Bare keywords ("prunable") yield an empty string.
    """
    if line == keyword:
        return ""
    if line.startswith(keyword + " "):
        return line[len(keyword) + 1:]
    return None


def parse_worktree_list(output: Optional[str]) -> List[RegistryEntry]:
    """Parse porcelain worktree listing into entries, in listing order.

    Format (one paragraph per worktree, blank line between them):
        worktree /path/to/worktree
        HEAD <sha>
        branch refs/heads/branch-name
        prunable gitdir file points to non-existent location

    Unknown lines are ignored and missing fields stay unset, so this never
    raises on malformed input.
    """
    entries: List[RegistryEntry] = []
    current = RegistryEntry()
    seen_field = False

    # The sentinel blank line flushes a final record with no trailing newline
    for raw_line in (output or "").splitlines() + [""]:
        line = raw_line.rstrip("\r")

        if not line.strip():
            if seen_field:
                entries.append(current)
            current = RegistryEntry()
            seen_field = False
            continue

        value = _split_field(line, "worktree")
        if value is not None:
            current.path = value or None
            seen_field = True
            continue

        value = _split_field(line, "HEAD")
        if value is not None:
            current.head = value or None
            seen_field = True
            continue

        value = _split_field(line, "branch")
        if value is not None:
            current.branch = value or None
            seen_field = True
            continue

        value = _split_field(line, "prunable")
        if value is not None:
            current.prunable = True
            current.prunable_reason = value or None
            seen_field = True
            continue

        value = _split_field(line, "locked")
        if value is not None:
            current.locked = True
            current.locked_reason = value or None
            seen_field = True
            continue

        if line == "bare":
            current.bare = True
            seen_field = True
        elif line == "detached":
            current.detached = True
            seen_field = True

    return entries


def format_worktree_list(entries: Iterable[RegistryEntry]) -> str:
    """Render entries in the same porcelain shape `parse_worktree_list` reads."""
    return "".join(entry.to_porcelain() + "\n\n" for entry in entries)


def entries_for_branch(entries: Iterable[RegistryEntry], branch_name: str) -> List[RegistryEntry]:
    """Entries whose normalized branch equals ``branch_name``."""
    return [entry for entry in entries if entry.matches_branch(branch_name)]
