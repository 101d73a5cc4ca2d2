"""Worktree registry entry model."""

from dataclasses import dataclass
from typing import List, Optional

BRANCH_REF_PREFIX = "refs/heads/"


@dataclass
class RegistryEntry:
    """One record of `git worktree list --porcelain`."""

    path: Optional[str] = None
    head: Optional[str] = None
    branch: Optional[str] = None  # Fully qualified ref, e.g. refs/heads/dev-123
    bare: bool = False
    detached: bool = False
    locked: bool = False
    locked_reason: Optional[str] = None
    prunable: bool = False  # Directory gone or otherwise invalid
    prunable_reason: Optional[str] = None

    @property
    def branch_name(self) -> Optional[str]:
        """Branch ref with the ``refs/heads/`` prefix stripped."""
        if self.branch is None:
            return None
        if self.branch.startswith(BRANCH_REF_PREFIX):
            return self.branch[len(BRANCH_REF_PREFIX):]
        return self.branch

    def matches_branch(self, branch_name: str) -> bool:
        # Entries without a branch are never comparable
        return self.branch_name is not None and self.branch_name == branch_name

    def to_porcelain(self) -> str:
        """Serialize back into the porcelain paragraph shape (without the blank line)."""
        lines: List[str] = []
        if self.path is not None:
            lines.append(f"worktree {self.path}")
        if self.head is not None:
            lines.append(f"HEAD {self.head}")
        if self.bare:
            lines.append("bare")
        if self.branch is not None:
            lines.append(f"branch {self.branch}")
        if self.detached:
            lines.append("detached")
        if self.locked:
            lines.append(f"locked {self.locked_reason}" if self.locked_reason else "locked")
        if self.prunable:
            lines.append(f"prunable {self.prunable_reason}" if self.prunable_reason else "prunable")
        return "\n".join(lines)

    def __str__(self) -> str:
        state = "prunable" if self.prunable else "active"
        return f"{self.branch_name or '(no branch)'} @ {self.path} [{state}]"
