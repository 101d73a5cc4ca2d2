"""
git-task-keeper - Per-task git worktrees on top of shared bare repositories
"""

from .__version__ import __version__
from .config import Config
from .core import TaskKeeper

__all__ = ["Config", "TaskKeeper", "__version__"]
