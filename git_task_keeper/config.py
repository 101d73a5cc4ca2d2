"""Configuration handling for git-task-keeper"""

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Union

DEFAULT_CONFIG_PATH = Path.home() / ".git-task-keeper" / "config.json"


def normalize_path(path: Union[str, Path]) -> str:
    """Expand ``~``, make absolute against the current directory, and collapse slashes."""
    return os.path.abspath(os.path.expanduser(str(path)))


@dataclass
class Config:
    """Configuration for git-task-keeper with validation."""

    # Directory layout
    tasks_base: str = "~/tasks"
    repos_base: str = "~/repos"

    # Prefix added to bare issue numbers ("123" -> "DEV-123")
    issue_prefix: str = "DEV"

    # Backend behaviour
    command_timeout: Optional[float] = None  # Seconds per git command (None = wait forever)
    reclaim_retries: int = 0  # Extra attempts at stale-branch cleanup before failing

    # Execution modes
    workers: Optional[int] = None  # Parallel prune workers (None = auto-detect)
    sequential: bool = False
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_bases()
        self._validate_issue_prefix()
        self._validate_command_timeout()
        self._validate_reclaim_retries()
        self._validate_workers()

    def _validate_bases(self):
        """Normalize base directories and make sure they are distinct."""
        for name in ("tasks_base", "repos_base"):
            value = getattr(self, name)
            if not value or not str(value).strip():
                raise ValueError(f"{name} cannot be empty")
            setattr(self, name, normalize_path(str(value).strip()))
        if self.tasks_base == self.repos_base:
            raise ValueError("tasks_base and repos_base must be different directories")

    def _validate_issue_prefix(self):
        """Validate issue_prefix contains only letters."""
        self.issue_prefix = (self.issue_prefix or "").strip().upper()
        if self.issue_prefix and not self.issue_prefix.isalpha():
            raise ValueError(f"issue_prefix must contain only letters, got '{self.issue_prefix}'")

    def _validate_command_timeout(self):
        """Validate command_timeout is positive when set."""
        if self.command_timeout is not None and self.command_timeout <= 0:
            raise ValueError(f"command_timeout must be positive, got {self.command_timeout}")

    def _validate_reclaim_retries(self):
        """Validate reclaim_retries is not negative."""
        if self.reclaim_retries < 0:
            raise ValueError(f"reclaim_retries cannot be negative, got {self.reclaim_retries}")

    def _validate_workers(self):
        """Validate workers is positive when set."""
        if self.workers is not None and self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")

    def ensure_directories(self) -> None:
        """Create the tasks and repos base directories if missing."""
        Path(self.tasks_base).mkdir(parents=True, exist_ok=True)
        Path(self.repos_base).mkdir(parents=True, exist_ok=True)

    def to_dict(self) -> dict:
        """Convert config to a plain dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None, **overrides) -> "Config":
        """Load configuration from a JSON file and apply overrides.

        Args:
            path: Config file to read. Defaults to ``~/.git-task-keeper/config.json``,
                which is silently skipped when it does not exist.
            **overrides: Values that win over the file (``None`` values are ignored)

        Raises:
            FileNotFoundError: If an explicit ``path`` does not exist
            ValueError: If the file is not a JSON object or holds invalid values
        """
        config_path = Path(path).expanduser() if path else DEFAULT_CONFIG_PATH
        data: dict = {}
        if path or config_path.is_file():
            with open(config_path, encoding="utf-8") as f:
                try:
                    data = json.load(f)
                except json.JSONDecodeError as e:
                    raise ValueError(f"Invalid config file {config_path}: {e}") from e
            if not isinstance(data, dict):
                raise ValueError(f"Config file {config_path} must contain a JSON object")

        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.from_dict(data)
