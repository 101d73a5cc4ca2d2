"""Version information for git-task-keeper."""

try:
    from git_task_keeper._version import __version__
except ImportError:
    # Running from a source checkout that was never built
    __version__ = "0.0.0+unknown"
