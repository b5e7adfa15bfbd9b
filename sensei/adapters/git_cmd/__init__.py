"""Git command-line adapter."""

from sensei.adapters.git_cmd.git_adapter import GitAdapter

__all__ = ["GitAdapter"]
