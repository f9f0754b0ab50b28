"""Git operations for publishing generated workflow files."""

from __future__ import annotations

from dockwright.git.repository import (
    AsyncGitRepository,
    GitRepository,
    is_recoverable_error,
)

__all__ = [
    "AsyncGitRepository",
    "GitRepository",
    "is_recoverable_error",
]
