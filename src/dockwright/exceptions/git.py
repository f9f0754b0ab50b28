from __future__ import annotations

from pathlib import Path

from dockwright.exceptions.base import DockwrightError


class GitError(DockwrightError):
    """Exception for git operation failures.

    Raised when staging, committing or pushing the generated workflow files
    fails, or when the repository itself cannot be opened.

    Attributes:
        message: Human-readable error message.
        operation: Git operation that failed (e.g., "commit", "push").
        recoverable: True if the error might be resolved by retrying after
            the user fixes local state (e.g., a stale index.lock).
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize the GitError.

        Args:
            message: Human-readable error message.
            operation: Git operation that failed.
            recoverable: True if error might be recoverable.
        """
        self.operation = operation
        self.recoverable = recoverable
        super().__init__(message)


class GitNotFoundError(GitError):
    """Exception raised when git CLI is not installed or not in PATH."""

    def __init__(self, message: str = "Git CLI not found") -> None:
        """Initialize the GitNotFoundError.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message, operation="git_check", recoverable=False)


class NotARepositoryError(GitError):
    """Exception raised when dockwright runs outside a git repository.

    Attributes:
        message: Human-readable error message.
        path: Directory that is not a repo.
    """

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
    ) -> None:
        """Initialize the NotARepositoryError.

        Args:
            message: Human-readable error message.
            path: Directory that is not a repo.
        """
        self.path = path
        super().__init__(message, operation="repo_check", recoverable=False)


class NothingToCommitError(GitError):
    """Exception raised when the generated files match what is already committed."""

    def __init__(self, message: str = "Nothing to commit") -> None:
        """Initialize the NothingToCommitError.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message, operation="commit", recoverable=False)


class PushRejectedError(GitError):
    """Exception raised when the remote rejects a push.

    Attributes:
        message: Human-readable error message.
        reason: Rejection reason reported by git.
    """

    def __init__(self, message: str, reason: str = "") -> None:
        """Initialize the PushRejectedError.

        Args:
            message: Human-readable error message.
            reason: Rejection reason from git.
        """
        self.reason = reason
        super().__init__(message, operation="push", recoverable=False)
