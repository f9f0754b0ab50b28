"""GitPython-based repository operations for Dockwright.

This module provides the small set of git operations ``dockwright setup``
needs to publish generated workflow files: reading the current branch,
staging exact paths, committing them and pushing the branch.

Key features:
- Uses GitPython's Repo class for all operations
- Provides both sync and async APIs (async via asyncio.to_thread)
- Converts GitCommandError into Dockwright exceptions with git's diagnostic

Example:
    ```python
    from dockwright.git import AsyncGitRepository

    repo = AsyncGitRepository("/path/to/repo")
    await repo.add([".github/workflows/ci.yml"])
    sha = await repo.commit("Add Docker CI/CD workflow", paths=[...])
    await repo.push(set_upstream=True)
    ```
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo
from git.exc import GitCommandNotFound

from dockwright.exceptions import (
    GitError,
    GitNotFoundError,
    NotARepositoryError,
    NothingToCommitError,
    PushRejectedError,
)
from dockwright.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    "AsyncGitRepository",
    "GitRepository",
    "is_recoverable_error",
]

#: Patterns indicating recoverable errors
RECOVERABLE_ERROR_PATTERNS: tuple[str, ...] = (
    "pre-commit hook",
    "hook failed",
    "lock file",
    "unable to create",
    ".git/index.lock",
    "cannot lock ref",
)


def is_recoverable_error(error_message: str) -> bool:
    """Check if a git error is potentially recoverable.

    Args:
        error_message: Error message from git command.

    Returns:
        True if the error might go away once the user fixes local state.
    """
    error_lower = error_message.lower()
    return any(pattern in error_lower for pattern in RECOVERABLE_ERROR_PATTERNS)


def _convert_git_error(exc: GitCommandError, operation: str) -> GitError:
    """Convert GitPython exception to Dockwright exception.

    Args:
        exc: GitPython exception.
        operation: Name of the git operation that failed.

    Returns:
        Appropriate Dockwright exception.
    """
    stderr = str(exc.stderr or exc.stdout or str(exc)).strip()
    stderr_lower = stderr.lower()

    if "nothing to commit" in stderr_lower or "no changes added" in stderr_lower:
        return NothingToCommitError()

    if operation == "push" and (
        "rejected" in stderr_lower or "failed to push" in stderr_lower
    ):
        return PushRejectedError(f"Push rejected: {stderr}", reason=stderr)

    return GitError(
        f"git {operation} failed: {stderr}",
        operation=operation,
        recoverable=is_recoverable_error(stderr),
    )


class GitRepository:
    """GitPython-based repository operations.

    Example:
        ```python
        repo = GitRepository("/path/to/repo")
        branch = repo.current_branch()
        repo.add([".github/workflows/ci.yml"])
        repo.commit("Add workflow", paths=[".github/workflows/ci.yml"])
        repo.push(set_upstream=True)
        ```
    """

    def __init__(self, path: Path | str | None = None) -> None:
        """Initialize GitRepository.

        Args:
            path: A path inside the git repository. Defaults to current
                directory. Parent directories are searched for ``.git``.

        Raises:
            GitNotFoundError: If git is not installed.
            NotARepositoryError: If path is not inside a git repository.
        """
        resolved_path = Path.cwd() if path is None else Path(path)

        try:
            self._repo = Repo(resolved_path, search_parent_directories=True)
        except GitCommandNotFound as e:
            raise GitNotFoundError("Git CLI not found. Please install git.") from e
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise NotARepositoryError(
                f"Not a git repository: {resolved_path}",
                path=resolved_path,
            ) from e

        self._path = Path(self._repo.working_dir)

    @property
    def path(self) -> Path:
        """Path to the repository root."""
        return self._path

    # -------------------------------------------------------------------------
    # Repository State
    # -------------------------------------------------------------------------

    def current_branch(self) -> str:
        """Get current branch name.

        Returns:
            Branch name, or commit SHA if in detached HEAD state.
        """
        if self._repo.head.is_detached:
            return self._repo.head.commit.hexsha
        return self._repo.active_branch.name

    # -------------------------------------------------------------------------
    # Staging and Committing
    # -------------------------------------------------------------------------

    def add(self, paths: Sequence[str | Path]) -> None:
        """Stage exactly the given paths.

        Args:
            paths: Files to stage, absolute or relative to the repository root.

        Raises:
            GitError: If git cannot stage the files.
        """
        try:
            self._repo.git.add("--", *(str(p) for p in paths))
        except GitCommandError as e:
            raise _convert_git_error(e, "add") from e

    def commit(self, message: str, paths: Sequence[str | Path]) -> str:
        """Commit the staged changes to ``paths`` and nothing else.

        Other staged changes in the index are left staged and uncommitted.

        Args:
            message: Commit message.
            paths: Files the commit is restricted to.

        Returns:
            The commit SHA.

        Raises:
            NothingToCommitError: If the paths have no staged changes.
            GitError: If git refuses the commit (e.g., a failing hook).
        """
        path_args = [str(p) for p in paths]
        staged = self._repo.git.diff("--cached", "--name-only", "--", *path_args)
        if not staged.strip():
            raise NothingToCommitError(
                "Nothing to commit: workflow files match the last commit"
            )

        try:
            self._repo.git.commit("-m", message, "--", *path_args)
        except GitCommandError as e:
            raise _convert_git_error(e, "commit") from e

        sha = self._repo.head.commit.hexsha
        logger.info("commit_created", sha=sha[:7])
        return sha

    # -------------------------------------------------------------------------
    # Remote Operations
    # -------------------------------------------------------------------------

    def push(
        self,
        remote: str = "origin",
        branch: str | None = None,
        set_upstream: bool = False,
    ) -> None:
        """Push commits to remote.

        Args:
            remote: Remote name (default: origin).
            branch: Branch to push (default: current branch).
            set_upstream: Set upstream tracking branch.

        Raises:
            PushRejectedError: If remote rejects the push.
            GitError: For any other push failure.
        """
        branch_name = branch or self.current_branch()

        args: list[str] = []
        if set_upstream:
            args.append("-u")
        args.append(remote)
        args.append(branch_name)

        try:
            self._repo.git.push(*args)
        except GitCommandError as e:
            raise _convert_git_error(e, "push") from e

        logger.info("push_completed", remote=remote, branch=branch_name)


class AsyncGitRepository:
    """Async wrapper for GitRepository.

    Delegates all operations to a synchronous GitRepository running in
    a thread pool so the event loop is never blocked by git.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        """Initialize AsyncGitRepository.

        Raises:
            GitNotFoundError: If git is not installed.
            NotARepositoryError: If path is not a git repository.
        """
        self._sync = GitRepository(path)

    @property
    def path(self) -> Path:
        """Path to the repository root."""
        return self._sync.path

    async def current_branch(self) -> str:
        """Get current branch name."""
        return await asyncio.to_thread(self._sync.current_branch)

    async def add(self, paths: Sequence[str | Path]) -> None:
        """Stage exactly the given paths."""
        await asyncio.to_thread(self._sync.add, paths)

    async def commit(self, message: str, paths: Sequence[str | Path]) -> str:
        """Commit the staged changes to ``paths``."""
        return await asyncio.to_thread(self._sync.commit, message, paths)

    async def push(
        self,
        remote: str = "origin",
        branch: str | None = None,
        set_upstream: bool = False,
    ) -> None:
        """Push commits to remote."""
        await asyncio.to_thread(
            self._sync.push,
            remote,
            branch,
            set_upstream,
        )
