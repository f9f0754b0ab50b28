"""Committing and pushing the generated workflow files."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from dockwright.git import AsyncGitRepository
from dockwright.logging import get_logger

__all__ = ["PublishResult", "commit_message", "publish"]

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PublishResult:
    """Outcome of publishing.

    Attributes:
        commit_sha: SHA of the new commit.
        branch: Branch the commit was made on.
        pushed: True if the branch was pushed to the remote.
    """

    commit_sha: str
    branch: str
    pushed: bool


def commit_message(description: str) -> str:
    """Commit message for the generated workflows.

    Examples:
        >>> commit_message("Simple inline workflow")
        'Add Docker CI/CD workflow (Simple inline workflow)'
    """
    return f"Add Docker CI/CD workflow ({description})"


async def publish(
    repo: AsyncGitRepository,
    paths: Sequence[Path],
    description: str,
    *,
    push: bool = True,
    remote: str = "origin",
) -> PublishResult:
    """Stage exactly ``paths``, commit them and push the current branch.

    No retries and no rollback: a failed push leaves the local commit in
    place for the user to push by hand.

    Raises:
        NothingToCommitError: If the files match the last commit.
        PushRejectedError: If the remote rejects the push.
        GitError: For any other git failure.
    """
    await repo.add(list(paths))
    sha = await repo.commit(commit_message(description), list(paths))
    branch = await repo.current_branch()

    if push:
        await repo.push(remote=remote, branch=branch, set_upstream=True)

    logger.info("workflows_published", sha=sha[:7], branch=branch, pushed=push)
    return PublishResult(commit_sha=sha, branch=branch, pushed=push)
