"""Git remote URL parsing for dockwright setup.

This module reads the origin remote of the working repository and extracts
the GitHub owner and repository name used for defaults, the run summary and
``gh --repo``.

Supports the URL forms git accepts for GitHub:
- SSH: git@github.com:owner/repo.git
- SSH URL: ssh://git@github.com/owner/repo.git
- HTTPS: https://github.com/owner/repo.git
"""

from __future__ import annotations

import re
from pathlib import Path

from dockwright.exceptions import RemoteParseError
from dockwright.logging import get_logger
from dockwright.runners.command import CommandRunner
from dockwright.setup.models import GitRemoteInfo

__all__ = ["parse_git_remote", "parse_remote_url"]

logger = get_logger(__name__)

# Default timeout for git operations
DEFAULT_TIMEOUT: float = 5.0

# github.com followed by ':' (scp-like SSH) or '/' (URL forms), then owner/repo
GITHUB_REMOTE_PATTERN = re.compile(
    r"github\.com[:/]([^/\s]+)/([^/\s]+?)(?:\.git)?/?$"
)


def parse_remote_url(url: str) -> tuple[str | None, str | None]:
    """Parse owner and repo from a GitHub remote URL.

    Args:
        url: Git remote URL (SSH or HTTPS format).

    Returns:
        Tuple of (owner, repo) or (None, None) if parsing fails.

    Examples:
        >>> parse_remote_url("git@github.com:owner/repo.git")
        ('owner', 'repo')
        >>> parse_remote_url("https://github.com/owner/my.repo")
        ('owner', 'my.repo')
        >>> parse_remote_url("https://gitlab.com/owner/repo")
        (None, None)
    """
    match = GITHUB_REMOTE_PATTERN.search(url.strip())
    if match:
        return match.group(1), match.group(2)
    return None, None


async def _read_remote_url(
    runner: CommandRunner,
    remote_name: str,
    timeout: float,
) -> str | None:
    """Return the remote URL, trying ``git config`` when get-url fails."""
    commands = (
        ["git", "remote", "get-url", remote_name],
        ["git", "config", "--get", f"remote.{remote_name}.url"],
    )
    for command in commands:
        result = await runner.run(command, timeout=timeout)
        if result.timed_out:
            logger.warning(
                "git_remote_timeout",
                remote_name=remote_name,
                timeout=timeout,
            )
            return None
        url = result.stdout.strip()
        if result.success and url:
            return url
        logger.debug(
            "git_remote_lookup_failed",
            command=" ".join(command[1:3]),
            remote_name=remote_name,
            returncode=result.returncode,
            error=result.stderr.strip(),
        )
    return None


async def parse_git_remote(
    project_path: Path,
    remote_name: str = "origin",
    *,
    require_parsable_remote: bool = False,
    timeout: float = DEFAULT_TIMEOUT,
) -> GitRemoteInfo:
    """Parse the git remote URL to extract owner and repo.

    Args:
        project_path: Path inside the git repository.
        remote_name: Name of remote to parse (default: "origin").
        require_parsable_remote: Raise instead of returning empty owner/repo
            when the remote is missing or not a GitHub URL.
        timeout: Timeout in seconds for each git command.

    Returns:
        GitRemoteInfo with parsed owner/repo, or None values if the remote
        is missing or its URL is not recognized.

    Raises:
        RemoteParseError: If require_parsable_remote is set and parsing failed.
    """
    runner = CommandRunner(cwd=project_path)
    remote_url = await _read_remote_url(runner, remote_name, timeout)

    if remote_url is None:
        logger.debug("git_remote_missing", remote_name=remote_name)
        if require_parsable_remote:
            raise RemoteParseError(None)
        return GitRemoteInfo(remote_name=remote_name)

    owner, repo = parse_remote_url(remote_url)

    if owner and repo:
        logger.debug(
            "git_remote_parsed",
            remote_name=remote_name,
            owner=owner,
            repo=repo,
            remote_url=remote_url,
        )
    else:
        logger.debug(
            "git_remote_parse_failed",
            remote_name=remote_name,
            remote_url=remote_url,
        )
        if require_parsable_remote:
            raise RemoteParseError(remote_url)

    return GitRemoteInfo(
        owner=owner,
        repo=repo,
        remote_url=remote_url,
        remote_name=remote_name,
    )

