"""Prerequisite check functions for dockwright setup.

This module provides async functions to validate the prerequisites of a
setup run: git installation, repository detection, and GitHub CLI
installation and authentication.
"""

from __future__ import annotations

import re
import time
from pathlib import Path

from dockwright.constants import GH_INSTALL_URL, GIT_INSTALL_URL
from dockwright.logging import get_logger
from dockwright.runners.command import COMMAND_NOT_FOUND, CommandRunner
from dockwright.setup.models import (
    PreflightStatus,
    PrerequisiteCheck,
    SetupPreflightResult,
)

__all__ = [
    "check_git_installed",
    "check_in_git_repo",
    "check_gh_installed",
    "check_gh_authenticated",
    "verify_prerequisites",
]

logger = get_logger(__name__)

#: Pattern to extract version from git --version output
GIT_VERSION_PATTERN = re.compile(r"git version (\d+\.\d+(?:\.\d+)?)")

#: Pattern to extract version from gh --version output
GH_VERSION_PATTERN = re.compile(r"gh version (\d+\.\d+(?:\.\d+)?)")

#: Pattern to extract username from gh auth status output
GH_USERNAME_PATTERN = re.compile(r"Logged in to \S+ (?:account|as) (\S+)")


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


async def check_git_installed(timeout: float = 5.0) -> PrerequisiteCheck:
    """Check if git is installed and accessible.

    Runs `git --version` and extracts the version number.

    Args:
        timeout: Timeout in seconds for the git command.

    Returns:
        PrerequisiteCheck with PASS status and version info,
        or FAIL status with remediation instructions.
    """
    start = time.monotonic()
    result = await CommandRunner().run(["git", "--version"], timeout=timeout)
    duration_ms = _elapsed_ms(start)

    if result.returncode == COMMAND_NOT_FOUND:
        return PrerequisiteCheck(
            name="git_installed",
            display_name="Git",
            status=PreflightStatus.FAIL,
            message="git is not installed",
            remediation=f"Install git: {GIT_INSTALL_URL}",
            duration_ms=duration_ms,
        )

    if not result.success:
        return PrerequisiteCheck(
            name="git_installed",
            display_name="Git",
            status=PreflightStatus.FAIL,
            message=f"git command failed: {result.stderr.strip() or 'unknown error'}",
            remediation="Ensure git is properly installed and in PATH",
            duration_ms=duration_ms,
        )

    version_match = GIT_VERSION_PATTERN.search(result.stdout)
    version = version_match.group(1) if version_match else "unknown"

    return PrerequisiteCheck(
        name="git_installed",
        display_name="Git",
        status=PreflightStatus.PASS,
        message=f"git version {version}",
        duration_ms=duration_ms,
    )


async def check_in_git_repo(
    cwd: Path | None = None,
    timeout: float = 5.0,
) -> PrerequisiteCheck:
    """Check if the directory is inside a git working tree.

    Runs `git rev-parse --show-toplevel` to verify repository presence.

    Args:
        cwd: Working directory to check. Defaults to current directory.
        timeout: Timeout in seconds for the git command.

    Returns:
        PrerequisiteCheck with PASS status if in a git repo,
        or FAIL status with remediation instructions.
    """
    start = time.monotonic()
    result = await CommandRunner(cwd=cwd).run(
        ["git", "rev-parse", "--show-toplevel"], timeout=timeout
    )
    duration_ms = _elapsed_ms(start)

    if not result.success:
        return PrerequisiteCheck(
            name="in_git_repo",
            display_name="Git Repository",
            status=PreflightStatus.FAIL,
            message=(
                "Not in a git repository. "
                "Please run this from your repository root."
            ),
            remediation="Run 'git init' or change into your repository",
            duration_ms=duration_ms,
        )

    return PrerequisiteCheck(
        name="in_git_repo",
        display_name="Git Repository",
        status=PreflightStatus.PASS,
        message=f"Repository: {result.stdout.strip()}",
        duration_ms=duration_ms,
    )


async def check_gh_installed(timeout: float = 5.0) -> PrerequisiteCheck:
    """Check if GitHub CLI is installed.

    Runs `gh --version` and extracts the version number.
    """
    start = time.monotonic()
    result = await CommandRunner().run(["gh", "--version"], timeout=timeout)
    duration_ms = _elapsed_ms(start)

    if not result.success:
        message = (
            "GitHub CLI (gh) is not installed"
            if result.returncode == COMMAND_NOT_FOUND
            else f"gh command failed: {result.stderr.strip() or 'unknown error'}"
        )
        return PrerequisiteCheck(
            name="gh_installed",
            display_name="GitHub CLI",
            status=PreflightStatus.FAIL,
            message=message,
            remediation=f"Install gh: {GH_INSTALL_URL}",
            duration_ms=duration_ms,
        )

    version_match = GH_VERSION_PATTERN.search(result.stdout)
    version = version_match.group(1) if version_match else "unknown"

    return PrerequisiteCheck(
        name="gh_installed",
        display_name="GitHub CLI",
        status=PreflightStatus.PASS,
        message=f"gh version {version}",
        duration_ms=duration_ms,
    )


async def check_gh_authenticated(timeout: float = 10.0) -> PrerequisiteCheck:
    """Check if GitHub CLI is authenticated.

    Runs `gh auth status` to verify authentication and extract username.
    """
    start = time.monotonic()
    result = await CommandRunner().run(["gh", "auth", "status"], timeout=timeout)
    duration_ms = _elapsed_ms(start)

    if not result.success:
        return PrerequisiteCheck(
            name="gh_authenticated",
            display_name="GitHub Auth",
            status=PreflightStatus.FAIL,
            message="Not authenticated with GitHub",
            remediation="Run 'gh auth login' to authenticate",
            duration_ms=duration_ms,
        )

    # gh auth status writes to stderr in some versions
    username_match = GH_USERNAME_PATTERN.search(result.output)
    username = username_match.group(1) if username_match else "authenticated"

    return PrerequisiteCheck(
        name="gh_authenticated",
        display_name="GitHub Auth",
        status=PreflightStatus.PASS,
        message=f"Authenticated as {username}",
        duration_ms=duration_ms,
    )


def _skipped(name: str, display_name: str, reason: str) -> PrerequisiteCheck:
    return PrerequisiteCheck(
        name=name,
        display_name=display_name,
        status=PreflightStatus.SKIP,
        message=f"Skipped ({reason})",
    )


async def verify_prerequisites(
    *,
    cwd: Path | None = None,
    check_github: bool = True,
    timeout_per_check: float = 10.0,
) -> SetupPreflightResult:
    """Verify all prerequisites for dockwright setup.

    Git checks are critical and stop the sequence on failure. GitHub CLI
    failures are recorded as warnings only: without gh the workflow files
    are still written and manual instructions are printed.

    Args:
        cwd: Working directory for the git repository check.
        check_github: Run the gh checks (False for a dry run).
        timeout_per_check: Timeout in seconds for each check.

    Returns:
        SetupPreflightResult with all check results and summary.
    """
    start = time.monotonic()
    checks: list[PrerequisiteCheck] = []
    failed_checks: list[str] = []
    warnings: list[str] = []

    def finish() -> SetupPreflightResult:
        return SetupPreflightResult(
            success=not failed_checks,
            checks=tuple(checks),
            total_duration_ms=_elapsed_ms(start),
            failed_checks=tuple(failed_checks),
            warnings=tuple(warnings),
        )

    # 1. git installed (critical)
    git_check = await check_git_installed(timeout=timeout_per_check)
    checks.append(git_check)
    if git_check.status == PreflightStatus.FAIL:
        failed_checks.append(git_check.name)
        return finish()

    # 2. inside a git repository (critical)
    repo_check = await check_in_git_repo(cwd=cwd, timeout=timeout_per_check)
    checks.append(repo_check)
    if repo_check.status == PreflightStatus.FAIL:
        failed_checks.append(repo_check.name)
        return finish()

    if not check_github:
        checks.append(_skipped("gh_installed", "GitHub CLI", "dry run"))
        checks.append(_skipped("gh_authenticated", "GitHub Auth", "dry run"))
        return finish()

    # 3. gh installed (non-fatal)
    gh_installed_check = await check_gh_installed(timeout=timeout_per_check)
    checks.append(gh_installed_check)
    if gh_installed_check.status != PreflightStatus.PASS:
        warnings.append(gh_installed_check.message)
        checks.append(_skipped("gh_authenticated", "GitHub Auth", "gh not installed"))
        logger.info("gh_unavailable", reason=gh_installed_check.message)
        return finish()

    # 4. gh authenticated (non-fatal)
    gh_auth_check = await check_gh_authenticated(timeout=timeout_per_check)
    checks.append(gh_auth_check)
    if gh_auth_check.status != PreflightStatus.PASS:
        warnings.append(gh_auth_check.message)
        logger.info("gh_unauthenticated")

    return finish()
