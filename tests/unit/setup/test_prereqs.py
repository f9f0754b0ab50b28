"""Tests for dockwright.setup.prereqs."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from dockwright.setup.models import PreflightStatus
from dockwright.setup.prereqs import (
    check_gh_authenticated,
    check_gh_installed,
    check_git_installed,
    check_in_git_repo,
    verify_prerequisites,
)

RUN = "dockwright.setup.prereqs.CommandRunner.run"


class TestCheckGitInstalled:
    @pytest.mark.asyncio
    async def test_pass_with_version(self, make_result) -> None:
        with patch(RUN, AsyncMock(return_value=make_result(stdout="git version 2.43.0"))):
            check = await check_git_installed()
        assert check.status == PreflightStatus.PASS
        assert check.message == "git version 2.43.0"

    @pytest.mark.asyncio
    async def test_not_installed(self, make_result) -> None:
        with patch(RUN, AsyncMock(return_value=make_result(returncode=127))):
            check = await check_git_installed()
        assert check.status == PreflightStatus.FAIL
        assert check.message == "git is not installed"
        assert check.remediation is not None


class TestCheckInGitRepo:
    @pytest.mark.asyncio
    async def test_inside_repository(self, git_repo: Path) -> None:
        check = await check_in_git_repo(cwd=git_repo)
        assert check.status == PreflightStatus.PASS
        assert "widget" in check.message

    @pytest.mark.asyncio
    async def test_outside_repository(self, make_result, tmp_path: Path) -> None:
        result = make_result(returncode=128, stderr="fatal: not a git repository")
        with patch(RUN, AsyncMock(return_value=result)):
            check = await check_in_git_repo(cwd=tmp_path)
        assert check.status == PreflightStatus.FAIL
        assert check.message == (
            "Not in a git repository. Please run this from your repository root."
        )


class TestGitHubChecks:
    @pytest.mark.asyncio
    async def test_gh_installed(self, make_result) -> None:
        result = make_result(stdout="gh version 2.40.1 (2023-12-13)")
        with patch(RUN, AsyncMock(return_value=result)):
            check = await check_gh_installed()
        assert check.status == PreflightStatus.PASS
        assert check.message == "gh version 2.40.1"

    @pytest.mark.asyncio
    async def test_gh_missing(self, make_result) -> None:
        with patch(RUN, AsyncMock(return_value=make_result(returncode=127))):
            check = await check_gh_installed()
        assert check.status == PreflightStatus.FAIL
        assert check.message == "GitHub CLI (gh) is not installed"

    @pytest.mark.asyncio
    async def test_gh_authenticated_reads_username(self, make_result) -> None:
        result = make_result(
            stderr="github.com\n  ✓ Logged in to github.com account acme (keyring)"
        )
        with patch(RUN, AsyncMock(return_value=result)):
            check = await check_gh_authenticated()
        assert check.status == PreflightStatus.PASS
        assert check.message == "Authenticated as acme"

    @pytest.mark.asyncio
    async def test_gh_not_authenticated(self, make_result) -> None:
        with patch(RUN, AsyncMock(return_value=make_result(returncode=1))):
            check = await check_gh_authenticated()
        assert check.status == PreflightStatus.FAIL


class TestVerifyPrerequisites:
    @pytest.mark.asyncio
    async def test_all_pass(self, make_result) -> None:
        run = AsyncMock(
            side_effect=[
                make_result(stdout="git version 2.43.0"),
                make_result(stdout="/repo"),
                make_result(stdout="gh version 2.40.1"),
                make_result(stdout="Logged in to github.com account acme"),
            ]
        )
        with patch(RUN, run):
            result = await verify_prerequisites()

        assert result.success
        assert result.gh_ready
        assert result.warnings == ()
        assert [c.name for c in result.checks] == [
            "git_installed",
            "in_git_repo",
            "gh_installed",
            "gh_authenticated",
        ]

    @pytest.mark.asyncio
    async def test_git_missing_stops_early(self, make_result) -> None:
        run = AsyncMock(return_value=make_result(returncode=127))
        with patch(RUN, run):
            result = await verify_prerequisites()

        assert not result.success
        assert result.failed_checks == ("git_installed",)
        assert run.await_count == 1

    @pytest.mark.asyncio
    async def test_not_a_repository_is_fatal(self, make_result) -> None:
        run = AsyncMock(
            side_effect=[
                make_result(stdout="git version 2.43.0"),
                make_result(returncode=128),
            ]
        )
        with patch(RUN, run):
            result = await verify_prerequisites()

        assert not result.success
        assert result.failed_checks == ("in_git_repo",)

    @pytest.mark.asyncio
    async def test_gh_missing_is_a_warning(self, make_result) -> None:
        run = AsyncMock(
            side_effect=[
                make_result(stdout="git version 2.43.0"),
                make_result(stdout="/repo"),
                make_result(returncode=127),
            ]
        )
        with patch(RUN, run):
            result = await verify_prerequisites()

        assert result.success
        assert not result.gh_ready
        assert result.warnings == ("GitHub CLI (gh) is not installed",)
        auth = result.get("gh_authenticated")
        assert auth is not None and auth.status == PreflightStatus.SKIP

    @pytest.mark.asyncio
    async def test_gh_unauthenticated_is_a_warning(self, make_result) -> None:
        run = AsyncMock(
            side_effect=[
                make_result(stdout="git version 2.43.0"),
                make_result(stdout="/repo"),
                make_result(stdout="gh version 2.40.1"),
                make_result(returncode=1),
            ]
        )
        with patch(RUN, run):
            result = await verify_prerequisites()

        assert result.success
        assert not result.gh_ready
        assert result.warnings == ("Not authenticated with GitHub",)

    @pytest.mark.asyncio
    async def test_github_checks_skipped(self, make_result) -> None:
        run = AsyncMock(
            side_effect=[
                make_result(stdout="git version 2.43.0"),
                make_result(stdout="/repo"),
            ]
        )
        with patch(RUN, run):
            result = await verify_prerequisites(check_github=False)

        assert result.success
        assert run.await_count == 2
        statuses = {c.name: c.status for c in result.checks}
        assert statuses["gh_installed"] == PreflightStatus.SKIP
