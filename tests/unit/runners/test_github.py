"""Tests for GitHubCLIRunner."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest
from pydantic import SecretStr
from structlog.testing import capture_logs

from dockwright.exceptions import (
    GitHubAuthError,
    GitHubCLINotFoundError,
    GitHubError,
    SecretProvisionError,
    WorkflowRunNotFoundError,
)
from dockwright.runners.github import GitHubCLIRunner

RUN_JSON = {
    "databaseId": 4242,
    "status": "queued",
    "conclusion": None,
    "url": "https://github.com/acme/widget/actions/runs/4242",
    "headSha": "abc123",
    "headBranch": "main",
    "event": "push",
}


@pytest.fixture
def mock_gh_available():
    with patch("shutil.which", return_value="/usr/bin/gh"):
        yield


@pytest.fixture
def runner(mock_gh_available, make_result):
    """Runner whose command runner is mocked and already authenticated."""
    gh = GitHubCLIRunner(repo="acme/widget")
    mock_runner = AsyncMock()
    mock_runner.run = AsyncMock(return_value=make_result())
    mock_runner.passthrough = AsyncMock(return_value=0)
    gh._command_runner = mock_runner
    gh._auth_checked = True
    return gh


class TestGitHubCLIRunner:
    def test_gh_not_installed(self) -> None:
        with (
            patch("shutil.which", return_value=None),
            pytest.raises(GitHubCLINotFoundError),
        ):
            GitHubCLIRunner()

    @pytest.mark.asyncio
    async def test_auth_check_on_first_use(self, mock_gh_available, make_result):
        gh = GitHubCLIRunner()
        mock_runner = AsyncMock()
        mock_runner.run = AsyncMock(
            return_value=make_result(returncode=1, stderr="not logged in")
        )
        gh._command_runner = mock_runner

        with pytest.raises(GitHubAuthError):
            await gh.set_secret("DOCKERHUB_USERNAME", "acme")
        mock_runner.run.assert_called_once_with(["gh", "auth", "status"])

    @pytest.mark.asyncio
    async def test_auth_checked_once(self, mock_gh_available, make_result):
        gh = GitHubCLIRunner()
        mock_runner = AsyncMock()
        mock_runner.run = AsyncMock(return_value=make_result())
        gh._command_runner = mock_runner

        await gh.set_secret("A", "1")
        await gh.set_secret("B", "2")
        assert mock_runner.run.await_count == 3


class TestSetSecret:
    @pytest.mark.asyncio
    async def test_value_as_body(self, runner) -> None:
        await runner.set_secret("DOCKERHUB_USERNAME", "acme")
        runner._command_runner.run.assert_awaited_once_with(
            [
                "gh",
                "secret",
                "set",
                "DOCKERHUB_USERNAME",
                "--repo",
                "acme/widget",
                "--body",
                "acme",
            ]
        )

    @pytest.mark.asyncio
    async def test_value_via_stdin(self, runner, docker_token) -> None:
        await runner.set_secret(
            "DOCKERHUB_TOKEN", SecretStr(docker_token), via_stdin=True
        )

        call = runner._command_runner.run.await_args
        assert call.args[0] == [
            "gh",
            "secret",
            "set",
            "DOCKERHUB_TOKEN",
            "--repo",
            "acme/widget",
        ]
        assert docker_token not in call.args[0]
        assert call.kwargs["input"] == docker_token

    @pytest.mark.asyncio
    async def test_failure(self, runner, make_result) -> None:
        runner._command_runner.run.return_value = make_result(
            returncode=1, stderr="HTTP 403: Resource not accessible\n"
        )
        with pytest.raises(SecretProvisionError) as exc_info:
            await runner.set_secret("DOCKERHUB_TOKEN", "x", via_stdin=True)

        assert exc_info.value.secret_name == "DOCKERHUB_TOKEN"
        assert exc_info.value.stderr == "HTTP 403: Resource not accessible"
        assert runner._command_runner.run.await_count == 1

    @pytest.mark.asyncio
    async def test_secret_value_not_logged(self, runner, docker_token) -> None:
        with capture_logs() as logs:
            await runner.set_secret(
                "DOCKERHUB_TOKEN", SecretStr(docker_token), via_stdin=True
            )
        assert logs
        assert docker_token not in repr(logs)


class TestWorkflowRuns:
    @pytest.mark.asyncio
    async def test_dispatch(self, runner) -> None:
        await runner.dispatch_workflow("ci.yml", "feature/x")
        runner._command_runner.run.assert_awaited_once_with(
            [
                "gh",
                "workflow",
                "run",
                "ci.yml",
                "--ref",
                "feature/x",
                "--repo",
                "acme/widget",
            ]
        )

    @pytest.mark.asyncio
    async def test_dispatch_failure(self, runner, make_result) -> None:
        runner._command_runner.run.return_value = make_result(
            returncode=1, stderr="workflow does not have 'workflow_dispatch' trigger"
        )
        with pytest.raises(GitHubError, match="Failed to dispatch"):
            await runner.dispatch_workflow("ci.yml", "feature/x")

    @pytest.mark.asyncio
    async def test_list_runs(self, runner, make_result) -> None:
        runner._command_runner.run.return_value = make_result(
            stdout=json.dumps([RUN_JSON])
        )
        runs = await runner.list_runs("ci.yml", branch="main", commit="abc123")

        assert len(runs) == 1
        assert runs[0].run_id == 4242
        assert runs[0].head_sha == "abc123"
        assert not runs[0].is_completed
        args = runner._command_runner.run.await_args.args[0]
        assert args[:5] == ["gh", "run", "list", "--workflow", "ci.yml"]
        assert "--commit" in args and "abc123" in args

    @pytest.mark.asyncio
    async def test_list_runs_retries_network_errors(self, runner, make_result):
        runner._command_runner.run.side_effect = [
            make_result(returncode=1, stderr="could not resolve host: api.github.com"),
            make_result(stdout="[]"),
        ]
        with patch("asyncio.sleep", AsyncMock()):
            runs = await runner.list_runs("ci.yml")
        assert runs == []
        assert runner._command_runner.run.await_count == 2

    @pytest.mark.asyncio
    async def test_list_runs_not_found_fails_fast(self, runner, make_result):
        runner._command_runner.run.return_value = make_result(
            returncode=1, stderr="could not find any workflows named ci.yml"
        )
        with pytest.raises(GitHubError):
            await runner.list_runs("ci.yml")
        assert runner._command_runner.run.await_count == 1

    @pytest.mark.asyncio
    async def test_find_run_polls_until_visible(self, runner, make_result):
        runner._command_runner.run.side_effect = [
            make_result(stdout="[]"),
            make_result(stdout="[]"),
            make_result(stdout=json.dumps([RUN_JSON])),
        ]
        run = await runner.find_run(
            "ci.yml", branch="main", commit="abc123", attempts=5, interval=0
        )
        assert run.run_id == 4242
        assert runner._command_runner.run.await_count == 3

    @pytest.mark.asyncio
    async def test_find_run_gives_up(self, runner, make_result):
        runner._command_runner.run.return_value = make_result(stdout="[]")
        with pytest.raises(WorkflowRunNotFoundError):
            await runner.find_run(
                "ci.yml", branch="main", commit="abc123", attempts=2, interval=0
            )
        assert runner._command_runner.run.await_count == 2

    @pytest.mark.asyncio
    async def test_watch_run(self, runner) -> None:
        runner._command_runner.passthrough.return_value = 1
        assert await runner.watch_run(4242) == 1
        runner._command_runner.passthrough.assert_awaited_once_with(
            [
                "gh",
                "run",
                "watch",
                "4242",
                "--exit-status",
                "--repo",
                "acme/widget",
            ]
        )
