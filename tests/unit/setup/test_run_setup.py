"""Tests for the run_setup orchestration.

Prerequisite checks, prompts and every gh interaction are mocked; the git
repository and the filesystem are real.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from dockwright.config import DockwrightConfig
from dockwright.exceptions import (
    InvalidChoiceError,
    ManualSetupRequired,
    PrerequisiteError,
    WorkflowExistsError,
    WorkflowRunError,
)
from dockwright.setup import run_setup
from dockwright.setup.models import (
    DeploymentMode,
    PreflightStatus,
    PrerequisiteCheck,
    RenderedWorkflows,
    SetupPreflightResult,
    WorkflowRunResult,
)
from dockwright.setup.publisher import PublishResult


def _check(name: str, status: PreflightStatus, message: str) -> PrerequisiteCheck:
    return PrerequisiteCheck(
        name=name, display_name=name, status=status, message=message
    )


def _preflight(gh_ready: bool = True) -> SetupPreflightResult:
    auth_status = PreflightStatus.PASS if gh_ready else PreflightStatus.FAIL
    return SetupPreflightResult(
        success=True,
        checks=(
            _check("git_installed", PreflightStatus.PASS, "git version 2.43.0"),
            _check("in_git_repo", PreflightStatus.PASS, "Repository"),
            _check("gh_installed", PreflightStatus.PASS, "gh version 2.40.1"),
            _check("gh_authenticated", auth_status, "Authenticated as acme"),
        ),
        warnings=() if gh_ready else ("Not authenticated with GitHub",),
    )


@pytest.fixture
def mocks(make_workflow_config):
    """Patch every collaborator of run_setup that leaves the machine."""
    github = MagicMock()
    with (
        patch(
            "dockwright.setup.verify_prerequisites",
            AsyncMock(return_value=_preflight()),
        ) as verify,
        patch(
            "dockwright.setup.collect_config",
            MagicMock(return_value=make_workflow_config()),
        ) as collect,
        patch("dockwright.setup.GitHubCLIRunner", return_value=github) as gh_cls,
        patch(
            "dockwright.setup.provision_secrets",
            AsyncMock(return_value=("DOCKERHUB_USERNAME", "DOCKERHUB_TOKEN")),
        ) as provision,
        patch(
            "dockwright.setup.publish",
            AsyncMock(
                return_value=PublishResult(
                    commit_sha="abc123", branch="main", pushed=True
                )
            ),
        ) as publish,
        patch(
            "dockwright.setup.watch_triggered_run",
            AsyncMock(
                return_value=WorkflowRunResult(
                    run_id=7,
                    url="https://github.com/acme/widget/actions/runs/7",
                    exit_code=0,
                )
            ),
        ) as watch,
    ):
        yield MagicMock(
            verify=verify,
            collect=collect,
            gh_cls=gh_cls,
            github=github,
            provision=provision,
            publish=publish,
            watch=watch,
        )


class TestRunSetup:
    @pytest.mark.asyncio
    async def test_full_run(self, git_repo: Path, mocks) -> None:
        progress: list[str] = []
        result = await run_setup(project_path=git_repo, on_progress=progress.append)

        ci = git_repo / ".github" / "workflows" / "ci.yml"
        assert ci.exists()
        assert result.written_paths == (ci,)
        assert result.secrets_set == ("DOCKERHUB_USERNAME", "DOCKERHUB_TOKEN")
        assert result.commit_sha == "abc123"
        assert result.pushed is True
        assert result.run is not None and result.run.run_id == 7

        mocks.gh_cls.assert_called_once_with(cwd=git_repo, repo="acme/widget")
        mocks.publish.assert_awaited_once()
        assert "Repository: widget" in progress
        assert "Auto-detected: acme/widget" in progress
        assert "Created .github/workflows/ci.yml" in progress
        assert "Workflows pushed to GitHub!" in progress

    @pytest.mark.asyncio
    async def test_dry_run_writes_nothing(self, git_repo: Path, mocks) -> None:
        result = await run_setup(project_path=git_repo, dry_run=True)

        assert result.dry_run is True
        assert result.rendered.file_names == ("ci.yml",)
        assert not (git_repo / ".github").exists()
        assert mocks.verify.await_args.kwargs["check_github"] is False
        mocks.provision.assert_not_awaited()
        mocks.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_mode_writes_nothing(self, git_repo: Path, mocks) -> None:
        mocks.collect.side_effect = InvalidChoiceError("Z", ["A", "B", "C"], 2)

        with pytest.raises(InvalidChoiceError):
            await run_setup(project_path=git_repo)
        assert not (git_repo / ".github").exists()

    @pytest.mark.asyncio
    async def test_existing_workflow_checked_before_prompts(
        self, git_repo: Path, mocks
    ) -> None:
        workflows = git_repo / ".github" / "workflows"
        workflows.mkdir(parents=True)
        (workflows / "ci.yml").write_text("name: old\n")

        with pytest.raises(WorkflowExistsError):
            await run_setup(project_path=git_repo)
        mocks.collect.assert_not_called()
        assert (workflows / "ci.yml").read_text() == "name: old\n"

    @pytest.mark.asyncio
    async def test_force_overwrites(self, git_repo: Path, mocks) -> None:
        workflows = git_repo / ".github" / "workflows"
        workflows.mkdir(parents=True)
        (workflows / "ci.yml").write_text("name: old\n")

        await run_setup(project_path=git_repo, force=True, push=False)
        assert "CI/CD Pipeline" in (workflows / "ci.yml").read_text()

    @pytest.mark.asyncio
    async def test_prerequisite_failure(self, git_repo: Path, mocks) -> None:
        failed = _check(
            "in_git_repo",
            PreflightStatus.FAIL,
            "Not in a git repository. Please run this from your repository root.",
        )
        mocks.verify.return_value = SetupPreflightResult(
            success=False, checks=(failed,), failed_checks=("in_git_repo",)
        )

        with pytest.raises(PrerequisiteError) as exc_info:
            await run_setup(project_path=git_repo)
        assert exc_info.value.check is failed

    @pytest.mark.asyncio
    async def test_gh_unavailable_requires_manual_setup(
        self, git_repo: Path, mocks
    ) -> None:
        mocks.verify.return_value = _preflight(gh_ready=False)

        with pytest.raises(ManualSetupRequired) as exc_info:
            await run_setup(project_path=git_repo)

        assert exc_info.value.reason == "Not authenticated with GitHub"
        assert (git_repo / ".github" / "workflows" / "ci.yml").exists()
        mocks.gh_cls.assert_not_called()
        mocks.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_skip_secrets_without_push(self, git_repo: Path, mocks) -> None:
        result = await run_setup(project_path=git_repo, skip_secrets=True, push=False)

        assert result.secrets_set == ()
        assert result.pushed is False
        assert result.commit_sha is None
        mocks.provision.assert_not_awaited()
        mocks.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_watch_disabled_by_config(self, git_repo: Path, mocks) -> None:
        config = DockwrightConfig(watch={"enabled": False})
        result = await run_setup(project_path=git_repo, config=config)

        assert result.pushed is True
        assert result.run is None
        mocks.watch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_custom_workflows_dir(
        self, git_repo: Path, mocks, make_workflow_config
    ) -> None:
        mocks.collect.return_value = make_workflow_config(
            deployment_mode=DeploymentMode.LOCAL_REUSABLE
        )
        result = await run_setup(
            project_path=git_repo, workflows_dir="ci/workflows", push=False
        )

        assert result.written_paths == (
            git_repo / "ci" / "workflows" / "docker-build-push.yml",
            git_repo / "ci" / "workflows" / "ci.yml",
        )

    @pytest.mark.asyncio
    async def test_lowercase_notice_reported(
        self, git_repo: Path, mocks, make_workflow_config
    ) -> None:
        mocks.collect.return_value = make_workflow_config(image_name="Acme/Widget")
        progress: list[str] = []
        await run_setup(
            project_path=git_repo, dry_run=True, on_progress=progress.append
        )

        assert (
            "Converted to lowercase: acme/widget (Docker requires lowercase)"
            in progress
        )

    @pytest.mark.asyncio
    async def test_summary_reported_before_failed_run(
        self, git_repo: Path, mocks
    ) -> None:
        summaries: list[RenderedWorkflows] = []
        mocks.watch.side_effect = WorkflowRunError(1)

        with pytest.raises(WorkflowRunError):
            await run_setup(project_path=git_repo, on_summary=summaries.append)

        assert len(summaries) == 1
        assert "Docker Image: acme/widget" in summaries[0].summary_lines

    @pytest.mark.asyncio
    async def test_summary_reported_without_push(self, git_repo: Path, mocks) -> None:
        summaries: list[RenderedWorkflows] = []
        await run_setup(project_path=git_repo, push=False, on_summary=summaries.append)

        assert len(summaries) == 1

    @pytest.mark.asyncio
    async def test_no_summary_callback_for_dry_run(
        self, git_repo: Path, mocks
    ) -> None:
        summaries: list[RenderedWorkflows] = []
        await run_setup(
            project_path=git_repo, dry_run=True, on_summary=summaries.append
        )

        assert summaries == []
