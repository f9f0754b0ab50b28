"""Tests for the Dockwright exception hierarchy."""

from __future__ import annotations

from pathlib import Path

import pytest

from dockwright.exceptions import (
    ConfigError,
    DockwrightError,
    GitError,
    GitHubAuthError,
    GitHubCLINotFoundError,
    GitHubError,
    InputValidationError,
    InvalidChoiceError,
    ManualSetupRequired,
    NotARepositoryError,
    NothingToCommitError,
    PrerequisiteError,
    PushRejectedError,
    RemoteParseError,
    SecretProvisionError,
    SetupError,
    TemplateRenderError,
    WorkflowExistsError,
    WorkflowRunError,
    WorkflowRunNotFoundError,
    WorkflowWriteError,
)
from dockwright.setup.models import DeploymentMode, PreflightStatus, PrerequisiteCheck


@pytest.mark.parametrize(
    ("error", "base"),
    [
        (ConfigError("bad"), DockwrightError),
        (NotARepositoryError("x", path=Path(".")), GitError),
        (NothingToCommitError(), GitError),
        (PushRejectedError("rejected", reason="non-fast-forward"), GitError),
        (GitHubCLINotFoundError(), GitHubError),
        (GitHubAuthError(), GitHubError),
        (SecretProvisionError("DOCKERHUB_TOKEN"), GitHubError),
        (WorkflowRunError(1), GitHubError),
        (WorkflowRunNotFoundError("ci.yml", "main"), GitHubError),
        (InvalidChoiceError("Z", ["A", "B"]), InputValidationError),
        (WorkflowExistsError(Path("ci.yml")), SetupError),
        (RemoteParseError(None), SetupError),
    ],
)
def test_hierarchy(error: DockwrightError, base: type[DockwrightError]) -> None:
    assert isinstance(error, base)
    assert isinstance(error, DockwrightError)


class TestMessages:
    def test_prerequisite_error_uses_check_message(self) -> None:
        check = PrerequisiteCheck(
            name="git_installed",
            display_name="Git",
            status=PreflightStatus.FAIL,
            message="git is not installed",
        )
        error = PrerequisiteError(check)
        assert error.message == "git is not installed"
        assert error.check is check

    def test_gh_not_found_mentions_install_url(self) -> None:
        assert "https://cli.github.com/" in GitHubCLINotFoundError().message

    def test_secret_provision_error(self) -> None:
        error = SecretProvisionError("DOCKERHUB_TOKEN", stderr="HTTP 403")
        assert error.message == "Failed to set DOCKERHUB_TOKEN secret"
        assert error.stderr == "HTTP 403"

    def test_workflow_run_error(self) -> None:
        error = WorkflowRunError(3, run_url="https://example.invalid/run")
        assert error.exit_code == 3
        assert "exit code 3" in error.message

    def test_remote_parse_error(self) -> None:
        assert "No remote origin found" in RemoteParseError(None).message
        assert "gitlab.com" in RemoteParseError("https://gitlab.com/a/b").message

    def test_template_render_error(self) -> None:
        error = TemplateRenderError(DeploymentMode.LOCAL_REUSABLE, "boom")
        assert error.message == "Failed to render local reusable workflow: boom"

    def test_write_error(self) -> None:
        error = WorkflowWriteError(Path("ci.yml"), OSError("disk full"))
        assert "disk full" in error.message

    def test_manual_setup_required(self) -> None:
        error = ManualSetupRequired("gh missing", ["step one", "step two"])
        assert error.reason == "gh missing"
        assert error.instructions == ("step one", "step two")

    def test_input_validation_error(self) -> None:
        error = InputValidationError("image_name", "Image name cannot be empty.")
        assert error.field == "image_name"
        assert error.attempts == 2
