from __future__ import annotations

from dockwright.constants import GH_INSTALL_URL
from dockwright.exceptions.base import DockwrightError


class GitHubError(DockwrightError):
    """Exception for GitHub CLI failures.

    Raised when a gh command used during setup (secret set, workflow
    dispatch, run lookup, run watch) fails.

    Attributes:
        message: Human-readable error message.
        stderr: Diagnostic output from gh, surfaced to the user verbatim.
    """

    def __init__(self, message: str, stderr: str = "") -> None:
        """Initialize the GitHubError.

        Args:
            message: Human-readable error message.
            stderr: Diagnostic output from gh.
        """
        self.stderr = stderr
        super().__init__(message)


class GitHubCLINotFoundError(GitHubError):
    """GitHub CLI (gh) is not installed.

    Provides installation instructions in the message.
    """

    def __init__(self) -> None:
        """Initialize the GitHubCLINotFoundError."""
        super().__init__(
            f"GitHub CLI (gh) not installed. Install from: {GH_INSTALL_URL}"
        )


class GitHubAuthError(GitHubError):
    """GitHub CLI is not authenticated."""

    def __init__(self, message: str | None = None) -> None:
        """Initialize the GitHubAuthError.

        Args:
            message: Custom error message. Defaults to auth instruction.
        """
        super().__init__(message or "GitHub CLI not authenticated. Run: gh auth login")


class SecretProvisionError(GitHubError):
    """Setting a repository secret through gh failed.

    Workflow files already written stay on disk; the run stops before
    committing.

    Attributes:
        secret_name: Name of the secret that could not be set.
        stderr: gh diagnostic output.
    """

    def __init__(self, secret_name: str, stderr: str = "") -> None:
        """Initialize the SecretProvisionError.

        Args:
            secret_name: Name of the secret that could not be set.
            stderr: gh diagnostic output.
        """
        self.secret_name = secret_name
        super().__init__(f"Failed to set {secret_name} secret", stderr=stderr)


class WorkflowRunError(GitHubError):
    """The watched workflow run failed or was cancelled.

    Attributes:
        exit_code: Exit code reported by ``gh run watch --exit-status``.
        run_url: URL of the failed run, if known.
    """

    def __init__(
        self,
        exit_code: int,
        run_url: str | None = None,
        stderr: str = "",
    ) -> None:
        """Initialize the WorkflowRunError.

        Args:
            exit_code: Exit code of the watch command.
            run_url: URL of the failed run.
            stderr: gh diagnostic output.
        """
        self.exit_code = exit_code
        self.run_url = run_url
        super().__init__(
            f"Workflow failed or was cancelled (exit code {exit_code})",
            stderr=stderr,
        )


class WorkflowRunNotFoundError(GitHubError):
    """No workflow run appeared for the pushed commit.

    Attributes:
        workflow_file: Workflow file that was expected to run.
        branch: Branch the run was expected on.
    """

    def __init__(self, workflow_file: str, branch: str) -> None:
        """Initialize the WorkflowRunNotFoundError.

        Args:
            workflow_file: Workflow file that was expected to run.
            branch: Branch the run was expected on.
        """
        self.workflow_file = workflow_file
        self.branch = branch
        super().__init__(f"No {workflow_file} run found for branch '{branch}'")
