"""GitHub CLI runner for interacting with GitHub via gh CLI."""

from __future__ import annotations

import shutil
from pathlib import Path

from pydantic import BaseModel, Field, SecretStr, TypeAdapter
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_fixed,
)

from dockwright.exceptions import (
    GitHubAuthError,
    GitHubCLINotFoundError,
    GitHubError,
    SecretProvisionError,
    WorkflowRunNotFoundError,
)
from dockwright.logging import get_logger
from dockwright.runners.command import CommandRunner
from dockwright.runners.models import WorkflowRun

__all__ = ["GitHubCLIRunner", "RetryableGitHubError"]

logger = get_logger(__name__)


class RetryableGitHubError(Exception):
    """Exception raised when a GitHub CLI command fails with a retryable error.

    Used internally by GitHubCLIRunner to signal that a gh command failed
    but should be retried (e.g., network errors, rate limits).
    """

    def __init__(
        self, exit_code: int, stderr: str, message: str = "GitHub CLI command failed"
    ) -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


class _RunNotVisibleError(Exception):
    """The pushed commit has no workflow run yet."""


# =============================================================================
# GitHub CLI Exit Codes
# =============================================================================
# Based on gh CLI documentation: https://cli.github.com/manual/gh_help_exit-codes
#   0: Success
#   1: General error (network, API, command-specific errors)
#   2: Command canceled (e.g., user canceled interactive prompt)
#   4: Authentication required (not logged in or token expired)
# =============================================================================

GH_EXIT_CODES = {
    0: "success",
    1: "general_error",
    2: "canceled",
    4: "auth_required",
}

RUN_LIST_FIELDS = "databaseId,status,conclusion,url,headSha,headBranch,event"


class GitHubRunResponse(BaseModel):
    """GitHub API workflow run response.

    Parses JSON output from 'gh run list --json ...' commands.
    """

    database_id: int = Field(alias="databaseId")
    status: str
    conclusion: str | None = None
    url: str
    head_sha: str = Field(alias="headSha")
    head_branch: str = Field(alias="headBranch")
    event: str = ""


class GitHubCLIRunner:
    """Execute GitHub operations via the gh CLI.

    Attributes:
        repo: ``owner/repo`` passed as ``--repo`` to commands that accept it.
            When None, gh resolves the repository from the working directory.
    """

    def __init__(
        self,
        cwd: Path | None = None,
        repo: str | None = None,
        command_runner: CommandRunner | None = None,
    ) -> None:
        """Initialize the GitHubCLIRunner.

        Args:
            cwd: Directory gh runs in (the repository working tree).
            repo: Optional ``owner/repo`` override.
            command_runner: Runner used to spawn gh. Defaults to a new one.

        Raises:
            GitHubCLINotFoundError: If gh CLI is not installed.
        """
        self._command_runner = command_runner or CommandRunner(cwd=cwd)
        self._check_gh_available()
        self.repo = repo
        self._auth_checked = False

    def _check_gh_available(self) -> None:
        """Check if gh CLI is installed."""
        if shutil.which("gh") is None:
            raise GitHubCLINotFoundError()

    async def _check_gh_auth(self) -> None:
        """Check if gh CLI is authenticated."""
        result = await self._command_runner.run(["gh", "auth", "status"])
        if not result.success:
            raise GitHubAuthError()

    async def _ensure_authenticated(self) -> None:
        """Check authentication status on first use (fail-fast).

        Raises:
            GitHubAuthError: If gh CLI is not authenticated.
        """
        if not self._auth_checked:
            await self._check_gh_auth()
            self._auth_checked = True

    def _repo_args(self) -> list[str]:
        return ["--repo", self.repo] if self.repo else []

    def _classify_error(self, exit_code: int, stderr: str) -> tuple[str, str, bool]:
        """Classify gh CLI error using exit codes and stderr content.

        Uses exit codes as the primary classification method, falling back to
        stderr string matching only when the exit code is ambiguous (exit code 1).

        Args:
            exit_code: The gh CLI process exit code.
            stderr: The stderr output from the gh CLI command.

        Returns:
            A tuple of (error_type, error_message, is_retryable):
                - error_type: One of "auth", "not_found", "network", "rate_limit",
                              "canceled", or "unknown"
                - error_message: Human-readable error description
                - is_retryable: True if the error might succeed on retry

        Examples:
            >>> _classify_error(4, "Not authenticated")
            ('auth', 'Authentication required', False)

            >>> _classify_error(1, "Could not resolve host: github.com")
            ('network', 'Network error', True)
        """
        error_type = GH_EXIT_CODES.get(exit_code, "general_error")

        if error_type == "auth_required":
            return ("auth", "Authentication required", False)

        if error_type == "canceled":
            return ("canceled", "Command canceled by user", False)

        # Exit code 1 is ambiguous - use stderr pattern matching as fallback
        if error_type == "general_error":
            stderr_lower = stderr.lower()

            if any(
                phrase in stderr_lower
                for phrase in [
                    "not authenticated",
                    "authentication required",
                    "unauthorized",
                    "gh auth login",
                ]
            ):
                return ("auth", "Authentication required", False)

            if any(
                phrase in stderr_lower
                for phrase in [
                    "could not resolve",
                    "connection",
                    "network",
                    "timeout",
                    "timed out",
                    "dial tcp",
                ]
            ):
                return ("network", "Network error", True)

            if any(
                phrase in stderr_lower
                for phrase in ["rate limit", "too many requests"]
            ):
                return ("rate_limit", "API rate limit exceeded", True)

            if any(
                phrase in stderr_lower
                for phrase in ["not found", "could not find", "does not exist"]
            ):
                return ("not_found", "Resource not found", False)

        return ("unknown", f"Unknown error (exit code {exit_code})", False)

    async def _run_gh_command(self, *args: str) -> str:
        """Run a read-only gh command and return its stdout.

        Uses Tenacity for retry logic with exponential backoff for transient
        errors (network issues, rate limits). Non-retryable errors fail
        immediately.

        Raises:
            GitHubAuthError: If authentication is required.
            GitHubError: If the command fails after all retries.
        """
        max_retries = 3
        last_error = ""

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(max_retries),
                wait=wait_exponential(multiplier=1, min=1, max=8),
                retry=retry_if_exception_type(RetryableGitHubError),
            ):
                with attempt:
                    result = await self._command_runner.run(["gh", *args])
                    if result.success:
                        return result.stdout.strip()

                    error_type, error_message, is_retryable = self._classify_error(
                        result.returncode, result.stderr
                    )
                    last_error = result.stderr

                    logger.warning(
                        "gh_command_failed",
                        subcommand=" ".join(args[:2]),
                        attempt=attempt.retry_state.attempt_number,
                        max_attempts=max_retries,
                        error_type=error_type,
                        stderr=result.stderr.strip(),
                    )

                    if error_type == "auth":
                        raise GitHubAuthError()
                    if not is_retryable:
                        raise GitHubError(
                            f"gh {args[0]} {args[1]} failed: {error_message}",
                            stderr=result.stderr,
                        )

                    raise RetryableGitHubError(
                        exit_code=result.returncode,
                        stderr=result.stderr,
                        message=f"[{error_type}] {error_message}",
                    )

        except RetryError as err:
            raise GitHubError(
                f"gh {args[0]} {args[1]} failed after {max_retries} attempts",
                stderr=last_error,
            ) from err

        raise GitHubError(f"gh {args[0]} {args[1]} produced no result")

    async def set_secret(
        self,
        name: str,
        value: str | SecretStr,
        *,
        via_stdin: bool = False,
    ) -> None:
        """Set a repository secret with ``gh secret set``.

        Not retried: a failed secret write is reported as-is.

        Args:
            name: Secret name (e.g., "DOCKERHUB_USERNAME").
            value: Secret value. SecretStr values are unwrapped only here.
            via_stdin: Write the value to gh's stdin instead of passing
                ``--body``, keeping it off the process command line.

        Raises:
            GitHubAuthError: If gh is not authenticated.
            SecretProvisionError: If gh reports a failure.
        """
        await self._ensure_authenticated()
        raw = value.get_secret_value() if isinstance(value, SecretStr) else value

        command = ["gh", "secret", "set", name, *self._repo_args()]
        if via_stdin:
            result = await self._command_runner.run(command, input=raw)
        else:
            result = await self._command_runner.run([*command, "--body", raw])

        if not result.success:
            error_type, _, _ = self._classify_error(result.returncode, result.stderr)
            logger.error(
                "secret_set_failed",
                secret=name,
                error_type=error_type,
                exit_code=result.returncode,
            )
            raise SecretProvisionError(name, stderr=result.stderr.strip())

        logger.info("secret_set", secret=name, repo=self.repo)

    async def dispatch_workflow(self, workflow_file: str, ref: str) -> None:
        """Trigger a workflow_dispatch run of ``workflow_file`` on ``ref``.

        Raises:
            GitHubError: If gh rejects the dispatch.
        """
        await self._ensure_authenticated()
        result = await self._command_runner.run(
            ["gh", "workflow", "run", workflow_file, "--ref", ref, *self._repo_args()]
        )
        if not result.success:
            raise GitHubError(
                f"Failed to dispatch {workflow_file} on '{ref}'",
                stderr=result.stderr.strip(),
            )
        logger.info("workflow_dispatched", workflow=workflow_file, ref=ref)

    async def list_runs(
        self,
        workflow_file: str,
        *,
        branch: str | None = None,
        commit: str | None = None,
        limit: int = 10,
    ) -> list[WorkflowRun]:
        """List recent runs of a workflow, newest first.

        Args:
            workflow_file: Workflow file name (e.g., "ci.yml").
            branch: Only runs on this branch.
            commit: Only runs for this commit SHA.
            limit: Maximum number of runs to return.

        Raises:
            GitHubError: If gh command fails.
            pydantic.ValidationError: If response JSON doesn't match expected schema.
        """
        await self._ensure_authenticated()
        args = ["run", "list", "--workflow", workflow_file]
        if branch:
            args.extend(["--branch", branch])
        if commit:
            args.extend(["--commit", commit])
        args.extend(["--limit", str(limit), "--json", RUN_LIST_FIELDS])
        args.extend(self._repo_args())

        json_output = await self._run_gh_command(*args)
        adapter = TypeAdapter(list[GitHubRunResponse])
        responses = adapter.validate_json(json_output or "[]")

        return [
            WorkflowRun(
                run_id=response.database_id,
                status=response.status,
                conclusion=response.conclusion,
                url=response.url,
                head_sha=response.head_sha,
                head_branch=response.head_branch,
                event=response.event,
            )
            for response in responses
        ]

    async def find_run(
        self,
        workflow_file: str,
        *,
        branch: str,
        commit: str,
        attempts: int = 10,
        interval: float = 3.0,
    ) -> WorkflowRun:
        """Poll until the run triggered for ``commit`` shows up.

        GitHub registers runs a few seconds after the push, so the listing
        is retried with a fixed pause.

        Args:
            workflow_file: Workflow file name (e.g., "ci.yml").
            branch: Branch that was pushed.
            commit: SHA of the pushed commit.
            attempts: Maximum number of lookups.
            interval: Seconds between lookups.

        Returns:
            The newest matching WorkflowRun.

        Raises:
            WorkflowRunNotFoundError: If no run appears within the attempts.
        """
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(attempts),
                wait=wait_fixed(interval),
                retry=retry_if_exception_type(_RunNotVisibleError),
            ):
                with attempt:
                    runs = await self.list_runs(
                        workflow_file, branch=branch, commit=commit
                    )
                    if not runs:
                        logger.debug(
                            "workflow_run_not_visible",
                            workflow=workflow_file,
                            branch=branch,
                            attempt=attempt.retry_state.attempt_number,
                        )
                        raise _RunNotVisibleError()
                    return runs[0]
        except RetryError as err:
            raise WorkflowRunNotFoundError(workflow_file, branch) from err

        raise WorkflowRunNotFoundError(workflow_file, branch)

    async def watch_run(self, run_id: int) -> int:
        """Stream ``gh run watch <id> --exit-status`` to the terminal.

        Returns:
            gh's exit code: 0 when the run succeeded, non-zero otherwise.
        """
        await self._ensure_authenticated()
        return await self._command_runner.passthrough(
            [
                "gh",
                "run",
                "watch",
                str(run_id),
                "--exit-status",
                *self._repo_args(),
            ]
        )
