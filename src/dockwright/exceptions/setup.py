"""Setup command exception hierarchy.

This module provides exception classes for ``dockwright setup``: prerequisite
failures, exhausted prompts, remote detection, rendering and file writing.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from dockwright.exceptions.base import DockwrightError

if TYPE_CHECKING:
    from dockwright.setup.models import DeploymentMode, PrerequisiteCheck

__all__ = [
    "SetupError",
    "PrerequisiteError",
    "InputValidationError",
    "InvalidChoiceError",
    "RemoteParseError",
    "WorkflowExistsError",
    "WorkflowWriteError",
    "TemplateRenderError",
    "ManualSetupRequired",
]


class SetupError(DockwrightError):
    """Base exception for setup command errors.

    Example:
        ```python
        try:
            await run_setup(project_path=Path.cwd())
        except SetupError as e:
            logger.error("setup_failed", error=e.message)
            sys.exit(1)
        ```
    """


class PrerequisiteError(SetupError):
    """A required prerequisite check failed.

    Raised when git is missing or the working directory is not inside a git
    repository. GitHub CLI checks never raise this; a missing gh degrades to
    manual setup instructions instead.

    Attributes:
        check: The PrerequisiteCheck that failed.
        message: Human-readable error message.
    """

    def __init__(
        self,
        check: PrerequisiteCheck,
        message: str | None = None,
    ) -> None:
        """Initialize the PrerequisiteError.

        Args:
            check: The PrerequisiteCheck that failed.
            message: Optional override message. Defaults to the check's message.
        """
        self.check = check
        super().__init__(message or check.message)


class InputValidationError(SetupError):
    """A required prompt was left empty or invalid on every attempt.

    Attributes:
        field: Name of the field being collected (e.g., "image_name").
        attempts: Number of attempts made before giving up.
    """

    def __init__(self, field: str, message: str, attempts: int = 2) -> None:
        """Initialize the InputValidationError.

        Args:
            field: Name of the field being collected.
            message: Human-readable error message.
            attempts: Number of attempts made.
        """
        self.field = field
        self.attempts = attempts
        super().__init__(message)


class InvalidChoiceError(InputValidationError):
    """A menu selection was outside the legal set.

    Attributes:
        value: The rejected input.
        allowed: Letters that would have been accepted.
    """

    def __init__(
        self,
        value: str,
        allowed: Sequence[str],
        attempts: int = 1,
    ) -> None:
        """Initialize the InvalidChoiceError.

        Args:
            value: The rejected input.
            allowed: Letters that would have been accepted.
            attempts: Number of attempts made.
        """
        self.value = value
        self.allowed = tuple(allowed)
        if len(self.allowed) > 1:
            choices = f"{', '.join(self.allowed[:-1])} or {self.allowed[-1]}"
        else:
            choices = "".join(self.allowed)
        super().__init__(
            "deployment_mode",
            f"Invalid choice '{value}'. Please select {choices}.",
            attempts=attempts,
        )


class RemoteParseError(SetupError):
    """The origin remote is missing or is not a GitHub repository URL.

    Only raised when the caller requires a parsable remote.

    Attributes:
        remote_url: The remote URL that could not be parsed (None if absent).
    """

    def __init__(self, remote_url: str | None) -> None:
        """Initialize the RemoteParseError.

        Args:
            remote_url: The remote URL that could not be parsed.
        """
        self.remote_url = remote_url
        if remote_url:
            message = (
                f"Could not parse GitHub repository from remote URL: {remote_url}"
            )
        else:
            message = "No remote origin found. Please add a remote first."
        super().__init__(message)


class WorkflowExistsError(SetupError):
    """A workflow file already exists and force=False.

    Attributes:
        path: Path to the existing workflow file.
    """

    def __init__(self, path: Path) -> None:
        """Initialize the WorkflowExistsError.

        Args:
            path: Path to the existing workflow file.
        """
        self.path = path
        super().__init__(f"Workflow already exists: {path}")


class WorkflowWriteError(SetupError):
    """Failed to write a workflow file.

    Attributes:
        path: Path where the write was attempted.
        cause: The underlying exception.
    """

    def __init__(self, path: Path, cause: Exception) -> None:
        """Initialize the WorkflowWriteError.

        Args:
            path: Path where the write was attempted.
            cause: The underlying exception.
        """
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write {path}: {cause}")


class TemplateRenderError(SetupError):
    """A workflow template failed to render or produced invalid YAML.

    Attributes:
        mode: Deployment mode being rendered.
        cause: Description of the underlying failure.
    """

    def __init__(self, mode: DeploymentMode, cause: str) -> None:
        """Initialize the TemplateRenderError.

        Args:
            mode: Deployment mode being rendered.
            cause: Description of the underlying failure.
        """
        self.mode = mode
        self.cause = cause
        super().__init__(f"Failed to render {mode.label} workflow: {cause}")


class ManualSetupRequired(SetupError):
    """Secrets cannot be provisioned automatically.

    Raised after the workflow files are written when gh is missing or not
    authenticated. Carries the steps the user has to do by hand.

    Attributes:
        reason: Why automatic provisioning is unavailable.
        instructions: Ordered manual steps.
    """

    def __init__(self, reason: str, instructions: Sequence[str]) -> None:
        """Initialize the ManualSetupRequired.

        Args:
            reason: Why automatic provisioning is unavailable.
            instructions: Ordered manual steps.
        """
        self.reason = reason
        self.instructions = tuple(instructions)
        super().__init__(reason)
