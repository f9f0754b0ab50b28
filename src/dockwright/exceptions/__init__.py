"""Dockwright exception hierarchy.

All exceptions can be imported from this package:
    from dockwright.exceptions import GitError, SetupError, WorkflowRunError
"""

from __future__ import annotations

from dockwright.exceptions.base import DockwrightError
from dockwright.exceptions.config import ConfigError
from dockwright.exceptions.git import (
    GitError,
    GitNotFoundError,
    NotARepositoryError,
    NothingToCommitError,
    PushRejectedError,
)
from dockwright.exceptions.github import (
    GitHubAuthError,
    GitHubCLINotFoundError,
    GitHubError,
    SecretProvisionError,
    WorkflowRunError,
    WorkflowRunNotFoundError,
)
from dockwright.exceptions.setup import (
    InputValidationError,
    InvalidChoiceError,
    ManualSetupRequired,
    PrerequisiteError,
    RemoteParseError,
    SetupError,
    TemplateRenderError,
    WorkflowExistsError,
    WorkflowWriteError,
)

__all__ = [
    # Base
    "DockwrightError",
    # Configuration
    "ConfigError",
    # Git
    "GitError",
    "GitNotFoundError",
    "NotARepositoryError",
    "NothingToCommitError",
    "PushRejectedError",
    # GitHub
    "GitHubError",
    "GitHubAuthError",
    "GitHubCLINotFoundError",
    "SecretProvisionError",
    "WorkflowRunError",
    "WorkflowRunNotFoundError",
    # Setup
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
