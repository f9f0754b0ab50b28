"""Data models for dockwright setup.

This module defines the enums, dataclasses and the Pydantic ``WorkflowConfig``
model that flow through a setup run: preflight checks, the detected remote,
the collected configuration, rendered documents and the final result.

All enums use str inheritance for JSON/YAML serialization compatibility.
Dataclasses are frozen and use slots for immutability and memory efficiency.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)

from dockwright.config import SHARED_REPO_PATTERN
from dockwright.constants import (
    CI_WORKFLOW_FILE,
    DEFAULT_BUILD_CONTEXT,
    DEFAULT_DOCKERFILE_PATH,
    DEFAULT_PLATFORMS,
    DEFAULT_SHARED_WORKFLOW_REF,
)

__all__ = [
    # Enums
    "DeploymentMode",
    "PreflightStatus",
    # Dataclasses
    "PrerequisiteCheck",
    "GitRemoteInfo",
    "SetupPreflightResult",
    "RenderedDocument",
    "RenderedWorkflows",
    "WorkflowRunResult",
    "SetupResult",
    "SetupOptions",
    # Pydantic models
    "WorkflowConfig",
]

#: Characters allowed in a Docker image reference (case is normalized later)
_IMAGE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._/:-]*$")

_GIT_REF_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._/-]*$")


# =============================================================================
# Enums
# =============================================================================


class DeploymentMode(str, Enum):
    """How the generated CI workflow is structured.

    The values are the menu letters shown at the deployment prompt.

    Attributes:
        INLINE: All build steps live in a single ``ci.yml``.
        LOCAL_REUSABLE: ``ci.yml`` calls a reusable workflow written next to it.
        REMOTE_SHARED: ``ci.yml`` calls a reusable workflow in another repository.
    """

    INLINE = "A"
    LOCAL_REUSABLE = "B"
    REMOTE_SHARED = "C"

    @property
    def label(self) -> str:
        """Short lowercase name used in messages (e.g., "local reusable")."""
        return _MODE_LABELS[self]

    @property
    def display_name(self) -> str:
        """Menu title (e.g., "Simple inline workflow")."""
        return _MODE_DISPLAY_NAMES[self]


_MODE_LABELS = {
    DeploymentMode.INLINE: "inline",
    DeploymentMode.LOCAL_REUSABLE: "local reusable",
    DeploymentMode.REMOTE_SHARED: "remote shared",
}

_MODE_DISPLAY_NAMES = {
    DeploymentMode.INLINE: "Simple inline workflow",
    DeploymentMode.LOCAL_REUSABLE: "Local reusable workflow",
    DeploymentMode.REMOTE_SHARED: "Remote shared workflow",
}


class PreflightStatus(str, Enum):
    """Status of a preflight validation check.

    Attributes:
        PASS: Check completed successfully.
        FAIL: Check failed.
        SKIP: Check was skipped (e.g., gh auth when gh is missing).
    """

    PASS = "pass"
    FAIL = "fail"
    SKIP = "skip"


# =============================================================================
# Dataclasses
# =============================================================================


@dataclass(frozen=True, slots=True)
class PrerequisiteCheck:
    """Result of a single prerequisite check.

    Attributes:
        name: Identifier for the check (e.g., "gh_installed").
        display_name: Human-readable name (e.g., "GitHub CLI").
        status: Pass/fail/skip status.
        message: Human-readable result message.
        remediation: Suggested fix if failed (None if passed).
        duration_ms: Time taken for this check in milliseconds.
    """

    name: str
    display_name: str
    status: PreflightStatus
    message: str
    remediation: str | None = None
    duration_ms: int = 0

    @property
    def passed(self) -> bool:
        return self.status == PreflightStatus.PASS


@dataclass(frozen=True, slots=True)
class GitRemoteInfo:
    """Parsed git remote information.

    Contains owner and repo extracted from the origin remote URL. Both are
    None when the remote is missing or is not a GitHub URL.

    Attributes:
        owner: GitHub owner/organization (None if not parseable).
        repo: Repository name (None if not parseable).
        remote_url: Raw remote URL (None if no remote).
        remote_name: Remote name (default: "origin").
    """

    owner: str | None = None
    repo: str | None = None
    remote_url: str | None = None
    remote_name: str = "origin"

    @property
    def full_name(self) -> str | None:
        """Return owner/repo format if both available."""
        if self.owner and self.repo:
            return f"{self.owner}/{self.repo}"
        return None

    @property
    def actions_url(self) -> str | None:
        """Web URL of the repository's Actions tab, if the repo is known."""
        if self.full_name:
            return f"https://github.com/{self.full_name}/actions"
        return None


@dataclass(frozen=True, slots=True)
class SetupPreflightResult:
    """Aggregate result of setup prerequisite validation.

    Git checks are fatal; GitHub CLI checks only decide whether secrets can
    be provisioned automatically.

    Attributes:
        success: True if all fatal checks passed.
        checks: Individual check results.
        total_duration_ms: Total validation time.
        failed_checks: Names of failed checks.
        warnings: Non-fatal warning messages.
    """

    success: bool
    checks: tuple[PrerequisiteCheck, ...] = field(default_factory=tuple)
    total_duration_ms: int = 0
    failed_checks: tuple[str, ...] = field(default_factory=tuple)
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def get(self, name: str) -> PrerequisiteCheck | None:
        """Look up a check by name."""
        for check in self.checks:
            if check.name == name:
                return check
        return None

    @property
    def gh_ready(self) -> bool:
        """True if gh is installed and authenticated."""
        auth = self.get("gh_authenticated")
        return auth is not None and auth.passed


@dataclass(frozen=True, slots=True)
class RenderedDocument:
    """A single rendered workflow file.

    Attributes:
        file_name: File name inside the workflows directory.
        text: Complete YAML text.
    """

    file_name: str
    text: str


@dataclass(frozen=True, slots=True)
class RenderedWorkflows:
    """Everything the renderer produced for one configuration.

    Attributes:
        mode: Deployment mode that was rendered.
        documents: Rendered files, caller workflow last.
        description: Deployment description used in the summary and the
            commit message.
        image_name: Image name as rendered (lowercase).
        summary_lines: Human-readable run summary.
        notices: Informational messages (e.g., lowercase conversion).
    """

    mode: DeploymentMode
    documents: tuple[RenderedDocument, ...]
    description: str
    image_name: str
    summary_lines: tuple[str, ...] = field(default_factory=tuple)
    notices: tuple[str, ...] = field(default_factory=tuple)

    @property
    def file_names(self) -> tuple[str, ...]:
        return tuple(doc.file_name for doc in self.documents)

    def get(self, file_name: str) -> RenderedDocument | None:
        """Return the document written to ``file_name``, if any."""
        for doc in self.documents:
            if doc.file_name == file_name:
                return doc
        return None

    @property
    def ci(self) -> RenderedDocument:
        """The ``ci.yml`` document every mode produces."""
        doc = self.get(CI_WORKFLOW_FILE)
        if doc is None:
            raise LookupError(f"No {CI_WORKFLOW_FILE} document was rendered")
        return doc


@dataclass(frozen=True, slots=True)
class WorkflowRunResult:
    """Outcome of watching the triggered workflow run.

    Attributes:
        run_id: GitHub run identifier.
        url: Web URL of the run.
        exit_code: Exit code of ``gh run watch --exit-status``.
        dispatched: True if the run was started with workflow_dispatch
            rather than by the push itself.
    """

    run_id: int
    url: str
    exit_code: int
    dispatched: bool = False

    @property
    def success(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True, slots=True)
class SetupResult:
    """Result of a ``dockwright setup`` run.

    Attributes:
        rendered: Rendered workflows.
        repository: Detected remote information.
        written_paths: Files written to disk (empty for a dry run).
        secrets_set: Names of the secrets provisioned through gh.
        commit_sha: SHA of the workflow commit (None if not committed).
        pushed: True if the commit was pushed.
        branch: Branch that was pushed.
        run: Result of watching the run (None if not watched).
        dry_run: True if nothing was written.
    """

    rendered: RenderedWorkflows
    repository: GitRemoteInfo
    written_paths: tuple[Path, ...] = field(default_factory=tuple)
    secrets_set: tuple[str, ...] = field(default_factory=tuple)
    commit_sha: str | None = None
    pushed: bool = False
    branch: str | None = None
    run: WorkflowRunResult | None = None
    dry_run: bool = False


# =============================================================================
# Pydantic Models
# =============================================================================


class WorkflowConfig(BaseModel):
    """Configuration collected from the user for one setup run.

    The token is held as a SecretStr so that it never shows up in reprs,
    logs or rendered output; only the secret provisioner unwraps it.
    """

    model_config = ConfigDict(frozen=True)

    deployment_mode: DeploymentMode
    image_name: str = Field(min_length=1)
    dockerfile_path: str = Field(default=DEFAULT_DOCKERFILE_PATH, min_length=1)
    build_context: str = Field(default=DEFAULT_BUILD_CONTEXT, min_length=1)
    platforms: tuple[str, ...] = DEFAULT_PLATFORMS
    dockerhub_username: str = Field(min_length=1)
    dockerhub_token: SecretStr
    shared_workflow_repo: str | None = None
    shared_workflow_ref: str = DEFAULT_SHARED_WORKFLOW_REF
    repository: GitRemoteInfo = Field(default_factory=GitRemoteInfo)

    @field_validator(
        "image_name",
        "dockerfile_path",
        "build_context",
        "dockerhub_username",
        "shared_workflow_ref",
        mode="before",
    )
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("image_name")
    @classmethod
    def check_image_name(cls, v: str) -> str:
        if not _IMAGE_NAME_PATTERN.match(v):
            raise ValueError(
                "image name may only contain letters, digits, '.', '_', '-', "
                "'/' and ':'"
            )
        return v

    @field_validator("dockerhub_token")
    @classmethod
    def token_not_empty(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            raise ValueError("token cannot be empty")
        return v

    @field_validator("platforms", mode="before")
    @classmethod
    def parse_platforms(cls, v: Any) -> Any:
        """Split comma-separated input; empty input falls back to the default."""
        if isinstance(v, str | list | tuple):
            parts = v.split(",") if isinstance(v, str) else list(v)
            platforms = tuple(p.strip() for p in parts if p and p.strip())
            return platforms or DEFAULT_PLATFORMS
        return v

    @model_validator(mode="after")
    def check_shared_workflow(self) -> WorkflowConfig:
        if self.deployment_mode != DeploymentMode.REMOTE_SHARED:
            return self
        if not self.shared_workflow_repo:
            raise ValueError("shared_workflow_repo is required for remote shared mode")
        if not SHARED_REPO_PATTERN.match(self.shared_workflow_repo):
            raise ValueError("shared_workflow_repo must be in owner/repo form")
        if not _GIT_REF_PATTERN.match(self.shared_workflow_ref):
            raise ValueError("shared_workflow_ref must be a branch, tag or SHA")
        return self

    @property
    def platforms_csv(self) -> str:
        """Platforms joined the way buildx expects them."""
        return ",".join(self.platforms)

    @property
    def description(self) -> str:
        """Deployment description used in the summary and commit message."""
        if self.deployment_mode == DeploymentMode.REMOTE_SHARED:
            return (
                f"{self.deployment_mode.display_name} "
                f"({self.shared_workflow_repo}@{self.shared_workflow_ref})"
            )
        return self.deployment_mode.display_name


@dataclass(frozen=True, slots=True)
class SetupOptions:
    """Values supplied up front on the command line.

    Any field left as None is prompted for. The token has no counterpart
    here: it is always read from a hidden prompt.

    Attributes:
        mode: Deployment menu letter.
        image_name: Docker image name.
        dockerfile_path: Dockerfile path.
        build_context: Build context path.
        platforms: Comma-separated target platforms.
        dockerhub_username: Docker Hub username.
        shared_repo: Shared workflow repository (``owner/repo``).
        shared_ref: Shared workflow branch or tag.
    """

    mode: str | None = None
    image_name: str | None = None
    dockerfile_path: str | None = None
    build_context: str | None = None
    platforms: str | None = None
    dockerhub_username: str | None = None
    shared_repo: str | None = None
    shared_ref: str | None = None
