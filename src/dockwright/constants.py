"""Dockwright constants for generated workflows.

This module provides a single source of truth for file names, secret names,
default build values and the GitHub Action versions pinned in rendered
templates. Update the action versions here to propagate them to every
template.
"""

from __future__ import annotations

# =============================================================================
# Generated Files
# =============================================================================

#: Directory (relative to repository root) that holds GitHub workflows
DEFAULT_WORKFLOWS_DIR: str = ".github/workflows"

#: Caller workflow file, written for every deployment mode
CI_WORKFLOW_FILE: str = "ci.yml"

#: Reusable workflow file, written for the local reusable mode only
REUSABLE_WORKFLOW_FILE: str = "docker-build-push.yml"

# =============================================================================
# Secrets
# =============================================================================

#: Repository secret holding the Docker Hub username
DOCKERHUB_USERNAME_SECRET: str = "DOCKERHUB_USERNAME"

#: Repository secret holding the Docker Hub access token
DOCKERHUB_TOKEN_SECRET: str = "DOCKERHUB_TOKEN"

#: Page where Docker Hub access tokens are created
DOCKERHUB_TOKEN_URL: str = "https://hub.docker.com/settings/security"

# =============================================================================
# Build Defaults
# =============================================================================

DEFAULT_DOCKERFILE_PATH: str = "./Dockerfile"
DEFAULT_BUILD_CONTEXT: str = "."
DEFAULT_PLATFORMS: tuple[str, ...] = ("linux/amd64", "linux/arm64")
DEFAULT_SHARED_WORKFLOW_REF: str = "main"

#: Defaults declared by the reusable workflow's own inputs
REUSABLE_DEFAULT_IMAGE_TAG: str = "latest"
REUSABLE_DEFAULT_PLATFORMS: str = "linux/amd64"

# =============================================================================
# Triggers
# =============================================================================

#: Branches whose pushes trigger the generated workflow
TRIGGER_BRANCHES: tuple[str, ...] = ("main", "develop")

#: Tag pattern whose pushes trigger the generated workflow
TRIGGER_TAG_PATTERN: str = "v*"

#: Branch that publishes the ``latest`` tag
LATEST_TAG_BRANCH: str = "main"

# =============================================================================
# Pinned Action Versions
# =============================================================================

CHECKOUT_ACTION: str = "actions/checkout@v4"
SETUP_QEMU_ACTION: str = "docker/setup-qemu-action@v3"
SETUP_BUILDX_ACTION: str = "docker/setup-buildx-action@v3"
LOGIN_ACTION: str = "docker/login-action@v3"
BUILD_PUSH_ACTION: str = "docker/build-push-action@v6"

# =============================================================================
# External Tools
# =============================================================================

GH_INSTALL_URL: str = "https://cli.github.com/"
GIT_INSTALL_URL: str = "https://git-scm.com/downloads"
