"""Provisioning of the Docker Hub repository secrets."""

from __future__ import annotations

from collections.abc import Callable

from dockwright.constants import (
    DOCKERHUB_TOKEN_SECRET,
    DOCKERHUB_TOKEN_URL,
    DOCKERHUB_USERNAME_SECRET,
)
from dockwright.logging import get_logger
from dockwright.runners.github import GitHubCLIRunner
from dockwright.setup.models import WorkflowConfig

__all__ = ["provision_secrets", "manual_instructions"]

logger = get_logger(__name__)


async def provision_secrets(
    github: GitHubCLIRunner,
    config: WorkflowConfig,
    on_secret_set: Callable[[str], None] | None = None,
) -> tuple[str, ...]:
    """Set DOCKERHUB_USERNAME and DOCKERHUB_TOKEN on the repository.

    The username goes on the command line; the token is written to gh's
    stdin. The first failure stops provisioning.

    Args:
        github: Runner bound to the target repository.
        config: Collected configuration holding the credentials.
        on_secret_set: Called with each secret name once it is set.

    Returns:
        Names of the secrets set, in order.

    Raises:
        SecretProvisionError: If gh fails to set a secret.
        GitHubAuthError: If gh is not authenticated.
    """
    done: list[str] = []

    await github.set_secret(DOCKERHUB_USERNAME_SECRET, config.dockerhub_username)
    done.append(DOCKERHUB_USERNAME_SECRET)
    if on_secret_set is not None:
        on_secret_set(DOCKERHUB_USERNAME_SECRET)

    await github.set_secret(
        DOCKERHUB_TOKEN_SECRET, config.dockerhub_token, via_stdin=True
    )
    done.append(DOCKERHUB_TOKEN_SECRET)
    if on_secret_set is not None:
        on_secret_set(DOCKERHUB_TOKEN_SECRET)

    logger.info("secrets_provisioned", secrets=done, repo=github.repo)
    return tuple(done)


def manual_instructions(
    config: WorkflowConfig,
    workflows_dir: str,
) -> list[str]:
    """Steps to finish the setup by hand when gh cannot be used."""
    settings = "Settings -> Secrets and variables -> Actions"
    if config.repository.full_name:
        settings = (
            f"https://github.com/{config.repository.full_name}"
            "/settings/secrets/actions"
        )
    return [
        f"Create a Docker Hub access token at {DOCKERHUB_TOKEN_URL}",
        f"Add repository secrets at {settings}",
        f"   - {DOCKERHUB_USERNAME_SECRET}: {config.dockerhub_username}",
        f"   - {DOCKERHUB_TOKEN_SECRET}: (your access token)",
        (
            f"Run: git add {workflows_dir}/ && "
            f"git commit -m 'Add Docker CI/CD workflow ({config.description})' "
            "&& git push"
        ),
    ]
