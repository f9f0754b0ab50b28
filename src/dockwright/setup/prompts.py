"""Interactive collection of the workflow configuration.

Prompts run in a fixed order: deployment mode, shared workflow repository
and ref (remote shared mode only), Docker Hub username, access token, image
name, Dockerfile path, build context and platforms. Required values get two
attempts each; values supplied on the command line skip their prompt.
"""

from __future__ import annotations

from collections.abc import Callable

import click
from pydantic import SecretStr, ValidationError

from dockwright.cli.console import console
from dockwright.config import SHARED_REPO_PATTERN, DockwrightConfig
from dockwright.constants import DOCKERHUB_TOKEN_URL
from dockwright.exceptions import InputValidationError, InvalidChoiceError
from dockwright.logging import get_logger
from dockwright.setup.models import (
    DeploymentMode,
    GitRemoteInfo,
    SetupOptions,
    WorkflowConfig,
)
from dockwright.setup.selector import ALL_MODES, menu_lines, parse_deployment_mode

__all__ = ["MAX_ATTEMPTS", "collect_config", "prompt_required", "prompt_mode"]

logger = get_logger(__name__)

#: Attempts allowed for every required prompt
MAX_ATTEMPTS = 2


def _warn(message: str) -> None:
    click.secho(f"Warning: {message}", fg="yellow", err=True)


def _section(title: str) -> None:
    console.print()
    console.rule(f"[bold]{title}[/bold]")
    console.print()


def prompt_required(
    text: str,
    *,
    field: str,
    display_name: str,
    default: str | None = None,
    hide_input: bool = False,
    validate: Callable[[str], str | None] | None = None,
    attempts: int = MAX_ATTEMPTS,
) -> str:
    """Prompt until a non-empty, valid value is given.

    Args:
        text: Prompt text.
        field: Field name reported on failure.
        display_name: Name used in messages (e.g., "Docker Hub username").
        default: Value used when the answer is empty.
        hide_input: Do not echo the answer (for secrets).
        validate: Returns an error message for a bad value, None if fine.
        attempts: Number of attempts before giving up.

    Returns:
        The stripped answer.

    Raises:
        InputValidationError: If every attempt was empty or invalid.
    """
    error = f"{display_name} cannot be empty."
    for attempt in range(1, attempts + 1):
        answer = click.prompt(
            text,
            default=default or "",
            show_default=bool(default) and not hide_input,
            hide_input=hide_input,
            type=str,
        ).strip()

        if not answer:
            error = f"{display_name} cannot be empty."
        elif validate is not None and (problem := validate(answer)):
            error = problem
        else:
            return answer

        logger.debug("prompt_rejected", field=field, attempt=attempt)
        if attempt < attempts:
            _warn(f"{error} Please try again.")

    raise InputValidationError(field, error, attempts=attempts)


def _prompt_optional(text: str, default: str) -> str:
    answer = click.prompt(text, default=default, show_default=True, type=str)
    return answer.strip() or default


def prompt_mode(
    default: DeploymentMode = DeploymentMode.INLINE,
    attempts: int = MAX_ATTEMPTS,
) -> DeploymentMode:
    """Show the deployment menu and read a letter.

    Raises:
        InvalidChoiceError: If every attempt was outside the menu.
    """
    _section("Workflow Deployment Type")
    for line in menu_lines(ALL_MODES):
        click.echo(line)

    def ask() -> DeploymentMode:
        answer = click.prompt(
            f"Select option ({'/'.join(m.value for m in ALL_MODES)})",
            default=default.value,
            show_default=True,
            type=str,
        )
        return parse_deployment_mode(answer, ALL_MODES, default)

    for _ in range(attempts - 1):
        try:
            return ask()
        except InvalidChoiceError as e:
            _warn(e.message)

    try:
        return ask()
    except InvalidChoiceError as e:
        raise InvalidChoiceError(e.value, e.allowed, attempts=attempts) from e


def _check_shared_repo(value: str) -> str | None:
    if SHARED_REPO_PATTERN.match(value):
        return None
    return "Shared workflow repository must look like owner/repo."


def collect_config(
    options: SetupOptions,
    config: DockwrightConfig,
    remote: GitRemoteInfo,
    repo_name: str,
) -> WorkflowConfig:
    """Collect every WorkflowConfig value, prompting for what is missing.

    Args:
        options: Values given on the command line.
        config: Loaded configuration supplying prompt defaults.
        remote: Detected origin remote (owner is the default username).
        repo_name: Repository directory name for the default image name.

    Returns:
        A validated WorkflowConfig.

    Raises:
        InvalidChoiceError: If the deployment mode was invalid twice.
        InputValidationError: If a required value was empty twice or the
            assembled configuration is invalid.
    """
    defaults = config.defaults

    if options.mode is not None:
        mode = parse_deployment_mode(options.mode)
    else:
        mode = prompt_mode(DeploymentMode(defaults.deployment_mode))

    shared_repo: str | None = None
    shared_ref = options.shared_ref or config.shared_workflow.ref
    if mode == DeploymentMode.REMOTE_SHARED:
        shared_repo = options.shared_repo
        if shared_repo is None:
            shared_repo = prompt_required(
                "Shared workflow repository (e.g., username/my-workflows)",
                field="shared_workflow_repo",
                display_name="Workflow repository",
                default=config.shared_workflow.repo,
                validate=_check_shared_repo,
            )
        if options.shared_ref is None:
            shared_ref = _prompt_optional("Workflow version/branch", shared_ref)

    _section("Docker Hub Credentials")
    username = options.dockerhub_username
    if username is None:
        username = prompt_required(
            "Docker Hub username",
            field="dockerhub_username",
            display_name="Docker Hub username",
            default=defaults.dockerhub_username or remote.owner,
        )

    token = prompt_required(
        f"Docker Hub access token (create at {DOCKERHUB_TOKEN_URL})",
        field="dockerhub_token",
        display_name="Token",
        hide_input=True,
    )

    _section("Docker Build Configuration")
    image_name = options.image_name
    if image_name is None:
        click.echo(
            "Note: Image name will be auto-converted to lowercase "
            "(Docker requirement)"
        )
        image_name = prompt_required(
            "Docker image name",
            field="image_name",
            display_name="Image name",
            default=f"{username}/{repo_name}",
        )

    dockerfile_path = options.dockerfile_path or _prompt_optional(
        "Path to Dockerfile", defaults.dockerfile_path
    )
    build_context = options.build_context or _prompt_optional(
        "Build context path", defaults.build_context
    )
    platforms = options.platforms or _prompt_optional(
        "Target platforms", ",".join(defaults.platforms)
    )

    try:
        return WorkflowConfig(
            deployment_mode=mode,
            image_name=image_name,
            dockerfile_path=dockerfile_path,
            build_context=build_context,
            platforms=platforms,
            dockerhub_username=username,
            dockerhub_token=SecretStr(token),
            shared_workflow_repo=shared_repo,
            shared_workflow_ref=shared_ref,
            repository=remote,
        )
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"]) or "config"
        raise InputValidationError(
            field, f"Invalid {field}: {first_error['msg']}", attempts=1
        ) from e
