"""CLI command for dockwright setup.

This module provides the `dockwright setup` command, which scaffolds a
GitHub Actions workflow that builds and pushes a Docker image, provisions
the Docker Hub secrets, publishes the workflow and watches its first run.
"""

from __future__ import annotations

from pathlib import Path

import click

from dockwright.cli.common import cli_error_handler
from dockwright.cli.context import CLIContext, ExitCode, async_command
from dockwright.cli.output import format_section, format_success, format_warning
from dockwright.constants import CI_WORKFLOW_FILE
from dockwright.exceptions import (
    ManualSetupRequired,
    PrerequisiteError,
    WorkflowExistsError,
    WorkflowRunError,
)
from dockwright.logging import get_logger
from dockwright.setup import RenderedWorkflows, SetupOptions, SetupResult, run_setup
from dockwright.setup.selector import ALL_MODES

_SUCCESS_MARKERS = ("secret set", "Created ", "Workflows pushed")


def _echo_progress(line: str) -> None:
    if line.startswith("Could not"):
        click.echo(format_warning(line))
    elif any(marker in line for marker in _SUCCESS_MARKERS):
        click.echo(format_success(line))
    else:
        click.echo(line)


def _format_dry_run_output(result: SetupResult) -> list[str]:
    """Format the rendered documents of a dry run.

    Args:
        result: Setup result of a dry run.

    Returns:
        List of formatted output lines.
    """
    lines: list[str] = []
    for document in result.rendered.documents:
        lines.append(f"# --- {document.file_name} ---")
        lines.extend(document.text.rstrip("\n").splitlines())
        lines.append("")
    return lines


def _format_summary_output(rendered: RenderedWorkflows) -> list[str]:
    return [
        "======================================",
        "Deployment Summary",
        "======================================",
        "",
        *(f"   {line}" for line in rendered.summary_lines),
        "",
    ]


def _echo_summary(rendered: RenderedWorkflows) -> None:
    click.echo("")
    for line in _format_summary_output(rendered):
        click.echo(line)


def _format_success_output(result: SetupResult) -> list[str]:
    """Format the block printed after the watched run succeeds.

    Args:
        result: Setup result with a successful run.

    Returns:
        List of formatted output lines.
    """
    image = f"{result.rendered.image_name}:latest"
    lines = [
        "======================================",
        "Workflow Completed Successfully!",
        "======================================",
        "",
        "Your Docker image has been built and pushed to Docker Hub!",
        "",
        f"Image: {image}",
        "",
    ]
    lines.extend(
        format_section(
            "Useful commands:",
            [
                f"View all runs:    gh run list --workflow={CI_WORKFLOW_FILE}",
                f"Trigger manually: gh workflow run {CI_WORKFLOW_FILE}",
                f"Pull image:       docker pull {image}",
            ],
        )
    )
    if result.repository.actions_url:
        lines.extend(format_section("GitHub Actions:", [result.repository.actions_url]))
    return lines


def _format_failure_output(error: WorkflowRunError) -> list[str]:
    lines = [
        "======================================",
        "Workflow Failed or Was Cancelled",
        "======================================",
        "",
    ]
    lines.extend(
        format_section(
            "The workflow encountered an issue. Common causes:",
            [
                "- Docker Hub credentials are incorrect",
                "- Dockerfile has syntax errors",
                "- Build context or paths are incorrect",
            ],
        )
    )
    lines.extend(
        format_section(
            "To view details:",
            ["$ gh run view", f"$ gh run list --workflow={CI_WORKFLOW_FILE}"],
        )
    )
    if error.run_url:
        lines.extend(format_section("Run:", [error.run_url]))
    return lines


def _format_pending_output(result: SetupResult) -> list[str]:
    lines: list[str] = []
    if not result.pushed:
        lines.append(
            "Workflow files written. Commit and push them to trigger the workflow."
        )
    elif result.repository.actions_url:
        lines.append("Follow the workflow run at:")
        lines.append(f"  {result.repository.actions_url}")
    if lines:
        lines.append("")
    return lines


@click.command()
@click.option(
    "--mode",
    type=click.Choice([m.value for m in ALL_MODES], case_sensitive=False),
    default=None,
    help="Deployment type: A inline, B local reusable, C remote shared.",
)
@click.option("--image-name", default=None, help="Docker image name.")
@click.option(
    "--dockerfile",
    "dockerfile_path",
    default=None,
    help="Path to the Dockerfile.",
)
@click.option(
    "--context",
    "build_context",
    default=None,
    help="Docker build context.",
)
@click.option(
    "--platforms",
    default=None,
    help="Comma-separated target platforms.",
)
@click.option(
    "--dockerhub-username",
    default=None,
    help="Docker Hub username.",
)
@click.option(
    "--shared-repo",
    default=None,
    help="Shared workflow repository as owner/repo (mode C).",
)
@click.option(
    "--shared-ref",
    default=None,
    help="Shared workflow branch or tag (mode C).",
)
@click.option(
    "--workflows-dir",
    default=None,
    help="Directory for workflow files, relative to the repository root.",
)
@click.option(
    "--skip-secrets",
    is_flag=True,
    default=False,
    help="Do not set the Docker Hub secrets.",
)
@click.option(
    "--no-push",
    is_flag=True,
    default=False,
    help="Write the workflow files without committing or pushing.",
)
@click.option(
    "--no-watch",
    is_flag=True,
    default=False,
    help="Do not watch the triggered workflow run.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the rendered workflows without writing anything.",
)
@click.option(
    "--force",
    is_flag=True,
    default=False,
    help="Overwrite existing workflow files.",
)
@click.option(
    "--strict-remote",
    is_flag=True,
    default=False,
    help="Fail when origin is not a GitHub repository.",
)
@click.pass_context
@async_command
async def setup(
    ctx: click.Context,
    mode: str | None,
    image_name: str | None,
    dockerfile_path: str | None,
    build_context: str | None,
    platforms: str | None,
    dockerhub_username: str | None,
    shared_repo: str | None,
    shared_ref: str | None,
    workflows_dir: str | None,
    skip_secrets: bool,
    no_push: bool,
    no_watch: bool,
    dry_run: bool,
    force: bool,
    strict_remote: bool,
) -> None:
    """Set up a GitHub Actions workflow that builds and pushes a Docker image.

    Asks for the deployment type and build settings, writes the workflow
    files, sets the DOCKERHUB_USERNAME and DOCKERHUB_TOKEN secrets, commits,
    pushes and watches the workflow run.

    Examples:

        dockwright setup

        dockwright setup --mode B --image-name myorg/app

        dockwright setup --mode C --shared-repo myorg/workflows --shared-ref v1

        dockwright setup --dry-run

        dockwright setup --skip-secrets --no-push
    """
    logger = get_logger(__name__)
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]

    click.echo("Docker Workflow Setup")
    click.echo("=====================")
    click.echo("")

    options = SetupOptions(
        mode=mode,
        image_name=image_name,
        dockerfile_path=dockerfile_path,
        build_context=build_context,
        platforms=platforms,
        dockerhub_username=dockerhub_username,
        shared_repo=shared_repo,
        shared_ref=shared_ref,
    )

    with cli_error_handler():
        try:
            result = await run_setup(
                project_path=Path.cwd(),
                options=options,
                config=cli_ctx.config,
                workflows_dir=workflows_dir,
                skip_secrets=skip_secrets,
                push=not no_push,
                watch=not no_watch,
                dry_run=dry_run,
                force=force,
                require_parsable_remote=strict_remote,
                on_progress=_echo_progress,
                on_summary=_echo_summary,
            )

            lines: list[str] = [""]
            if result.dry_run:
                lines.extend(_format_dry_run_output(result))
                lines.extend(_format_summary_output(result.rendered))
            if result.run is not None:
                lines.extend(_format_success_output(result))
            elif not result.dry_run:
                lines.extend(_format_pending_output(result))

            for line in lines:
                click.echo(line)

            logger.info(
                "setup_complete",
                mode=result.rendered.mode.value,
                files=list(result.rendered.file_names),
                pushed=result.pushed,
                dry_run=result.dry_run,
            )
            raise SystemExit(ExitCode.SUCCESS)

        except PrerequisiteError as e:
            click.echo("Prerequisites")
            click.echo(f"  ✗ {e.check.display_name}: {e.check.message}")
            click.echo("")
            click.echo(f"Error: {e.message}")
            click.echo("")
            if e.check.remediation:
                click.echo(f"Remediation: {e.check.remediation}")
            raise SystemExit(ExitCode.FAILURE) from None

        except WorkflowExistsError as e:
            click.echo(f"Error: {e.path} already exists.")
            click.echo("")
            click.echo("Use --force to overwrite the existing workflow.")
            raise SystemExit(ExitCode.WORKFLOW_EXISTS) from None

        except ManualSetupRequired as e:
            click.echo("")
            click.echo(format_warning(e.reason))
            click.echo("")
            click.echo("Manual setup required:")
            for number, step in enumerate(e.instructions, start=1):
                click.echo(f"  {number}. {step}")
            raise SystemExit(ExitCode.FAILURE) from None

        except WorkflowRunError as e:
            click.echo("")
            for line in _format_failure_output(e):
                click.echo(line)
            raise SystemExit(e.exit_code) from None
