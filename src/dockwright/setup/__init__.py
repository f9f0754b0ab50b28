"""Dockwright setup command implementation.

This package provides ``dockwright setup``: prerequisite validation, remote
detection, interactive configuration, workflow rendering, secret
provisioning, publishing and run watching.

Public API:
    - run_setup: Main entry point for the setup workflow
    - render_workflows: Pure rendering of a WorkflowConfig
    - parse_git_remote: Parse git remote URL to extract owner/repo

Models are re-exported from dockwright.setup.models.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

from dockwright.config import DockwrightConfig
from dockwright.exceptions import ManualSetupRequired, PrerequisiteError
from dockwright.git import AsyncGitRepository
from dockwright.logging import get_logger
from dockwright.runners.github import GitHubCLIRunner
from dockwright.runners.models import WorkflowRun
from dockwright.setup.git_parser import parse_git_remote
from dockwright.setup.models import (
    DeploymentMode,
    GitRemoteInfo,
    PreflightStatus,
    PrerequisiteCheck,
    RenderedDocument,
    RenderedWorkflows,
    SetupOptions,
    SetupPreflightResult,
    SetupResult,
    WorkflowConfig,
    WorkflowRunResult,
)
from dockwright.setup.prereqs import verify_prerequisites
from dockwright.setup.prompts import collect_config
from dockwright.setup.publisher import publish
from dockwright.setup.renderer import render_workflows
from dockwright.setup.secrets import manual_instructions, provision_secrets
from dockwright.setup.watcher import watch_triggered_run
from dockwright.setup.writer import check_existing, write_workflows

__all__ = [
    # Functions
    "run_setup",
    "render_workflows",
    "parse_git_remote",
    # Enums
    "DeploymentMode",
    "PreflightStatus",
    # Dataclasses
    "GitRemoteInfo",
    "PrerequisiteCheck",
    "RenderedDocument",
    "RenderedWorkflows",
    "SetupOptions",
    "SetupPreflightResult",
    "SetupResult",
    "WorkflowRunResult",
    # Pydantic models
    "WorkflowConfig",
]

logger = get_logger(__name__)

#: Receives one human-readable progress line at a time
ProgressCallback = Callable[[str], None]

#: Receives the rendered workflows once they are in place, before any watch
SummaryCallback = Callable[[RenderedWorkflows], None]


def _noop(_: object) -> None:
    pass


async def run_setup(
    *,
    project_path: Path | None = None,
    options: SetupOptions | None = None,
    config: DockwrightConfig | None = None,
    workflows_dir: str | None = None,
    skip_secrets: bool = False,
    push: bool = True,
    watch: bool = True,
    dry_run: bool = False,
    force: bool = False,
    require_parsable_remote: bool = False,
    on_progress: ProgressCallback | None = None,
    on_summary: SummaryCallback | None = None,
) -> SetupResult:
    """Execute the dockwright setup workflow.

    Orchestrates the complete setup:
    1. Verify prerequisites (git, repository, gh)
    2. Refuse to overwrite an existing ci.yml (before any prompt)
    3. Detect the origin remote
    4. Collect the configuration interactively
    5. Render the workflows for the chosen mode
    6. Write them (skipped for a dry run)
    7. Set the Docker Hub secrets through gh
    8. Commit and push the workflow files
    9. Watch the workflow run the push triggered

    Args:
        project_path: Path inside the repository. Defaults to cwd.
        options: Values given on the command line.
        config: Loaded configuration. Defaults to DockwrightConfig().
        workflows_dir: Workflows directory relative to the repository root.
            Defaults to the configured value.
        skip_secrets: Do not set secrets (files are still committed).
        push: Commit and push the files.
        watch: Watch the triggered run (also requires watch.enabled).
        dry_run: Render only; nothing is written, set or pushed.
        force: Overwrite existing workflow files.
        require_parsable_remote: Fail when origin is not a GitHub remote.
        on_progress: Receives progress lines for the user.
        on_summary: Receives the rendered workflows after writing (and
            publishing, when pushing) but before the run is watched. Not
            called for a dry run.

    Returns:
        SetupResult describing everything the run did.

    Raises:
        PrerequisiteError: If git is missing or this is not a repository.
        WorkflowExistsError: If a workflow file exists and force=False.
        RemoteParseError: If require_parsable_remote and the remote is unusable.
        InputValidationError: If a prompt was answered invalidly twice.
        TemplateRenderError: If rendering fails.
        WorkflowWriteError: If the files cannot be written.
        ManualSetupRequired: If gh is unavailable and secrets were requested.
        SecretProvisionError: If gh fails to set a secret.
        GitError: If committing or pushing fails.
        WorkflowRunNotFoundError: If the triggered run never shows up.
        WorkflowRunError: If the watched run fails.
    """
    effective_path = project_path if project_path is not None else Path.cwd()
    options = options or SetupOptions()
    config = config or DockwrightConfig()
    progress = on_progress or _noop
    summarize = on_summary or _noop

    # 1. Prerequisites
    preflight = await verify_prerequisites(
        cwd=effective_path,
        check_github=not dry_run,
    )
    for check in preflight.checks:
        logger.debug(
            "preflight_check",
            name=check.name,
            status=check.status.value,
            duration_ms=check.duration_ms,
        )
    if not preflight.success:
        failed = next(
            c for c in preflight.checks if c.status == PreflightStatus.FAIL
        )
        raise PrerequisiteError(failed)

    repo = AsyncGitRepository(effective_path)
    root = repo.path
    target_dir = root / (workflows_dir or config.workflows_dir)

    # 2. Overwrite protection for ci.yml before asking anything
    check_existing(target_dir, force=force)

    # 3. Remote detection
    remote = await parse_git_remote(
        root, require_parsable_remote=require_parsable_remote
    )
    progress(f"Repository: {root.name}")
    if remote.full_name:
        progress(f"Auto-detected: {remote.full_name}")
    else:
        progress("Could not auto-detect GitHub repository")

    # 4. Prompts
    workflow_config = collect_config(options, config, remote, root.name)

    # 5. Render
    rendered = render_workflows(workflow_config)
    for notice in rendered.notices:
        progress(notice)

    if dry_run:
        logger.info("dry_run_complete", files=list(rendered.file_names))
        return SetupResult(rendered=rendered, repository=remote, dry_run=True)

    # 6. Write
    written = write_workflows(rendered, target_dir, force=force)
    for path in written:
        progress(f"Created {path.relative_to(root)}")

    # 7. Secrets
    github: GitHubCLIRunner | None = None
    if preflight.gh_ready:
        github = GitHubCLIRunner(cwd=root, repo=remote.full_name)

    secrets_set: tuple[str, ...] = ()
    if not skip_secrets:
        if github is None:
            reason = preflight.warnings[0] if preflight.warnings else "gh unavailable"
            raise ManualSetupRequired(
                reason,
                manual_instructions(
                    workflow_config, str(target_dir.relative_to(root))
                ),
            )
        secrets_set = await provision_secrets(
            github,
            workflow_config,
            on_secret_set=lambda name: progress(f"{name} secret set"),
        )

    result = SetupResult(
        rendered=rendered,
        repository=remote,
        written_paths=written,
        secrets_set=secrets_set,
    )
    if not push:
        summarize(rendered)
        return result

    # 8. Publish
    progress("Committing and pushing workflow files to GitHub...")
    published = await publish(repo, written, rendered.description)
    progress("Workflows pushed to GitHub!")
    result = replace(
        result,
        commit_sha=published.commit_sha,
        pushed=published.pushed,
        branch=published.branch,
    )
    summarize(rendered)

    # 9. Watch
    if not (watch and config.watch.enabled):
        return result
    if github is None:
        progress("Skipping workflow watch (GitHub CLI unavailable)")
        return result

    def announce(run: WorkflowRun) -> None:
        progress(f"Monitoring workflow run {run.run_id}: {run.url}")

    run_result = await watch_triggered_run(
        github,
        branch=published.branch,
        commit_sha=published.commit_sha,
        watch=config.watch,
        on_run_found=announce,
    )
    return replace(result, run=run_result)
