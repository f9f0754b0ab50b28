"""Following the workflow run started by the push."""

from __future__ import annotations

from collections.abc import Callable

from dockwright.config import WatchConfig
from dockwright.constants import CI_WORKFLOW_FILE, TRIGGER_BRANCHES
from dockwright.exceptions import WorkflowRunError
from dockwright.logging import get_logger
from dockwright.runners.github import GitHubCLIRunner
from dockwright.runners.models import WorkflowRun
from dockwright.setup.models import WorkflowRunResult

__all__ = ["branch_triggers_workflow", "watch_triggered_run"]

logger = get_logger(__name__)


def branch_triggers_workflow(branch: str) -> bool:
    """True if a push to ``branch`` starts the generated workflow."""
    return branch in TRIGGER_BRANCHES


async def watch_triggered_run(
    github: GitHubCLIRunner,
    *,
    branch: str,
    commit_sha: str,
    watch: WatchConfig,
    on_run_found: Callable[[WorkflowRun], None] | None = None,
) -> WorkflowRunResult:
    """Find the run for ``commit_sha`` and stream it until it finishes.

    Pushes to branches outside the workflow's triggers start nothing, so
    the workflow is dispatched on the branch first.

    Args:
        github: Runner bound to the target repository.
        branch: Branch that was pushed.
        commit_sha: SHA of the pushed commit.
        watch: Discovery settings.
        on_run_found: Called once the run is located, before streaming.

    Returns:
        WorkflowRunResult for a successful run.

    Raises:
        WorkflowRunNotFoundError: If the run never shows up.
        WorkflowRunError: If the run fails or is cancelled.
    """
    dispatched = False
    if not branch_triggers_workflow(branch):
        await github.dispatch_workflow(CI_WORKFLOW_FILE, branch)
        dispatched = True

    run = await github.find_run(
        CI_WORKFLOW_FILE,
        branch=branch,
        commit=commit_sha,
        attempts=watch.discovery_attempts,
        interval=watch.discovery_interval_seconds,
    )
    logger.info("workflow_run_found", run_id=run.run_id, url=run.url)
    if on_run_found is not None:
        on_run_found(run)

    exit_code = await github.watch_run(run.run_id)
    if exit_code != 0:
        logger.warning("workflow_run_failed", run_id=run.run_id, exit_code=exit_code)
        raise WorkflowRunError(exit_code, run_url=run.url)

    return WorkflowRunResult(
        run_id=run.run_id,
        url=run.url,
        exit_code=exit_code,
        dispatched=dispatched,
    )
