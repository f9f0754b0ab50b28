"""Writing rendered workflows into the repository."""

from __future__ import annotations

from pathlib import Path

from dockwright.constants import CI_WORKFLOW_FILE
from dockwright.exceptions import WorkflowExistsError, WorkflowWriteError
from dockwright.logging import get_logger
from dockwright.setup.models import RenderedWorkflows

__all__ = ["check_existing", "write_workflows"]

logger = get_logger(__name__)


def check_existing(
    workflows_dir: Path,
    file_names: tuple[str, ...] = (CI_WORKFLOW_FILE,),
    *,
    force: bool = False,
) -> None:
    """Refuse to continue when a workflow file would be overwritten.

    Called with the default ``ci.yml`` before any prompt, and again with the
    full list of rendered files before writing.

    Raises:
        WorkflowExistsError: If one of the files exists and force is False.
    """
    if force:
        return
    for name in file_names:
        path = workflows_dir / name
        if path.exists():
            raise WorkflowExistsError(path)


def write_workflows(
    rendered: RenderedWorkflows,
    workflows_dir: Path,
    *,
    force: bool = False,
) -> tuple[Path, ...]:
    """Write every rendered document into ``workflows_dir``.

    The directory is created here, so a run that stops before this point
    leaves the repository untouched.

    Args:
        rendered: Documents to write.
        workflows_dir: Target directory (usually ``.github/workflows``).
        force: Overwrite existing files.

    Returns:
        Paths written, in rendering order.

    Raises:
        WorkflowExistsError: If a file exists and force is False.
        WorkflowWriteError: If the directory or a file cannot be written.
    """
    check_existing(workflows_dir, rendered.file_names, force=force)

    try:
        workflows_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WorkflowWriteError(workflows_dir, e) from e

    written: list[Path] = []
    for document in rendered.documents:
        path = workflows_dir / document.file_name
        try:
            path.write_text(document.text, encoding="utf-8")
        except OSError as e:
            raise WorkflowWriteError(path, e) from e
        written.append(path)
        logger.info("workflow_written", path=str(path))

    return tuple(written)
