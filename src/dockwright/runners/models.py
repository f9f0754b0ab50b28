"""Data models for subprocess runners.

This module defines immutable, frozen dataclasses for representing:
- Command execution results (CommandResult)
- GitHub Actions workflow runs (WorkflowRun)

All models use frozen dataclasses with slots for memory efficiency and immutability.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "CommandResult",
    "WorkflowRun",
]


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of executing a single command.

    Attributes:
        returncode: Exit code from the command (0 = success).
        stdout: Standard output captured from the command.
        stderr: Standard error captured from the command.
        duration_ms: Execution time in milliseconds.
        timed_out: True if the command exceeded its timeout limit.
    """

    returncode: int
    stdout: str
    stderr: str
    duration_ms: int
    timed_out: bool = False

    @property
    def success(self) -> bool:
        """True if command completed successfully (returncode 0, no timeout)."""
        return self.returncode == 0 and not self.timed_out

    @property
    def output(self) -> str:
        """Combined stdout and stderr for convenience."""
        if self.stderr:
            return f"{self.stdout}\n{self.stderr}" if self.stdout else self.stderr
        return self.stdout


@dataclass(frozen=True, slots=True)
class WorkflowRun:
    """A GitHub Actions workflow run as reported by ``gh run list``.

    Attributes:
        run_id: Numeric run identifier (``databaseId``).
        status: Run status (e.g., "queued", "in_progress", "completed").
        conclusion: Final conclusion once completed (e.g., "success").
        url: Web URL of the run.
        head_sha: Commit the run was triggered for.
        head_branch: Branch the run was triggered on.
        event: Triggering event (e.g., "push", "workflow_dispatch").
    """

    run_id: int
    status: str
    url: str
    head_sha: str
    head_branch: str
    event: str = ""
    conclusion: str | None = None

    @property
    def is_completed(self) -> bool:
        """True once GitHub has finished the run."""
        return self.status == "completed"
