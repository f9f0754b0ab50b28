"""Subprocess runners for the git and gh command-line tools."""

from __future__ import annotations

from dockwright.runners.command import COMMAND_NOT_FOUND, CommandRunner
from dockwright.runners.github import GitHubCLIRunner
from dockwright.runners.models import CommandResult, WorkflowRun

__all__ = [
    "COMMAND_NOT_FOUND",
    "CommandResult",
    "CommandRunner",
    "GitHubCLIRunner",
    "WorkflowRun",
]
