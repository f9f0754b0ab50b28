"""CLI utilities for Dockwright.

This module provides CLI-specific utilities including context management,
exit codes and output formatting.
"""

from __future__ import annotations

from dockwright.cli.context import CLIContext, ExitCode, async_command

__all__ = [
    "CLIContext",
    "ExitCode",
    "async_command",
]
