"""CLI context and utilities for Dockwright.

This module provides context management, exit codes, and utilities for
bridging Click's synchronous interface to async workflows.
"""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Any, TypeVar

from dockwright.config import DockwrightConfig

__all__ = [
    "ExitCode",
    "CLIContext",
    "async_command",
]


class ExitCode(IntEnum):
    """Standard exit codes for Dockwright CLI.

    A failed watched workflow run exits with gh's own exit code instead.

    - 0 for success
    - 1 for failure
    - 2 when a workflow file exists and --force was not given
    - 130 for keyboard interrupt (128 + SIGINT=2)
    """

    SUCCESS = 0
    FAILURE = 1
    WORKFLOW_EXISTS = 2
    INTERRUPTED = 130


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Type-safe CLI context containing global options and configuration.

    Attributes:
        config: Loaded Dockwright configuration.
        config_path: Path to config file (if specified via --config).
        verbosity: Verbosity level (0=default, 1=INFO, 2+=DEBUG).
        quiet: Suppress non-essential output.
    """

    config: DockwrightConfig
    config_path: Path | None = None
    verbosity: int = 0
    quiet: bool = False


F = TypeVar("F", bound=Callable[..., Any])


def async_command(f: F) -> F:
    """Decorator to run async Click commands with asyncio.run().

    This bridges Click's synchronous interface to async functions.

    Example:
        >>> @cli.command()
        >>> @async_command
        >>> async def setup(ctx: click.Context) -> None:
        >>>     await run_setup()
    """

    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return asyncio.run(f(*args, **kwargs))

    return wrapper  # type: ignore[return-value]
