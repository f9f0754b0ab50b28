"""Command runner for safe async subprocess execution.

This module provides the CommandRunner class for executing external commands
(``git``, ``gh``) with timeout handling, stdin input and passthrough output.
"""

from __future__ import annotations

import asyncio
import os
import time
from pathlib import Path
from typing import TYPE_CHECKING

from dockwright.exceptions import NotARepositoryError
from dockwright.runners.models import CommandResult

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ["CommandRunner", "COMMAND_NOT_FOUND"]

#: Exit code reported when the executable does not exist (as in a shell)
COMMAND_NOT_FOUND = 127

# Timeout constants
TERMINATION_GRACE_PERIOD: float = 2.0


class CommandRunner:
    """Execute commands safely with timeout and environment control.

    Provides async command execution with:
    - Timeout handling with graceful termination (SIGTERM + grace period + SIGKILL)
    - Optional stdin input, used to hand secrets to ``gh`` off the command line
    - Passthrough mode that leaves stdout/stderr attached to the terminal

    Attributes:
        cwd: Working directory for command execution.
        timeout: Default timeout in seconds (None for no timeout).
        env: Additional environment variables to merge with parent env.

    Example:
        ```python
        runner = CommandRunner(cwd=Path("/project"), timeout=30.0)
        result = await runner.run(["git", "remote", "get-url", "origin"])
        if result.success:
            print(result.stdout.strip())
        ```
    """

    def __init__(
        self,
        cwd: Path | None = None,
        timeout: float | None = 60.0,
        env: dict[str, str] | None = None,
    ) -> None:
        """Initialize the CommandRunner.

        Args:
            cwd: Working directory for commands. If None, uses current directory.
            timeout: Default timeout in seconds. Use None for no timeout.
            env: Additional environment variables to merge with os.environ.
        """
        self._cwd = cwd
        self._timeout = timeout
        self._extra_env = env or {}

    @property
    def cwd(self) -> Path | None:
        """Working directory for command execution."""
        return self._cwd

    @property
    def timeout(self) -> float | None:
        """Default timeout in seconds."""
        return self._timeout

    def _validate_cwd(self, cwd: Path | None) -> None:
        """Validate working directory exists.

        Raises:
            NotARepositoryError: If directory does not exist.
        """
        if cwd is not None and not cwd.is_dir():
            raise NotARepositoryError(
                f"Working directory does not exist: {cwd}",
                path=cwd,
            )

    def _build_env(self, extra_env: dict[str, str] | None = None) -> dict[str, str]:
        """Build environment by merging parent env with overrides."""
        env = os.environ.copy()
        env.update(self._extra_env)
        if extra_env:
            env.update(extra_env)
        return env

    async def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
        env: dict[str, str] | None = None,
        input: str | None = None,
    ) -> CommandResult:
        """Execute a command and return the captured result.

        Args:
            command: Command and arguments as a sequence (no shell expansion).
            cwd: Override working directory for this command.
            timeout: Override timeout. Use 0 or negative for no timeout.
            env: Additional environment variables for this command.
            input: Text written to the process's stdin, then stdin is closed.

        Returns:
            CommandResult with returncode, stdout, stderr, duration_ms, timed_out.
            A missing executable yields returncode 127 rather than an exception.

        Raises:
            NotARepositoryError: If working directory does not exist.
        """
        effective_cwd = cwd if cwd is not None else self._cwd
        self._validate_cwd(effective_cwd)

        effective_timeout = timeout if timeout is not None else self._timeout
        if effective_timeout is not None and effective_timeout <= 0:
            effective_timeout = None

        start_time = time.monotonic()
        timed_out = False
        returncode = 0
        stdout_str = ""
        stderr_str = ""

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=(
                    asyncio.subprocess.PIPE
                    if input is not None
                    else asyncio.subprocess.DEVNULL
                ),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=effective_cwd,
                env=self._build_env(env),
            )

            try:
                stdout_bytes, stderr_bytes = await asyncio.wait_for(
                    process.communicate(
                        input.encode("utf-8") if input is not None else None
                    ),
                    timeout=effective_timeout,
                )
                returncode = process.returncode or 0
                stdout_str = stdout_bytes.decode("utf-8", errors="replace")
                stderr_str = stderr_bytes.decode("utf-8", errors="replace")

            except TimeoutError:
                timed_out = True
                await self._terminate(process)
                returncode = -1
                stderr_str = f"Command timed out after {effective_timeout}s"

        except FileNotFoundError:
            returncode = COMMAND_NOT_FOUND
            stderr_str = f"Command not found: {command[0]}"
        except PermissionError:
            returncode = 126
            stderr_str = f"Permission denied: {command[0]}"

        duration_ms = int((time.monotonic() - start_time) * 1000)

        return CommandResult(
            returncode=returncode,
            stdout=stdout_str,
            stderr=stderr_str,
            duration_ms=duration_ms,
            timed_out=timed_out,
        )

    async def passthrough(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> int:
        """Run a command with its output attached to the terminal.

        Used for long-running interactive commands such as ``gh run watch``
        whose progress display should reach the user unmodified. No timeout
        is applied.

        Args:
            command: Command and arguments as a sequence (no shell expansion).
            cwd: Override working directory for this command.
            env: Additional environment variables for this command.

        Returns:
            The process exit code (127 if the executable does not exist).
        """
        effective_cwd = cwd if cwd is not None else self._cwd
        self._validate_cwd(effective_cwd)

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=effective_cwd,
                env=self._build_env(env),
            )
        except FileNotFoundError:
            return COMMAND_NOT_FOUND

        try:
            return await process.wait()
        except asyncio.CancelledError:
            await self._terminate(process)
            raise

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        """Stop a process: SIGTERM first, SIGKILL after the grace period."""
        if process.returncode is not None:
            return
        process.terminate()
        try:
            await asyncio.wait_for(process.wait(), timeout=TERMINATION_GRACE_PERIOD)
        except TimeoutError:
            process.kill()
            await process.wait()
