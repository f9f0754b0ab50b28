from __future__ import annotations

import contextlib
from collections.abc import Generator

import click

from dockwright.cli.context import ExitCode
from dockwright.cli.output import format_error
from dockwright.exceptions import (
    ConfigError,
    DockwrightError,
    GitError,
    GitHubError,
    InputValidationError,
)
from dockwright.logging import get_logger


@contextlib.contextmanager
def cli_error_handler() -> Generator[None, None, None]:
    """Context manager for common CLI error handling.

    Handles common error patterns across CLI commands:
    - KeyboardInterrupt and aborted prompts: Exit with code 130
    - GitError: Format error with operation details
    - GitHubError: Format error with gh's diagnostic output
    - DockwrightError: Format error with message
    - Generic exceptions: Log and format error

    Example:
        >>> with cli_error_handler():
        >>>     # Command logic here
        >>>     await run_setup()
    """
    logger = get_logger(__name__)

    try:
        yield
    except (KeyboardInterrupt, click.Abort):
        click.echo("\n\nInterrupted by user.", err=True)
        raise SystemExit(ExitCode.INTERRUPTED) from None
    except GitError as e:
        error_msg = format_error(
            e.message,
            details=[f"Operation: {e.operation}"] if e.operation else None,
            suggestion=(
                "Fix the problem and run the command again" if e.recoverable else None
            ),
        )
        click.echo(error_msg, err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except GitHubError as e:
        details = [line for line in e.stderr.splitlines() if line.strip()]
        click.echo(format_error(e.message, details=details or None), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except InputValidationError as e:
        click.echo(format_error(f"{e.message} Exiting."), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except ConfigError as e:
        details = [f"Field: {e.field}"] if e.field else None
        click.echo(format_error(e.message, details=details), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except DockwrightError as e:
        click.echo(format_error(e.message), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except Exception as e:
        logger.exception("unexpected_error")
        click.echo(f"Error: {e!s}", err=True)
        raise SystemExit(ExitCode.FAILURE) from e
