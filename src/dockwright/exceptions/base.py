from __future__ import annotations


class DockwrightError(Exception):
    """Base exception class for all Dockwright-specific errors.

    All custom exceptions in Dockwright inherit from this class, so the CLI
    boundary can catch every known failure while letting system exceptions
    propagate naturally.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            await run_setup(project_path=Path.cwd())
        except DockwrightError as e:
            click.echo(f"Error: {e.message}", err=True)
            sys.exit(1)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the DockwrightError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
