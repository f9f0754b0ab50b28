"""Output formatting utilities for Dockwright CLI."""

from __future__ import annotations

__all__ = [
    "format_error",
    "format_success",
    "format_warning",
    "format_section",
]


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Args:
        message: Primary error message.
        details: Optional list of detail lines to include.
        suggestion: Optional suggestion for resolving the error.

    Returns:
        Formatted error string with details and suggestion if provided.

    Example:
        >>> result = format_error(
        ...     "Failed to set DOCKERHUB_TOKEN secret",
        ...     details=["HTTP 403"],
        ...     suggestion="Run 'gh auth refresh'"
        ... )
        >>> print(result)
        Error: Failed to set DOCKERHUB_TOKEN secret
          HTTP 403
        Suggestion: Run 'gh auth refresh'
    """
    lines = [f"Error: {message}"]

    if details:
        for detail in details:
            lines.append(f"  {detail}")

    if suggestion:
        lines.append(f"Suggestion: {suggestion}")

    return "\n".join(lines)


def format_success(message: str) -> str:
    """Format a success message.

    Example:
        >>> format_success("DOCKERHUB_USERNAME secret set")
        '✓ DOCKERHUB_USERNAME secret set'
    """
    return f"✓ {message}"


def format_warning(message: str) -> str:
    """Format a warning message.

    Example:
        >>> format_warning("Could not auto-detect GitHub repository")
        'Warning: Could not auto-detect GitHub repository'
    """
    return f"Warning: {message}"


def format_section(title: str, lines: list[str]) -> list[str]:
    """Format a titled block of indented lines followed by a blank line."""
    return [title, *(f"  {line}" for line in lines), ""]
