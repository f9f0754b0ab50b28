"""Shared Rich Console instances for Dockwright CLI output.

Provides an auto-TTY-detecting console for stdout.
Rich Console handles this automatically: styled output in terminals,
plain text when piped.
"""

from __future__ import annotations

from rich.console import Console

__all__ = ["console"]

console = Console()
