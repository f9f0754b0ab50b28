"""Click commands for the Dockwright CLI."""

from __future__ import annotations

from dockwright.cli.commands.setup import setup

__all__ = ["setup"]
