"""Deployment mode selection."""

from __future__ import annotations

from collections.abc import Sequence

from dockwright.exceptions import InvalidChoiceError
from dockwright.setup.models import DeploymentMode

__all__ = [
    "ALL_MODES",
    "MODE_BULLETS",
    "parse_deployment_mode",
    "menu_lines",
]

ALL_MODES: tuple[DeploymentMode, ...] = tuple(DeploymentMode)

#: Bullet points shown under each menu entry
MODE_BULLETS: dict[DeploymentMode, tuple[str, ...]] = {
    DeploymentMode.INLINE: (
        "All steps in one file (.github/workflows/ci.yml)",
        "Easy to understand and modify",
        "Best for most use cases",
    ),
    DeploymentMode.LOCAL_REUSABLE: (
        "Reusable workflow (docker-build-push.yml) plus a small ci.yml caller",
        "Build logic lives in this repository",
        "Good starting point for sharing later",
    ),
    DeploymentMode.REMOTE_SHARED: (
        "References external shared workflow repository",
        "Centralized updates across multiple repos",
        "Best for managing many repositories",
    ),
}


def parse_deployment_mode(
    value: str | None,
    allowed: Sequence[DeploymentMode] = ALL_MODES,
    default: DeploymentMode = DeploymentMode.INLINE,
) -> DeploymentMode:
    """Map a menu letter to a DeploymentMode.

    Matching is case-insensitive and ignores surrounding whitespace. Empty
    input selects ``default``.

    Raises:
        InvalidChoiceError: If the letter is not one of ``allowed``.

    Examples:
        >>> parse_deployment_mode(" b ")
        <DeploymentMode.LOCAL_REUSABLE: 'B'>
        >>> parse_deployment_mode("")
        <DeploymentMode.INLINE: 'A'>
    """
    letters = [mode.value for mode in allowed]
    normalized = (value or "").strip().upper()
    if not normalized:
        return default
    if normalized not in letters:
        raise InvalidChoiceError(normalized, letters)
    return DeploymentMode(normalized)


def menu_lines(allowed: Sequence[DeploymentMode] = ALL_MODES) -> list[str]:
    """Format the deployment menu shown before the mode prompt."""
    lines = ["Choose your Docker CI/CD workflow setup:", ""]
    for mode in allowed:
        lines.append(f"  {mode.value}) {mode.display_name}")
        lines.extend(f"     - {bullet}" for bullet in MODE_BULLETS[mode])
        lines.append("")
    return lines
