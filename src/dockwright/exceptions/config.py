from __future__ import annotations

from typing import Any

from dockwright.exceptions.base import DockwrightError


class ConfigError(DockwrightError):
    """Exception for configuration loading, parsing, and validation errors.

    Raised for YAML parsing failures, pydantic validation errors, and invalid
    environment variable values.

    Attributes:
        message: Human-readable error message describing the configuration issue.
        field: Optional dotted field name that caused the error
            (e.g., "watch.discovery_attempts").
        value: Optional value that failed validation.

    Examples:
        ```python
        raise ConfigError("Failed to parse dockwright.yaml: invalid YAML at line 3")

        raise ConfigError(
            "Invalid configuration value",
            field="defaults.deployment_mode",
            value="Z",
        )
        ```
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        """Initialize the ConfigError.

        Args:
            message: Human-readable error message.
            field: Optional field name that caused the error.
            value: Optional value that failed validation.
        """
        self.field = field
        self.value = value
        super().__init__(message)
