from __future__ import annotations

import re
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from dockwright.constants import (
    DEFAULT_BUILD_CONTEXT,
    DEFAULT_DOCKERFILE_PATH,
    DEFAULT_PLATFORMS,
    DEFAULT_SHARED_WORKFLOW_REF,
    DEFAULT_WORKFLOWS_DIR,
)
from dockwright.exceptions import ConfigError
from dockwright.logging import get_logger

__all__ = [
    "DockwrightConfig",
    "BuildDefaultsConfig",
    "SharedWorkflowConfig",
    "WatchConfig",
    "PROJECT_CONFIG_FILE",
    "load_config",
    "get_user_config_path",
    "split_platforms",
    "SHARED_REPO_PATTERN",
]

logger = get_logger(__name__)

#: Project-level config file looked up in the working directory
PROJECT_CONFIG_FILE = "dockwright.yaml"

#: ``owner/repo`` as accepted by GitHub for reusable workflow references
SHARED_REPO_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")

_project_config_path: ContextVar[Path | None] = ContextVar(
    "dockwright_project_config_path", default=None
)


def split_platforms(value: str | list[str] | tuple[str, ...]) -> list[str]:
    """Split a comma-separated platforms value into clean entries.

    Examples:
        >>> split_platforms("linux/amd64, linux/arm64,")
        ['linux/amd64', 'linux/arm64']
        >>> split_platforms(["linux/amd64"])
        ['linux/amd64']
    """
    parts = value.split(",") if isinstance(value, str) else list(value)
    return [part.strip() for part in parts if part and part.strip()]


class BuildDefaultsConfig(BaseModel):
    """Prompt defaults for the Docker build configuration.

    Attributes:
        dockerfile_path: Default Dockerfile path offered at the prompt.
        build_context: Default build context offered at the prompt.
        platforms: Default target platforms.
        deployment_mode: Default menu letter (A inline, B local reusable,
            C remote shared).
        dockerhub_username: Default Docker Hub username. When unset, the
            owner parsed from the origin remote is offered instead.
    """

    dockerfile_path: str = DEFAULT_DOCKERFILE_PATH
    build_context: str = DEFAULT_BUILD_CONTEXT
    platforms: list[str] = Field(default_factory=lambda: list(DEFAULT_PLATFORMS))
    deployment_mode: Literal["A", "B", "C"] = "A"
    dockerhub_username: str | None = None

    @field_validator("deployment_mode", mode="before")
    @classmethod
    def normalize_mode(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("platforms", mode="before")
    @classmethod
    def parse_platforms(cls, v: Any) -> Any:
        if isinstance(v, str | list | tuple):
            platforms = split_platforms(v)
            if not platforms:
                raise ValueError("platforms cannot be empty")
            return platforms
        return v


class SharedWorkflowConfig(BaseModel):
    """Defaults for the remote shared workflow mode.

    Attributes:
        repo: Shared workflow repository as ``owner/repo``.
        ref: Branch or tag of the shared workflow.
    """

    repo: str | None = None
    ref: str = DEFAULT_SHARED_WORKFLOW_REF

    @field_validator("repo")
    @classmethod
    def check_repo_format(cls, v: str | None) -> str | None:
        if v is not None and not SHARED_REPO_PATTERN.match(v):
            raise ValueError("repo must be in owner/repo form")
        return v


class WatchConfig(BaseModel):
    """Settings for watching the workflow run triggered by the push.

    Attributes:
        enabled: Watch the run after pushing (the --no-watch flag overrides).
        discovery_attempts: How many times to look for the new run.
        discovery_interval_seconds: Pause between lookups.
    """

    enabled: bool = True
    discovery_attempts: int = Field(default=10, ge=1, le=60)
    discovery_interval_seconds: float = Field(default=3.0, ge=0.0, le=60.0)


class YamlConfigSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from YAML files."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            try:
                with open(yaml_file, encoding="utf-8") as f:
                    loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(
                    message=f"Invalid YAML in {yaml_file}: {e}",
                    field=None,
                    value=None,
                ) from e
            if loaded is None:
                logger.warning("config_file_empty", path=str(yaml_file))
            elif not isinstance(loaded, dict):
                raise ConfigError(
                    message=f"Config file {yaml_file} must contain a mapping",
                    field=None,
                    value=type(loaded).__name__,
                )
            else:
                self._config_data = loaded

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        """Get value for a specific field from the YAML config."""
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return the complete config data."""
        return self._config_data


class DockwrightConfig(BaseSettings):
    """Root configuration object containing all Dockwright settings."""

    model_config = SettingsConfigDict(
        env_prefix="DOCKWRIGHT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    defaults: BuildDefaultsConfig = Field(default_factory=BuildDefaultsConfig)
    shared_workflow: SharedWorkflowConfig = Field(
        default_factory=SharedWorkflowConfig
    )
    workflows_dir: str = DEFAULT_WORKFLOWS_DIR
    watch: WatchConfig = Field(default_factory=WatchConfig)
    verbosity: Literal["error", "warning", "info", "debug"] = "warning"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources.

        Priority (highest to lowest):
        1. Init kwargs
        2. Environment variables (DOCKWRIGHT_*)
        3. Project YAML config (./dockwright.yaml or --config)
        4. User YAML config (~/.config/dockwright/config.yaml)
        """
        project_config_path = _project_config_path.get() or (
            Path.cwd() / PROJECT_CONFIG_FILE
        )
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, project_config_path),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


def get_user_config_path() -> Path:
    """Get the path to the user configuration file.

    Returns:
        Path to ~/.config/dockwright/config.yaml
    """
    return Path.home() / ".config" / "dockwright" / "config.yaml"


def load_config(config_path: Path | None = None) -> DockwrightConfig:
    """Load configuration with hierarchy: defaults -> user -> project -> env.

    Args:
        config_path: Optional path to the project config file. Defaults to
            ./dockwright.yaml.

    Returns:
        DockwrightConfig instance with merged configuration.

    Raises:
        ConfigError: If a config file is unreadable or a value is invalid.
    """
    if config_path is None:
        config_path = Path.cwd() / PROJECT_CONFIG_FILE
    elif not config_path.exists():
        raise ConfigError(
            message=f"Config file not found: {config_path}",
            field=None,
            value=str(config_path),
        )

    if not config_path.exists():
        logger.debug("project_config_not_found", path=str(config_path))

    token = _project_config_path.set(config_path)
    try:
        return DockwrightConfig()
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
    finally:
        _project_config_path.reset(token)
