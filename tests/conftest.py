from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Callable, Generator, Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest
from git import Repo
from pydantic import SecretStr

from dockwright.runners.models import CommandResult
from dockwright.setup.models import DeploymentMode, GitRemoteInfo, WorkflowConfig

if TYPE_CHECKING:
    from click.testing import CliRunner

#: Token used wherever a test needs a Docker Hub credential
TEST_TOKEN = "dckr_pat_s3cr3t-test-token"


@pytest.fixture(autouse=True)
def configure_test_logging() -> Generator[None, None, None]:
    """Configure structlog for test environment.

    Logs go to stderr at WARNING level so they never mix with the CLI
    output the tests assert on.
    """
    from dockwright.logging import configure_logging

    configure_logging(level=logging.WARNING)
    yield


@pytest.fixture(autouse=True)
def isolated_user_config(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Point the user config file at an empty temporary location."""
    user_config = tmp_path_factory.mktemp("home") / "config.yaml"
    monkeypatch.setattr(
        "dockwright.config.get_user_config_path", lambda: user_config
    )
    return user_config


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files.

    Also saves and restores the current working directory to prevent
    tests that use os.chdir() from affecting other tests.
    """
    original_cwd = os.getcwd()
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
    os.chdir(original_cwd)


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove all DOCKWRIGHT_ environment variables for clean testing."""
    original_env = os.environ.copy()
    for key in list(os.environ.keys()):
        if key.startswith("DOCKWRIGHT_"):
            del os.environ[key]
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner.

    Example:
        >>> def test_version(cli_runner):
        ...     from dockwright.main import cli
        ...     result = cli_runner.invoke(cli, ["--version"])
        ...     assert result.exit_code == 0
    """
    from click.testing import CliRunner

    return CliRunner()


def _init_repo(path: Path) -> Repo:
    path.mkdir(parents=True, exist_ok=True)
    repo = Repo.init(path, initial_branch="main")
    with repo.config_writer() as writer:
        writer.set_value("user", "email", "test@example.com")
        writer.set_value("user", "name", "Test User")
        writer.set_value("commit", "gpgsign", "false")
    (path / "README.md").write_text("# Widget\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")
    return repo


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """A repository named ``widget`` whose origin points at GitHub.

    The origin is not reachable, so nothing may be pushed from it.
    """
    repo_path = tmp_path / "widget"
    repo = _init_repo(repo_path)
    repo.create_remote("origin", "git@github.com:acme/widget.git")
    return repo_path


@pytest.fixture
def pushable_repo(tmp_path: Path) -> tuple[Path, Path]:
    """A repository whose origin is a local bare repository.

    Returns:
        Tuple of (working tree path, bare remote path).
    """
    remote_path = tmp_path / "remote.git"
    Repo.init(remote_path, bare=True, initial_branch="main")
    repo_path = tmp_path / "widget"
    repo = _init_repo(repo_path)
    repo.create_remote("origin", str(remote_path))
    return repo_path, remote_path


@pytest.fixture
def make_workflow_config() -> Callable[..., WorkflowConfig]:
    """Factory for WorkflowConfig with sensible test values."""

    def factory(**overrides: Any) -> WorkflowConfig:
        values: dict[str, Any] = {
            "deployment_mode": DeploymentMode.INLINE,
            "image_name": "acme/widget",
            "dockerhub_username": "acme",
            "dockerhub_token": SecretStr(TEST_TOKEN),
            "repository": GitRemoteInfo(
                owner="acme",
                repo="widget",
                remote_url="git@github.com:acme/widget.git",
            ),
        }
        values.update(overrides)
        return WorkflowConfig(**values)

    return factory


def _command_result(
    returncode: int = 0,
    stdout: str = "",
    stderr: str = "",
    timed_out: bool = False,
) -> CommandResult:
    """Build a CommandResult for mocked command runners."""
    return CommandResult(
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
        duration_ms=5,
        timed_out=timed_out,
    )


@pytest.fixture
def make_result() -> Callable[..., CommandResult]:
    """Factory fixture for CommandResult instances."""
    return _command_result


@pytest.fixture
def docker_token() -> str:
    """The Docker Hub token carried by ``make_workflow_config`` configs."""
    return TEST_TOKEN
