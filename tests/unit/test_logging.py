"""Tests for the dockwright.logging module."""

from __future__ import annotations

import logging
import os
from unittest.mock import patch

from pydantic import SecretStr

from dockwright.logging import (
    REDACTED,
    configure_logging,
    get_logger,
    redact_secrets,
)


class TestConfigureLogging:
    def test_configure_logging_custom_level(self) -> None:
        configure_logging(level=logging.DEBUG)
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_logging_level_from_env(self) -> None:
        with patch.dict(os.environ, {"DOCKWRIGHT_LOG_LEVEL": "INFO"}):
            configure_logging()
        assert logging.getLogger().level == logging.INFO

    def test_default_level_is_warning(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            configure_logging()
        assert logging.getLogger().level == logging.WARNING

    def test_single_handler_after_reconfigure(self) -> None:
        configure_logging()
        configure_logging(force_json=True)
        assert len(logging.getLogger().handlers) == 1

    def test_json_output(self, capsys) -> None:
        configure_logging(force_json=True, level=logging.INFO)
        get_logger("tests").info("workflow_written", path="ci.yml")

        err = capsys.readouterr().err
        assert '"event": "workflow_written"' in err
        assert '"path": "ci.yml"' in err


class TestRedactSecrets:
    def test_secretstr_values(self) -> None:
        event = redact_secrets(None, "info", {"event": "x", "value": SecretStr("s")})
        assert event["value"] == REDACTED

    def test_sensitive_keys(self) -> None:
        event = redact_secrets(
            None,
            "info",
            {"event": "x", "dockerhub_token": "abc", "body": "abc", "secret": "NAME"},
        )
        assert event["dockerhub_token"] == REDACTED
        assert event["body"] == REDACTED
        assert event["secret"] == "NAME"

    def test_token_never_reaches_output(self, capsys) -> None:
        configure_logging(force_json=True, level=logging.INFO)
        get_logger("tests").info("prompt_answered", token="dckr_pat_abc")

        err = capsys.readouterr().err
        assert "dckr_pat_abc" not in err
        assert REDACTED in err

