"""Tests for structured logging configuration."""

import logging

import pytest
import structlog

from ppz_logalyzer.core import logging as ppz_logging
from ppz_logalyzer.core.logging import (
    REDACTED,
    SERVICE_NAME,
    add_service_name,
    build_processors,
    configure_logging_from_env,
    redact_sensitive_fields,
)


class TestProcessors:
    """Tests for the custom structlog processors."""

    def test_redacts_credential_fields(self):
        event = {
            "event": "user_logged_in",
            "token": "token-abc",
            "Authorization": "Bearer token-abc",
            "user_id": "user-1",
        }

        result = redact_sensitive_fields(None, "info", event)

        assert result["token"] == REDACTED
        assert result["Authorization"] == REDACTED
        assert result["user_id"] == "user-1"

    def test_none_credentials_left_alone(self):
        result = redact_sensitive_fields(None, "info", {"event": "x", "token": None})

        assert result["token"] is None

    def test_service_name_added_once(self):
        assert add_service_name(None, "info", {"event": "x"})["service"] == SERVICE_NAME
        assert add_service_name(None, "info", {"event": "x", "service": "other"})["service"] == "other"

    def test_json_chain_renders_redacted_event(self):
        event = {"event": "upload_started", "token": "token-abc"}
        for processor in build_processors(json_format=True):
            event = processor(None, "info", event)

        assert isinstance(event, str)
        assert "token-abc" not in event
        assert '"service": "ppz-logalyzer"' in event
        assert '"level": "info"' in event

    def test_console_chain_ends_with_console_renderer(self):
        processors = build_processors(json_format=False, colors=False)

        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)


class TestConfigureFromEnv:
    """Tests for configure_logging_from_env."""

    @pytest.fixture
    def configured(self, monkeypatch):
        captured = {}
        monkeypatch.setattr(structlog, "configure", lambda **kwargs: captured.update(kwargs))
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: None)
        for name in (ppz_logging.LOG_LEVEL_ENV, ppz_logging.LOG_JSON_ENV, ppz_logging.LOG_FILE_ENV):
            monkeypatch.delenv(name, raising=False)
        return captured

    def test_defaults(self, configured):
        configure_logging_from_env()

        assert isinstance(configured["processors"][-1], structlog.dev.ConsoleRenderer)
        assert configured["wrapper_class"] is structlog.make_filtering_bound_logger(logging.INFO)

    def test_env_selects_json_and_level(self, configured, monkeypatch):
        monkeypatch.setenv("PPZ_LOG_LEVEL", "debug")
        monkeypatch.setenv("PPZ_LOG_JSON", "true")

        configure_logging_from_env()

        assert isinstance(configured["processors"][-1], structlog.processors.JSONRenderer)
        assert configured["wrapper_class"] is structlog.make_filtering_bound_logger(logging.DEBUG)

    def test_env_overrides_default_json(self, configured, monkeypatch):
        monkeypatch.setenv("PPZ_LOG_JSON", "0")

        configure_logging_from_env(default_json=True)

        assert isinstance(configured["processors"][-1], structlog.dev.ConsoleRenderer)
