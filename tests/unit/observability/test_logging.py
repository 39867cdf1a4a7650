"""Unit tests – logging helpers."""
from __future__ import annotations

import json
import logging

import pytest
import structlog
from structlog.testing import capture_logs

from mp_autorest.observability.logging import (
    DEFAULT_SENSITIVE_FIELDS,
    JsonLoggerFactory,
    RedactionProcessor,
    SensitiveFieldsFilter,
    get_logger,
)


# ---------------------------------------------------------------------------
# SensitiveFieldsFilter
# ---------------------------------------------------------------------------

class TestSensitiveFieldsFilter:
    def test_defaults_cover_credentials(self) -> None:
        assert {"authorization", "access_token", "refresh_token"} <= DEFAULT_SENSITIVE_FIELDS

    def test_redact_is_case_insensitive(self) -> None:
        result = SensitiveFieldsFilter().redact({"Authorization": "Bearer x", "Accept": "*/*"})
        assert result == {"Authorization": "[REDACTED]", "Accept": "*/*"}

    def test_redact_deep(self) -> None:
        data = {"headers": {"cookie": "a=b", "host": "svc"}, "access_token": "t"}
        result = SensitiveFieldsFilter().redact_deep(data)
        assert result == {"headers": {"cookie": "[REDACTED]", "host": "svc"}, "access_token": "[REDACTED]"}

    def test_custom_fields(self) -> None:
        result = SensitiveFieldsFilter(frozenset({"X-Secret"})).redact({"x-secret": "1", "authorization": "2"})
        assert result == {"x-secret": "[REDACTED]", "authorization": "2"}

    def test_input_not_mutated(self) -> None:
        data = {"authorization": "x"}
        SensitiveFieldsFilter().redact_deep(data)
        assert data == {"authorization": "x"}


class TestRedactionProcessor:
    def test_masks_nested_headers(self) -> None:
        processor = RedactionProcessor()
        event = {"event": "http.request.sending", "headers": {"Authorization": "Bearer t", "accept": "*/*"}}
        result = processor(None, "info", event)
        assert result["headers"] == {"Authorization": "[REDACTED]", "accept": "*/*"}
        assert result["event"] == "http.request.sending"


# ---------------------------------------------------------------------------
# get_logger
# ---------------------------------------------------------------------------

class TestGetLogger:
    def test_binds_initial_values(self) -> None:
        with capture_logs() as logs:
            get_logger("tests", component="pipeline").info("event.name", extra=1)
        assert logs == [{"component": "pipeline", "extra": 1, "event": "event.name", "log_level": "info"}]


# ---------------------------------------------------------------------------
# JsonLoggerFactory
# ---------------------------------------------------------------------------

class TestJsonLoggerFactory:
    @pytest.fixture(autouse=True)
    def _restore(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        structlog.reset_defaults()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_emits_redacted_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        JsonLoggerFactory.configure(level=logging.DEBUG)
        structlog.get_logger("json-test").info("token.refreshed", access_token="secret", resource="vault")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "token.refreshed"
        assert payload["access_token"] == "[REDACTED]"
        assert payload["resource"] == "vault"
        assert payload["level"] == "info"
        assert payload["logger"] == "json-test"
        assert "timestamp" in payload

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        JsonLoggerFactory.configure(level=logging.WARNING)
        structlog.get_logger("json-test").info("quiet")
        assert capsys.readouterr().err == ""
