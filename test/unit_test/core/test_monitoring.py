"""
Unit tests for the Logfire monitoring module.

Logfire is never contacted: the ``logfire`` module functions are patched and
the module-level feature flags are overridden per test.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest

from interior_manager.core import monitoring


@pytest.fixture(autouse=True)
def reset_active_flag(monkeypatch):
    monkeypatch.setattr(monitoring, "_logfire_active", False)


class TestInitializeLogfire:
    def test_disabled_by_flag(self, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", False)
        with patch.object(monitoring.logfire, "configure") as configure:
            assert monitoring.initialize_logfire() is False
        configure.assert_not_called()
        assert monitoring.is_logfire_active() is False

    def test_enabled_without_token(self, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", True)
        monkeypatch.setattr(monitoring, "LOGFIRE_TOKEN", "")
        with patch.object(monitoring.logfire, "configure") as configure:
            assert monitoring.initialize_logfire() is False
        configure.assert_not_called()

    def test_configure_failure_is_reported(self, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", True)
        monkeypatch.setattr(monitoring, "LOGFIRE_TOKEN", "token")
        with patch.object(monitoring.logfire, "configure", side_effect=RuntimeError("boom")):
            assert monitoring.initialize_logfire() is False
        assert monitoring.is_logfire_active() is False

    def test_enabled_instruments_everything(self, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", True)
        monkeypatch.setattr(monitoring, "LOGFIRE_TOKEN", "token")
        for flag in ("LOGFIRE_TRACE_SQLALCHEMY", "LOGFIRE_TRACE_HTTPX", "LOGFIRE_TRACE_FASTAPI"):
            monkeypatch.setattr(monitoring, flag, True)
        app = MagicMock()
        with (
            patch.object(monitoring.logfire, "configure") as configure,
            patch.object(monitoring.logfire, "instrument_sqlalchemy") as sqlalchemy,
            patch.object(monitoring.logfire, "instrument_httpx") as httpx_instrument,
            patch.object(monitoring.logfire, "instrument_fastapi") as fastapi,
        ):
            assert monitoring.initialize_logfire(app) is True

        configure.assert_called_once()
        assert configure.call_args.kwargs["token"] == "token"
        sqlalchemy.assert_called_once()
        httpx_instrument.assert_called_once()
        fastapi.assert_called_once_with(app=app)
        assert monitoring.is_logfire_active() is True

    def test_instrumentation_failure_does_not_disable(self, monkeypatch):
        monkeypatch.setattr(monitoring, "LOGFIRE_ENABLED", True)
        monkeypatch.setattr(monitoring, "LOGFIRE_TOKEN", "token")
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_SQLALCHEMY", True)
        monkeypatch.setattr(monitoring, "LOGFIRE_TRACE_FASTAPI", False)
        with (
            patch.object(monitoring.logfire, "configure"),
            patch.object(monitoring.logfire, "instrument_sqlalchemy", side_effect=RuntimeError("no engine")),
            patch.object(monitoring.logfire, "instrument_httpx"),
            patch.object(monitoring.logfire, "instrument_fastapi") as fastapi,
        ):
            assert monitoring.initialize_logfire(MagicMock()) is True
        fastapi.assert_not_called()


class TestLogHelpers:
    def test_api_request_uses_logger_when_inactive(self, caplog):
        caplog.set_level(logging.DEBUG, logger=monitoring.__name__)
        with patch.object(monitoring.logfire, "info") as info:
            monitoring.log_api_request("GET", "/health", 200, 1.234)
        info.assert_not_called()
        assert "GET /health -> 200 (1.23ms)" in caplog.text

    def test_api_request_uses_logfire_when_active(self, monkeypatch):
        monkeypatch.setattr(monitoring, "_logfire_active", True)
        with patch.object(monitoring.logfire, "info") as info:
            monitoring.log_api_request("POST", "/api/v1/boq", 201, 12.5)
        info.assert_called_once_with(
            "API request completed", method="POST", path="/api/v1/boq", status_code=201, duration_ms=12.5
        )

    def test_notification_sent_uses_logfire_when_active(self, monkeypatch):
        monkeypatch.setattr(monitoring, "_logfire_active", True)
        with patch.object(monitoring.logfire, "info") as info:
            monitoring.log_notification_sent("task_assigned", "user-1", True)
        info.assert_called_once_with(
            "Notification sent", notification_type="task_assigned", user_id="user-1", pushed=True
        )
