"""Unit tests for settings and logging setup."""

import json
import logging

import pytest

from survey_pulse.config.settings import Settings
from survey_pulse.logging_config import JsonFormatter, setup_logging


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("STORAGE_BACKEND", "SERVER_PORT", "SUPABASE_URL", "SUPABASE_KEY"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)
        assert settings.storage.backend == "local"
        assert settings.server.port == 8765
        assert settings.server.http_port == 8080
        assert not settings.supabase.is_configured

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STORAGE_BACKEND", "supabase")
        monkeypatch.setenv("SERVER_PORT", "9000")
        monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
        monkeypatch.setenv("SUPABASE_KEY", "secret")
        monkeypatch.setenv("SURVEY_TITLE", "Quarterly Pulse")
        settings = Settings(_env_file=None)
        assert settings.storage.backend == "supabase"
        assert settings.server.port == 9000
        assert settings.supabase.is_configured
        assert settings.survey.title == "Quarterly Pulse"


class TestLogging:
    def test_json_formatter(self) -> None:
        record = logging.LogRecord("survey_pulse.test", logging.INFO, __file__, 1, "hello %s", ("there",), None)
        payload = json.loads(JsonFormatter().format(record))
        assert payload["msg"] == "hello there"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "survey_pulse.test"

    def test_setup_logging_replaces_handlers(self) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging("debug", json_logs=True)
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JsonFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
