"""Test structlog configuration."""

import json
import logging

import pytest
import structlog

from contact_passports.config import Settings
from contact_passports.utils.logging import build_processors, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
    structlog.reset_defaults()


class TestBuildProcessors:
    """Test the renderer choice."""

    def test_json_renderer(self):
        settings = Settings(_env_file=None, log_format="json")

        renderer = build_processors(settings)[-1]

        assert isinstance(renderer, structlog.processors.JSONRenderer)

    def test_console_renderer(self):
        settings = Settings(_env_file=None, log_format="console")

        renderer = build_processors(settings)[-1]

        assert isinstance(renderer, structlog.dev.ConsoleRenderer)

    def test_json_event_carries_context(self):
        settings = Settings(_env_file=None, log_format="json")
        processors = build_processors(settings)
        event = {"event": "passport_saved", "contact_id": 4}

        for processor in processors:
            if processor is structlog.stdlib.filter_by_level:
                continue
            event = processor(logging.getLogger("passports"), "info", event)

        payload = json.loads(event)
        assert payload["event"] == "passport_saved"
        assert payload["contact_id"] == 4
        assert payload["level"] == "info"
        assert payload["logger"] == "passports"
        assert "timestamp" in payload


class TestSetupLogging:
    """Test applying settings to the logging system."""

    def test_applies_level(self):
        setup_logging(Settings(_env_file=None, log_level="ERROR"))

        assert logging.getLogger().level == logging.ERROR

    def test_get_logger_emits_events(self):
        setup_logging(Settings(_env_file=None, log_level="DEBUG"))

        with structlog.testing.capture_logs() as events:
            get_logger("contact_passports.tests").info("ping", attempt=1)

        assert events == [{"event": "ping", "attempt": 1, "log_level": "info"}]
