"""Unit tests for log formatting."""
import json
import logging

import pytest

from core.config import settings
from core.logging import build_formatter


def make_record(message="Reservation rejected"):
    return logging.LogRecord(
        "services.reservation_service", logging.WARNING, __file__, 42, message, None, None
    )


@pytest.mark.unit
class TestLogFormatting:

    def test_json_lines(self):
        payload = json.loads(build_formatter(use_json=True).format(make_record()))

        assert payload["message"] == "Reservation rejected"
        assert payload["level"] == "WARNING"
        assert payload["logger"] == "services.reservation_service"
        assert payload["service"] == settings.app_name
        assert payload["environment"] == settings.app_env
        assert payload["location"].endswith(":42")

    def test_plain_text(self):
        line = build_formatter(use_json=False).format(make_record())

        assert "WARNING" in line
        assert line.endswith("services.reservation_service: Reservation rejected")
