"""Tests for structlog configuration."""

import json

import pytest
import structlog

from paycal_core.logging_config import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_json_output_with_context(self, capsys):
        """JSON mode renders the event name, level and key/value context."""
        configure_logging("INFO", json=True)

        structlog.get_logger().info("month_projected", month="2024-01")

        line = json.loads(capsys.readouterr().out.strip())
        assert line["event"] == "month_projected"
        assert line["month"] == "2024-01"
        assert line["level"] == "info"
        assert "timestamp" in line

    def test_level_filters_lower_events(self, capsys):
        configure_logging("warning", json=True)
        logger = structlog.get_logger()

        logger.info("hidden")
        logger.warning("shown")

        output = capsys.readouterr().out
        assert "hidden" not in output
        assert "shown" in output
