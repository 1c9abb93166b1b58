"""
Tests for structured logging utilities.
"""

import logging

import pytest
import structlog

from chirper.utils.logging import (
    SensitiveDataProcessor,
    ServiceInfoProcessor,
    TimestampProcessor,
    bind_log_context,
    build_processors,
    clear_log_context,
    configure_logging,
    get_logger,
)


class TestSensitiveDataProcessor:
    """Test masking of sensitive log fields."""

    @pytest.fixture
    def processor(self):
        return SensitiveDataProcessor()

    def test_masks_password_and_email(self, processor):
        event = processor(None, "info", {
            "event": "user created",
            "password": "pbkdf2$hash",
            "user_email": "ann@example.com",
            "user_id": 4,
        })

        assert event["password"] == processor.mask_value
        assert event["user_email"] == processor.mask_value
        assert event["user_id"] == 4
        assert event["event"] == "user created"

    def test_masks_nested_values(self, processor):
        event = processor(None, "info", {
            "event": "profile updated",
            "changes": {"name": "Ann", "Email": "new@example.com"},
            "rows": [{"password": "x"}, "plain"],
        })

        assert event["changes"] == {"name": "Ann", "Email": processor.mask_value}
        assert event["rows"] == [{"password": processor.mask_value}, "plain"]


class TestProcessors:
    """Test service metadata and processor chain assembly."""

    def test_service_info(self):
        event = ServiceInfoProcessor()(None, "info", {"event": "x"})

        assert event["service"] == "chirper"
        assert event["environment"] == "test"
        assert "version" in event

    def test_timestamp(self):
        event = TimestampProcessor()(None, "info", {"event": "x"})

        assert event["timestamp"].endswith("+00:00")

    def test_json_renderer(self):
        processors = build_processors("json")

        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert any(isinstance(p, SensitiveDataProcessor) for p in processors)

    def test_console_renderer_without_masking(self):
        processors = build_processors("console", mask_sensitive=False)

        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert not any(isinstance(p, SensitiveDataProcessor) for p in processors)


class TestConfiguration:
    """Test logger configuration and context binding."""

    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        yield
        clear_log_context()
        structlog.reset_defaults()

    def test_configure_and_log_json(self, caplog):
        configure_logging(level="INFO", log_format="json")
        caplog.set_level(logging.INFO, logger="chirper.tests")

        get_logger("chirper.tests").info("post created", post_id=3, password="hash")

        assert '"post_id": 3' in caplog.text
        assert '"hash"' not in caplog.text
        assert '"service": "chirper"' in caplog.text

    def test_bound_context_is_merged(self, caplog):
        configure_logging(level="INFO", log_format="json")
        caplog.set_level(logging.INFO, logger="chirper.tests")
        bind_log_context(request_id="req-1")

        get_logger("chirper.tests").info("feed served")

        assert '"request_id": "req-1"' in caplog.text
