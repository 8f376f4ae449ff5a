"""Unit tests for logging utilities."""
from structlog.testing import capture_logs

from apps.order_parser.utils.logger_utils import get_logger_with_context, log_event, sanitize_for_logging


class TestSanitizeForLogging:
    """Test cases for sanitize_for_logging."""

    def test_short_string_unchanged(self):
        assert sanitize_for_logging("papa 2 kilos") == "papa 2 kilos"

    def test_long_string_truncated(self):
        """Long strings are cut and marked."""
        assert sanitize_for_logging("a" * 20, max_length=5) == "aaaaa..."

    def test_nested_structures(self):
        """Dicts and lists are sanitized recursively."""
        data = {"phrase": "b" * 10, "parts": ["c" * 10, 3], "count": 2}
        assert sanitize_for_logging(data, max_length=4) == {
            "phrase": "bbbb...",
            "parts": ["cccc...", 3],
            "count": 2,
        }


class TestLogEvent:
    """Test cases for log_event and get_logger_with_context."""

    def test_context_fields(self):
        """Bound logger carries event_type, phrase_id and event_id."""
        with capture_logs() as logs:
            get_logger_with_context(phrase_id="msg-1", event_type="phrase_received").info("phrase_received")
        assert logs[0]["event_type"] == "phrase_received"
        assert logs[0]["phrase_id"] == "msg-1"
        assert logs[0]["event_id"]

    def test_unknown_event_type(self):
        """Missing event type is reported as unknown."""
        with capture_logs() as logs:
            get_logger_with_context().info("something")
        assert logs[0]["event_type"] == "unknown"
        assert "phrase_id" not in logs[0]

    def test_log_event_level_and_truncation(self):
        """log_event uses the requested level and truncates fields."""
        with capture_logs() as logs:
            log_event("phrase_rejected", phrase_id="7", level="warning", max_length=3, phrase="papa 2 kilos")
        assert logs[0]["event"] == "phrase_rejected"
        assert logs[0]["log_level"] == "warning"
        assert logs[0]["phrase"] == "pap..."
