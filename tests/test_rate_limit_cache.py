"""
Tests for the rate limiting cache implementation.
"""
from unittest.mock import MagicMock, patch

from cachetools import TTLCache

from relayrpc_sdk._rate_limited_log import clear_rate_limited_log, rate_limited_log


class TestRateLimitCache:
    """Tests for the rate limiting cache implementation."""

    def test_rate_limited_log_with_ttlcache(self):
        mock_logger = MagicMock()

        # First log should go through
        assert rate_limited_log("Test message", logger_instance=mock_logger) is True
        mock_logger.warning.assert_called_once_with("Test message")
        mock_logger.reset_mock()

        # Second immediate log should be suppressed
        assert rate_limited_log("Test message", logger_instance=mock_logger) is False
        mock_logger.warning.assert_not_called()

        # Different level should go through
        rate_limited_log("Test message", level="error", logger_instance=mock_logger)
        mock_logger.error.assert_called_once_with("Test message")

        # Different message should go through
        rate_limited_log("Different message", logger_instance=mock_logger)
        mock_logger.warning.assert_called_once_with("Different message")

    def test_expired_entry_logs_again(self):
        """Test a message is logged again once its TTL has passed"""
        clock = [0.0]
        cache = TTLCache(maxsize=10, ttl=60, timer=lambda: clock[0])
        mock_logger = MagicMock()

        with patch("relayrpc_sdk._rate_limited_log._log_cache", cache):
            rate_limited_log("expired", logger_instance=mock_logger)
            clock[0] = 61.0
            rate_limited_log("expired", logger_instance=mock_logger)

        assert mock_logger.warning.call_count == 2

    def test_clear(self):
        mock_logger = MagicMock()
        rate_limited_log("once", logger_instance=mock_logger)
        clear_rate_limited_log()
        rate_limited_log("once", logger_instance=mock_logger)
        assert mock_logger.warning.call_count == 2

    def test_unknown_level_falls_back_to_warning(self):
        mock_logger = MagicMock(spec=["warning"])
        rate_limited_log("odd level", level="verbose", logger_instance=mock_logger)
        mock_logger.warning.assert_called_once_with("odd level")
