"""Tests for retry module."""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import httpx
import pytest

from s3hero.retry import (
    MAX_RETRY_AFTER,
    RetryExhausted,
    is_retryable_error,
    retry_after,
    retry_with_backoff,
)


def status_error(status_code: int, headers: dict | None = None) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://pypi.org/pypi/six/1.17.0/json")
    response = httpx.Response(status_code, headers=headers, request=request)
    return httpx.HTTPStatusError(f"HTTP {status_code}", request=request, response=response)


class TestIsRetryableError:
    """Tests for error classification."""

    def test_connection_errors_are_retryable(self):
        """Connection-level failures should trigger retry."""
        assert is_retryable_error(httpx.ConnectError("refused")) is True
        assert is_retryable_error(httpx.ConnectTimeout("timed out")) is True
        assert is_retryable_error(httpx.ReadTimeout("timed out")) is True

    def test_dropped_connections_are_retryable(self):
        """Connections closed mid-response and pool exhaustion are transient."""
        assert is_retryable_error(httpx.RemoteProtocolError("peer closed connection")) is True
        assert is_retryable_error(httpx.PoolTimeout("no connection available")) is True
        assert is_retryable_error(httpx.ReadError("reset by peer")) is True

    @pytest.mark.parametrize("status_code", [429, 500, 502, 503, 504])
    def test_transient_statuses_are_retryable(self, status_code: int):
        """Rate limiting and server errors should trigger retry."""
        assert is_retryable_error(status_error(status_code)) is True

    @pytest.mark.parametrize("status_code", [400, 401, 403, 404])
    def test_client_errors_are_not_retryable(self, status_code: int):
        """Client errors should NOT trigger retry."""
        assert is_retryable_error(status_error(status_code)) is False

    def test_generic_exception_is_not_retryable(self):
        """Generic exceptions should NOT trigger retry by default."""
        assert is_retryable_error(ValueError("Some error")) is False


class TestRetryWithBackoff:
    """Tests for retry_with_backoff function."""

    def test_success_on_first_attempt(self):
        """Succeed immediately without retrying."""
        mock_func = MagicMock(return_value="success")

        result = retry_with_backoff(mock_func, max_attempts=3, delays=[1, 2, 4])

        assert result == "success"
        assert mock_func.call_count == 1

    @patch("s3hero.retry.time.sleep")
    def test_success_after_one_retry(self, mock_sleep: MagicMock):
        """Succeed after one retry, sleeping the first delay."""
        mock_func = MagicMock(side_effect=[httpx.ConnectError("fail"), "success"])

        result = retry_with_backoff(mock_func, max_attempts=3, delays=[0.5, 1.0])

        assert result == "success"
        assert mock_func.call_count == 2
        mock_sleep.assert_called_once_with(0.5)

    @patch("s3hero.retry.time.sleep")
    def test_exhausted_raises(self, mock_sleep: MagicMock):
        """Raise RetryExhausted after max attempts."""
        error = httpx.ConnectError("fail")
        mock_func = MagicMock(side_effect=error)

        with pytest.raises(RetryExhausted) as exc_info:
            retry_with_backoff(mock_func, max_attempts=3, delays=[0.1])

        assert exc_info.value.attempts == 3
        assert exc_info.value.last_error is error
        assert mock_func.call_count == 3
        assert mock_sleep.call_count == 2

    def test_non_retryable_raises_immediately(self):
        """Permanent errors are re-raised without retrying."""
        mock_func = MagicMock(side_effect=status_error(404))

        with pytest.raises(httpx.HTTPStatusError):
            retry_with_backoff(mock_func, max_attempts=3)

        assert mock_func.call_count == 1

    def test_passes_args_and_kwargs(self):
        """Arguments are forwarded to the function."""
        mock_func = MagicMock(return_value="ok")

        retry_with_backoff(mock_func, args=("a", 1), kwargs={"key": "value"})

        mock_func.assert_called_once_with("a", 1, key="value")

    def test_invalid_max_attempts(self):
        """At least one attempt is required."""
        with pytest.raises(ValueError):
            retry_with_backoff(MagicMock(), max_attempts=0)

    @patch("s3hero.retry.time.sleep")
    def test_retry_after_replaces_scheduled_delay(self, mock_sleep: MagicMock):
        """A rate-limited response waits as long as the server asks."""
        mock_func = MagicMock(
            side_effect=[status_error(429, {"Retry-After": "7"}), "success"]
        )

        result = retry_with_backoff(mock_func, delays=[1.0])

        assert result == "success"
        mock_sleep.assert_called_once_with(7.0)


class TestRetryAfter:
    """Tests for Retry-After parsing."""

    def test_seconds(self):
        assert retry_after(status_error(429, {"Retry-After": "12"})) == 12.0

    def test_http_date(self):
        """HTTP-date values are measured from now."""
        now = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        error = status_error(503, {"Retry-After": "Wed, 01 Jan 2025 12:00:30 GMT"})

        assert retry_after(error, now=now) == 30.0

    def test_past_date_is_zero(self):
        now = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        error = status_error(503, {"Retry-After": "Wed, 01 Jan 2025 11:00:00 GMT"})

        assert retry_after(error, now=now) == 0.0

    def test_capped(self):
        """Very long waits are clamped."""
        assert retry_after(status_error(429, {"Retry-After": "86400"})) == MAX_RETRY_AFTER

    @pytest.mark.parametrize("headers", [None, {"Retry-After": "soon"}])
    def test_missing_or_unparseable(self, headers):
        assert retry_after(status_error(429, headers)) is None

    def test_not_a_status_error(self):
        assert retry_after(httpx.ConnectError("refused")) is None
