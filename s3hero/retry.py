"""Retry with backoff for PyPI lookups and artifact downloads.

Formula resources are resolved against the PyPI JSON API and audited by
downloading from files.pythonhosted.org and GitHub archives. Those hosts fail
transiently now and then; a missing release does not.

Transient (retried):
- Network errors, timeouts and dropped connections
- Server errors (500, 502, 503, 504)
- Rate limiting (429), waiting as long as ``Retry-After`` asks, up to a cap

Permanent (raised at once):
- Other client errors, e.g. 404 for a release that was never published
"""

import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Callable, Optional, Sequence

import httpx

import s3hero.logging

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

# Longest server-requested wait honoured before a retry
MAX_RETRY_AFTER = 60.0

TRANSIENT_ERRORS = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


class RetryExhausted(Exception):
    """Raised when all retry attempts have been exhausted."""

    def __init__(
        self,
        message: str,
        attempts: int,
        last_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


def is_retryable_error(error: Exception) -> bool:
    """Whether a failed request is worth repeating."""
    if isinstance(error, TRANSIENT_ERRORS):
        return True

    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code in RETRYABLE_STATUS_CODES

    return False


def retry_after(error: Exception, now: Optional[datetime] = None) -> Optional[float]:
    """Seconds the server asked us to wait, from a ``Retry-After`` header.

    Accepts both delta-seconds and HTTP-date values. Returns None when the
    error carries no usable header; the result is clamped to
    [0, MAX_RETRY_AFTER].
    """
    if not isinstance(error, httpx.HTTPStatusError):
        return None

    value = error.response.headers.get("Retry-After")
    if not value:
        return None

    value = value.strip()
    if value.isdigit():
        seconds = float(value)
    else:
        try:
            when = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            return None
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        seconds = (when - (now or datetime.now(timezone.utc))).total_seconds()

    return min(max(seconds, 0.0), MAX_RETRY_AFTER)


def retry_with_backoff(
    func: Callable[..., Any],
    max_attempts: int = 3,
    delays: Sequence[float] = (1.0, 5.0, 15.0),
    args: tuple = (),
    kwargs: Optional[dict] = None,
) -> Any:
    """Call func, retrying transient HTTP failures.

    Args:
        func: The function to execute.
        max_attempts: Maximum number of attempts (including first try).
        delays: Waits between attempts; delays[0] follows the first failure
                and the last entry repeats. A ``Retry-After`` header
                replaces the scheduled wait.
        args: Positional arguments to pass to func.
        kwargs: Keyword arguments to pass to func.

    Returns:
        The return value of func if successful.

    Raises:
        RetryExhausted: If every attempt failed with a transient error.
        Exception: Permanent errors are re-raised immediately.

    Example:
        >>> release = retry_with_backoff(
        ...     fetch_json,
        ...     args=(client, "https://pypi.org/pypi/boto3/1.42.39/json"),
        ... )
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    if kwargs is None:
        kwargs = {}

    attempt = 1
    while True:
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if not is_retryable_error(e):
                raise

            if attempt >= max_attempts:
                raise RetryExhausted(
                    f"Operation failed after {max_attempts} attempts",
                    attempts=max_attempts,
                    last_error=e,
                ) from e

            delay = retry_after(e)
            if delay is None:
                delay = delays[min(attempt - 1, len(delays) - 1)]

            s3hero.logging.debug(
                "Attempt %d/%d failed (%s), retrying in %.1fs",
                attempt,
                max_attempts,
                e,
                delay,
            )
            time.sleep(delay)
            attempt += 1
