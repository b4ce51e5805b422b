"""Hardening utilities for the remote catalog and archive calls.

Provides retry logic for transient network failures and user-friendly
error formatting so API responses never expose internal details.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import requests

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# 1. Retry Logic
# ---------------------------------------------------------------------------

_DEFAULT_RETRYABLE = (
    requests.ConnectionError,
    requests.Timeout,
    ConnectionError,
    TimeoutError,
)


@dataclass
class RetryConfig:
    """Configuration for retry-with-backoff behavior.

    Attributes:
        max_attempts: Total number of attempts (including the first).
        base_delay: Initial delay in seconds before first retry.
        max_delay: Upper bound on delay between retries.
        exponential_backoff: Double delay on each retry when True.
        retryable_exceptions: Tuple of exception types that trigger a retry.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_backoff: bool = True
    retryable_exceptions: tuple[type[BaseException], ...] = _DEFAULT_RETRYABLE


class RetriesExhaustedError(Exception):
    """Raised when all retry attempts have been exhausted.

    Attributes:
        last_error: The final exception that caused the failure.
        attempts: Total number of attempts made.
    """

    def __init__(self, last_error: Exception, attempts: int) -> None:
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(f"All {attempts} attempts failed. Last error: {last_error}")


def _compute_delay(attempt: int, config: RetryConfig) -> float:
    """Compute the delay before the next retry attempt.

    Args:
        attempt: Zero-based attempt index (0 = first retry).
        config: Retry configuration.

    Returns:
        Delay in seconds, capped at config.max_delay.
    """
    if config.exponential_backoff:
        delay = config.base_delay * (2**attempt)
    else:
        delay = config.base_delay
    return min(delay, config.max_delay)


def retry_with_backoff(
    func: Callable[..., Any],
    config: RetryConfig | None = None,
    *args: Any,
    sleep_func: Callable[[float], None] | None = None,
    **kwargs: Any,
) -> Any:
    """Execute *func* with exponential-backoff retry on transient failures.

    Args:
        func: Callable to invoke.
        config: Retry configuration. Uses defaults when None.
        *args: Positional arguments forwarded to *func*.
        sleep_func: Injectable sleep for testing. Defaults to time.sleep.
        **kwargs: Keyword arguments forwarded to *func*.

    Returns:
        Whatever *func* returns on success.

    Raises:
        RetriesExhaustedError: When all attempts fail with retryable errors.
        Exception: Immediately re-raised for non-retryable errors.
    """
    cfg = config or RetryConfig()
    do_sleep = sleep_func or time.sleep
    last_error: Exception | None = None

    for attempt in range(cfg.max_attempts):
        try:
            return func(*args, **kwargs)
        except cfg.retryable_exceptions as exc:
            last_error = exc
            if attempt < cfg.max_attempts - 1:
                delay = _compute_delay(attempt, cfg)
                logger.warning(
                    "Attempt %d/%d failed (%s). Retrying in %.1fs.",
                    attempt + 1,
                    cfg.max_attempts,
                    exc,
                    delay,
                )
                do_sleep(delay)

    raise RetriesExhaustedError(last_error, cfg.max_attempts)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# 2. Error Formatting
# ---------------------------------------------------------------------------


@dataclass
class UserFriendlyError:
    """A structured error designed for end-user consumption.

    Attributes:
        message: Clear description for the user.
        suggestion: Actionable guidance.
        component: Originating subsystem (e.g. "catalog").
        error_code: Machine-readable identifier (e.g. "SRCH_003").
        technical_detail: Debugging info for logs only -- never shown to users.
    """

    message: str
    suggestion: str
    component: str
    error_code: str
    technical_detail: str = ""

    def to_dict(self) -> dict[str, str]:
        """Serialize for API responses (excludes technical_detail).

        Returns:
            Dictionary safe for sending to end users.
        """
        return {
            "message": self.message,
            "suggestion": self.suggestion,
            "component": self.component,
            "error_code": self.error_code,
        }


class ErrorFormatter:
    """Convert internal exceptions to user-friendly messages."""

    def format_search_error(self, error: Exception) -> UserFriendlyError:
        """Format a catalog search error."""
        return self._format(error, component="catalog", code_prefix="SRCH")

    def _format(
        self,
        error: Exception,
        *,
        component: str,
        code_prefix: str,
    ) -> UserFriendlyError:
        message, suggestion, code_suffix = _classify_error(error)
        return UserFriendlyError(
            message=message,
            suggestion=suggestion,
            component=component,
            error_code=f"{code_prefix}_{code_suffix}",
            technical_detail=repr(error),
        )


def _classify_error(error: Exception) -> tuple[str, str, str]:
    """Map an exception to (message, suggestion, code_suffix).

    Args:
        error: The caught exception.

    Returns:
        Tuple of user message, suggestion text, and error code suffix.
    """
    if isinstance(error, RetriesExhaustedError):
        error = error.last_error
    if isinstance(error, requests.HTTPError):
        return (
            "The remote service returned an error.",
            "Try again later. The service may be temporarily unavailable.",
            "001",
        )
    if isinstance(error, (requests.Timeout, TimeoutError)):
        return (
            "The remote service took too long to respond.",
            "Try again. If the problem persists, check your network.",
            "002",
        )
    if isinstance(error, (requests.ConnectionError, ConnectionError)):
        return (
            "Could not connect to the remote service.",
            "Check your network connection and try again.",
            "003",
        )
    if isinstance(error, (ValueError, TypeError, AttributeError)):
        return (
            "The remote service returned data that could not be read.",
            "Try again. If this keeps happening, please report the issue.",
            "004",
        )
    return (
        "An unexpected error occurred.",
        "If this keeps happening, please report the issue.",
        "999",
    )
