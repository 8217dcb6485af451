"""Service for executing API calls with automatic retries.

Implements exponential backoff for handling transient errors like
rate limits (429), temporary server issues (5xx) or network failures.
Rate limit errors wait until the window resets when the API told us when.
"""

import logging
import time
from typing import Any, Callable, Optional, Tuple, Type

from aftership.domain.events.api_events import ApiCallDeferred, RetryScheduled, dispatch_event
from aftership.domain.models.errors import (
    AfterShipError,
    InternalError,
    TooManyRequestsError,
    TransportError,
)

logger = logging.getLogger(__name__)

RETRYABLE_EXCEPTIONS: Tuple[Type[AfterShipError], ...] = (
    TooManyRequestsError,
    InternalError,
    TransportError,
)


# --- Custom Exceptions ---
class MaxRetryError(AfterShipError):
    """Exception raised when max retries are exceeded."""
    def __init__(self, original_exception: Exception, attempts: int):
        self.original_exception = original_exception
        self.attempts = attempts
        super().__init__(f"Max retries ({attempts}) exceeded. Last error: {original_exception}")


# --- Retry Service ---

class ApiRetryService:
    """Handles API call execution with retries and backoff."""

    def __init__(
        self,
        max_retries: int = 0,
        initial_backoff_s: float = 1.0,
        backoff_factor: float = 2.0,
        max_backoff_s: float = 60.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initializes the ApiRetryService.

        Args:
            max_retries: Maximum number of retry attempts. 0 disables retrying.
            initial_backoff_s: Initial delay in seconds for the first retry.
            backoff_factor: Multiplier for the backoff delay (e.g., 2 for exponential).
            max_backoff_s: Upper bound for a single wait.
            sleep: Function used to wait; replaced in tests.
        """
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.max_retries = max_retries
        self.initial_backoff_s = initial_backoff_s
        self.backoff_factor = backoff_factor
        self.max_backoff_s = max_backoff_s
        self.retryable_exceptions = RETRYABLE_EXCEPTIONS
        self._sleep = sleep

        logger.debug(
            f"ApiRetryService initialized: max_retries={max_retries}, "
            f"initial_backoff={initial_backoff_s}s, factor={backoff_factor}"
        )

    def _delay_for(self, error: Exception, current_backoff: float) -> float:
        if isinstance(error, TooManyRequestsError) and error.retry_after > 0:
            return min(error.retry_after, self.max_backoff_s)
        return min(current_backoff, self.max_backoff_s)

    def execute_with_retry(
        self,
        func: Callable[..., Any],
        *args: Any,
        endpoint_name: Optional[str] = None,
        **kwargs: Any
    ) -> Any:
        """Executes a function, retrying on transient AfterShip errors.

        Args:
            func: The function (API call) to execute.
            *args: Positional arguments for the function.
            endpoint_name: Name used in logs and events; defaults to func.__name__.
            **kwargs: Keyword arguments for the function.

        Returns:
            The result of the function call.

        Raises:
            MaxRetryError: If retries are enabled and all attempts failed.
            AfterShipError: Non-retryable errors, or any error when retries are disabled.
        """
        if self.max_retries == 0:
            return func(*args, **kwargs)

        effective_endpoint = endpoint_name or getattr(func, "__name__", "call")
        current_backoff = self.initial_backoff_s
        last_exception: Optional[Exception] = None

        for attempt in range(self.max_retries + 1):
            try:
                return func(*args, **kwargs)
            except self.retryable_exceptions as e:
                last_exception = e
                if attempt >= self.max_retries:
                    logger.error(f"Max retries ({self.max_retries}) reached for {effective_endpoint}. Last error: {e}")
                    break
                delay = self._delay_for(e, current_backoff)
                logger.warning(
                    f"Retryable error calling {effective_endpoint} on attempt {attempt + 1}/{self.max_retries + 1}: "
                    f"{type(e).__name__}. Waiting {delay:.2f}s..."
                )
                if isinstance(e, TooManyRequestsError):
                    dispatch_event(ApiCallDeferred(endpoint=effective_endpoint, wait_time_seconds=delay))
                dispatch_event(RetryScheduled(endpoint=effective_endpoint, attempt_number=attempt + 1, delay_seconds=delay))
                self._sleep(delay)
                current_backoff *= self.backoff_factor

        raise MaxRetryError(last_exception, self.max_retries)
