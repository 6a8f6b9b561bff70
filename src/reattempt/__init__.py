"""reattempt: declarative retries for async operations.

Re-invokes an operation under a backoff schedule until it succeeds, runs out
of retries, or fails in a way it did not ask to retry.

Quick Start:
    >>> from reattempt import promise_retry, retry_on
    >>> 
    >>> async def fetch(retry, attempt):
    ...     try:
    ...         return await api.get("/items")
    ...     except TimeoutError as e:
    ...         retry(e)
    >>> 
    >>> items = await promise_retry(fetch, retries=3, min_delay=0.5)
    >>> 
    >>> class Client:
    ...     @retry_on(retries=3, errors=(ConnectionError,))
    ...     async def ping(self) -> bool: ...
"""

from reattempt.foundation.config import ReattemptSettings, clear_settings_cache, get_settings
from reattempt.foundation.errors import (
    Outcome,
    ReattemptError,
    Rejected,
    RejectedValueError,
    Resolved,
    RetryRequested,
)
from reattempt.runtime.observability import configure_logging
from reattempt.runtime.retry import (
    Backoff,
    BackoffSchedule,
    ConstantBackoff,
    ExponentialBackoff,
    RetryFn,
    RetryOptions,
    RetryPolicy,
    RetrySignal,
    execute,
    is_retry_signal,
    make_signal,
    promise_retry,
    promise_retry_with,
    retry_on,
    with_retry,
)

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "promise_retry", "promise_retry_with", "execute",
    # Outcomes
    "Outcome", "Resolved", "Rejected", "RetryRequested",
    # Signal protocol
    "RetryFn", "RetrySignal", "is_retry_signal", "make_signal",
    # Options & backoff
    "RetryOptions", "BackoffSchedule", "Backoff", "ExponentialBackoff", "ConstantBackoff",
    # Policy adapter
    "RetryPolicy", "retry_on", "with_retry",
    # Errors
    "ReattemptError", "RejectedValueError",
    # Configuration
    "ReattemptSettings", "get_settings", "clear_settings_cache", "configure_logging",
]
