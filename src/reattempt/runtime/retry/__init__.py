"""Retry orchestration with pluggable backoff.

Example:
    >>> from reattempt.runtime.retry import promise_retry
    >>> 
    >>> async def fetch(retry, attempt):
    ...     try:
    ...         return await api.get("/items")
    ...     except TimeoutError as e:
    ...         retry(e)
    >>> 
    >>> items = await promise_retry(fetch, retries=5, min_delay=0.1, factor=2)
"""

from .backoff import Backoff, ConstantBackoff, ExponentialBackoff
from .options import RetryCallback, RetryOptions, coerce_options
from .orchestrator import execute, promise_retry, promise_retry_with
from .policy import RetryingMethod, RetryPolicy, retry_on, with_retry
from .schedule import BackoffSchedule
from .signal import RetryFn, RetrySignal, is_retry_signal, make_signal, signal_retry, unwrap

__all__ = [
    # Backoff strategies
    "Backoff",
    "ExponentialBackoff",
    "ConstantBackoff",
    # Options & schedule
    "RetryOptions",
    "RetryCallback",
    "coerce_options",
    "BackoffSchedule",
    # Signal protocol
    "RetryFn",
    "RetrySignal",
    "is_retry_signal",
    "make_signal",
    "signal_retry",
    "unwrap",
    # Execution
    "execute",
    "promise_retry",
    "promise_retry_with",
    # Policy adapter
    "RetryPolicy",
    "RetryingMethod",
    "retry_on",
    "with_retry",
]
