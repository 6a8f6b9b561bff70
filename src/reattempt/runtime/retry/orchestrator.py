"""Retry orchestration for async (and sync) units of work.

Drives one operation through sequential attempts against a
``BackoffSchedule``. An attempt is retried only when it asks for it, by
raising the signal from its ``retry`` capability or by returning
``RetryRequested``. Any other failure is final on the spot.

Example:
    >>> async def fetch(retry, attempt):
    ...     try:
    ...         return await client.get("/status")
    ...     except ConnectionError as e:
    ...         retry(e)
    >>> 
    >>> body = await promise_retry(fetch, retries=3, min_delay=0.2)
    >>> body = await promise_retry_with({"retries": 3}, fetch)  # options first
    >>> 
    >>> match await execute(fetch, RetryOptions(retries=3)):
    ...     case Resolved(value): ...
    ...     case Rejected(cause): ...
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Mapping
from typing import Any, Callable, TypeVar, Union

from reattempt.foundation.errors import Outcome, Rejected, Resolved, RetryRequested

from .options import RetryOptions, coerce_options
from .schedule import BackoffSchedule
from .signal import RetryFn, is_retry_signal, signal_retry, unwrap

logger = logging.getLogger("reattempt.retry")

T = TypeVar("T")

Work = Callable[[RetryFn, int], Union[Awaitable[Any], Any]]
Options = Union[RetryOptions, Mapping[str, Any], None]
AttemptResult = Union[Resolved[Any], Rejected[Any], RetryRequested]


def call_hook(hook: Callable[..., object] | None, *args: object, label: str, **kwargs: object) -> None:
    """Invoke an observability hook. Its failures are logged, never raised."""
    if not callable(hook):
        return
    try:
        hook(*args, **kwargs)
    except Exception:
        logger.debug(f"[{label}] Retry hook {hook!r} failed", exc_info=True)


async def _run_attempt(work: Work, number: int) -> AttemptResult:
    """Run one attempt and classify what it produced.
    
    Sync and async units of work are handled identically: a value returned
    directly counts as resolved, an exception raised before the first await
    counts as rejected.
    """
    try:
        result = work(signal_retry, number)
        if inspect.isawaitable(result):
            result = await result
    except Exception as exc:
        return RetryRequested(unwrap(exc)) if is_retry_signal(exc) else Rejected(exc)
    
    if isinstance(result, (Resolved, Rejected)):
        return result
    if is_retry_signal(result):
        return RetryRequested(unwrap(result))
    return Resolved(result)


def _label(work: Work, name: str | None) -> str:
    return name or getattr(work, "__qualname__", None) or repr(work)


async def execute(work: Work, options: Options = None, *, name: str | None = None, **overrides: Any) -> Outcome[Any]:
    """Run ``work`` until it resolves, fails plainly, or runs out of retries.
    
    Args:
        work: Callable invoked as ``work(retry, attempt)``, sync or async
        options: RetryOptions, a mapping of option fields, or None for
            settings defaults
        name: Label for log messages (default: the callable's qualname)
        **overrides: Option fields applied on top of ``options``
    
    Returns:
        ``Resolved(value)`` or ``Rejected(cause)``. The cause of a rejection
        after exhausted retries is the last signaled cause, unchanged.
    """
    if not callable(work):
        raise TypeError(
            f"work must be callable, got {type(work).__name__}; "
            "use promise_retry_with() to pass options first"
        )
    opts = coerce_options(options, **overrides)
    schedule = BackoffSchedule(opts)
    label = _label(work, name)
    budget = "∞" if opts.forever else str(opts.retries + 1)
    
    while True:
        number = schedule.attempts
        logger.debug(f"[{label}] Attempt {number}/{budget}")
        outcome = await _run_attempt(work, number)
        
        if not isinstance(outcome, RetryRequested):
            if number > 1 and isinstance(outcome, Resolved):
                logger.info(f"[{label}] Succeeded after {number} attempts")
            return outcome
        
        cause = outcome.cause
        if not schedule.retry(cause):
            logger.info(f"[{label}] Giving up after {number} attempts: {cause!r}")
            return Rejected(cause)
        
        delay = schedule.delay or 0.0
        logger.info(f"[{label}] Retry {number}/{budget} after {delay:.2f}s ({cause!r})")
        call_hook(opts.on_retry, number, cause, delay, label=label)
        await schedule.wait()


async def promise_retry(work: Work, options: Options = None, *, name: str | None = None, **overrides: Any) -> Any:
    """Retry ``work`` and return its value, or raise its final cause.
    
    A final cause that is not an exception (such as the ``None`` of a bare
    ``retry()``) is raised as ``RejectedValueError`` carrying it on ``cause``.
    """
    return (await execute(work, options, name=name, **overrides)).unwrap()


async def promise_retry_with(options: Options, work: Work, *, name: str | None = None, **overrides: Any) -> Any:
    """``promise_retry`` with the options given first."""
    return (await execute(work, options, name=name, **overrides)).unwrap()
