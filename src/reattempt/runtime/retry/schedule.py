"""Per-operation backoff schedule.

Tracks attempts and recorded failures for one retried operation and
decides whether another attempt may be scheduled. A schedule is owned by a
single operation and discarded once that operation settles.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import Counter

from .options import RetryOptions

logger = logging.getLogger("reattempt.retry.schedule")


def _error_key(cause: object) -> tuple[str, str]:
    return type(cause).__name__, str(cause)


class BackoffSchedule:
    """Finite delay schedule built from RetryOptions.
    
    Delays are computed up front, one per allowed retry. With ``forever``
    set, the last delay repeats once the finite schedule is used up.
    
    Example:
        >>> schedule = BackoffSchedule(RetryOptions(retries=2, min_delay=0.1, factor=2))
        >>> schedule.delays
        (0.1, 0.2)
        >>> schedule.retry(TimeoutError())
        True
        >>> schedule.delay
        0.1
    """
    
    __slots__ = ("_options", "_delays", "_pending", "_errors", "_attempts", "_started", "_delay")
    
    def __init__(self, options: RetryOptions) -> None:
        self._options = options
        curve = options.delay_curve
        self._delays: tuple[float, ...] = tuple(curve.delay(i) for i in range(options.retries))
        self._pending: list[float] = list(self._delays)
        self._errors: list[object] = []
        self._attempts = 1
        self._started = time.monotonic()
        self._delay: float | None = None
    
    @property
    def options(self) -> RetryOptions:
        return self._options
    
    @property
    def delays(self) -> tuple[float, ...]:
        return self._delays
    
    @property
    def attempts(self) -> int:
        """Attempts started so far, including the current one."""
        return self._attempts
    
    @property
    def delay(self) -> float | None:
        """Delay before the most recently scheduled attempt."""
        return self._delay
    
    @property
    def errors(self) -> tuple[object, ...]:
        """Recorded causes, oldest first."""
        return tuple(self._errors)
    
    @property
    def has_remaining(self) -> bool:
        return bool(self._pending) or (self._options.forever and bool(self._delays))
    
    @property
    def main_error(self) -> object:
        """Most frequently recorded cause. Ties go to the most recent one."""
        if not self._errors:
            return None
        counts = Counter(_error_key(e) for e in self._errors)
        best, best_count = None, 0
        for err in self._errors:
            if (n := counts[_error_key(err)]) >= best_count:
                best, best_count = err, n
        return best
    
    def _timed_out(self) -> bool:
        limit = self._options.max_retry_time
        return limit is not None and time.monotonic() - self._started >= limit
    
    def retry(self, cause: object = None) -> bool:
        """Record a failure and schedule the next attempt if any remain.
        
        Returns:
            True if another attempt is scheduled (see ``delay``), False once
            the schedule is exhausted
        """
        if self._options.forever:
            self._errors = [cause]
        else:
            self._errors.append(cause)
        
        if self._timed_out():
            logger.debug(f"Retry window of {self._options.max_retry_time}s elapsed after {self._attempts} attempts")
            return False
        
        if self._pending:
            self._delay = self._pending.pop(0)
        elif self._options.forever and self._delays:
            self._delay = self._delays[-1]
        else:
            return False
        
        self._attempts += 1
        return True
    
    async def wait(self) -> None:
        """Sleep for the delay of the scheduled attempt."""
        await asyncio.sleep(self._delay or 0.0)
