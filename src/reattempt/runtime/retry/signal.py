"""Retry signal protocol.

A unit of work asks for another attempt by raising the value produced by
its ``retry`` capability. Signals are recognized structurally (a ``code``
of ``"ERETRY"`` plus a ``retried`` attribute), never by class identity, so
equivalent markers from other sources decode the same way.

Signals never nest: signaling with an existing signal re-wraps its
underlying cause.
"""

from __future__ import annotations

from typing import Callable, NoReturn

from reattempt.foundation.errors import RETRY_CODE

RetryFn = Callable[..., NoReturn]


class RetrySignal(Exception):
    """Raised by a unit of work to request another attempt.
    
    Attributes:
        code: Structural marker, always ``"ERETRY"``
        retried: The underlying cause (any value, including None)
    """
    
    code = RETRY_CODE
    
    def __init__(self, cause: object = None) -> None:
        super().__init__("Retrying")
        self.retried = cause
    
    @property
    def cause(self) -> object:
        return self.retried
    
    def __repr__(self) -> str:
        return f"RetrySignal({self.retried!r})"


def is_retry_signal(failure: object) -> bool:
    """Whether ``failure`` carries the retry marker."""
    return getattr(failure, "code", None) == RETRY_CODE and hasattr(failure, "retried")


def unwrap(failure: object) -> object:
    """Underlying cause of a retry signal; other values are returned as-is."""
    return failure.retried if is_retry_signal(failure) else failure  # type: ignore[attr-defined]


def make_signal(cause: object = None) -> RetrySignal:
    """Build a retry signal for ``cause`` without raising it."""
    return RetrySignal(unwrap(cause))


def signal_retry(cause: object = None) -> NoReturn:
    """The ``retry`` capability handed to every attempt.
    
    Raises:
        RetrySignal: always, wrapping ``cause``
    """
    raise make_signal(cause)
