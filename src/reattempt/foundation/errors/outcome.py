"""Terminal outcome of a retried operation.

A discriminated union of ``Resolved(value)`` and ``Rejected(cause)``. The
cause of a rejection is kept exactly as produced, including ``None``.
``RetryRequested(cause)`` is the attempt-level variant a unit of work may
return instead of raising a retry signal.

Examples:
    >>> Resolved(42).map(lambda x: x * 2).unwrap()
    84
    >>> match await execute(fetch):
    ...     case Resolved(value): use(value)
    ...     case Rejected(cause): report(cause)
"""

from __future__ import annotations

from typing import Callable, Generic, NoReturn, TypeVar

from .errors import RejectedValueError

T = TypeVar("T")
U = TypeVar("U")

RETRY_CODE = "ERETRY"


def raise_cause(cause: object) -> NoReturn:
    """Raise a final cause, wrapping non-exception values in RejectedValueError."""
    if isinstance(cause, BaseException):
        raise cause
    raise RejectedValueError(cause)


class Outcome(Generic[T]):
    """Base for ``Resolved`` and ``Rejected``. Exactly one per operation."""
    
    __slots__ = ()
    
    def is_resolved(self) -> bool:
        return isinstance(self, Resolved)
    
    def is_rejected(self) -> bool:
        return isinstance(self, Rejected)
    
    def unwrap(self) -> T:
        """Return the resolved value, or raise the rejection cause."""
        if isinstance(self, Resolved):
            return self.value
        raise_cause(self.cause)  # type: ignore[attr-defined]
    
    def unwrap_or(self, default: T) -> T:
        return self.value if isinstance(self, Resolved) else default
    
    def map(self, f: Callable[[T], U]) -> Outcome[U]:
        """Apply f to a resolved value. Rejections pass through."""
        return Resolved(f(self.value)) if isinstance(self, Resolved) else self  # type: ignore[return-value]


class Resolved(Outcome[T]):
    __slots__ = ("value",)
    __match_args__ = ("value",)
    
    def __init__(self, value: T) -> None:
        self.value = value
    
    def __eq__(self, other: object) -> bool:
        return isinstance(other, Resolved) and self.value == other.value
    
    def __hash__(self) -> int:
        return hash(("Resolved", self.value))
    
    def __repr__(self) -> str:
        return f"Resolved({self.value!r})"


class Rejected(Outcome[T]):
    __slots__ = ("cause",)
    __match_args__ = ("cause",)
    
    def __init__(self, cause: object = None) -> None:
        self.cause = cause
    
    def __eq__(self, other: object) -> bool:
        return isinstance(other, Rejected) and self.cause is other.cause
    
    def __hash__(self) -> int:
        return hash(("Rejected", id(self.cause)))
    
    def __repr__(self) -> str:
        return f"Rejected({self.cause!r})"


class RetryRequested:
    """Explicit "retry this attempt" value a unit of work may return.
    
    Carries the same structural marker as ``RetrySignal`` (``code`` and
    ``retried``) so both decode identically.
    """
    
    __slots__ = ("retried",)
    __match_args__ = ("retried",)
    code = RETRY_CODE
    
    def __init__(self, cause: object = None) -> None:
        self.retried = cause
    
    @property
    def cause(self) -> object:
        return self.retried
    
    def __eq__(self, other: object) -> bool:
        return isinstance(other, RetryRequested) and self.retried is other.retried
    
    def __hash__(self) -> int:
        return hash(("RetryRequested", id(self.retried)))
    
    def __repr__(self) -> str:
        return f"RetryRequested({self.retried!r})"
