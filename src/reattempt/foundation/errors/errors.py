"""Exception hierarchy for reattempt.

Only failures produced by the library itself live here. Failures raised by
a retried unit of work are surfaced unchanged.
"""

from __future__ import annotations


class ReattemptError(Exception):
    """Base exception for all reattempt errors."""

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class RejectedValueError(ReattemptError):
    """Raised when an operation's final cause is not an exception.
    
    Python can only raise exceptions, so a cause such as ``None`` (a retry
    signaled without a reason) or a plain value is carried unchanged on
    ``cause`` instead of being turned into a synthetic error.
    """

    def __init__(self, cause: object) -> None:
        super().__init__(
            "operation rejected without an exception" if cause is None else f"operation rejected with {cause!r}",
            details={"cause_type": type(cause).__name__},
        )
        self.cause = cause
