"""Error types and operation outcomes.

- ReattemptError/RejectedValueError: library exceptions
- Outcome/Resolved/Rejected: terminal result of a retried operation
- RetryRequested: explicit per-attempt retry value
"""

from .errors import ReattemptError, RejectedValueError
from .outcome import RETRY_CODE, Outcome, Rejected, Resolved, RetryRequested, raise_cause

__all__ = [
    "ReattemptError", "RejectedValueError",
    "Outcome", "Resolved", "Rejected", "RetryRequested",
    "RETRY_CODE", "raise_cause",
]
