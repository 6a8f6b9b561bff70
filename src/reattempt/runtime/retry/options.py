"""Retry options for a single operation.

Immutable once built. Field names follow the documented configuration;
``min_timeout``/``max_timeout`` are accepted as aliases.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Annotated, Any, Callable, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from reattempt.foundation.config import get_settings

from .backoff import Backoff, ExponentialBackoff

# (attempt, cause, delay) -> None
RetryCallback = Callable[[int, object, float], None]


class RetryOptions(BaseModel):
    """Configuration for one retried operation.
    
    Attributes:
        retries: Attempts allowed after the first one (0 = single attempt)
        factor: Exponential growth factor for delays
        min_delay: Delay before the first retry, seconds
        max_delay: Upper bound for any delay, seconds
        randomize: Multiply each delay by a random 1-2x
        forever: Keep retrying at the last delay once ``retries`` is used up
        max_retry_time: Stop scheduling retries once this many seconds have
            elapsed since the first attempt
        backoff: Custom delay curve replacing the exponential one
        on_retry: Best-effort callback fired whenever a retry is scheduled
    
    Example:
        >>> RetryOptions(retries=3, min_timeout=0.5, factor=1)
        RetryOptions(retries=3, factor=1.0, min_delay=0.5, max_delay=inf, ...)
    """
    
    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # For Backoff protocol
        populate_by_name=True,
        extra="forbid",
        revalidate_instances="never",
    )
    
    retries: Annotated[int, Field(ge=0)] = 10
    factor: Annotated[float, Field(ge=1.0)] = 2.0
    min_delay: Annotated[float, Field(ge=0.0, validation_alias=AliasChoices("min_delay", "min_timeout"))] = 1.0
    max_delay: Annotated[float, Field(ge=0.0, validation_alias=AliasChoices("max_delay", "max_timeout"))] = math.inf
    randomize: bool = False
    forever: bool = False
    max_retry_time: Optional[Annotated[float, Field(gt=0.0)]] = None
    backoff: Backoff | None = Field(default=None, repr=False)
    on_retry: RetryCallback | None = Field(default=None, exclude=True, repr=False)
    
    @model_validator(mode="after")
    def _check_bounds(self) -> RetryOptions:
        if self.max_delay < self.min_delay:
            raise ValueError("max_delay must be >= min_delay")
        return self
    
    @property
    def delay_curve(self) -> Backoff:
        """The backoff in effect: the custom one, or exponential from these options."""
        return self.backoff or ExponentialBackoff(self.min_delay, self.max_delay, self.factor, self.randomize)
    
    @classmethod
    def from_settings(cls, **overrides: Any) -> RetryOptions:
        """Build options from environment-backed defaults plus overrides."""
        return cls(**{**get_settings().retry.model_dump(), **canonical_fields(overrides)})


_ALIASES = {"min_timeout": "min_delay", "max_timeout": "max_delay"}


def canonical_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Rename ``min_timeout``/``max_timeout`` keys to their field names."""
    return {_ALIASES.get(k, k): v for k, v in fields.items()}


def coerce_options(options: RetryOptions | Mapping[str, Any] | None = None, **overrides: Any) -> RetryOptions:
    """Normalize the accepted option forms into a RetryOptions.
    
    Keyword overrides and mapping fields are layered on the environment-backed
    settings defaults, so both spellings of the same options behave alike. A
    ready-made RetryOptions keeps its own values (constructing one directly
    uses the fixed field defaults) and only the overrides are applied to it.
    """
    overrides = canonical_fields(overrides)
    if options is None:
        return RetryOptions.from_settings(**overrides)
    if isinstance(options, RetryOptions):
        if not overrides:
            return options
        return RetryOptions(**{**{name: getattr(options, name) for name in RetryOptions.model_fields}, **overrides})
    if isinstance(options, Mapping):
        return RetryOptions.from_settings(**{**canonical_fields(options), **overrides})
    raise TypeError(f"options must be RetryOptions, a mapping or None, got {type(options).__name__}")
