"""Retry policies for methods and plain callables.

Wraps a callable so that any failure matching the policy's error
classification is retried automatically, without the callable handling a
``retry`` capability itself. Failures outside the classification end the
call immediately and consume no retries.

Example:
    >>> class Client:
    ...     logger = logging.getLogger("client")
    ...     
    ...     @retry_on(retries=3, errors=(ConnectionError, TimeoutError))
    ...     async def fetch(self, path: str) -> bytes:
    ...         return await self._session.get(path)
    
    >>> # Or compose explicitly
    >>> fetch = with_retry(RetryPolicy(retries=5, max_delay=2.0), client.fetch)
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Iterable
from typing import Annotated, Any, Callable, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from reattempt.foundation.config import get_settings

from .options import RetryCallback, RetryOptions, canonical_fields
from .orchestrator import call_hook, promise_retry
from .signal import RetryFn

logger = logging.getLogger("reattempt.retry.policy")

F = TypeVar("F", bound=Callable[..., Any])

# An exception class, or a predicate over the raised exception
Classifier = Any

def _is_exception_type(item: object) -> bool:
    return isinstance(item, type) and issubclass(item, BaseException)


class RetryPolicy(BaseModel):
    """Retry configuration for a wrapped callable.
    
    Attributes:
        retries: Retries after the first call (0 = no retries)
        min_delay: Delay before the first retry, seconds
        max_delay: Upper bound for any delay, seconds
        factor: Exponential growth factor for delays
        randomize: Multiply each delay by a random 1-2x
        errors: Exception classes or predicates; a failure matching any of
            them is retried
        on_retry: Optional callback ``(attempt, error, delay)`` per retry
    
    Constructed directly, unset fields take the fixed defaults below.
    ``RetryPolicy.from_settings`` (used by ``retry_on``) takes them from
    the ``REATTEMPT_POLICY_*`` settings instead.
    """
    
    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        populate_by_name=True,
        extra="forbid",
        revalidate_instances="never",
    )
    
    retries: Annotated[int, Field(ge=0)] = 3
    min_delay: Annotated[float, Field(ge=0.0, validation_alias=AliasChoices("min_delay", "min_timeout"))] = 0.1
    max_delay: Annotated[float, Field(ge=0.0, validation_alias=AliasChoices("max_delay", "max_timeout"))] = 0.5
    factor: Annotated[float, Field(ge=1.0)] = 2.0
    randomize: bool = False
    errors: tuple[Classifier, ...] = (Exception,)
    on_retry: RetryCallback | None = Field(default=None, exclude=True, repr=False)
    
    @field_validator("errors", mode="before")
    @classmethod
    def _normalize_errors(cls, v: Classifier | Iterable[Classifier]) -> tuple[Classifier, ...]:
        """Accept a single classifier or any iterable of them."""
        items = (v,) if _is_exception_type(v) or not isinstance(v, Iterable) else tuple(v)
        for item in items:
            if not (_is_exception_type(item) or callable(item)):
                raise ValueError(f"error classifier must be an exception class or a predicate, got {item!r}")
        return items
    
    @model_validator(mode="after")
    def _check_bounds(self) -> RetryPolicy:
        if self.max_delay < self.min_delay:
            raise ValueError("max_delay must be >= min_delay")
        return self
    
    @classmethod
    def from_settings(cls, **fields: Any) -> RetryPolicy:
        """Build a policy from environment-backed defaults plus explicit fields."""
        return cls(**{**get_settings().policy.model_dump(), **canonical_fields(fields)})
    
    def matches(self, exc: BaseException) -> bool:
        """Whether ``exc`` falls under any configured classification."""
        return any(isinstance(exc, c) if _is_exception_type(c) else bool(c(exc)) for c in self.errors)
    
    def to_options(self) -> RetryOptions:
        return RetryOptions(
            retries=self.retries,
            min_delay=self.min_delay,
            max_delay=self.max_delay,
            factor=self.factor,
            randomize=self.randomize,
            on_retry=self.on_retry,
        )


def _warning_hook(receiver: object) -> Callable[..., object] | None:
    """The receiver's ``logger.warning`` (or ``logger.warn``), if it has one."""
    log = getattr(receiver, "logger", None)
    for attr in ("warning", "warn"):
        if callable(hook := getattr(log, attr, None)):
            return hook
    return None


async def _call_with_retry(
    policy: RetryPolicy, options: RetryOptions, fn: Callable[..., Any], label: str,
    args: tuple[Any, ...], kwargs: dict[str, Any], receiver: object,
) -> Any:
    async def attempt(retry: RetryFn, number: int) -> Any:
        try:
            result = fn(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            if not policy.matches(exc):
                logger.debug(f"[{label}] {type(exc).__name__} is not retryable under this policy")
                raise
            if number <= policy.retries:
                call_hook(
                    _warning_hook(receiver), f"Retrying method {label}",
                    label=label, extra={"attempt": number, "error": exc},
                )
            retry(exc)
        return result
    
    return await promise_retry(attempt, options, name=label)


def with_retry(policy: RetryPolicy, fn: Callable[..., Any], *, name: str | None = None) -> Callable[..., Any]:
    """Wrap ``fn`` so classified failures are retried under ``policy``.
    
    The wrapper is always a coroutine function and passes arguments through
    untouched. When ``fn`` is a bound method whose object has a ``logger``,
    a warning is emitted for every retried failure.
    """
    label = name or getattr(fn, "__qualname__", repr(fn))
    options = policy.to_options()
    receiver = getattr(fn, "__self__", None)
    
    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        return await _call_with_retry(policy, options, fn, label, args, kwargs, receiver)
    
    return wrapper


class RetryingMethod:
    """Descriptor produced by ``retry_on``.
    
    Accessed through an instance it binds that instance as the receiver, so
    the instance's ``logger`` gets the retry warnings. Called directly (plain
    function, or through the class) no receiver is assumed.
    """
    
    def __init__(self, policy: RetryPolicy, fn: Callable[..., Any]) -> None:
        self._policy = policy
        self._fn = fn
        self._options = policy.to_options()
        self._label = getattr(fn, "__qualname__", repr(fn))
        functools.update_wrapper(self, fn)
    
    @property
    def policy(self) -> RetryPolicy:
        return self._policy
    
    async def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return await _call_with_retry(self._policy, self._options, self._fn, self._label, args, kwargs, None)
    
    def __get__(self, instance: object, owner: type | None = None) -> Any:
        if instance is None:
            return self
        
        @functools.wraps(self._fn)
        async def bound(*args: Any, **kwargs: Any) -> Any:
            return await _call_with_retry(
                self._policy, self._options, self._fn, self._label, (instance, *args), kwargs, instance,
            )
        
        return bound


def retry_on(policy: RetryPolicy | None = None, **fields: Any) -> Callable[[F], F]:
    """Decorator form of ``with_retry`` for methods and functions.
    
    Args:
        policy: Complete policy; when omitted one is built from settings
            defaults and ``fields`` (``retries``, ``min_delay``/``min_timeout``,
            ``max_delay``/``max_timeout``, ``errors``, ...). Constructing
            ``RetryPolicy(...)`` directly uses the fixed field defaults instead.
    """
    if policy is not None and fields:
        raise TypeError("pass either a RetryPolicy or policy fields, not both")
    resolved = policy or RetryPolicy.from_settings(**fields)
    
    def decorate(fn: F) -> F:
        return RetryingMethod(resolved, fn)  # type: ignore[return-value]
    
    return decorate
