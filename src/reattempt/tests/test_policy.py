"""Tests for the method retry adapter."""

from __future__ import annotations

import asyncio
import logging

import pytest
from pydantic import ValidationError

from reattempt import RetryPolicy, retry_on, with_retry

FAST = {"min_delay": 0.001, "max_delay": 0.005}


class CustomError(Exception):
    pass


class RecordingLogger:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict]] = []
    
    def warning(self, msg: str, *, extra: dict) -> None:
        self.calls.append((msg, extra))


class Service:
    def __init__(self, fail_times: int, error: type[Exception] = Exception) -> None:
        self.count = 0
        self.fail_times = fail_times
        self.error = error
    
    @retry_on(retries=3, errors=(Exception,), **FAST)
    async def do_something(self) -> str:
        self.count += 1
        await asyncio.sleep(0.001)
        if self.count <= self.fail_times:
            raise self.error("fail")
        return "final"
    
    @retry_on(retries=3, errors=(CustomError,), **FAST)
    async def only_custom(self) -> str:
        self.count += 1
        raise ValueError("fail")
    
    @retry_on(retries=3, **FAST)
    def add(self, a: int, b: int) -> int:
        return a + b
    
    @retry_on(retries=3, **FAST)
    def echo(self, *args: object, **kwargs: object) -> tuple:
        return self, args, kwargs


# ═════════════════════════════════════════════════════════════════════════════
# Decorator
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_retries_until_success() -> None:
    service = Service(fail_times=2)
    assert await service.do_something() == "final"
    assert service.count == 3


@pytest.mark.asyncio
async def test_no_retry_on_first_success() -> None:
    service = Service(fail_times=0)
    assert await service.do_something() == "final"
    assert service.count == 1


@pytest.mark.asyncio
async def test_unclassified_error_is_not_retried() -> None:
    service = Service(fail_times=0)
    with pytest.raises(ValueError, match="fail"):
        await service.only_custom()
    assert service.count == 1


@pytest.mark.asyncio
async def test_exhaustion_raises_last_failure() -> None:
    service = Service(fail_times=10, error=CustomError)
    with pytest.raises(CustomError, match="fail"):
        await service.do_something()
    assert service.count == 4


@pytest.mark.asyncio
async def test_arguments_and_receiver_pass_through() -> None:
    service = Service(fail_times=0)
    first, second = object(), object()
    
    receiver, args, kwargs = await service.echo(first, key=second)
    
    assert receiver is service
    assert args[0] is first and len(args) == 1
    assert kwargs["key"] is second
    assert await service.add(2, 3) == 5
    assert Service.add.__name__ == "add"


@pytest.mark.asyncio
async def test_receiver_logger_warns_per_retried_attempt() -> None:
    service = Service(fail_times=2)
    service.logger = RecordingLogger()  # type: ignore[attr-defined]
    
    assert await service.do_something() == "final"
    
    calls = service.logger.calls  # type: ignore[attr-defined]
    assert [extra["attempt"] for _, extra in calls] == [1, 2]
    assert all("do_something" in msg for msg, _ in calls)


@pytest.mark.asyncio
async def test_logger_not_called_on_final_attempt() -> None:
    service = Service(fail_times=10)
    service.logger = RecordingLogger()  # type: ignore[attr-defined]
    
    with pytest.raises(Exception, match="fail"):
        await service.do_something()
    
    assert len(service.logger.calls) == 3  # type: ignore[attr-defined]


@pytest.mark.asyncio
async def test_broken_logger_does_not_mask_outcome() -> None:
    class BrokenLogger:
        def warning(self, *args, **kwargs) -> None:
            raise RuntimeError("logger down")
    
    service = Service(fail_times=1)
    service.logger = BrokenLogger()  # type: ignore[attr-defined]
    assert await service.do_something() == "final"
    
    service = Service(fail_times=10, error=CustomError)
    service.logger = BrokenLogger()  # type: ignore[attr-defined]
    with pytest.raises(CustomError):
        await service.do_something()


@pytest.mark.asyncio
async def test_non_callable_logger_is_ignored() -> None:
    service = Service(fail_times=1)
    service.logger = type("L", (), {"warning": "not callable"})()  # type: ignore[attr-defined]
    assert await service.do_something() == "final"


@pytest.mark.asyncio
async def test_stdlib_logger_receives_extra(caplog: pytest.LogCaptureFixture) -> None:
    service = Service(fail_times=1)
    service.logger = logging.getLogger("tests.service")  # type: ignore[attr-defined]
    
    with caplog.at_level(logging.WARNING, logger="tests.service"):
        assert await service.do_something() == "final"
    
    records = [r for r in caplog.records if r.name == "tests.service"]
    assert len(records) == 1
    assert records[0].attempt == 1  # type: ignore[attr-defined]


# ═════════════════════════════════════════════════════════════════════════════
# Composition & Policy
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_with_retry_on_plain_function() -> None:
    calls = 0
    
    def flaky(x: int) -> int:
        nonlocal calls
        calls += 1
        if calls < 3:
            raise ConnectionError("down")
        return x * 2
    
    wrapped = with_retry(RetryPolicy(retries=5, errors=ConnectionError, **FAST), flaky)
    assert await wrapped(21) == 42
    assert calls == 3


@pytest.mark.asyncio
async def test_predicate_classifier() -> None:
    calls = 0
    
    async def flaky() -> str:
        nonlocal calls
        calls += 1
        raise OSError(503 if calls < 2 else 404, "status")
    
    policy = RetryPolicy(retries=5, errors=[lambda e: e.errno == 503], **FAST)
    with pytest.raises(OSError) as info:
        await with_retry(policy, flaky)()
    assert info.value.errno == 404
    assert calls == 2


@pytest.mark.asyncio
async def test_policy_on_retry_callback() -> None:
    seen: list[int] = []
    
    async def always() -> None:
        raise TimeoutError()
    
    policy = RetryPolicy(retries=2, on_retry=lambda n, err, delay: seen.append(n), **FAST)
    with pytest.raises(TimeoutError):
        await with_retry(policy, always)()
    assert seen == [1, 2]


def test_policy_defaults() -> None:
    policy = RetryPolicy()
    assert policy.retries == 3
    assert (policy.min_delay, policy.max_delay) == (0.1, 0.5)
    assert policy.errors == (Exception,)


def test_policy_timeout_aliases() -> None:
    policy = RetryPolicy(min_timeout=0.01, max_timeout=0.05)
    options = policy.to_options()
    assert (options.min_delay, options.max_delay) == (0.01, 0.05)


def test_policy_rejects_bad_classifier() -> None:
    with pytest.raises(ValidationError):
        RetryPolicy(errors=[42])


def test_matches() -> None:
    policy = RetryPolicy(errors=(KeyError, lambda e: "retry" in str(e)))
    assert policy.matches(KeyError("k"))
    assert policy.matches(ValueError("please retry"))
    assert not policy.matches(ValueError("nope"))


def test_retry_on_rejects_mixed_arguments() -> None:
    with pytest.raises(TypeError):
        retry_on(RetryPolicy(), retries=2)


# ═════════════════════════════════════════════════════════════════════════════
# Warning Receiver
# ═════════════════════════════════════════════════════════════════════════════


class Client:
    def __init__(self) -> None:
        self.logger = RecordingLogger()
        self.count = 0
    
    async def fetch(self, path: str) -> str:
        self.count += 1
        if self.count <= 2:
            raise ConnectionError("down")
        return path


@pytest.mark.asyncio
async def test_bound_method_uses_its_object_logger() -> None:
    client = Client()
    fetch = with_retry(RetryPolicy(retries=3, **FAST), client.fetch)
    
    assert await fetch("/status") == "/status"
    assert [extra["attempt"] for _, extra in client.logger.calls] == [1, 2]


@pytest.mark.asyncio
async def test_plain_function_ignores_argument_logger() -> None:
    calls = 0
    
    async def send(target: object) -> str:
        nonlocal calls
        calls += 1
        if calls < 2:
            raise ConnectionError("down")
        return "sent"
    
    target = Client()
    assert await with_retry(RetryPolicy(retries=3, **FAST), send)(target) == "sent"
    assert target.logger.calls == []


@pytest.mark.asyncio
async def test_decorated_plain_function_ignores_argument_logger() -> None:
    calls = 0
    
    @retry_on(retries=3, **FAST)
    async def send(target: object) -> str:
        nonlocal calls
        calls += 1
        if calls < 2:
            raise ConnectionError("down")
        return "sent"
    
    target = Client()
    assert await send(target) == "sent"
    assert calls == 2
    assert target.logger.calls == []
