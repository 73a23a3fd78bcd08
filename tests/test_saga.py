"""Unit tests for Saga and RetryPolicy."""

import asyncio

import pytest

from mat_backend.application.saga import RetryPolicy, Saga
from mat_backend.domain.exceptions import CompanyCreationFailed, DuplicateAccount, StepFailed


class TestSaga:
    async def test_compensations_run_in_reverse_order(self) -> None:
        undone = []
        saga = Saga("test")

        async def ok(value):
            return value

        async def undo(value):
            undone.append(value)

        await saga.step("a", lambda: ok("a"), compensation=undo)
        await saga.step("b", lambda: ok("b"), compensation=undo)

        async def boom():
            raise RuntimeError("db down")

        with pytest.raises(CompanyCreationFailed) as exc_info:
            await saga.step("c", boom, error=CompanyCreationFailed)

        assert undone == ["b", "a"]
        assert exc_info.value.cause == "db down"
        assert exc_info.value.compensations == ["b", "a"]
        assert saga.completed == ["a", "b"]

    async def test_typed_domain_error_is_reraised_unchanged(self) -> None:
        saga = Saga("test")

        async def duplicate():
            raise DuplicateAccount("a@b.co")

        with pytest.raises(DuplicateAccount):
            await saga.step("identity", duplicate, error=StepFailed)

    async def test_timeout_becomes_step_failure(self) -> None:
        saga = Saga("test", timeout=0.01)

        async def slow():
            await asyncio.sleep(1)

        with pytest.raises(StepFailed) as exc_info:
            await saga.step("slow", slow)

        assert "timed out" in exc_info.value.cause

    async def test_failing_compensation_is_retried_then_recorded(self) -> None:
        attempts = []
        saga = Saga("test", retry_policy=RetryPolicy(max_attempts=3, backoff_seconds=0))

        async def ok():
            return "x"

        async def flaky_undo(_):
            attempts.append(1)
            raise RuntimeError("still down")

        await saga.step("a", ok, compensation=flaky_undo)

        async def boom():
            raise RuntimeError("fail")

        with pytest.raises(StepFailed) as exc_info:
            await saga.step("b", boom)

        assert len(attempts) == 3
        assert exc_info.value.compensation_failures == ["a"]
        assert exc_info.value.compensations == []

    async def test_compensation_succeeds_on_retry(self) -> None:
        attempts = []
        saga = Saga("test", retry_policy=RetryPolicy(max_attempts=2, backoff_seconds=0))

        async def ok():
            return "x"

        async def undo(_):
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("transient")

        await saga.step("a", ok, compensation=undo)
        await saga.compensate()

        assert saga.compensated == ["a"]
        assert saga.compensation_failures == []


def test_retry_delay_is_exponential() -> None:
    policy = RetryPolicy(max_attempts=4, backoff_seconds=0.5)
    assert [policy.delay(n) for n in (1, 2, 3)] == [0.5, 1.0, 2.0]
