"""Tests for the retry helper."""
from unittest.mock import AsyncMock

import pytest

from portfolio_proxy.errors import UpstreamError
from portfolio_proxy.utils.retry import linear_delay, retry_with_backoff


def test_linear_delay() -> None:
    delay = linear_delay(1.5)
    assert [delay(attempt) for attempt in (1, 2, 3)] == [1.5, 3.0, 4.5]


@pytest.mark.asyncio
async def test_returns_first_success_without_sleeping() -> None:
    operation = AsyncMock(return_value="ok")
    sleep = AsyncMock()

    result = await retry_with_backoff(operation, max_attempts=3, delay=linear_delay(1), sleep=sleep)

    assert result == "ok"
    assert operation.await_count == 1
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_retries_with_linear_delays_until_success() -> None:
    operation = AsyncMock(side_effect=[UpstreamError("down"), UpstreamError("down"), "ok"])
    sleep = AsyncMock()

    result = await retry_with_backoff(operation, max_attempts=3, delay=linear_delay(1), sleep=sleep)

    assert result == "ok"
    assert [call.args[0] for call in sleep.await_args_list] == [1, 2]


@pytest.mark.asyncio
async def test_raises_last_error_when_attempts_exhausted() -> None:
    operation = AsyncMock(side_effect=UpstreamError("still down"))
    sleep = AsyncMock()

    with pytest.raises(UpstreamError, match="still down"):
        await retry_with_backoff(operation, max_attempts=3, delay=linear_delay(1), sleep=sleep)

    assert operation.await_count == 3
    assert sleep.await_count == 2


@pytest.mark.asyncio
async def test_non_matching_exception_propagates_immediately() -> None:
    operation = AsyncMock(side_effect=KeyError("boom"))
    sleep = AsyncMock()

    with pytest.raises(KeyError):
        await retry_with_backoff(
            operation, max_attempts=3, delay=linear_delay(1), retry_on=(UpstreamError,), sleep=sleep
        )

    assert operation.await_count == 1


@pytest.mark.asyncio
async def test_predicate_can_veto_retry() -> None:
    operation = AsyncMock(side_effect=UpstreamError("bad request", upstream_status=400))
    sleep = AsyncMock()

    with pytest.raises(UpstreamError):
        await retry_with_backoff(
            operation,
            max_attempts=3,
            delay=linear_delay(1),
            should_retry=lambda error: error.upstream_status != 400,
            sleep=sleep,
        )

    assert operation.await_count == 1
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_rejects_zero_attempts() -> None:
    with pytest.raises(ValueError):
        await retry_with_backoff(AsyncMock(), max_attempts=0, delay=linear_delay(1))
