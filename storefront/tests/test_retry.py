"""
Retry decorator behavior.
"""
import pytest
from unittest.mock import AsyncMock, patch

from storefront.errors import RetryExhaustedError, TransportError
from storefront.utils.retry import async_retry


class FlakyError(Exception):
    pass


@pytest.mark.asyncio
async def test_returns_first_success():
    calls = []

    @async_retry(max_retries=3, exceptions=(FlakyError,))
    async def read():
        calls.append(1)
        if len(calls) < 3:
            raise FlakyError("not yet")
        return "done"

    with patch("storefront.utils.retry.asyncio.sleep", new=AsyncMock()) as mock_sleep:
        assert await read() == "done"

    assert len(calls) == 3
    assert mock_sleep.await_count == 2


@pytest.mark.asyncio
async def test_backoff_grows_exponentially():
    @async_retry(max_retries=3, backoff_factor=2.0, exceptions=(FlakyError,))
    async def read():
        raise FlakyError("down")

    with patch("storefront.utils.retry.asyncio.sleep", new=AsyncMock()) as mock_sleep:
        with pytest.raises(RetryExhaustedError):
            await read()

    delays = [call.args[0] for call in mock_sleep.await_args_list]
    assert delays == [1.0, 2.0, 4.0]


@pytest.mark.asyncio
async def test_exhaustion_is_a_transport_error():
    @async_retry(max_retries=0, exceptions=(FlakyError,))
    async def read():
        raise FlakyError("down")

    with pytest.raises(TransportError) as exc_info:
        await read()

    assert isinstance(exc_info.value.__cause__, FlakyError)


@pytest.mark.asyncio
async def test_other_exceptions_are_not_retried():
    calls = []

    @async_retry(max_retries=3, exceptions=(FlakyError,))
    async def read():
        calls.append(1)
        raise KeyError("bug")

    with pytest.raises(KeyError):
        await read()

    assert len(calls) == 1


@pytest.mark.asyncio
async def test_zero_from_config_means_no_retries():
    calls = []

    @async_retry(exceptions=(FlakyError,))
    async def read():
        calls.append(1)
        raise FlakyError("down")

    with patch("storefront.utils.retry.config.MAX_RETRIES", 0):
        with pytest.raises(RetryExhaustedError):
            await read()

    assert len(calls) == 1
