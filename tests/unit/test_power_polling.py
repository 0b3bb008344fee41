"""Test power polling: single-flight, edge-triggered, failure-as-off."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from custom_components.bravia_tv.api_base import BraviaAuthenticationError, BraviaConnectionError
from custom_components.bravia_tv.power_polling import PowerPoller
from custom_components.bravia_tv.state import BraviaState


def _status(value):
    return [{"status": value}]


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.base_url = "http://192.168.1.50/sony"
    client.call = AsyncMock(return_value=_status("standby"))
    return client


@pytest.fixture
def state():
    return BraviaState()


@pytest.fixture
def power_events(state):
    events = []
    state.add_listener(lambda key, value: events.append(value) if key == "power" else None)
    return events


@pytest.fixture
def poller(mock_client, state):
    return PowerPoller(mock_client, state, interval=0.01)


@pytest.mark.asyncio
async def test_poll_calls_get_power_status(poller, mock_client):
    mock_client.call.return_value = _status("active")

    assert await poller.async_poll() is True

    mock_client.call.assert_awaited_once_with("system", "getPowerStatus")
    assert poller.power is True


@pytest.mark.asyncio
async def test_notifications_are_edge_triggered(poller, mock_client, power_events):
    """A notification fires only when the value differs from the previous one."""
    sequence = ["standby", "active", "active", "active", "standby", "standby", "active"]

    for value in sequence:
        mock_client.call.return_value = _status(value)
        await poller.async_poll()

    assert power_events == [True, False, True]


@pytest.mark.asyncio
async def test_unpolled_state_is_off(poller, power_events):
    assert poller.power is False

    await poller.async_poll()

    assert power_events == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        BraviaConnectionError("unreachable"),
        BraviaAuthenticationError("No longer authenticated with TV"),
        KeyError("status"),
    ],
)
async def test_failure_is_treated_as_off(poller, mock_client, power_events, error):
    mock_client.call.return_value = _status("active")
    await poller.async_poll()

    mock_client.call.side_effect = error
    assert await poller.async_poll() is True

    assert poller.power is False
    assert power_events == [True, False]
    assert poller.updating is False


@pytest.mark.asyncio
async def test_second_poll_is_suppressed_while_in_flight(poller, mock_client):
    release = asyncio.Event()

    async def _slow_call(*args, **kwargs):
        await release.wait()
        return _status("active")

    mock_client.call.side_effect = _slow_call

    first = asyncio.create_task(poller.async_poll())
    await asyncio.sleep(0)
    assert poller.updating is True

    assert await poller.async_poll() is False
    assert mock_client.call.await_count == 1

    release.set()
    assert await first is True
    assert poller.power is True
    assert poller.updating is False


@pytest.mark.asyncio
async def test_set_power_updates_state_without_polling(poller, mock_client, power_events):
    mock_client.call.return_value = []

    await poller.set_power(True)

    mock_client.call.assert_awaited_once_with("system", "setPowerStatus", params={"status": True})
    assert poller.power is True
    assert power_events == [True]


@pytest.mark.asyncio
async def test_set_power_failure_keeps_state(poller, mock_client, power_events):
    mock_client.call.side_effect = BraviaConnectionError("unreachable")

    with pytest.raises(BraviaConnectionError):
        await poller.set_power(True)

    assert poller.power is False
    assert power_events == []


@pytest.mark.asyncio
async def test_timer_polls_until_stopped(poller, mock_client):
    mock_client.call.return_value = _status("active")

    poller.start()
    await asyncio.sleep(0.05)
    poller.stop()
    await asyncio.sleep(0.005)
    calls_at_stop = mock_client.call.await_count
    await asyncio.sleep(0.05)

    assert calls_at_stop >= 2
    assert mock_client.call.await_count == calls_at_stop
    assert poller.power is True


@pytest.mark.asyncio
async def test_timer_skips_ticks_while_poll_in_flight(poller, mock_client):
    release = asyncio.Event()

    async def _hanging_call(*args, **kwargs):
        await release.wait()
        return _status("active")

    mock_client.call.side_effect = _hanging_call

    poller.start()
    await asyncio.sleep(0.05)

    assert mock_client.call.await_count == 1

    poller.stop()
    release.set()
    await asyncio.sleep(0.01)


def test_stop_is_safe_before_start(poller):
    poller.stop()
    poller.stop()
    assert poller._timer is None


@pytest.mark.asyncio
async def test_failing_listener_does_not_break_poll(poller, mock_client, state):
    def _broken(key, value):
        raise RuntimeError("listener bug")

    state.add_listener(_broken)
    mock_client.call.return_value = _status("active")

    assert await poller.async_poll() is True

    assert poller.power is True
    assert poller.updating is False
