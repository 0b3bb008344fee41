"""Power-status polling for Bravia TVs.

A fixed-interval timer asks ``system.getPowerStatus`` whether the panel is
on. At most one poll is in flight at a time: a slow or unresponsive TV makes
ticks get skipped instead of piling up requests. Every failure is reported
as "off" because an unreachable TV is not controllable anyway.
"""

from __future__ import annotations

import asyncio
import logging

from .api_base import BraviaClient
from .api_constants import (
    METHOD_GET_POWER_STATUS,
    METHOD_SET_POWER_STATUS,
    POWER_STATUS_ACTIVE,
    SERVICE_SYSTEM,
)
from .const import DEFAULT_POLL_INTERVAL, STATE_POWER
from .state import BraviaState

_LOGGER = logging.getLogger(__name__)


class PowerPoller:
    """Single-flight power poller with edge-triggered change reporting."""

    def __init__(
        self,
        client: BraviaClient,
        state: BraviaState,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._client = client
        self._state = state
        self.interval = interval

        self._timer: asyncio.Task[None] | None = None
        self._poll_task: asyncio.Task[bool] | None = None
        self._updating = False
        self._stopped = False

    @property
    def power(self) -> bool:
        return self._state.power

    @property
    def updating(self) -> bool:
        """True while a poll request is in flight."""
        return self._updating

    # ------------------------------------------------------------------
    # Timer lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the interval timer; the first poll is issued immediately."""
        if self._timer is not None or self._stopped:
            return
        self._timer = asyncio.create_task(self._async_tick_loop(), name="bravia_power_poll")

    def stop(self) -> None:
        """Cancel the timer. In-flight polls run to completion."""
        if self._stopped:
            return
        self._stopped = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        _LOGGER.debug("Power polling stopped for %s", self._client.base_url)

    async def _async_tick_loop(self) -> None:
        while True:
            if not self._updating:
                self._poll_task = asyncio.create_task(self.async_poll())
            await asyncio.sleep(self.interval)

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    async def async_poll(self) -> bool:
        """Refresh the power state.

        Returns False without touching the network when a poll is already
        in flight.
        """
        if self._updating:
            return False

        self._updating = True
        try:
            result = await self._client.call(SERVICE_SYSTEM, METHOD_GET_POWER_STATUS)
            power = result[0]["status"] == POWER_STATUS_ACTIVE
        except Exception as err:  # noqa: BLE001
            _LOGGER.debug("Power poll failed for %s, assuming off: %s", self._client.base_url, err)
            power = False
        finally:
            self._updating = False

        self._update_power(power)
        return True

    async def set_power(self, power: bool) -> None:
        """Switch the TV on or off and apply the new state without waiting for a poll."""
        await self._client.call(SERVICE_SYSTEM, METHOD_SET_POWER_STATUS, params={"status": power})
        self._update_power(power)

    def _update_power(self, power: bool) -> None:
        if self._state.apply_diff({STATE_POWER: power}):
            _LOGGER.info("Power changed for %s: %s", self._client.base_url, "on" if power else "off")
