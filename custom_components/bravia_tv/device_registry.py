"""Bravia device registry.

Tracks one controller per TV UDN as the discovery layer reports devices
appearing and disappearing. A TV that re-announces itself replaces its
previous controller, which is torn down first.
"""

from __future__ import annotations

import logging

from aiohttp import ClientSession

from .api_base import BraviaInvalidDeviceError
from .device import BraviaTV
from .models import ControllerOptions, DeviceDescriptor
from .storage import CookieStore

_LOGGER = logging.getLogger(__name__)


class BraviaDeviceRegistry:
    """Owns the controllers for every available TV, keyed by UDN."""

    def __init__(
        self,
        store: CookieStore,
        session: ClientSession | None = None,
        options: ControllerOptions | None = None,
    ) -> None:
        self._store = store
        self._session = session
        self._options = options
        self._devices: dict[str, BraviaTV] = {}

        _LOGGER.debug("[Bravia] Device registry initialized")

    async def async_device_available(self, descriptor: DeviceDescriptor) -> BraviaTV | None:
        """Register a controller for *descriptor*.

        Returns None when the device lacks the Scalar API or IRCC endpoint.
        """
        existing = self._devices.pop(descriptor.udn, None)
        if existing is not None:
            _LOGGER.debug("[Bravia] Replacing controller for %s", descriptor.udn)
            await existing.async_remove()

        try:
            device = BraviaTV.from_descriptor(
                descriptor,
                self._store,
                session=self._session,
                options=self._options,
            )
        except BraviaInvalidDeviceError as err:
            _LOGGER.debug("[Bravia] Ignoring %s: %s", descriptor.udn, err)
            return None

        await device.async_setup()
        self._devices[device.udn] = device
        _LOGGER.info("[Bravia] Registered %s (%s)", device.name, device.udn)
        return device

    async def async_device_unavailable(self, udn: str) -> None:
        device = self._devices.pop(udn, None)
        if device is None:
            return
        await device.async_remove()
        _LOGGER.info("[Bravia] Unregistered %s (%s)", device.name, udn)

    async def async_remove_all(self) -> None:
        for udn in list(self._devices):
            await self.async_device_unavailable(udn)

    def get(self, udn: str) -> BraviaTV | None:
        return self._devices.get(udn)

    def __contains__(self, udn: object) -> bool:
        return udn in self._devices

    def __len__(self) -> int:
        return len(self._devices)
