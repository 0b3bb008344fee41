"""Bravia TV device controller.

Composes the authentication session, JSON-RPC client, IRCC sender, power
poller, command table and application catalog into the object the host
registers under the TV's UDN.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from aiohttp import ClientSession

from .api_base import AuthSession, BraviaAuthenticationError, BraviaClient
from .api_constants import act_register_params
from .api_ircc import IrccSender
from .applications import ApplicationCatalog
from .commands import CommandTable
from .const import (
    DEVICE_TYPES,
    MSG_AUTHENTICATED,
    MSG_ENTER_CODE,
    MSG_WRONG_CODE,
    STATE_AUTHENTICATED,
    STORAGE_COOKIE_KEY,
)
from .introspection import async_get_sources, async_inspect
from .models import Application, ControllerOptions, DeviceDescriptor, Endpoints, ServiceMethod
from .power_polling import PowerPoller
from .state import BraviaState, StateListener
from .storage import CookieStore

_LOGGER = logging.getLogger(__name__)


def cookie_storage_key(udn: str) -> str:
    return f"device.{udn}.{STORAGE_COOKIE_KEY}"


class BraviaTV:
    """Controller for a single Bravia TV."""

    types = DEVICE_TYPES

    def __init__(
        self,
        name: str,
        udn: str,
        endpoints: Endpoints,
        store: CookieStore,
        session: ClientSession | None = None,
        options: ControllerOptions | None = None,
    ) -> None:
        self.name = name
        self.udn = udn
        self.endpoints = endpoints
        self.options = options or ControllerOptions()
        self._store = store

        self.state = BraviaState()
        self.auth = AuthSession(on_auth_change=self._handle_auth_change)
        self.client = BraviaClient(
            endpoints.scalar_url,
            self.auth,
            session=session,
            timeout=self.options.timeout,
        )
        self.ircc = IrccSender(self.client, endpoints.ircc_url)
        self.poller = PowerPoller(self.client, self.state, self.options.poll_interval)
        self.command_table = CommandTable()
        self.catalog = ApplicationCatalog(self.client)

        self._commands_task: asyncio.Task[None] | None = None
        self._removed = False

    @classmethod
    def from_descriptor(
        cls,
        descriptor: DeviceDescriptor,
        store: CookieStore,
        session: ClientSession | None = None,
        options: ControllerOptions | None = None,
    ) -> BraviaTV:
        """Build a controller; raises BraviaInvalidDeviceError when an endpoint is missing."""
        return cls(
            descriptor.friendly_name,
            descriptor.udn,
            descriptor.endpoints(),
            store,
            session=session,
            options=options,
        )

    def __repr__(self) -> str:
        return f"BraviaTV(name={self.name!r}, udn={self.udn!r})"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def async_setup(self) -> None:
        """Restore the stored session, start polling and load the command table.

        The command table loads in the background; until it is populated
        :meth:`command` raises BraviaNotReadyError.
        """
        cookie = await self._store.async_load(cookie_storage_key(self.udn))
        self.auth.set_cookie(cookie)

        self.poller.start()
        self._commands_task = asyncio.create_task(self._async_load_commands())
        _LOGGER.info("Set up %s (%s)", self.name, self.udn)

    async def _async_load_commands(self) -> None:
        try:
            await self.command_table.async_populate(self.client)
        except Exception as err:  # noqa: BLE001
            _LOGGER.warning("Could not load remote commands from %s: %s", self.name, err)

    async def async_remove(self) -> None:
        """Tear down the controller: stop polling and release the HTTP session."""
        if self._removed:
            return
        self._removed = True

        self.poller.stop()
        if self._commands_task is not None and not self._commands_task.done():
            self._commands_task.cancel()
        await self.client.close()
        _LOGGER.info("Removed %s (%s)", self.name, self.udn)

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def power(self) -> bool:
        return self.state.power

    @property
    def authenticated(self) -> bool:
        return self.state.authenticated

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        """Subscribe to ``power`` / ``authenticated`` changes."""
        return self.state.add_listener(listener)

    def _handle_auth_change(self, cookie: str | None) -> None:
        self.state.apply_diff({STATE_AUTHENTICATED: cookie is not None})

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def authenticate(self, code: str | None = None) -> str:
        """Pair with the TV.

        Without *code* the TV shows a PIN on screen; call again with that
        PIN to complete pairing.
        """
        params = act_register_params(self.options.client_id, self.options.nickname)
        response = await self.client.register(params, code)

        if not response.ok:
            if not code:
                return MSG_ENTER_CODE
            raise BraviaAuthenticationError(MSG_WRONG_CODE)

        set_cookie = response.headers.get("Set-Cookie")
        if not set_cookie:
            return MSG_ENTER_CODE

        cookie = set_cookie.split(";")[0]
        await self._store.async_save(cookie_storage_key(self.udn), cookie)
        self.auth.set_cookie(cookie)
        _LOGGER.info("Authenticated with %s", self.name)
        return MSG_AUTHENTICATED

    # ------------------------------------------------------------------
    # Power
    # ------------------------------------------------------------------

    async def set_power(self, power: bool) -> None:
        await self.poller.set_power(power)

    async def turn_on(self) -> None:
        await self.set_power(True)

    async def turn_off(self) -> None:
        await self.set_power(False)

    # ------------------------------------------------------------------
    # Remote commands
    # ------------------------------------------------------------------

    async def command(self, name: str) -> bool:
        """Send the remote-control command *name* (kebab-case)."""
        code = self.command_table.lookup(name)
        return await self.ircc.send(code)

    def commands(self) -> list[str]:
        return self.command_table.names()

    # ------------------------------------------------------------------
    # Applications
    # ------------------------------------------------------------------

    async def applications(self) -> list[Application]:
        return await self.catalog.applications()

    async def launch_application(self, app_id: str) -> bool:
        return await self.catalog.launch(app_id)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    async def sources(self) -> list[Any]:
        return await async_get_sources(self.client)

    async def bravia_inspect(self) -> dict[str, list[ServiceMethod] | str]:
        return await async_inspect(self.client)
