"""Remote-control command table.

Maps normalized (kebab-case) command names to the opaque IRCC codes reported
by ``system.getRemoteControllerInfo``.
"""

from __future__ import annotations

import logging
import re

from .api_base import BraviaClient, BraviaNotFoundError, BraviaNotReadyError
from .api_constants import METHOD_GET_REMOTE_CONTROLLER_INFO, SERVICE_SYSTEM

_LOGGER = logging.getLogger(__name__)

# Acronym before a capitalised word, lower/capitalised word, bare acronym, digit run.
_WORD_RE = re.compile(r"[A-Z]{2,}(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")


def kebab_case(name: str) -> str:
    """Return *name* as kebab-case (``"VolumeUp"`` -> ``"volume-up"``)."""
    return "-".join(word.lower() for word in _WORD_RE.findall(name))


class CommandTable:
    """Name to IRCC code lookup, populated once from the TV."""

    def __init__(self) -> None:
        self._codes: dict[str, str] | None = None

    @property
    def ready(self) -> bool:
        return self._codes is not None

    async def async_populate(self, client: BraviaClient) -> None:
        """Fetch the remote-controller info and build the table."""
        result = await client.call(SERVICE_SYSTEM, METHOD_GET_REMOTE_CONTROLLER_INFO)

        codes: dict[str, str] = {}
        for command in result[1]:
            codes[kebab_case(command["name"])] = command["value"]

        self._codes = codes
        _LOGGER.debug("Loaded %d remote commands from %s", len(codes), client.base_url)

    def lookup(self, name: str) -> str:
        """Return the IRCC code for *name*, normalized to kebab-case first.

        Raises:
            BraviaNotReadyError: the table has not been populated.
            BraviaNotFoundError: the TV does not offer the command.
        """
        if self._codes is None:
            raise BraviaNotReadyError("Command list has not been loaded from the TV yet")
        try:
            return self._codes[kebab_case(name)]
        except KeyError:
            raise BraviaNotFoundError(f"Unsupported command: {name}") from None

    def names(self) -> list[str]:
        """Return the known command names; empty until populated."""
        return list(self._codes or ())
