"""IRCC (infrared remote-control relay) sender.

Wraps a remote-control code in the fixed SOAP envelope and POSTs it to the
IRCC control URL. All networking is provided by the base client
(`api_base.BraviaClient`).
"""

from __future__ import annotations

import logging
from xml.sax.saxutils import escape

from .api_base import BraviaClient
from .api_constants import IRCC_CONTENT_TYPE, IRCC_ENVELOPE, IRCC_SOAP_ACTION

_LOGGER = logging.getLogger(__name__)


def build_ircc_body(code: str) -> str:
    """Return the X_SendIRCC SOAP envelope for *code*."""
    return IRCC_ENVELOPE.format(code=escape(code))


class IrccSender:
    """Send simulated remote-control button presses."""

    def __init__(self, client: BraviaClient, ircc_url: str) -> None:
        self._client = client
        self.ircc_url = ircc_url

    async def send(self, code: str) -> bool:
        """Send *code*; requires an authenticated session."""
        self._client.auth.require_authenticated()

        headers = {
            "Content-Type": IRCC_CONTENT_TYPE,
            "SOAPACTION": IRCC_SOAP_ACTION,
        }
        _LOGGER.debug("Sending IRCC code %s to %s", code, self.ircc_url)
        await self._client.request(self.ircc_url, headers, build_ircc_body(code))
        return True
