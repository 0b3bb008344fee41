"""Bravia Scalar API core client.

Contains the networking/transport layer shared by every outbound call:
the authentication session that owns the cookie, the raw POST helper with
status checking, and the JSON-RPC envelope caller used against the
``<scalar>/<service>`` endpoint family.
"""

from __future__ import annotations

import base64
import itertools
import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import aiohttp
import async_timeout
from aiohttp import ClientSession

from .api_constants import JSON_CONTENT_TYPE, METHOD_ACT_REGISTER, SERVICE_ACCESS_CONTROL
from .const import DEFAULT_API_VERSION, DEFAULT_TIMEOUT, MSG_AUTH_LOST, MSG_NOT_AUTHENTICATED

_LOGGER = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------


class BraviaError(Exception):
    """Base exception for all Bravia API errors."""


class BraviaRequestError(BraviaError):
    """Raised when there is an error communicating with the TV."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        last_error: Exception | None = None,
    ) -> None:
        """Initialize request error with context.

        Args:
            message: The error message
            endpoint: URL that failed
            last_error: The underlying exception that caused this error
        """
        self.endpoint = endpoint
        self.last_error = last_error
        super().__init__(message)

    def __str__(self) -> str:
        """String representation with the failing endpoint."""
        if self.endpoint:
            return f"{super().__str__()} (endpoint={self.endpoint})"
        return super().__str__()


class BraviaConnectionError(BraviaRequestError):
    """Raised on network-level connectivity problems (unreachable, reset or timed out)."""


class BraviaStatusError(BraviaRequestError):
    """Raised when the TV answers with a non-2xx HTTP status."""

    def __init__(
        self,
        message: str,
        status: int,
        reason: str | None = None,
        endpoint: str | None = None,
    ) -> None:
        """Initialize status error.

        Args:
            message: The error message
            status: HTTP status code returned by the TV
            reason: HTTP reason phrase
            endpoint: URL that failed
        """
        self.status = status
        self.reason = reason
        super().__init__(message, endpoint=endpoint)


class BraviaAuthenticationError(BraviaError):
    """Raised on 403 responses, a missing session, or a rejected pairing code."""


class BraviaRemoteError(BraviaError):
    """Raised when the JSON-RPC body carries an ``error`` member.

    The server payload is kept verbatim in :attr:`payload`.
    """

    def __init__(self, payload: Any) -> None:
        self.payload = payload
        super().__init__(f"Error, server said: {json.dumps(payload)}")


class BraviaNotFoundError(BraviaError):
    """Raised for unknown command names or application ids."""


class BraviaNotReadyError(BraviaError):
    """Raised when the command table has not been populated yet."""


class BraviaInvalidDataError(BraviaError):
    """The TV responded with malformed or non-JSON data."""


class BraviaInvalidDeviceError(BraviaError):
    """A device descriptor lacks the Scalar API or IRCC endpoint."""


# -----------------------------------------------------------------------------
# Authentication session
# -----------------------------------------------------------------------------


class AuthSession:
    """Holds the session cookie and reports authentication transitions."""

    def __init__(
        self,
        cookie: str | None = None,
        on_auth_change: Callable[[str | None], None] | None = None,
    ) -> None:
        self._cookie = cookie
        self.on_auth_change = on_auth_change

    @property
    def cookie(self) -> str | None:
        return self._cookie

    @property
    def authenticated(self) -> bool:
        return self._cookie is not None

    def set_cookie(self, value: str | None) -> None:
        """Store *value*; notify only when the authenticated flag flips."""
        was_authenticated = self.authenticated
        self._cookie = value or None
        if self.authenticated != was_authenticated:
            _LOGGER.debug("Authentication state changed: %s", self.authenticated)
            if self.on_auth_change is not None:
                self.on_auth_change(self._cookie)

    def decorate(self, headers: Mapping[str, str] | None = None) -> dict[str, str]:
        """Return a copy of *headers* with the session cookie injected."""
        decorated = dict(headers or {})
        if self._cookie is not None:
            decorated["Cookie"] = self._cookie
        return decorated

    def require_authenticated(self) -> None:
        """Raise BraviaAuthenticationError unless a session cookie is held."""
        if self._cookie is None:
            raise BraviaAuthenticationError(MSG_NOT_AUTHENTICATED)


# -----------------------------------------------------------------------------
# HTTP / JSON-RPC client
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class BraviaResponse:
    """Fully read HTTP response."""

    status: int
    reason: str | None
    headers: Mapping[str, str]
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class BraviaClient:
    """Bravia Scalar API client: transport, status checking and JSON-RPC envelope."""

    def __init__(
        self,
        scalar_url: str,
        auth: AuthSession,
        session: ClientSession | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
    ) -> None:
        """Instantiate the client.

        Args:
            scalar_url: Base URL of the Scalar API (``http://<tv>/sony``).
            auth: Session holding the authentication cookie.
            session: Optional shared *aiohttp* session.
            timeout: Per-request timeout in seconds, ``None`` for transport defaults.
        """
        self.scalar_url = scalar_url.rstrip("/")
        self.auth = auth
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None
        self._ids = itertools.count(1)
        self._closed = False

    # ------------------------------------------------------------------
    # Low-level request helpers
    # ------------------------------------------------------------------

    async def _post(self, url: str, headers: Mapping[str, str], body: str) -> BraviaResponse:
        """POST *body* to *url* and return the fully read response."""
        if self._closed:
            raise BraviaConnectionError("Client closed", endpoint=url)
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True

        _LOGGER.debug("POST %s: %s", url, body)
        try:
            async with async_timeout.timeout(self.timeout):
                resp = await self._session.request("POST", url, headers=dict(headers), data=body)
                async with resp:
                    text = await resp.text(errors="replace")
                    return BraviaResponse(
                        status=resp.status,
                        reason=resp.reason,
                        headers=resp.headers.copy(),
                        text=text,
                    )
        except (TimeoutError, aiohttp.ClientError) as err:
            raise BraviaConnectionError(
                f"Request to {url} failed: {err}",
                endpoint=url,
                last_error=err,
            ) from err

    def _check_status(self, response: BraviaResponse, url: str) -> BraviaResponse:
        """Raise for non-2xx responses; a 403 drops the session first."""
        if response.ok:
            return response
        if response.status == 403:
            _LOGGER.info("TV rejected session cookie for %s", url)
            self.auth.set_cookie(None)
            raise BraviaAuthenticationError(MSG_AUTH_LOST)
        raise BraviaStatusError(
            f"Unable to perform call: {response.reason}",
            status=response.status,
            reason=response.reason,
            endpoint=url,
        )

    async def request(self, url: str, headers: Mapping[str, str], body: str) -> BraviaResponse:
        """POST with session cookie and status checking."""
        response = await self._post(url, self.auth.decorate(headers), body)
        return self._check_status(response, url)

    # ------------------------------------------------------------------
    # JSON-RPC
    # ------------------------------------------------------------------

    @staticmethod
    def _normalize_params(params: Any) -> list[Any]:
        if params is None:
            return []
        if isinstance(params, (list, tuple)):
            return list(params)
        return [params]

    def _envelope(self, method: str, version: str, params: Any) -> str:
        return json.dumps(
            {
                "id": next(self._ids),
                "method": method,
                "version": version,
                "params": self._normalize_params(params),
            }
        )

    async def call(
        self,
        service: str,
        method: str,
        version: str = DEFAULT_API_VERSION,
        params: Any = None,
    ) -> Any:
        """Invoke *method* on the *service* endpoint and return its result.

        Raises:
            BraviaConnectionError: transport failure.
            BraviaAuthenticationError: HTTP 403; the session cookie is cleared.
            BraviaStatusError: any other non-2xx status.
            BraviaInvalidDataError: the body is not JSON.
            BraviaRemoteError: the body carries an ``error`` member.
        """
        url = f"{self.scalar_url}/{service}"
        response = await self.request(
            url,
            {"Content-Type": JSON_CONTENT_TYPE},
            self._envelope(method, version, params),
        )

        try:
            body = json.loads(response.text)
        except json.JSONDecodeError as err:
            raise BraviaInvalidDataError(f"Invalid JSON response from {url}: {err}") from err

        if not isinstance(body, dict):
            raise BraviaInvalidDataError(f"Unexpected response from {url}: {body!r}")

        if body.get("error") is not None:
            _LOGGER.debug("%s.%s returned error: %s", service, method, body["error"])
            raise BraviaRemoteError(body["error"])

        if "result" in body:
            return body["result"]
        return body.get("results")

    async def register(self, params: list[Any], code: str | None = None) -> BraviaResponse:
        """Send the *actRegister* pairing request.

        The response is returned unchecked: the caller interprets non-2xx
        statuses as "code required" or "wrong code".
        """
        headers = {"Content-Type": JSON_CONTENT_TYPE}
        if code:
            token = base64.b64encode(f":{code}".encode()).decode("ascii")
            headers["Authorization"] = f"Basic {token}"

        return await self._post(
            f"{self.scalar_url}/{SERVICE_ACCESS_CONTROL}",
            headers,
            self._envelope(METHOD_ACT_REGISTER, DEFAULT_API_VERSION, params),
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the underlying *aiohttp* session if this client created it.

        The client refuses further requests once closed.
        """
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        self._closed = True

    @property
    def base_url(self) -> str:
        """Base URL of the Scalar API."""
        return self.scalar_url
