"""Global fixtures for Bravia TV tests."""

from __future__ import annotations

import inspect
import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# Add repository root to path for custom_components imports
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from custom_components.bravia_tv.api_base import AuthSession, BraviaClient  # noqa: E402
from custom_components.bravia_tv.storage import MemoryCookieStore  # noqa: E402

from .const import SCALAR_URL  # noqa: E402


class MockResponse:
    """Minimal stand-in for an aiohttp response used as an async context manager."""

    def __init__(
        self,
        status: int = 200,
        body: Any = None,
        text: str | None = None,
        raw: bytes | None = None,
        headers: dict[str, str] | None = None,
        reason: str | None = None,
    ) -> None:
        self.status = status
        self.reason = reason or {200: "OK", 401: "Unauthorized", 403: "Forbidden", 500: "Internal Server Error"}.get(
            status, "Error"
        )
        self.headers = dict(headers or {})
        if raw is None:
            raw = (text if text is not None else (json.dumps(body) if body is not None else "")).encode()
        self._raw = raw

    async def text(self, encoding: str | None = None, errors: str = "strict") -> str:
        return self._raw.decode(encoding or "utf-8", errors)

    async def __aenter__(self) -> MockResponse:
        return self

    async def __aexit__(self, *exc_info: Any) -> bool:
        return False


class MockSession:
    """Records requests and answers them through a handler.

    The handler receives ``(url, headers, data)`` and returns a MockResponse,
    an awaitable of one, or raises.
    """

    def __init__(self) -> None:
        self.closed = False
        self.requests: list[dict[str, Any]] = []
        self.handler: Callable[..., Any] = lambda url, headers, data: MockResponse(body={"result": []})

    async def request(self, method: str, url: str, headers: dict[str, str] | None = None, data: Any = None):
        self.requests.append({"method": method, "url": url, "headers": dict(headers or {}), "data": data})
        result = self.handler(url, dict(headers or {}), data)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def close(self) -> None:
        self.closed = True

    def payloads(self) -> list[dict[str, Any]]:
        """Return the decoded JSON-RPC bodies sent so far."""
        return [json.loads(r["data"]) for r in self.requests]


@pytest.fixture
def mock_session() -> MockSession:
    """Provide a fake aiohttp session."""
    return MockSession()


@pytest.fixture
def auth() -> AuthSession:
    return AuthSession()


@pytest.fixture
def client(mock_session: MockSession, auth: AuthSession) -> BraviaClient:
    """BraviaClient wired to the fake session."""
    return BraviaClient(SCALAR_URL, auth, session=mock_session)


@pytest.fixture
def store() -> MemoryCookieStore:
    return MemoryCookieStore()
