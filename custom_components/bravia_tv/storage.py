"""Session cookie persistence boundary.

The host supplies the backend; the controller only needs to read one value
at startup and write it back after a successful pairing.
"""

from __future__ import annotations

from typing import Protocol


class CookieStore(Protocol):
    """Async key/value store for session cookies, keyed by device UDN."""

    async def async_load(self, key: str) -> str | None: ...

    async def async_save(self, key: str, value: str | None) -> None: ...


class MemoryCookieStore:
    """Process-local :class:`CookieStore`."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def async_load(self, key: str) -> str | None:
        return self._data.get(key)

    async def async_save(self, key: str, value: str | None) -> None:
        if value is None:
            self._data.pop(key, None)
        else:
            self._data[key] = value
