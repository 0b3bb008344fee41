"""Launchable application catalog."""

from __future__ import annotations

import html
import logging
import re
from typing import Any

from .api_base import BraviaClient
from .api_constants import METHOD_GET_APPLICATION_LIST, METHOD_SET_ACTIVE_APP, SERVICE_APP_CONTROL
from .models import Application

_LOGGER = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def build_applications(raw_apps: list[dict[str, Any]]) -> list[Application]:
    """Normalize a *getApplicationList* result into uniquely identified apps.

    Ids are slugs of the decoded title; a collision within this batch gets
    underscores appended until it is free (``netflix``, ``netflix_`` and so on).
    """
    taken: set[str] = set()
    apps: list[Application] = []

    for raw in raw_apps:
        title = html.unescape(raw.get("title") or "")

        app_id = _WHITESPACE_RE.sub("-", title).lower()
        while app_id in taken:
            app_id += "_"
        taken.add(app_id)

        apps.append(
            Application(
                id=app_id,
                name=title,
                icon=raw.get("icon"),
                uri=raw["uri"],
            )
        )

    return apps


class ApplicationCatalog:
    """Fetches the application list once and keeps it for the controller's lifetime."""

    def __init__(self, client: BraviaClient) -> None:
        self._client = client
        self._applications: list[Application] | None = None

    async def applications(self) -> list[Application]:
        """Return the cached catalog, fetching it on first use."""
        if self._applications is not None:
            return self._applications

        result = await self._client.call(SERVICE_APP_CONTROL, METHOD_GET_APPLICATION_LIST)
        self._applications = build_applications(result[0])
        _LOGGER.debug("Fetched %d applications from %s", len(self._applications), self._client.base_url)
        return self._applications

    async def launch(self, app_id: str) -> bool:
        """Launch *app_id*; False when no such application exists."""
        apps = await self.applications()
        app = next((a for a in apps if a.id == app_id), None)
        if app is None:
            _LOGGER.debug("No application with id %s", app_id)
            return False

        await self._client.call(
            SERVICE_APP_CONTROL,
            METHOD_SET_ACTIVE_APP,
            params={"uri": app.uri, "data": None},
        )
        return True
