"""Sequential discovery of sources and Scalar API method signatures.

The TV's embedded web server handles one request at a time and misbehaves
under bursts, so every fan-out here awaits each call before issuing the next.
"""

from __future__ import annotations

import logging
from typing import Any

from .api_base import BraviaClient
from .api_constants import (
    METHOD_GET_METHOD_TYPES,
    METHOD_GET_SCHEME_LIST,
    METHOD_GET_SERVICE_PROTOCOLS,
    METHOD_GET_SOURCE_LIST,
    METHOD_GET_VERSIONS,
    SERVICE_AV_CONTENT,
    SERVICE_GUIDE,
)
from .const import MSG_COULD_NOT_FETCH
from .models import ServiceMethod

_LOGGER = logging.getLogger(__name__)


async def async_get_sources(client: BraviaClient) -> list[Any]:
    """Return the source list of every input scheme, one scheme at a time."""
    schemes = await client.call(SERVICE_AV_CONTENT, METHOD_GET_SCHEME_LIST)

    sources: list[Any] = []
    for scheme in schemes[0]:
        result = await client.call(
            SERVICE_AV_CONTENT,
            METHOD_GET_SOURCE_LIST,
            params={"scheme": scheme["scheme"]},
        )
        sources.append(result[0])
    return sources


async def async_inspect_service(client: BraviaClient, service: str) -> list[ServiceMethod] | str:
    """Return every method signature of *service*, or a placeholder on failure."""
    methods: list[ServiceMethod] = []
    try:
        versions = await client.call(service, METHOD_GET_VERSIONS)
        for version in versions[0]:
            method_types = await client.call(service, METHOD_GET_METHOD_TYPES, params=[version])
            for method in method_types:
                methods.append(
                    ServiceMethod(
                        name=method[0],
                        version=version,
                        arguments=method[1],
                        return_type=method[2],
                    )
                )
    except Exception as err:  # noqa: BLE001
        _LOGGER.debug("Inspecting service %s failed: %s", service, err)
        return MSG_COULD_NOT_FETCH
    return methods


async def async_inspect(client: BraviaClient) -> dict[str, list[ServiceMethod] | str]:
    """Map each service protocol the TV reports to its method signatures."""
    protocols = await client.call(SERVICE_GUIDE, METHOD_GET_SERVICE_PROTOCOLS)

    data: dict[str, list[ServiceMethod] | str] = {}
    for protocol in protocols:
        service = protocol[0]
        data[service] = await async_inspect_service(client, service)
    return data
