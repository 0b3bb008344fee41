"""Typed Pydantic models for Bravia payloads and the host boundary.

- Endpoint/descriptor models describe what the discovery layer hands over.
- Application and ServiceMethod are the normalized shapes returned to callers.
- ControllerOptions carries the per-controller configuration.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .api_base import BraviaInvalidDeviceError
from .api_constants import URN_IRCC, URN_SCALAR_WEB_API
from .const import DEFAULT_CLIENT_ID, DEFAULT_NICKNAME, DEFAULT_POLL_INTERVAL, DEFAULT_TIMEOUT

__all__ = [
    "Application",
    "ControllerOptions",
    "DeviceDescriptor",
    "Endpoints",
    "ServiceEndpoint",
    "ServiceMethod",
]


class _BraviaBase(BaseModel):
    """Base class with permissive extra handling for future-proofing.

    Allows unknown fields (extra="allow") and supports population by field name or alias.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class ServiceEndpoint(_BraviaBase):
    """One UPnP service advertised by the TV."""

    service_type: str = Field(alias="serviceType")
    control_url: str = Field(alias="controlURL")


class Endpoints(BaseModel):
    """Resolved control endpoints; never re-resolved by this package."""

    model_config = ConfigDict(frozen=True)

    scalar_url: str
    ircc_url: str

    @field_validator("scalar_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:  # noqa: D401
        return v.rstrip("/")

    @classmethod
    def from_services(cls, services: Iterable[ServiceEndpoint]) -> Endpoints:
        """Pick the Scalar API and IRCC control URLs out of *services*."""
        urls: dict[str, str] = {}
        for service in services:
            if service.service_type in (URN_SCALAR_WEB_API, URN_IRCC):
                urls[service.service_type] = service.control_url

        missing = [urn for urn in (URN_SCALAR_WEB_API, URN_IRCC) if urn not in urls]
        if missing:
            raise BraviaInvalidDeviceError(f"Device is missing required services: {', '.join(missing)}")

        return cls(scalar_url=urls[URN_SCALAR_WEB_API], ircc_url=urls[URN_IRCC])


class DeviceDescriptor(_BraviaBase):
    """Subset of the UPnP root description required to build a controller."""

    friendly_name: str = Field(alias="friendlyName")
    udn: str = Field(alias="UDN")
    services: list[ServiceEndpoint] = []

    def endpoints(self) -> Endpoints:
        return Endpoints.from_services(self.services)


class ControllerOptions(BaseModel):
    """Per-controller configuration."""

    poll_interval: float = Field(DEFAULT_POLL_INTERVAL, gt=0)  # seconds
    client_id: str = DEFAULT_CLIENT_ID
    nickname: str = DEFAULT_NICKNAME
    timeout: float | None = DEFAULT_TIMEOUT  # seconds, None = transport default


class Application(_BraviaBase):
    """Launchable application with a collision-free slug id."""

    id: str
    name: str
    icon: str | None = None
    uri: str


class ServiceMethod(_BraviaBase):
    """Signature of one Scalar API method as reported by *getMethodTypes*."""

    name: str
    version: str
    arguments: Any = None
    return_type: Any = Field(None, alias="returnType")
