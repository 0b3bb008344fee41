"""Bravia TV control core.

Session handling, JSON-RPC dispatch, IRCC commands, power polling and the
application catalog for Sony Bravia televisions. Discovery and host
registration are left to the embedding integration, which hands over a
:class:`DeviceDescriptor` and a :class:`CookieStore`.
"""

from __future__ import annotations

from .api_base import (
    AuthSession,
    BraviaAuthenticationError,
    BraviaClient,
    BraviaConnectionError,
    BraviaError,
    BraviaInvalidDataError,
    BraviaInvalidDeviceError,
    BraviaNotFoundError,
    BraviaNotReadyError,
    BraviaRemoteError,
    BraviaRequestError,
    BraviaStatusError,
)
from .device import BraviaTV
from .device_registry import BraviaDeviceRegistry
from .models import Application, ControllerOptions, DeviceDescriptor, Endpoints, ServiceEndpoint, ServiceMethod
from .state import BraviaState
from .storage import CookieStore, MemoryCookieStore

__all__ = [
    "Application",
    "AuthSession",
    "BraviaAuthenticationError",
    "BraviaClient",
    "BraviaConnectionError",
    "BraviaDeviceRegistry",
    "BraviaError",
    "BraviaInvalidDataError",
    "BraviaInvalidDeviceError",
    "BraviaNotFoundError",
    "BraviaNotReadyError",
    "BraviaRemoteError",
    "BraviaRequestError",
    "BraviaState",
    "BraviaStatusError",
    "BraviaTV",
    "ControllerOptions",
    "CookieStore",
    "DeviceDescriptor",
    "Endpoints",
    "MemoryCookieStore",
    "ServiceEndpoint",
    "ServiceMethod",
]
