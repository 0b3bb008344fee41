"""Constants for the Bravia TV control core.

This module defines the default values and user-facing
messages used throughout the package.

Configuration:
    - Polling interval and transport timeout
    - Client registration identity (client id, nickname)

Messages:
    - Authentication results returned to the host UI
    - Error texts raised by the command/session layer
"""

from __future__ import annotations

# Defaults
DEFAULT_POLL_INTERVAL = 10  # seconds
DEFAULT_CLIENT_ID = "bravia_tv"
DEFAULT_NICKNAME = "Bravia TV"
DEFAULT_TIMEOUT: float | None = None  # None = aiohttp defaults, no internal timeout
DEFAULT_API_VERSION = "1.0"

# Storage
STORAGE_COOKIE_KEY = "cookie"

# Authentication messages
MSG_AUTHENTICATED = "Authenticated with TV"
MSG_ENTER_CODE = "Call authenticate with code displayed on TV"
MSG_WRONG_CODE = "Unable to authenticate, the wrong code was probably entered"
MSG_NOT_AUTHENTICATED = "Not authenticated with TV"
MSG_AUTH_LOST = "No longer authenticated with TV"

# Introspection placeholder
MSG_COULD_NOT_FETCH = "Could not fetch methods"

# Observable state keys
STATE_POWER = "power"
STATE_AUTHENTICATED = "authenticated"

# Device types advertised to the host
DEVICE_TYPES = ("bravia-tv", "tv")
