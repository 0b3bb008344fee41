"""Bravia wire constants.

Service URNs, the IRCC SOAP envelope and the access-control registration
payload, extracted from api_base.py to keep the transport module focused.
"""

from __future__ import annotations

from typing import Any

# UPnP service types advertised by the TV
URN_SCALAR_WEB_API = "urn:schemas-sony-com:service:ScalarWebAPI:1"
URN_IRCC = "urn:schemas-sony-com:service:IRCC:1"

# Scalar API sub-services
SERVICE_SYSTEM = "system"
SERVICE_APP_CONTROL = "appControl"
SERVICE_AV_CONTENT = "avContent"
SERVICE_GUIDE = "guide"
SERVICE_ACCESS_CONTROL = "accessControl"

# Scalar API methods
METHOD_GET_POWER_STATUS = "getPowerStatus"
METHOD_SET_POWER_STATUS = "setPowerStatus"
METHOD_GET_REMOTE_CONTROLLER_INFO = "getRemoteControllerInfo"
METHOD_GET_APPLICATION_LIST = "getApplicationList"
METHOD_SET_ACTIVE_APP = "setActiveApp"
METHOD_GET_SCHEME_LIST = "getSchemeList"
METHOD_GET_SOURCE_LIST = "getSourceList"
METHOD_GET_SERVICE_PROTOCOLS = "getServiceProtocols"
METHOD_GET_VERSIONS = "getVersions"
METHOD_GET_METHOD_TYPES = "getMethodTypes"
METHOD_ACT_REGISTER = "actRegister"

POWER_STATUS_ACTIVE = "active"

# IRCC (SOAP) request
IRCC_SOAP_ACTION = '"urn:schemas-sony-com:service:IRCC:1#X_SendIRCC"'
IRCC_CONTENT_TYPE = "text/xml; charset=UTF-8"
IRCC_ENVELOPE = (
    '<?xml version="1.0"?>'
    '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" '
    's:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">'
    "<s:Body>"
    '<u:X_SendIRCC xmlns:u="urn:schemas-sony-com:service:IRCC:1">'
    "<IRCCCode>{code}</IRCCCode>"
    "</u:X_SendIRCC>"
    "</s:Body>"
    "</s:Envelope>"
)

JSON_CONTENT_TYPE = "application/json"


def act_register_params(client_id: str, nickname: str) -> list[Any]:
    """Return the *actRegister* params: client identity plus the WOL grant."""
    return [
        {
            "clientid": client_id,
            "nickname": nickname,
            "level": "private",
        },
        [
            {
                "value": "yes",
                "function": "WOL",
            }
        ],
    ]
