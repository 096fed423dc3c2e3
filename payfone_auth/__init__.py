"""Payfone device authentication client.

Drives the redirect-based carrier authentication handshake from a client
context using asyncio and aiohttp. The integrator supplies a start and a
finish endpoint; this package handles device IP discovery, carrier URL
normalization, GET/POST flow branching, redirect chasing, and
verification token extraction.
"""

from __future__ import annotations

from .config import AuthenticatorSettings, PrefixRewriteRule, load_settings
from .const import VERSION
from .core.auth import AuthenticationResult, Authenticator, DeviceInfo, FlowState
from .core.exceptions import AuthFlowError
from .core.network import AiohttpTransport, HttpRequest, HttpResponse, HttpTransport

__version__ = VERSION

__all__ = [
    "AiohttpTransport",
    "AuthFlowError",
    "AuthenticationResult",
    "Authenticator",
    "AuthenticatorSettings",
    "DeviceInfo",
    "FlowState",
    "HttpRequest",
    "HttpResponse",
    "HttpTransport",
    "PrefixRewriteRule",
    "load_settings",
]
