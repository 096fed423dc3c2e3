"""Authentication flow for the Payfone device authentication client.

The flow is split into small decision components that the orchestrator
sequences:

    UrlRewriter          carrier URL normalization (insecure -> secure)
    FlowDispatcher       GET flow vs. pfflow=2 POST flow
    ResponseInterpreter  redirect chase / token extraction / failure
    Authenticator        owns the per-call session and runs every leg

Usage:
    from payfone_auth.core.auth import Authenticator

    result = await Authenticator().async_authenticate(start_url, finish_url)
    if result.is_authenticated:
        print(result.device_info.number)
"""

from __future__ import annotations

from .base import AuthenticationResult, DeviceInfo
from .dispatcher import FlowDispatcher, decode_instruction
from .interpreter import Interpretation, ResponseInterpreter, combine_token, split_token
from .notifier import Notifier
from .orchestrator import Authenticator
from .rewriter import DEFAULT_RULES, RewriteRule, UrlRewriter, prefix_rule
from .session import AuthenticationSession
from .types import FlowMethod, FlowState, InterpretAction

__all__ = [
    # Results
    "AuthenticationResult",
    "DeviceInfo",
    # Session
    "AuthenticationSession",
    # Enums
    "FlowMethod",
    "FlowState",
    "InterpretAction",
    # Components
    "Authenticator",
    "FlowDispatcher",
    "Interpretation",
    "Notifier",
    "ResponseInterpreter",
    "UrlRewriter",
    # Helpers
    "DEFAULT_RULES",
    "RewriteRule",
    "combine_token",
    "decode_instruction",
    "prefix_rule",
    "split_token",
]
