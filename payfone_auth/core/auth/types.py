"""Enumerations for the authentication state machine."""

from __future__ import annotations

from enum import Enum


class FlowState(Enum):
    """Position of a session in the authentication state machine."""

    IDLE = "idle"
    """Session created, no call issued yet."""

    FETCHING_DEVICE_IP = "fetching_device_ip"
    """Waiting on the "what is my IP" service."""

    FETCHING_START_URL = "fetching_start_url"
    """Waiting on the integrator's start endpoint."""

    DISPATCHING_AUTH_CALL = "dispatching_auth_call"
    """Deciding between the GET and POST flows for the target URL."""

    AWAITING_AUTH_RESPONSE = "awaiting_auth_response"
    """Waiting on the carrier's auth endpoint."""

    REDIRECT_CHASE = "redirect_chase"
    """Auth endpoint redirected; following the Location header."""

    FETCHING_FINISH_URL = "fetching_finish_url"
    """Waiting on the integrator's finish endpoint."""

    COMPLETED = "completed"
    """Finish endpoint reported success."""

    FAILED = "failed"
    """Any leg failed; the flow was abandoned."""


TERMINAL_STATES = frozenset({FlowState.COMPLETED, FlowState.FAILED})


class FlowMethod(str, Enum):
    """HTTP method selected by the flow dispatcher."""

    GET = "GET"
    POST = "POST"


class InterpretAction(Enum):
    """What the response interpreter wants the orchestrator to do next."""

    CHASE_REDIRECT = "chase_redirect"
    FINISH = "finish"
