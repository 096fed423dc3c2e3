"""Per-call authentication session state."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field

from .base import AuthenticationResult, DeviceInfo
from .types import TERMINAL_STATES, FlowState

_LOGGER = logging.getLogger(__name__)


@dataclass
class AuthenticationSession:
    """Mutable state for exactly one authenticate call.

    A new session is created for every call and is owned by the coroutine
    running that call, so two authentications on the same Authenticator
    never see each other's fields. Once the completion callback has fired
    the session is closed; its fields remain readable.
    """

    start_url: str
    finish_url: str
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    device_ip: str | None = None
    target_url: str | None = None
    vfp: str | None = None
    final_vfp: str | None = None
    is_post_flow: bool = False
    in_progress: bool = False
    redirect_count: int = 0
    state: FlowState = FlowState.IDLE
    history: list[FlowState] = field(default_factory=list)

    # Terminal result
    final_status: int | None = None
    final_description: str = ""
    is_authenticated: bool = False
    msisdn: str | None = None
    carrier_name: str | None = None
    payfone_alias: str | None = None

    @property
    def is_closed(self) -> bool:
        """True once a terminal state was reached and completion fired."""
        return self.state in TERMINAL_STATES and not self.in_progress

    def transition(self, state: FlowState) -> None:
        """Move to a new state, recording the path taken."""
        if self.state in TERMINAL_STATES:
            raise RuntimeError(f"Session {self.session_id} already finished in state {self.state.value}")
        _LOGGER.debug("Session %s: %s -> %s", self.session_id[:8], self.state.value, state.value)
        self.history.append(self.state)
        self.state = state

    def succeed(self, status: int, description: str, msisdn: str, carrier: str, alias: str) -> None:
        """Record a successful finish call."""
        self.final_status = status
        self.final_description = description
        self.msisdn = msisdn
        self.carrier_name = carrier
        self.payfone_alias = alias
        self.is_authenticated = True
        self.transition(FlowState.COMPLETED)

    def fail(self, status: int, description: str) -> None:
        """Record a failure from any leg."""
        self.final_status = status
        self.final_description = description
        self.is_authenticated = False
        self.transition(FlowState.FAILED)

    def device_info(self) -> DeviceInfo | None:
        """Device details, only when authenticated."""
        if not self.is_authenticated:
            return None
        return DeviceInfo(
            number=self.msisdn or "",
            carrier=self.carrier_name or "",
            pfid=self.payfone_alias or "",
        )

    def to_result(self) -> AuthenticationResult:
        """Build the result reported for this session."""
        if self.is_authenticated:
            return AuthenticationResult.ok(
                self.final_description,
                self.device_info(),
                session_id=self.session_id,
                device_ip=self.device_ip,
            )
        return AuthenticationResult.fail(
            self.final_status if self.final_status is not None else -1,
            self.final_description,
            session_id=self.session_id,
            device_ip=self.device_ip,
        )
