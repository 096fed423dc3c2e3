"""Authentication orchestrator.

Runs the four network legs of the device authentication handshake:

    device IP (optional) -> start -> auth (+ redirect chases) -> finish

Each authenticate() call gets its own AuthenticationSession, so a single
Authenticator can drive any number of concurrent authentications. The
Authenticator itself only holds settings and collaborators.

Usage:
    from payfone_auth import Authenticator

    def on_complete(status, description, is_authenticated, device_info):
        print(status, description, device_info)

    authenticator = Authenticator()
    task = authenticator.authenticate(
        "https://example.com/payfone/start",
        "https://example.com/payfone/finish",
        on_complete,
    )
    result = await task

The flow enforces no timeout of its own; a request the transport never
completes keeps the session waiting until the returned task is cancelled.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from ...config import AuthenticatorSettings
from ...const import (
    LOG_URL_CHARS,
    PARAM_DEVICE_IP,
    PARAM_VFP,
    PROGRESS_AUTH_CALL,
    PROGRESS_DEVICE_IP,
    PROGRESS_FINISH_URL,
    PROGRESS_START_URL,
    PROGRESS_STARTING,
    STATUS_SUCCESS,
    STATUS_UNKNOWN_ERROR,
)
from ..exceptions import AuthFlowError, HttpStatusError, InvalidResponseError, VendorStatusError
from ..network import AiohttpTransport, HttpRequest, HttpResponse, HttpTransport
from ..url_utils import append_query, truncate
from .base import AuthenticationResult
from .dispatcher import FlowDispatcher
from .interpreter import ResponseInterpreter
from .notifier import CompletionCallback, DebugCallback, Notifier, StatusCallback
from .payloads import FinishResponse, StartResponse, parse_payload
from .rewriter import UrlRewriter, prefix_rule
from .session import AuthenticationSession
from .types import FlowState, InterpretAction

_LOGGER = logging.getLogger(__name__)


class Authenticator:
    """Drives the device authentication handshake.

    Collaborators are injectable so each decision component can be tested
    on its own and the network can be replaced by a fake.
    """

    def __init__(
        self,
        settings: AuthenticatorSettings | None = None,
        transport: HttpTransport | None = None,
        transport_factory: Callable[[], HttpTransport] | None = None,
        rewriter: UrlRewriter | None = None,
        dispatcher: FlowDispatcher | None = None,
        interpreter: ResponseInterpreter | None = None,
    ):
        """Initialize authenticator.

        Args:
            settings: Endpoint and limit settings (defaults if None)
            transport: Shared transport; the caller owns its lifetime
            transport_factory: Builds a per-call transport when no shared
                transport is given (defaults to AiohttpTransport)
            rewriter: Carrier URL rewriter
            dispatcher: GET/POST flow dispatcher
            interpreter: Auth response interpreter
        """
        self.settings = settings or AuthenticatorSettings()
        self._transport = transport
        self._transport_factory = transport_factory or self._default_transport
        self.rewriter = (rewriter or UrlRewriter()).with_rules(
            prefix_rule(rule.name, rule.prefix, rule.replacement) for rule in self.settings.extra_rewrite_rules
        )
        self.dispatcher = dispatcher or FlowDispatcher()
        self.interpreter = interpreter or ResponseInterpreter(self.settings.max_redirects)

    def _default_transport(self) -> HttpTransport:
        return AiohttpTransport(verify_ssl=self.settings.verify_ssl, user_agent=self.settings.user_agent)

    def authenticate(
        self,
        start_url: str,
        finish_url: str,
        on_complete: CompletionCallback,
        fetch_device_ip: bool = True,
        on_status: StatusCallback | None = None,
        on_debug: DebugCallback | None = None,
    ) -> asyncio.Task[AuthenticationResult]:
        """Start an authentication and return immediately.

        Must be called from a running event loop. The returned task resolves
        to the AuthenticationResult; on_complete fires exactly once before
        that.

        Args:
            start_url: Integrator endpoint returning {status, targetUrl}
            finish_url: Integrator endpoint taking ?vfp= and returning the device data
            on_complete: Receives (status_code, description, is_authenticated, device_info)
            fetch_device_ip: Call the "what is my IP" service first and pass
                the result to the start endpoint as deviceIp
            on_status: Optional (percent, activity) progress callback
            on_debug: Optional diagnostic message callback
        """
        return asyncio.get_running_loop().create_task(
            self.async_authenticate(
                start_url,
                finish_url,
                on_complete,
                fetch_device_ip=fetch_device_ip,
                on_status=on_status,
                on_debug=on_debug,
            )
        )

    async def async_authenticate(
        self,
        start_url: str,
        finish_url: str,
        on_complete: CompletionCallback | None = None,
        fetch_device_ip: bool = True,
        on_status: StatusCallback | None = None,
        on_debug: DebugCallback | None = None,
    ) -> AuthenticationResult:
        """Run an authentication to completion and return its result."""
        session = AuthenticationSession(start_url=start_url, finish_url=finish_url, in_progress=True)
        notifier = Notifier(on_complete, on_status, on_debug)

        notifier.debug("Starting Authentication.")
        notifier.status(PROGRESS_STARTING, "Starting Authentication.")

        if self._transport is not None:
            await self._run_flow(session, notifier, self._transport, fetch_device_ip)
        else:
            await self._run_with_own_transport(session, notifier, fetch_device_ip)

        notifier.complete(session)
        return session.to_result()

    async def _run_with_own_transport(
        self,
        session: AuthenticationSession,
        notifier: Notifier,
        fetch_device_ip: bool,
    ) -> None:
        """Build a per-call transport, run the flow on it, and close it.

        Errors building or closing the transport never skip completion.
        A close error after the outcome is decided only gets logged.
        """
        try:
            transport = self._transport_factory()
        except Exception as e:
            self._fail_unexpected(session, notifier, e)
            return

        try:
            await self._run_flow(session, notifier, transport, fetch_device_ip)
        finally:
            try:
                await transport.close()
            except Exception as e:
                _LOGGER.warning("Error closing transport for %s: %s", session.session_id[:8], e)

    def _fail_unexpected(self, session: AuthenticationSession, notifier: Notifier, error: Exception) -> None:
        """Report an error outside the flow's own taxonomy as status 1."""
        _LOGGER.error("Unexpected authentication error: %s", error, exc_info=True)
        notifier.debug(f"Authentication failed unexpectedly. {error}")
        session.fail(STATUS_UNKNOWN_ERROR, f"Unexpected error: {error}")

    async def _run_flow(
        self,
        session: AuthenticationSession,
        notifier: Notifier,
        transport: HttpTransport,
        fetch_device_ip: bool,
    ) -> None:
        """Run every leg, converting any flow error into a failed session."""
        try:
            if fetch_device_ip:
                await self._fetch_device_ip(session, notifier, transport)
            await self._fetch_start_url(session, notifier, transport)
            await self._call_auth_url(session, notifier, transport)
            await self._fetch_finish_url(session, notifier, transport)
        except AuthFlowError as e:
            _LOGGER.warning(
                "Authentication %s failed in %s: %s",
                session.session_id[:8],
                session.state.value,
                e,
            )
            notifier.debug(f"Authentication failed. {e.status_code} - {e.description}")
            session.fail(e.status_code, e.description)
        except Exception as e:
            self._fail_unexpected(session, notifier, e)

    async def _send(self, transport: HttpTransport, request: HttpRequest) -> HttpResponse:
        """Send a leg's request, failing on any non-2xx status."""
        response = await transport.send(request)
        if not response.ok:
            raise HttpStatusError(response.status, response.reason, request.url)
        return response

    async def _fetch_device_ip(
        self, session: AuthenticationSession, notifier: Notifier, transport: HttpTransport
    ) -> None:
        """Ask the "what is my IP" service for the device's external IP."""
        session.transition(FlowState.FETCHING_DEVICE_IP)
        notifier.debug("Fetching device IP address -> started.")
        notifier.status(PROGRESS_DEVICE_IP, "Getting Device IP.")

        response = await self._send(transport, HttpRequest("GET", self.settings.device_ip_url))
        session.device_ip = response.text.strip() or None
        notifier.debug(f"Fetching device IP address -> completed. {session.device_ip}")

    async def _fetch_start_url(
        self, session: AuthenticationSession, notifier: Notifier, transport: HttpTransport
    ) -> None:
        """Call the start endpoint and normalize the returned auth URL."""
        session.transition(FlowState.FETCHING_START_URL)
        notifier.debug("Fetching target URL from start call -> started.")
        notifier.status(PROGRESS_START_URL, "Getting Authentication URL.")

        url = session.start_url
        if session.device_ip:
            url = append_query(url, PARAM_DEVICE_IP, session.device_ip)

        response = await self._send(transport, HttpRequest("GET", url))
        notifier.debug("Fetching target URL from start call -> completed.")

        start = parse_payload(StartResponse, response.body, "start_response")
        if start.status != STATUS_SUCCESS:
            notifier.debug(
                "Fetching target URL from start call -> Cannot authenticate device. "
                f"{start.status} - {start.description}"
            )
            raise VendorStatusError(start.description or "", start.status)
        if not start.target_url:
            raise InvalidResponseError(
                "Start response did not include a targetUrl",
                field="targetUrl",
                raw_value=response.text,
            )

        rule = self.rewriter.match(start.target_url)
        if rule is not None and rule.description:
            notifier.debug(rule.description)
        session.target_url = self.rewriter.rewrite(start.target_url)

    async def _call_auth_url(
        self, session: AuthenticationSession, notifier: Notifier, transport: HttpTransport
    ) -> None:
        """Call the carrier auth URL, chasing redirects until a token appears."""
        while True:
            session.transition(FlowState.DISPATCHING_AUTH_CALL)
            notifier.debug(f"Authentication call to {truncate(session.target_url, LOG_URL_CHARS)} -> started.")
            request = self.dispatcher.dispatch(session)
            if session.is_post_flow:
                notifier.debug("PFFlow=2 found, converting to POST call.")
            else:
                notifier.debug(f"Calling final target URL of: {truncate(request.url, LOG_URL_CHARS)}")

            session.transition(FlowState.AWAITING_AUTH_RESPONSE)
            notifier.status(PROGRESS_AUTH_CALL, f"Calling Authentication URL ({request.method})")
            response = await transport.send(request)
            notifier.debug(f"Authentication response received -> {response.status}")

            outcome = self.interpreter.interpret(session, response)
            notifier.debug(outcome.message)
            if outcome.action is InterpretAction.FINISH:
                return
            session.transition(FlowState.REDIRECT_CHASE)

    async def _fetch_finish_url(
        self, session: AuthenticationSession, notifier: Notifier, transport: HttpTransport
    ) -> None:
        """Exchange the final token for the device data."""
        if not session.final_vfp:
            raise InvalidResponseError("No verification token to finish with", field="vfp")

        session.transition(FlowState.FETCHING_FINISH_URL)
        notifier.debug("Fetching authentication results from finish call -> Started.")
        url = append_query(session.finish_url, PARAM_VFP, session.final_vfp)
        notifier.debug(f"Calling finish URL: {truncate(url, LOG_URL_CHARS)}")
        notifier.status(PROGRESS_FINISH_URL, "Retrieving authentication data.")

        response = await self._send(transport, HttpRequest("GET", url))
        notifier.debug("Fetching authentication results from finish call -> Complete.")

        finish = parse_payload(FinishResponse, response.body, "finish_response")
        if finish.status != STATUS_SUCCESS:
            notifier.debug(f"Fetching authentication results from finish call -> Failed.  {finish.description}")
            raise VendorStatusError(finish.description or "", finish.status)
        if finish.response is None:
            raise InvalidResponseError(
                "Finish response did not include device data",
                field="Response",
                raw_value=response.text,
            )

        details = finish.response
        notifier.debug(f"Found mobile number {details.mobile_number}, carrier: {details.mobile_operator_name}")
        session.succeed(
            finish.status,
            finish.description or "",
            details.mobile_number,
            details.mobile_operator_name,
            details.payfone_alias,
        )
