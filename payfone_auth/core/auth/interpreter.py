"""Interpretation of auth-leg responses.

Decides, for each response from the carrier's auth endpoint, whether to
chase a redirect, fail, or extract the verification token (VFP) that the
finish leg needs. Token sources depend on the flow:

- POST flow: remembered vfp + "___" + base64(response body)
- GET flow: "vfp" in the JSON body, or in the Location query when the
  body is empty; a response without one is fatal
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from urllib.parse import urljoin

from ...const import COMBINED_TOKEN_SEPARATOR, DEFAULT_MAX_REDIRECTS, LOG_VFP_CHARS, PARAM_VFP
from ..exceptions import (
    HttpStatusError,
    MissingTokenError,
    NoDataReturnedError,
    TooManyRedirectsError,
)
from ..network import HttpResponse
from ..url_utils import parse_query, truncate
from .payloads import TokenBody, parse_payload
from .session import AuthenticationSession
from .types import InterpretAction

_LOGGER = logging.getLogger(__name__)


@dataclass
class Interpretation:
    """Decision taken for one auth response."""

    action: InterpretAction
    message: str


def combine_token(vfp: str, body: bytes) -> str:
    """Build the POST flow combined token."""
    return vfp + COMBINED_TOKEN_SEPARATOR + base64.b64encode(body).decode("ascii")


def split_token(token: str) -> tuple[str, bytes]:
    """Split a combined token back into the vfp and the decoded body."""
    vfp, _, encoded = token.partition(COMBINED_TOKEN_SEPARATOR)
    return vfp, base64.b64decode(encoded)


class ResponseInterpreter:
    """Turns auth responses into redirect chases or a final token."""

    def __init__(self, max_redirects: int = DEFAULT_MAX_REDIRECTS):
        """Initialize interpreter.

        Args:
            max_redirects: Redirects allowed per session before giving up
        """
        self.max_redirects = max_redirects

    def interpret(self, session: AuthenticationSession, response: HttpResponse) -> Interpretation:
        """Update the session from an auth response.

        Returns:
            CHASE_REDIRECT with target_url set to the redirect location, or
            FINISH with final_vfp set.

        Raises:
            HttpStatusError: Non-2xx status that is not a usable redirect
            TooManyRedirectsError: Redirect limit exceeded
            NoDataReturnedError: POST flow returned an empty body
            MissingTokenError: GET flow returned no vfp anywhere
            InvalidResponseError: GET flow body is not the expected JSON
        """
        if response.is_redirect:
            return self._chase_redirect(session, response)

        if not response.ok:
            raise HttpStatusError(response.status, response.reason, session.target_url)

        if not response.body:
            self._extract_from_location(session, response)
        elif session.is_post_flow:
            if not session.vfp:
                raise MissingTokenError("PFFlow instruction did not carry a verification token.")
            session.final_vfp = combine_token(session.vfp, response.body)
        else:
            token = parse_payload(TokenBody, response.body, "auth_response")
            self._set_final_vfp(session, token.vfp)

        return Interpretation(
            InterpretAction.FINISH,
            f"Verification token found: {truncate(session.final_vfp, LOG_VFP_CHARS)}",
        )

    def _chase_redirect(self, session: AuthenticationSession, response: HttpResponse) -> Interpretation:
        """Point the session at the redirect location."""
        if session.redirect_count >= self.max_redirects:
            raise TooManyRedirectsError(self.max_redirects)

        session.redirect_count += 1
        session.target_url = urljoin(session.target_url or "", response.location or "")
        _LOGGER.debug("Redirect %d of at most %d", session.redirect_count, self.max_redirects)
        return Interpretation(InterpretAction.CHASE_REDIRECT, "Redirect received -- chasing redirect URL.")

    def _extract_from_location(self, session: AuthenticationSession, response: HttpResponse) -> None:
        """Handle an empty 2xx body."""
        if session.is_post_flow:
            raise NoDataReturnedError()
        self._set_final_vfp(session, parse_query(response.location).get(PARAM_VFP))

    def _set_final_vfp(self, session: AuthenticationSession, vfp: str | None) -> None:
        """Store the GET flow token carried by the auth response."""
        if not vfp:
            if session.vfp:
                _LOGGER.debug("Auth response had no vfp; the auth URL vfp is not accepted as a result")
            raise MissingTokenError()
        session.final_vfp = vfp
