"""Auth call dispatching: GET flow vs. POST ("PFFlow") flow.

A target URL carrying pfflow=2 holds a base64url-encoded JSON instruction
in its "data" parameter:

    {"url": "<post target>", "data": "<post body>", "vfp": "<token>"}

The dispatcher decodes it and turns the call into a credentialed POST.
Any other URL is called with GET after appending the r=f marker.
"""

from __future__ import annotations

import base64
import binascii
import logging

from ...const import (
    AUTH_MARKER_PARAM,
    AUTH_MARKER_VALUE,
    LOG_URL_CHARS,
    LOG_VFP_CHARS,
    PARAM_DATA,
    PARAM_VFP,
    PFFLOW_PARAM,
    PFFLOW_POST,
)
from ..exceptions import InvalidResponseError
from ..network import HttpRequest
from ..url_utils import append_query, parse_query, truncate
from .payloads import PostInstruction, parse_payload
from .session import AuthenticationSession
from .types import FlowMethod

_LOGGER = logging.getLogger(__name__)


def decode_instruction(encoded: str) -> PostInstruction:
    """Decode the base64url "data" parameter of a pfflow=2 URL.

    Raises:
        InvalidResponseError: If the value is not base64 or not a valid instruction
    """
    # URL-safe alphabet to standard, then restore stripped padding
    standard = encoded.replace("_", "/").replace("-", "+")
    standard += "=" * (-len(standard) % 4)
    try:
        decoded = base64.b64decode(standard, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidResponseError(
            "PFFlow data parameter is not valid base64",
            field="pfflow_data",
            raw_value=encoded,
        ) from e
    return parse_payload(PostInstruction, decoded, "pfflow_instruction")


class FlowDispatcher:
    """Builds the next auth-leg request for a session."""

    def dispatch(self, session: AuthenticationSession) -> HttpRequest:
        """Decide GET or POST for the session's target URL.

        Updates target_url, vfp, and is_post_flow on the session and returns
        the single request to issue.

        Raises:
            InvalidResponseError: If a pfflow=2 URL carries a bad instruction
        """
        if not session.target_url:
            raise InvalidResponseError("No authentication URL to call", field="target_url")

        params = parse_query(session.target_url)
        if params.get(PFFLOW_PARAM) == PFFLOW_POST:
            return self._dispatch_post(session, params)
        return self._dispatch_get(session, params)

    def _dispatch_post(self, session: AuthenticationSession, params: dict[str, str]) -> HttpRequest:
        """Build the POST flow request from the embedded instruction."""
        encoded = params.get(PARAM_DATA)
        if not encoded:
            raise InvalidResponseError(
                "PFFlow URL is missing its data parameter",
                field="pfflow_data",
                raw_value=session.target_url,
            )

        instruction = decode_instruction(encoded)
        session.target_url = instruction.url
        session.vfp = instruction.vfp
        session.is_post_flow = True

        _LOGGER.debug("PFFlow=2 found, POST to %s", truncate(instruction.url, LOG_URL_CHARS))
        return HttpRequest(
            method=FlowMethod.POST.value,
            url=instruction.url,
            body=instruction.data,
            with_credentials=True,
        )

    def _dispatch_get(self, session: AuthenticationSession, params: dict[str, str]) -> HttpRequest:
        """Build the GET flow request, remembering any vfp on the URL."""
        session.is_post_flow = False
        if PARAM_VFP in params:
            session.vfp = params[PARAM_VFP]
            _LOGGER.debug("Found VFP in URL: %s", truncate(session.vfp, LOG_VFP_CHARS))

        target = append_query(session.target_url or "", AUTH_MARKER_PARAM, AUTH_MARKER_VALUE)
        session.target_url = target
        return HttpRequest(method=FlowMethod.GET.value, url=target)
