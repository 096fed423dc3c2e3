"""Exceptions for the Payfone authentication flow.

Every failure in the flow is an AuthFlowError carrying the status code and
description that end up in the completion notification. The orchestrator
catches these at the top of the flow and converts them into a single
failure result.
"""

from __future__ import annotations

from ..const import (
    NETWORK_ERROR_DESCRIPTION,
    STATUS_INVALID_RESPONSE,
    STATUS_MISSING_TOKEN,
    STATUS_NETWORK_ERROR,
    STATUS_NO_DATA,
    STATUS_TOO_MANY_REDIRECTS,
)


class AuthFlowError(Exception):
    """Base error for a failed authentication leg.

    Attributes:
        status_code: Status code reported to the completion callback
        description: Human-readable description reported to the callback
    """

    def __init__(self, description: str, status_code: int):
        """Initialize error with the status reported to the caller."""
        super().__init__(description)
        self.description = description
        self.status_code = status_code


class NetworkError(AuthFlowError):
    """The transport could not complete the request.

    Raised for connection refused, DNS failures, and transport timeouts.
    """

    def __init__(self, url: str | None = None):
        """Initialize error with the URL that could not be reached."""
        super().__init__(NETWORK_ERROR_DESCRIPTION, STATUS_NETWORK_ERROR)
        self.url = url


class HttpStatusError(AuthFlowError):
    """A leg returned a non-2xx HTTP status.

    Attributes:
        url: The URL that returned the status
    """

    def __init__(self, status_code: int, reason: str, url: str | None = None):
        """Initialize error with the HTTP status and reason phrase."""
        super().__init__(reason, status_code)
        self.url = url

    def __str__(self) -> str:
        """Format error with context."""
        parts = [f"{self.status_code} - {self.description}"]
        if self.url:
            parts.append(f"url={self.url}")
        return " | ".join(parts)


class VendorStatusError(AuthFlowError):
    """The start or finish endpoint reported a non-zero business status."""


class NoDataReturnedError(AuthFlowError):
    """The POST flow auth call returned an empty body."""

    def __init__(self):
        """Initialize error with the fixed description."""
        super().__init__("Data was not returned from Authentication call.", STATUS_NO_DATA)


class MissingTokenError(AuthFlowError):
    """No verification token could be found in the auth response."""

    def __init__(self, description: str = "Verification token was not returned from Authentication call."):
        """Initialize error with an optional description."""
        super().__init__(description, STATUS_MISSING_TOKEN)


class TooManyRedirectsError(AuthFlowError):
    """The auth endpoint kept redirecting past the configured limit."""

    def __init__(self, max_redirects: int):
        """Initialize error with the limit that was exceeded."""
        super().__init__(
            f"Authentication call exceeded {max_redirects} redirects.",
            STATUS_TOO_MANY_REDIRECTS,
        )
        self.max_redirects = max_redirects


class InvalidResponseError(AuthFlowError):
    """A response could not be parsed into the expected shape.

    Raised when JSON, base64, or field validation fails. Provides context
    about which payload was being parsed.

    Attributes:
        field: Name of the payload or field being parsed (e.g., "start_response")
        raw_value: The raw value that failed to parse
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        raw_value: str | None = None,
    ):
        """Initialize parsing error with context.

        Args:
            message: Human-readable error description
            field: Name of the payload or field being parsed
            raw_value: The raw value that failed to parse
        """
        super().__init__(message, STATUS_INVALID_RESPONSE)
        self.field = field
        self.raw_value = raw_value

    def __str__(self) -> str:
        """Format error with context."""
        parts = [super().__str__()]
        if self.field:
            parts.append(f"field={self.field}")
        if self.raw_value is not None:
            # Truncate long values
            display_value = self.raw_value[:50] + "..." if len(self.raw_value) > 50 else self.raw_value
            parts.append(f"raw_value={display_value!r}")
        return " | ".join(parts)
