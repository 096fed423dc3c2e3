"""HTTP transport for the authentication legs.

The flow talks to the network through the small HttpTransport interface so
it can be driven by aiohttp in production and by a scripted fake in tests.
Each call returns an HttpResponse holding the status, reason phrase, raw
body, and Location header. Redirects are never followed by the transport;
the response interpreter decides what to do with them.

Uses aiohttp to keep every leg non-blocking on the caller's event loop.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import aiohttp

from .exceptions import NetworkError

_LOGGER = logging.getLogger(__name__)


@dataclass
class HttpRequest:
    """A single request issued by one leg of the flow.

    Attributes:
        method: "GET" or "POST"
        url: Fully built request URL
        body: Raw request body (POST flow only)
        with_credentials: Send and store cookies for this request
    """

    method: str
    url: str
    body: str | None = None
    with_credentials: bool = False


@dataclass
class HttpResponse:
    """Outcome of a request that reached the server."""

    status: int
    reason: str = ""
    body: bytes = b""
    location: str | None = None

    @property
    def ok(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status < 300

    @property
    def is_redirect(self) -> bool:
        """True for 3xx statuses carrying a Location header."""
        return 300 <= self.status < 400 and bool(self.location)

    @property
    def text(self) -> str:
        """Body decoded as UTF-8."""
        return self.body.decode("utf-8", errors="replace")


class HttpTransport(ABC):
    """Abstract non-blocking HTTP transport.

    Implementations raise NetworkError when the request never produced an
    HTTP response. Any status code, including errors, is returned as an
    HttpResponse.
    """

    @abstractmethod
    async def send(self, request: HttpRequest) -> HttpResponse:
        """Send the request and return the response without following redirects."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release any pooled connections."""
        return None

    async def __aenter__(self) -> HttpTransport:
        """Enter async context."""
        return self

    async def __aexit__(self, *exc_info) -> None:
        """Close on context exit."""
        await self.close()


class AiohttpTransport(HttpTransport):
    """HttpTransport backed by aiohttp client sessions.

    Two sessions are kept: one with a cookie jar for credentialed requests
    and one that never stores or sends cookies. Both are created lazily.
    """

    def __init__(self, verify_ssl: bool = True, user_agent: str | None = None):
        """Initialize transport.

        Args:
            verify_ssl: Verify TLS certificates of every endpoint
            user_agent: Optional User-Agent header for every request
        """
        self._verify_ssl = verify_ssl
        self._headers = {"User-Agent": user_agent} if user_agent else {}
        self._credential_session: aiohttp.ClientSession | None = None
        self._anonymous_session: aiohttp.ClientSession | None = None

    def _get_session(self, with_credentials: bool) -> aiohttp.ClientSession:
        """Return the session matching the request's cookie semantics."""
        if with_credentials:
            if self._credential_session is None:
                self._credential_session = aiohttp.ClientSession(
                    cookie_jar=aiohttp.CookieJar(unsafe=True),
                    headers=self._headers,
                )
            return self._credential_session

        if self._anonymous_session is None:
            self._anonymous_session = aiohttp.ClientSession(
                cookie_jar=aiohttp.DummyCookieJar(),
                headers=self._headers,
            )
        return self._anonymous_session

    async def send(self, request: HttpRequest) -> HttpResponse:
        """Send the request with aiohttp."""
        session = self._get_session(request.with_credentials)
        try:
            async with session.request(
                request.method,
                request.url,
                data=request.body,
                allow_redirects=False,
                ssl=self._verify_ssl,
            ) as response:
                body = await response.read()
                return HttpResponse(
                    status=response.status,
                    reason=response.reason or "",
                    body=body,
                    location=response.headers.get("Location"),
                )
        except TimeoutError as e:
            _LOGGER.warning("%s %s timed out: %s", request.method, request.url, e)
            raise NetworkError(request.url) from e
        except aiohttp.ClientError as e:
            _LOGGER.warning("%s %s failed: %s", request.method, request.url, e)
            raise NetworkError(request.url) from e

    async def close(self) -> None:
        """Close both sessions if they were opened."""
        for session in (self._credential_session, self._anonymous_session):
            if session is not None and not session.closed:
                await session.close()
        self._credential_session = None
        self._anonymous_session = None
