"""Test helpers shared across payfone_auth tests.

Provides a scripted transport, a completion callback recorder, and builders
for the payloads exchanged with the start, auth, and finish endpoints.
"""

from __future__ import annotations

import base64
import json

from payfone_auth.core.network import HttpRequest, HttpResponse, HttpTransport

START_URL = "https://integrator.example/payfone/start"
FINISH_URL = "https://integrator.example/payfone/finish"
DEVICE_IP = "203.0.113.7"

FINISH_SUCCESS = {
    "Status": 0,
    "Description": "Success.",
    "Response": {
        "MobileNumber": "+15551234567",
        "MobileOperatorName": "CarrierX",
        "PayfoneAlias": "alias1",
    },
}


def json_response(payload: dict, status: int = 200) -> HttpResponse:
    """Build a JSON HttpResponse."""
    return HttpResponse(status=status, reason="OK", body=json.dumps(payload).encode())


def encode_instruction(url: str, data: str, vfp: str) -> str:
    """Encode a pfflow=2 instruction the way carriers do (base64url, no padding)."""
    raw = json.dumps({"url": url, "data": data, "vfp": vfp}).encode()
    return base64.urlsafe_b64encode(raw).decode().rstrip("=")


class FakeTransport(HttpTransport):
    """Scripted transport returning queued responses in order.

    Queue entries are HttpResponse objects, or exceptions to raise.
    Every request is recorded for assertions.
    """

    def __init__(self, responses: list[HttpResponse | Exception] | None = None):
        self.responses = list(responses or [])
        self.requests: list[HttpRequest] = []
        self.closed = False

    def queue(self, *responses: HttpResponse | Exception) -> None:
        self.responses.extend(responses)

    async def send(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self) -> None:
        self.closed = True

    @property
    def urls(self) -> list[str]:
        return [request.url for request in self.requests]


class CompletionRecorder:
    """Collects completion callback invocations."""

    def __init__(self):
        self.calls: list[tuple] = []

    def __call__(self, status_code, description, is_authenticated, device_info):
        self.calls.append((status_code, description, is_authenticated, device_info))

    @property
    def only_call(self) -> tuple:
        assert len(self.calls) == 1, f"expected one completion, got {len(self.calls)}"
        return self.calls[0]
