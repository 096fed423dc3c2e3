"""Tests for the JSON payload models."""

from __future__ import annotations

import pytest

from payfone_auth.core.auth.payloads import FinishResponse, StartResponse, TokenBody, parse_payload
from payfone_auth.core.exceptions import InvalidResponseError


class TestStartResponse:
    """Start endpoint payloads."""

    def test_success(self):
        """status 0 with a targetUrl."""
        start = parse_payload(StartResponse, '{"status": 0, "targetUrl": "http://oap7.example/auth"}', "start")
        assert start.status == 0
        assert start.target_url == "http://oap7.example/auth"

    def test_failure_with_description(self):
        """Non-zero status carries a description."""
        start = parse_payload(StartResponse, b'{"status": 7, "description": "Not eligible"}', "start")
        assert start.status == 7
        assert start.description == "Not eligible"
        assert start.target_url is None

    def test_extra_fields_ignored(self):
        """Full authenticateByRedirect payloads are accepted."""
        start = parse_payload(StartResponse, '{"status": 0, "targetUrl": "x", "requestId": "r1"}', "start")
        assert start.target_url == "x"

    def test_missing_status(self):
        """status is required."""
        with pytest.raises(InvalidResponseError) as exc_info:
            parse_payload(StartResponse, '{"targetUrl": "x"}', "start_response")
        assert exc_info.value.field == "start_response"
        assert "start_response" in str(exc_info.value)


class TestFinishResponse:
    """Finish endpoint payloads."""

    def test_success(self):
        """Response fields map to snake_case attributes."""
        finish = parse_payload(
            FinishResponse,
            '{"Status": 0, "Description": "Success.", "Response": '
            '{"MobileNumber": "+15551234567", "MobileOperatorName": "CarrierX", "PayfoneAlias": "alias1"}}',
            "finish",
        )
        assert finish.status == 0
        assert finish.response.mobile_number == "+15551234567"
        assert finish.response.mobile_operator_name == "CarrierX"
        assert finish.response.payfone_alias == "alias1"

    def test_failure_without_response(self):
        """Failures omit Response."""
        finish = parse_payload(FinishResponse, '{"Status": 1001, "Description": "Expired"}', "finish")
        assert finish.response is None

    def test_incomplete_response(self):
        """A Response missing device fields is malformed."""
        with pytest.raises(InvalidResponseError):
            parse_payload(FinishResponse, '{"Status": 0, "Response": {"MobileNumber": "1"}}', "finish")


class TestParsePayload:
    """Error handling in parse_payload."""

    def test_not_json(self):
        """Non-JSON text is an InvalidResponseError with the raw value."""
        with pytest.raises(InvalidResponseError) as exc_info:
            parse_payload(TokenBody, "<html>oops</html>", "auth_response")
        assert exc_info.value.raw_value == "<html>oops</html>"
        assert exc_info.value.status_code == 4

    def test_json_array(self):
        """A JSON array is not an object payload."""
        with pytest.raises(InvalidResponseError):
            parse_payload(TokenBody, "[]", "auth_response")
