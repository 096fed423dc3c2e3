"""Pytest configuration and fixtures for payfone_auth tests."""

from __future__ import annotations

import pytest

from tests.fixtures import CompletionRecorder, FakeTransport


@pytest.fixture
def fake_transport() -> FakeTransport:
    """Empty scripted transport."""
    return FakeTransport()


@pytest.fixture
def completion() -> CompletionRecorder:
    """Completion callback recorder."""
    return CompletionRecorder()
