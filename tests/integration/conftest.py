"""Shared fixtures for integration tests."""

import os

import pytest

# Skip all integration tests unless ORB_API_KEY is set
pytestmark = pytest.mark.skipif(
    not os.environ.get("ORB_API_KEY"),
    reason="Requires a live Orb account. Set ORB_API_KEY to run",
)


@pytest.fixture
def api_key() -> str:
    key = os.environ.get("ORB_API_KEY")
    if not key:
        pytest.skip("ORB_API_KEY is not set")
    return key
