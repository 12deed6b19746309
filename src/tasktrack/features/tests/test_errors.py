"""Tests for gateway result to HTTP error mapping."""

import pytest

from tasktrack.features.errors import http_error_for
from tasktrack.services.auth import IdentityError
from tasktrack.services.database import StorageError
from tasktrack.services.results import GatewayResult


@pytest.mark.parametrize(
    "error,expected_status",
    [
        (IdentityError("Invalid login credentials", code="invalid_credentials"), 401),
        (IdentityError("No user logged in", code="session_missing"), 401),
        (IdentityError("User already registered", code="user_already_exists"), 400),
        (IdentityError("Network error"), 400),
        (StorageError("Task t1 not found", code="not_found"), 404),
        (StorageError("Permission denied", code="write_failed"), 502),
    ],
)
def test_status_codes(error, expected_status: int) -> None:
    exc = http_error_for(GatewayResult.fail(error), "fallback")

    assert exc.status_code == expected_status
    assert exc.detail == error.message


def test_fallback_detail() -> None:
    """Test the fallback is used when the gateway gave no message."""
    result = GatewayResult(success=False, error_kind="storage", error_code="read_failed")

    assert http_error_for(result, "Failed to sync tasks").detail == "Failed to sync tasks"
