"""Tests for the PostHog analytics wrapper."""

from unittest.mock import patch

from tasktrack.services import PostHogService


def test_capture_is_noop_without_api_key() -> None:
    with (
        patch("tasktrack.services.posthog.settings") as mock_settings,
        patch("tasktrack.services.posthog.posthog") as mock_posthog,
    ):
        mock_settings.posthog_api_key = None
        service = PostHogService()
        service.capture("user-123", "task_created")
        service.shutdown()

    assert service.enabled is False
    mock_posthog.capture.assert_not_called()
    mock_posthog.shutdown.assert_not_called()


def test_capture_forwards_event() -> None:
    with (
        patch("tasktrack.services.posthog.settings") as mock_settings,
        patch("tasktrack.services.posthog.posthog") as mock_posthog,
    ):
        mock_settings.posthog_api_key = "phc_test"
        mock_settings.posthog_host = "https://eu.posthog.com"
        service = PostHogService()
        service.capture("user-123", "task_created", {"task_id": "abc"})
        service.shutdown()

    assert mock_posthog.api_key == "phc_test"
    assert mock_posthog.host == "https://eu.posthog.com"
    mock_posthog.capture.assert_called_once_with(
        distinct_id="user-123", event="task_created", properties={"task_id": "abc"}
    )
    mock_posthog.shutdown.assert_called_once()


def test_identify_sets_person_properties() -> None:
    """Test a registered user's email and name are attached to their person."""
    with (
        patch("tasktrack.services.posthog.settings") as mock_settings,
        patch("tasktrack.services.posthog.posthog") as mock_posthog,
    ):
        mock_settings.posthog_api_key = "phc_test"
        PostHogService().identify("user-123", {"email": "jane@example.com"})

    mock_posthog.set.assert_called_once_with(
        distinct_id="user-123", properties={"email": "jane@example.com"}
    )


def test_identify_is_noop_without_api_key() -> None:
    with (
        patch("tasktrack.services.posthog.settings") as mock_settings,
        patch("tasktrack.services.posthog.posthog") as mock_posthog,
    ):
        mock_settings.posthog_api_key = None
        PostHogService().identify("user-123", {"email": "jane@example.com"})

    mock_posthog.set.assert_not_called()
