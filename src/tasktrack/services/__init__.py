"""Shared services module for external integrations."""

from tasktrack.services.posthog import PostHogService
from tasktrack.services.results import GatewayError, GatewayResult

__all__ = [
    "PostHogService",
    "GatewayError",
    "GatewayResult",
]
