"""Product analytics for the account and task lifecycle."""

import posthog

from tasktrack.config import settings


class PostHogService:
    """
    Records who signed up and what they did with their tasks.

    Events are keyed by the Supabase user ID. Without `POSTHOG_API_KEY`
    nothing is sent, so handlers call it unconditionally.

    Example:
        >>> analytics = PostHogService()
        >>> analytics.identify("user-123", {"email": "jane@example.com"})
        >>> analytics.capture("user-123", "task_created", {"task_id": "abc"})
    """

    def __init__(self) -> None:
        if self.enabled:
            posthog.api_key = settings.posthog_api_key
            posthog.host = settings.posthog_host

    @property
    def enabled(self) -> bool:
        return bool(settings.posthog_api_key)

    def identify(self, distinct_id: str, properties: dict | None = None) -> None:
        """
        Attach person properties (email, display name) to a newly registered user.

        Args:
            distinct_id: Supabase user ID
            properties: Person properties to set
        """
        if not self.enabled:
            return

        posthog.set(distinct_id=distinct_id, properties=properties or {})

    def capture(self, distinct_id: str, event: str, properties: dict | None = None) -> None:
        """
        Record an account or task event.

        Args:
            distinct_id: Supabase user ID, or "anonymous" for failed logins
            event: One of user_registered, user_logged_in, user_logged_out,
                authentication_failed, tasks_synced, task_created,
                task_updated, task_deleted
            properties: Optional event properties
        """
        if not self.enabled:
            return

        posthog.capture(distinct_id=distinct_id, event=event, properties=properties or {})

    def shutdown(self) -> None:
        """Flush queued events before the process exits."""
        if self.enabled:
            posthog.shutdown()
