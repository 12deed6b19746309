"""Shared Supabase client for auth and table access."""

from functools import lru_cache

from supabase import Client, create_client
from supabase.client import ClientOptions

from tasktrack.config import settings
from tasktrack.services.auth.storage import SupabaseSessionStorage


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """
    Get the process-wide Supabase client.

    Auth and task queries share this client, so table reads and writes run
    under the signed-in user's Row-Level Security policies. The SDK session
    is kept in `settings.state_dir` next to the local stores, so a restart
    resumes the same remote session that the restored Session describes.

    Returns:
        Supabase client using the anon key and disk-backed session storage
    """
    options = ClientOptions(storage=SupabaseSessionStorage.for_dir(settings.state_dir))
    return create_client(settings.supabase_url, settings.supabase_anon_key, options=options)
