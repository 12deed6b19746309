"""Database connection and task storage."""

from tasktrack.services.database.connection import get_supabase_client
from tasktrack.services.database.exceptions import StorageError
from tasktrack.services.database.tasks import TaskGateway
from tasktrack.services.database.utils import SupabaseQueryBuilder, get_query_builder

__all__ = [
    "get_supabase_client",
    "SupabaseQueryBuilder",
    "get_query_builder",
    "StorageError",
    "TaskGateway",
]
