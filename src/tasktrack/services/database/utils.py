"""Filter-based Supabase query helpers used by the task gateway."""

from typing import Any

from supabase import Client

from tasktrack.services.database.connection import get_supabase_client


class SupabaseQueryBuilder:
    """Builds equality-filtered Supabase queries and returns their row dictionaries."""

    def __init__(self, client: Client | None = None) -> None:
        """
        Initialize query builder.

        Args:
            client: Supabase client instance (uses default if None)
        """
        self.client = client or get_supabase_client()

    def list_records(
        self,
        table: str,
        columns: str = "*",
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        order_desc: bool = True,
    ) -> list[dict[str, Any]]:
        """
        List records with optional filtering and ordering.

        Args:
            table: Table name
            columns: Columns to select (default: "*")
            filters: Dictionary of field:value pairs for filtering
            order_by: Column to order by
            order_desc: Order descending (default: True)

        Returns:
            List of record dictionaries

        Example:
            >>> builder = SupabaseQueryBuilder()
            >>> tasks = builder.list_records(
            ...     "tasks",
            ...     filters={"user_id": user_id},
            ...     order_by="created_at",
            ... )
        """
        query = self.client.table(table).select(columns)

        if filters:
            for field, value in filters.items():
                query = query.eq(field, value)

        if order_by:
            query = query.order(order_by, desc=order_desc)

        response = query.execute()
        return response.data

    def insert_record(self, table: str, data: dict[str, Any]) -> dict[str, Any] | None:
        """
        Insert a single record.

        Args:
            table: Table name
            data: Record data dictionary

        Returns:
            Inserted record dictionary or None if nothing was returned

        Example:
            >>> builder = SupabaseQueryBuilder()
            >>> task = builder.insert_record("tasks", {"name": "Buy milk", "user_id": user_id})
        """
        response = self.client.table(table).insert(data).execute()
        return response.data[0] if response.data else None

    def update_by_filter(
        self, table: str, filters: dict[str, Any], data: dict[str, Any]
    ) -> list[dict[str, Any]]:
        """
        Update records matching filters.

        Args:
            table: Table name
            filters: Dictionary of field:value pairs for filtering
            data: Fields to update

        Returns:
            List of updated record dictionaries (empty if nothing matched)

        Example:
            >>> builder = SupabaseQueryBuilder()
            >>> updated = builder.update_by_filter(
            ...     "tasks",
            ...     {"id": task_id, "user_id": user_id},
            ...     {"status": "Completed"}
            ... )
        """
        query = self.client.table(table).update(data)

        for field, value in filters.items():
            query = query.eq(field, value)

        response = query.execute()
        return response.data

    def delete_by_filter(self, table: str, filters: dict[str, Any]) -> list[dict[str, Any]]:
        """
        Delete records matching filters.

        Args:
            table: Table name
            filters: Dictionary of field:value pairs for filtering

        Returns:
            List of deleted record dictionaries (empty if nothing matched)

        Example:
            >>> builder = SupabaseQueryBuilder()
            >>> deleted = builder.delete_by_filter("tasks", {"id": task_id})
        """
        query = self.client.table(table).delete()

        for field, value in filters.items():
            query = query.eq(field, value)

        response = query.execute()
        return response.data


def get_query_builder(client: Client | None = None) -> SupabaseQueryBuilder:
    """
    Get instance of SupabaseQueryBuilder.

    Args:
        client: Optional Supabase client (uses the shared client if None)

    Returns:
        SupabaseQueryBuilder instance

    Example:
        >>> db = get_query_builder()
        >>> tasks = db.list_records("tasks", filters={"user_id": user_id})
    """
    return SupabaseQueryBuilder(client)
