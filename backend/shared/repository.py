"""
Base class for Supabase-backed repositories.

A repository is bound to one table. Subclasses write the queries and the
row <-> model mapping; the base only holds the client and the table name.
"""

from typing import Generic, TypeVar

from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Table-bound repository over a Supabase client.

    Example:
        class UserRepository(BaseRepository[UserRecord]):
            table_name = "users"

            def get_by_id(self, user_id: str) -> Optional[UserRecord]:
                result = self._table().select("*").eq("id", user_id).execute()
                return self._map_to_user(result.data[0]) if result.data else None
    """

    table_name: str = ""

    def __init__(self, db: Client) -> None:
        self._db = db

    def _table(self):
        """Start a query on this repository's table."""
        if not self.table_name:
            raise NotImplementedError(f"{type(self).__name__} must set table_name")
        return self._db.table(self.table_name)
