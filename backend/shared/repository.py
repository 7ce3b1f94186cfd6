"""
Base repository class for database access.

Provides a common abstraction layer for Supabase-backed stores, encapsulating
client access and the table a store reads from.
"""

from typing import TypeVar, Generic
from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Table name via self._table_name and the _table() query builder
    - Generic type parameter for model type hints

    Subclasses implement domain-specific data access methods and handle
    dict-to-Pydantic model mapping internally.
    """

    def __init__(self, db: Client, table_name: str) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
            table_name: Table the repository reads and writes.
        """
        self._db = db
        self._table_name = table_name

    def _table(self):
        """Start a query against the repository's table."""
        return self._db.table(self._table_name)
