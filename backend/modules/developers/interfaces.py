"""
Developer module interfaces.

Other modules should depend on IDeveloperStore, not a concrete store.
The licensing module reads and advances expirations through it without
knowing whether records live in Supabase or in memory.
"""

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from .models import Developer, DeveloperQuery, DeveloperUpdate


@runtime_checkable
class IDeveloperStore(Protocol):
    """
    Interface for developer persistence.

    Implementations raise DeveloperNotFoundError for unknown keys,
    DuplicateEmailError on conflicting inserts, ConcurrentUpdateError when
    a conditional update loses, and StoreError for anything else.
    """

    async def get_by_id(self, developer_id: str) -> Developer:
        """
        Load a developer by ID.

        Raises:
            DeveloperNotFoundError: If no developer has this ID
        """
        ...

    async def get_by_query(self, query: DeveloperQuery) -> Developer:
        """
        Load a developer by ID, email or token.

        Raises:
            DeveloperNotFoundError: If nothing matches
        """
        ...

    async def update(
        self,
        query: DeveloperQuery,
        update: DeveloperUpdate,
        expected_expiration: Optional[datetime] = None,
    ) -> Developer:
        """
        Apply a partial update and return the updated developer.

        Args:
            query: Which developer to update
            update: Fields to write
            expected_expiration: When given, the write only happens if the
                stored expiration still equals this value

        Raises:
            DeveloperNotFoundError: If nothing matches
            ConcurrentUpdateError: If expected_expiration no longer matches
            DuplicateEmailError: If the new email belongs to someone else
        """
        ...

    async def insert(self, developer: Developer) -> Developer:
        """
        Persist a new developer.

        Raises:
            DuplicateEmailError: If the email is already registered
        """
        ...

    async def list_developers(self) -> list[Developer]:
        """Return all developers, most recent first."""
        ...
