"""
In-memory credential store.

Used by the test suite and for local development when Supabase is not
configured. Behaves like DeveloperRepository, including the conditional
update on expiration.
"""

from datetime import datetime
from typing import Optional

from .models import Developer, DeveloperQuery, DeveloperUpdate
from .exceptions import (
    ConcurrentUpdateError,
    DeveloperNotFoundError,
    DuplicateEmailError,
    StoreError,
)


class InMemoryDeveloperStore:
    """Dictionary-backed implementation of IDeveloperStore."""

    def __init__(self, developers: Optional[list[Developer]] = None):
        self._developers: dict[str, Developer] = {}
        for developer in developers or []:
            self._developers[developer.id] = developer

    async def get_by_id(self, developer_id: str) -> Developer:
        return await self.get_by_query(DeveloperQuery(id=developer_id))

    async def get_by_query(self, query: DeveloperQuery) -> Developer:
        return self._find(query)

    async def update(
        self,
        query: DeveloperQuery,
        update: DeveloperUpdate,
        expected_expiration: Optional[datetime] = None,
    ) -> Developer:
        current = self._find(query)

        if expected_expiration is not None and current.expiration != expected_expiration:
            raise ConcurrentUpdateError(current.id, expected_expiration)

        if update.email is not None and update.email != current.email:
            if self._email_taken(update.email, exclude_id=current.id):
                raise DuplicateEmailError(update.email)

        updated = current.model_copy(update=update.to_document())
        self._developers[updated.id] = updated
        return updated

    async def insert(self, developer: Developer) -> Developer:
        if developer.id in self._developers:
            raise StoreError(f"Developer {developer.id} already exists", "insert")
        if self._email_taken(developer.email):
            raise DuplicateEmailError(developer.email)
        self._developers[developer.id] = developer
        return developer

    async def list_developers(self) -> list[Developer]:
        return sorted(
            self._developers.values(),
            key=lambda d: d.created_at.timestamp() if d.created_at else 0.0,
            reverse=True,
        )

    def _find(self, query: DeveloperQuery) -> Developer:
        if query.id is not None:
            developer = self._developers.get(query.id)
        else:
            developer = next(
                (d for d in self._developers.values() if getattr(d, query.field) == query.value),
                None,
            )
        if developer is None:
            raise DeveloperNotFoundError(query.field, query.value)
        return developer

    def _email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        return any(
            d.email.lower() == email.lower()
            for d in self._developers.values()
            if d.id != exclude_id
        )
