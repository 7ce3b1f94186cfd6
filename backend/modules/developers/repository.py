"""
Supabase-backed credential store.

Encapsulates all queries against the developers table. Expirations are
stored as timestamptz; the conditional update matches on the exact stored
value so that two writers renewing the same period cannot both win.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from postgrest.exceptions import APIError
from supabase import Client

from shared.repository import BaseRepository
from .models import Developer, DeveloperQuery, DeveloperUpdate
from .exceptions import (
    ConcurrentUpdateError,
    DeveloperNotFoundError,
    DuplicateEmailError,
    StoreError,
)

logger = logging.getLogger(__name__)

# Postgres unique_violation
_UNIQUE_VIOLATION = "23505"


class DeveloperRepository(BaseRepository[Developer]):
    """
    Credential store over a Supabase table.

    Implements IDeveloperStore. Queries are issued with the synchronous
    Supabase client, as elsewhere in the backend.
    """

    def __init__(self, db: Client, table_name: str = "developers") -> None:
        super().__init__(db, table_name)

    async def get_by_id(self, developer_id: str) -> Developer:
        return await self.get_by_query(DeveloperQuery(id=developer_id))

    async def get_by_query(self, query: DeveloperQuery) -> Developer:
        try:
            result = (
                self._table()
                .select("*")
                .eq(query.field, query.value)
                .limit(1)
                .execute()
            )
        except APIError as e:
            raise StoreError(f"Failed to load developer: {e.message}", "select") from e

        if not result.data:
            raise DeveloperNotFoundError(query.field, query.value)
        return self._map_to_developer(result.data[0])

    async def update(
        self,
        query: DeveloperQuery,
        update: DeveloperUpdate,
        expected_expiration: Optional[datetime] = None,
    ) -> Developer:
        document = self._serialize(update.to_document())
        if not document:
            return await self.get_by_query(query)

        builder = self._table().update(document).eq(query.field, query.value)
        if expected_expiration is not None:
            builder = builder.eq("expiration", _to_iso(expected_expiration))

        try:
            result = builder.execute()
        except APIError as e:
            if e.code == _UNIQUE_VIOLATION and update.email is not None:
                raise DuplicateEmailError(update.email) from e
            raise StoreError(f"Failed to update developer: {e.message}", "update") from e

        if result.data:
            return self._map_to_developer(result.data[0])

        # Nothing matched: either the developer is gone or the CAS lost.
        current = await self.get_by_query(query)
        if expected_expiration is not None:
            logger.warning(
                f"Conditional update lost for developer {current.id}: "
                f"expected expiration {expected_expiration.isoformat()}, "
                f"found {current.expiration.isoformat() if current.expiration else None}"
            )
            raise ConcurrentUpdateError(current.id, expected_expiration)
        return current

    async def insert(self, developer: Developer) -> Developer:
        document = self._serialize(developer.model_dump())
        try:
            result = self._table().insert(document).execute()
        except APIError as e:
            if e.code == _UNIQUE_VIOLATION and "email" in (e.message or ""):
                raise DuplicateEmailError(developer.email) from e
            raise StoreError(f"Failed to insert developer: {e.message}", "insert") from e

        if not result.data:
            raise StoreError("Insert returned no rows", "insert")
        return self._map_to_developer(result.data[0])

    async def list_developers(self) -> list[Developer]:
        try:
            result = self._table().select("*").order("created_at", desc=True).execute()
        except APIError as e:
            raise StoreError(f"Failed to list developers: {e.message}", "select") from e
        return [self._map_to_developer(row) for row in result.data]

    # -------------------------------------------------------------------------
    # Mapping helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _serialize(document: dict[str, Any]) -> dict[str, Any]:
        """Convert datetimes to ISO strings for the PostgREST payload."""
        return {
            key: _to_iso(value) if isinstance(value, datetime) else value
            for key, value in document.items()
        }

    @staticmethod
    def _map_to_developer(data: dict[str, Any]) -> Developer:
        """Map database row to Developer model."""
        return Developer(
            id=str(data["id"]),
            name=data.get("name") or "",
            email=data["email"],
            token=data.get("token") or "",
            password_hash=data.get("password_hash") or "",
            salt=data.get("salt") or "",
            expiration=data.get("expiration"),
            payment_method_token=data.get("payment_method_token"),
            is_paid=bool(data.get("is_paid", False)),
            is_admin=bool(data.get("is_admin", False)),
            created_at=data.get("created_at"),
        )


def _to_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()
