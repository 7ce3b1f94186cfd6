"""
Developer account service.

Self-service account operations: signup with a password, login (which
rotates the bearer token), profile lookups and edits, and the admin
views. PBKDF2 hashing runs in a worker thread, off the event loop.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from modules.events.interfaces import IEventNotifier
from modules.events.models import EventName

from .interfaces import IDeveloperStore
from .models import (
    Developer,
    DeveloperProfile,
    DeveloperPublic,
    DeveloperQuery,
    DeveloperUpdate,
)
from .exceptions import (
    DeveloperNotFoundError,
    DuplicateEmailError,
    ExpirationDecreaseError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingCredentialsError,
)
from .security import generate_salt, generate_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class DeveloperService:
    """Account management on top of an IDeveloperStore."""

    def __init__(
        self,
        store: IDeveloperStore,
        notifier: IEventNotifier,
        trial_period: timedelta = timedelta(days=30),
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._store = store
        self._notifier = notifier
        self._trial_period = trial_period
        self._clock = clock

    async def create_developer(self, name: str, email: str, password: str) -> Developer:
        """
        Create a developer with a password and a trial period.

        Raises:
            MissingCredentialsError: If email or password is empty
            DuplicateEmailError: If the email is already registered
        """
        if not email or not password:
            raise MissingCredentialsError()

        try:
            await self._store.get_by_query(DeveloperQuery(email=email))
        except DeveloperNotFoundError:
            pass
        else:
            raise DuplicateEmailError(email)

        now = self._clock()
        salt = generate_salt()
        developer = Developer(
            id=uuid.uuid4().hex,
            name=name,
            email=email,
            token=generate_token(),
            password_hash=await asyncio.to_thread(hash_password, password, salt),
            salt=salt,
            expiration=now + self._trial_period,
            created_at=now,
        )
        developer = await self._store.insert(developer)

        logger.info(f"Created developer {developer.id}")
        self._notifier.emit(
            EventName.DEVELOPER_NEW,
            {"developer": developer.to_public().model_dump(mode="json")},
        )
        return developer

    async def login(self, email: str, password: str) -> str:
        """
        Verify credentials and issue a fresh token.

        Returns:
            The new token; the previous one stops working

        Raises:
            DeveloperNotFoundError: If no developer has this email
            InvalidCredentialsError: If the password is wrong
        """
        if not email or not password:
            raise MissingCredentialsError()

        query = DeveloperQuery(email=email)
        developer = await self._store.get_by_query(query)
        if not await asyncio.to_thread(
            verify_password, password, developer.salt, developer.password_hash
        ):
            raise InvalidCredentialsError()

        token = generate_token()
        await self._store.update(query, DeveloperUpdate(token=token))
        return token

    async def get_by_token(self, token: str) -> Developer:
        """
        Resolve a bearer token to its developer.

        Raises:
            InvalidTokenError: If the token is empty or unknown
        """
        if not token:
            raise InvalidTokenError("Valid token required.")
        try:
            return await self._store.get_by_query(DeveloperQuery(token=token))
        except DeveloperNotFoundError:
            raise InvalidTokenError()

    async def get_developer(
        self,
        developer_id: str,
        requester: Optional[Developer] = None,
    ) -> DeveloperPublic | DeveloperProfile:
        """Full snapshot for the developer themselves, minimal profile for anyone else."""
        developer = await self._store.get_by_id(developer_id)
        if requester is not None and requester.id == developer.id:
            return developer.to_public()
        return developer.to_profile()

    async def update_profile(
        self,
        developer: Developer,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
        old_password: Optional[str] = None,
    ) -> Developer:
        """
        Edit name, email or password.

        Raises:
            InvalidCredentialsError: If a new password is given without the
                correct old password
            DuplicateEmailError: If the new email belongs to someone else
        """
        password_hash = None
        if password:
            if not old_password or not await asyncio.to_thread(
                verify_password, old_password, developer.salt, developer.password_hash
            ):
                raise InvalidCredentialsError("Old password is incorrect.")
            password_hash = await asyncio.to_thread(hash_password, password, developer.salt)

        update = DeveloperUpdate(
            name=name or None,
            email=email or None,
            password_hash=password_hash,
        )
        if update.is_empty():
            return developer
        return await self._store.update(DeveloperQuery(id=developer.id), update)

    async def list_developers(self) -> list[Developer]:
        return await self._store.list_developers()

    async def get_for_admin(self, developer_id: str) -> Developer:
        """Full record of any developer, for the admin view."""
        return await self._store.get_by_id(developer_id)

    async def admin_update(
        self,
        developer_id: str,
        is_admin: Optional[bool] = None,
        expiration: Optional[datetime] = None,
    ) -> Developer:
        """
        Grant or revoke admin rights and extend a developer's license.

        The expiration write is conditional on the value read here, so a
        renewal landing in between is not overwritten.

        Raises:
            DeveloperNotFoundError: If the ID is unknown
            ExpirationDecreaseError: If the new expiration is earlier than
                the current one
            ConcurrentUpdateError: If the expiration changed concurrently
        """
        current = await self._store.get_by_id(developer_id)

        if expiration is not None:
            if expiration.tzinfo is None:
                expiration = expiration.replace(tzinfo=timezone.utc)
            if current.expiration is not None:
                current_expiration = current.expiration
                if current_expiration.tzinfo is None:
                    current_expiration = current_expiration.replace(tzinfo=timezone.utc)
                if expiration < current_expiration:
                    raise ExpirationDecreaseError(developer_id, current_expiration, expiration)

        update = DeveloperUpdate(is_admin=is_admin, expiration=expiration)
        if update.is_empty():
            return current

        updated = await self._store.update(
            DeveloperQuery(id=developer_id),
            update,
            expected_expiration=current.expiration if expiration is not None else None,
        )
        logger.info(f"Admin updated developer {developer_id}: {update.to_document()}")
        return updated
