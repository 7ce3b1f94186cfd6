"""
License lifecycle service.

Runs the session check state machine: load the developer, classify the
license, and renew lapsed licenses that have a stored payment method.
Also grants the first period for trial and paid signups.

Renewals for one developer are serialised by a per-developer lock, and the
expiration write is conditional on the value read before charging, so a
second process renewing the same period loses the write instead of
extending twice. Charges carry an idempotency key bound to the period
being renewed, so racing processes share one charge.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from modules.developers.exceptions import (
    ConcurrentUpdateError,
    DeveloperNotFoundError,
    DuplicateEmailError,
    StoreError,
)
from modules.developers.interfaces import IDeveloperStore
from modules.developers.models import (
    Developer,
    DeveloperQuery,
    DeveloperUpdate,
    normalize_email,
)
from modules.developers.security import generate_token
from modules.events.interfaces import IEventNotifier
from modules.events.models import EventName
from modules.payments.exceptions import PaymentDeclinedError, PaymentIndeterminateError
from modules.payments.interfaces import IPaymentGateway

from .evaluator import as_utc, evaluate
from .locks import KeyedLock
from .models import (
    LicensePolicy,
    LicenseState,
    RenewalFailureReason,
    SessionResult,
)

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def renewal_idempotency_key(developer: Developer) -> str:
    """Key shared by every attempt to renew the same lapsed period."""
    expiration = as_utc(developer.expiration)
    return f"renewal-{developer.id}-{int(expiration.timestamp())}"


class LicenseService:
    """
    Implementation of ILicenseService.

    All collaborators are injected; the service holds no process-wide
    state besides its own lock pool.
    """

    def __init__(
        self,
        store: IDeveloperStore,
        gateway: IPaymentGateway,
        notifier: IEventNotifier,
        policy: LicensePolicy,
        clock: Callable[[], datetime] = utc_now,
        locks: Optional[KeyedLock] = None,
    ):
        self._store = store
        self._gateway = gateway
        self._notifier = notifier
        self._policy = policy
        self._clock = clock
        self._locks = locks or KeyedLock()

    @property
    def policy(self) -> LicensePolicy:
        return self._policy

    # -------------------------------------------------------------------------
    # Session check
    # -------------------------------------------------------------------------

    async def check_session(self, developer_id: str) -> SessionResult:
        developer = await self._load_for_session(developer_id)
        state = evaluate(developer, self._clock())

        if state is LicenseState.EXPIRED_WITH_PAYMENT_METHOD:
            async with self._locks.acquire(developer.id):
                # a concurrent check may have renewed while we waited
                developer = await self._load_for_session(developer_id)
                now = self._clock()
                state = evaluate(developer, now)
                if state is LicenseState.EXPIRED_WITH_PAYMENT_METHOD:
                    return await self._renew(developer, now)

        if state is LicenseState.ACTIVE:
            self._emit(EventName.SESSION_FOUND, developer)
            return SessionResult.active(developer)

        self._emit(EventName.TRIAL_EXPIRED, developer)
        return SessionResult.expired(developer)

    async def _load_for_session(self, developer_id: str) -> Developer:
        try:
            return await self._store.get_by_id(developer_id)
        except DeveloperNotFoundError:
            self._notifier.emit(EventName.SESSION_FAILED, {"id": developer_id})
            raise

    async def _renew(self, developer: Developer, now: datetime) -> SessionResult:
        """Charge the stored payment method and advance the expiration."""
        try:
            charge = await self._gateway.charge(
                developer.payment_method_token,
                self._policy.renewal_amount,
                self._policy.currency,
                self._policy.renewal_description,
                idempotency_key=renewal_idempotency_key(developer),
            )
        except PaymentDeclinedError as e:
            logger.warning(f"Renewal declined for developer {developer.id}: {e.message}")
            self._emit(EventName.PAYMENT_FAILED, developer, reason=RenewalFailureReason.DECLINED.value)
            return SessionResult.renewal_failed(developer, RenewalFailureReason.DECLINED, e.message)
        except PaymentIndeterminateError as e:
            logger.warning(f"Renewal outcome unknown for developer {developer.id}: {e.message}")
            self._emit(
                EventName.PAYMENT_FAILED,
                developer,
                reason=RenewalFailureReason.INDETERMINATE.value,
            )
            return SessionResult.renewal_failed(
                developer, RenewalFailureReason.INDETERMINATE, e.message
            )

        update = DeveloperUpdate(
            expiration=now + self._policy.renewal_period,
            is_paid=True,
        )
        try:
            renewed = await self._store.update(
                DeveloperQuery(id=developer.id),
                update,
                expected_expiration=developer.expiration,
            )
        except ConcurrentUpdateError:
            return await self._resolve_lost_renewal(developer, now, charge.id)
        except (StoreError, DeveloperNotFoundError) as e:
            self._report_unrecorded_charge(developer, charge.id, e)
            return SessionResult.renewal_failed(
                developer,
                RenewalFailureReason.PERSISTENCE_FAILED,
                "Payment was taken but the license could not be extended",
                charge_id=charge.id,
            )

        logger.info(
            f"Renewed developer {renewed.id} until {renewed.expiration.isoformat()} "
            f"(charge {charge.id})"
        )
        self._emit(EventName.PAYMENT_RECURRED, renewed, charge_id=charge.id)
        return SessionResult.renewed(renewed, charge.id)

    async def _resolve_lost_renewal(
        self,
        developer: Developer,
        now: datetime,
        charge_id: str,
    ) -> SessionResult:
        """
        Another writer advanced the expiration between our read and write.

        The charge shared its idempotency key with the winner's, so no
        second payment was taken.
        """
        try:
            current = await self._store.get_by_id(developer.id)
        except (StoreError, DeveloperNotFoundError) as e:
            self._report_unrecorded_charge(developer, charge_id, e)
            return SessionResult.renewal_failed(
                developer,
                RenewalFailureReason.PERSISTENCE_FAILED,
                "Payment was taken but the license could not be extended",
                charge_id=charge_id,
            )
        logger.warning(
            f"Renewal for developer {developer.id} lost to a concurrent writer "
            f"(charge {charge_id})"
        )
        if evaluate(current, now) is LicenseState.ACTIVE:
            self._emit(EventName.SESSION_FOUND, current)
            return SessionResult.active(current)

        self._report_unrecorded_charge(developer, charge_id, None)
        return SessionResult.renewal_failed(
            current,
            RenewalFailureReason.PERSISTENCE_FAILED,
            "Payment was taken but the license could not be extended",
            charge_id=charge_id,
        )

    def _report_unrecorded_charge(
        self,
        developer: Developer,
        charge_id: str,
        error: Optional[Exception],
    ) -> None:
        logger.critical(
            f"Developer {developer.id} was charged ({charge_id}) "
            f"but the expiration was not advanced: {error}"
        )
        self._emit(
            EventName.PAYMENT_UNRECORDED,
            developer,
            charge_id=charge_id,
            error=str(error) if error else None,
        )

    # -------------------------------------------------------------------------
    # Initial grants
    # -------------------------------------------------------------------------

    async def start_trial(
        self,
        name: str,
        email: str,
        developer_id: Optional[str] = None,
    ) -> Developer:
        email = normalize_email(email)
        await self._ensure_email_available(email)

        now = self._clock()
        developer = Developer(
            id=developer_id or uuid.uuid4().hex,
            name=name,
            email=email,
            token=generate_token(),
            expiration=now + self._policy.trial_period,
            is_paid=False,
            created_at=now,
        )
        developer = await self._store.insert(developer)

        logger.info(f"Started trial for developer {developer.id}")
        self._emit(EventName.TRIAL_NEW, developer)
        return developer

    async def signup_paid(self, name: str, email: str, source_token: str) -> Developer:
        email = normalize_email(email)
        await self._ensure_email_available(email)

        developer_id = uuid.uuid4().hex
        customer_id = await self._gateway.create_customer(source_token, email, name or email)
        charge = await self._gateway.charge(
            customer_id,
            self._policy.purchase_amount,
            self._policy.currency,
            self._policy.purchase_description,
            idempotency_key=f"purchase-{developer_id}",
        )

        now = self._clock()
        developer = Developer(
            id=developer_id,
            name=name,
            email=email,
            token=generate_token(),
            expiration=now + self._policy.renewal_period,
            payment_method_token=customer_id,
            is_paid=True,
            created_at=now,
        )
        try:
            developer = await self._store.insert(developer)
        except (StoreError, DuplicateEmailError) as e:
            self._report_unrecorded_charge(developer, charge.id, e)
            raise

        logger.info(f"Paid signup for developer {developer.id} (charge {charge.id})")
        self._emit(EventName.PAYMENT_NEW, developer, charge_id=charge.id)
        return developer

    async def purchase(self, developer: Developer, source_token: str) -> Developer:
        async with self._locks.acquire(developer.id):
            current = await self._store.get_by_id(developer.id)
            customer_id = await self._gateway.create_customer(
                source_token,
                current.email,
                current.name or current.email,
            )

            now = self._clock()
            period_start = now
            if current.expiration is not None and as_utc(current.expiration) > now:
                period_start = as_utc(current.expiration)

            charge = await self._gateway.charge(
                customer_id,
                self._policy.purchase_amount,
                self._policy.currency,
                self._policy.purchase_description,
                idempotency_key=f"purchase-{current.id}-{int(period_start.timestamp())}",
            )

            update = DeveloperUpdate(
                expiration=period_start + self._policy.renewal_period,
                payment_method_token=customer_id,
                is_paid=True,
            )
            try:
                updated = await self._store.update(
                    DeveloperQuery(id=current.id),
                    update,
                    expected_expiration=current.expiration,
                )
            except (StoreError, ConcurrentUpdateError, DeveloperNotFoundError) as e:
                self._report_unrecorded_charge(current, charge.id, e)
                raise

        logger.info(f"Developer {updated.id} purchased a license (charge {charge.id})")
        self._emit(EventName.PAYMENT_NEW, updated, charge_id=charge.id)
        return updated

    async def _ensure_email_available(self, email: str) -> None:
        try:
            await self._store.get_by_query(DeveloperQuery(email=email))
        except DeveloperNotFoundError:
            return
        raise DuplicateEmailError(email)

    def _emit(self, event_name: EventName, developer: Developer, **extra: Any) -> None:
        payload = {"developer": developer.to_public().model_dump(mode="json"), **extra}
        self._notifier.emit(event_name, payload)
