"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
an in-memory credential store, a scripted payment gateway, a recording
event notifier and a controllable clock.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import pytest

from api.dependencies import reset_container
from modules.developers.memory import InMemoryDeveloperStore
from modules.developers.models import Developer
from modules.events.models import EventName
from modules.licensing.models import LicensePolicy
from modules.payments.exceptions import PaymentDeclinedError
from modules.payments.models import Charge
from shared.config import get_settings


NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class FakeGateway:
    """
    Scripted IPaymentGateway.

    Charges succeed unless `failure` is set. Requests reusing an
    idempotency key get the original charge back, as with Stripe, so
    `charge_count` counts distinct charges while `call_count` counts every
    request that reached the gateway.
    """

    def __init__(self):
        self.charges: list[dict[str, Any]] = []
        self.customers: list[dict[str, Any]] = []
        self.failure: Optional[Exception] = None
        self.customer_failure: Optional[Exception] = None
        self.delay_steps = 0
        self.call_count = 0
        self._by_key: dict[str, Charge] = {}

    @property
    def charge_count(self) -> int:
        return len(self.charges)

    async def charge(
        self,
        payment_method_token: str,
        amount_minor_units: int,
        currency: str,
        description: str,
        idempotency_key: Optional[str] = None,
    ) -> Charge:
        self.call_count += 1
        for _ in range(self.delay_steps):
            await asyncio.sleep(0)

        if idempotency_key and idempotency_key in self._by_key:
            return self._by_key[idempotency_key]

        self.charges.append({
            "payment_method_token": payment_method_token,
            "amount": amount_minor_units,
            "currency": currency,
            "description": description,
            "idempotency_key": idempotency_key,
        })
        if self.failure is not None:
            raise self.failure

        charge = Charge(
            id=f"ch_{len(self.charges)}",
            amount=amount_minor_units,
            currency=currency,
            description=description,
            customer=payment_method_token,
        )
        if idempotency_key:
            self._by_key[idempotency_key] = charge
        return charge

    async def create_customer(self, source_token: str, email: str, description: str) -> str:
        self.customers.append({"source": source_token, "email": email, "description": description})
        if self.customer_failure is not None:
            raise self.customer_failure
        return f"cus_{len(self.customers)}"


class RecordingNotifier:
    """IEventNotifier that keeps every event in memory."""

    def __init__(self):
        self.events: list[tuple[EventName, dict[str, Any]]] = []

    def emit(self, event_name: EventName, payload: dict[str, Any]) -> None:
        self.events.append((event_name, payload))

    async def aclose(self) -> None:
        return None

    @property
    def names(self) -> list[EventName]:
        return [name for name, _ in self.events]


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the service container and settings cache around each test."""
    reset_container()
    get_settings.cache_clear()
    yield
    reset_container()
    get_settings.cache_clear()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def store() -> InMemoryDeveloperStore:
    return InMemoryDeveloperStore()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def policy() -> LicensePolicy:
    return LicensePolicy()


@pytest.fixture
def declined() -> PaymentDeclinedError:
    return PaymentDeclinedError("Your card was declined.", gateway_code="card_declined")


@pytest.fixture
def make_developer() -> Callable[..., Developer]:
    """Factory for developer records with sensible defaults."""

    def _make(**overrides: Any) -> Developer:
        fields: dict[str, Any] = {
            "id": "dev-123",
            "name": "Ada Lovelace",
            "email": "ada@example.com",
            "token": "token-123",
            "expiration": NOW + timedelta(days=10),
            "created_at": NOW - timedelta(days=20),
        }
        fields.update(overrides)
        return Developer(**fields)

    return _make
