"""
License state evaluation.

A pure function of the developer snapshot and the current time.
"""

from datetime import datetime, timezone

from modules.developers.models import Developer

from .exceptions import InvalidLicenseDataError
from .models import LicenseState


def as_utc(value: datetime) -> datetime:
    """Interpret naive timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def evaluate(developer: Developer, now: datetime) -> LicenseState:
    """
    Classify a developer's license at `now`.

    Args:
        developer: Snapshot loaded from the credential store
        now: Reference time

    Returns:
        ACTIVE while the expiration is strictly in the future, otherwise
        one of the two expired states depending on the payment method

    Raises:
        InvalidLicenseDataError: If the developer has no expiration
    """
    if developer.expiration is None:
        raise InvalidLicenseDataError(developer.id)

    if as_utc(developer.expiration) > as_utc(now):
        return LicenseState.ACTIVE
    if developer.has_payment_method:
        return LicenseState.EXPIRED_WITH_PAYMENT_METHOD
    return LicenseState.EXPIRED_NO_PAYMENT_METHOD
