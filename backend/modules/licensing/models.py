"""
Licensing module data models.

LicensePolicy holds the business constants of the license lifecycle;
SessionResult is what a session check resolves to.
"""

from datetime import timedelta
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from shared.config import Settings
from modules.developers.models import Developer, DeveloperPublic


class LicenseState(str, Enum):
    """Classification of a developer's access at a point in time."""

    ACTIVE = "active"
    EXPIRED_NO_PAYMENT_METHOD = "expired_no_payment_method"
    EXPIRED_WITH_PAYMENT_METHOD = "expired_with_payment_method"


class LicensePolicy(BaseModel):
    """
    Pricing and period constants for one plan.

    Amounts are in minor currency units.
    """

    trial_period: timedelta = Field(default=timedelta(days=30))
    renewal_period: timedelta = Field(default=timedelta(days=365))
    renewal_amount: int = Field(default=2500, gt=0)
    purchase_amount: int = Field(default=2900, gt=0)
    currency: str = Field(default="usd", min_length=3, max_length=3)
    renewal_description: str = "annual license renewal"
    purchase_description: str = "license purchase"

    model_config = {"frozen": True}

    @classmethod
    def from_settings(cls, settings: Settings) -> "LicensePolicy":
        return cls(
            trial_period=timedelta(days=settings.trial_days),
            renewal_period=timedelta(days=settings.renewal_days),
            renewal_amount=settings.renewal_amount_cents,
            purchase_amount=settings.purchase_amount_cents,
            currency=settings.currency.lower(),
            renewal_description=settings.renewal_description,
            purchase_description=settings.purchase_description,
        )


class SessionStatus(str, Enum):
    """Discriminator of a session check outcome."""

    ACTIVE = "active"
    EXPIRED = "expired"
    RENEWED = "renewed"
    RENEWAL_FAILED = "renewal_failed"


class RenewalFailureReason(str, Enum):
    """Why an automatic renewal did not extend the license."""

    DECLINED = "declined"
    INDETERMINATE = "indeterminate"
    PERSISTENCE_FAILED = "persistence_failed"  # charged, expiration not advanced


class SessionResult(BaseModel):
    """Outcome of a session check."""

    status: SessionStatus
    developer: Developer
    reason: Optional[RenewalFailureReason] = None
    error: Optional[str] = None
    charge_id: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def active(cls, developer: Developer) -> "SessionResult":
        return cls(status=SessionStatus.ACTIVE, developer=developer)

    @classmethod
    def expired(cls, developer: Developer) -> "SessionResult":
        return cls(status=SessionStatus.EXPIRED, developer=developer)

    @classmethod
    def renewed(cls, developer: Developer, charge_id: str) -> "SessionResult":
        return cls(status=SessionStatus.RENEWED, developer=developer, charge_id=charge_id)

    @classmethod
    def renewal_failed(
        cls,
        developer: Developer,
        reason: RenewalFailureReason,
        error: str,
        charge_id: Optional[str] = None,
    ) -> "SessionResult":
        return cls(
            status=SessionStatus.RENEWAL_FAILED,
            developer=developer,
            reason=reason,
            error=error,
            charge_id=charge_id,
        )

    def to_response(self) -> "SessionResponse":
        return SessionResponse(
            status=self.status,
            developer=self.developer.to_public(),
            reason=self.reason,
            error=self.error,
        )


# -----------------------------------------------------------------------------
# API request / response models
# -----------------------------------------------------------------------------


class SessionResponse(BaseModel):
    """API response for a session check."""

    status: SessionStatus
    developer: DeveloperPublic
    reason: Optional[RenewalFailureReason] = None
    error: Optional[str] = None


class TrialSignupRequest(BaseModel):
    """Silent signup from the client: grants a trial, charges nothing."""

    name: str = Field(default="", max_length=200)
    email: EmailStr
    id: Optional[str] = Field(None, min_length=1, max_length=64, description="Client-generated ID")


class PaidSignupRequest(BaseModel):
    """Signup that pays for the first period up front."""

    name: str = Field(default="", max_length=200)
    email: EmailStr
    source_token: str = Field(..., min_length=1, description="Card token from the checkout form")


class PaymentRequest(BaseModel):
    """Payment for an existing developer."""

    source_token: str = Field(..., min_length=1, description="Card token from the checkout form")


class SignupResponse(BaseModel):
    """API response for signups and purchases."""

    status: str
    developer: DeveloperPublic
