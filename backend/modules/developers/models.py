"""
Developer module data models.

These models define the developer record owned by the credential store,
the typed query/update values used to address and mutate it, and the
request/response shapes of the developer endpoints.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator


def normalize_email(email: str) -> str:
    """Canonical form used for storage, lookups and uniqueness."""
    return email.strip().lower()


class Developer(BaseModel):
    """
    A developer account as persisted by the credential store.

    `expiration` is optional at the model level so that a corrupted row can
    still be loaded; the license evaluator rejects it explicitly.
    """

    id: str = Field(..., description="Opaque developer ID, immutable")
    name: str = Field(default="", description="Display name")
    email: str = Field(..., description="Email address, unique at creation")
    token: str = Field(default="", description="Current bearer token")
    password_hash: str = Field(default="", description="hash(password, salt)")
    salt: str = Field(default="", description="Per-developer password salt")
    expiration: Optional[datetime] = Field(
        None,
        description="End of the current trial or paid period",
    )
    payment_method_token: Optional[str] = Field(
        None,
        description="Stored payment method reference at the gateway",
    )
    is_paid: bool = Field(default=False, description="Set after any successful charge")
    is_admin: bool = Field(default=False, description="Grants admin views")
    created_at: Optional[datetime] = Field(None, description="Account creation time")

    model_config = {"frozen": True}

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return normalize_email(value)

    @property
    def has_payment_method(self) -> bool:
        """Whether automatic renewal is possible."""
        return bool(self.payment_method_token and self.payment_method_token.strip())

    def to_public(self) -> "DeveloperPublic":
        """Snapshot safe to return to the developer themselves."""
        return DeveloperPublic(
            id=self.id,
            name=self.name,
            email=self.email,
            expiration=self.expiration,
            is_paid=self.is_paid,
            is_admin=self.is_admin,
            created_at=self.created_at,
        )

    def to_profile(self) -> "DeveloperProfile":
        """Minimal view shown to anyone but the developer."""
        return DeveloperProfile(name=self.name, email=self.email)


class DeveloperPublic(BaseModel):
    """Public developer snapshot. Never carries credentials."""

    id: str
    name: str
    email: str
    expiration: Optional[datetime] = None
    is_paid: bool = False
    is_admin: bool = False
    created_at: Optional[datetime] = None


class DeveloperProfile(BaseModel):
    """Minimal developer info for other developers."""

    name: str
    email: str


class DeveloperQuery(BaseModel):
    """
    Point lookup key for the credential store.

    Exactly one of the fields must be set.
    """

    id: Optional[str] = None
    email: Optional[str] = None
    token: Optional[str] = None

    model_config = {"frozen": True}

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: Optional[str]) -> Optional[str]:
        return normalize_email(value) if value is not None else None

    @model_validator(mode="after")
    def _exactly_one_key(self) -> "DeveloperQuery":
        keys = [value for value in (self.id, self.email, self.token) if value is not None]
        if len(keys) != 1:
            raise ValueError("Exactly one of id, email or token must be set")
        return self

    @property
    def field(self) -> str:
        """Name of the column being matched."""
        for name in ("id", "email", "token"):
            if getattr(self, name) is not None:
                return name
        raise AssertionError("unreachable")

    @property
    def value(self) -> str:
        """Value being matched."""
        return getattr(self, self.field)


class DeveloperUpdate(BaseModel):
    """
    Partial update of a developer record.

    Only fields that are set are written. There is no `id` or `salt`
    field, so those can never be changed through an update.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    token: Optional[str] = None
    password_hash: Optional[str] = None
    expiration: Optional[datetime] = None
    payment_method_token: Optional[str] = None
    is_paid: Optional[bool] = None
    is_admin: Optional[bool] = None

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: Optional[str]) -> Optional[str]:
        return normalize_email(value) if value is not None else None

    def to_document(self) -> dict[str, Any]:
        """Fields to write, keyed by column name."""
        return self.model_dump(exclude_none=True)

    def is_empty(self) -> bool:
        return not self.to_document()


# -----------------------------------------------------------------------------
# API request / response models
# -----------------------------------------------------------------------------


class CreateDeveloperRequest(BaseModel):
    """Request to create a developer with a password."""

    name: str = Field(default="", max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Request to log in and rotate the developer token."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Response carrying a freshly issued token."""

    status: str = "created"
    token: str


class UpdateDeveloperRequest(BaseModel):
    """Self-service profile edit. A new password needs the old one."""

    name: Optional[str] = Field(None, max_length=200)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=1)
    old_password: Optional[str] = None


class AdminUpdateDeveloperRequest(BaseModel):
    """Admin edit: grant or revoke admin rights, extend the license."""

    is_admin: Optional[bool] = None
    expiration: Optional[datetime] = Field(None, description="May only move later")


class DeveloperResponse(BaseModel):
    """Response wrapping a developer snapshot."""

    status: str
    developer: DeveloperPublic | DeveloperProfile


class DeveloperListResponse(BaseModel):
    """Admin listing of developers."""

    developers: list[DeveloperPublic]
    total: int
