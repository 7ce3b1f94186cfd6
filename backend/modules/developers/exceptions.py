"""
Developer module exceptions.

Raised by the credential store and the developer service, and mapped to
HTTP responses by the API error handlers.
"""

from datetime import datetime
from typing import Optional

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    LicensorError,
    NotFoundError,
    ValidationError,
)


class DeveloperNotFoundError(NotFoundError):
    """Raised when no developer matches the lookup key."""

    def __init__(self, field: str, value: str):
        # the value may be a bearer token; keep it off the wire
        message = "No developer with that token" if field == "token" else f"No developer with {field} {value}"
        super().__init__(
            message,
            code="DEVELOPER_NOT_FOUND",
            details={"field": field},
        )
        self.field = field
        self.value = value


class DuplicateEmailError(ConflictError):
    """Raised when creating a developer with an email already in use."""

    def __init__(self, email: str):
        super().__init__(
            "email already exists",
            code="DUPLICATE_EMAIL",
            details={"email": email},
        )


class ConcurrentUpdateError(ConflictError):
    """Raised when a conditional update loses to a concurrent writer."""

    def __init__(self, developer_id: str, expected_expiration: Optional[datetime]):
        super().__init__(
            f"Developer {developer_id} was modified concurrently",
            code="CONCURRENT_UPDATE",
            details={
                "developer_id": developer_id,
                "expected_expiration": (
                    expected_expiration.isoformat() if expected_expiration else None
                ),
            },
        )


class StoreError(LicensorError):
    """Raised when the credential store fails to read or write."""

    def __init__(self, message: str, operation: str):
        super().__init__(
            message,
            code="STORE_ERROR",
            details={"operation": operation},
        )
        self.operation = operation


class MissingCredentialsError(ValidationError):
    """Raised when email or password is missing."""

    def __init__(self):
        super().__init__("Email and Password Required.", code="MISSING_CREDENTIALS")


class InvalidCredentialsError(AuthenticationError):
    """Raised when a password does not match."""

    def __init__(self, message: str = "Incorrect Password"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class InvalidTokenError(AuthenticationError):
    """Raised when a bearer token is missing or belongs to nobody."""

    def __init__(self, message: str = "Invalid Token."):
        super().__init__(message, code="INVALID_TOKEN")


class AdminRequiredError(AuthorizationError):
    """Raised when a non-admin developer calls an admin endpoint."""

    def __init__(self):
        super().__init__("Admin access required", code="ADMIN_REQUIRED")


class ExpirationDecreaseError(ValidationError):
    """Raised when an admin edit would shorten a developer's license."""

    def __init__(self, developer_id: str, current: datetime, requested: datetime):
        super().__init__(
            "Expiration can only be extended",
            code="EXPIRATION_DECREASE",
            details={
                "developer_id": developer_id,
                "current_expiration": current.isoformat(),
                "requested_expiration": requested.isoformat(),
            },
        )
