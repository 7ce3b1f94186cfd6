"""
Developers module.

Owns developer records (the credential store) and self-service account
operations: signup, login/token rotation, profile lookup and edits.

Public API:
- IDeveloperStore: Interface for developer persistence
- Developer, DeveloperQuery, DeveloperUpdate: Record and typed query/update
- Developer exceptions: DeveloperNotFoundError, DuplicateEmailError, etc.
"""

from .interfaces import IDeveloperStore
from .models import (
    Developer,
    DeveloperPublic,
    DeveloperProfile,
    DeveloperQuery,
    DeveloperUpdate,
)
from .exceptions import (
    DeveloperNotFoundError,
    DuplicateEmailError,
    ConcurrentUpdateError,
    StoreError,
    MissingCredentialsError,
    InvalidCredentialsError,
    InvalidTokenError,
    AdminRequiredError,
    ExpirationDecreaseError,
)

__all__ = [
    # Interface
    "IDeveloperStore",
    # Models
    "Developer",
    "DeveloperPublic",
    "DeveloperProfile",
    "DeveloperQuery",
    "DeveloperUpdate",
    # Exceptions
    "DeveloperNotFoundError",
    "DuplicateEmailError",
    "ConcurrentUpdateError",
    "StoreError",
    "MissingCredentialsError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "AdminRequiredError",
    "ExpirationDecreaseError",
]
