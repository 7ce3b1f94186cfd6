"""
Base exception classes for the Licensor backend.

Each module defines its own exceptions that inherit from these bases.
The API layer maps each base class to one HTTP status code.
"""

from typing import Optional, Any


class LicensorError(Exception):
    """
    Base exception for all Licensor errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(LicensorError):
    """Resource not found."""

    pass


class ValidationError(LicensorError):
    """Input validation failed."""

    pass


class ConflictError(LicensorError):
    """Request conflicts with existing state (duplicates, lost races)."""

    pass


class AuthenticationError(LicensorError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(LicensorError):
    """Authorization failed (insufficient permissions)."""

    pass


class ExternalServiceError(LicensorError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
