"""
Licensing module interface.

The HTTP layer depends on ILicenseService; tests substitute AsyncMocks.
"""

from typing import Optional, Protocol, runtime_checkable

from modules.developers.models import Developer

from .models import SessionResult


@runtime_checkable
class ILicenseService(Protocol):
    """
    Interface for the license lifecycle.

    Covers the periodic session check that renews lapsed licenses and the
    entry points that grant the first period.
    """

    async def check_session(self, developer_id: str) -> SessionResult:
        """
        Decide whether a developer may use the client right now.

        Lapsed licenses with a stored payment method are renewed in place.
        Gateway failures are returned as RENEWAL_FAILED results.

        Raises:
            DeveloperNotFoundError: If the ID is unknown
            InvalidLicenseDataError: If the record has no expiration
        """
        ...

    async def start_trial(
        self,
        name: str,
        email: str,
        developer_id: Optional[str] = None,
    ) -> Developer:
        """
        Create a developer with a free trial period.

        Raises:
            DuplicateEmailError: If the email is already registered
        """
        ...

    async def signup_paid(self, name: str, email: str, source_token: str) -> Developer:
        """
        Create a developer and charge the first period.

        Nothing is persisted if the charge fails.

        Raises:
            DuplicateEmailError: If the email is already registered
            PaymentDeclinedError / PaymentIndeterminateError: If the charge fails
        """
        ...

    async def purchase(self, developer: Developer, source_token: str) -> Developer:
        """
        Attach a payment method to an existing developer and charge it.

        Raises:
            PaymentDeclinedError / PaymentIndeterminateError: If the charge fails
        """
        ...
