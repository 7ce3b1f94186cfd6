"""
Payments module interface.

Other modules should depend on IPaymentGateway, not on the Stripe SDK.
"""

from typing import Optional, Protocol, runtime_checkable

from .models import Charge


@runtime_checkable
class IPaymentGateway(Protocol):
    """Interface for payment gateway operations."""

    async def charge(
        self,
        payment_method_token: str,
        amount_minor_units: int,
        currency: str,
        description: str,
        idempotency_key: Optional[str] = None,
    ) -> Charge:
        """
        Charge a stored payment method once.

        Args:
            payment_method_token: Stored customer reference
            amount_minor_units: Amount in cents (or the currency's minor unit)
            currency: ISO currency code
            description: Human-readable statement description
            idempotency_key: Requests sharing a key produce at most one charge

        Returns:
            The successful Charge

        Raises:
            PaymentDeclinedError: If the gateway rejected the charge
            PaymentIndeterminateError: If the outcome is unknown
        """
        ...

    async def create_customer(
        self,
        source_token: str,
        email: str,
        description: str,
    ) -> str:
        """
        Store a card source as a reusable customer.

        Returns:
            The customer reference to keep as payment_method_token

        Raises:
            PaymentDeclinedError: If the source was rejected
            PaymentIndeterminateError: If the outcome is unknown
        """
        ...
