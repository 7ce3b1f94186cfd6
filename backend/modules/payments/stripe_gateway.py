"""
Stripe implementation of the payment gateway.

The Stripe SDK is synchronous, so calls run in a worker thread. The SDK's
own retries are disabled: a request that times out is reported as
indeterminate and any retry is left to the caller, who can reuse the
idempotency key.
"""

import asyncio
import logging
from typing import Optional

import stripe

from shared.config import Settings
from .models import Charge
from .exceptions import PaymentDeclinedError, PaymentError, PaymentIndeterminateError

logger = logging.getLogger(__name__)


class StripeGateway:
    """IPaymentGateway backed by the Stripe Charges API."""

    def __init__(self, client: stripe.StripeClient):
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "StripeGateway":
        """Create a gateway with the configured key and HTTP timeout."""
        if not settings.stripe_secret_key:
            raise RuntimeError(
                "Stripe configuration missing. Set STRIPE_SECRET_KEY environment variable."
            )
        client = stripe.StripeClient(
            settings.stripe_secret_key,
            http_client=stripe.RequestsClient(timeout=settings.stripe_timeout_seconds),
            max_network_retries=0,
        )
        return cls(client)

    async def charge(
        self,
        payment_method_token: str,
        amount_minor_units: int,
        currency: str,
        description: str,
        idempotency_key: Optional[str] = None,
    ) -> Charge:
        params = {
            "amount": amount_minor_units,
            "currency": currency,
            "customer": payment_method_token,
            "description": description,
        }
        options = {"idempotency_key": idempotency_key} if idempotency_key else {}

        try:
            result = await asyncio.to_thread(
                self._client.charges.create,
                params=params,
                options=options,
            )
        except stripe.StripeError as e:
            raise translate_stripe_error(e) from e

        logger.info(f"Charged {amount_minor_units} {currency} to {payment_method_token}: {result.id}")
        return Charge(
            id=result.id,
            amount=result.amount,
            currency=result.currency,
            description=description,
            customer=payment_method_token,
        )

    async def create_customer(
        self,
        source_token: str,
        email: str,
        description: str,
    ) -> str:
        params = {
            "email": email,
            "description": description,
            "source": source_token,
        }
        try:
            customer = await asyncio.to_thread(self._client.customers.create, params=params)
        except stripe.StripeError as e:
            raise translate_stripe_error(e) from e
        return customer.id


def translate_stripe_error(error: stripe.StripeError) -> PaymentError:
    """
    Map a Stripe SDK error onto the gateway taxonomy.

    Only errors where Stripe may have processed the request are
    indeterminate; everything else is a definitive rejection.
    """
    message = error.user_message or str(error) or error.__class__.__name__
    code = error.code or error.__class__.__name__

    if isinstance(error, (stripe.APIConnectionError, stripe.APIError)):
        logger.warning(f"Indeterminate Stripe response: {message}")
        return PaymentIndeterminateError(message, gateway_code=code)
    if error.http_status is not None and error.http_status >= 500:
        return PaymentIndeterminateError(message, gateway_code=code)
    return PaymentDeclinedError(message, gateway_code=code)
