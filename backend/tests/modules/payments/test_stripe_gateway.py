"""
Tests for the Stripe payment gateway.

The StripeClient is a MagicMock; no network calls are made.
"""

from unittest.mock import MagicMock

import pytest
import stripe

from modules.payments.exceptions import PaymentDeclinedError, PaymentIndeterminateError
from modules.payments.interfaces import IPaymentGateway
from modules.payments.stripe_gateway import StripeGateway, translate_stripe_error
from shared.config import Settings


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.charges.create.return_value = MagicMock(id="ch_123", amount=2500, currency="usd")
    client.customers.create.return_value = MagicMock(id="cus_123")
    return client


@pytest.fixture
def gateway(mock_client):
    return StripeGateway(mock_client)


class TestCharge:
    def test_implements_interface(self, gateway):
        assert isinstance(gateway, IPaymentGateway)

    @pytest.mark.asyncio
    async def test_charge_success(self, gateway, mock_client):
        charge = await gateway.charge(
            "cus_123",
            2500,
            "usd",
            "annual license renewal",
            idempotency_key="renewal-dev-123-1772366400",
        )

        assert charge.id == "ch_123"
        assert charge.amount == 2500
        assert charge.customer == "cus_123"
        mock_client.charges.create.assert_called_once_with(
            params={
                "amount": 2500,
                "currency": "usd",
                "customer": "cus_123",
                "description": "annual license renewal",
            },
            options={"idempotency_key": "renewal-dev-123-1772366400"},
        )

    @pytest.mark.asyncio
    async def test_charge_without_idempotency_key(self, gateway, mock_client):
        await gateway.charge("cus_123", 2500, "usd", "renewal")

        assert mock_client.charges.create.call_args.kwargs["options"] == {}

    @pytest.mark.asyncio
    async def test_card_error_is_declined(self, gateway, mock_client):
        mock_client.charges.create.side_effect = stripe.CardError(
            "Your card was declined.", param=None, code="card_declined", http_status=402
        )

        with pytest.raises(PaymentDeclinedError) as exc_info:
            await gateway.charge("cus_123", 2500, "usd", "renewal")

        assert exc_info.value.gateway_code == "card_declined"
        assert exc_info.value.details["service"] == "stripe"

    @pytest.mark.asyncio
    async def test_connection_error_is_indeterminate(self, gateway, mock_client):
        """A dropped connection may have left a captured charge behind."""
        mock_client.charges.create.side_effect = stripe.APIConnectionError("Read timed out")

        with pytest.raises(PaymentIndeterminateError):
            await gateway.charge("cus_123", 2500, "usd", "renewal")


class TestCreateCustomer:
    @pytest.mark.asyncio
    async def test_create_customer(self, gateway, mock_client):
        customer_id = await gateway.create_customer("tok_visa", "ada@example.com", "Ada")

        assert customer_id == "cus_123"
        mock_client.customers.create.assert_called_once_with(
            params={"email": "ada@example.com", "description": "Ada", "source": "tok_visa"}
        )

    @pytest.mark.asyncio
    async def test_invalid_source_is_declined(self, gateway, mock_client):
        mock_client.customers.create.side_effect = stripe.InvalidRequestError(
            "No such token: 'tok_bad'", param="source", code="resource_missing", http_status=400
        )

        with pytest.raises(PaymentDeclinedError):
            await gateway.create_customer("tok_bad", "ada@example.com", "Ada")


class TestTranslateStripeError:
    @pytest.mark.parametrize("error", [
        stripe.APIConnectionError("Connection reset"),
        stripe.APIError("Internal error", http_status=500),
        stripe.APIError("Bad gateway", http_status=502),
    ])
    def test_indeterminate(self, error):
        assert isinstance(translate_stripe_error(error), PaymentIndeterminateError)

    @pytest.mark.parametrize("error", [
        stripe.CardError("Declined", param=None, code="card_declined", http_status=402),
        stripe.InvalidRequestError("Bad", param="customer", http_status=400),
        stripe.AuthenticationError("Invalid API key", http_status=401),
    ])
    def test_declined(self, error):
        assert isinstance(translate_stripe_error(error), PaymentDeclinedError)

    def test_uses_error_code(self):
        error = stripe.CardError("Declined", param=None, code="expired_card", http_status=402)
        assert translate_stripe_error(error).gateway_code == "expired_card"


class TestFromSettings:
    def test_requires_secret_key(self):
        with pytest.raises(RuntimeError, match="Stripe configuration missing"):
            StripeGateway.from_settings(Settings(_env_file=None, stripe_secret_key=""))

    def test_builds_client(self):
        gateway = StripeGateway.from_settings(Settings(_env_file=None, stripe_secret_key="sk_test_123"))
        assert isinstance(gateway, StripeGateway)
