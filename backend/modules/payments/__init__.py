"""
Payments module.

Wraps the payment gateway behind a narrow interface: create a customer
from a card source and charge a stored customer once.

Public API:
- IPaymentGateway: Interface for gateway operations
- Charge: A completed charge
- Payment exceptions: PaymentDeclinedError, PaymentIndeterminateError
"""

from .interfaces import IPaymentGateway
from .models import Charge
from .exceptions import (
    PaymentError,
    PaymentDeclinedError,
    PaymentIndeterminateError,
)

__all__ = [
    # Interface
    "IPaymentGateway",
    # Models
    "Charge",
    # Exceptions
    "PaymentError",
    "PaymentDeclinedError",
    "PaymentIndeterminateError",
]
