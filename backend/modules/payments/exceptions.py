"""
Payments module exceptions.

The licensing module relies on the split between the two leaf classes:
a declined charge definitely did not happen, an indeterminate one might
have.
"""

from typing import Optional

from shared.exceptions import ExternalServiceError


class PaymentError(ExternalServiceError):
    """Base exception for payment gateway failures."""

    def __init__(
        self,
        message: str,
        code: str,
        gateway_code: Optional[str] = None,
        service: str = "stripe",
    ):
        super().__init__(
            message,
            service=service,
            code=code,
            details={"gateway_code": gateway_code} if gateway_code else {},
        )
        self.gateway_code = gateway_code


class PaymentDeclinedError(PaymentError):
    """
    Raised when the gateway definitively rejected the request.

    Card declines, invalid customers and rejected parameters all land
    here. No money moved.
    """

    def __init__(self, message: str, gateway_code: Optional[str] = None):
        super().__init__(message, code="PAYMENT_DECLINED", gateway_code=gateway_code)


class PaymentIndeterminateError(PaymentError):
    """
    Raised when the outcome of a charge is unknown.

    Timeouts, dropped connections and gateway-side 5xx responses land
    here. The charge may or may not have been captured.
    """

    def __init__(self, message: str, gateway_code: Optional[str] = None):
        super().__init__(message, code="PAYMENT_INDETERMINATE", gateway_code=gateway_code)
