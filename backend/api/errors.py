"""
Exception handlers.

Maps module exceptions onto HTTP status codes. Every error body carries
`status: "failed"` alongside the exception's code, message and details.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ExternalServiceError,
    LicensorError,
    NotFoundError,
    ValidationError,
)
from modules.payments.exceptions import PaymentDeclinedError, PaymentIndeterminateError
from .models.errors import ErrorResponse

logger = logging.getLogger(__name__)

# Most specific classes first
_STATUS_CODES: list[tuple[type[LicensorError], int]] = [
    (PaymentDeclinedError, 402),
    (PaymentIndeterminateError, 503),
    (NotFoundError, 404),
    (ValidationError, 400),
    (ConflictError, 409),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (ExternalServiceError, 502),
]


def status_code_for(exc: LicensorError) -> int:
    for exc_type, status_code in _STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return 500


async def licensor_error_handler(request: Request, exc: LicensorError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    body = ErrorResponse(error=exc.code, message=exc.message, details=exc.details)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LicensorError, licensor_error_handler)
