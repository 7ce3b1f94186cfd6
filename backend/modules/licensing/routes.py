"""
Licensing API endpoints.

The session check the client calls on every launch, and the signup and
payment endpoints that grant the first license period.
"""

from fastapi import APIRouter, Depends, Response

from api.dependencies import get_license_service
from api.middleware.auth import get_current_developer
from modules.developers.models import Developer

from .interfaces import ILicenseService
from .models import (
    PaidSignupRequest,
    PaymentRequest,
    RenewalFailureReason,
    SessionResponse,
    SessionStatus,
    SignupResponse,
    TrialSignupRequest,
)

router = APIRouter()

_RENEWAL_FAILURE_STATUS = {
    RenewalFailureReason.DECLINED: 402,
    RenewalFailureReason.INDETERMINATE: 503,
    RenewalFailureReason.PERSISTENCE_FAILED: 500,
}


@router.get("/session/{developer_id}", response_model=SessionResponse)
async def check_session(
    developer_id: str,
    response: Response,
    service: ILicenseService = Depends(get_license_service),
) -> SessionResponse:
    """
    Check a developer's license, renewing it if it lapsed.

    Active, renewed and expired licenses answer 200 and differ in
    `status`. A failed renewal answers 402 (declined), 503 (outcome
    unknown) or 500 (charged but not recorded).
    """
    result = await service.check_session(developer_id)
    if result.status is SessionStatus.RENEWAL_FAILED:
        response.status_code = _RENEWAL_FAILURE_STATUS[result.reason]
    return result.to_response()


@router.post("/signup", response_model=SignupResponse, status_code=201)
async def signup_trial(
    request: TrialSignupRequest,
    service: ILicenseService = Depends(get_license_service),
) -> SignupResponse:
    """Silent signup from the client. Grants a trial, charges nothing."""
    developer = await service.start_trial(request.name, request.email, request.id)
    return SignupResponse(status="created", developer=developer.to_public())


@router.post("/signup/paid", response_model=SignupResponse, status_code=201)
async def signup_paid(
    request: PaidSignupRequest,
    service: ILicenseService = Depends(get_license_service),
) -> SignupResponse:
    """Signup that charges the first period. Nothing is created if the charge fails."""
    developer = await service.signup_paid(request.name, request.email, request.source_token)
    return SignupResponse(status="created", developer=developer.to_public())


@router.post("/developers/me/pay", response_model=SignupResponse)
async def pay(
    request: PaymentRequest,
    developer: Developer = Depends(get_current_developer),
    service: ILicenseService = Depends(get_license_service),
) -> SignupResponse:
    """Store a payment method for the current developer and charge it."""
    updated = await service.purchase(developer, request.source_token)
    return SignupResponse(status="success", developer=updated.to_public())
