"""
Developer API endpoints.

Signup with a password, login, and self-service profile management.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from api.dependencies import get_developer_service
from api.middleware.auth import get_current_developer, get_optional_developer, require_admin

from .models import (
    AdminUpdateDeveloperRequest,
    CreateDeveloperRequest,
    Developer,
    DeveloperListResponse,
    DeveloperResponse,
    LoginRequest,
    TokenResponse,
    UpdateDeveloperRequest,
)
from .service import DeveloperService

router = APIRouter()
admin_router = APIRouter()


@router.post("", response_model=DeveloperResponse, status_code=201)
async def create_developer(
    request: CreateDeveloperRequest,
    service: DeveloperService = Depends(get_developer_service),
) -> DeveloperResponse:
    """
    Create a developer account with a password.

    The account starts with a trial period.
    """
    developer = await service.create_developer(request.name, request.email, request.password)
    return DeveloperResponse(status="created", developer=developer.to_public())


@router.post("/token", response_model=TokenResponse)
async def create_token(
    request: LoginRequest,
    service: DeveloperService = Depends(get_developer_service),
) -> TokenResponse:
    """
    Log in by issuing a new token.

    The previous token stops working.
    """
    token = await service.login(request.email, request.password)
    return TokenResponse(token=token)


@router.get("/me", response_model=DeveloperResponse)
async def get_current_developer_profile(
    developer: Developer = Depends(get_current_developer),
) -> DeveloperResponse:
    """Get the developer owning the token."""
    return DeveloperResponse(status="found", developer=developer.to_public())


@router.put("/me", response_model=DeveloperResponse)
async def update_current_developer(
    request: UpdateDeveloperRequest,
    developer: Developer = Depends(get_current_developer),
    service: DeveloperService = Depends(get_developer_service),
) -> DeveloperResponse:
    """
    Edit the current developer's name, email or password.

    Changing the password requires `old_password`.
    """
    updated = await service.update_profile(
        developer,
        name=request.name,
        email=request.email,
        password=request.password,
        old_password=request.old_password,
    )
    return DeveloperResponse(status="updated", developer=updated.to_public())


@router.get("/{developer_id}", response_model=DeveloperResponse)
async def get_developer(
    developer_id: str,
    requester: Optional[Developer] = Depends(get_optional_developer),
    service: DeveloperService = Depends(get_developer_service),
) -> DeveloperResponse:
    """
    Get a developer by ID.

    Only the developer themselves sees the full snapshot; everyone else
    gets name and email.
    """
    developer = await service.get_developer(developer_id, requester)
    return DeveloperResponse(status="found", developer=developer)


@admin_router.get("/developers", response_model=DeveloperListResponse)
async def list_developers(
    admin: Developer = Depends(require_admin),
    service: DeveloperService = Depends(get_developer_service),
) -> DeveloperListResponse:
    """List all developers. Admin only."""
    developers = await service.list_developers()
    return DeveloperListResponse(
        developers=[d.to_public() for d in developers],
        total=len(developers),
    )


@admin_router.get("/developers/{developer_id}", response_model=DeveloperResponse)
async def get_developer_for_admin(
    developer_id: str,
    admin: Developer = Depends(require_admin),
    service: DeveloperService = Depends(get_developer_service),
) -> DeveloperResponse:
    """Full snapshot of any developer. Admin only."""
    developer = await service.get_for_admin(developer_id)
    return DeveloperResponse(status="found", developer=developer.to_public())


@admin_router.put("/developers/{developer_id}", response_model=DeveloperResponse)
async def update_developer_as_admin(
    developer_id: str,
    request: AdminUpdateDeveloperRequest,
    admin: Developer = Depends(require_admin),
    service: DeveloperService = Depends(get_developer_service),
) -> DeveloperResponse:
    """
    Grant admin rights or extend a license. Admin only.

    An expiration earlier than the current one is rejected with 400.
    """
    updated = await service.admin_update(
        developer_id,
        is_admin=request.is_admin,
        expiration=request.expiration,
    )
    return DeveloperResponse(status="updated", developer=updated.to_public())
