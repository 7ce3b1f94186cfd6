"""
Developer token authentication.

Developers authenticate with the opaque token issued at login. The token
is read from the Authorization header (Bearer) or, for older clients, the
`token` query parameter.
"""

from typing import Optional
from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from api.dependencies import get_developer_service
from modules.developers.exceptions import AdminRequiredError, InvalidTokenError
from modules.developers.models import Developer
from modules.developers.service import DeveloperService

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


class AuthError(HTTPException):
    """Authentication error with consistent format."""
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


def extract_token(
    credentials: Optional[HTTPAuthorizationCredentials],
    token: Optional[str],
) -> Optional[str]:
    """Prefer the Authorization header over the query parameter."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return token or None


async def get_current_developer(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    token: Optional[str] = Query(default=None),
    service: DeveloperService = Depends(get_developer_service),
) -> Developer:
    """
    Dependency that requires a valid developer token.

    Usage:
        @router.get("/protected")
        async def protected_route(developer: Developer = Depends(get_current_developer)):
            return {"developer_id": developer.id}
    """
    raw_token = extract_token(credentials, token)
    if raw_token is None:
        raise AuthError("Valid token required.")

    try:
        return await service.get_by_token(raw_token)
    except InvalidTokenError as e:
        raise AuthError(e.message)


async def get_optional_developer(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    token: Optional[str] = Query(default=None),
    service: DeveloperService = Depends(get_developer_service),
) -> Optional[Developer]:
    """Dependency that resolves the developer if a valid token was sent."""
    raw_token = extract_token(credentials, token)
    if raw_token is None:
        return None

    try:
        return await service.get_by_token(raw_token)
    except InvalidTokenError:
        return None


async def require_admin(
    developer: Developer = Depends(get_current_developer),
) -> Developer:
    """Dependency that requires an admin developer."""
    if not developer.is_admin:
        raise AdminRequiredError()
    return developer


# Type aliases for cleaner route definitions
RequireDeveloper = Depends(get_current_developer)
OptionalDeveloper = Depends(get_optional_developer)
RequireAdmin = Depends(require_admin)
