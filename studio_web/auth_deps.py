"""
FastAPI dependencies for authentication and authorization.
"""

from typing import Optional

from fastapi import Depends, Request

from studio_cms.auth.tokens import TokenClaims, TokenService
from studio_cms.utils.exceptions import InsufficientPermissionsError, InvalidTokenError, NoTokenError


def get_bearer_token(request: Request) -> Optional[str]:
    """Extract the token from ``Authorization: Bearer <token>``"""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def get_current_claims(
    request: Request,
    token_service: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """Dependency to get the verified claims of the caller"""
    token = get_bearer_token(request)
    if not token:
        raise NoTokenError()

    claims = token_service.verify(token)
    if claims is None:
        raise InvalidTokenError()

    request.state.user = claims
    return claims


def require_role(role: str):
    """Dependency factory for role-based access control"""
    async def role_checker(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
        if claims.role != role:
            raise InsufficientPermissionsError(f"{role.capitalize()} access required")
        return claims

    return role_checker


# Pre-configured dependencies
require_admin = require_role("admin")
require_auth = get_current_claims
