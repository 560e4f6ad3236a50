"""Authentication endpoints: login, logout, current user and password change"""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from studio_cms.auth.passwords import hash_password, verify_password
from studio_cms.auth.tokens import TokenClaims
from studio_cms.utils.exceptions import (
    InvalidCredentialsError,
    InvalidCurrentPasswordError,
    MissingCredentialsError,
    MissingPasswordsError,
    PasswordTooShortError,
    UserNotFoundError,
)
from studio_cms.utils.logger import get_logger

from .auth_deps import require_auth
from .models import ChangePasswordRequest, LoginRequest
from .responses import success_response

logger = get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
async def login(request: Request, login_data: Optional[LoginRequest] = None):
    """Login with username (or email) and password"""
    if not login_data or not login_data.username or not login_data.password:
        raise MissingCredentialsError()

    user_store = request.app.state.user_store
    user = await run_in_threadpool(user_store.find_by_login, login_data.username)
    if not user or not await run_in_threadpool(verify_password, login_data.password, user.password_hash):
        logger.warning("Login failed", username=login_data.username)
        raise InvalidCredentialsError()

    user = await run_in_threadpool(user_store.record_login, user.id)
    token = request.app.state.token_service.issue(user)
    logger.info("Login successful", user_id=user.id, username=user.username)

    return success_response(token=token, user=user.to_public())


@router.post("/logout")
async def logout():
    """Tokens are stateless; the client discards its copy"""
    return success_response(message="Logged out successfully")


@router.get("/me")
async def me(request: Request, claims: TokenClaims = Depends(require_auth)):
    """Profile of the authenticated user"""
    user = await run_in_threadpool(request.app.state.user_store.find_by_id, claims.id)
    if not user:
        raise UserNotFoundError()
    return success_response(data=user.to_public())


@router.post("/change-password")
async def change_password(
    request: Request,
    payload: Optional[ChangePasswordRequest] = None,
    claims: TokenClaims = Depends(require_auth),
):
    """Change the caller's password after re-checking the current one"""
    if not payload or not payload.current_password or not payload.new_password:
        raise MissingPasswordsError()

    settings = request.app.state.settings
    min_length = settings.auth.min_password_length
    if len(payload.new_password) < min_length:
        raise PasswordTooShortError(f"New password must be at least {min_length} characters long")

    user_store = request.app.state.user_store
    user = await run_in_threadpool(user_store.find_by_id, claims.id)
    if not user:
        raise UserNotFoundError()

    if not await run_in_threadpool(verify_password, payload.current_password, user.password_hash):
        raise InvalidCurrentPasswordError()

    new_hash = await run_in_threadpool(hash_password, payload.new_password, settings.auth.bcrypt_rounds)
    await run_in_threadpool(user_store.change_password, user.id, new_hash)
    return success_response(message="Password changed successfully")
