"""
UYNM Backend — Auth Routes
============================

What:  Account sign-up, sign-in, sign-out and password recovery for the
       website, delegated to the identity provider.
How:   Session tokens are returned to the browser and forwarded back on
       logout (Authorization: Bearer <token>); this service keeps none.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header

from uynm_api.config import Settings
from uynm_api.dependencies import bearer_token, get_identity, get_settings
from uynm_api.schemas.auth import (
    AuthPayload,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
)
from uynm_api.schemas.common import ApiResponse, ErrorResponse, MessageResponse
from uynm_api.services.auth_service import auth_service
from uynm_api.services.identity import IdentityProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

_PROVIDER_ERRORS = {
    400: {"description": "Rejected by the identity provider", "model": ErrorResponse},
    502: {"description": "Identity provider unavailable", "model": ErrorResponse},
}


@router.post(
    "/register",
    status_code=201,
    response_model=ApiResponse[AuthPayload],
    responses=_PROVIDER_ERRORS,
    summary="Create a website account",
)
async def register(
    payload: RegisterRequest,
    identity: IdentityProvider = Depends(get_identity),
) -> ApiResponse[AuthPayload]:
    result = await auth_service.register(identity, payload)
    return ApiResponse[AuthPayload](
        message="Registration successful! Please check your email to verify your account.",
        data=result,
    )


@router.post(
    "/login",
    response_model=ApiResponse[AuthPayload],
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Sign in with email and password",
)
async def login(
    payload: LoginRequest,
    identity: IdentityProvider = Depends(get_identity),
) -> ApiResponse[AuthPayload]:
    result = await auth_service.login(identity, payload)
    return ApiResponse[AuthPayload](message="Login successful", data=result)


@router.post(
    "/logout",
    response_model=MessageResponse,
    responses=_PROVIDER_ERRORS,
    summary="Sign out (revokes the bearer token when one is sent)",
)
async def logout(
    authorization: Optional[str] = Header(default=None),
    identity: IdentityProvider = Depends(get_identity),
) -> MessageResponse:
    await auth_service.logout(identity, bearer_token(authorization))
    return MessageResponse(message="Logged out successfully")


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    responses=_PROVIDER_ERRORS,
    summary="Send a password recovery email",
)
async def reset_password(
    payload: ResetPasswordRequest,
    identity: IdentityProvider = Depends(get_identity),
    settings: Settings = Depends(get_settings),
) -> MessageResponse:
    await auth_service.reset_password(identity, payload.email, settings.frontend_url)
    return MessageResponse(message="Password reset email sent. Please check your inbox.")
