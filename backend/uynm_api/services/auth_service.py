"""
UYNM Backend — Auth Service
=============================

What:  Pass-through to the identity provider for sign-up, sign-in, sign-out
       and password recovery.
How:   Translates provider results into the website's payload shapes and
       provider rejections into the API's error taxonomy. Credentials and
       tokens are forwarded, never stored or logged.
Who:   Called by uynm_api.routes.auth with the IdentityProvider from app.state.

Error mapping:
    register / logout / reset  rejected → IdentityProviderError (400, provider message)
    login                      rejected → AuthenticationError (401, "Invalid email or password")
    any                        provider down → IdentityProviderError (502)
"""

import logging
from typing import Optional

from uynm_api.exceptions import AuthenticationError, IdentityProviderError
from uynm_api.schemas.auth import (
    AuthPayload,
    AuthSession,
    AuthUser,
    LoginRequest,
    RegisterRequest,
)
from uynm_api.services.identity import IdentityProvider, IdentityUser

logger = logging.getLogger(__name__)

RESET_PASSWORD_PAGE = "reset-password.html"


def _auth_user(user: IdentityUser, include_name: bool = False) -> AuthUser:
    full_name = user.user_metadata.get("full_name") if include_name else None
    return AuthUser(id=user.id, email=user.email, full_name=full_name)


def reset_redirect_url(frontend_url: str) -> Optional[str]:
    """Where the recovery email sends the visitor; None without a FRONTEND_URL."""
    if not frontend_url:
        return None
    return f"{frontend_url.rstrip('/')}/{RESET_PASSWORD_PAGE}"


class AuthService:

    async def register(
        self, identity: IdentityProvider, payload: RegisterRequest
    ) -> AuthPayload:
        user = await identity.sign_up(
            payload.email,
            payload.password,
            metadata={"full_name": payload.full_name},
        )
        logger.info("Identity account created: %s", user.id)
        return AuthPayload(user=_auth_user(user))

    async def login(self, identity: IdentityProvider, payload: LoginRequest) -> AuthPayload:
        """
        Exchange credentials for a session.

        Raises:
            AuthenticationError: the provider refused the credentials (→ 401)
            IdentityProviderError: the provider is unavailable (→ 502)
        """
        try:
            user, session = await identity.sign_in_with_password(
                payload.email, payload.password
            )
        except IdentityProviderError as e:
            if not e.caller_error:
                raise
            # Provider detail stays server-side; the client gets one fixed message
            raise AuthenticationError(context={"provider_message": e.message})

        return AuthPayload(
            user=_auth_user(user, include_name=True),
            session=AuthSession(
                access_token=session.access_token,
                expires_at=session.expires_at,
            ),
        )

    async def logout(self, identity: IdentityProvider, access_token: Optional[str]) -> None:
        await identity.sign_out(access_token)

    async def reset_password(
        self, identity: IdentityProvider, email: str, frontend_url: str
    ) -> None:
        await identity.reset_password_for_email(email, redirect_to=reset_redirect_url(frontend_url))
        logger.info("Password recovery requested")


auth_service = AuthService()
