"""
UYNM Backend — Request Dependencies
=====================================

What:  FastAPI dependencies that hand routers the collaborators built by
       create_app(): settings, a request-scoped database session, the identity
       provider and the notification dispatcher. Also the admin gate.
How:   Everything is read from `request.app.state`, so two apps created in the
       same process (tests) never share clients.

Admin gate:
    X-Admin-Key: <key>              ┐
    Authorization: Bearer <key>     ┘ either header, compared in constant time
    no credential            → 401 unauthorized
    wrong key / no key set   → 403 forbidden
"""

import logging
import secrets
from typing import AsyncGenerator, Optional

from fastapi import Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from uynm_api.config import Settings
from uynm_api.database import session_scope
from uynm_api.exceptions import AuthorizationError
from uynm_api.services.identity import IdentityProvider
from uynm_api.services.notification_service import NotificationDispatcher

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    One AsyncSession per request.

    Exceptions raised by the route are re-raised inside session_scope, which
    rolls back whatever the service did not commit.
    """
    async with session_scope(request.app.state.database) as session:
        yield session


def get_identity(request: Request) -> IdentityProvider:
    return request.app.state.identity


def get_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.dispatcher


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Token part of an `Authorization: Bearer <token>` header, else None."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def require_admin(
    request: Request,
    x_admin_key: Optional[str] = Header(default=None),
    authorization: Optional[str] = Header(default=None),
) -> None:
    presented = x_admin_key or bearer_token(authorization)
    if not presented:
        raise AuthorizationError(message="Admin credentials required", status_code=401)

    expected = request.app.state.settings.admin_api_key
    if not expected:
        logger.warning("Admin request refused: ADMIN_API_KEY is not configured")
        raise AuthorizationError(context={"reason": "admin_key_not_configured"})

    if not secrets.compare_digest(presented.encode(), expected.encode()):
        raise AuthorizationError(message="Invalid admin credentials")
