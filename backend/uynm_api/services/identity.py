"""
UYNM Backend — Identity Provider Client
=========================================

What:  Interface to the external identity provider plus the Supabase Auth
       (GoTrue) implementation used in production.
How:   `IdentityProvider` is the abstract contract the auth service depends on.
       `SupabaseIdentityClient` speaks GoTrue's REST API through an injected
       httpx.AsyncClient, so tests can swap in httpx.MockTransport or a fake
       provider without network access.
Who:   Constructed once in create_app(); closed by the lifespan handler.

GoTrue endpoints used:
    POST /auth/v1/signup                       → sign_up
    POST /auth/v1/token?grant_type=password    → sign_in_with_password
    POST /auth/v1/logout   (Bearer token)      → sign_out
    POST /auth/v1/recover?redirect_to=...      → reset_password_for_email

Error translation:
    4xx from GoTrue         → IdentityProviderError(caller_error=True, provider message)
    5xx / network / timeout → IdentityProviderError(caller_error=False, generic message)
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

import httpx
from pydantic import BaseModel, Field

from uynm_api.exceptions import IdentityProviderError

logger = logging.getLogger(__name__)


class IdentityUser(BaseModel):
    id: Optional[str] = None
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = Field(default_factory=dict)


class IdentitySession(BaseModel):
    access_token: Optional[str] = None
    expires_at: Optional[int] = None


class IdentityProvider(ABC):
    """
    Contract for the delegated identity system.

    Implementations raise IdentityProviderError for every failure; they never
    store or inspect session tokens beyond passing them through.
    """

    @abstractmethod
    async def sign_up(
        self, email: str, password: str, metadata: Optional[Dict[str, Any]] = None
    ) -> IdentityUser:
        ...

    @abstractmethod
    async def sign_in_with_password(
        self, email: str, password: str
    ) -> Tuple[IdentityUser, IdentitySession]:
        ...

    @abstractmethod
    async def sign_out(self, access_token: Optional[str]) -> None:
        ...

    @abstractmethod
    async def reset_password_for_email(
        self, email: str, redirect_to: Optional[str] = None
    ) -> None:
        ...

    async def aclose(self) -> None:
        """Release network resources. Default: nothing to release."""


class SupabaseIdentityClient(IdentityProvider):
    """Supabase Auth (GoTrue) over REST."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.api_key)

    def _headers(self, access_token: Optional[str] = None) -> Dict[str, str]:
        headers = {"apikey": self.api_key, "Content-Type": "application/json"}
        headers["Authorization"] = f"Bearer {access_token or self.api_key}"
        return headers

    async def _post(
        self,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None,
        access_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not self.configured:
            raise IdentityProviderError(
                message="Authentication service is not configured",
                context={"path": path},
            )

        url = f"{self.base_url}/auth/v1/{path}"
        try:
            response = await self._client.post(
                url,
                json=payload or {},
                params=params,
                headers=self._headers(access_token),
            )
        except httpx.HTTPError as e:
            logger.error("Identity provider unreachable (%s): %s", path, str(e))
            raise IdentityProviderError(
                context={"path": path, "error_type": type(e).__name__},
            )

        if response.status_code >= 500:
            logger.error(
                "Identity provider error on %s: HTTP %d", path, response.status_code
            )
            raise IdentityProviderError(
                context={"path": path, "status": response.status_code},
            )

        body = _json_or_empty(response)
        if response.status_code >= 400:
            message = _error_message(body) or "Request was rejected by the authentication service"
            logger.info(
                "Identity provider rejected %s: HTTP %d %s",
                path,
                response.status_code,
                message,
            )
            raise IdentityProviderError(
                message=message,
                caller_error=True,
                context={"path": path, "status": response.status_code},
            )
        return body

    async def sign_up(
        self, email: str, password: str, metadata: Optional[Dict[str, Any]] = None
    ) -> IdentityUser:
        body = await self._post(
            "signup",
            {"email": email, "password": password, "data": metadata or {}},
        )
        # With email confirmation on, GoTrue returns the bare user object;
        # with autoconfirm it returns a session carrying a "user" key.
        user = body.get("user") if isinstance(body.get("user"), dict) else body
        return IdentityUser.model_validate(user)

    async def sign_in_with_password(
        self, email: str, password: str
    ) -> Tuple[IdentityUser, IdentitySession]:
        body = await self._post(
            "token",
            {"email": email, "password": password},
            params={"grant_type": "password"},
        )
        expires_at = body.get("expires_at")
        if expires_at is None and body.get("expires_in"):
            expires_at = int(time.time()) + int(body["expires_in"])
        session = IdentitySession(access_token=body.get("access_token"), expires_at=expires_at)
        return IdentityUser.model_validate(body.get("user") or {}), session

    async def sign_out(self, access_token: Optional[str]) -> None:
        if not access_token:
            # Nothing to revoke server-side; the browser drops its token.
            return
        await self._post("logout", access_token=access_token)

    async def reset_password_for_email(
        self, email: str, redirect_to: Optional[str] = None
    ) -> None:
        params = {"redirect_to": redirect_to} if redirect_to else None
        await self._post("recover", {"email": email}, params=params)

    async def aclose(self) -> None:
        await self._client.aclose()


def _json_or_empty(response: httpx.Response) -> Dict[str, Any]:
    if not response.content:
        return {}
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _error_message(body: Dict[str, Any]) -> Optional[str]:
    for key in ("msg", "error_description", "message", "error"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    return None
