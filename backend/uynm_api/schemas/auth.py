"""
UYNM Backend — Auth Schemas
=============================

What:  Field pre-checks for the identity pass-through endpoints and the shapes
       returned to the website. The identity provider enforces its own password
       policy; the 6-character floor here only rejects obviously short input
       before the network call.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from uynm_api.validation import (
    RequestModel,
    email_address,
    min_length,
    present,
    required_text,
)


class RegisterRequest(RequestModel):
    email: Annotated[str, email_address()] = None
    password: Annotated[str, min_length(6, "Password must be at least 6 characters")] = None
    full_name: Annotated[str, required_text("Full name is required")] = None


class LoginRequest(RequestModel):
    email: Annotated[str, email_address()] = None
    password: Annotated[str, present("Password is required")] = None


class ResetPasswordRequest(RequestModel):
    email: Annotated[str, email_address()] = None


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuthUser(_CamelModel):
    id: Optional[str] = None
    email: Optional[str] = None
    full_name: Optional[str] = None


class AuthSession(_CamelModel):
    """Opaque session material handed back to the browser, never stored."""
    access_token: Optional[str] = None
    expires_at: Optional[int] = None


class AuthPayload(_CamelModel):
    user: AuthUser
    session: Optional[AuthSession] = None
