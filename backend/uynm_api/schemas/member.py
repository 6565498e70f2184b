"""
UYNM Backend — Member Schemas
===============================

What:  Membership registration rules, the stored profile record and the
       per-track statistics of the admin listing.
"""

import uuid
from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from uynm_api.models.member import INVOLVEMENT_TRACKS
from uynm_api.schemas.common import ApiResponse
from uynm_api.validation import (
    RequestModel,
    email_address,
    one_of,
    optional_text,
    required_text,
)


class MemberCreate(RequestModel):
    """POST /api/members/register body."""
    full_name: Annotated[str, required_text("Full name is required")] = None
    email: Annotated[str, email_address()] = None
    phone: Annotated[str, required_text("Phone number is required")] = None
    involvement_track: Annotated[
        str, one_of(INVOLVEMENT_TRACKS, "Please select a valid involvement track")
    ] = None
    location: Annotated[str, required_text("Location is required")] = None
    reason: Annotated[Optional[str], optional_text()] = None


class MemberRecord(BaseModel):
    id: uuid.UUID
    full_name: str
    email: str
    phone: str
    location: str
    involvement_track: str
    reason: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class MemberSummary(BaseModel):
    """Returned after registration: {"id", "fullName", "track"}."""
    id: uuid.UUID
    full_name: str
    track: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MemberStats(BaseModel):
    total: int = 0
    volunteers: int = 0
    partners: int = 0
    members: int = 0
    mentors: int = 0


class MemberListResponse(ApiResponse[List[MemberRecord]]):
    stats: MemberStats
