"""
UYNM Backend — Event Schemas
==============================

What:  Event create/update rules, event registration rules and the stored
       records returned to the website.
"""

import uuid
from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict

from uynm_api.validation import (
    RequestModel,
    email_address,
    iso_datetime,
    optional_text,
    required_text,
)


class EventCreate(RequestModel):
    """POST /api/events body."""
    title: Annotated[str, required_text("Title is required")] = None
    description: Annotated[Optional[str], optional_text()] = None
    event_date: Annotated[datetime, iso_datetime("Valid date is required")] = None
    location: Annotated[str, required_text("Location is required")] = None
    image_url: Annotated[Optional[str], optional_text()] = None
    registration_link: Annotated[Optional[str], optional_text()] = None


class EventUpdate(RequestModel):
    """
    PUT /api/events/{id} body.

    Every field is optional; only the keys present in the request are applied,
    and present keys must satisfy the same rules as on create.
    """
    model_config = ConfigDict(validate_default=False)

    title: Annotated[str, required_text("Title is required")] = None
    description: Annotated[Optional[str], optional_text()] = None
    event_date: Annotated[datetime, iso_datetime("Valid date is required")] = None
    location: Annotated[str, required_text("Location is required")] = None
    image_url: Annotated[Optional[str], optional_text()] = None
    registration_link: Annotated[Optional[str], optional_text()] = None

    def changes(self) -> dict:
        """Column → value for the fields the client actually sent."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class EventRegistrationCreate(RequestModel):
    """POST /api/events/{id}/register body."""
    email: Annotated[str, email_address()] = None
    full_name: Annotated[str, required_text("Full name is required")] = None
    phone: Annotated[Optional[str], optional_text()] = None


class EventRecord(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    event_date: datetime
    location: str
    image_url: Optional[str] = None
    registration_link: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class RegistrationRecord(BaseModel):
    id: uuid.UUID
    event_id: uuid.UUID
    email: str
    full_name: str
    phone: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
