"""
UYNM Backend — Contact Schemas
================================

What:  Contact form submission rules and the stored contact record.
"""

import uuid
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel

from uynm_api.validation import (
    RequestModel,
    email_address,
    min_length_text,
    present,
    required_text,
)


class ContactCreate(RequestModel):
    """POST /api/contact body."""
    first_name: Annotated[str, required_text("First name is required")] = None
    last_name: Annotated[str, required_text("Last name is required")] = None
    email: Annotated[str, email_address()] = None
    subject: Annotated[str, required_text("Subject is required")] = None
    message: Annotated[str, min_length_text(10, "Message must be at least 10 characters")] = None


class ContactStatusUpdate(RequestModel):
    """
    PATCH /api/contact/{id}/status body.

    The value is stored as given. The dashboard uses unread/read/archived but
    the column is not restricted to those values.
    """
    status: Annotated[str, present("Status is required")] = None


class ContactRecord(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    subject: str
    message: str
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ContactReceipt(BaseModel):
    """Returned after a successful submission."""
    id: uuid.UUID
    status: str
