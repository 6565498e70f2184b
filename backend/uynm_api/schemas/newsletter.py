"""
UYNM Backend — Newsletter Schemas
===================================
"""

import uuid
from datetime import datetime
from typing import Annotated, List

from pydantic import BaseModel

from uynm_api.schemas.common import ApiResponse
from uynm_api.validation import RequestModel, email_address


class NewsletterEmail(RequestModel):
    """Body of both subscribe and unsubscribe."""
    email: Annotated[str, email_address()] = None


class SubscriberRecord(BaseModel):
    id: uuid.UUID
    email: str
    is_active: bool
    subscribed_at: datetime

    model_config = {"from_attributes": True}


class SubscriberListResponse(ApiResponse[List[SubscriberRecord]]):
    total: int
    active: int
