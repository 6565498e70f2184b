"""
UYNM Backend — Contact Routes
===============================

What:  The website's contact form and the admin inbox.
How:   POST stores the message and schedules an admin notification as a
       background task; the visitor's response never waits for SMTP.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from uynm_api.dependencies import get_db_session, get_dispatcher, require_admin
from uynm_api.schemas.common import ApiResponse, ErrorResponse
from uynm_api.schemas.contact import (
    ContactCreate,
    ContactReceipt,
    ContactRecord,
    ContactStatusUpdate,
)
from uynm_api.services.contact_service import contact_service
from uynm_api.services.notification_service import NotificationDispatcher, NotificationKind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contact", tags=["Contact"])


@router.post(
    "",
    status_code=201,
    response_model=ApiResponse[ContactReceipt],
    responses={
        400: {"description": "Validation failed", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Submit the contact form",
)
async def submit_contact(
    payload: ContactCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db_session),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> ApiResponse[ContactReceipt]:
    receipt = await contact_service.create_message(db, payload)

    background_tasks.add_task(dispatcher.notify, NotificationKind.CONTACT, payload.model_dump())

    return ApiResponse[ContactReceipt](
        message="Thank you for your message! We will get back to you soon.",
        data=receipt,
    )


@router.get(
    "",
    response_model=ApiResponse[List[ContactRecord]],
    dependencies=[Depends(require_admin)],
    summary="List contact messages (admin)",
)
async def list_contacts(
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[ContactRecord]]:
    messages = await contact_service.list_messages(db)
    return ApiResponse[List[ContactRecord]](data=messages)


@router.patch(
    "/{contact_id}/status",
    response_model=ApiResponse[ContactRecord],
    dependencies=[Depends(require_admin)],
    responses={404: {"description": "Unknown message", "model": ErrorResponse}},
    summary="Set a message's review status (admin)",
)
async def update_contact_status(
    contact_id: UUID,
    payload: ContactStatusUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[ContactRecord]:
    record = await contact_service.update_status(db, contact_id, payload.status)
    return ApiResponse[ContactRecord](data=record)
