"""
UYNM Backend — Event Routes
=============================

What:  Public event calendar and registration; admin event management.
How:   Reads and registration are public. Create, update and delete need
       the admin key. PUT is a partial update: only the fields present in the
       body change, and each present field must pass its create rule.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from uynm_api.dependencies import get_db_session, require_admin
from uynm_api.schemas.common import ApiResponse, ErrorResponse, MessageResponse
from uynm_api.schemas.event import (
    EventCreate,
    EventRecord,
    EventRegistrationCreate,
    EventUpdate,
    RegistrationRecord,
)
from uynm_api.services.event_service import event_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/events", tags=["Events"])

_NOT_FOUND = {404: {"description": "Event not found", "model": ErrorResponse}}


@router.get(
    "",
    response_model=ApiResponse[List[EventRecord]],
    summary="List events, soonest first",
)
async def list_events(
    upcoming: bool = Query(default=False, description="Only events from now on"),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[EventRecord]]:
    events = await event_service.list_events(db, upcoming=upcoming)
    return ApiResponse[List[EventRecord]](data=events)


@router.get(
    "/{event_id}",
    response_model=ApiResponse[EventRecord],
    responses=_NOT_FOUND,
    summary="Get one event",
)
async def get_event(
    event_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[EventRecord]:
    return ApiResponse[EventRecord](data=await event_service.get_event(db, event_id))


@router.post(
    "",
    status_code=201,
    response_model=ApiResponse[EventRecord],
    dependencies=[Depends(require_admin)],
    responses={400: {"description": "Validation failed", "model": ErrorResponse}},
    summary="Create an event (admin)",
)
async def create_event(
    payload: EventCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[EventRecord]:
    event = await event_service.create_event(db, payload)
    return ApiResponse[EventRecord](message="Event created successfully", data=event)


@router.put(
    "/{event_id}",
    response_model=ApiResponse[EventRecord],
    dependencies=[Depends(require_admin)],
    responses=_NOT_FOUND,
    summary="Update an event (admin)",
)
async def update_event(
    event_id: UUID,
    payload: EventUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[EventRecord]:
    event = await event_service.update_event(db, event_id, payload.changes())
    return ApiResponse[EventRecord](message="Event updated successfully", data=event)


@router.delete(
    "/{event_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
    responses=_NOT_FOUND,
    summary="Delete an event and its registrations (admin)",
)
async def delete_event(
    event_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await event_service.delete_event(db, event_id)
    return MessageResponse(message="Event deleted successfully")


@router.post(
    "/{event_id}/register",
    status_code=201,
    response_model=ApiResponse[RegistrationRecord],
    responses={
        400: {"description": "Validation failed or already registered", "model": ErrorResponse},
        **_NOT_FOUND,
    },
    summary="Register for an event",
)
async def register_for_event(
    event_id: UUID,
    payload: EventRegistrationCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[RegistrationRecord]:
    registration, title = await event_service.register_for_event(db, event_id, payload)
    return ApiResponse[RegistrationRecord](
        message=f'Successfully registered for "{title}"!',
        data=registration,
    )
