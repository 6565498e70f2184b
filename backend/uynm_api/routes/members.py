"""
UYNM Backend — Member Routes
==============================

What:  Membership registration ("Get Involved" form) and the admin roster.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from uynm_api.dependencies import get_db_session, get_dispatcher, require_admin
from uynm_api.schemas.common import ApiResponse, ErrorResponse
from uynm_api.schemas.member import MemberCreate, MemberListResponse, MemberRecord, MemberSummary
from uynm_api.services.member_service import member_service
from uynm_api.services.notification_service import NotificationDispatcher, NotificationKind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/members", tags=["Members"])


@router.post(
    "/register",
    status_code=201,
    response_model=ApiResponse[MemberSummary],
    responses={
        400: {"description": "Validation failed or email already registered", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Register as a volunteer, partner, member or mentor",
)
async def register_member(
    payload: MemberCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db_session),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> ApiResponse[MemberSummary]:
    summary = await member_service.register_member(db, payload)

    background_tasks.add_task(dispatcher.notify, NotificationKind.MEMBER, payload.model_dump())

    return ApiResponse[MemberSummary](
        message=(
            f"Welcome to UYNM! Your {summary.track} registration has been received. "
            "Our team will contact you within 48 hours."
        ),
        data=summary,
    )


@router.get(
    "",
    response_model=MemberListResponse,
    dependencies=[Depends(require_admin)],
    summary="List members with per-track stats (admin)",
)
async def list_members(
    track: Optional[str] = Query(default=None, description="Only this involvement track"),
    db: AsyncSession = Depends(get_db_session),
) -> MemberListResponse:
    members, stats = await member_service.list_members(db, track=track)
    return MemberListResponse(data=members, stats=stats)


@router.get(
    "/{member_id}",
    response_model=ApiResponse[MemberRecord],
    dependencies=[Depends(require_admin)],
    responses={404: {"description": "Unknown member", "model": ErrorResponse}},
    summary="Get one member (admin)",
)
async def get_member(
    member_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[MemberRecord]:
    return ApiResponse[MemberRecord](data=await member_service.get_member(db, member_id))
