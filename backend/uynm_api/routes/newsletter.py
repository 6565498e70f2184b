"""
UYNM Backend — Newsletter Routes
==================================

What:  Subscribe / unsubscribe from the site footer, and the admin list.
How:   Subscribe answers 201 for a new address and 200 when a previous
       subscription is reactivated; both notify the admin inbox.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from uynm_api.dependencies import get_db_session, get_dispatcher, require_admin
from uynm_api.schemas.common import ErrorResponse, MessageResponse
from uynm_api.schemas.newsletter import NewsletterEmail, SubscriberListResponse
from uynm_api.services.newsletter_service import SubscribeOutcome, newsletter_service
from uynm_api.services.notification_service import NotificationDispatcher, NotificationKind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/newsletter", tags=["Newsletter"])


@router.post(
    "/subscribe",
    status_code=201,
    response_model=MessageResponse,
    responses={
        200: {"description": "Previous subscription reactivated", "model": MessageResponse},
        400: {"description": "Invalid or already subscribed email", "model": ErrorResponse},
    },
    summary="Subscribe to the newsletter",
)
async def subscribe(
    payload: NewsletterEmail,
    response: Response,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db_session),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> MessageResponse:
    outcome = await newsletter_service.subscribe(db, payload.email)
    reactivated = outcome is SubscribeOutcome.REACTIVATED

    background_tasks.add_task(
        dispatcher.notify,
        NotificationKind.NEWSLETTER,
        {"email": payload.email, "reactivated": reactivated},
    )

    if reactivated:
        response.status_code = 200
        return MessageResponse(message="Welcome back! Your subscription has been reactivated.")
    return MessageResponse(message="Thank you for subscribing! Stay tuned for updates.")


@router.delete(
    "/unsubscribe",
    response_model=MessageResponse,
    responses={400: {"description": "Invalid email", "model": ErrorResponse}},
    summary="Unsubscribe from the newsletter",
)
async def unsubscribe(
    payload: NewsletterEmail,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await newsletter_service.unsubscribe(db, payload.email)
    return MessageResponse(message="You have been unsubscribed from our newsletter.")


@router.get(
    "/subscribers",
    response_model=SubscriberListResponse,
    dependencies=[Depends(require_admin)],
    summary="List subscribers with total and active counts (admin)",
)
async def list_subscribers(
    db: AsyncSession = Depends(get_db_session),
) -> SubscriberListResponse:
    subscribers, total, active = await newsletter_service.list_subscribers(db)
    return SubscriberListResponse(data=subscribers, total=total, active=active)
