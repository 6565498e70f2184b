"""
UYNM Backend — Service Banner and Health Check
================================================

What:  GET / (banner) and GET /api/health (liveness probe).
How:   Liveness only: the probe never calls the store, the identity provider
       or the mail relay, so a collaborator outage does not take the
       service out of a load balancer. Notification counters are reported so
       a silent SMTP failure is still visible.
Who:   Uptime monitors and the hosting platform's health checks.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from uynm_api import __version__
from uynm_api.dependencies import get_dispatcher
from uynm_api.schemas.common import HealthResponse, ServiceInfoResponse
from uynm_api.services.notification_service import NotificationDispatcher

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/",
    response_model=ServiceInfoResponse,
    summary="Service banner",
)
async def service_info() -> ServiceInfoResponse:
    return ServiceInfoResponse(
        message="United Youth Nigeria Movement API",
        status="running",
        version=__version__,
    )


@router.get(
    "/api/health",
    response_model=HealthResponse,
    summary="Liveness check",
    description="Returns 'ok' while the process serves requests, plus notification counters.",
)
async def health_check(
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> HealthResponse:
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 2),
        notifications=dict(dispatcher.stats),
    )
