"""
UYNM Backend — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() constructs the external collaborators (database, identity
       client, mail transport, notification dispatcher) unless the caller
       passes its own, stores them on `app.state`, registers middleware,
       exception handlers and routers, and returns the app.
Who:   uvicorn (`uynm_api.main:app` or the `uynm-api` console script) and
       the test suite, which injects an aiosqlite database and fakes.

Application Architecture:
    ┌────────────────────────────────────────────────────────────────┐
    │                          FastAPI App                           │
    │                                                                │
    │  Middleware: CORS → Request ID → Logging → Rate Limit → GZip   │
    │                                                                │
    │  Routers: /  /api/health  /api/auth  /api/contact              │
    │           /api/members  /api/newsletter  /api/events           │
    │                                                                │
    │  app.state: settings │ database │ identity │ dispatcher        │
    │                                                                │
    │  Exception handlers → {"success": false, "error", "message",   │
    │                        "errors"?, "request_id"}                │
    └────────────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, report missing collaborator configuration
              (the server still starts; health stays reachable)
    Shutdown: close the identity HTTP client, dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from uynm_api import __version__
from uynm_api.config import Settings, settings as default_settings
from uynm_api.database import Database
from uynm_api.exceptions import UYNMError, ValidationError
from uynm_api.middleware.logging import RequestLoggingMiddleware
from uynm_api.middleware.rate_limit import RateLimitMiddleware
from uynm_api.middleware.request_id import RequestIDMiddleware, request_id_var
from uynm_api.routes import auth, contact, events, health, members, newsletter
from uynm_api.services.identity import IdentityProvider, SupabaseIdentityClient
from uynm_api.services.mail_transport import MailTransport, SmtpMailTransport
from uynm_api.services.notification_service import NotificationDispatcher
from uynm_api.validation import field_errors

logger = logging.getLogger(__name__)

# Any localhost / 127.0.0.1 port, accepted in development only
DEV_ORIGIN_REGEX = r"https?://(localhost|127\.0\.0\.1)(:\d+)?"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2025-01-15T12:00:00 [INFO] uynm_api.services.member_service: Member registered: ...
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access log replaces uvicorn's; the rest log every call at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("aiosmtplib").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("UYNM Backend %s starting up (%s)...", __version__, app_settings.environment)

    try:
        app_settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: forms that need the missing collaborator fail on
        # their own, everything else (health, events) keeps working.
        logger.error("Configuration error: %s", str(e))

    logger.info("CORS origins: %s", ", ".join(app_settings.cors_origins_list) or "(none)")
    logger.info(
        "Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port
    )
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("UYNM Backend shutting down...")
    await app.state.identity.aclose()
    await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_body(error: str, message: str, errors: Optional[list] = None) -> dict:
    body = {"success": False, "error": error, "message": message}
    if errors is not None:
        body["errors"] = errors
    body["request_id"] = request_id_var.get("")
    return body


def app_error_response(exc: UYNMError) -> JSONResponse:
    errors = exc.errors if isinstance(exc, ValidationError) else None
    headers = {}
    if getattr(exc, "retry_after", None):
        headers["Retry-After"] = str(exc.retry_after)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error_code, exc.message, errors),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map every failure to the uniform error envelope.

    Handler hierarchy:
        RequestValidationError  → 400 validation_error with per-field errors
        UYNMError (all custom)  → exc.status_code / exc.error_code
        StarletteHTTPException  → its status; 404 becomes "Route not found"
        Exception (fallback)    → 500 internal_server_error

    Internal detail (exception context, driver errors, stack traces) is logged
    and never returned.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = field_errors(exc.errors())
        logger.info(
            "[%s] Validation failed on %s: %s",
            request_id_var.get(""),
            request.url.path,
            ", ".join(error["field"] for error in errors),
        )
        return app_error_response(ValidationError(errors=errors))

    @app.exception_handler(UYNMError)
    async def handle_app_error(request: Request, exc: UYNMError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return app_error_response(exc)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404,
                content=error_body("not_found", "Route not found"),
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body("http_error", str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again later.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    *,
    database: Optional[Database] = None,
    identity: Optional[IdentityProvider] = None,
    mail_transport: Optional[MailTransport] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: configuration (defaults to the process-wide Settings())
        database: store client; built from settings.database_url when omitted
        identity: identity provider; Supabase Auth client when omitted
        mail_transport: outbound mail; SMTP relay when omitted
    """
    settings = settings or default_settings

    app = FastAPI(
        title="UYNM API",
        description=(
            "Backend for the United Youth Nigeria Movement website: contact, "
            "membership, newsletter and event forms, plus account sign-in."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Collaborators ─────────────────────────────────────────────────────
    transport = mail_transport or SmtpMailTransport(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_user,
        password=settings.smtp_pass,
        timeout=settings.smtp_timeout,
    )
    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)
    app.state.identity = identity or SupabaseIdentityClient(
        base_url=settings.supabase_url,
        api_key=settings.supabase_anon_key,
        timeout=settings.identity_timeout,
    )
    app.state.dispatcher = NotificationDispatcher(
        transport=transport,
        recipient=settings.notification_recipient,
        sender_address=settings.smtp_user,
        sender_name=settings.mail_from_name,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: CORS → RequestID → Logging → RateLimit → GZip
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_origin_regex=DEV_ORIGIN_REGEX if settings.is_development else None,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(contact.router)
    app.include_router(members.router)
    app.include_router(newsletter.router)
    app.include_router(events.router)

    return app


def run() -> None:
    """Console entry point: `uynm-api`."""
    import uvicorn

    uvicorn.run(
        "uynm_api.main:app",
        host=default_settings.backend_host,
        port=default_settings.backend_port,
        log_level=default_settings.log_level.lower(),
    )


# uvicorn imports `uynm_api.main:app`
app = create_app()
