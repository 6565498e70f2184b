"""
UYNM Backend — Shared Envelope Schemas
========================================

What:  The success envelope, the error envelope and the health payload shared
       by every route module.
"""

from datetime import datetime
from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """
    Success envelope returned by every endpoint.

    Example:
        {"success": true, "message": "Event created successfully", "data": {...}}
    """
    success: bool = Field(default=True)
    message: Optional[str] = Field(default=None, description="Human-readable outcome")
    data: Optional[DataT] = Field(default=None)


class MessageResponse(BaseModel):
    """Envelope for operations with nothing to return but a message."""
    success: bool = True
    message: str


class FieldError(BaseModel):
    field: str = Field(description="camelCase name of the offending field, or 'body'")
    message: str = Field(description="What to fix")
    location: str = Field(default="body", description="body, query or path")


class ErrorResponse(BaseModel):
    """
    Failure envelope produced by the global exception handlers.

    Example:
        {
            "success": false,
            "error": "duplicate_email",
            "message": "This email is already registered. Please login or use a different email.",
            "request_id": "a1b2c3d4"
        }
    """
    success: bool = False
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    errors: Optional[List[FieldError]] = Field(default=None, description="Per-field validation errors")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Liveness payload for GET /api/health."""
    status: str = Field(description="Always 'ok' while the process serves requests")
    timestamp: datetime = Field(description="Server time (UTC)")
    version: str
    uptime_seconds: float
    notifications: Dict[str, int] = Field(
        default_factory=dict,
        description="Notification outcome counters since startup: delivered, failed, skipped",
    )


class ServiceInfoResponse(BaseModel):
    message: str
    status: str
    version: str
