"""
Chirper Backend: Shared Response Schemas
========================================

What:  Error and health-check response shapes, plus the integer ranges
       request schemas and path parameters are bounded by.
"""

from typing import Optional

from pydantic import BaseModel, Field

# Column ranges: account_id, message_id and posted_by are INTEGER columns,
# time_posted_epoch is BIGINT. Values outside them are malformed requests.
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ErrorResponse(BaseModel):
    """
    What:  JSON error format for malformed requests and server errors.
    Note:  Business-rule rejections (400/401) carry no body at all.

    Example:
        {
            "error": "malformed_request",
            "message": "Request body or path parameters are invalid",
            "details": {"errors": [...]},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response: service status plus database connectivity."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
