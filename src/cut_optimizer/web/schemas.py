"""Pydantic schemas specific to the REST API."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponseSchema(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    error_type: str = Field(..., description="Error type identifier")
    details: list[dict[str, Any]] | dict[str, Any] | None = Field(
        default=None, description="Additional error details"
    )


class HealthSchema(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
