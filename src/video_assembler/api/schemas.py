"""Response schemas for the FastAPI endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    error: str
    missingFields: Optional[list[str]] = Field(
        default=None, description="Request fields that were absent or blank (400 only)"
    )


class HealthResponse(BaseModel):
    status: str = "ok"


VIDEO_RESPONSES = {
    200: {"content": {"video/mp4": {}}, "description": "The finished video as an attachment"},
    400: {"model": ErrorResponse, "description": "Required fields missing"},
    500: {"model": ErrorResponse, "description": "Download or transcoding failed"},
}
