"""
Response models for the DWG → DXF conversion gateway API.

This module defines Pydantic models for the JSON health endpoints.
Conversion responses are binary and have no model.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HealthResponse(BaseModel):
    """Liveness information."""

    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    environment: str = Field(..., description="Deployment environment")
    timestamp: datetime = Field(default_factory=_utcnow)


class DetailedHealthResponse(HealthResponse):
    """Liveness information with host metrics and dependency status."""

    system: dict[str, Any] = Field(default_factory=dict, description="Platform information")
    metrics: dict[str, float] = Field(default_factory=dict, description="Host resource usage")
    dependencies: dict[str, bool] = Field(default_factory=dict, description="External tool availability")


class ReadinessResponse(BaseModel):
    """Readiness information for orchestrator probes."""

    status: str = Field(..., description="ready or not_ready")
    service: str = Field(..., description="Service name")
    missing_dependencies: list[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=_utcnow)
