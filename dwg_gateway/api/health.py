"""
Health check endpoints for the DWG → DXF conversion gateway.

This module provides health check endpoints for monitoring
and service discovery.
"""

import platform

import psutil
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from loguru import logger

from dwg_gateway.config import Settings, get_settings
from dwg_gateway.models.response import (
    DetailedHealthResponse,
    HealthResponse,
    ReadinessResponse,
)
from dwg_gateway.utils.shell import check_command_available

router = APIRouter()


@router.get("/healthz", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> JSONResponse:
    """
    Basic health check endpoint.

    Returns:
        JSONResponse: Health status and basic information
    """
    body = HealthResponse(
        status="healthy",
        service=settings.APP_NAME,
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
    )
    return JSONResponse(status_code=200, content=body.model_dump(mode="json"))


@router.get("/health", response_model=DetailedHealthResponse)
async def detailed_health_check(settings: Settings = Depends(get_settings)) -> JSONResponse:
    """
    Detailed health check endpoint with system information.

    Disk usage is reported for the temp directory, where uploads and
    converted files are written.

    Returns:
        JSONResponse: Detailed health status and system metrics
    """
    system_info = {
        "platform": platform.system(),
        "platform_version": platform.version(),
        "python_version": platform.python_version(),
        "architecture": platform.architecture()[0]
    }

    try:
        system_metrics = {
            "cpu_percent": psutil.cpu_percent(interval=None),
            "memory_percent": psutil.virtual_memory().percent,
            "temp_disk_percent": psutil.disk_usage(settings.temp_dir).percent
        }
    except OSError as exc:
        logger.warning(f"Failed to collect system metrics: {exc}")
        system_metrics = {}

    body = DetailedHealthResponse(
        status="healthy",
        service=settings.APP_NAME,
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        system=system_info,
        metrics=system_metrics,
        dependencies=check_dependencies(settings),
    )
    return JSONResponse(status_code=200, content=body.model_dump(mode="json"))


def check_dependencies(settings: Settings) -> dict[str, bool]:
    """
    Check the status of external dependencies.

    Returns:
        dict: Availability of each external tool
    """
    return {"dwg2dxf": check_command_available(settings.CONVERTER_PATH)}


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(settings: Settings = Depends(get_settings)) -> JSONResponse:
    """
    Readiness check endpoint for Kubernetes/Docker health checks.

    Returns:
        JSONResponse: 200 when the converter is available, 503 otherwise
    """
    dependencies = check_dependencies(settings)
    missing = [dep for dep, available in dependencies.items() if not available]

    if missing:
        logger.warning(f"Service not ready, missing: {', '.join(missing)}")
        body = ReadinessResponse(
            status="not_ready",
            service=settings.APP_NAME,
            missing_dependencies=missing,
        )
        return JSONResponse(status_code=503, content=body.model_dump(mode="json"))

    body = ReadinessResponse(status="ready", service=settings.APP_NAME)
    return JSONResponse(status_code=200, content=body.model_dump(mode="json"))
