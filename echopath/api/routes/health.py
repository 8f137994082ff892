"""
Health Check Routes
===================

Endpoints for health monitoring and service status.
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends

from echopath import __version__
from echopath.api.routes.sessions import SessionRegistry, get_registry
from echopath.config import Settings, get_settings

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "",
    summary="Basic health check",
    response_description="Service health status",
)
async def health_check() -> dict[str, str]:
    """
    Basic health check endpoint.

    Returns:
        Simple status message indicating service is running.
    """
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get(
    "/info",
    summary="Service information",
)
async def service_info(
    settings: Settings = Depends(get_settings),
    sessions: SessionRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """
    Service information and active configuration.

    Returns:
        Version, environment, session count and feedback timings.
    """
    return {
        "service": "echopath",
        "version": __version__,
        "environment": settings.server.environment,
        "active_sessions": len(sessions.all()),
        "timings": {
            "detection_interval_ms": settings.detection.detection_interval_ms,
            "warning_delay_ms": settings.navigation.navigation_warning_delay_ms,
            "landmark_delay_ms": settings.navigation.navigation_landmark_delay_ms,
            "recognition_delay_ms": settings.voice.voice_recognition_delay_ms,
        },
    }
