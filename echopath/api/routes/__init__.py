"""
API Routes Package
==================

REST API route definitions.
"""

from echopath.api.routes.detection import router as detection_router
from echopath.api.routes.health import router as health_router
from echopath.api.routes.navigation import router as navigation_router
from echopath.api.routes.sessions import router as sessions_router
from echopath.api.routes.voice import router as voice_router

__all__ = [
    "detection_router",
    "health_router",
    "navigation_router",
    "sessions_router",
    "voice_router",
]
