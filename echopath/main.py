"""
EchoPath - Main Application
===========================

FastAPI service that hosts one feedback coordinator per user session
and streams its speech and vibration to the mobile client.

Usage:
    uvicorn echopath.main:app --reload --host 0.0.0.0 --port 8000
"""

import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, WebSocket, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from echopath import __version__
from echopath.api.routes import (
    detection_router,
    health_router,
    navigation_router,
    sessions_router,
    voice_router,
)
from echopath.api.routes.sessions import registry
from echopath.api.websocket import websocket_endpoint
from echopath.config import get_settings
from echopath.errors import SessionNotFoundError
from echopath.utils.logger import LogContext, get_logger, setup_logging

settings = get_settings()
setup_logging(
    level=settings.server.log_level,
    json_logs=not settings.server.debug,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Stop every session on shutdown so no feedback timer outlives the loop."""
    logger.info("Starting EchoPath", version=__version__, environment=settings.server.environment)
    yield
    await registry.close_all()
    logger.info("EchoPath stopped")


app = FastAPI(
    title="EchoPath",
    description=(
        "Multi-modal feedback coordinator for blind and low-vision users. "
        "Turns object sightings, navigation steps and voice commands into "
        "ordered, de-duplicated speech and vibration."
    ),
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.server.debug else None,
    redoc_url=None,
)

# The mobile client calls from its own origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.server.get_cors_origins_list(),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def bind_request_id(request: Request, call_next):
    """Tag every log line of a request with its id."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    with LogContext(request_id=request_id):
        response = await call_next(request)
        logger.debug(
            "Request handled",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(SessionNotFoundError)
async def session_not_found_handler(request: Request, exc: SessionNotFoundError) -> JSONResponse:
    """Unknown or closed session ids become 404s."""
    logger.info("Unknown session", session_id=exc.session_id, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": f"Session not found: {exc.session_id}"},
    )


app.include_router(health_router)
app.include_router(sessions_router)
app.include_router(detection_router)
app.include_router(navigation_router)
app.include_router(voice_router)


@app.websocket("/ws/{session_id}")
async def ws_endpoint(websocket: WebSocket, session_id: str) -> None:
    """Feedback stream for one session: ``speak`` and ``vibrate`` messages."""
    await websocket_endpoint(websocket, session_id)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "echopath.main:app",
        host=settings.server.server_host,
        port=settings.server.server_port,
        reload=settings.server.debug,
        log_level=settings.server.log_level.lower(),
    )
