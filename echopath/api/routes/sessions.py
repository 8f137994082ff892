"""
Session Management Routes
=========================

Endpoints for managing feedback sessions.

A session is one user's feedback coordinator: its announcement gate,
haptics, detection, navigation and voice components, plus the channel
that carries feedback to the user's device. Sessions live in memory
only.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from echopath.api.websocket import (
    ChannelSpeechOutput,
    ChannelVibrationOutput,
    FeedbackChannel,
    ws_manager,
)
from echopath.config import Settings, get_settings
from echopath.coordinator import FeedbackCoordinator
from echopath.errors import SessionNotFoundError
from echopath.runtime.scheduler import AsyncioScheduler
from echopath.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/sessions", tags=["Sessions"])


@dataclass
class SessionRecord:
    """A registered coordinator and its client channel."""

    session_id: str
    coordinator: FeedbackCoordinator
    channel: FeedbackChannel
    created_at: datetime


class SessionRegistry:
    """In-memory coordinator sessions keyed by id."""

    def __init__(self) -> None:
        self._sessions: dict[str, SessionRecord] = {}

    def create(self, settings: Settings) -> SessionRecord:
        session_id = str(uuid.uuid4())
        channel = ws_manager.channel(session_id)
        coordinator = FeedbackCoordinator.from_settings(
            settings,
            ChannelSpeechOutput(channel),
            ChannelVibrationOutput(channel),
            AsyncioScheduler(),
        )
        record = SessionRecord(
            session_id=session_id,
            coordinator=coordinator,
            channel=channel,
            created_at=datetime.now(timezone.utc),
        )
        self._sessions[session_id] = record
        return record

    def get(self, session_id: str) -> SessionRecord:
        """
        Raises:
            SessionNotFoundError: If no session has this id.
        """
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    async def close(self, session_id: str) -> None:
        record = self.get(session_id)
        await record.coordinator.close()
        del self._sessions[session_id]
        ws_manager.remove(session_id)

    async def close_all(self) -> None:
        for session_id in list(self._sessions):
            await self.close(session_id)

    def all(self) -> list[SessionRecord]:
        return list(self._sessions.values())


registry = SessionRegistry()


def get_registry() -> SessionRegistry:
    """Get the session registry."""
    return registry


def get_session(
    session_id: str,
    sessions: SessionRegistry = Depends(get_registry),
) -> SessionRecord:
    """
    Resolve a session id path parameter.

    Raises:
        SessionNotFoundError: If no session has this id; the app turns
            it into a 404.
    """
    return sessions.get(session_id)


def get_coordinator(record: SessionRecord = Depends(get_session)) -> FeedbackCoordinator:
    return record.coordinator


# Request/Response Models
class SessionResponse(BaseModel):
    """Response containing session information."""

    session_id: str
    created_at: str
    state: dict[str, Any]


class SessionListResponse(BaseModel):
    """Response containing list of sessions."""

    sessions: list[SessionResponse]
    total: int


class PreferencesRequest(BaseModel):
    """Feedback preference changes; omitted fields are left unchanged."""

    voice_enabled: Optional[bool] = Field(default=None, description="Spoken feedback")
    haptics_enabled: Optional[bool] = Field(default=None, description="Vibration feedback")


def _to_response(record: SessionRecord) -> SessionResponse:
    return SessionResponse(
        session_id=record.session_id,
        created_at=record.created_at.isoformat(),
        state=record.coordinator.to_dict(),
    )


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new feedback session",
)
async def create_session(
    settings: Settings = Depends(get_settings),
    sessions: SessionRegistry = Depends(get_registry),
) -> SessionResponse:
    """
    Create a new feedback session.

    The session id is used for every subsequent detection, navigation
    and voice call, and to attach the client's WebSocket.
    """
    record = sessions.create(settings)
    logger.info("Session created", session_id=record.session_id)
    return _to_response(record)


@router.get(
    "",
    response_model=SessionListResponse,
    summary="List all active sessions",
)
async def list_sessions(
    sessions: SessionRegistry = Depends(get_registry),
) -> SessionListResponse:
    """List all active sessions."""
    items = [_to_response(record) for record in sessions.all()]
    return SessionListResponse(sessions=items, total=len(items))


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    summary="Get session details",
)
async def get_session_details(record: SessionRecord = Depends(get_session)) -> SessionResponse:
    """Get the current state of a session's components."""
    return _to_response(record)


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a session",
)
async def delete_session(
    record: SessionRecord = Depends(get_session),
    sessions: SessionRegistry = Depends(get_registry),
) -> None:
    """Stop every component of a session and remove it."""
    await sessions.close(record.session_id)
    logger.info("Session deleted", session_id=record.session_id)


@router.patch(
    "/{session_id}/preferences",
    response_model=SessionResponse,
    summary="Update feedback preferences",
)
async def update_preferences(
    request: PreferencesRequest,
    record: SessionRecord = Depends(get_session),
) -> SessionResponse:
    """Toggle voice and haptic feedback for a session."""
    coordinator = record.coordinator
    if request.voice_enabled is not None:
        await coordinator.set_voice_enabled(request.voice_enabled)
    if request.haptics_enabled is not None:
        await coordinator.set_haptics_enabled(request.haptics_enabled)
    return _to_response(record)


@router.get(
    "/{session_id}/feedback",
    summary="Recently delivered feedback",
)
async def recent_feedback(record: SessionRecord = Depends(get_session)) -> dict[str, Any]:
    """Return the speech and vibration messages most recently sent to the client."""
    events = list(record.channel.history)
    return {"events": events, "total": len(events)}
