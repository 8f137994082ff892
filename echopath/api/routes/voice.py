"""
Voice Routes
============

UI triggers for voice commands: the command list, direct dispatch of a
phrase and the simulated listening flow.
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from echopath.api.routes.sessions import get_coordinator
from echopath.coordinator import FeedbackCoordinator

router = APIRouter(prefix="/sessions/{session_id}/voice", tags=["Voice"])


class DispatchRequest(BaseModel):
    """A phrase to execute as a voice command."""

    phrase: str = Field(..., description="Spoken or typed phrase")


def _voice_state(coordinator: FeedbackCoordinator) -> dict[str, Any]:
    voice = coordinator.voice
    return {
        "listening": voice.is_listening,
        "last_command": voice.last_command,
        "recognized_text": voice.recognized_text,
    }


@router.get("/commands", summary="List voice commands")
async def list_commands(
    coordinator: FeedbackCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """All phrases the dispatcher recognizes."""
    commands = [command.to_dict() for command in coordinator.voice.commands]
    return {"commands": commands, "total": len(commands)}


@router.post("/dispatch", summary="Execute a phrase")
async def dispatch_phrase(
    request: DispatchRequest,
    coordinator: FeedbackCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """Match the phrase against the command table and run it."""
    matched = await coordinator.voice.dispatch(request.phrase)
    return {"matched": matched, **_voice_state(coordinator)}


@router.post("/listen", summary="Start listening")
async def start_listening(
    coordinator: FeedbackCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """Open the microphone for one utterance."""
    changed = await coordinator.voice.start_listening()
    return {"changed": changed, **_voice_state(coordinator)}


@router.post("/stop", summary="Stop listening")
async def stop_listening(
    coordinator: FeedbackCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """Close the microphone, dropping a pending recognition."""
    changed = await coordinator.voice.stop_listening()
    return {"changed": changed, **_voice_state(coordinator)}
