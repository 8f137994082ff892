"""
Navigation Routes
=================

UI triggers for the indoor navigation session.
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator

from echopath.api.routes.sessions import get_coordinator
from echopath.coordinator import FeedbackCoordinator
from echopath.navigation.route import QUICK_DESTINATIONS, find_destination

router = APIRouter(prefix="/sessions/{session_id}/navigation", tags=["Navigation"])


class StartNavigationRequest(BaseModel):
    """Request to start navigating."""

    destination: str = Field(
        ...,
        min_length=1,
        description="Destination label, or the id of a quick destination",
    )

    @field_validator("destination")
    @classmethod
    def strip_destination(cls, v: str) -> str:
        """Reject blank labels and trim surrounding whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("destination must not be blank")
        return v


@router.get("", summary="Navigation progress")
async def navigation_progress(
    coordinator: FeedbackCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """Current step, destination and step count."""
    return coordinator.navigation.to_dict()


@router.get("/destinations", summary="Quick destinations")
async def quick_destinations(
    coordinator: FeedbackCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """One-tap destinations offered to the user."""
    return {"destinations": [{"id": d.id, "name": d.name} for d in QUICK_DESTINATIONS]}


@router.post("/start", summary="Start navigation")
async def start_navigation(
    request: StartNavigationRequest,
    coordinator: FeedbackCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """Start navigating; quick destination ids resolve to their names."""
    quick = find_destination(request.destination)
    label = quick.name if quick else request.destination
    await coordinator.navigation.start(label)
    return coordinator.navigation.to_dict()


@router.post("/advance", summary="Next step")
async def advance_navigation(
    coordinator: FeedbackCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """Move to the next step, or arrive on the last one."""
    outcome = await coordinator.navigation.advance()
    return {"outcome": outcome.value, **coordinator.navigation.to_dict()}


@router.post("/repeat", summary="Repeat current instruction")
async def repeat_instruction(
    coordinator: FeedbackCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """Speak the current instruction again."""
    result = await coordinator.navigation.repeat()
    return {"spoken": result.spoken, "text": result.text}


@router.post("/stop", summary="Stop navigation")
async def stop_navigation(
    coordinator: FeedbackCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """Stop navigating and cancel pending guidance."""
    changed = await coordinator.navigation.stop()
    return {"changed": changed, **coordinator.navigation.to_dict()}
