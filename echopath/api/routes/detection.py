"""
Detection Routes
================

UI triggers for the object detection session.
"""

from typing import Any

from fastapi import APIRouter, Depends

from echopath.api.routes.sessions import get_coordinator
from echopath.coordinator import FeedbackCoordinator

router = APIRouter(prefix="/sessions/{session_id}/detection", tags=["Detection"])


@router.get("", summary="Detection state")
async def detection_state(
    coordinator: FeedbackCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """Current lifecycle state and the latest detections."""
    return coordinator.detection.to_dict()


@router.post("/start", summary="Start object detection")
async def start_detection(
    coordinator: FeedbackCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """Start the periodic detection loop; a no-op when already running."""
    changed = await coordinator.detection.start()
    return {"changed": changed, **coordinator.detection.to_dict()}


@router.post("/stop", summary="Stop object detection")
async def stop_detection(
    coordinator: FeedbackCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """Stop the detection loop; a no-op when already stopped."""
    changed = await coordinator.detection.stop()
    return {"changed": changed, **coordinator.detection.to_dict()}


@router.post("/describe", summary="Describe current view")
async def describe_view(
    coordinator: FeedbackCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """Announce what the latest tick saw, without sampling again."""
    result = await coordinator.detection.describe()
    return {"spoken": result.spoken, "text": result.text}


@router.post("/flip", summary="Switch camera")
async def flip_camera(
    coordinator: FeedbackCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """Toggle between the back and front camera."""
    facing = await coordinator.detection.flip_camera()
    return {"facing": facing.value}
