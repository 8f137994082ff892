"""
Detection Session
=================

Runs the periodic detection loop and turns each sighting into speech
and vibration.

State machine: ``STOPPED -> RUNNING -> STOPPED``. While running, one tick
fires per interval; each tick replaces the current detection list with
the tick's result (zero or one object). Detections never accumulate.

Stopping cancels the loop handle before returning, so no tick fires
after ``stop()`` completes. A tick whose sample was in flight when the
session stopped discards its result.
"""

from enum import Enum, auto
from functools import partial
from typing import Optional

from echopath.accessibility.announcer import AnnouncementGate, AnnouncementResult
from echopath.accessibility.haptics import HapticPattern, HapticsController
from echopath.detection.source import DetectionSource
from echopath.models import CameraFacing, DetectedObject
from echopath.runtime.scheduler import Scheduler, TimerHandle
from echopath.utils.logger import get_logger

logger = get_logger(__name__)

STARTED_MESSAGE = "Object detection started"
STOPPED_MESSAGE = "Object detection stopped"
NOTHING_DETECTED_MESSAGE = "No objects currently detected"


class DetectionState(Enum):
    """Lifecycle of a detection session."""

    STOPPED = auto()
    RUNNING = auto()


class DetectionSession:
    """
    Periodic simulated object detection.

    Attributes:
        state: Current lifecycle state.
        facing: Camera the detector samples.
        tick_count: Ticks processed since the last start.
    """

    def __init__(
        self,
        gate: AnnouncementGate,
        haptics: HapticsController,
        scheduler: Scheduler,
        source: DetectionSource,
        interval_ms: int = 2000,
    ) -> None:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive: {interval_ms}")

        self.gate = gate
        self.haptics = haptics
        self.scheduler = scheduler
        self.source = source
        self.interval_ms = interval_ms

        self.state = DetectionState.STOPPED
        self.facing = CameraFacing.BACK
        self.tick_count = 0
        self._detections: list[DetectedObject] = []
        self._loop: Optional[TimerHandle] = None
        self._run_id = 0

    @property
    def is_running(self) -> bool:
        return self.state is DetectionState.RUNNING

    @property
    def detections(self) -> tuple[DetectedObject, ...]:
        """Snapshot of the current tick's detections."""
        return tuple(self._detections)

    async def start(self) -> bool:
        """
        Start the detection loop.

        Returns:
            False if the session was already running.
        """
        if self.is_running:
            logger.debug("Detection already running")
            return False

        self.state = DetectionState.RUNNING
        self.tick_count = 0
        self._run_id += 1
        self._loop = self.scheduler.call_every(self.interval_ms, partial(self._tick, self._run_id))
        logger.info("Detection started", interval_ms=self.interval_ms, facing=self.facing.value)

        await self.gate.announce(STARTED_MESSAGE)
        return True

    async def stop(self) -> bool:
        """
        Stop the detection loop and clear current detections.

        Returns:
            False if the session was already stopped.
        """
        if not self.is_running:
            return False

        self.state = DetectionState.STOPPED
        if self._loop is not None:
            self._loop.cancel()
            self._loop = None
        self._detections = []
        logger.info("Detection stopped", ticks=self.tick_count)

        await self.gate.announce(STOPPED_MESSAGE)
        return True

    async def tick(self) -> Optional[DetectedObject]:
        """
        Run one sampling step.

        Returns:
            The object seen this tick, or None.
        """
        return await self._tick(self._run_id)

    async def _tick(self, run_id: int) -> Optional[DetectedObject]:
        if not self._is_current(run_id):
            return None

        detected = await self.source.detect(self.facing)

        # Stopped, or restarted, while the sample was in flight
        if not self._is_current(run_id):
            return None

        self.tick_count += 1
        self._detections = [detected] if detected is not None else []

        if detected is None:
            return None

        logger.debug(
            "Object detected",
            category=detected.category.value,
            proximity=detected.proximity.value,
            confidence=round(detected.confidence, 2),
        )
        await self.gate.announce(detected.announcement)
        await self.haptics.vibrate(detected.proximity)
        return detected

    def _is_current(self, run_id: int) -> bool:
        return self.is_running and run_id == self._run_id

    async def describe(self) -> AnnouncementResult:
        """Announce the current detection snapshot without sampling."""
        count = len(self._detections)
        if count:
            return await self.gate.announce(f"Currently detecting {count} objects in view")
        return await self.gate.announce(NOTHING_DETECTED_MESSAGE)

    async def flip_camera(self) -> CameraFacing:
        """Switch between the back and front camera."""
        self.facing = self.facing.flipped
        logger.info("Camera flipped", facing=self.facing.value)

        await self.gate.announce(f"Switched to {self.facing.value} camera")
        await self.haptics.vibrate(HapticPattern.CAMERA_FLIP)
        return self.facing

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "state": self.state.name,
            "facing": self.facing.value,
            "tick_count": self.tick_count,
            "detections": [d.to_dict() for d in self._detections],
        }
