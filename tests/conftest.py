"""
Shared Test Fixtures
====================

Pytest fixtures used across all test modules.

Timers run on ``ManualScheduler``, a virtual clock advanced explicitly
by tests, so every delay and tick fires deterministically.
"""

import heapq
import itertools
import random
from typing import Any, Optional

import pytest

from echopath.accessibility.announcer import AnnouncementGate, SpeechOptions, SpeechOutput
from echopath.accessibility.haptics import HapticsController, VibrationOutput
from echopath.config import FeedbackTimings
from echopath.coordinator import FeedbackCoordinator
from echopath.detection.source import DetectionSource
from echopath.models import CameraFacing, DetectedObject, ObjectCategory, Proximity
from echopath.runtime.scheduler import Callback, Scheduler, TimerHandle
from echopath.voice.recognizer import SpeechRecognizer


# ---------------------------------------------------------------------------
# Virtual-time scheduler
# ---------------------------------------------------------------------------


class ManualHandle(TimerHandle):
    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """Scheduler whose clock only moves when a test calls advance()."""

    def __init__(self) -> None:
        self._now = 0.0
        self._queue: list[tuple[float, int, Callback, ManualHandle, Optional[float]]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def _push(self, due: float, callback: Callback, handle: ManualHandle, interval: Optional[float]) -> None:
        heapq.heappush(self._queue, (due, next(self._seq), callback, handle, interval))

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        handle = ManualHandle()
        self._push(self._now + delay_ms, callback, handle, None)
        return handle

    def call_every(self, interval_ms: float, callback: Callback) -> TimerHandle:
        handle = ManualHandle()
        self._push(self._now + interval_ms, callback, handle, interval_ms)
        return handle

    async def advance(self, ms: float) -> None:
        """Move the clock forward, running every callback that comes due."""
        target = self._now + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, callback, handle, interval = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = due
            if interval is not None:
                self._push(due + interval, callback, handle, interval)
            await callback()
        self._now = target

    @property
    def pending(self) -> int:
        """Number of scheduled callbacks that can still fire."""
        return sum(1 for entry in self._queue if not entry[3].cancelled)


# ---------------------------------------------------------------------------
# Recording capabilities
# ---------------------------------------------------------------------------


class RecordingSpeech(SpeechOutput):
    def __init__(self, events: list) -> None:
        self.events = events
        self.spoken: list[str] = []
        self.options: list[SpeechOptions] = []

    async def speak(self, text: str, options: SpeechOptions) -> None:
        self.spoken.append(text)
        self.options.append(options)
        self.events.append(("speak", text))


class RecordingVibration(VibrationOutput):
    def __init__(self, events: list) -> None:
        self.events = events
        self.patterns: list[list[int]] = []

    async def vibrate(self, pattern: list[int]) -> None:
        self.patterns.append(list(pattern))
        self.events.append(("vibrate", list(pattern)))


class ScriptedDetectionSource(DetectionSource):
    """Returns queued results in order, then nothing."""

    def __init__(self, results: Optional[list[Optional[DetectedObject]]] = None) -> None:
        self.results = list(results or [])
        self.calls = 0
        self.facings: list[CameraFacing] = []

    async def detect(self, facing: CameraFacing = CameraFacing.BACK) -> Optional[DetectedObject]:
        self.calls += 1
        self.facings.append(facing)
        if self.results:
            return self.results.pop(0)
        return None


class FixedRecognizer(SpeechRecognizer):
    def __init__(self, phrase: Optional[str]) -> None:
        self.phrase = phrase
        self.calls = 0

    async def recognize(self) -> Optional[str]:
        self.calls += 1
        return self.phrase


def make_object(
    category: ObjectCategory = ObjectCategory.DOOR,
    proximity: Proximity = Proximity.NEAR,
    confidence: float = 0.9,
    object_id: str = "obj-1",
) -> DetectedObject:
    """Helper to create a DetectedObject."""
    return DetectedObject(
        id=object_id,
        category=category,
        confidence=confidence,
        screen_position=(100.0, 200.0),
        proximity=proximity,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def events() -> list[tuple[str, Any]]:
    """Speech and vibration in delivery order."""
    return []


@pytest.fixture
def speech(events) -> RecordingSpeech:
    return RecordingSpeech(events)


@pytest.fixture
def vibration(events) -> RecordingVibration:
    return RecordingVibration(events)


@pytest.fixture
def gate(speech) -> AnnouncementGate:
    return AnnouncementGate(speech)


@pytest.fixture
def haptics(vibration) -> HapticsController:
    return HapticsController(vibration)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def timings() -> FeedbackTimings:
    return FeedbackTimings()


@pytest.fixture
def coordinator(speech, vibration, scheduler, rng) -> FeedbackCoordinator:
    return FeedbackCoordinator(
        speech,
        vibration,
        scheduler,
        detection_source=ScriptedDetectionSource(),
        recognizer=FixedRecognizer("Read signs"),
        rng=rng,
    )
