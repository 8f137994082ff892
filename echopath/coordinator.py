"""
Feedback Coordinator
====================

One coordinator per user: it owns a single announcement gate and haptics
controller and builds the detection, navigation and voice components on
top of them, so de-duplication spans all three components of that user
and never crosses users.
"""

import random
from typing import Any, Optional

from echopath.accessibility.announcer import (
    AnnouncementConfig,
    AnnouncementGate,
    SpeechOptions,
    SpeechOutput,
)
from echopath.accessibility.haptics import HapticsConfig, HapticsController, VibrationOutput
from echopath.config import FeedbackTimings, Settings
from echopath.detection.session import DetectionSession
from echopath.detection.source import DetectionSource, RandomDetectionSource
from echopath.navigation.route import Route
from echopath.navigation.session import DEFAULT_STRIDE_FACTOR, NavigationSession
from echopath.runtime.scheduler import Scheduler
from echopath.utils.logger import get_logger
from echopath.voice.commands import DEFAULT_COMMANDS, CommandTable
from echopath.voice.dispatcher import VoiceCommandDispatcher
from echopath.voice.recognizer import SimulatedRecognizer, SpeechRecognizer

logger = get_logger(__name__)


class FeedbackCoordinator:
    """
    Multi-modal feedback coordinator.

    Attributes:
        gate: Shared announcement gate.
        haptics: Shared haptics controller.
        detection: Object detection session.
        navigation: Indoor navigation session.
        voice: Voice command dispatcher.
    """

    def __init__(
        self,
        speech: SpeechOutput,
        vibration: VibrationOutput,
        scheduler: Scheduler,
        timings: Optional[FeedbackTimings] = None,
        detection_source: Optional[DetectionSource] = None,
        recognizer: Optional[SpeechRecognizer] = None,
        route: Optional[Route] = None,
        commands: Optional[CommandTable] = None,
        speech_options: Optional[SpeechOptions] = None,
        voice_enabled: bool = True,
        haptics_enabled: bool = True,
        stride_factor: float = DEFAULT_STRIDE_FACTOR,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Wire the feedback components.

        Args:
            speech: Text-to-speech capability.
            vibration: Vibration capability.
            scheduler: Timer capability.
            timings: Delays and intervals; defaults to the reference timings.
            detection_source: Detector; a random stand-in by default.
            recognizer: Speech recognizer; a random stand-in by default.
            route: Navigation route; the default corridor route if omitted.
            commands: Voice command table; the default table if omitted.
            speech_options: Voice parameters for every utterance.
            voice_enabled: Initial voice feedback preference.
            haptics_enabled: Initial haptic feedback preference.
            stride_factor: Footsteps per meter for step counting.
            rng: Entropy shared by the random stand-ins.
        """
        self.timings = timings or FeedbackTimings()
        rng = rng or random.Random()

        self.gate = AnnouncementGate(
            speech,
            AnnouncementConfig(
                enabled=voice_enabled,
                options=speech_options or SpeechOptions(),
            ),
        )
        self.haptics = HapticsController(vibration, HapticsConfig(enabled=haptics_enabled))

        self.detection = DetectionSession(
            self.gate,
            self.haptics,
            scheduler,
            detection_source or RandomDetectionSource(rng=rng),
            interval_ms=self.timings.detection_interval_ms,
        )
        self.navigation = NavigationSession(
            self.gate,
            self.haptics,
            scheduler,
            route=route,
            timings=self.timings,
            stride_factor=stride_factor,
        )
        if commands is None:
            commands = DEFAULT_COMMANDS
        self.voice = VoiceCommandDispatcher(
            self.gate,
            self.haptics,
            scheduler,
            recognizer=recognizer or SimulatedRecognizer(commands, rng=rng),
            commands=commands,
            recognition_delay_ms=self.timings.recognition_delay_ms,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        speech: SpeechOutput,
        vibration: VibrationOutput,
        scheduler: Scheduler,
        rng: Optional[random.Random] = None,
    ) -> "FeedbackCoordinator":
        """Build a coordinator configured from application settings."""
        rng = rng or random.Random()
        detection = settings.detection
        return cls(
            speech,
            vibration,
            scheduler,
            timings=FeedbackTimings.from_settings(settings),
            detection_source=RandomDetectionSource(
                rng=rng,
                probability=detection.detection_probability,
                min_confidence=detection.detection_min_confidence,
                frame_size=(detection.detection_frame_width, detection.detection_frame_height),
            ),
            speech_options=SpeechOptions(
                language=settings.speech.speech_language,
                pitch=settings.speech.speech_pitch,
                rate=settings.speech.speech_rate,
            ),
            voice_enabled=settings.speech.voice_feedback_enabled,
            haptics_enabled=settings.haptics.haptic_feedback_enabled,
            stride_factor=settings.navigation.navigation_stride_factor,
            rng=rng,
        )

    async def set_voice_enabled(self, enabled: bool) -> None:
        """Toggle spoken feedback, announcing the change while voice is on."""
        if enabled == self.gate.config.enabled:
            return
        if enabled:
            self.gate.set_enabled(True)
            await self.gate.announce("Voice feedback enabled")
        else:
            await self.gate.announce("Voice feedback disabled")
            self.gate.set_enabled(False)

    async def set_haptics_enabled(self, enabled: bool) -> None:
        """Toggle haptic feedback and announce the change."""
        if enabled == self.haptics.config.enabled:
            return
        self.haptics.set_enabled(enabled)
        await self.gate.announce(f"Haptic feedback {'enabled' if enabled else 'disabled'}")

    async def close(self) -> None:
        """Stop every component so no timer outlives the coordinator."""
        await self.detection.stop()
        await self.navigation.stop()
        await self.voice.stop_listening()
        logger.info("Coordinator closed")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "detection": self.detection.to_dict(),
            "navigation": self.navigation.to_dict(),
            "voice": {
                "listening": self.voice.is_listening,
                "last_command": self.voice.last_command,
                "recognized_text": self.voice.recognized_text,
            },
            "preferences": {
                "voice_enabled": self.gate.config.enabled,
                "haptics_enabled": self.haptics.config.enabled,
            },
            "last_spoken_text": self.gate.last_spoken_text,
        }
