"""
Voice Announcement Module
=========================

Provides the announcement gate every feedback component speaks through.

The gate performs last-value de-duplication: an announcement is spoken
only if it differs from the immediately previous spoken announcement.
This keeps a periodic loop from repeating an unchanged sentence every
tick while never suppressing genuinely new information; ``A, B, A`` is
spoken three times, ``A, A`` once.

Speech itself is delivered by an external capability (the mobile
client's text-to-speech engine). Delivery failures are logged and never
propagate into session logic.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from echopath.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SpeechOptions:
    """
    Voice parameters passed along with every utterance.

    Attributes:
        language: Language code (e.g., 'en-US').
        pitch: Pitch of speech (0.5-2.0, 1.0 is normal).
        rate: Speed of speech (1.0 is normal).
    """

    language: str = "en-US"
    pitch: float = 1.0
    rate: float = 0.8


class SpeechOutput(ABC):
    """Fire-and-forget text-to-speech capability."""

    @abstractmethod
    async def speak(self, text: str, options: SpeechOptions) -> None:
        """Speak ``text`` with the given voice options."""


@dataclass
class AnnouncementConfig:
    """
    Configuration for the announcement gate.

    Attributes:
        enabled: Whether announcements are spoken at all.
        options: Voice parameters for the speech capability.
    """

    enabled: bool = True
    options: SpeechOptions = field(default_factory=SpeechOptions)


@dataclass(frozen=True)
class AnnouncementResult:
    """Outcome of a single announce call."""

    spoken: bool
    text: str
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.spoken


class AnnouncementGate:
    """
    De-duplicating gate in front of the speech capability.

    One gate is owned by one coordinator; its ``last_spoken_text`` is the
    only state shared between the detection, navigation and voice
    components of that coordinator.
    """

    def __init__(
        self,
        speech: SpeechOutput,
        config: Optional[AnnouncementConfig] = None,
    ) -> None:
        """
        Initialize the gate.

        Args:
            speech: Capability that actually speaks.
            config: Gate configuration.
        """
        self.speech = speech
        self.config = config or AnnouncementConfig()
        self._last_spoken_text = ""
        self._lock = asyncio.Lock()

    @property
    def last_spoken_text(self) -> str:
        """Text of the most recent spoken announcement, or empty."""
        return self._last_spoken_text

    async def announce(self, text: str) -> AnnouncementResult:
        """
        Speak ``text`` unless it repeats the previous announcement.

        Args:
            text: The sentence to speak.

        Returns:
            AnnouncementResult with ``spoken`` set when speech was requested.
        """
        if not text or not text.strip():
            logger.debug("Rejecting empty announcement")
            return AnnouncementResult(spoken=False, text=text, reason="empty")

        if not self.config.enabled:
            return AnnouncementResult(spoken=False, text=text, reason="disabled")

        async with self._lock:
            if text == self._last_spoken_text:
                logger.debug("Skipping duplicate announcement", text=text[:50])
                return AnnouncementResult(spoken=False, text=text, reason="duplicate")

            self._last_spoken_text = text

            try:
                await self.speech.speak(text, self.config.options)
            except Exception as e:
                logger.error("Speech delivery failed", text=text[:50], error=str(e))

        logger.debug("Announcement delivered", text=text[:50])
        return AnnouncementResult(spoken=True, text=text)

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable spoken feedback."""
        self.config.enabled = enabled
        logger.info("Voice feedback enabled" if enabled else "Voice feedback disabled")
