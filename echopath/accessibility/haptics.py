"""
Haptic Feedback Module
======================

Provides haptic (vibration) feedback for detection, navigation and
voice events.

Haptic feedback lets blind users follow guidance without looking at
the screen. Pulse count and speed encode urgency and direction, since
vibration amplitude is not controllable on most devices.

Patterns are Android-style duration lists: alternating on/off
milliseconds, starting with "on". Direction patterns are mirrored in
pairs (left/right, up/down); the mirror symmetry is how the turn side is
told apart by touch alone.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union

from echopath.errors import UnknownHapticKindError
from echopath.models import Direction, Proximity
from echopath.utils.logger import get_logger

logger = get_logger(__name__)


class HapticPattern(Enum):
    """
    Fixed-meaning signals not tied to proximity or direction.

    - ARRIVAL: Destination reached
    - NAVIGATION_STOPPED: Navigation cancelled by the user
    - CAMERA_FLIP: Camera switched
    - LISTEN_START: Microphone opened
    - LISTEN_STOP: Microphone closed
    - COMMAND_LEFT: Voice command "turn left" confirmation
    - COMMAND_RIGHT: Voice command "turn right" confirmation
    - EMERGENCY: Emergency mode activated
    """

    ARRIVAL = auto()
    NAVIGATION_STOPPED = auto()
    CAMERA_FLIP = auto()
    LISTEN_START = auto()
    LISTEN_STOP = auto()
    COMMAND_LEFT = auto()
    COMMAND_RIGHT = auto()
    EMERGENCY = auto()


HapticKind = Union[Proximity, Direction, HapticPattern]


# Urgency: more and faster pulses the closer the object
PROXIMITY_PATTERNS: dict[Proximity, tuple[int, ...]] = {
    Proximity.NEAR: (100, 50, 100, 50, 100),
    Proximity.MEDIUM: (200, 100, 200),
    Proximity.FAR: (300,),
}

DIRECTION_PATTERNS: dict[Direction, tuple[int, ...]] = {
    Direction.LEFT: (100, 100, 100, 100, 300),  # short-short-short-LONG
    Direction.RIGHT: (300, 100, 100, 100, 100),  # LONG-short-short-short
    Direction.STRAIGHT: (200, 100, 200),
    Direction.UP: (100, 50, 100, 50, 100, 50, 300),  # ascending
    Direction.DOWN: (300, 50, 100, 50, 100, 50, 100),  # descending
}

SIGNAL_PATTERNS: dict[HapticPattern, tuple[int, ...]] = {
    HapticPattern.ARRIVAL: (100, 100, 100, 100, 100),
    HapticPattern.NAVIGATION_STOPPED: (200,),
    HapticPattern.CAMERA_FLIP: (100,),
    HapticPattern.LISTEN_START: (50,),
    HapticPattern.LISTEN_STOP: (100,),
    HapticPattern.COMMAND_LEFT: (100, 50, 100),
    HapticPattern.COMMAND_RIGHT: (100, 50, 100, 50, 100),
    HapticPattern.EMERGENCY: (200, 100, 200, 100, 200),
}


def encode(kind: HapticKind) -> list[int]:
    """
    Map a haptic kind to its vibration waveform.

    Args:
        kind: A proximity, direction or fixed signal.

    Returns:
        A fresh list of alternating on/off durations in milliseconds.

    Raises:
        UnknownHapticKindError: If ``kind`` is outside the closed kind set.
    """
    if isinstance(kind, Proximity):
        return list(PROXIMITY_PATTERNS[kind])
    if isinstance(kind, Direction):
        return list(DIRECTION_PATTERNS[kind])
    if isinstance(kind, HapticPattern):
        return list(SIGNAL_PATTERNS[kind])
    raise UnknownHapticKindError(kind)


class VibrationOutput(ABC):
    """Fire-and-forget vibration motor capability."""

    @abstractmethod
    async def vibrate(self, pattern: list[int]) -> None:
        """Play an on/off duration pattern."""


@dataclass
class HapticsConfig:
    """
    Configuration for haptic feedback.

    Attributes:
        enabled: Whether haptics are enabled.
    """

    enabled: bool = True


class HapticsController:
    """
    Controller for haptic feedback.

    Encodes semantic events and forwards the waveform to the vibration
    capability.
    """

    def __init__(
        self,
        output: VibrationOutput,
        config: Optional[HapticsConfig] = None,
    ) -> None:
        """
        Initialize haptics controller.

        Args:
            output: Capability driving the vibration motor.
            config: Haptics configuration.
        """
        self.output = output
        self.config = config or HapticsConfig()

        logger.info("HapticsController initialized", enabled=self.config.enabled)

    async def vibrate(self, kind: HapticKind) -> bool:
        """
        Play the pattern for a haptic kind.

        Args:
            kind: The event to encode.

        Returns:
            True if the pattern was handed to the vibration capability.
        """
        pattern = encode(kind)

        if not self.config.enabled:
            return False

        try:
            await self.output.vibrate(pattern)
        except Exception as e:
            logger.error("Failed to play haptic pattern", kind=kind.name, error=str(e))
            return False

        logger.debug("Haptic pattern played", kind=kind.name, pattern=pattern)
        return True

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable haptic feedback."""
        self.config.enabled = enabled
        logger.info("Haptics enabled" if enabled else "Haptics disabled")
