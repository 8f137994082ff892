"""
Accessibility Module
====================

Feedback channels for blind and low-vision users:
    - announcer: De-duplicating announcement gate and speech capability
    - haptics: Haptic pattern encoder and vibration capability

Every user-facing sentence and vibration passes through these two
modules.
"""

from echopath.accessibility.announcer import (
    AnnouncementConfig,
    AnnouncementGate,
    AnnouncementResult,
    SpeechOptions,
    SpeechOutput,
)
from echopath.accessibility.haptics import (
    HapticPattern,
    HapticsConfig,
    HapticsController,
    VibrationOutput,
    encode,
)

__all__ = [
    "AnnouncementConfig",
    "AnnouncementGate",
    "AnnouncementResult",
    "SpeechOptions",
    "SpeechOutput",
    "HapticPattern",
    "HapticsConfig",
    "HapticsController",
    "VibrationOutput",
    "encode",
]
