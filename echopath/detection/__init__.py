"""
Detection Module
================

Periodic object detection with spoken and haptic feedback:
    - source: Detector capability and its randomized stand-in
    - session: Start/stop detection loop, describe and camera flip
"""

from echopath.detection.session import DetectionSession, DetectionState
from echopath.detection.source import DetectionSource, RandomDetectionSource

__all__ = [
    "DetectionSession",
    "DetectionState",
    "DetectionSource",
    "RandomDetectionSource",
]
