"""
Detection Sources
=================

The detector capability sampled once per detection tick.

``RandomDetectionSource`` stands in for an on-device vision model: each
sample sees at most one object, with a uniformly random category,
proximity and screen position. Its entropy comes from an injected
``random.Random`` so runs can be made reproducible.
"""

import random
from abc import ABC, abstractmethod
from typing import Optional

from echopath.models import CameraFacing, DetectedObject, ObjectCategory, Proximity


class DetectionSource(ABC):
    """Produces zero or one detection per call."""

    @abstractmethod
    async def detect(self, facing: CameraFacing = CameraFacing.BACK) -> Optional[DetectedObject]:
        """
        Sample the current camera frame.

        Args:
            facing: Which camera the frame comes from.

        Returns:
            The object seen in this frame, or None.
        """


class RandomDetectionSource(DetectionSource):
    """Randomized stand-in for a real object detector."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        probability: float = 0.7,
        min_confidence: float = 0.7,
        frame_size: tuple[float, float] = (390.0, 844.0),
    ) -> None:
        """
        Initialize the source.

        Args:
            rng: Entropy source; a fresh unseeded one by default.
            probability: Chance that a sample sees an object.
            min_confidence: Lower bound of the confidence range [min, 1).
            frame_size: (width, height) for random screen positions.
        """
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f"probability must be within [0, 1]: {probability}")
        if not 0.0 <= min_confidence < 1.0:
            raise ValueError(f"min_confidence must be within [0, 1): {min_confidence}")

        self.rng = rng or random.Random()
        self.probability = probability
        self.min_confidence = min_confidence
        self.frame_size = frame_size

    async def detect(self, facing: CameraFacing = CameraFacing.BACK) -> Optional[DetectedObject]:
        if self.rng.random() >= self.probability:
            return None

        width, height = self.frame_size
        return DetectedObject(
            id=f"{self.rng.getrandbits(64):016x}",
            category=self.rng.choice(list(ObjectCategory)),
            confidence=self.min_confidence + self.rng.random() * (1.0 - self.min_confidence),
            screen_position=(self.rng.random() * width, self.rng.random() * height),
            proximity=self.rng.choice(list(Proximity)),
        )
