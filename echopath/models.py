"""
Feedback Data Model
===================

Enumerations and value types shared by the feedback components.

The proximity and direction enums double as haptic kinds: the haptic
encoder maps each member to a fixed vibration waveform.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ObjectCategory(Enum):
    """Object classes the detector can report."""

    DOOR = "door"
    STAIRS = "stairs"
    OBSTACLE = "obstacle"
    PERSON = "person"
    SIGN = "sign"


class Proximity(Enum):
    """Coarse distance bucket for a detected object."""

    NEAR = "near"
    MEDIUM = "medium"
    FAR = "far"

    @property
    def spoken(self) -> str:
        """How the proximity is phrased in an announcement."""
        if self is Proximity.NEAR:
            return "very close"
        return self.value


class Direction(Enum):
    """Movement direction of a navigation step."""

    STRAIGHT = "straight"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


class CommandCategory(Enum):
    """Voice command groups."""

    NAVIGATION = "navigation"
    DETECTION = "detection"
    SETTINGS = "settings"
    EMERGENCY = "emergency"


class CameraFacing(Enum):
    """Which camera the detector samples."""

    BACK = "back"
    FRONT = "front"

    @property
    def flipped(self) -> "CameraFacing":
        return CameraFacing.FRONT if self is CameraFacing.BACK else CameraFacing.BACK


@dataclass(frozen=True)
class DetectedObject:
    """
    A single object sighting produced by one detection tick.

    Attributes:
        id: Opaque token unique to this sighting.
        category: What was seen.
        confidence: Detector confidence in [0, 1].
        screen_position: (x, y) in frame points.
        proximity: Coarse distance bucket.
    """

    id: str
    category: ObjectCategory
    confidence: float
    screen_position: tuple[float, float]
    proximity: Proximity

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence out of range: {self.confidence}")

    @property
    def announcement(self) -> str:
        """Sentence announcing this sighting."""
        return f"{self.category.value} detected {self.proximity.spoken} ahead"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "category": self.category.value,
            "confidence": round(self.confidence, 3),
            "screen_position": {"x": self.screen_position[0], "y": self.screen_position[1]},
            "proximity": self.proximity.value,
        }


@dataclass(frozen=True)
class NavigationStep:
    """
    One step of a route.

    Attributes:
        ordinal: Position of the step in its route.
        instruction: What the user should do.
        distance_meters: Length of the step.
        direction: Movement direction, encoded as a haptic pattern.
        landmark: Optional landmark spoken after the instruction.
        warning: Optional hazard spoken after the instruction.
    """

    ordinal: int
    instruction: str
    distance_meters: float
    direction: Direction
    landmark: Optional[str] = None
    warning: Optional[str] = None

    def __post_init__(self) -> None:
        if self.distance_meters < 0:
            raise ValueError(f"distance_meters must be non-negative: {self.distance_meters}")

    @property
    def distance_text(self) -> str:
        """Distance as spoken, without a trailing '.0' for whole meters."""
        if float(self.distance_meters).is_integer():
            return str(int(self.distance_meters))
        return str(self.distance_meters)

    @property
    def announcement(self) -> str:
        """Instruction and distance sentence."""
        return f"{self.instruction}. Distance: {self.distance_text} meters."

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "ordinal": self.ordinal,
            "instruction": self.instruction,
            "distance_meters": self.distance_meters,
            "direction": self.direction.value,
            "landmark": self.landmark,
            "warning": self.warning,
        }
