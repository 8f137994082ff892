"""
Voice Commands
==============

The static table of recognizable phrases and what each one does.

A command's effect is data: the sentence to speak, an optional haptic
signal, and the label recorded as the last executed command. Phrases
are matched case-insensitively and must be unique in that sense.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

from echopath.accessibility.haptics import HapticPattern
from echopath.errors import DuplicateCommandError
from echopath.models import CommandCategory


@dataclass(frozen=True)
class CommandEffect:
    """
    What a matched command produces.

    Attributes:
        speech: Sentence announced through the gate.
        label: Recorded as the dispatcher's last command.
        haptic: Optional vibration signal.
        haptic_first: Vibrate before speaking instead of after.
    """

    speech: str
    label: str
    haptic: Optional[HapticPattern] = None
    haptic_first: bool = False


@dataclass(frozen=True)
class VoiceCommand:
    """A recognizable phrase bound to an effect."""

    id: str
    phrase: str
    description: str
    category: CommandCategory
    effect: CommandEffect

    @property
    def key(self) -> str:
        """Case-insensitive match key."""
        return normalize_phrase(self.phrase)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "phrase": self.phrase,
            "description": self.description,
            "category": self.category.value,
        }


def normalize_phrase(phrase: str) -> str:
    return phrase.strip().casefold()


class CommandTable:
    """Immutable, ordered command lookup."""

    def __init__(self, commands: Iterable[VoiceCommand]) -> None:
        """
        Build the table.

        Raises:
            DuplicateCommandError: If two phrases match case-insensitively.
        """
        self._commands = tuple(commands)
        self._by_key: dict[str, VoiceCommand] = {}
        for command in self._commands:
            if command.key in self._by_key:
                raise DuplicateCommandError(command.phrase)
            self._by_key[command.key] = command

    def match(self, phrase: str) -> Optional[VoiceCommand]:
        """Find the command for a recognized phrase, if any."""
        return self._by_key.get(normalize_phrase(phrase))

    @property
    def phrases(self) -> list[str]:
        return [command.phrase for command in self._commands]

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[VoiceCommand]:
        return iter(self._commands)


DEFAULT_COMMANDS = CommandTable(
    [
        VoiceCommand(
            id="start-detection",
            phrase="Start detection",
            description="Begin object detection",
            category=CommandCategory.DETECTION,
            effect=CommandEffect(
                speech="Starting object detection",
                label="Object detection started",
            ),
        ),
        VoiceCommand(
            id="stop-detection",
            phrase="Stop detection",
            description="Stop object detection",
            category=CommandCategory.DETECTION,
            effect=CommandEffect(
                speech="Stopping object detection",
                label="Object detection stopped",
            ),
        ),
        VoiceCommand(
            id="navigate-forward",
            phrase="Navigate forward",
            description="Get directions ahead",
            category=CommandCategory.NAVIGATION,
            effect=CommandEffect(
                speech="Path is clear ahead. Continue straight.",
                label="Navigation: Continue straight",
            ),
        ),
        VoiceCommand(
            id="navigate-left",
            phrase="Turn left",
            description="Navigate left",
            category=CommandCategory.NAVIGATION,
            effect=CommandEffect(
                speech="Turn left. Door detected on your left in 3 meters.",
                label="Navigation: Turn left",
                haptic=HapticPattern.COMMAND_LEFT,
            ),
        ),
        VoiceCommand(
            id="navigate-right",
            phrase="Turn right",
            description="Navigate right",
            category=CommandCategory.NAVIGATION,
            effect=CommandEffect(
                speech="Turn right. Stairs detected ahead on your right.",
                label="Navigation: Turn right",
                haptic=HapticPattern.COMMAND_RIGHT,
            ),
        ),
        VoiceCommand(
            id="describe-environment",
            phrase="Describe environment",
            description="Get environment description",
            category=CommandCategory.DETECTION,
            effect=CommandEffect(
                speech=(
                    "You are in a corridor. Door on the left, exit sign ahead, "
                    "person walking towards you."
                ),
                label="Environment described",
            ),
        ),
        VoiceCommand(
            id="read-signs",
            phrase="Read signs",
            description="Read nearby text and signs",
            category=CommandCategory.DETECTION,
            effect=CommandEffect(
                speech="Exit sign detected. Text reads: Emergency Exit, Keep Clear.",
                label="Signs read aloud",
            ),
        ),
        VoiceCommand(
            id="emergency-help",
            phrase="Emergency help",
            description="Activate emergency assistance",
            category=CommandCategory.EMERGENCY,
            effect=CommandEffect(
                speech="Emergency mode activated. Stay calm. Vibration alerts enabled.",
                label="Emergency mode activated",
                haptic=HapticPattern.EMERGENCY,
                haptic_first=True,
            ),
        ),
        VoiceCommand(
            id="increase-volume",
            phrase="Increase volume",
            description="Make voice louder",
            category=CommandCategory.SETTINGS,
            effect=CommandEffect(
                speech="Voice volume increased",
                label="Volume increased",
            ),
        ),
        VoiceCommand(
            id="decrease-volume",
            phrase="Decrease volume",
            description="Make voice quieter",
            category=CommandCategory.SETTINGS,
            effect=CommandEffect(
                speech="Voice volume decreased",
                label="Volume decreased",
            ),
        ),
    ]
)
