"""
Speech Recognition
==================

The "recognize one utterance" capability used by the listening flow.

``SimulatedRecognizer`` stands in for real speech-to-text by picking a
phrase from the command table uniformly at random. A real recognizer
only needs to implement ``recognize``; dispatch logic is unaffected.
"""

import random
from abc import ABC, abstractmethod
from typing import Optional

from echopath.voice.commands import CommandTable


class SpeechRecognizer(ABC):
    """Captures and transcribes a single utterance."""

    @abstractmethod
    async def recognize(self) -> Optional[str]:
        """
        Recognize one utterance.

        Returns:
            The transcribed phrase, or None if nothing was understood.
        """


class SimulatedRecognizer(SpeechRecognizer):
    """Returns a random known phrase."""

    def __init__(self, commands: CommandTable, rng: Optional[random.Random] = None) -> None:
        self.commands = commands
        self.rng = rng or random.Random()

    async def recognize(self) -> Optional[str]:
        phrases = self.commands.phrases
        if not phrases:
            return None
        return self.rng.choice(phrases)
