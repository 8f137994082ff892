"""
Voice Command Dispatcher
========================

Matches recognized phrases against the command table and runs the
matched command's effect through the announcement gate and haptics.

The listening flow opens the microphone, waits the recognition delay,
asks the recognizer for one utterance, dispatches it and closes the
microphone again. Stopping while listening cancels the pending
recognition.
"""

from enum import Enum, auto
from functools import partial
from typing import Optional

from echopath.accessibility.announcer import AnnouncementGate
from echopath.accessibility.haptics import HapticPattern, HapticsController
from echopath.runtime.scheduler import Scheduler, TimerHandle
from echopath.utils.logger import get_logger
from echopath.voice.commands import DEFAULT_COMMANDS, CommandTable, VoiceCommand
from echopath.voice.recognizer import SpeechRecognizer

logger = get_logger(__name__)

NOT_RECOGNIZED_MESSAGE = "Command not recognized. Please try again."
NOT_RECOGNIZED_LABEL = "Command not recognized"
LISTENING_MESSAGE = "Listening for voice commands"
STOPPED_LISTENING_MESSAGE = "Stopped listening"


class ListeningState(Enum):
    """Microphone state."""

    IDLE = auto()
    LISTENING = auto()


class VoiceCommandDispatcher:
    """
    Dispatches voice phrases to command effects.

    Attributes:
        state: Whether the microphone is open.
        last_command: Label of the last dispatch outcome.
        recognized_text: Last phrase returned by the recognizer.
    """

    def __init__(
        self,
        gate: AnnouncementGate,
        haptics: HapticsController,
        scheduler: Scheduler,
        recognizer: SpeechRecognizer,
        commands: Optional[CommandTable] = None,
        recognition_delay_ms: int = 3000,
    ) -> None:
        self.gate = gate
        self.haptics = haptics
        self.scheduler = scheduler
        self.recognizer = recognizer
        self.commands = commands if commands is not None else DEFAULT_COMMANDS
        self.recognition_delay_ms = recognition_delay_ms

        self.state = ListeningState.IDLE
        self.last_command = ""
        self.recognized_text = ""
        self._pending: Optional[TimerHandle] = None
        self._listen_id = 0

    @property
    def is_listening(self) -> bool:
        return self.state is ListeningState.LISTENING

    async def dispatch(self, phrase: str) -> bool:
        """
        Execute the command matching ``phrase``.

        Args:
            phrase: Recognized or typed phrase.

        Returns:
            True if a command matched.
        """
        command = self.commands.match(phrase)
        if command is None:
            logger.info("Voice command not recognized", phrase=phrase)
            self.last_command = NOT_RECOGNIZED_LABEL
            await self.gate.announce(NOT_RECOGNIZED_MESSAGE)
            return False

        logger.info("Voice command matched", command=command.id)
        await self._execute(command)
        return True

    async def _execute(self, command: VoiceCommand) -> None:
        effect = command.effect

        if effect.haptic is not None and effect.haptic_first:
            await self.haptics.vibrate(effect.haptic)

        await self.gate.announce(effect.speech)

        if effect.haptic is not None and not effect.haptic_first:
            await self.haptics.vibrate(effect.haptic)

        self.last_command = effect.label

    async def start_listening(self) -> bool:
        """
        Open the microphone and schedule one recognition.

        Returns:
            False if already listening.
        """
        if self.is_listening:
            return False

        self.state = ListeningState.LISTENING
        self._listen_id += 1
        self._pending = self.scheduler.call_later(
            self.recognition_delay_ms, partial(self._recognize, self._listen_id)
        )
        logger.info("Listening started")

        await self.gate.announce(LISTENING_MESSAGE)
        await self.haptics.vibrate(HapticPattern.LISTEN_START)
        return True

    async def stop_listening(self) -> bool:
        """
        Close the microphone, dropping any pending recognition.

        Returns:
            False if not listening.
        """
        if not self.is_listening:
            return False

        self._cancel_pending()
        self.state = ListeningState.IDLE
        logger.info("Listening stopped")

        await self.gate.announce(STOPPED_LISTENING_MESSAGE)
        await self.haptics.vibrate(HapticPattern.LISTEN_STOP)
        return True

    async def _recognize(self, listen_id: int) -> None:
        if not self._is_current(listen_id):
            return

        phrase = await self.recognizer.recognize()

        # Stopped, or restarted, while the recognizer was running
        if not self._is_current(listen_id):
            return

        self._pending = None
        self.recognized_text = phrase or ""
        logger.info("Utterance recognized", phrase=self.recognized_text)

        try:
            await self.dispatch(self.recognized_text)
        finally:
            self.state = ListeningState.IDLE

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _is_current(self, listen_id: int) -> bool:
        return self.is_listening and listen_id == self._listen_id
