"""
Voice Module
============

Voice command handling:
    - commands: Static command table and command effects
    - recognizer: Speech recognition capability and its simulated stand-in
    - dispatcher: Phrase matching and the listening flow
"""

from echopath.voice.commands import (
    DEFAULT_COMMANDS,
    CommandEffect,
    CommandTable,
    VoiceCommand,
)
from echopath.voice.dispatcher import ListeningState, VoiceCommandDispatcher
from echopath.voice.recognizer import SimulatedRecognizer, SpeechRecognizer

__all__ = [
    "DEFAULT_COMMANDS",
    "CommandEffect",
    "CommandTable",
    "VoiceCommand",
    "ListeningState",
    "VoiceCommandDispatcher",
    "SimulatedRecognizer",
    "SpeechRecognizer",
]
