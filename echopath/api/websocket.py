"""
WebSocket Handler
=================

Streams feedback to the mobile client, which performs the actual
text-to-speech and vibration.

Provides:
- Speech and vibration capabilities backed by the client connection
- A bounded history of delivered feedback per session
- Ping/pong keepalive
"""

import json
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from fastapi import WebSocket, WebSocketDisconnect

from echopath.accessibility.announcer import SpeechOptions, SpeechOutput
from echopath.accessibility.haptics import VibrationOutput
from echopath.errors import SessionNotFoundError
from echopath.utils.logger import LogContext, get_logger

logger = get_logger(__name__)

HISTORY_SIZE = 50


class MessageType(Enum):
    """WebSocket message types."""

    # Client -> Server
    PING = "ping"

    # Server -> Client
    SPEAK = "speak"
    VIBRATE = "vibrate"
    ERROR = "error"
    PONG = "pong"


@dataclass
class WSMessage:
    """WebSocket message structure."""

    type: str
    data: dict[str, Any]

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps({"type": self.type, "data": self.data})

    @classmethod
    def from_json(cls, text: str) -> "WSMessage":
        """Parse from JSON string."""
        parsed = json.loads(text)
        return cls(type=parsed.get("type", ""), data=parsed.get("data", {}))


@dataclass
class FeedbackChannel:
    """
    Per-session link to the client.

    Implements both output capabilities. Without a connected client the
    feedback is only kept in history; delivery never raises.
    """

    session_id: str
    websocket: Optional[WebSocket] = None
    history: deque = field(default_factory=lambda: deque(maxlen=HISTORY_SIZE))

    async def send(self, message: WSMessage) -> bool:
        """
        Record a message and push it to the client if connected.

        Returns:
            True if it was sent over the socket.
        """
        self.history.append(
            {
                "type": message.type,
                "data": message.data,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        )

        if self.websocket is None:
            return False

        try:
            await self.websocket.send_text(message.to_json())
            return True
        except Exception as e:
            logger.error("Failed to send message", session_id=self.session_id, error=str(e))
            return False


class ChannelSpeechOutput(SpeechOutput):
    """Speech capability that asks the client to speak."""

    def __init__(self, channel: FeedbackChannel) -> None:
        self.channel = channel

    async def speak(self, text: str, options: SpeechOptions) -> None:
        await self.channel.send(
            WSMessage(
                type=MessageType.SPEAK.value,
                data={
                    "text": text,
                    "language": options.language,
                    "pitch": options.pitch,
                    "rate": options.rate,
                },
            )
        )


class ChannelVibrationOutput(VibrationOutput):
    """Vibration capability that asks the client to vibrate."""

    def __init__(self, channel: FeedbackChannel) -> None:
        self.channel = channel

    async def vibrate(self, pattern: list[int]) -> None:
        await self.channel.send(
            WSMessage(type=MessageType.VIBRATE.value, data={"pattern": list(pattern)})
        )


class WebSocketManager:
    """
    Attaches client connections to session feedback channels.

    Handles:
    - Connection lifecycle
    - Keepalive messages
    """

    def __init__(self) -> None:
        self._channels: dict[str, FeedbackChannel] = {}

    def channel(self, session_id: str) -> FeedbackChannel:
        """Get or create the feedback channel for a session."""
        if session_id not in self._channels:
            self._channels[session_id] = FeedbackChannel(session_id)
        return self._channels[session_id]

    def remove(self, session_id: str) -> None:
        self._channels.pop(session_id, None)

    async def connect(self, websocket: WebSocket, session_id: str) -> bool:
        """
        Accept a client connection for an existing session.

        A newer connection replaces the current one as the feedback
        target; the older socket only keeps its own ping replies.

        Returns:
            True if connection accepted.
        """
        channel = self._channels.get(session_id)
        if channel is None:
            await websocket.close(code=4004, reason="Session not found")
            return False

        await websocket.accept()
        if channel.websocket is not None:
            logger.info("WebSocket replaced", session_id=session_id)
        channel.websocket = websocket
        logger.info("WebSocket connected", session_id=session_id)
        return True

    def disconnect(self, session_id: str, websocket: WebSocket) -> None:
        """Detach ``websocket``; feedback keeps flowing into history."""
        channel = self._channels.get(session_id)
        if channel is not None and channel.websocket is websocket:
            channel.websocket = None
        logger.info("WebSocket disconnected", session_id=session_id)

    async def handle_message(self, session_id: str, websocket: WebSocket, raw_message: str) -> None:
        """
        Handle an incoming WebSocket message.

        Replies go back to the socket the message came from.

        Args:
            session_id: Session identifier.
            websocket: Socket that sent the message.
            raw_message: Raw message text.
        """
        if session_id not in self._channels:
            raise SessionNotFoundError(session_id)

        try:
            message = WSMessage.from_json(raw_message)
        except (json.JSONDecodeError, AttributeError):
            await _reply(websocket, WSMessage(type=MessageType.ERROR.value, data={"message": "Invalid JSON"}))
            return

        if message.type == MessageType.PING.value:
            await _reply(websocket, WSMessage(type=MessageType.PONG.value, data={}))
        else:
            logger.warning("Unknown message type", type=message.type)
            await _reply(
                websocket,
                WSMessage(
                    type=MessageType.ERROR.value,
                    data={"message": f"Unknown message type: {message.type}"},
                ),
            )


async def _reply(websocket: WebSocket, message: WSMessage) -> None:
    await websocket.send_text(message.to_json())


ws_manager = WebSocketManager()


async def websocket_endpoint(websocket: WebSocket, session_id: str) -> None:
    """
    Main WebSocket endpoint handler.

    Args:
        websocket: The WebSocket connection.
        session_id: Session identifier.
    """
    if not await ws_manager.connect(websocket, session_id):
        return

    with LogContext(session_id=session_id):
        try:
            while True:
                raw_message = await websocket.receive_text()
                await ws_manager.handle_message(session_id, websocket, raw_message)
        except WebSocketDisconnect:
            pass
        except SessionNotFoundError:
            await websocket.close(code=4004, reason="Session closed")
        finally:
            ws_manager.disconnect(session_id, websocket)
