"""
API Module
==========

FastAPI routes and WebSocket handlers for EchoPath.

This package contains:
    - routes/: REST endpoints acting as the app's UI triggers
    - websocket: Feedback stream to the mobile client
"""

from echopath.api.websocket import WebSocketManager, ws_manager

__all__ = [
    "WebSocketManager",
    "ws_manager",
]
