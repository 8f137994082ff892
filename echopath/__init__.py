"""
EchoPath
========

Multi-modal feedback coordinator for an accessibility assistant.

This package decides what to speak, when, in what order, and with which
vibration pattern, for object sightings, indoor navigation steps and
voice commands. Speech and vibration are delivered by the mobile client.

Modules:
    - accessibility: Announcement gate and haptic pattern encoder
    - detection: Periodic simulated object detection session
    - navigation: Step-by-step indoor navigation session
    - voice: Voice command table, recognizer and dispatcher
    - runtime: Timer capability on top of asyncio
    - api: FastAPI routes and WebSocket feedback stream
    - utils: Logging helpers
"""

__version__ = "1.0.0"
__author__ = "EchoPath Team"
