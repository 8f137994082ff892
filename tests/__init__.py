"""
Test Package
============

Unit and integration tests for EchoPath.

Test organization:
    - test_scheduler.py: Timer capability and ordered sequences
    - test_accessibility.py: Announcement gate and haptic encoder
    - test_detection.py: Detection session
    - test_navigation.py: Navigation session
    - test_voice.py: Voice command dispatcher
    - test_coordinator.py: Coordinator wiring and preferences
    - test_api.py: FastAPI endpoints and WebSocket stream

Run tests with:
    pytest tests/ -v
"""
