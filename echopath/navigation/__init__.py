"""
Navigation Module
=================

Turn-by-turn indoor navigation with staggered spoken guidance:
    - route: Route table and quick destinations
    - session: Start/advance/repeat/stop navigation state machine
"""

from echopath.navigation.route import (
    DEFAULT_ROUTE,
    QUICK_DESTINATIONS,
    QuickDestination,
    Route,
)
from echopath.navigation.session import AdvanceOutcome, NavigationSession

__all__ = [
    "DEFAULT_ROUTE",
    "QUICK_DESTINATIONS",
    "QuickDestination",
    "Route",
    "AdvanceOutcome",
    "NavigationSession",
]
