"""
Navigation Session
==================

Walks a route step by step, speaking each instruction and following it
with the step's warning and landmark.

State machine: ``IDLE -> NAVIGATING -> IDLE``. Leaving NAVIGATING by
stop or arrival cancels every sub-announcement still pending, and so
does moving on to the next step: guidance for a step the user already
left is never spoken.

Sub-announcements of one step form an ordered sequence (warning, then
landmark). The order is guaranteed by the sequence structure, not by the
relative size of the configured delays.
"""

import math
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from echopath.accessibility.announcer import AnnouncementGate, AnnouncementResult
from echopath.accessibility.haptics import HapticPattern, HapticsController
from echopath.config import FeedbackTimings
from echopath.models import NavigationStep
from echopath.navigation.route import DEFAULT_ROUTE, Route
from echopath.runtime.scheduler import Scheduler, SequenceHandle
from echopath.utils.logger import get_logger

logger = get_logger(__name__)

ARRIVAL_MESSAGE = "You have arrived at your destination. Navigation complete."
STOPPED_MESSAGE = "Navigation stopped"
NO_ACTIVE_MESSAGE = "No active navigation"

# Estimated footsteps per meter
DEFAULT_STRIDE_FACTOR = 1.3


class AdvanceOutcome(Enum):
    """Result of an advance() call."""

    ADVANCED = "advanced"
    ARRIVED = "arrived"
    INACTIVE = "inactive"


class NavigationSession:
    """
    Indoor navigation over a fixed route.

    Attributes:
        route: Steps being walked.
        active: Whether navigation is in progress.
        current_step_index: Index of the current step.
        destination: Label of the current destination.
        cumulative_step_count: Estimated footsteps since start.
    """

    def __init__(
        self,
        gate: AnnouncementGate,
        haptics: HapticsController,
        scheduler: Scheduler,
        route: Optional[Route] = None,
        timings: Optional[FeedbackTimings] = None,
        stride_factor: float = DEFAULT_STRIDE_FACTOR,
    ) -> None:
        self.gate = gate
        self.haptics = haptics
        self.scheduler = scheduler
        self.route = route or DEFAULT_ROUTE
        self.timings = timings or FeedbackTimings()
        self.stride_factor = stride_factor

        self.active = False
        self.current_step_index = 0
        self.destination = ""
        self.cumulative_step_count = 0
        self._pending: Optional[SequenceHandle] = None

    @property
    def current_step(self) -> NavigationStep:
        return self.route[self.current_step_index]

    @property
    def has_pending_announcements(self) -> bool:
        return self._pending is not None and not (
            self._pending.cancelled or self._pending.finished
        )

    async def start(self, destination: str) -> NavigationStep:
        """
        Begin navigating to ``destination`` from the first route step.

        Starting while already navigating restarts from step zero.

        Args:
            destination: Spoken label of the target.

        Returns:
            The first step.
        """
        self._cancel_pending()

        self.active = True
        self.current_step_index = 0
        self.cumulative_step_count = 0
        self.destination = destination

        step = self.current_step
        logger.info("Navigation started", destination=destination, steps=len(self.route))

        follow_ups = []
        if step.landmark:
            follow_ups.append((self.timings.first_landmark_delay_ms, step.landmark))
        self._schedule(follow_ups)

        await self.gate.announce(f"Navigation started to {destination}. {step.announcement}")
        await self.haptics.vibrate(step.direction)
        return step

    async def advance(self) -> AdvanceOutcome:
        """
        Move to the next step, or finish on the last one.

        Returns:
            ADVANCED, ARRIVED, or INACTIVE when nothing is being navigated.
        """
        if not self.active:
            logger.debug("Advance ignored, navigation inactive")
            return AdvanceOutcome.INACTIVE

        self._cancel_pending()

        if self.current_step_index >= self.route.last_index:
            self.active = False
            logger.info(
                "Navigation complete",
                destination=self.destination,
                step_count=self.cumulative_step_count,
            )
            await self.gate.announce(ARRIVAL_MESSAGE)
            await self.haptics.vibrate(HapticPattern.ARRIVAL)
            return AdvanceOutcome.ARRIVED

        self.current_step_index += 1
        step = self.current_step
        self.cumulative_step_count += math.floor(step.distance_meters * self.stride_factor)

        follow_ups = []
        if step.warning:
            follow_ups.append((self.timings.warning_delay_ms, f"Warning: {step.warning}"))
        if step.landmark:
            follow_ups.append((self.timings.landmark_delay_ms, step.landmark))
        self._schedule(follow_ups)

        logger.info(
            "Navigation advanced",
            step=self.current_step_index,
            direction=step.direction.value,
            step_count=self.cumulative_step_count,
        )
        await self.gate.announce(step.announcement)
        await self.haptics.vibrate(step.direction)
        return AdvanceOutcome.ADVANCED

    async def repeat(self) -> AnnouncementResult:
        """Re-announce the current step without changing any state."""
        if not self.active:
            return await self.gate.announce(NO_ACTIVE_MESSAGE)

        step = self.current_step
        result = await self.gate.announce(f"Current instruction: {step.announcement}")
        await self.haptics.vibrate(step.direction)
        return result

    async def stop(self) -> bool:
        """
        Stop navigating and reset the session.

        Returns:
            False if no navigation was active.
        """
        if not self.active:
            return False

        self._cancel_pending()
        self.active = False
        self.current_step_index = 0
        self.destination = ""
        logger.info("Navigation stopped")

        await self.gate.announce(STOPPED_MESSAGE)
        await self.haptics.vibrate(HapticPattern.NAVIGATION_STOPPED)
        return True

    def _schedule(self, follow_ups: list[tuple[int, str]]) -> None:
        if not follow_ups:
            return
        self._pending = self.scheduler.call_sequence(
            [(delay_ms, self._announcer(text)) for delay_ms, text in follow_ups]
        )

    def _announcer(self, text: str) -> Callable[[], Awaitable[None]]:
        async def announce() -> None:
            await self.gate.announce(text)

        return announce

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "active": self.active,
            "destination": self.destination,
            "current_step_index": self.current_step_index,
            "step_number": self.current_step_index + 1,
            "total_steps": len(self.route),
            "current_step": self.current_step.to_dict(),
            "cumulative_step_count": self.cumulative_step_count,
        }
