"""
Tests for the Navigation Session and routes
===========================================

Covers:
- Start, advance, arrival and stop transitions
- Footstep counting
- Warning and landmark ordering and cancellation
- Repeat without state change
- Route validation and quick destinations
"""

import pytest

from echopath.config import FeedbackTimings
from echopath.models import Direction, NavigationStep
from echopath.navigation.route import DEFAULT_ROUTE, QUICK_DESTINATIONS, Route, find_destination
from echopath.navigation.session import (
    ARRIVAL_MESSAGE,
    NO_ACTIVE_MESSAGE,
    STOPPED_MESSAGE,
    AdvanceOutcome,
    NavigationSession,
)

TWO_STEP_ROUTE = Route.from_dicts(
    [
        {"instruction": "Walk", "distance_meters": 5, "direction": "straight"},
        {"instruction": "Arrive", "distance_meters": 0, "direction": "straight"},
    ]
)


@pytest.fixture
def navigation(gate, haptics, scheduler) -> NavigationSession:
    return NavigationSession(gate, haptics, scheduler)


class TestStart:
    @pytest.mark.asyncio
    async def test_start_announces_first_step(self, navigation, events):
        step = await navigation.start("Exit")

        assert step.ordinal == 0
        assert navigation.active
        assert navigation.destination == "Exit"
        assert events == [
            (
                "speak",
                "Navigation started to Exit. Head straight down the corridor. Distance: 10 meters.",
            ),
            ("vibrate", [200, 100, 200]),
        ]

    @pytest.mark.asyncio
    async def test_first_landmark_follows_start(self, navigation, scheduler, speech):
        await navigation.start("Exit")

        await scheduler.advance(1999)
        assert speech.spoken[-1] != "Water fountain on your right"

        await scheduler.advance(1)
        assert speech.spoken[-1] == "Water fountain on your right"
        assert not navigation.has_pending_announcements

    @pytest.mark.asyncio
    async def test_restart_resets_progress(self, navigation):
        await navigation.start("Exit")
        await navigation.advance()
        await navigation.advance()

        await navigation.start("Restroom")

        assert navigation.current_step_index == 0
        assert navigation.cumulative_step_count == 0
        assert navigation.destination == "Restroom"


class TestAdvance:
    @pytest.mark.asyncio
    async def test_step_counts_accumulate(self, navigation):
        await navigation.start("Exit")

        counts = []
        for _ in range(4):
            assert await navigation.advance() is AdvanceOutcome.ADVANCED
            counts.append(navigation.cumulative_step_count)

        assert counts == [19, 29, 44, 44]
        assert navigation.current_step_index == 4

    @pytest.mark.asyncio
    async def test_advance_announces_step_and_direction(self, navigation, events):
        await navigation.start("Exit")
        events.clear()

        await navigation.advance()

        assert events == [
            ("speak", "Turn left at the intersection. Distance: 15 meters."),
            ("vibrate", [100, 100, 100, 100, 300]),
        ]

    @pytest.mark.asyncio
    async def test_warning_precedes_landmark(self, navigation, scheduler, speech):
        await navigation.start("Exit")
        await navigation.advance()

        await scheduler.advance(1500)
        assert speech.spoken[-1] == "Warning: Caution: Wet floor area"

        await scheduler.advance(1500)
        assert speech.spoken[-1] == "Information desk ahead"

    @pytest.mark.asyncio
    async def test_sequence_order_holds_when_delays_invert(self, gate, haptics, scheduler, speech):
        timings = FeedbackTimings(warning_delay_ms=3000, landmark_delay_ms=1000)
        navigation = NavigationSession(gate, haptics, scheduler, timings=timings)

        await navigation.start("Exit")
        await navigation.advance()
        await scheduler.advance(5000)

        assert speech.spoken[-2:] == ["Warning: Caution: Wet floor area", "Information desk ahead"]

    @pytest.mark.asyncio
    async def test_advance_drops_previous_step_guidance(self, navigation, scheduler, speech):
        await navigation.start("Exit")
        await navigation.advance()
        await navigation.advance()

        await scheduler.advance(10000)

        assert "Warning: Caution: Wet floor area" not in speech.spoken
        assert "Information desk ahead" not in speech.spoken
        assert speech.spoken[-1] == "Elevator doors on your left"

    @pytest.mark.asyncio
    async def test_arrival_on_last_step(self, gate, haptics, scheduler, events):
        navigation = NavigationSession(gate, haptics, scheduler, route=TWO_STEP_ROUTE)

        await navigation.start("Exit")
        assert await navigation.advance() is AdvanceOutcome.ADVANCED
        assert navigation.current_step.instruction == "Arrive"
        assert navigation.active

        events.clear()
        assert await navigation.advance() is AdvanceOutcome.ARRIVED

        assert not navigation.active
        assert navigation.current_step_index == 1
        assert navigation.destination == "Exit"
        assert navigation.cumulative_step_count == 0
        assert events == [("speak", ARRIVAL_MESSAGE), ("vibrate", [100, 100, 100, 100, 100])]

    @pytest.mark.asyncio
    async def test_arrival_cancels_pending_landmark(self, navigation, scheduler, speech):
        await navigation.start("Exit")
        for _ in range(5):
            await navigation.advance()

        await scheduler.advance(10000)

        assert speech.spoken[-1] == ARRIVAL_MESSAGE
        assert scheduler.pending == 0

    @pytest.mark.asyncio
    async def test_advance_while_inactive(self, navigation, speech):
        assert await navigation.advance() is AdvanceOutcome.INACTIVE
        assert speech.spoken == []

    @pytest.mark.asyncio
    async def test_index_never_exceeds_last(self, navigation):
        await navigation.start("Exit")
        for _ in range(10):
            await navigation.advance()
            assert 0 <= navigation.current_step_index <= DEFAULT_ROUTE.last_index


class TestStop:
    @pytest.mark.asyncio
    async def test_stop_resets_and_signals(self, navigation, events):
        await navigation.start("Exit")
        await navigation.advance()
        events.clear()

        assert await navigation.stop() is True

        assert not navigation.active
        assert navigation.current_step_index == 0
        assert navigation.destination == ""
        assert events == [("speak", STOPPED_MESSAGE), ("vibrate", [200])]

    @pytest.mark.asyncio
    async def test_stop_cancels_pending_guidance(self, navigation, scheduler, speech):
        await navigation.start("Exit")
        await navigation.advance()
        await navigation.stop()

        await scheduler.advance(10000)

        assert speech.spoken[-1] == STOPPED_MESSAGE
        assert scheduler.pending == 0

    @pytest.mark.asyncio
    async def test_stop_while_inactive(self, navigation, speech):
        assert await navigation.stop() is False
        assert speech.spoken == []


class TestRepeat:
    @pytest.mark.asyncio
    async def test_repeat_reannounces_current_step(self, navigation, events):
        await navigation.start("Exit")
        await navigation.advance()
        events.clear()

        result = await navigation.repeat()

        assert result.spoken
        assert navigation.current_step_index == 1
        assert events == [
            ("speak", "Current instruction: Turn left at the intersection. Distance: 15 meters."),
            ("vibrate", [100, 100, 100, 100, 300]),
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("advances", [0, 2, 4])
    async def test_repeat_keeps_progress(self, navigation, advances):
        await navigation.start("Exit")
        for _ in range(advances):
            await navigation.advance()
        index = navigation.current_step_index
        count = navigation.cumulative_step_count

        await navigation.repeat()

        assert navigation.current_step_index == index == advances
        assert navigation.cumulative_step_count == count
        assert navigation.active

    @pytest.mark.asyncio
    async def test_repeat_twice_is_deduplicated(self, navigation, speech):
        await navigation.start("Exit")
        await navigation.repeat()

        result = await navigation.repeat()

        assert not result.spoken
        assert result.reason == "duplicate"

    @pytest.mark.asyncio
    async def test_repeat_while_inactive(self, navigation, speech, vibration):
        await navigation.repeat()

        assert speech.spoken == [NO_ACTIVE_MESSAGE]
        assert vibration.patterns == []


class TestRoute:
    def test_default_route_shape(self):
        assert len(DEFAULT_ROUTE) == 5
        assert [step.distance_meters for step in DEFAULT_ROUTE] == [10, 15, 8, 12, 0]
        assert DEFAULT_ROUTE[1].direction is Direction.LEFT
        assert DEFAULT_ROUTE[3].direction is Direction.RIGHT

    def test_empty_route_rejected(self):
        with pytest.raises(ValueError):
            Route(())

    def test_mismatched_ordinal_rejected(self):
        step = NavigationStep(ordinal=3, instruction="Walk", distance_meters=1, direction=Direction.STRAIGHT)
        with pytest.raises(ValueError):
            Route((step,))

    def test_negative_distance_rejected(self):
        with pytest.raises(ValueError):
            Route.from_dicts([{"instruction": "Back up", "distance_meters": -1}])

    def test_from_dicts_defaults_to_straight(self):
        route = Route.from_dicts([{"instruction": "Walk", "distance_meters": 2.5}])

        assert route[0].direction is Direction.STRAIGHT
        assert route[0].announcement == "Walk. Distance: 2.5 meters."

    @pytest.mark.parametrize("key", ["exit", "EXIT", " main exit "])
    def test_find_destination(self, key):
        destination = find_destination(key)

        assert destination is not None
        assert destination.name == "Main Exit"

    def test_find_unknown_destination(self):
        assert find_destination("cafeteria") is None
        assert len(QUICK_DESTINATIONS) == 6
