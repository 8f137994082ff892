"""
Tests for the Detection Session
===============================

Covers:
- Start/stop lifecycle and idempotence
- Tick isolation (0 or 1 current detection, never accumulated)
- Announcement text and proximity haptics
- No tick after stop, including a sample in flight
- Describe and camera flip
- RandomDetectionSource ranges and determinism
"""

import random

import pytest

from echopath.detection.session import (
    NOTHING_DETECTED_MESSAGE,
    STARTED_MESSAGE,
    STOPPED_MESSAGE,
    DetectionSession,
    DetectionState,
)
from echopath.detection.source import RandomDetectionSource
from echopath.models import CameraFacing, ObjectCategory, Proximity
from tests.conftest import ScriptedDetectionSource, make_object


def make_session(gate, haptics, scheduler, results=None, interval_ms=2000):
    source = ScriptedDetectionSource(results)
    session = DetectionSession(gate, haptics, scheduler, source, interval_ms=interval_ms)
    return session, source


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_start_announces_and_schedules_loop(self, gate, haptics, scheduler, speech):
        session, _ = make_session(gate, haptics, scheduler)

        assert await session.start() is True
        assert session.state is DetectionState.RUNNING
        assert speech.spoken == [STARTED_MESSAGE]
        assert scheduler.pending == 1

    @pytest.mark.asyncio
    async def test_double_start_keeps_one_loop(self, gate, haptics, scheduler, speech):
        session, source = make_session(gate, haptics, scheduler)

        await session.start()
        assert await session.start() is False

        assert scheduler.pending == 1
        await scheduler.advance(2000)
        assert source.calls == 1

    @pytest.mark.asyncio
    async def test_stop_cancels_loop_and_clears(self, gate, haptics, scheduler, speech):
        session, source = make_session(gate, haptics, scheduler, [make_object()])

        await session.start()
        await scheduler.advance(2000)
        assert len(session.detections) == 1

        assert await session.stop() is True
        assert session.state is DetectionState.STOPPED
        assert session.detections == ()
        assert speech.spoken[-1] == STOPPED_MESSAGE

        await scheduler.advance(20000)
        assert source.calls == 1
        assert scheduler.pending == 0

    @pytest.mark.asyncio
    async def test_stop_when_stopped_is_noop(self, gate, haptics, scheduler, speech):
        session, _ = make_session(gate, haptics, scheduler)

        assert await session.stop() is False
        assert speech.spoken == []

    @pytest.mark.asyncio
    async def test_restart_after_stop(self, gate, haptics, scheduler):
        session, source = make_session(gate, haptics, scheduler)

        await session.start()
        await session.stop()
        await session.start()
        await scheduler.advance(2000)

        assert source.calls == 1
        assert session.tick_count == 1

    def test_interval_must_be_positive(self, gate, haptics, scheduler):
        with pytest.raises(ValueError):
            DetectionSession(gate, haptics, scheduler, ScriptedDetectionSource(), interval_ms=0)


class TestTicks:
    @pytest.mark.asyncio
    async def test_tick_announces_and_vibrates(self, gate, haptics, scheduler, events):
        obj = make_object(ObjectCategory.STAIRS, Proximity.NEAR)
        session, _ = make_session(gate, haptics, scheduler, [obj])

        await session.start()
        await scheduler.advance(2000)

        assert events[1:] == [
            ("speak", "stairs detected very close ahead"),
            ("vibrate", [100, 50, 100, 50, 100]),
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "proximity, phrase, pattern",
        [
            (Proximity.MEDIUM, "medium", [200, 100, 200]),
            (Proximity.FAR, "far", [300]),
        ],
    )
    async def test_non_near_proximity_is_spoken_by_name(
        self, gate, haptics, scheduler, speech, vibration, proximity, phrase, pattern
    ):
        session, _ = make_session(gate, haptics, scheduler, [make_object(ObjectCategory.PERSON, proximity)])

        await session.start()
        await scheduler.advance(2000)

        assert speech.spoken[-1] == f"person detected {phrase} ahead"
        assert vibration.patterns == [pattern]

    @pytest.mark.asyncio
    async def test_detections_never_accumulate(self, gate, haptics, scheduler):
        results = [
            make_object(object_id="a"),
            make_object(ObjectCategory.SIGN, object_id="b"),
            None,
            make_object(ObjectCategory.OBSTACLE, object_id="c"),
        ]
        session, _ = make_session(gate, haptics, scheduler, results)
        await session.start()

        seen = []
        for _ in range(4):
            await scheduler.advance(2000)
            assert len(session.detections) in (0, 1)
            seen.append([d.id for d in session.detections])

        assert seen == [["a"], ["b"], [], ["c"]]

    @pytest.mark.asyncio
    async def test_unchanged_sighting_is_not_repeated(self, gate, haptics, scheduler, speech, vibration):
        results = [make_object(object_id="a"), make_object(object_id="b")]
        session, _ = make_session(gate, haptics, scheduler, results)

        await session.start()
        await scheduler.advance(4000)

        assert speech.spoken.count("door detected very close ahead") == 1
        assert len(vibration.patterns) == 2

    @pytest.mark.asyncio
    async def test_empty_tick_is_silent(self, gate, haptics, scheduler, speech, vibration):
        session, _ = make_session(gate, haptics, scheduler, [None])

        await session.start()
        await scheduler.advance(2000)

        assert speech.spoken == [STARTED_MESSAGE]
        assert vibration.patterns == []

    @pytest.mark.asyncio
    async def test_tick_while_stopped_does_nothing(self, gate, haptics, scheduler):
        session, source = make_session(gate, haptics, scheduler, [make_object()])

        assert await session.tick() is None
        assert source.calls == 0

    @pytest.mark.asyncio
    async def test_sample_in_flight_is_discarded_after_stop(self, gate, haptics, scheduler, speech):
        session, _ = make_session(gate, haptics, scheduler)

        class StoppingSource(ScriptedDetectionSource):
            async def detect(self, facing=CameraFacing.BACK):
                await session.stop()
                return make_object()

        session.source = StoppingSource()
        await session.start()
        await scheduler.advance(2000)

        assert session.detections == ()
        assert speech.spoken == [STARTED_MESSAGE, STOPPED_MESSAGE]


class TestDescribeAndFlip:
    @pytest.mark.asyncio
    async def test_describe_without_detections(self, gate, haptics, scheduler, speech):
        session, _ = make_session(gate, haptics, scheduler)

        result = await session.describe()

        assert result.spoken
        assert speech.spoken == [NOTHING_DETECTED_MESSAGE]

    @pytest.mark.asyncio
    async def test_describe_reads_snapshot_without_sampling(self, gate, haptics, scheduler, speech):
        session, source = make_session(gate, haptics, scheduler, [make_object()])

        await session.start()
        await scheduler.advance(2000)
        await session.describe()

        assert speech.spoken[-1] == "Currently detecting 1 objects in view"
        assert source.calls == 1

    @pytest.mark.asyncio
    async def test_flip_camera(self, gate, haptics, scheduler, events):
        session, source = make_session(gate, haptics, scheduler, [None])

        assert await session.flip_camera() is CameraFacing.FRONT
        assert events == [("speak", "Switched to front camera"), ("vibrate", [100])]

        await session.start()
        await scheduler.advance(2000)
        assert source.facings == [CameraFacing.FRONT]

        assert await session.flip_camera() is CameraFacing.BACK

    @pytest.mark.asyncio
    async def test_to_dict(self, gate, haptics, scheduler):
        session, _ = make_session(gate, haptics, scheduler, [make_object(object_id="x")])
        await session.start()
        await scheduler.advance(2000)

        data = session.to_dict()
        assert data["state"] == "RUNNING"
        assert data["detections"][0]["id"] == "x"
        assert data["detections"][0]["proximity"] == "near"


class TestRandomDetectionSource:
    @pytest.mark.asyncio
    async def test_samples_are_within_ranges(self):
        source = RandomDetectionSource(rng=random.Random(7), frame_size=(100.0, 200.0))

        results = [await source.detect() for _ in range(200)]
        seen = [r for r in results if r is not None]

        assert 0 < len(seen) < 200
        for obj in seen:
            assert 0.7 <= obj.confidence < 1.0
            assert 0 <= obj.screen_position[0] < 100.0
            assert 0 <= obj.screen_position[1] < 200.0
            assert obj.category in ObjectCategory
            assert obj.proximity in Proximity

    @pytest.mark.asyncio
    async def test_same_seed_same_samples(self):
        a = RandomDetectionSource(rng=random.Random(99))
        b = RandomDetectionSource(rng=random.Random(99))

        assert [await a.detect() for _ in range(10)] == [await b.detect() for _ in range(10)]

    @pytest.mark.asyncio
    async def test_probability_bounds(self):
        never = RandomDetectionSource(rng=random.Random(1), probability=0.0)
        always = RandomDetectionSource(rng=random.Random(1), probability=1.0)

        assert all([await never.detect() is None for _ in range(20)])
        assert all([await always.detect() is not None for _ in range(20)])

    @pytest.mark.parametrize("kwargs", [{"probability": 1.5}, {"min_confidence": 1.0}])
    def test_invalid_configuration(self, kwargs):
        with pytest.raises(ValueError):
            RandomDetectionSource(**kwargs)
