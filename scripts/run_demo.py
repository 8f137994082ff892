#!/usr/bin/env python3
"""
Demo Script
===========

Console walkthrough of the EchoPath feedback coordinator.

Speech is printed as 🔊 lines and vibration patterns as 📳 lines, in
the order the coordinator delivers them. The demo runs three scenes:
object detection, indoor navigation and a simulated voice command.

Usage:
    python scripts/run_demo.py

    # Faster timers (all delays divided by 4)
    python scripts/run_demo.py --speed 4

    # Reproducible detections and recognitions
    python scripts/run_demo.py --seed 42
"""

import argparse
import asyncio
import random
import sys
import traceback
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from echopath.accessibility.announcer import SpeechOptions, SpeechOutput
from echopath.accessibility.haptics import VibrationOutput
from echopath.config import FeedbackTimings, get_settings
from echopath.coordinator import FeedbackCoordinator
from echopath.navigation.session import AdvanceOutcome
from echopath.runtime.scheduler import AsyncioScheduler
from echopath.utils.logger import setup_logging


class ConsoleSpeech(SpeechOutput):
    """Prints announcements instead of speaking them."""

    async def speak(self, text: str, options: SpeechOptions) -> None:
        print(f"   🔊 {text}")


class ConsoleVibration(VibrationOutput):
    """Prints vibration patterns instead of playing them."""

    async def vibrate(self, pattern: list[int]) -> None:
        print(f"   📳 {pattern}")


def scaled_timings(timings: FeedbackTimings, speed: float) -> FeedbackTimings:
    """Divide every delay by ``speed``."""
    return FeedbackTimings(
        detection_interval_ms=max(1, int(timings.detection_interval_ms / speed)),
        first_landmark_delay_ms=int(timings.first_landmark_delay_ms / speed),
        warning_delay_ms=int(timings.warning_delay_ms / speed),
        landmark_delay_ms=int(timings.landmark_delay_ms / speed),
        recognition_delay_ms=int(timings.recognition_delay_ms / speed),
    )


async def run_detection(coordinator: FeedbackCoordinator, ticks: int, interval_s: float) -> None:
    print("\n📷 Object detection")
    await coordinator.detection.start()
    await asyncio.sleep(ticks * interval_s + interval_s / 2)
    await coordinator.detection.describe()
    await coordinator.detection.stop()


async def run_navigation(coordinator: FeedbackCoordinator, step_pause_s: float) -> None:
    print("\n🧭 Indoor navigation")
    await coordinator.navigation.start("Main Exit")
    await asyncio.sleep(step_pause_s)
    await coordinator.navigation.repeat()

    while True:
        outcome = await coordinator.navigation.advance()
        if outcome is not AdvanceOutcome.ADVANCED:
            break
        await asyncio.sleep(step_pause_s)

    print(f"   👣 Estimated steps: {coordinator.navigation.cumulative_step_count}")


async def run_voice(coordinator: FeedbackCoordinator, recognition_s: float) -> None:
    print("\n🎙️  Voice command")
    await coordinator.voice.start_listening()
    await asyncio.sleep(recognition_s + 0.1)
    print(f"   💬 Recognized: {coordinator.voice.recognized_text!r}")
    await coordinator.voice.dispatch("gibberish")


async def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="EchoPath feedback coordinator demo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--speed", type=float, default=1.0, help="Timer speed-up factor")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--ticks", type=int, default=3, help="Detection ticks to run")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    if args.speed <= 0:
        print("❌ --speed must be positive")
        return 1

    setup_logging(level="DEBUG" if args.debug else "WARNING", json_logs=False)

    settings = get_settings()
    timings = scaled_timings(FeedbackTimings.from_settings(settings), args.speed)
    coordinator = FeedbackCoordinator(
        ConsoleSpeech(),
        ConsoleVibration(),
        AsyncioScheduler(),
        timings=timings,
        rng=random.Random(args.seed),
    )

    try:
        await run_detection(coordinator, args.ticks, timings.detection_interval_ms / 1000)
        await run_navigation(coordinator, timings.landmark_delay_ms / 1000 + 0.2)
        await run_voice(coordinator, timings.recognition_delay_ms / 1000)
    finally:
        await coordinator.close()

    print("\nDone. 👋")
    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\n\nInterrupted. Goodbye!")
        sys.exit(0)
    except Exception as e:
        print(f"\n❌ Fatal error: {e}")
        traceback.print_exc()
        sys.exit(1)
