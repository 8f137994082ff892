"""
Runtime Module
==============

Timer capability used by every feedback component:
    - scheduler: Delayed, periodic and ordered-sequence callbacks
"""

from echopath.runtime.scheduler import (
    AsyncioScheduler,
    Scheduler,
    SequenceHandle,
    TaskHandle,
    TimerHandle,
)

__all__ = [
    "AsyncioScheduler",
    "Scheduler",
    "SequenceHandle",
    "TaskHandle",
    "TimerHandle",
]
