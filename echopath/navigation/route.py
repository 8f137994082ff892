"""
Routes
======

Fixed, ordered step sequences a navigation session walks through.
"""

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence

from echopath.models import Direction, NavigationStep


@dataclass(frozen=True)
class Route:
    """
    An immutable, non-empty sequence of navigation steps.

    Step ordinals always equal their index in the route.
    """

    steps: tuple[NavigationStep, ...]

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError("A route needs at least one step")
        for index, step in enumerate(self.steps):
            if step.ordinal != index:
                raise ValueError(f"Step ordinal {step.ordinal} does not match position {index}")

    @classmethod
    def from_dicts(cls, items: Sequence[dict[str, Any]]) -> "Route":
        """
        Build a route from plain dictionaries.

        Args:
            items: Step definitions with ``instruction``, ``distance_meters``,
                ``direction`` and optional ``landmark``/``warning`` keys.

        Returns:
            The route, with ordinals assigned by position.
        """
        return cls(
            tuple(
                NavigationStep(
                    ordinal=index,
                    instruction=item["instruction"],
                    distance_meters=item["distance_meters"],
                    direction=Direction(item.get("direction", "straight")),
                    landmark=item.get("landmark"),
                    warning=item.get("warning"),
                )
                for index, item in enumerate(items)
            )
        )

    def __len__(self) -> int:
        return len(self.steps)

    def __getitem__(self, index: int) -> NavigationStep:
        return self.steps[index]

    def __iter__(self) -> Iterator[NavigationStep]:
        return iter(self.steps)

    @property
    def last_index(self) -> int:
        return len(self.steps) - 1


DEFAULT_ROUTE = Route.from_dicts(
    [
        {
            "instruction": "Head straight down the corridor",
            "distance_meters": 10,
            "direction": "straight",
            "landmark": "Water fountain on your right",
        },
        {
            "instruction": "Turn left at the intersection",
            "distance_meters": 15,
            "direction": "left",
            "landmark": "Information desk ahead",
            "warning": "Caution: Wet floor area",
        },
        {
            "instruction": "Continue straight past the elevator",
            "distance_meters": 8,
            "direction": "straight",
            "landmark": "Elevator doors on your left",
        },
        {
            "instruction": "Turn right towards the exit",
            "distance_meters": 12,
            "direction": "right",
            "landmark": "Exit sign visible ahead",
        },
        {
            "instruction": "You have arrived at your destination",
            "distance_meters": 0,
            "direction": "straight",
            "landmark": "Main entrance doors",
        },
    ]
)


@dataclass(frozen=True)
class QuickDestination:
    """A one-tap navigation target."""

    id: str
    name: str


QUICK_DESTINATIONS: tuple[QuickDestination, ...] = (
    QuickDestination("exit", "Main Exit"),
    QuickDestination("restroom", "Restroom"),
    QuickDestination("elevator", "Elevator"),
    QuickDestination("stairs", "Stairs"),
    QuickDestination("information", "Information Desk"),
    QuickDestination("emergency", "Emergency Exit"),
)


def find_destination(key: str) -> Optional[QuickDestination]:
    """Look up a quick destination by id or name, case-insensitively."""
    wanted = key.strip().lower()
    for destination in QUICK_DESTINATIONS:
        if wanted in (destination.id, destination.name.lower()):
            return destination
    return None
