"""Core data model: traffic lights, roads, intersections and statistics."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from enum import Enum

NUM_INTERSECTIONS = 4
NUM_ROADS_PER_INTERSECTION = 4
MAX_VEHICLES = 100
MAX_EMERGENCY_VEHICLES = 5
SIMULATION_DURATION = 60

INT_MAX = 2**31 - 1


class LightState(Enum):
    """State of a road's traffic light."""

    RED = 0
    GREEN = 1
    YELLOW = 2


class VehicleType(Enum):
    """Kind of vehicle travelling on a road."""

    REGULAR = 0
    EMERGENCY = 1


def light_state_name(state) -> str:
    """Return the display name of a light state, or "UNKNOWN"."""
    if isinstance(state, LightState):
        return state.name
    return "UNKNOWN"


@dataclass(eq=False)
class Road:
    """One approach road of an intersection.

    ``lock`` guards the counters and light state. ``condition`` is bound to
    the owning intersection's lock, so it must be notified while holding
    that lock rather than the road's own.
    """

    id: int
    state: LightState = LightState.RED
    vehicle_count: int = 0
    emergency_vehicle_count: int = 0
    connected_to_intersection: int | None = None
    connected_to_road: int | None = None
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    condition: threading.Condition = field(
        default_factory=threading.Condition, repr=False
    )

    def is_connected(self) -> bool:
        """Whether vehicles leaving this road enter another intersection."""
        return self.connected_to_intersection is not None


@dataclass(eq=False)
class Intersection:
    """An intersection holding a fixed number of roads."""

    id: int
    num_roads: int = NUM_ROADS_PER_INTERSECTION
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    total_vehicles_passed: int = 0
    total_emergency_passed: int = 0
    last_emergency_time: float = 0.0
    roads: list[Road] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        self.roads = [
            Road(id=j, condition=threading.Condition(self.lock))
            for j in range(self.num_roads)
        ]


@dataclass(eq=False)
class Statistics:
    """Simulation-wide counters, guarded by ``lock``."""

    start_time: float = field(default_factory=time.time)
    total_vehicles: int = 0
    total_emergency_vehicles: int = 0
    max_wait_time: int = 0
    min_wait_time: int = INT_MAX
    total_wait_time: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


@dataclass(eq=False)
class TrafficNetwork:
    """A chain of intersections joined road to road."""

    intersections: list[Intersection]
    stats: Statistics = field(default_factory=Statistics)

    @classmethod
    def build(
        cls,
        num_intersections: int = NUM_INTERSECTIONS,
        num_roads: int = NUM_ROADS_PER_INTERSECTION,
    ) -> "TrafficNetwork":
        """Create intersections in a line, road 1 of each feeding road 3 of the next."""
        if num_intersections < 1:
            raise ValueError("a network needs at least one intersection")
        if num_roads < NUM_ROADS_PER_INTERSECTION:
            raise ValueError(
                f"an intersection needs at least {NUM_ROADS_PER_INTERSECTION} roads"
            )
        intersections = [Intersection(id=i, num_roads=num_roads) for i in range(num_intersections)]
        for intersection in intersections:
            i = intersection.id
            for road in intersection.roads:
                if i < num_intersections - 1 and road.id == 1:
                    road.connected_to_intersection = i + 1
                    road.connected_to_road = 3
                elif i > 0 and road.id == 3:
                    road.connected_to_intersection = i - 1
                    road.connected_to_road = 1
        return cls(intersections=intersections)

    def road(self, intersection_id: int, road_id: int) -> Road:
        """Return a road by intersection and road number."""
        if not 0 <= intersection_id < len(self.intersections):
            raise IndexError(f"no intersection {intersection_id}")
        roads = self.intersections[intersection_id].roads
        if not 0 <= road_id < len(roads):
            raise IndexError(f"no road {road_id} at intersection {intersection_id}")
        return roads[road_id]

    def format_statistics(self, now: float) -> str:
        """Render the end-of-run statistics report."""
        with self.stats.lock:
            runtime = int(now - self.stats.start_time)
            total = self.stats.total_vehicles
            emergency = self.stats.total_emergency_vehicles
        lines = [
            "",
            "=== Simulation Statistics ===",
            f"Total runtime: {runtime} seconds",
            f"Total vehicles processed: {total}",
            f"Total emergency vehicles processed: {emergency}",
        ]
        lines.extend(
            f"Intersection {x.id}: {x.total_vehicles_passed} vehicles "
            f"({x.total_emergency_passed} emergency)"
            for x in self.intersections
        )
        return "\n".join(lines) + "\n"