"""Traffic light control for a single intersection."""

from __future__ import annotations

import threading
import time
from typing import Callable

from .logger import EventLogger
from .model import Intersection, LightState, TrafficNetwork, light_state_name

EMERGENCY_GREEN_SECONDS = 3
YELLOW_SECONDS = 1
MIN_GREEN_SECONDS = 2
MAX_GREEN_SECONDS = 5
VEHICLES_PER_EXTRA_SECOND = 5
EMERGENCY_COOLDOWN_SECONDS = 10
IDLE_RESET_SECONDS = 20
ROAD_PAUSE_SECONDS = 0.1
_CONFLICT_RECHECK_SECONDS = 0.5


class TrafficLightController:
    """Cycles the lights of one intersection, giving emergencies priority."""

    def __init__(
        self,
        network: TrafficNetwork,
        intersection_id: int,
        logger: EventLogger | None = None,
        sleep: Callable[[float], None] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not 0 <= intersection_id < len(network.intersections):
            raise IndexError(f"no intersection {intersection_id}")
        self.network = network
        self.intersection: Intersection = network.intersections[intersection_id]
        self._logger = logger
        self._sleep_fn = sleep
        self._clock = clock
        self._stop_event: threading.Event | None = None
        self.last_change = clock()

    def _log(self, message: str, *args) -> None:
        if self._logger is not None:
            self._logger.log(message, *args)

    def _sleep(self, seconds: float) -> None:
        if self._sleep_fn is not None:
            self._sleep_fn(seconds)
        elif self._stop_event is not None:
            self._stop_event.wait(seconds)
        else:
            time.sleep(seconds)

    def _stopping(self) -> bool:
        return self._stop_event is not None and self._stop_event.is_set()

    def change_light_state(self, road_id: int, new_state: LightState) -> LightState:
        """Set a road's light and return its previous state.

        Turning green waits until no conflicting road is green. Turning red
        clears the road's queue into the intersection and global totals.
        """
        intersection = self.intersection
        road = intersection.roads[road_id]
        with intersection.lock:
            if new_state is LightState.GREEN:
                while self.check_conflicting_roads(road_id):
                    if self._stopping():
                        return road.state
                    # Conflicting roads signal their own condition, so re-check periodically.
                    road.condition.wait(_CONFLICT_RECHECK_SECONDS)

            with road.lock:
                old_state = road.state
                road.state = new_state
                self._log(
                    "Intersection %d - Road %d changed from %s to %s",
                    intersection.id,
                    road_id,
                    light_state_name(old_state),
                    light_state_name(new_state),
                )
                if new_state is LightState.RED:
                    road.condition.notify_all()
                    stats = self.network.stats
                    with stats.lock:
                        stats.total_vehicles += road.vehicle_count
                        stats.total_emergency_vehicles += road.emergency_vehicle_count
                    intersection.total_vehicles_passed += road.vehicle_count
                    intersection.total_emergency_passed += road.emergency_vehicle_count
                    road.vehicle_count = 0
                    road.emergency_vehicle_count = 0
        return old_state

    def check_conflicting_roads(self, road_id: int) -> bool:
        """Whether the opposite road, or another road serving an emergency, is green."""
        roads = self.intersection.roads
        opposite = (road_id + 2) % len(roads)
        for road in roads:
            if road.id == road_id:
                continue
            with road.lock:
                if road.state is LightState.GREEN and (
                    road.id == opposite or road.emergency_vehicle_count > 0
                ):
                    return True
        return False

    def handle_emergency_vehicle(self, road_id: int) -> None:
        """Give a road a fixed green phase to let its emergency vehicles through."""
        self._log("EMERGENCY at Intersection %d, Road %d", self.intersection.id, road_id)
        self.change_light_state(road_id, LightState.GREEN)
        self._sleep(EMERGENCY_GREEN_SECONDS)
        self.change_light_state(road_id, LightState.YELLOW)
        self._sleep(YELLOW_SECONDS)
        self.change_light_state(road_id, LightState.RED)
        self.intersection.last_emergency_time = self._clock()

    def green_duration(self, road_id: int, now: float) -> int:
        """Green time in seconds: longer for longer queues, halved after an emergency."""
        road = self.intersection.roads[road_id]
        with road.lock:
            count = road.vehicle_count
        duration = min(MIN_GREEN_SECONDS + count // VEHICLES_PER_EXTRA_SECOND, MAX_GREEN_SECONDS)
        if now - self.intersection.last_emergency_time < EMERGENCY_COOLDOWN_SECONDS:
            duration = max(duration // 2, 1)
        return duration

    def run_cycle(self) -> None:
        """Serve emergencies, then every queued road in turn, then reset a stale green."""
        roads = self.intersection.roads
        for road in roads:
            with road.lock:
                has_emergency = road.emergency_vehicle_count > 0
            if has_emergency:
                self.handle_emergency_vehicle(road.id)
                self.last_change = self._clock()

        for road in roads:
            with road.lock:
                has_vehicles = road.vehicle_count > 0
            if has_vehicles:
                self.change_light_state(road.id, LightState.GREEN)
                self.last_change = self._clock()
                self._sleep(self.green_duration(road.id, self._clock()))
                self.change_light_state(road.id, LightState.YELLOW)
                self._sleep(YELLOW_SECONDS)
                self.change_light_state(road.id, LightState.RED)
            self._sleep(ROAD_PAUSE_SECONDS)

        if self._clock() - self.last_change > IDLE_RESET_SECONDS:
            for road in roads:
                with road.lock:
                    is_green = road.state is LightState.GREEN
                if is_green:
                    self.change_light_state(road.id, LightState.YELLOW)
                    self._sleep(YELLOW_SECONDS)
                    self.change_light_state(road.id, LightState.RED)
                    self.last_change = self._clock()
                    break

    def run(self, stop_event: threading.Event) -> None:
        """Run cycles until ``stop_event`` is set."""
        self._stop_event = stop_event
        try:
            while not stop_event.is_set():
                self.run_cycle()
        finally:
            self._stop_event = None