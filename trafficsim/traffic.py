"""Vehicle arrival and movement between connected roads."""

from __future__ import annotations

import random
import threading

from .model import MAX_EMERGENCY_VEHICLES, MAX_VEHICLES


class _NetworkWorker:
    def __init__(self, network, logger=None, rng=None):
        self.network = network
        self._logger = logger
        self._rng = rng if rng is not None else random.Random()

    def _log(self, message, *args):
        if self._logger is not None:
            self._logger.log(message, *args)

    def _signal(self, intersection_id, road):
        with self.network.intersections[intersection_id].lock:
            road.condition.notify()

    def _random_road(self):
        i = self._rng.randrange(len(self.network.intersections))
        return i, self._rng.randrange(len(self.network.intersections[i].roads))

    def step(self):
        """Act on one randomly chosen road."""
        return self._act(*self._random_road())


class VehicleGenerator(_NetworkWorker):
    """Adds regular vehicles to random roads at a fixed interval."""

    def __init__(self, network, logger=None, interval=0.0, rng=None, max_vehicles=MAX_VEHICLES):
        super().__init__(network, logger, rng)
        self.interval = interval
        self.max_vehicles = max_vehicles

    def add_vehicle(self, intersection_id, road_id) -> bool:
        """Queue one vehicle unless the road is full; report whether it was added."""
        road = self.network.road(intersection_id, road_id)
        with road.lock:
            if road.vehicle_count >= self.max_vehicles:
                return False
            road.vehicle_count += 1
            first = road.vehicle_count == 1
            self._log("Regular vehicle added to Intersection %d, Road %d", intersection_id, road_id)
        if first:
            self._signal(intersection_id, road)
        return True

    _act = add_vehicle

    def step(self) -> bool:
        """Try to add a vehicle to one random road."""
        return super().step()

    def run(self, stop_event: threading.Event) -> None:
        """Generate vehicles until ``stop_event`` is set."""
        while not stop_event.is_set():
            self.step()
            if stop_event.wait(self.interval):
                break


class EmergencyVehicleGenerator(_NetworkWorker):
    """Adds emergency vehicles to random roads every 5 to 19 seconds."""

    def __init__(self, network, logger=None, rng=None, max_emergency=MAX_EMERGENCY_VEHICLES):
        super().__init__(network, logger, rng)
        self.max_emergency = max_emergency

    def add_vehicle(self, intersection_id, road_id) -> bool:
        """Queue one emergency vehicle unless the road is at its limit."""
        road = self.network.road(intersection_id, road_id)
        with road.lock:
            if road.emergency_vehicle_count >= self.max_emergency:
                return False
            road.emergency_vehicle_count += 1
            self._log("EMERGENCY vehicle added to Intersection %d, Road %d", intersection_id, road_id)
        self._signal(intersection_id, road)
        return True

    _act = add_vehicle

    def step(self) -> bool:
        """Try to add an emergency vehicle to one random road."""
        return super().step()

    def run(self, stop_event: threading.Event) -> None:
        """Wait a random delay, add a vehicle, repeat until stopped."""
        while not stop_event.wait(5 + self._rng.randrange(15)):
            self.step()


class VehicleMover(_NetworkWorker):
    """Moves queued vehicles to the road of a neighbouring intersection."""

    def move(self, intersection_id, road_id) -> tuple[int, int]:
        """Move a third of the vehicles (at least one) and all emergencies onward.

        Returns (vehicles, emergencies) moved; nothing moves if the road leads
        nowhere, is empty, or its destination is busy.
        """
        road = self.network.road(intersection_id, road_id)
        if not road.is_connected():
            return 0, 0
        to_i, to_r = road.connected_to_intersection, road.connected_to_road
        target = self.network.road(to_i, to_r)
        with road.lock:
            if road.vehicle_count <= 0 and road.emergency_vehicle_count <= 0:
                return 0, 0
            if not target.lock.acquire(blocking=False):
                return 0, 0
            try:
                vehicles = max(road.vehicle_count // 3, 1 if road.vehicle_count > 0 else 0)
                emergencies = road.emergency_vehicle_count
                if vehicles <= 0 and emergencies <= 0:
                    return 0, 0
                self._log(
                    "Moving %d vehicles and %d emergencies from Int %d Road %d to Int %d Road %d",
                    vehicles, emergencies, intersection_id, road_id, to_i, to_r,
                )
                road.vehicle_count -= vehicles
                road.emergency_vehicle_count -= emergencies
                target.vehicle_count += vehicles
                target.emergency_vehicle_count += emergencies
                was_empty = (target.vehicle_count, target.emergency_vehicle_count) == (vehicles, emergencies)
            finally:
                target.lock.release()
        if was_empty:
            self._signal(to_i, target)
        return vehicles, emergencies

    _act = move

    def step(self) -> tuple[int, int]:
        """Try to move vehicles off one random road."""
        return super().step()

    def run(self, stop_event: threading.Event) -> None:
        """Move vehicles every 0.5 to 1.5 seconds until stopped."""
        while not stop_event.wait(0.5 + self._rng.randrange(1_000_000) / 1_000_000):
            self.step()