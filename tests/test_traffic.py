import random
import threading

import pytest

from trafficsim.logger import EventLogger
from trafficsim.model import MAX_EMERGENCY_VEHICLES, TrafficNetwork
from trafficsim.traffic import (
    EmergencyVehicleGenerator,
    VehicleGenerator,
    VehicleMover,
)


def _totals(network):
    vehicles = sum(r.vehicle_count for x in network.intersections for r in x.roads)
    emergencies = sum(
        r.emergency_vehicle_count for x in network.intersections for r in x.roads
    )
    return vehicles, emergencies


def test_add_vehicle_increments_queue():
    network = TrafficNetwork.build()
    generator = VehicleGenerator(network)
    assert generator.add_vehicle(1, 2) is True
    assert network.road(1, 2).vehicle_count == 1


def test_add_vehicle_respects_limit():
    network = TrafficNetwork.build()
    generator = VehicleGenerator(network, max_vehicles=2)
    results = [generator.add_vehicle(0, 0) for _ in range(3)]
    assert results == [True, True, False]
    assert network.road(0, 0).vehicle_count == 2


def test_add_vehicle_logs_event(tmp_path):
    log_path = tmp_path / "sim.log"
    network = TrafficNetwork.build()
    generator = VehicleGenerator(network, logger=EventLogger(log_path))
    generator.add_vehicle(1, 2)
    assert "Regular vehicle added to Intersection 1, Road 2" in log_path.read_text()


def test_add_vehicle_unknown_road_raises():
    generator = VehicleGenerator(TrafficNetwork.build())
    with pytest.raises(IndexError):
        generator.add_vehicle(99, 0)


def test_vehicle_step_adds_exactly_one():
    network = TrafficNetwork.build()
    generator = VehicleGenerator(network, rng=random.Random(7))
    for _ in range(5):
        generator.step()
    assert _totals(network) == (5, 0)


def test_vehicle_generator_stopped_run_adds_at_most_one():
    network = TrafficNetwork.build()
    stop = threading.Event()
    stop.set()
    VehicleGenerator(network, interval=0.0).run(stop)
    assert _totals(network)[0] == 0


def test_emergency_respects_limit():
    network = TrafficNetwork.build()
    generator = EmergencyVehicleGenerator(network)
    results = [generator.add_vehicle(2, 3) for _ in range(MAX_EMERGENCY_VEHICLES + 1)]
    assert results.count(True) == MAX_EMERGENCY_VEHICLES
    assert results[-1] is False
    assert network.road(2, 3).emergency_vehicle_count == MAX_EMERGENCY_VEHICLES


def test_emergency_logs_event(tmp_path):
    log_path = tmp_path / "sim.log"
    generator = EmergencyVehicleGenerator(
        TrafficNetwork.build(), logger=EventLogger(log_path)
    )
    generator.add_vehicle(3, 1)
    assert "EMERGENCY vehicle added to Intersection 3, Road 1" in log_path.read_text()


def test_emergency_step_adds_one():
    network = TrafficNetwork.build()
    EmergencyVehicleGenerator(network, rng=random.Random(3)).step()
    assert _totals(network) == (0, 1)


def test_emergency_run_stops_without_adding():
    network = TrafficNetwork.build()
    stop = threading.Event()
    stop.set()
    EmergencyVehicleGenerator(network).run(stop)
    assert _totals(network) == (0, 0)


def test_move_unconnected_road_moves_nothing():
    network = TrafficNetwork.build()
    network.road(0, 0).vehicle_count = 6
    assert VehicleMover(network).move(0, 0) == (0, 0)
    assert network.road(0, 0).vehicle_count == 6


def test_move_empty_road_moves_nothing():
    network = TrafficNetwork.build()
    assert VehicleMover(network).move(0, 1) == (0, 0)


def test_move_conserves_vehicles():
    network = TrafficNetwork.build()
    source = network.road(0, 1)
    source.vehicle_count = 9
    source.emergency_vehicle_count = 2
    moved = VehicleMover(network).move(0, 1)
    target = network.road(1, 3)
    assert moved == (target.vehicle_count, target.emergency_vehicle_count)
    assert source.vehicle_count + target.vehicle_count == 9
    assert source.emergency_vehicle_count == 0
    assert target.emergency_vehicle_count == 2


def test_move_single_vehicle_moves_it():
    network = TrafficNetwork.build()
    network.road(1, 3).vehicle_count = 1
    assert VehicleMover(network).move(1, 3) == (1, 0)
    assert network.road(0, 1).vehicle_count == 1
    assert network.road(1, 3).vehicle_count == 0


def test_move_busy_destination_moves_nothing():
    network = TrafficNetwork.build()
    network.road(0, 1).vehicle_count = 4
    target = network.road(1, 3)
    with target.lock:
        moved = VehicleMover(network).move(0, 1)
    assert moved == (0, 0)
    assert network.road(0, 1).vehicle_count == 4


def test_mover_step_conserves_totals():
    network = TrafficNetwork.build()
    for x in network.intersections:
        for r in x.roads:
            r.vehicle_count = 3
            r.emergency_vehicle_count = 1
    before = _totals(network)
    mover = VehicleMover(network, rng=random.Random(11))
    for _ in range(20):
        mover.step()
    assert _totals(network) == before