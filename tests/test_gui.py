import pytest

from trafficsim.gui import CursesDisplay, intersection_lines, statistics_lines
from trafficsim.model import Intersection, LightState, TrafficNetwork


def test_intersection_lines_fresh_roads():
    lines = intersection_lines(Intersection(id=2))
    assert len(lines) == 8
    assert lines[0] == "Road 0: RED"
    assert lines[1] == "Vehicles: 0 (E:0)"


def test_intersection_lines_reflect_state_and_counts():
    intersection = Intersection(id=0)
    road = intersection.roads[3]
    road.state = LightState.GREEN
    road.vehicle_count = 7
    road.emergency_vehicle_count = 1
    lines = intersection_lines(intersection)
    assert lines[6] == "Road 3: GREEN"
    assert lines[7] == "Vehicles: 7 (E:1)"


def test_intersection_lines_yellow():
    intersection = Intersection(id=0)
    intersection.roads[1].state = LightState.YELLOW
    assert intersection_lines(intersection)[2] == "Road 1: YELLOW"


def test_statistics_lines_layout():
    network = TrafficNetwork.build()
    network.stats.start_time = 100.0
    network.stats.total_vehicles = 12
    network.stats.total_emergency_vehicles = 3
    network.intersections[1].total_vehicles_passed = 12
    network.intersections[1].total_emergency_passed = 3
    lines = statistics_lines(network, 130.0)
    assert lines[0] == "Runtime: 30 seconds"
    assert lines[1] == "Total vehicles: 12"
    assert lines[2] == "Emergency vehicles: 3"
    assert lines[3] == ""
    assert lines[5] == "Int 1: 12 vehicles (3 emergency)"
    assert len(lines) == 4 + len(network.intersections)


def test_statistics_lines_one_per_intersection():
    network = TrafficNetwork.build(num_intersections=2)
    lines = statistics_lines(network, network.stats.start_time)
    assert lines[4:] == [
        "Int 0: 0 vehicles (0 emergency)",
        "Int 1: 0 vehicles (0 emergency)",
    ]


def test_draw_before_open_raises():
    with pytest.raises(RuntimeError):
        CursesDisplay(TrafficNetwork.build()).draw()