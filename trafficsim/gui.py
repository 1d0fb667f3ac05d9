"""Terminal display of intersections and statistics."""

from __future__ import annotations

import curses
import threading
import time

from .model import LightState, light_state_name

_COLOR_PAIRS = {LightState.RED: 1, LightState.GREEN: 2, LightState.YELLOW: 3}


def _road_rows(intersection):
    rows = []
    for road in intersection.roads:
        with road.lock:
            state = road.state
            counts = f"Vehicles: {road.vehicle_count} (E:{road.emergency_vehicle_count})"
        rows.append((state, f"Road {road.id}: {light_state_name(state)}", counts))
    return rows


def intersection_lines(intersection) -> list[str]:
    """Two lines per road: its light state, then its queue sizes."""
    return [line for _, label, counts in _road_rows(intersection) for line in (label, counts)]


def statistics_lines(network, now: float) -> list[str]:
    """Statistics panel lines, starting at row 2."""
    stats = network.stats
    with stats.lock:
        lines = [
            f"Runtime: {int(now - stats.start_time)} seconds",
            f"Total vehicles: {stats.total_vehicles}",
            f"Emergency vehicles: {stats.total_emergency_vehicles}",
            "",
        ]
    lines += [
        f"Int {x.id}: {x.total_vehicles_passed} vehicles ({x.total_emergency_passed} emergency)"
        for x in network.intersections
    ]
    return lines


def _put(window, row, col, text, attr=0):
    try:
        window.addstr(row, col, text, attr)
    except curses.error:
        pass


def _frame(window, title):
    window.erase()
    window.box()
    _put(window, 0, 2, title)


class CursesDisplay:
    """A curses screen with one panel per intersection and a statistics panel."""

    def __init__(self, network, interval=0.2):
        self.network = network
        self.interval = interval
        self.metrics = None
        self._screen = None
        self._windows = []
        self._stats_window = None
        self._colors = False

    def open(self) -> None:
        """Initialise the terminal and create the panels."""
        if self._screen is not None:
            return
        self._screen = curses.initscr()
        try:
            curses.cbreak()
            curses.noecho()
            try:
                curses.curs_set(0)
            except curses.error:
                pass
            if curses.has_colors():
                curses.start_color()
                for pair, color in enumerate(
                    (curses.COLOR_RED, curses.COLOR_GREEN, curses.COLOR_YELLOW, curses.COLOR_BLUE), 1
                ):
                    curses.init_pair(pair, color, curses.COLOR_BLACK)
                self._colors = True
            count = len(self.network.intersections)
            self._windows = [
                curses.newwin(10, 30, 2 + (i // 2) * 12, (i % 2) * 35) for i in range(count)
            ]
            self._stats_window = curses.newwin(15, 70, 2 + ((count + 1) // 2) * 12, 0)
            for i, window in enumerate(self._windows):
                _frame(window, f"Intersection {i}")
                window.refresh()
            _frame(self._stats_window, "Simulation Statistics")
            self._stats_window.refresh()
        except BaseException:
            self.close()
            raise

    def close(self) -> None:
        """Restore the terminal."""
        if self._screen is None:
            return
        self._windows = []
        self._stats_window = self._screen = None
        curses.nocbreak()
        curses.echo()
        curses.endwin()

    def draw(self) -> None:
        """Redraw every panel from the current network state."""
        if self._screen is None:
            raise RuntimeError("display is not open")
        for intersection, window in zip(self.network.intersections, self._windows):
            _frame(window, f"Intersection {intersection.id}")
            for j, (state, label, counts) in enumerate(_road_rows(intersection)):
                attr = curses.color_pair(_COLOR_PAIRS[state]) if self._colors else 0
                _put(window, 2 + j * 2, 2, label, attr)
                _put(window, 3 + j * 2, 2, counts)
            window.refresh()
        window = self._stats_window
        _frame(window, "Simulation Statistics")
        for row, line in enumerate(statistics_lines(self.network, time.time()), start=2):
            if line:
                _put(window, row, 2, line)
        if self.metrics is not None:
            _put(window, 10, 2, "System Metrics:")
            _put(window, 11, 2, f"CPU Usage: {self.metrics.cpu_usage:.2f}%")
            _put(window, 12, 2, f"Memory Usage: {self.metrics.memory_kb} kB")
        window.refresh()

    def run(self, stop_event: threading.Event) -> None:
        """Redraw every ``interval`` seconds until ``stop_event`` is set."""
        while not stop_event.is_set():
            self.draw()
            if stop_event.wait(self.interval):
                break