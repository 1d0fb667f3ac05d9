"""Running the simulation: worker threads, display and final report."""

from __future__ import annotations

import argparse
import random
import sys
import threading
import time

from .config import ConfigWatcher
from .gui import CursesDisplay
from .logger import EventLogger
from .model import TrafficNetwork
from .monitoring import PerformanceMonitor
from .scheduler import TrafficLightController
from .traffic import EmergencyVehicleGenerator, VehicleGenerator, VehicleMover


class Simulation:
    """A traffic network with its controllers, generators and monitors."""

    def __init__(self, config_path="config.txt", log_path="traffic_sim.log", display=True, seed=None):
        self.logger = EventLogger(log_path)
        self.watcher = ConfigWatcher(config_path, logger=self.logger, on_reload=self._apply_config)
        self.config = self.watcher.config
        self.network = TrafficNetwork.build()
        rng = random.Random(seed)
        self.controllers = [
            TrafficLightController(self.network, x.id, logger=self.logger)
            for x in self.network.intersections
        ]
        self.vehicle_generator = VehicleGenerator(
            self.network, logger=self.logger,
            interval=max(self.config.vehicle_gen_interval, 0) / 1_000_000,
            rng=random.Random(rng.random()),
        )
        self.emergency_generator = EmergencyVehicleGenerator(
            self.network, logger=self.logger, rng=random.Random(rng.random())
        )
        self.mover = VehicleMover(self.network, logger=self.logger, rng=random.Random(rng.random()))
        self.display = CursesDisplay(self.network) if display else None
        self.monitor = PerformanceMonitor(on_sample=self._show_metrics)
        self._stop = threading.Event()
        self._threads = []

    def _apply_config(self, config) -> None:
        self.config = config
        self.vehicle_generator.interval = max(config.vehicle_gen_interval, 0) / 1_000_000

    def _show_metrics(self, metrics) -> None:
        if self.display is not None:
            self.display.metrics = metrics

    def start(self) -> None:
        """Open the display and start every worker thread."""
        if self._threads:
            raise RuntimeError("simulation already started")
        self._stop.clear()
        self.network.stats.start_time = time.time()
        workers = [*self.controllers, self.vehicle_generator, self.emergency_generator,
                   self.mover, self.monitor, self.watcher]
        if self.display is not None:
            self.display.open()
            workers.append(self.display)
        self._threads = [
            threading.Thread(target=w.run, args=(self._stop,), daemon=True) for w in workers
        ]
        for thread in self._threads:
            thread.start()

    def stop(self) -> None:
        """Stop every worker and close the display."""
        self._stop.set()
        for thread in self._threads:
            thread.join(5.0)
        self._threads = []
        if self.display is not None:
            self.display.close()

    def run(self, duration=None) -> str:
        """Run for ``duration`` seconds (configured time by default); return the report."""
        if duration is None:
            duration = self.config.simulation_duration
        self.start()
        try:
            self._stop.wait(max(duration, 0))
        finally:
            self.stop()
        return self.network.format_statistics(time.time())


def main(argv=None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="Multi-intersection traffic simulation.")
    parser.add_argument("--config", default="config.txt", help="configuration file")
    parser.add_argument("--log", default="traffic_sim.log", help="event log file")
    parser.add_argument("--duration", type=float, help="seconds to run")
    parser.add_argument("--no-display", action="store_true", help="run without the terminal display")
    parser.add_argument("--seed", type=int, help="random seed")
    args = parser.parse_args(argv)
    try:
        simulation = Simulation(args.config, args.log, display=not args.no_display, seed=args.seed)
    except OSError as exc:
        print(f"Failed to open config file: {exc}", file=sys.stderr)
        return 1
    print(simulation.run(args.duration), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())