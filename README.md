# trafficsim

A small road-network simulation. Four intersections in a row, each with
four roads, are each run by their own traffic-light controller thread.
Other threads add regular and emergency vehicles, move vehicles between
connected roads of neighbouring intersections, watch the configuration
file for changes, sample CPU and memory use, and draw a live curses
dashboard.

## How it behaves

- Every road starts on `RED`. A controller first serves roads holding
  emergency vehicles (three seconds of green, one of yellow, then red),
  then gives green to every road with waiting vehicles. The green time
  is two seconds plus one for every five queued vehicles, at most five,
  and is halved (at least one second) for ten seconds after an emergency.
  If no light has changed for over twenty seconds, a road left green is
  taken through yellow to red.
- A road may not turn green while the road opposite it is green, or while
  another green road carries an emergency vehicle.
- When a road turns red, its queued vehicles count as having passed the
  intersection and are added to the running totals.
- Regular vehicles arrive on random roads, one per
  `vehicle_gen_interval`, up to 100 per road. An emergency vehicle
  arrives on a random road every 5 to 19 seconds, up to 5 per road.
- Every 0.5 to 1.5 seconds a random road is picked; if it is connected
  and its destination is not busy, a third of its vehicles (at least one)
  and all its emergency vehicles move on. Road 1 of each intersection
  feeds road 3 of the next one, and road 3 feeds road 1 of the previous
  one.
- Events are appended to `traffic_sim.log`, one line each, prefixed with
  a `[YYYY-MM-DD HH:MM:SS]` timestamp.

## Configuration

The simulation reads `config.txt` from the working directory. It holds
one `key=value` per line, in this order:

```
simulation_duration=60
num_intersections=4
num_roads=4
max_vehicles=100
max_emergency=5
vehicle_gen_interval=500000
emergency_gen_interval=10
scheduling_policy=0
```

Reading stops at the first line that does not match the expected key;
the remaining fields keep their defaults. `simulation_duration` is in
seconds and `vehicle_gen_interval` in microseconds. The file is checked
once a second while the simulation runs and reloaded when it changes; a
new `vehicle_gen_interval` takes effect at once.

## Running

Install the package and run, from a directory holding `config.txt`:

```
trafficsim
```

Options:

- `--config PATH` — configuration file (default `config.txt`)
- `--log PATH` — event log file (default `traffic_sim.log`)
- `--duration SECONDS` — run time, overriding `simulation_duration`
- `--no-display` — run without the curses dashboard
- `--seed N` — random seed for vehicle arrivals and movement

If the configuration file cannot be read, the command prints
`Failed to open config file: ...` and exits with status 1.

The dashboard shows every intersection's lights and queues, the running
totals, and CPU and memory use read from `/proc`. When the run is over,
the dashboard closes and a summary is printed:

```
=== Simulation Statistics ===
Total runtime: 60 seconds
Total vehicles processed: ...
Total emergency vehicles processed: ...
Intersection 0: ... vehicles (... emergency)
```

## Using it from Python

```python
from trafficsim.config import load_config
from trafficsim.model import LightState, TrafficNetwork, light_state_name

config = load_config("config.txt")
network = TrafficNetwork.build(4, 4)
road = network.road(0, 1)
print(road.is_connected(), light_state_name(LightState.RED))
```

`trafficsim.app.Simulation` wires all the threads together; call its
`run(duration)` method to run for a given number of seconds and get the
summary back as a string, or `start()` and `stop()` to control it
yourself. `TrafficLightController.run_cycle()`, and the `step()` methods
of `VehicleGenerator`, `EmergencyVehicleGenerator` and `VehicleMover` in
`trafficsim.traffic`, run one round of each worker without threads.

## Limits

- The command always builds four intersections of four roads. The
  `num_intersections`, `num_roads`, `max_vehicles`, `max_emergency`,
  `emergency_gen_interval` and `scheduling_policy` settings are read but
  do not change how the command runs.
- CPU and memory figures come from `/proc/stat` and `/proc/self/status`,
  so they are only shown on Linux. The dashboard needs the standard
  `curses` module; where it is missing, nothing of the package that
  imports it can be used.