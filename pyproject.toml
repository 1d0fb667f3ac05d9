[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "trafficsim"
version = "0.1.0"
description = "Multi-threaded traffic intersection simulation with a curses dashboard"
requires-python = ">=3.10"
dependencies = []
keywords = ["traffic", "simulation", "threads", "curses", "intersection"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console :: Curses",
    "Intended Audience :: Education",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
trafficsim = "trafficsim.app:main"

[tool.hatch.build.targets.wheel]
packages = ["trafficsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
