"""Threaded traffic intersection simulation with a curses dashboard."""

__version__ = "0.1.0"