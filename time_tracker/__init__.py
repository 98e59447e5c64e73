"""Daily work-hours tracker with a per-day hours cap."""

__version__ = "1.0.0"
