"""Treat relay: fires an actuator when a watched account receives a transfer."""

__version__ = "0.1.0"
