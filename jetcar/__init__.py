"""Sensor middleware for a small car: speed sensing, simulated devices, ZeroMQ publishing."""

__version__ = "1.0.0"