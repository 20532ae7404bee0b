"""Sensor readings and the common base class for sensors."""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable


@dataclass
class SensorData:
    """One named reading of a sensor, together with its previous value."""

    name: str
    critical: bool
    value: int = 0
    old_value: int = 0
    timestamp: float = field(default_factory=time.monotonic)
    updated: bool = False

    @property
    def changed(self) -> bool:
        """Whether the current value differs from the previous one."""
        return self.value != self.old_value

    def store(self, value: int) -> None:
        """Keep the current value as the old one and take a new value."""
        self.old_value = self.value
        self.value = value

    def refresh_updated(self) -> None:
        """Set the updated flag from whether the value changed."""
        self.updated = self.changed


class Sensor(ABC):
    """A named source of one or more readings."""

    def __init__(self, name: str, readings: Iterable[SensorData]) -> None:
        self._name = name
        self._sensor_data = {reading.name: reading for reading in readings}
        self._lock = threading.RLock()

    @property
    def name(self) -> str:
        return self._name

    def get_sensor_data(self) -> dict[str, SensorData]:
        """Return the readings by name; the mapping is a copy."""
        with self._lock:
            return dict(self._sensor_data)

    @abstractmethod
    def update_sensor_data(self) -> None:
        """Read the hardware and refresh the readings."""