"""Vehicle speed and odometer readings taken from CAN frames."""

from __future__ import annotations

import logging
import time

from jetcar.can import DEFAULT_CAN_ID, CanReader
from jetcar.sensor import Sensor, SensorData

log = logging.getLogger(__name__)

SPEED_CAN_ID = DEFAULT_CAN_ID
_KMH_TO_MS = 5.0 / 18.0
_UINT32_MASK = 0xFFFFFFFF


class SpeedSensor(Sensor):
    """Speed (critical) and odometer (non-critical) readings from the CAN bus."""

    def __init__(self, can_reader: CanReader) -> None:
        super().__init__(
            "speed",
            [SensorData("speed", True), SensorData("odo", False)],
        )
        self._can = can_reader

    @property
    def _speed(self) -> SensorData:
        return self._sensor_data["speed"]

    @property
    def _odo(self) -> SensorData:
        return self._sensor_data["odo"]

    def get_sensor_data(self) -> dict[str, SensorData]:
        """Return the speed and odometer readings by name."""
        return super().get_sensor_data()

    def update_sensor_data(self) -> None:
        """Read a frame if one is waiting and refresh speed and odometer."""
        with self._lock:
            self._read_sensor()
            # Flags set while reading must survive the change check below.
            speed_updated = self._speed.updated
            odo_updated = self._odo.updated
            for reading in self._sensor_data.values():
                reading.refresh_updated()
            if speed_updated:
                self._speed.updated = True
            if odo_updated:
                self._odo.updated = True

    def _read_sensor(self) -> None:
        frame = self._can.receive()
        if frame is None:
            return
        can_id = self._can.get_id()
        if can_id != SPEED_CAN_ID:
            log.warning("Invalid CAN ID: %x", can_id)
            return
        low, high = (bytes(frame) + bytes(2))[:2]
        speed = self._speed
        speed.store(low | (high << 8))
        speed.timestamp = time.monotonic()
        speed.updated = True
        self._calculate_odo()

    def _calculate_odo(self) -> None:
        odo = self._odo
        previous = odo.value
        odo.old_value = previous
        last_time = odo.timestamp
        odo.timestamp = time.monotonic()
        elapsed = odo.timestamp - last_time
        distance = int(self._speed.value * _KMH_TO_MS * elapsed)
        odo.value = (previous + distance) & _UINT32_MASK
        if distance > 0:
            odo.updated = True