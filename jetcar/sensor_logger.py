"""Append-only log file of sensor value changes and sensor errors."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from jetcar.sensor import SensorData

log = logging.getLogger(__name__)

DEFAULT_LOG_FILE = "sensor_updates.log"


def _timestamp() -> str:
    now = datetime.now()
    return f"{now:%Y-%m-%d %H:%M:%S}.{now.microsecond // 1000:03d}"


class SensorLogger:
    """Writes sensor updates and errors to a file, one line each."""

    def __init__(self, log_file_path: str | Path = DEFAULT_LOG_FILE) -> None:
        self._path = Path(log_file_path)
        self._lock = threading.Lock()
        try:
            self._file: Optional[TextIO] = open(self._path, "a", encoding="utf-8")
        except OSError as exc:
            raise OSError(f"Failed to open log file: {self._path}") from exc
        with self._lock:
            self._write(f"\n=== Sensor Logging Session Started at {_timestamp()} ===\n")

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._file is None

    def _write(self, text: str) -> None:
        assert self._file is not None
        self._file.write(text)
        self._file.flush()

    def log_sensor_update(self, sensor_data: Optional[SensorData]) -> None:
        """Log a reading, but only when its value has changed."""
        if sensor_data is None:
            return
        with self._lock:
            if self._file is None:
                log.error("Log file is not open")
                return
            if not sensor_data.changed:
                return
            critical = "Yes" if sensor_data.critical else "No"
            self._write(
                f"{_timestamp()} - Sensor: {sensor_data.name}, "
                f"Value: {sensor_data.value}, Old Value: {sensor_data.old_value}, "
                f"Critical: {critical}\n"
            )
        log.debug(
            "Logged update for sensor: %s (Value: %s, Old: %s)",
            sensor_data.name,
            sensor_data.value,
            sensor_data.old_value,
        )

    def log_error(self, sensor_name: str, error_message: str) -> None:
        """Log an error reported for a sensor."""
        with self._lock:
            if self._file is None:
                log.error("Log file is not open")
                return
            self._write(
                f"{_timestamp()} - ERROR - Sensor: {sensor_name}, "
                f"Error: {error_message}\n"
            )
        log.debug("Logged error for sensor: %s", sensor_name)

    def close(self) -> None:
        """Write the session end marker and close the file."""
        with self._lock:
            if self._file is None:
                return
            try:
                self._write(f"\n=== Sensor Logging Session Ended at {_timestamp()} ===\n")
            finally:
                self._file.close()
                self._file = None

    def __enter__(self) -> "SensorLogger":
        return self

    def __exit__(self, *args) -> None:
        self.close()