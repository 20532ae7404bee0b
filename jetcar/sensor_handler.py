"""Reads sensors periodically and publishes their changed readings."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Mapping, Optional

from jetcar.messaging import Publisher
from jetcar.sensor import Sensor, SensorData
from jetcar.sensor_logger import DEFAULT_LOG_FILE, SensorLogger

log = logging.getLogger(__name__)

CRITICAL_UPDATE_INTERVAL = 0.05
NON_CRITICAL_UPDATE_INTERVAL = 0.2
SENSOR_READ_INTERVAL = 0.1
INIT_MESSAGE = "init;"


class SensorHandler:
    """Polls sensors and publishes critical and non-critical readings apart."""

    def __init__(
        self,
        critical_publisher: Publisher,
        non_critical_publisher: Publisher,
        sensors: Optional[Mapping[str, Sensor]] = None,
        log_file_path: str | Path = DEFAULT_LOG_FILE,
    ) -> None:
        self._critical_publisher = critical_publisher
        self._non_critical_publisher = non_critical_publisher
        self._logger = SensorLogger(log_file_path)

        self._sensors_lock = threading.Lock()
        self._critical_lock = threading.Lock()
        self._non_critical_lock = threading.Lock()
        self._data_ready = threading.Condition()
        self._stop_event = threading.Event()

        self._sensors: dict[str, Sensor] = dict(sensors or {})
        self._critical_data: dict[str, SensorData] = {}
        self._non_critical_data: dict[str, SensorData] = {}
        self._threads: dict[str, Optional[threading.Thread]] = {
            "read": None,
            "non_critical": None,
            "critical": None,
        }

        with self._sensors_lock:
            self._sort_sensor_data()

        self._critical_publisher.send(INIT_MESSAGE)
        self._non_critical_publisher.send(INIT_MESSAGE)

        with self._sensors_lock:
            for sensor in self._sensors.values():
                log.info("Sensor: %s", sensor.name)
                for data_name, data in sensor.get_sensor_data().items():
                    log.info("SensorData: %s", data_name)
                    self._logger.log_sensor_update(data)

    def add_sensor(self, name: str, sensor: Optional[Sensor]) -> None:
        """Add or replace a sensor; None removes the sensor of that name."""
        with self._sensors_lock:
            if sensor is None:
                if self._sensors.pop(name, None) is not None:
                    log.info("Removed sensor: %s", name)
            else:
                self._sensors[name] = sensor
                log.info("Added/updated sensor: %s", name)
            self._sort_sensor_data()

    def get_sensors(self) -> dict[str, Sensor]:
        """Return the sensors by name; the mapping is a copy."""
        with self._sensors_lock:
            return dict(self._sensors)

    def _sort_sensor_data(self) -> None:
        # The caller holds the sensors lock.
        critical: dict[str, SensorData] = {}
        non_critical: dict[str, SensorData] = {}
        for name, sensor in self._sensors.items():
            if sensor is None:
                log.warning("Null sensor in sensors map: %s", name)
                continue
            for data_name, data in sensor.get_sensor_data().items():
                if data is None:
                    log.warning("Null SensorData in sensor: %s, data: %s", name, data_name)
                    continue
                target = critical if data.critical else non_critical
                target.setdefault(data_name, data)
        with self._critical_lock, self._non_critical_lock:
            self._critical_data = critical
            self._non_critical_data = non_critical

    def start(self) -> None:
        """Send the init messages and start any worker that is not running."""
        was_stopped = self._stop_event.is_set()
        self._stop_event.clear()
        log.debug("SensorHandler.start() called, was_stopped=%s", was_stopped)

        self._critical_publisher.send(INIT_MESSAGE)
        self._non_critical_publisher.send(INIT_MESSAGE)

        targets: dict[str, Callable[[], None]] = {
            "read": self._read_sensors,
            "non_critical": self._publish_non_critical,
            "critical": self._publish_critical,
        }
        for key, target in targets.items():
            thread = self._threads[key]
            if thread is not None and thread.is_alive():
                continue
            thread = threading.Thread(
                target=target, name=f"sensor-handler-{key}", daemon=True
            )
            self._threads[key] = thread
            thread.start()

    def stop(self) -> None:
        """Stop the workers and wait for them to finish."""
        self._stop_event.set()
        with self._data_ready:
            self._data_ready.notify_all()
        for key, thread in self._threads.items():
            if thread is not None:
                log.debug("Joining %s thread", key)
                thread.join()
                self._threads[key] = None

    def _read_sensors(self) -> None:
        while not self._stop_event.is_set():
            with self._sensors_lock:
                for sensor in self._sensors.values():
                    try:
                        sensor.update_sensor_data()
                    except Exception as exc:  # a failing sensor must not stop the loop
                        log.error("Error updating sensor [%s]: %s", sensor.name, exc)
                        self._logger.log_error(sensor.name, str(exc))
            with self._data_ready:
                self._data_ready.notify_all()
            self._stop_event.wait(SENSOR_READ_INTERVAL)

    def _publish_loop(
        self, snapshot: Callable[[], list[SensorData]], interval: float
    ) -> None:
        while not self._stop_event.is_set():
            with self._data_ready:
                self._data_ready.wait(interval)
            if self._stop_event.is_set():
                break
            for data in snapshot():
                if data is not None and data.updated:
                    self.publish_sensor_data(data)

    def _critical_snapshot(self) -> list[SensorData]:
        with self._critical_lock:
            return list(self._critical_data.values())

    def _non_critical_snapshot(self) -> list[SensorData]:
        with self._non_critical_lock:
            return list(self._non_critical_data.values())

    def _publish_critical(self) -> None:
        self._publish_loop(self._critical_snapshot, CRITICAL_UPDATE_INTERVAL)

    def _publish_non_critical(self) -> None:
        self._publish_loop(self._non_critical_snapshot, NON_CRITICAL_UPDATE_INTERVAL)

    def publish_sensor_data(self, sensor_data: Optional[SensorData]) -> None:
        """Send a reading as "name:value;" to the publisher for its kind."""
        if sensor_data is None:
            log.warning("Attempted to publish null SensorData")
            return
        message = f"{sensor_data.name}:{sensor_data.value};"
        try:
            if sensor_data.critical:
                log.debug("Publishing critical data: %s", message)
                self._critical_publisher.send(message)
            else:
                log.debug("Publishing non-critical data: %s", message)
                self._non_critical_publisher.send(message)
            self._logger.log_sensor_update(sensor_data)
        except Exception as exc:  # publishing errors are logged, not raised
            log.error("Error publishing sensor data: %s", exc)
            self._logger.log_error(sensor_data.name, f"Error publishing data: {exc}")

    def __enter__(self) -> "SensorHandler":
        return self

    def __exit__(self, *args) -> None:
        self.stop()
        self._logger.close()