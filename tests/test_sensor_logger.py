import re
from datetime import datetime, timedelta

import pytest

from jetcar.sensor import SensorData
from jetcar.sensor_logger import SensorLogger

_TIMESTAMP = r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3}"


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / "test_sensor_log.log"


@pytest.fixture
def sensor_data():
    data = SensorData("test_sensor", True)
    data.value = 100
    data.old_value = 50
    data.updated = True
    return data


def test_initialization_creates_log_file(log_path):
    with SensorLogger(log_path):
        pass
    assert log_path.exists()
    content = log_path.read_text()
    assert "Sensor Logging Session Started" in content
    assert "Sensor Logging Session Ended" in content


def test_log_sensor_update(log_path, sensor_data):
    with SensorLogger(log_path) as logger:
        logger.log_sensor_update(sensor_data)
    content = log_path.read_text()
    assert "Sensor: test_sensor" in content
    assert "Value: 100" in content
    assert "Old Value: 50" in content
    assert "Critical: Yes" in content


def test_log_error(log_path):
    with SensorLogger(log_path) as logger:
        logger.log_error("test_sensor", "Sensor reading out of range")
    content = log_path.read_text()
    assert "ERROR" in content
    assert "Sensor: test_sensor" in content
    assert "Error: Sensor reading out of range" in content


def test_skip_logging_if_value_unchanged(log_path):
    with SensorLogger(log_path) as logger:
        unchanged = SensorData("unchanged_sensor", False)
        unchanged.value = 75
        unchanged.old_value = 75
        logger.log_sensor_update(unchanged)
    assert "Sensor: unchanged_sensor" not in log_path.read_text()


def test_null_sensor_data_handling(log_path):
    with SensorLogger(log_path) as logger:
        logger.log_sensor_update(None)
    assert log_path.exists()
    assert log_path.read_text().count("Sensor:") == 0


def test_timestamp_format_is_correct(log_path, sensor_data):
    before = datetime.now()
    with SensorLogger(log_path) as logger:
        logger.log_sensor_update(sensor_data)
    content = log_path.read_text()
    stamps = re.findall(_TIMESTAMP, content)
    assert len(stamps) >= 3
    first = datetime.strptime(stamps[0], "%Y-%m-%d %H:%M:%S.%f")
    assert abs(first - before) < timedelta(minutes=5)


def test_multiple_log_entries(log_path, sensor_data):
    with SensorLogger(log_path) as logger:
        logger.log_sensor_update(sensor_data)
        second = SensorData("second_sensor", False)
        second.value = 200
        second.old_value = 150
        logger.log_sensor_update(second)
        logger.log_error("test_sensor", "Test error")
    content = log_path.read_text()
    assert "Sensor: test_sensor" in content
    assert "Value: 100" in content
    assert "Sensor: second_sensor" in content
    assert "Value: 200" in content
    assert "Old Value: 150" in content
    assert "Critical: No" in content
    assert "Error: Test error" in content


def test_appends_to_existing_file(log_path):
    log_path.write_text("existing line\n")
    with SensorLogger(log_path):
        pass
    content = log_path.read_text()
    assert content.startswith("existing line\n")
    assert content.count("Sensor Logging Session Started") == 1


def test_close_is_idempotent_and_stops_logging(log_path, sensor_data):
    logger = SensorLogger(log_path)
    logger.close()
    logger.close()
    logger.log_sensor_update(sensor_data)
    logger.log_error("test_sensor", "late")
    content = log_path.read_text()
    assert logger.closed is True
    assert content.count("Sensor Logging Session Ended") == 1
    assert "Sensor: test_sensor" not in content


def test_unopenable_path_raises(tmp_path):
    with pytest.raises(OSError, match="Failed to open log file"):
        SensorLogger(tmp_path / "missing_dir" / "log.log")