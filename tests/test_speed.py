import time

import pytest

from jetcar.can import SimulatedCanReader
from jetcar.sensor import Sensor
from jetcar.speed import SpeedSensor


@pytest.fixture
def can_reader():
    return SimulatedCanReader()


@pytest.fixture
def speed(can_reader):
    return SpeedSensor(can_reader)


def _feed(reader, first_byte, second_byte=0, can_id=0x100):
    reader.set_receive_data([first_byte, second_byte, 0, 0, 0, 0, 0, 0])
    reader.set_should_receive(True)
    reader.set_can_id(can_id)


def test_initial_state(speed):
    data = speed.get_sensor_data()
    assert "speed" in data and "odo" in data
    assert data["speed"].value == 0
    assert data["odo"].value == 0
    assert data["speed"].critical is True
    assert data["odo"].critical is False


def test_get_name(speed):
    assert speed.name == "speed"
    assert isinstance(speed, Sensor) and speed.name == "speed"


def test_no_data_when_can_reader_returns_no_data(speed, can_reader):
    can_reader.set_should_receive(False)
    speed.update_sensor_data()
    data = speed.get_sensor_data()
    assert data["speed"].value == 0
    assert data["odo"].value == 0
    assert data["speed"].updated is False
    assert data["odo"].updated is False


def test_update_speed_from_can_data(speed, can_reader):
    _feed(can_reader, 100)
    speed.update_sensor_data()
    data = speed.get_sensor_data()
    assert data["speed"].value == 100
    assert data["speed"].updated is True
    assert data["odo"].updated is False
    assert data["speed"].old_value == 0


def test_calculate_odo_over_time(speed, can_reader):
    _feed(can_reader, 100)
    speed.update_sensor_data()
    time.sleep(0.1)
    _feed(can_reader, 110)
    speed.update_sensor_data()
    data = speed.get_sensor_data()
    assert data["speed"].value == 110
    assert data["speed"].updated is True
    assert data["odo"].value > 0
    assert data["odo"].updated is True
    assert data["speed"].old_value == 100


def test_ignore_invalid_can_id(speed, can_reader):
    _feed(can_reader, 100, can_id=0x200)
    speed.update_sensor_data()
    data = speed.get_sensor_data()
    assert data["speed"].value == 0
    assert data["speed"].updated is False


def test_handle_higher_speed_values(speed, can_reader):
    _feed(can_reader, 0x34, 0x12)
    speed.update_sensor_data()
    data = speed.get_sensor_data()
    assert data["speed"].value == 0x1234
    assert data["speed"].updated is True


def test_zero_speed(speed, can_reader):
    _feed(can_reader, 100)
    speed.update_sensor_data()
    _feed(can_reader, 0)
    speed.update_sensor_data()
    data = speed.get_sensor_data()
    assert data["speed"].value == 0
    assert data["speed"].old_value == 100


def test_long_distance_odo(speed, can_reader):
    _feed(can_reader, 200)
    speed.update_sensor_data()
    time.sleep(0.2)
    speed.update_sensor_data()
    data = speed.get_sensor_data()
    assert data["odo"].value > 0
    assert data["odo"].updated is True
    first_odo = data["odo"].value
    time.sleep(0.2)
    speed.update_sensor_data()
    assert speed.get_sensor_data()["odo"].value > first_odo


def test_odo_never_decreases(speed, can_reader):
    _feed(can_reader, 150)
    previous = 0
    for _ in range(4):
        speed.update_sensor_data()
        current = speed.get_sensor_data()["odo"].value
        assert current >= previous
        previous = current
        time.sleep(0.05)


def test_multiple_sequential_updates(speed, can_reader):
    _feed(can_reader, 10)
    speed.update_sensor_data()
    time.sleep(0.1)
    for value in range(20, 101, 20):
        _feed(can_reader, value)
        speed.update_sensor_data()
        data = speed.get_sensor_data()
        assert data["speed"].value == value
        assert data["speed"].updated is True
        time.sleep(0.1)
    assert speed.get_sensor_data()["odo"].value > 0