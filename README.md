# jetcar

A library for the middleware of a small car. It reads sensors in the
background and publishes their changed values as short text messages over
ZeroMQ. It also simulates the car's drive motors, steering servo and battery.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `jetcar.sensor`
  - `SensorData` holds one named reading. Its fields are `name`, `critical`,
    `value`, `old_value`, `timestamp` and `updated`.
  - `store(value)` moves the current value into `old_value` before it takes
    the new one.
  - `changed` tells whether `value` differs from `old_value`.
  - `Sensor` is the abstract base for sensors. It has a `name`, and
    `get_sensor_data()` returns a copy of its readings by name. Subclasses
    implement `update_sensor_data()`.
- `jetcar.speed`
  - `SpeedSensor(can_reader)` has two readings: `speed` (critical) and `odo`
    (non-critical).
  - On each update it takes a frame from the CAN reader, if one is waiting.
    Frames with ID `0x100` are used and the others are ignored. The speed is
    the first two payload bytes, little-endian, in km/h.
  - The odometer adds up speed × elapsed time, in metres.
- `jetcar.can`
  - `CanReader` is the abstract interface for CAN sources: `init()`,
    `send(can_id, data)`, `receive()` (the payload, or `None`) and `get_id()`.
  - `SimulatedCanReader` hands out a frame that you set up with
    `set_receive_data`, `set_can_id` and `set_should_receive`. It records sent
    frames in `sent_frames`.
  - The controller's registers, bit rates and SPI commands are available as
    the enums `Register`, `CanBitrate` and `SpiCommand`.
- `jetcar.battery`
  - `BatteryReader` is the abstract interface for battery readings: `voltage`,
    `shunt`, `percentage`, `charging`, `read_adc(reg)` and `read_charge()`.
  - `SimulatedBatteryReader` is a dataclass whose readings you set directly.
    `read_adc` returns the matching raw value for the shunt register (`0x01`)
    and the bus voltage register (`0x02`).
- `jetcar.actuators`
  - `SimulatedMotors` keeps PWM and register values in memory.
    `set_speed(-100..100)` sets the drive channels, and PWM values are clamped
    to 0..4095.
  - `SimulatedServo` keeps PWM and register values in memory.
    `set_steering(angle)` sets channel 0 to an off count between 170 and 470,
    with the angle limited to ±90.
  - If you set `simulate_i2c_failure`, opening the bus or accessing a register
    raises `I2CError`, and the init and PWM calls return `False`.
- `jetcar.messaging`
  - `Publisher` is the abstract base with `send(message)`.
  - `ZmqPublisher(address, context=None, test_mode=False)` binds a PUB socket.
  - `ZmqSubscriber(address, context=None, test_mode=False)` connects a SUB
    socket that is subscribed to everything. `receive(timeout_ms=0)` returns
    the next message, or `""` when nothing arrives.
  - Both sockets keep only the newest message. An empty message travels as a
    marker and comes back as `""`. Errors are logged, not raised.
  - In test mode no socket is opened. The subscriber returns whatever was set
    with `set_test_message`.
  - Both classes have `close()` and work as context managers.
  - `RecordingPublisher` keeps every message it is sent, in `messages`. It also
    has `has_message` and `clear`.
- `jetcar.sensor_handler`
  - `SensorHandler(critical_publisher, non_critical_publisher, sensors=None, log_file_path="sensor_updates.log")`
    sends `init;` to both publishers when it is created.
  - `start()` sends `init;` again and starts three background threads:
    - sensors are read every 100 ms;
    - critical readings whose `updated` flag is set are published every 50 ms;
    - non-critical readings whose `updated` flag is set are published every
      200 ms.
  - Each reading goes out as `name:value;`. Sensor errors and value changes
    are written to the log.
  - `add_sensor(name, sensor)` adds or replaces a sensor, and `None` removes
    it. `get_sensors()` returns a copy of the sensors by name. `stop()` joins
    the threads.
  - As a context manager it also closes its log on exit.
- `jetcar.sensor_logger`
  - `SensorLogger(log_file_path="sensor_updates.log")` appends session start
    and end markers to the file.
  - It writes a line for each reading whose value changed, and a line for
    each error. Every line starts with a timestamp of the form
    `YYYY-MM-DD HH:MM:SS.mmm`.

## Example

```python
import time

from jetcar.can import SimulatedCanReader
from jetcar.messaging import RecordingPublisher
from jetcar.sensor_handler import SensorHandler
from jetcar.speed import SpeedSensor

can = SimulatedCanReader()
can.set_can_id(0x100)
can.set_receive_data([100, 0, 0, 0, 0, 0, 0, 0])
can.set_should_receive(True)

critical = RecordingPublisher()
non_critical = RecordingPublisher()

with SensorHandler(
    critical,
    non_critical,
    sensors={"speed": SpeedSensor(can)},
    log_file_path="sensor_updates.log",
) as handler:
    handler.start()
    time.sleep(0.5)

print(critical.has_message("speed:100;"))  # True
```

To publish over the network, pass `ZmqPublisher` instances, for example bound
to `tcp://127.0.0.1:5555`, in place of the recording publishers.

## What the package does not do

- It does not talk to real hardware. Motors, servo, battery and CAN bus are
  simulated only. The CAN and battery interfaces are there for you to
  implement against a real bus.
- There is no battery sensor for `SensorHandler`. You would write one as a
  `Sensor` subclass.
- Nothing receives throttle or steering commands and applies them to the
  actuators.
- There is no command-line program. You build and run a `SensorHandler` from
  your own code.