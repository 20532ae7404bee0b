"""Drive motors and steering servo on the I2C PWM controllers, simulated."""

from __future__ import annotations

MOTOR_ADDRESS = 0x60
SERVO_ADDRESS = 0x40

PWM_MIN = 0
PWM_MAX = 4095
MAX_SPEED = 100
MOTOR_CHANNELS = 9

MAX_ANGLE = 90
SERVO_CENTER_PWM = 320
SERVO_LEFT_PWM = SERVO_CENTER_PWM - 150
SERVO_RIGHT_PWM = SERVO_CENTER_PWM + 150
STEERING_CHANNEL = 0


class I2CError(RuntimeError):
    """Raised when a transfer on the I2C bus fails."""


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


class _SimulatedI2CDevice:
    """Register storage and failure switch shared by the simulated devices."""

    def __init__(self) -> None:
        self._registers: dict[int, int] = {}
        self.initialized = False
        self.i2c_opened = False
        self.simulate_i2c_failure = False
        self.fd = 1

    def _open_bus(self) -> None:
        if self.simulate_i2c_failure:
            raise I2CError("Simulated I2C bus open failure")
        self.i2c_opened = True

    def _write_register(self, reg: int, value: int) -> None:
        if self.simulate_i2c_failure:
            raise I2CError("Simulated I2C write failure")
        self._registers[reg] = value

    def _read_register(self, reg: int) -> int:
        if self.simulate_i2c_failure:
            raise I2CError("Simulated I2C read failure")
        return self._registers.setdefault(reg, 0)

    @property
    def registers(self) -> dict[int, int]:
        """A copy of the register contents by address."""
        return dict(self._registers)


class SimulatedMotors(_SimulatedI2CDevice):
    """Rear drive motors on a PWM controller, kept in memory."""

    def __init__(self) -> None:
        super().__init__()
        self._pwm: dict[int, int] = {}
        self.current_speed = 0

    def open_i2c_bus(self) -> None:
        """Open the bus; raises I2CError when failures are simulated."""
        self._open_bus()

    def init_motors(self) -> bool:
        """Prepare the controller; return whether it succeeded."""
        if self.simulate_i2c_failure:
            return False
        self.initialized = True
        return True

    def set_motor_pwm(self, channel: int, value: int) -> bool:
        """Set a channel's duty, clamped to 0..4095; return whether it was set."""
        if self.simulate_i2c_failure:
            return False
        self._pwm[channel] = _clamp(value, PWM_MIN, PWM_MAX)
        return True

    def set_speed(self, speed: int) -> None:
        """Drive at a speed from -100 (full reverse) to 100 (full forward)."""
        speed = _clamp(speed, -MAX_SPEED, MAX_SPEED)
        self.current_speed = speed
        pwm = int(abs(speed) / 100.0 * PWM_MAX)

        if speed > 0:
            settings = {0: pwm, 1: 0, 2: pwm, 5: pwm, 6: 0, 7: pwm}
        elif speed < 0:
            settings = {0: pwm, 1: pwm, 2: 0, 5: 0, 6: pwm, 7: pwm}
        else:
            settings = {channel: 0 for channel in range(MOTOR_CHANNELS)}
        for channel, value in settings.items():
            self.set_motor_pwm(channel, value)

    def write_byte_data(self, reg: int, value: int) -> None:
        """Store one byte in a register."""
        self._write_register(reg, value)

    def read_byte_data(self, reg: int) -> int:
        """Return the byte in a register; an unwritten register reads 0."""
        return self._read_register(reg)

    def get_motor_pwm(self, channel: int) -> int:
        """Return a channel's duty; a channel never set reads 0."""
        return self._pwm.get(channel, 0)

    def clear_registers(self) -> None:
        """Forget every register value."""
        self._registers.clear()


class SimulatedServo(_SimulatedI2CDevice):
    """Front steering servo on a PWM controller, kept in memory."""

    def __init__(self) -> None:
        super().__init__()
        self._pwm: dict[int, tuple[int, int]] = {}
        self.angle = 0

    def open_i2c_bus(self) -> None:
        """Open the bus; raises I2CError when failures are simulated."""
        self._open_bus()

    def init_servo(self) -> bool:
        """Prepare the controller; return whether it succeeded."""
        if self.simulate_i2c_failure:
            return False
        self.initialized = True
        return True

    def set_servo_pwm(self, channel: int, on_value: int, off_value: int) -> bool:
        """Set a channel's on and off counts; return whether they were set."""
        if self.simulate_i2c_failure:
            return False
        self._pwm[channel] = (on_value, off_value)
        return True

    def set_steering(self, angle: int) -> None:
        """Steer to an angle; the pulse is limited to +-90 degrees."""
        self.angle = angle
        clamped = _clamp(angle, -MAX_ANGLE, MAX_ANGLE)
        if clamped < 0:
            span = SERVO_CENTER_PWM - SERVO_LEFT_PWM
        else:
            span = SERVO_RIGHT_PWM - SERVO_CENTER_PWM
        pwm = int(SERVO_CENTER_PWM + (clamped / MAX_ANGLE) * span)
        self.set_servo_pwm(STEERING_CHANNEL, 0, pwm)

    def write_byte_data(self, reg: int, value: int) -> None:
        """Store one byte in a register."""
        self._write_register(reg, value)

    def read_byte_data(self, reg: int) -> int:
        """Return the byte in a register; an unwritten register reads 0."""
        return self._read_register(reg)

    def get_servo_pwm(self, channel: int) -> tuple[int, int]:
        """Return a channel's (on, off) counts; a channel never set reads (0, 0)."""
        return self._pwm.get(channel, (0, 0))

    def clear_registers(self) -> None:
        """Forget every register value."""
        self._registers.clear()