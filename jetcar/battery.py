"""Battery voltage, shunt and charge readings, with a simulated reader."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

I2C_BUS = 1
ADC_ADDRESS = 0x41

SHUNT_REGISTER = 0x01
BUS_VOLTAGE_REGISTER = 0x02

ADC_REF = 3.3
ADC_MAX = 65535
VOLTAGE_DIVIDER = 17.0
MAX_VOLTAGE = 12.6
MIN_VOLTAGE = 9.0

_SHUNT_VOLTS_PER_BIT = 1e-5
_BUS_VOLTS_PER_BIT = 0.004


class BatteryReader(ABC):
    """A source of raw and derived battery readings."""

    @abstractmethod
    def read_adc(self, reg: int) -> int:
        """Return the raw value of an ADC register."""

    @abstractmethod
    def read_charge(self) -> int:
        """Return 1 while the battery is charging, otherwise 0."""

    @property
    @abstractmethod
    def voltage(self) -> float:
        """Battery voltage in volts."""

    @property
    @abstractmethod
    def shunt(self) -> float:
        """Voltage across the shunt resistor in volts."""

    @property
    @abstractmethod
    def percentage(self) -> int:
        """State of charge from 0 to 100."""

    @property
    @abstractmethod
    def charging(self) -> bool:
        """Whether the battery is charging."""


@dataclass
class SimulatedBatteryReader(BatteryReader):
    """A battery reader whose readings are set directly."""

    voltage: float = 12.0
    shunt: float = 0.0
    percentage: int = 80
    charging: bool = False

    def read_adc(self, reg: int) -> int:
        """Return the raw register value that matches the set readings."""
        if reg == SHUNT_REGISTER:
            return int(self.shunt / _SHUNT_VOLTS_PER_BIT)
        if reg == BUS_VOLTAGE_REGISTER:
            return int(self.voltage / _BUS_VOLTS_PER_BIT)
        return 0

    def read_charge(self) -> int:
        return 1 if self.charging else 0