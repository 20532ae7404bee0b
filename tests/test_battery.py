import pytest

from jetcar.battery import (
    BUS_VOLTAGE_REGISTER,
    SHUNT_REGISTER,
    BatteryReader,
    SimulatedBatteryReader,
)


def test_defaults():
    reader = SimulatedBatteryReader()
    assert reader.voltage == 12.0
    assert reader.shunt == 0.0
    assert reader.percentage == 80
    assert reader.charging is False


def test_read_charge_follows_charging():
    reader = SimulatedBatteryReader()
    assert reader.read_charge() == 0
    reader.charging = True
    assert reader.read_charge() == 1
    reader.charging = False
    assert reader.read_charge() == 0


@pytest.mark.parametrize("voltage", [9.0, 10.0, 11.0, 12.0])
def test_bus_voltage_round_trip(voltage):
    reader = SimulatedBatteryReader(voltage=voltage)
    raw = reader.read_adc(BUS_VOLTAGE_REGISTER)
    assert raw / 250 == pytest.approx(voltage, abs=0.004)


@pytest.mark.parametrize("shunt", [0.0, 0.01, 0.05])
def test_shunt_round_trip(shunt):
    reader = SimulatedBatteryReader(shunt=shunt)
    raw = reader.read_adc(SHUNT_REGISTER)
    assert raw / 100000 == pytest.approx(shunt, abs=1e-5)


def test_zero_shunt_reads_zero():
    assert SimulatedBatteryReader().read_adc(SHUNT_REGISTER) == 0


@pytest.mark.parametrize("reg", [0x00, 0x03, 0x05, 0xFF])
def test_other_registers_read_zero(reg):
    assert SimulatedBatteryReader(voltage=11.5, shunt=0.02).read_adc(reg) == 0


def test_higher_voltage_reads_higher():
    low = SimulatedBatteryReader(voltage=9.5).read_adc(BUS_VOLTAGE_REGISTER)
    high = SimulatedBatteryReader(voltage=12.5).read_adc(BUS_VOLTAGE_REGISTER)
    assert high > low


def test_readings_can_be_changed():
    reader = SimulatedBatteryReader()
    reader.percentage = 55
    reader.voltage = 10.5
    assert reader.percentage == 55
    assert reader.voltage == 10.5


def test_interface_cannot_be_instantiated():
    with pytest.raises(TypeError):
        BatteryReader()