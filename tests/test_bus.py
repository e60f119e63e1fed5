"""Tests for SMBusRegisterBus error mapping."""

from unittest.mock import MagicMock

import pytest

from atmo_sensor import bus as bus_module
from atmo_sensor.bus import SensorIOError, SMBusRegisterBus


@pytest.fixture
def smbus():
    """Mock smbus2.SMBus handle."""
    handle = MagicMock()
    handle.read_byte_data.return_value = 0x60
    handle.read_i2c_block_data.return_value = [0x80, 0xBD, 0x00]
    return handle


class TestTransfers:
    """Successful transfers are passed through to smbus2."""

    def test_read_byte(self, smbus):
        bus = SMBusRegisterBus(smbus, 0x76)
        assert bus.read_byte(0xD0) == 0x60
        smbus.read_byte_data.assert_called_once_with(0x76, 0xD0)

    def test_read_bytes(self, smbus):
        bus = SMBusRegisterBus(smbus)
        assert bus.read_bytes(0xFA, 3) == b"\x80\xbd\x00"
        smbus.read_i2c_block_data.assert_called_once_with(0x77, 0xFA, 3)

    def test_write_byte(self, smbus):
        bus = SMBusRegisterBus(smbus)
        bus.write_byte(0xE0, 0xB6)
        smbus.write_byte_data.assert_called_once_with(0x77, 0xE0, 0xB6)


class TestFailures:
    """smbus2 OSErrors become SensorIOError."""

    def test_read_error(self, smbus):
        smbus.read_byte_data.side_effect = OSError(121, "Remote I/O error")
        bus = SMBusRegisterBus(smbus)
        with pytest.raises(SensorIOError) as exc_info:
            bus.read_byte(0xD0)
        assert exc_info.value.register == 0xD0
        assert "0xD0" in str(exc_info.value)

    def test_block_read_error(self, smbus):
        smbus.read_i2c_block_data.side_effect = OSError(5, "Input/output error")
        bus = SMBusRegisterBus(smbus)
        with pytest.raises(SensorIOError):
            bus.read_bytes(0x88, 2)

    def test_short_read(self, smbus):
        smbus.read_i2c_block_data.return_value = [0x01]
        bus = SMBusRegisterBus(smbus)
        with pytest.raises(SensorIOError, match="short read"):
            bus.read_bytes(0x88, 2)

    def test_write_error(self, smbus):
        smbus.write_byte_data.side_effect = OSError(121, "Remote I/O error")
        bus = SMBusRegisterBus(smbus)
        with pytest.raises(SensorIOError):
            bus.write_byte(0xF4, 0x27)

    def test_no_retry(self, smbus):
        smbus.read_byte_data.side_effect = OSError(121, "Remote I/O error")
        bus = SMBusRegisterBus(smbus)
        with pytest.raises(SensorIOError):
            bus.read_byte(0xD0)
        assert smbus.read_byte_data.call_count == 1

    def test_sensor_io_error_is_os_error(self):
        assert issubclass(SensorIOError, OSError)


class TestLifecycle:
    """Bus ownership and closing."""

    def test_borrowed_bus_not_closed(self, smbus):
        with SMBusRegisterBus(smbus):
            pass
        smbus.close.assert_not_called()

    def test_owned_bus_closed(self, monkeypatch):
        handle = MagicMock()
        factory = MagicMock(return_value=handle)
        monkeypatch.setattr(bus_module, "SMBus", factory)
        with SMBusRegisterBus(1, 0x77):
            pass
        factory.assert_called_once_with(1)
        handle.close.assert_called_once()

    @pytest.mark.parametrize("error", [
        FileNotFoundError(2, "No such file or directory", "/dev/i2c-99"),
        PermissionError(13, "Permission denied", "/dev/i2c-1"),
    ])
    def test_open_failure_raises_sensor_io_error(self, monkeypatch, error):
        monkeypatch.setattr(bus_module, "SMBus", MagicMock(side_effect=error))
        with pytest.raises(SensorIOError, match="cannot open I2C bus 99") as exc_info:
            SMBusRegisterBus(99, 0x77)
        assert exc_info.value.register is None
        assert exc_info.value.__cause__ is error

    def test_use_after_close(self, smbus):
        bus = SMBusRegisterBus(smbus)
        bus.close()
        with pytest.raises(RuntimeError, match="closed"):
            bus.read_byte(0xD0)
