"""Register-addressed bus access for the BME280."""

import logging
from abc import ABC, abstractmethod

from smbus2 import SMBus

from .registers import ADDRESS_DEFAULT

logger = logging.getLogger(__name__)


class SensorIOError(IOError):
    """
    A register transaction with the sensor did not complete.

    register is None when the bus itself could not be opened.
    """

    def __init__(self, register: int | None, message: str):
        if register is None:
            super().__init__(message)
        else:
            super().__init__(f"register 0x{register:02X}: {message}")
        self.register = register


class RegisterBus(ABC):
    """
    Abstract byte-level register access for a single device.

    Implementations block until the transfer completes and raise
    SensorIOError when it does not. No retries are attempted here;
    callers decide whether to repeat the whole operation.
    """

    @abstractmethod
    def read_byte(self, register: int) -> int:
        """
        Read one register.

        Args:
            register: Register address

        Returns:
            Register value (0-255)
        """
        pass

    @abstractmethod
    def read_bytes(self, register: int, length: int) -> bytes:
        """
        Read consecutive registers in a single burst transfer.

        Args:
            register: Address of the first register
            length: Number of registers to read

        Returns:
            Exactly `length` bytes
        """
        pass

    @abstractmethod
    def write_byte(self, register: int, value: int) -> None:
        """
        Write one register.

        Args:
            register: Register address
            value: Byte to write (0-255)
        """
        pass

    def close(self) -> None:
        """Release the underlying bus. Override if the bus holds a handle."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class SMBusRegisterBus(RegisterBus):
    """
    RegisterBus over a Linux I2C adapter using smbus2.

    Wiring (BME280 breakout to Pi):
        VIN -> 3.3V
        GND -> GND
        SCL -> GPIO 3 (SCL1)
        SDA -> GPIO 2 (SDA1)
        SDO -> 3.3V for 0x77, GND for 0x76
    """

    def __init__(self, smbus: int | SMBus = 1, address: int = ADDRESS_DEFAULT):
        """
        Args:
            smbus: I2C bus number, or an already open SMBus instance
            address: 7-bit device address

        Raises:
            SensorIOError: If the I2C adapter cannot be opened
        """
        if isinstance(smbus, int):
            try:
                self._bus = SMBus(smbus)
            except OSError as e:
                logger.error(f"Failed to open I2C bus {smbus}: {e}")
                raise SensorIOError(None, f"cannot open I2C bus {smbus}: {e}") from e
            self._owns_bus = True
        else:
            self._bus = smbus
            self._owns_bus = False
        self._address = address

    @property
    def address(self) -> int:
        return self._address

    def _require_open(self) -> None:
        if self._bus is None:
            raise RuntimeError("Bus is closed.")

    def read_byte(self, register: int) -> int:
        self._require_open()
        try:
            return self._bus.read_byte_data(self._address, register)
        except OSError as e:
            logger.error(f"Read of 0x{register:02X} from device 0x{self._address:02X} failed: {e}")
            raise SensorIOError(register, str(e)) from e

    def read_bytes(self, register: int, length: int) -> bytes:
        self._require_open()
        try:
            data = self._bus.read_i2c_block_data(self._address, register, length)
        except OSError as e:
            logger.error(
                f"Burst read of {length} bytes at 0x{register:02X} from device "
                f"0x{self._address:02X} failed: {e}"
            )
            raise SensorIOError(register, str(e)) from e
        if len(data) != length:
            raise SensorIOError(register, f"short read ({len(data)} of {length} bytes)")
        return bytes(data)

    def write_byte(self, register: int, value: int) -> None:
        self._require_open()
        try:
            self._bus.write_byte_data(self._address, register, value & 0xFF)
        except OSError as e:
            logger.error(f"Write of 0x{register:02X} on device 0x{self._address:02X} failed: {e}")
            raise SensorIOError(register, str(e)) from e

    def close(self) -> None:
        if self._bus is not None and self._owns_bus:
            self._bus.close()
        self._bus = None
