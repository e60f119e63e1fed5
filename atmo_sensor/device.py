"""BME280 sensor facade: configuration, raw reads and compensated measurements."""

import logging
from dataclasses import dataclass

from . import registers
from .bitfield import assemble_16bit, assemble_20bit, read_bits, update_bits
from .bus import RegisterBus, SMBusRegisterBus
from .calibration import CalibrationSet, read_calibration
from .compensation import (
    compensate_humidity,
    compensate_pressure,
    compensate_temperature,
    humidity_relative,
    pressure_pascal,
    temperature_celsius,
)
from .settings import (
    Address,
    Filter,
    Mode,
    Oversampling,
    SensorSettings,
    StandbyTime,
)

logger = logging.getLogger(__name__)

# (register, mask, shift) of each control field
_MODE_FIELD = (registers.CTRL_MEAS_REG, 0x03, 0)
_PRESSURE_OS_FIELD = (registers.CTRL_MEAS_REG, 0x1C, 2)
_TEMPERATURE_OS_FIELD = (registers.CTRL_MEAS_REG, 0xE0, 5)
_HUMIDITY_OS_FIELD = (registers.CTRL_HUMIDITY_REG, 0x07, 0)
_FILTER_FIELD = (registers.CONFIG_REG, 0x1C, 2)
_STANDBY_FIELD = (registers.CONFIG_REG, 0xE0, 5)


@dataclass(frozen=True)
class Measurement:
    """One compensated reading of all three channels."""

    temperature: float  # °C
    pressure: float  # Pa
    humidity: float  # %RH
    t_fine: int


class AtmosphericSensor:
    """
    A BME280 session: one bus, one immutable calibration set.

    Not thread-safe. Callers sharing a sensor between threads or processes
    must serialize access to the whole session.
    """

    def __init__(self, bus: RegisterBus):
        """
        Decode the calibration coefficients from the device.

        Args:
            bus: Register access for the sensor

        Raises:
            SensorIOError: If any calibration read fails
        """
        self._bus = bus
        self._calibration = read_calibration(bus)

    @classmethod
    def build(cls, bus: RegisterBus, settings: SensorSettings | None = None) -> "AtmosphericSensor":
        """Create a sensor and start measuring with the given settings."""
        sensor = cls(bus)
        sensor.start(settings)
        return sensor

    @property
    def bus(self) -> RegisterBus:
        return self._bus

    @property
    def calibration(self) -> CalibrationSet:
        return self._calibration

    # -------------------------------------------------------------------------
    # Device control
    # -------------------------------------------------------------------------

    def start(self, settings: SensorSettings | None = None) -> None:
        """
        Write the full measurement configuration, mode last.

        ctrl_hum only takes effect after the following ctrl_meas write, so
        humidity oversampling is written before temperature and pressure.
        """
        if settings is None:
            settings = SensorSettings()
        self.set_standby_time(settings.standby_time)
        self.set_filter(settings.filter)
        self.set_humidity_oversample(settings.humidity_oversampling)
        self.set_temperature_oversample(settings.temperature_oversampling)
        self.set_pressure_oversample(settings.pressure_oversampling)
        self.set_mode(settings.mode)
        logger.info(f"Sensor started: {settings.to_dict()}")

    def stop(self) -> None:
        self.set_mode(Mode.SLEEP)

    def reset(self) -> None:
        """Soft reset. The device reloads its NVM; calibration stays valid."""
        self._bus.write_byte(registers.RST_REG, registers.SOFT_RESET)

    def get_chip_id(self) -> int:
        return self._bus.read_byte(registers.CHIP_ID_REG)

    def _get_status(self) -> int:
        return self._bus.read_byte(registers.STAT_REG)

    def is_measuring(self) -> bool:
        """True while a conversion is running."""
        return bool(self._get_status() & registers.STATUS_MEASURING)

    def is_updating(self) -> bool:
        """True while NVM data is being copied to the image registers."""
        return bool(self._get_status() & registers.STATUS_IM_UPDATE)

    def _set_field(self, field: tuple[int, int, int], value: int) -> None:
        register, mask, shift = field
        written = update_bits(self._bus, register, mask, shift, value)
        logger.debug(f"Register 0x{register:02X} <- 0x{written:02X}")

    def _get_field(self, field: tuple[int, int, int]) -> int:
        return read_bits(self._bus, *field)

    def set_mode(self, mode: Mode) -> None:
        self._set_field(_MODE_FIELD, Mode.parse(mode))

    def get_mode(self) -> Mode:
        return Mode.from_bits(self._get_field(_MODE_FIELD))

    def set_temperature_oversample(self, rate: Oversampling) -> None:
        self._set_field(_TEMPERATURE_OS_FIELD, Oversampling.parse(rate))

    def set_pressure_oversample(self, rate: Oversampling) -> None:
        self._set_field(_PRESSURE_OS_FIELD, Oversampling.parse(rate))

    def set_humidity_oversample(self, rate: Oversampling) -> None:
        self._set_field(_HUMIDITY_OS_FIELD, Oversampling.parse(rate))

    def set_standby_time(self, standby: StandbyTime) -> None:
        self._set_field(_STANDBY_FIELD, StandbyTime.parse(standby))

    def set_filter(self, filter: Filter) -> None:
        self._set_field(_FILTER_FIELD, Filter.parse(filter))

    def get_settings(self) -> SensorSettings:
        """Read the configuration currently held by the device."""
        return SensorSettings(
            mode=Mode.from_bits(self._get_field(_MODE_FIELD)),
            temperature_oversampling=Oversampling.from_bits(self._get_field(_TEMPERATURE_OS_FIELD)),
            pressure_oversampling=Oversampling.from_bits(self._get_field(_PRESSURE_OS_FIELD)),
            humidity_oversampling=Oversampling.from_bits(self._get_field(_HUMIDITY_OS_FIELD)),
            standby_time=StandbyTime.from_bits(self._get_field(_STANDBY_FIELD)),
            filter=Filter.from_bits(self._get_field(_FILTER_FIELD)),
        )

    # -------------------------------------------------------------------------
    # Raw samples
    # -------------------------------------------------------------------------

    def read_raw_temperature(self) -> int:
        msb, lsb, xlsb = self._bus.read_bytes(registers.TEMPERATURE_MSB_REG, 3)
        return assemble_20bit(msb, lsb, xlsb)

    def read_raw_pressure(self) -> int:
        msb, lsb, xlsb = self._bus.read_bytes(registers.PRESSURE_MSB_REG, 3)
        return assemble_20bit(msb, lsb, xlsb)

    def read_raw_humidity(self) -> int:
        msb, lsb = self._bus.read_bytes(registers.HUMIDITY_MSB_REG, 2)
        return assemble_16bit(msb, lsb)

    # -------------------------------------------------------------------------
    # Compensated values
    # -------------------------------------------------------------------------

    def _read_t_fine(self) -> int:
        return compensate_temperature(self.read_raw_temperature(), self._calibration.temperature)

    def measure(self) -> Measurement:
        """
        Run one measurement cycle.

        Temperature is compensated first and its t_fine is used for the
        pressure and humidity of the same cycle.
        """
        t_fine = self._read_t_fine()
        pressure = compensate_pressure(
            self.read_raw_pressure(), t_fine, self._calibration.pressure
        )
        humidity = compensate_humidity(
            self.read_raw_humidity(), t_fine, self._calibration.humidity
        )
        return Measurement(
            temperature=temperature_celsius(t_fine),
            pressure=pressure_pascal(pressure),
            humidity=humidity_relative(humidity),
            t_fine=t_fine,
        )

    def get_temperature_celsius(self) -> float:
        return temperature_celsius(self._read_t_fine())

    def get_pressure_pascal(self) -> float:
        t_fine = self._read_t_fine()
        return pressure_pascal(
            compensate_pressure(self.read_raw_pressure(), t_fine, self._calibration.pressure)
        )

    def get_humidity_relative(self) -> float:
        t_fine = self._read_t_fine()
        return humidity_relative(
            compensate_humidity(self.read_raw_humidity(), t_fine, self._calibration.humidity)
        )

    def close(self) -> None:
        self._bus.close()


def open_sensor(
    smbus: int = 1,
    address: int = Address.DEFAULT,
    settings: SensorSettings | None = None,
) -> AtmosphericSensor:
    """
    Open a BME280 on a Linux I2C bus and start it.

    The bus is closed again if calibration or configuration fails.
    """
    bus = SMBusRegisterBus(smbus, int(Address.parse(address)))
    try:
        return AtmosphericSensor.build(bus, settings)
    except Exception:
        bus.close()
        raise
