"""BME280 temperature, pressure, and humidity sensor."""

import logging
from time import sleep

from atmo_sensor import (
    Address,
    AtmosphericSensor,
    ConfigurationError,
    SensorSettings,
    SMBusRegisterBus,
)
from atmo_sensor.registers import CHIP_ID_BME280, CHIP_ID_REG

from .base import Sensor

logger = logging.getLogger(__name__)

# Wait after start so the first normal-mode conversion has completed
SETTLE_TIME_S = 1.0


class BME280TempPressureHumidity(Sensor):
    """BME280 on a Linux I2C bus. Reads (°C, Pa, %RH)."""

    def __init__(
        self,
        smbus: int = 1,
        address: int | str = Address.DEFAULT,
        settle_time: float = SETTLE_TIME_S,
        **settings,
    ):
        """
        Args:
            smbus: I2C bus number
            address: Device address (0x77, 0x76, "default", "alternative")
            settle_time: Seconds to wait after starting before the first read
            **settings: SensorSettings fields, e.g. mode="normal",
                pressure_oversampling=16, standby_time=62.5, filter=4
        """
        try:
            self._address = Address.parse(address)
            self._settings = SensorSettings.from_dict(settings)
        except ConfigurationError as e:
            raise ValueError(f"Invalid BME280 config: {e}") from e
        if settle_time < 0:
            raise ValueError(f"settle_time must be >= 0, got {settle_time}")

        self._smbus = smbus
        self._settle_time = settle_time
        self._bus = None
        self._bme = None

    @property
    def smbus(self) -> int:
        return self._smbus

    @property
    def address(self) -> int:
        return int(self._address)

    @property
    def settings(self) -> SensorSettings:
        return self._settings

    def init(self) -> None:
        self._bus = SMBusRegisterBus(self._smbus, int(self._address))
        try:
            chip_id = self._bus.read_byte(CHIP_ID_REG)
            if chip_id != CHIP_ID_BME280:
                logger.warning(
                    f"Unexpected chip id 0x{chip_id:02X} at 0x{int(self._address):02X} "
                    f"(expected 0x{CHIP_ID_BME280:02X})"
                )
            self._bme = AtmosphericSensor.build(self._bus, self._settings)
            # Flush the first junk reading
            self._bme.measure()
        except Exception:
            self.close()
            raise
        sleep(self._settle_time)

    def read(self) -> tuple[float, float, float]:
        if self._bme is None:
            raise RuntimeError("Sensor not initialized. Call init() first.")
        m = self._bme.measure()
        return (m.temperature, m.pressure, m.humidity)

    def get_names(self) -> tuple[str, ...]:
        return ("Temperature", "Pressure", "Humidity")

    def get_units(self) -> tuple[str, ...]:
        return ("°C", "Pa", "%RH")

    def get_precision(self) -> int:
        return 2

    def close(self) -> None:
        if self._bus is not None:
            self._bus.close()
            self._bus = None
        self._bme = None
