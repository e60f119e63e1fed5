"""
BME280 driver for atmo_sensor.

This package decodes the BME280's factory calibration and applies the
vendor's fixed-point compensation to turn raw readings into °C, Pa and %RH.
"""

from .bus import RegisterBus, SMBusRegisterBus, SensorIOError
from .calibration import (
    CalibrationSet,
    HumidityCalibration,
    PressureCalibration,
    TemperatureCalibration,
    read_calibration,
)
from .compensation import (
    compensate_humidity,
    compensate_pressure,
    compensate_temperature,
    humidity_relative,
    pressure_pascal,
    temperature_celsius,
)
from .device import AtmosphericSensor, Measurement, open_sensor
from .settings import (
    Address,
    ConfigurationError,
    Filter,
    Mode,
    Oversampling,
    SensorSettings,
    StandbyTime,
)

__all__ = [
    # Bus
    "RegisterBus",
    "SMBusRegisterBus",
    "SensorIOError",
    # Calibration
    "CalibrationSet",
    "TemperatureCalibration",
    "PressureCalibration",
    "HumidityCalibration",
    "read_calibration",
    # Compensation
    "compensate_temperature",
    "compensate_pressure",
    "compensate_humidity",
    "temperature_celsius",
    "pressure_pascal",
    "humidity_relative",
    # Facade
    "AtmosphericSensor",
    "Measurement",
    "open_sensor",
    # Settings
    "Address",
    "ConfigurationError",
    "Filter",
    "Mode",
    "Oversampling",
    "SensorSettings",
    "StandbyTime",
]
