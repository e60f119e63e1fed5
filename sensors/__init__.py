"""
Sensor plug-ins for atmo_sensor.

This package provides the Sensor interface and the BME280 plug-in, plus
helpers to build plug-ins from JSON config entries.
"""

import inspect
import logging
import sys

from .base import Sensor
from .bme280_sensor import BME280TempPressureHumidity

logger = logging.getLogger(__name__)

__all__ = [
    "Sensor",
    "BME280TempPressureHumidity",
    "get_sensor_class",
    "instantiate_sensors",
]


def get_sensor_class(class_name: str) -> type[Sensor] | None:
    """
    Get a Sensor class by name using reflection.

    Args:
        class_name: Name of the sensor class (e.g., "BME280TempPressureHumidity")

    Returns:
        The sensor class, or None if not found
    """
    for name, obj in inspect.getmembers(sys.modules[__name__], inspect.isclass):
        if name == class_name and issubclass(obj, Sensor) and obj is not Sensor:
            return obj
    return None


def instantiate_sensors(sensor_configs: list[dict]) -> list[Sensor]:
    """
    Instantiate sensors from configuration.

    Args:
        sensor_configs: List of sensor config dicts with 'class' and optional 'config'

    Returns:
        List of sensor instances for successfully found sensors

    Raises:
        ValueError: If a known sensor class rejects its config
    """
    sensors = []

    for config in sensor_configs:
        class_name = config.get("class")
        if not class_name:
            logger.warning("Sensor config missing 'class' field, skipping")
            continue

        sensor_class = get_sensor_class(class_name)
        if sensor_class is None:
            logger.warning(f"Unknown sensor class: {class_name}, skipping")
            continue

        kwargs = config.get("config", {})
        sensor = sensor_class(**kwargs)
        sensors.append(sensor)
        logger.info(f"Loaded sensor: {class_name}")

    return sensors
