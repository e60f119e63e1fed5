#!/usr/bin/env python3
"""
Take one reading from each configured sensor and print it.

Configuration is loaded from scripts/read_sensors.json:
{
    "sensors": [
        {
            "class": "BME280TempPressureHumidity",
            "config": {"smbus": 1, "address": "0x77", "filter": 4}
        }
    ]
}

Usage:
    python3 scripts/read_sensors.py [--config FILE]
"""

import argparse
import json
import logging
import sys
from contextlib import ExitStack
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from atmo_sensor import SensorIOError
from sensors import BME280TempPressureHumidity, Sensor, instantiate_sensors
from utils.process_lock import SessionBusyError, SessionLock, lock_name

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def format_reading(sensor: Sensor, values: tuple) -> list[str]:
    """Format one reading as "name: value units" lines."""
    precision = sensor.get_precision()
    lines = []
    for name, unit, value in zip(sensor.get_names(), sensor.get_units(), values):
        if isinstance(value, float):
            lines.append(f"{name}: {value:.{precision}f} {unit}")
        else:
            lines.append(f"{name}: {value} {unit}")
    return lines


def read_all(sensors: list[Sensor]) -> int:
    """Read every sensor once. Returns the number of sensors that failed."""
    failures = 0
    for sensor in sensors:
        class_name = type(sensor).__name__
        with ExitStack() as stack:
            try:
                if isinstance(sensor, BME280TempPressureHumidity):
                    stack.enter_context(SessionLock(lock_name(sensor.smbus, sensor.address)))
                stack.enter_context(sensor)
                values = sensor.read()
            except SessionBusyError as e:
                logger.error(f"{class_name}: {e}")
                failures += 1
                continue
            except SensorIOError as e:
                logger.error(f"{class_name}: I/O failure, {e}")
                failures += 1
                continue

        print(f"[{class_name}]")
        for line in format_reading(sensor, values):
            print(f"  {line}")
    return failures


def main() -> int:
    script_dir = Path(__file__).parent.resolve()
    default_config = script_dir / "read_sensors.json"

    parser = argparse.ArgumentParser(description="Print one reading from each configured sensor")
    parser.add_argument(
        "--config",
        type=str,
        default=str(default_config),
        help=f"Path to the JSON config file (default: {default_config})",
    )
    args = parser.parse_args()

    with open(args.config) as f:
        config = json.load(f)

    sensor_configs = config.get("sensors", [])
    if not sensor_configs:
        logger.error("Config has no sensors defined")
        return 1

    try:
        sensors = instantiate_sensors(sensor_configs)
    except ValueError as e:
        logger.error(str(e))
        return 1
    if not sensors:
        logger.error("No sensors could be loaded")
        return 1

    return 1 if read_all(sensors) else 0


if __name__ == "__main__":
    sys.exit(main())
