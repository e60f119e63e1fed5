#!/usr/bin/env python3
"""
Diagnostic script for the BME280 - dumps identification, status,
configuration, calibration and one measurement.
Run this on the Pi with the sensor attached to debug wiring or bad readings.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from atmo_sensor import (
    Address,
    AtmosphericSensor,
    ConfigurationError,
    SensorIOError,
    SMBusRegisterBus,
)
from atmo_sensor.registers import CHIP_ID_BME280, CHIP_ID_REG
from utils.process_lock import SessionBusyError, SessionLock, lock_name

# Conversion time at x1 oversampling on all channels is under 10ms
FIRST_SAMPLE_WAIT_S = 0.1


def run(smbus: int, address: int, start: bool) -> None:
    print(f"1. Opening I2C bus {smbus}, device 0x{address:02X}...")
    with SMBusRegisterBus(smbus, address) as bus:
        print("\n2. Reading chip id...")
        chip_id = bus.read_byte(CHIP_ID_REG)
        ok = "OK" if chip_id == CHIP_ID_BME280 else f"expected 0x{CHIP_ID_BME280:02X}"
        print(f"   Chip id: 0x{chip_id:02X} ({ok})")

        print("\n3. Decoding calibration...")
        sensor = AtmosphericSensor(bus)
        for name, value in sensor.calibration.as_dict().items():
            print(f"   {name:8s} = {value}")

        if start:
            print("\n4. Starting with default settings...")
            sensor.start()
            time.sleep(FIRST_SAMPLE_WAIT_S)

        print("\n5. Status and configuration...")
        print(f"   measuring={sensor.is_measuring()} updating={sensor.is_updating()}")
        try:
            for key, value in sensor.get_settings().to_dict().items():
                print(f"   {key}: {value}")
        except ConfigurationError as e:
            print(f"   Could not decode configuration: {e}")

        print("\n6. Raw samples...")
        raw_t = sensor.read_raw_temperature()
        raw_p = sensor.read_raw_pressure()
        raw_h = sensor.read_raw_humidity()
        print(f"   temperature=0x{raw_t:05X} pressure=0x{raw_p:05X} humidity=0x{raw_h:04X}")
        if raw_t == 0x80000:
            print("   WARNING: temperature reads the reset value. Sensor is asleep or skipped.")

        print("\n7. Measurement...")
        m = sensor.measure()
        print(f"   t_fine:      {m.t_fine}")
        print(f"   Temperature: {m.temperature:.2f} °C")
        print(f"   Pressure:    {m.pressure:.2f} Pa")
        print(f"   Humidity:    {m.humidity:.2f} %RH")


def main() -> int:
    parser = argparse.ArgumentParser(description="BME280 diagnostics")
    parser.add_argument("--smbus", type=int, default=1, help="I2C bus number (default: 1)")
    parser.add_argument(
        "--address",
        type=str,
        default="0x77",
        help="Device address: 0x77 or 0x76 (default: 0x77)",
    )
    parser.add_argument(
        "--no-start",
        action="store_true",
        help="Do not write the default configuration before reading",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        address = int(Address.parse(args.address))
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print("=== BME280 Diagnostics ===")
    try:
        with SessionLock(lock_name(args.smbus, address)):
            run(args.smbus, address, start=not args.no_start)
    except SessionBusyError as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    except SensorIOError as e:
        print(f"\nI/O failure: {e}", file=sys.stderr)
        print("   Possible issues:", file=sys.stderr)
        print("   - Wrong address (try --address 0x76)", file=sys.stderr)
        print("   - I2C not enabled (run raspi-config)", file=sys.stderr)
        print("   - Sensor not powered or SDA/SCL swapped", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
