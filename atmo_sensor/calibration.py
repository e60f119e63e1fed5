"""
Factory calibration coefficients.

The BME280 stores 18 trimming parameters in non-volatile memory. They are
read once per session and never change afterwards.
"""

import logging
from dataclasses import dataclass

from . import registers
from .bitfield import read_s16_le, read_s8, read_u16_le, read_u8, sign_extend
from .bus import RegisterBus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemperatureCalibration:
    """dig_T1 (u16), dig_T2 (s16), dig_T3 (s16)."""

    t1: int
    t2: int
    t3: int


@dataclass(frozen=True)
class PressureCalibration:
    """dig_P1 (u16) and dig_P2..dig_P9 (s16)."""

    p1: int
    p2: int
    p3: int
    p4: int
    p5: int
    p6: int
    p7: int
    p8: int
    p9: int


@dataclass(frozen=True)
class HumidityCalibration:
    """dig_H1 (u8), dig_H2 (s16), dig_H3 (u8), dig_H4/dig_H5 (s12), dig_H6 (s8)."""

    h1: int
    h2: int
    h3: int
    h4: int
    h5: int
    h6: int


@dataclass(frozen=True)
class CalibrationSet:
    """All coefficients of one sensor."""

    temperature: TemperatureCalibration
    pressure: PressureCalibration
    humidity: HumidityCalibration

    def as_dict(self) -> dict[str, int]:
        """Flatten to {"dig_T1": ..., "dig_H6": ...} in datasheet order."""
        values = {}
        for prefix, group in (
            ("T", self.temperature),
            ("P", self.pressure),
            ("H", self.humidity),
        ):
            for name, value in vars(group).items():
                values[f"dig_{prefix}{name[1:]}"] = value
        return values


def read_temperature_calibration(bus: RegisterBus) -> TemperatureCalibration:
    return TemperatureCalibration(
        t1=read_u16_le(bus, registers.DIG_T1_REG),
        t2=read_s16_le(bus, registers.DIG_T2_REG),
        t3=read_s16_le(bus, registers.DIG_T3_REG),
    )


def read_pressure_calibration(bus: RegisterBus) -> PressureCalibration:
    return PressureCalibration(
        p1=read_u16_le(bus, registers.DIG_P1_REG),
        p2=read_s16_le(bus, registers.DIG_P2_REG),
        p3=read_s16_le(bus, registers.DIG_P3_REG),
        p4=read_s16_le(bus, registers.DIG_P4_REG),
        p5=read_s16_le(bus, registers.DIG_P5_REG),
        p6=read_s16_le(bus, registers.DIG_P6_REG),
        p7=read_s16_le(bus, registers.DIG_P7_REG),
        p8=read_s16_le(bus, registers.DIG_P8_REG),
        p9=read_s16_le(bus, registers.DIG_P9_REG),
    )


def unpack_h4(msb: int, shared: int) -> int:
    """dig_H4: 0xE4 supplies bits 11:4, the low nibble of 0xE5 bits 3:0."""
    return sign_extend((msb << 4) | (shared & 0x0F), 12)


def unpack_h5(msb: int, shared: int) -> int:
    """dig_H5: 0xE6 supplies bits 11:4, the high nibble of 0xE5 bits 3:0."""
    return sign_extend((msb << 4) | ((shared >> 4) & 0x0F), 12)


def read_humidity_calibration(bus: RegisterBus) -> HumidityCalibration:
    """
    Decode the humidity coefficients.

    dig_H4 and dig_H5 share register 0xE5. It is read once for each
    coefficient rather than cached, so the bus sees the same transfers as
    two independent 12-bit reads.
    """
    h1 = read_u8(bus, registers.DIG_H1_REG)
    h2 = read_s16_le(bus, registers.DIG_H2_REG)
    h3 = read_u8(bus, registers.DIG_H3_REG)

    h4 = unpack_h4(
        bus.read_byte(registers.DIG_H4_MSB_REG),
        bus.read_byte(registers.DIG_H4_H5_SHARED_REG),
    )
    h5 = unpack_h5(
        bus.read_byte(registers.DIG_H5_MSB_REG),
        bus.read_byte(registers.DIG_H4_H5_SHARED_REG),
    )

    h6 = read_s8(bus, registers.DIG_H6_REG)
    return HumidityCalibration(h1=h1, h2=h2, h3=h3, h4=h4, h5=h5, h6=h6)


def read_calibration(bus: RegisterBus) -> CalibrationSet:
    """
    Read and decode all 18 coefficients.

    Raises:
        SensorIOError: If any register read fails. Nothing is returned in
            that case; the caller retries the whole decode if it wants to.
    """
    calibration = CalibrationSet(
        temperature=read_temperature_calibration(bus),
        pressure=read_pressure_calibration(bus),
        humidity=read_humidity_calibration(bus),
    )
    logger.debug(f"Calibration decoded: {calibration.as_dict()}")
    return calibration
