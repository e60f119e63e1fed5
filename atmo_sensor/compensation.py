"""
Fixed-point compensation formulas from the BME280 datasheet (section 4.2.3).

The three compensate_* functions are pure: output depends only on the raw
ADC value, the calibration coefficients and, for pressure and humidity, the
t_fine value returned by compensate_temperature in the same measurement
cycle. Every intermediate is wrapped to the width used by the vendor's
32-bit/64-bit integer reference code; no floating point is involved until
the final unit conversion helpers.
"""

from .bitfield import div_trunc, s32, s64, u32
from .calibration import HumidityCalibration, PressureCalibration, TemperatureCalibration

# Humidity upper bound before the final shift: 100 %RH in Q22.10 << 12
HUMIDITY_MAX = 419430400


def compensate_temperature(raw: int, coeffs: TemperatureCalibration) -> int:
    """
    Compensate a raw 20-bit temperature reading.

    Args:
        raw: Raw temperature ADC value
        coeffs: Temperature calibration

    Returns:
        t_fine, the fine-resolution temperature shared with the pressure and
        humidity formulas. Use temperature_celsius() to get degrees.
    """
    raw = s32(raw)
    t1, t2, t3 = coeffs.t1, coeffs.t2, coeffs.t3

    var1 = s32((raw >> 3) - s32(t1 << 1))
    var1 = s32(var1 * t2) >> 11

    delta = s32((raw >> 4) - t1)
    var2 = s32(delta * delta) >> 12
    var2 = s32(var2 * t3) >> 14

    return s32(var1 + var2)


def compensate_pressure(raw: int, t_fine: int, coeffs: PressureCalibration) -> int:
    """
    Compensate a raw 20-bit pressure reading.

    Args:
        raw: Raw pressure ADC value
        t_fine: Value returned by compensate_temperature() for this cycle
        coeffs: Pressure calibration

    Returns:
        Pressure in Pa as unsigned Q24.8 (divide by 256 for Pa). Returns 0
        when the divisor term is zero instead of dividing.
    """
    raw = s32(raw)
    c = coeffs

    var1 = s64(t_fine - 128000)
    var2 = s64(s64(var1 * var1) * c.p6)
    var2 = s64(var2 + s64(s64(var1 * c.p5) << 17))
    var2 = s64(var2 + s64(c.p4 << 35))
    var1 = s64(
        (s64(s64(var1 * var1) * c.p3) >> 8) + s64(s64(var1 * c.p2) << 12)
    )
    var1 = s64(s64((1 << 47) + var1) * c.p1) >> 33

    if var1 == 0:
        return 0

    p = s64(1048576 - raw)
    p = s64(div_trunc(s64(s64(s64(p << 31) - var2) * 3125), var1))
    var1 = s64(s64(c.p9 * (p >> 13)) * (p >> 13)) >> 25
    var2 = s64(c.p8 * p) >> 19
    p = s64((s64(p + var1 + var2) >> 8) + s64(c.p7 << 4))

    return u32(p)


def compensate_humidity(raw: int, t_fine: int, coeffs: HumidityCalibration) -> int:
    """
    Compensate a raw 16-bit humidity reading.

    Args:
        raw: Raw humidity ADC value
        t_fine: Value returned by compensate_temperature() for this cycle
        coeffs: Humidity calibration

    Returns:
        Relative humidity as unsigned Q22.10 (divide by 1024 for %RH),
        always within 0..102400.
    """
    raw = s32(raw)
    c = coeffs

    var1 = s32(t_fine - 76800)

    offset = s32(s32(s32(raw << 14) - s32(c.h4 << 20)) - s32(c.h5 * var1))
    offset = s32(offset + 16384) >> 15

    scale = s32(var1 * c.h6) >> 10
    scale = s32(scale * s32((s32(var1 * c.h3) >> 11) + 32768)) >> 10
    scale = s32(scale + 2097152)
    scale = s32(s32(scale * c.h2) + 8192) >> 14

    var1 = s32(offset * scale)
    square = s32((var1 >> 15) * (var1 >> 15)) >> 7
    var1 = s32(var1 - (s32(square * c.h1) >> 4))

    # Saturate, do not wrap
    var1 = min(max(var1, 0), HUMIDITY_MAX)

    return var1 >> 12


def temperature_celsius(t_fine: int) -> float:
    """Convert t_fine to degrees Celsius (resolution 0.01 °C)."""
    return (s32(s32(t_fine * 5) + 128) >> 8) / 100.0


def pressure_pascal(pressure_fixed: int) -> float:
    """Convert Q24.8 pressure to Pa."""
    return pressure_fixed / 256.0


def humidity_relative(humidity_fixed: int) -> float:
    """Convert Q22.10 humidity to %RH."""
    return humidity_fixed / 1024.0
