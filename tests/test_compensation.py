"""Tests for the fixed-point compensation formulas."""

import pytest

from atmo_sensor import compensation
from atmo_sensor.calibration import (
    HumidityCalibration,
    PressureCalibration,
    TemperatureCalibration,
)
from atmo_sensor.compensation import (
    HUMIDITY_MAX,
    compensate_humidity,
    compensate_pressure,
    compensate_temperature,
    humidity_relative,
    pressure_pascal,
    temperature_celsius,
)

T_CAL = TemperatureCalibration(t1=28485, t2=26735, t3=50)
P_CAL = PressureCalibration(
    p1=36738, p2=-10635, p3=3024, p4=6980, p5=-4,
    p6=-7, p7=9900, p8=-10230, p9=4285,
)
H_CAL = HumidityCalibration(h1=75, h2=365, h3=0, h4=312, h5=50, h6=30)


class TestTemperature:
    """compensate_temperature and its reporting helper."""

    def test_reference_vector(self):
        assert compensate_temperature(0x80BD0, T_CAL) == 116770

    def test_celsius(self):
        assert temperature_celsius(116770) == pytest.approx(22.81)

    def test_pure(self):
        first = compensate_temperature(0x80BD0, T_CAL)
        compensate_temperature(0x12345, T_CAL)
        compensate_pressure(0x524F0, first, P_CAL)
        assert compensate_temperature(0x80BD0, T_CAL) == first

    def test_intermediate_wraps_at_32_bits(self):
        # (0xFFFFF >> 3) * 32767 overflows int32; the square term overflows too
        cal = TemperatureCalibration(t1=0, t2=32767, t3=0)
        assert compensate_temperature(0xFFFFF, cal) == -80

    def test_result_fits_int32(self):
        cal = TemperatureCalibration(t1=0, t2=32767, t3=32767)
        for raw in (0, 0x7FFFF, 0x80000, 0xFFFFF):
            t_fine = compensate_temperature(raw, cal)
            assert -(2**31) <= t_fine < 2**31


class TestPressure:
    """compensate_pressure and its reporting helper."""

    def test_reference_vector(self):
        assert compensate_pressure(0x524F0, 120035, P_CAL) == 26036801

    def test_pascal(self):
        assert pressure_pascal(26036801) == pytest.approx(101706.2539, abs=1e-4)

    def test_depends_on_t_fine(self):
        assert compensate_pressure(0x524F0, 116770, P_CAL) != compensate_pressure(
            0x524F0, 120035, P_CAL
        )

    def test_zero_divisor_returns_sentinel(self, monkeypatch):
        def no_division(*args):
            raise AssertionError("division must not happen")

        monkeypatch.setattr(compensation, "div_trunc", no_division)
        cal = PressureCalibration(p1=0, p2=-10635, p3=3024, p4=6980, p5=-4,
                                  p6=-7, p7=9900, p8=-10230, p9=4285)
        assert compensate_pressure(0x524F0, 120035, cal) == 0

    def test_result_is_unsigned_32bit(self):
        for raw in (0, 0x524F0, 0xFFFFF):
            result = compensate_pressure(raw, 120035, P_CAL)
            assert 0 <= result <= 0xFFFFFFFF


class TestHumidity:
    """compensate_humidity and its reporting helper."""

    def test_reference_vector(self):
        assert compensate_humidity(0x7561, 116770, H_CAL) == 57350

    def test_relative(self):
        assert humidity_relative(57350) == pytest.approx(56.0059, abs=1e-4)

    def test_saturates_high(self):
        cal = HumidityCalibration(h1=0, h2=200, h3=0, h4=0, h5=0, h6=0)
        assert compensate_humidity(0xFFFF, 76800, cal) == HUMIDITY_MAX >> 12
        assert humidity_relative(HUMIDITY_MAX >> 12) == 100.0

    def test_saturates_low(self):
        cal = HumidityCalibration(h1=0, h2=1, h3=0, h4=2047, h5=0, h6=0)
        assert compensate_humidity(0, 76800, cal) == 0

    @pytest.mark.parametrize("raw,t_fine,cal", [
        (0x0000, 116770, H_CAL),
        (0xFFFF, 116770, H_CAL),
        (0x7561, -200000, H_CAL),
        (0x7561, 400000, H_CAL),
        (0xFFFF, 0, HumidityCalibration(h1=255, h2=32767, h3=255, h4=-2048, h5=2047, h6=127)),
        (0x1234, 50000, HumidityCalibration(h1=0, h2=-32768, h3=0, h4=0, h5=-2048, h6=-128)),
    ])
    def test_always_in_range(self, raw, t_fine, cal):
        assert 0 <= compensate_humidity(raw, t_fine, cal) <= 102400
