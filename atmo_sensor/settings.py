"""
Device configuration options.

Each option is a closed enumeration whose value is the raw register field.
from_bits() decodes a field read back from the device; parse() accepts the
forms used in JSON config files (member names, oversampling factors,
standby milliseconds, filter coefficients). Mode and StandbyTime also take
the raw field value; for Oversampling and Filter an integer is always the
factor or coefficient.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

from . import registers


class ConfigurationError(ValueError):
    """A configuration value is outside the recognized set."""


def _decode(cls, value: int, field_max: int):
    if not 0 <= value <= field_max:
        raise ConfigurationError(
            f"{cls.__name__} field value {value} does not fit in {field_max.bit_length()} bits"
        )
    try:
        return cls(value)
    except ValueError:
        raise ConfigurationError(f"{value} is not a valid {cls.__name__} field value")


def _parse_choice(kind: str, value: Any, choices: dict):
    key = value.strip().lower() if isinstance(value, str) else value
    try:
        if key in choices:
            return choices[key]
    except TypeError:
        pass  # unhashable
    raise ConfigurationError(
        f"Invalid {kind} {value!r}, must be one of: {list(choices.keys())}"
    )


class Mode(int, Enum):
    """Power mode, ctrl_meas bits 1:0."""
    SLEEP = 0
    FORCED = 1
    NORMAL = 3

    @classmethod
    def from_bits(cls, value: int) -> "Mode":
        # 0b01 and 0b10 both select forced mode
        if value == 2:
            return cls.FORCED
        return _decode(cls, value, 0x03)

    @classmethod
    def parse(cls, value: Any) -> "Mode":
        if isinstance(value, cls):
            return value
        choices: dict = {m.name.lower(): m for m in cls}
        choices.update({m.value: m for m in cls})
        return _parse_choice("mode", value, choices)


class Oversampling(int, Enum):
    """Oversampling setting, a 3-bit field in ctrl_meas / ctrl_hum."""
    SKIPPED = 0
    X1 = 1
    X2 = 2
    X4 = 3
    X8 = 4
    X16 = 5

    @property
    def factor(self) -> int:
        """Number of samples averaged, 0 when the measurement is skipped."""
        return 0 if self is Oversampling.SKIPPED else 1 << (self.value - 1)

    @classmethod
    def from_bits(cls, value: int) -> "Oversampling":
        # 0b110 and 0b111 also mean x16
        if value in (6, 7):
            return cls.X16
        return _decode(cls, value, 0x07)

    @classmethod
    def parse(cls, value: Any) -> "Oversampling":
        if isinstance(value, cls):
            return value
        choices: dict = {o.name.lower(): o for o in cls}
        choices.update({o.factor: o for o in cls})
        return _parse_choice("oversampling", value, choices)


class StandbyTime(int, Enum):
    """Inactive duration between normal mode measurements, config bits 7:5."""
    MS_0_5 = 0
    MS_62_5 = 1
    MS_125 = 2
    MS_250 = 3
    MS_500 = 4
    MS_1000 = 5
    MS_10 = 6
    MS_20 = 7

    @property
    def milliseconds(self) -> float:
        return _STANDBY_MS[self]

    @classmethod
    def from_bits(cls, value: int) -> "StandbyTime":
        return _decode(cls, value, 0x07)

    @classmethod
    def parse(cls, value: Any) -> "StandbyTime":
        if isinstance(value, cls):
            return value
        choices: dict = {s.name.lower(): s for s in cls}
        choices.update({s.milliseconds: s for s in cls})
        # Field values 0..7 never collide with a millisecond duration
        choices.update({s.value: s for s in cls})
        return _parse_choice("standby time", value, choices)


_STANDBY_MS = {
    StandbyTime.MS_0_5: 0.5,
    StandbyTime.MS_62_5: 62.5,
    StandbyTime.MS_125: 125.0,
    StandbyTime.MS_250: 250.0,
    StandbyTime.MS_500: 500.0,
    StandbyTime.MS_1000: 1000.0,
    StandbyTime.MS_10: 10.0,
    StandbyTime.MS_20: 20.0,
}


class Filter(int, Enum):
    """IIR filter coefficient, config bits 4:2."""
    OFF = 0
    X2 = 1
    X4 = 2
    X8 = 3
    X16 = 4

    @property
    def coefficient(self) -> int:
        return 0 if self is Filter.OFF else 1 << self.value

    @classmethod
    def from_bits(cls, value: int) -> "Filter":
        # Field values above 4 select coefficient 16
        if value in (5, 6, 7):
            return cls.X16
        return _decode(cls, value, 0x07)

    @classmethod
    def parse(cls, value: Any) -> "Filter":
        if isinstance(value, cls):
            return value
        choices: dict = {f.name.lower(): f for f in cls}
        choices.update({f.coefficient: f for f in cls})
        return _parse_choice("filter", value, choices)


class Address(int, Enum):
    """I2C address selected by the SDO pin."""
    DEFAULT = registers.ADDRESS_DEFAULT
    ALTERNATIVE = registers.ADDRESS_ALTERNATIVE

    @classmethod
    def parse(cls, value: Any) -> "Address":
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().lower().startswith("0x"):
            try:
                value = int(value, 16)
            except ValueError:
                pass
        choices: dict = {a.name.lower(): a for a in cls}
        choices.update({a.value: a for a in cls})
        return _parse_choice("address", value, choices)


@dataclass(frozen=True)
class SensorSettings:
    """Complete measurement configuration written by AtmosphericSensor.start()."""

    mode: Mode = Mode.NORMAL
    temperature_oversampling: Oversampling = Oversampling.X1
    pressure_oversampling: Oversampling = Oversampling.X1
    humidity_oversampling: Oversampling = Oversampling.X1
    standby_time: StandbyTime = StandbyTime.MS_0_5
    filter: Filter = Filter.OFF

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "SensorSettings":
        """
        Build settings from a config section, e.g.

            {"mode": "normal", "pressure_oversampling": 16,
             "standby_time": 62.5, "filter": 4}

        Missing keys keep their defaults.

        Raises:
            ConfigurationError: On unknown keys or unrecognized values
        """
        parsers = {
            "mode": Mode.parse,
            "temperature_oversampling": Oversampling.parse,
            "pressure_oversampling": Oversampling.parse,
            "humidity_oversampling": Oversampling.parse,
            "standby_time": StandbyTime.parse,
            "filter": Filter.parse,
        }
        unknown = set(config) - set(parsers)
        if unknown:
            raise ConfigurationError(
                f"Unknown settings {sorted(unknown)}, must be among: {list(parsers.keys())}"
            )
        return cls(**{key: parsers[key](value) for key, value in config.items()})

    def to_dict(self) -> dict[str, str]:
        """Member names keyed by field, for display."""
        return {f.name: getattr(self, f.name).name for f in fields(self)}
