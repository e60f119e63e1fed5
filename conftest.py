import sys
from pathlib import Path

import pytest

# Add project root to Python path for imports
sys.path.insert(0, str(Path(__file__).parent))

from atmo_sensor.bus import RegisterBus, SensorIOError


# Calibration image of a real BME280 (little-endian words), matching the
# datasheet-style reference vectors used throughout the tests:
#   T1..T3 = 28485, 26735, 50
#   P1..P9 = 36738, -10635, 3024, 6980, -4, -7, 9900, -10230, 4285
#   H1..H6 = 75, 365, 0, 312, 50, 30
REFERENCE_REGISTERS = {
    # Temperature
    0x88: 0x45, 0x89: 0x6F,
    0x8A: 0x6F, 0x8B: 0x68,
    0x8C: 0x32, 0x8D: 0x00,
    # Pressure
    0x8E: 0x82, 0x8F: 0x8F,
    0x90: 0x75, 0x91: 0xD6,
    0x92: 0xD0, 0x93: 0x0B,
    0x94: 0x44, 0x95: 0x1B,
    0x96: 0xFC, 0x97: 0xFF,
    0x98: 0xF9, 0x99: 0xFF,
    0x9A: 0xAC, 0x9B: 0x26,
    0x9C: 0x0A, 0x9D: 0xD8,
    0x9E: 0xBD, 0x9F: 0x10,
    # Humidity
    0xA1: 75,
    0xE1: 0x6D, 0xE2: 0x01,
    0xE3: 0,
    0xE4: 19, 0xE5: 0x28, 0xE6: 3,
    0xE7: 30,
    # Identification, control
    0xD0: 0x60,
    0xF2: 0x00, 0xF3: 0x00, 0xF4: 0x00, 0xF5: 0x00,
    # Raw samples: pressure 0x524F0, temperature 0x80BD0, humidity 0x7561
    0xF7: 0x52, 0xF8: 0x4F, 0xF9: 0x00,
    0xFA: 0x80, 0xFB: 0xBD, 0xFC: 0x00,
    0xFD: 0x75, 0xFE: 0x61,
}


class FakeRegisterBus(RegisterBus):
    """In-memory register file that records every transfer."""

    def __init__(self, registers: dict[int, int] | None = None):
        self.registers = dict(REFERENCE_REGISTERS if registers is None else registers)
        self.log: list[tuple] = []
        self.fail_on: set[int] = set()
        self.closed = False

    def _check(self, register: int) -> None:
        if register in self.fail_on:
            raise SensorIOError(register, "simulated NACK")

    def read_byte(self, register: int) -> int:
        self.log.append(("read", register))
        self._check(register)
        return self.registers.get(register, 0)

    def read_bytes(self, register: int, length: int) -> bytes:
        self.log.append(("read", register, length))
        for r in range(register, register + length):
            self._check(r)
        return bytes(self.registers.get(r, 0) for r in range(register, register + length))

    def write_byte(self, register: int, value: int) -> None:
        self.log.append(("write", register, value))
        self._check(register)
        self.registers[register] = value

    def close(self) -> None:
        self.closed = True

    def reads_of(self, register: int) -> int:
        """Number of transfers that started at the given register."""
        return sum(1 for entry in self.log if entry[0] == "read" and entry[1] == register)


@pytest.fixture
def fake_bus():
    """FakeRegisterBus loaded with the reference calibration image."""
    return FakeRegisterBus()


@pytest.fixture
def make_bus():
    """Factory for FakeRegisterBus instances with custom register contents."""
    return FakeRegisterBus
