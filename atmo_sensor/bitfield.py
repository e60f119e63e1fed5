"""
Fixed-width integer helpers for register decoding and fixed-point math.

Python integers never overflow, so the compensation formulas call these
after every step that could exceed the width the vendor reference uses.
Right shifts on Python ints are arithmetic, matching signed C shifts.
"""

from .bus import RegisterBus


def wrap(value: int, bits: int) -> int:
    """Wrap value into a signed two's-complement integer of the given width."""
    half = 1 << (bits - 1)
    return ((value + half) & ((1 << bits) - 1)) - half


def s32(value: int) -> int:
    return wrap(value, 32)


def s64(value: int) -> int:
    return wrap(value, 64)


def u32(value: int) -> int:
    """Reinterpret value as an unsigned 32-bit integer (C cast semantics)."""
    return value & 0xFFFFFFFF


def sign_extend(value: int, bits: int) -> int:
    """Interpret the low `bits` bits of value as two's complement."""
    return wrap(value & ((1 << bits) - 1), bits)


def div_trunc(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero, as C and Rust do."""
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


def u16_le(data: bytes) -> int:
    return data[0] | (data[1] << 8)


def s16_le(data: bytes) -> int:
    return sign_extend(u16_le(data), 16)


def assemble_20bit(msb: int, lsb: int, xlsb: int) -> int:
    """Assemble a 20-bit ADC value from MSB, LSB and the upper nibble of XLSB."""
    return (msb << 12) | (lsb << 4) | ((xlsb >> 4) & 0x0F)


def assemble_16bit(msb: int, lsb: int) -> int:
    return (msb << 8) | lsb


def read_u8(bus: RegisterBus, register: int) -> int:
    return bus.read_byte(register)


def read_s8(bus: RegisterBus, register: int) -> int:
    return sign_extend(bus.read_byte(register), 8)


def read_u16_le(bus: RegisterBus, register: int) -> int:
    """Read a little-endian unsigned 16-bit word starting at its LSB register."""
    return u16_le(bus.read_bytes(register, 2))


def read_s16_le(bus: RegisterBus, register: int) -> int:
    """Read a little-endian signed 16-bit word starting at its LSB register."""
    return s16_le(bus.read_bytes(register, 2))


def update_bits(bus: RegisterBus, register: int, mask: int, shift: int, value: int) -> int:
    """
    Read-modify-write a bit field, leaving the other bits untouched.

    Args:
        bus: Bus to use
        register: Register holding the field
        mask: Field mask, already shifted into position
        shift: Bit position of the field's least significant bit
        value: New field value (unshifted)

    Returns:
        The byte written to the register
    """
    old_state = bus.read_byte(register)
    new_state = (old_state & ~mask & 0xFF) | ((value << shift) & mask)
    bus.write_byte(register, new_state)
    return new_state


def read_bits(bus: RegisterBus, register: int, mask: int, shift: int) -> int:
    return (bus.read_byte(register) & mask) >> shift
