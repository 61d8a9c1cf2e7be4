"""Arithmetic helpers for the BLS12-381 scalar field, with scalars as plain ints."""

from .config import SCALAR_SIZE, SCALAR_SIZE_WIDE

MODULUS = 0x73EDA753299D7D483339D80809A1D80553BDA402FFFE5BFEFFFFFFFF00000001
GENERATOR = 7
TWO_ADICITY = 32
ROOT_OF_UNITY = pow(GENERATOR, (MODULUS - 1) >> TWO_ADICITY, MODULUS)


class ScalarError(ValueError):
    """Raised for byte strings that are not a valid scalar, or a scalar with no inverse."""


def scalar_from_bytes(data):
    """Decode a canonical little-endian 32-byte scalar."""
    data = bytes(data)
    if len(data) != SCALAR_SIZE:
        raise ScalarError(f"expected {SCALAR_SIZE} bytes, got {len(data)}")
    value = int.from_bytes(data, "little")
    if value >= MODULUS:
        raise ScalarError("value is not below the field modulus")
    return value


def scalar_to_bytes(value):
    """Encode a scalar as 32 little-endian bytes."""
    return (value % MODULUS).to_bytes(SCALAR_SIZE, "little")


def scalar_from_bytes_wide(data):
    """Reduce 64 little-endian bytes into a scalar."""
    data = bytes(data)
    if len(data) != SCALAR_SIZE_WIDE:
        raise ScalarError(f"expected {SCALAR_SIZE_WIDE} bytes, got {len(data)}")
    return int.from_bytes(data, "little") % MODULUS


def invert(value):
    """Multiplicative inverse of a non-zero scalar."""
    value %= MODULUS
    if value == 0:
        raise ScalarError("zero has no inverse")
    return pow(value, -1, MODULUS)