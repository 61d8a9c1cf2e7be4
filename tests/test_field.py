import pytest

from dablock.field import (
    MODULUS,
    ROOT_OF_UNITY,
    TWO_ADICITY,
    ScalarError,
    invert,
    scalar_from_bytes,
    scalar_from_bytes_wide,
    scalar_to_bytes,
)


def test_all_ones_is_not_a_scalar():
    data = bytearray([0xFF] * 32)
    with pytest.raises(ScalarError):
        scalar_from_bytes(data)
    data[31] = 0x3F
    value = scalar_from_bytes(data)
    assert scalar_to_bytes(value) == bytes(data)


def test_thirty_one_byte_chunks_always_fit():
    data = b"\xff" * 31 + b"\x00"
    assert scalar_to_bytes(scalar_from_bytes(data)) == data


def test_modulus_bytes_rejected():
    with pytest.raises(ScalarError):
        scalar_from_bytes(MODULUS.to_bytes(32, "little"))


def test_modulus_minus_one_accepted():
    assert scalar_from_bytes((MODULUS - 1).to_bytes(32, "little")) == MODULUS - 1


@pytest.mark.parametrize("length", [0, 31, 33, 64])
def test_wrong_length_rejected(length):
    with pytest.raises(ScalarError):
        scalar_from_bytes(bytes(length))


def test_to_bytes_is_little_endian():
    assert scalar_to_bytes(1) == b"\x01" + bytes(31)


def test_to_bytes_reduces():
    assert scalar_to_bytes(MODULUS + 5) == scalar_to_bytes(5)
    assert scalar_to_bytes(-1) == scalar_to_bytes(MODULUS - 1)


def test_wide_reduction():
    assert scalar_from_bytes_wide(MODULUS.to_bytes(64, "little")) == 0
    assert scalar_from_bytes_wide((MODULUS + 9).to_bytes(64, "little")) == 9


def test_wide_wrong_length():
    with pytest.raises(ScalarError):
        scalar_from_bytes_wide(bytes(32))


@pytest.mark.parametrize("value", [1, 2, 5, 12345678901234567890, MODULUS - 1])
def test_invert(value):
    assert value * invert(value) % MODULUS == 1


def test_invert_zero():
    with pytest.raises(ScalarError):
        invert(0)
    with pytest.raises(ScalarError):
        invert(MODULUS)


def test_root_of_unity_order():
    assert pow(ROOT_OF_UNITY, 2**TWO_ADICITY, MODULUS) == 1
    assert pow(ROOT_OF_UNITY, 2 ** (TWO_ADICITY - 1), MODULUS) == MODULUS - 1
    # Its inverse is the root raised to one less than its order.
    assert invert(ROOT_OF_UNITY) == pow(ROOT_OF_UNITY, 2**TWO_ADICITY - 1, MODULUS)