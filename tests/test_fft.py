import pytest

from dablock.fft import DomainError, EvaluationDomain
from dablock.field import MODULUS


@pytest.mark.parametrize("requested, actual", [(0, 1), (1, 1), (3, 4), (8, 8), (9, 16)])
def test_size_rounds_up_to_power_of_two(requested, actual):
    assert EvaluationDomain(requested).size == actual


def test_too_large_domain():
    with pytest.raises(DomainError):
        EvaluationDomain(2**32)


def test_negative_size():
    with pytest.raises(DomainError):
        EvaluationDomain(-1)


@pytest.mark.parametrize("size", [2, 4, 16, 256])
def test_generator_order(size):
    domain = EvaluationDomain(size)
    assert pow(domain.group_gen, size, MODULUS) == 1
    assert pow(domain.group_gen, size // 2, MODULUS) == MODULUS - 1
    assert domain.group_gen * domain.group_gen_inv % MODULUS == 1
    assert domain.size * domain.size_inv % MODULUS == 1


def test_elements():
    domain = EvaluationDomain(8)
    points = list(domain.elements())
    assert len(points) == 8
    assert points[0] == 1
    assert points[1] == domain.group_gen
    assert len(set(points)) == 8
    assert all(pow(p, 8, MODULUS) == 1 for p in points)


def test_fft_of_identity_polynomial_gives_points():
    domain = EvaluationDomain(8)
    assert domain.fft([0, 1]) == list(domain.elements())


def test_fft_of_square_gives_squared_points():
    domain = EvaluationDomain(4)
    assert domain.fft([0, 0, 1]) == [p * p % MODULUS for p in domain.elements()]


def test_fft_of_constant():
    domain = EvaluationDomain(16)
    assert domain.fft([7]) == [7] * 16


def test_ifft_of_constant_evaluations():
    domain = EvaluationDomain(4)
    assert domain.ifft([3, 3, 3, 3]) == [3, 0, 0, 0]


@pytest.mark.parametrize("size", [1, 2, 8, 32])
def test_round_trip(size):
    domain = EvaluationDomain(size)
    values = [(i * 7919 + 3) ** 5 % MODULUS for i in range(size)]
    assert domain.ifft(domain.fft(values)) == values
    assert domain.fft(domain.ifft(values)) == values


def test_extra_values_are_dropped():
    domain = EvaluationDomain(4)
    assert domain.fft([1, 2, 3, 4, 5]) == domain.fft([1, 2, 3, 4])


def test_missing_values_are_zero():
    domain = EvaluationDomain(8)
    assert domain.ifft([1, 2]) == domain.ifft([1, 2, 0, 0, 0, 0, 0, 0])


def test_extension_keeps_original_values_interleaved():
    short = EvaluationDomain(4)
    long = EvaluationDomain(8)
    data = [11, 22, 33, 44]
    extended = long.fft(short.ifft(data))
    assert extended[0::2] == data