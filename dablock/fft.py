"""Radix-2 evaluation domains over the BLS12-381 scalar field."""

from itertools import accumulate, repeat

from .field import GENERATOR, MODULUS, ROOT_OF_UNITY, TWO_ADICITY, invert


class DomainError(ValueError):
    """Raised when a domain of the requested size cannot exist."""


def _bit_reversed(values):
    bits = len(values).bit_length() - 1
    if bits == 0:
        return list(values)
    return [values[int(f"{i:0{bits}b}"[::-1], 2)] for i in range(len(values))]


def _transform(values, omega):
    size = len(values)
    out = _bit_reversed(values)
    half = 1
    while half < size:
        step = pow(omega, size // (2 * half), MODULUS)
        twiddles = list(
            accumulate(repeat(step, half - 1), lambda acc, s: acc * s % MODULUS, initial=1)
        )
        for start in range(0, size, 2 * half):
            for offset, twiddle in enumerate(twiddles):
                low = start + offset
                high = low + half
                t = out[high] * twiddle % MODULUS
                out[low], out[high] = (out[low] + t) % MODULUS, (out[low] - t) % MODULUS
        half *= 2
    return out


class EvaluationDomain:
    """The multiplicative subgroup of the smallest power-of-two size covering ``size``."""

    def __init__(self, size):
        if size < 0:
            raise DomainError("domain size must not be negative")
        actual = 1 << max(size - 1, 0).bit_length()
        log_size = actual.bit_length() - 1
        if log_size >= TWO_ADICITY:
            raise DomainError(f"domain of size {actual} is too large")
        self.size = actual
        self.log_size = log_size
        self.group_gen = pow(ROOT_OF_UNITY, 2 ** (TWO_ADICITY - log_size), MODULUS)
        self.group_gen_inv = invert(self.group_gen)
        self.size_inv = invert(actual)
        self.generator = GENERATOR
        self.generator_inv = invert(GENERATOR)

    def __repr__(self):
        return f"EvaluationDomain(size={self.size})"

    def __eq__(self, other):
        if not isinstance(other, EvaluationDomain):
            return NotImplemented
        return self.size == other.size

    def __hash__(self):
        return hash(self.size)

    def elements(self):
        """Yield the domain's points, from 1 in powers of the group generator."""
        point = 1
        for _ in range(self.size):
            yield point
            point = point * self.group_gen % MODULUS

    def _resized(self, values):
        # Values beyond the domain size are dropped; missing ones are zero.
        kept = [v % MODULUS for v in list(values)[: self.size]]
        return kept + [0] * (self.size - len(kept))

    def fft(self, values):
        """Evaluate the polynomial with these coefficients on every domain point."""
        return _transform(self._resized(values), self.group_gen)

    def ifft(self, values):
        """Coefficients of the polynomial taking these values on the domain points."""
        out = _transform(self._resized(values), self.group_gen_inv)
        return [v * self.size_inv % MODULUS for v in out]