"""KZG polynomial commitment keys over G1."""

from dataclasses import dataclass
from functools import lru_cache
from itertools import accumulate, repeat

from .curve import G1Point, multi_scalar_mul
from .field import MODULUS, scalar_from_bytes_wide
from .rng import ChaChaRng


class KzgError(ValueError):
    """Raised for degrees outside what a key supports."""


def _trimmed(coefficients):
    coefficients = [c % MODULUS for c in coefficients]
    while coefficients and coefficients[-1] == 0:
        coefficients.pop()
    return coefficients


def _random_scalar(rng):
    return scalar_from_bytes_wide(rng.fill_bytes(64))


@dataclass(frozen=True)
class CommitKey:
    """Powers ``g, beta*g, beta^2*g, ...`` used to commit to polynomials."""

    powers_of_g: tuple

    @property
    def max_degree(self):
        return len(self.powers_of_g) - 1

    def commit(self, coefficients):
        """Commit to the polynomial with these coefficients, lowest degree first."""
        coefficients = _trimmed(coefficients)
        if len(coefficients) - 1 > self.max_degree:
            raise KzgError(
                f"polynomial degree {len(coefficients) - 1} exceeds key degree {self.max_degree}"
            )
        return multi_scalar_mul(self.powers_of_g[: len(coefficients)], coefficients)

    def compute_single_witness(self, coefficients, point):
        """Quotient of the polynomial divided by ``X - point``, remainder dropped."""
        point %= MODULUS
        quotient = []
        carry = 0
        for coefficient in reversed(list(coefficients)):
            value = (coefficient + carry) % MODULUS
            quotient.append(value)
            carry = value * point % MODULUS
        if quotient:
            quotient.pop()
        quotient.reverse()
        return _trimmed(quotient)


@dataclass(frozen=True)
class PublicParameters:
    """The structured reference string from which commit keys are trimmed."""

    commit_key: CommitKey

    @property
    def max_degree(self):
        return self.commit_key.max_degree

    @classmethod
    def setup(cls, max_degree, rng):
        """Generate parameters for polynomials up to ``max_degree`` from a random generator."""
        if max_degree < 1:
            raise KzgError("cannot set up parameters of degree zero")
        beta = _random_scalar(rng)
        powers_of_beta = accumulate(
            repeat(beta, max_degree), lambda acc, b: acc * b % MODULUS, initial=1
        )
        g = G1Point.generator() * _random_scalar(rng)
        return cls(CommitKey(tuple(g * power for power in powers_of_beta)))

    def trim(self, degree):
        """Commit key for polynomials of at most ``degree``."""
        if degree == 0:
            raise KzgError("cannot trim to degree zero")
        if degree > self.max_degree:
            raise KzgError(f"cannot trim to degree {degree} above {self.max_degree}")
        return CommitKey(self.commit_key.powers_of_g[: degree + 1])


@lru_cache(maxsize=None)
def public_params(max_degree):
    """Test parameters from a fixed seed, computed once per degree."""
    return PublicParameters.setup(max_degree, ChaChaRng.from_u64(42))