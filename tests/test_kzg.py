import pytest

from dablock.curve import G1Point
from dablock.field import MODULUS
from dablock.kzg import CommitKey, KzgError, PublicParameters, public_params
from dablock.rng import ChaChaRng


def _evaluate(coefficients, x):
    result = 0
    for coefficient in reversed(coefficients):
        result = (result * x + coefficient) % MODULUS
    return result


@pytest.fixture(scope="module")
def params():
    return PublicParameters.setup(6, ChaChaRng(bytes(range(32))))


def test_setup_rejects_degree_zero():
    with pytest.raises(KzgError):
        PublicParameters.setup(0, ChaChaRng(bytes(32)))


def test_setup_creates_degree_plus_one_powers(params):
    assert params.max_degree == 6
    assert len(params.commit_key.powers_of_g) == 7


def test_setup_is_deterministic(params):
    again = PublicParameters.setup(6, ChaChaRng(bytes(range(32))))
    assert again == params
    other = PublicParameters.setup(6, ChaChaRng(bytes(32)))
    assert other != params


def test_trim_bounds(params):
    with pytest.raises(KzgError):
        params.trim(0)
    with pytest.raises(KzgError):
        params.trim(7)
    key = params.trim(4)
    assert key.max_degree == 4
    assert key.powers_of_g == params.commit_key.powers_of_g[:5]


def test_commit_constant_and_monomial(params):
    key = params.trim(6)
    powers = key.powers_of_g
    assert key.commit([5]) == powers[0] * 5
    assert key.commit([0, 1]) == powers[1]
    assert key.commit([]).is_identity()


def test_commit_ignores_trailing_zeros(params):
    key = params.trim(2)
    assert key.commit([1, 2, 3, 0, 0, 0]) == key.commit([1, 2, 3])
    with pytest.raises(KzgError):
        key.commit([1, 2, 3, 4])


def test_commit_is_linear(params):
    key = params.trim(6)
    a = [3, 1, 4, 1, 5]
    b = [9, 2, 6, 5, 3, 5]
    summed = [(x + y) % MODULUS for x, y in zip(a + [0], b)]
    assert key.commit(a) + key.commit(b) == key.commit(summed)


def test_witness_divides_out_root():
    key = CommitKey((G1Point.generator(),))
    # x^2 - 1 divided by x - 1 is x + 1.
    assert key.compute_single_witness([MODULUS - 1, 0, 1], 1) == [1, 1]


def test_witness_satisfies_division_identity(params):
    key = params.trim(6)
    poly = [3, 5, 7, 11, 13]
    z = 9
    quotient = key.compute_single_witness(poly, z)
    assert len(quotient) == len(poly) - 1
    value_at_z = _evaluate(poly, z)
    for x in (2, 123, MODULUS - 7):
        lhs = (_evaluate(poly, x) - value_at_z) % MODULUS
        rhs = _evaluate(quotient, x) * (x - z) % MODULUS
        assert lhs == rhs


def test_witness_of_empty_polynomial_is_empty(params):
    assert params.trim(1).compute_single_witness([], 4) == []


def test_public_params_is_seeded_and_cached():
    first = public_params(4)
    assert first is public_params(4)
    assert first == PublicParameters.setup(4, ChaChaRng.from_u64(42))