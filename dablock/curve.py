"""The BLS12-381 G1 group with the standard 48-byte compressed encoding."""

from .field import MODULUS as SCALAR_MODULUS

BASE_MODULUS = int(
    "1a0111ea397fe69a4b1ba7b6434bacd764774b84f38512bf6730d2a0f6b0f624"
    "1eabfffeb153ffffb9feffffffffaaab",
    16,
)
CURVE_B = 4
COMPRESSED_SIZE = 48

_GENERATOR_X = int(
    "17f1d3a73197d7942695638c4fa9ac0fc3688c4f9774b905a14e3a3f171bac58"
    "6c55e83ff97a1aeffb3af00adb22c6bb",
    16,
)
_GENERATOR_Y = int(
    "08b3f481e3aaa0f1a09e30ed741d8ae4fcf5e095d5d00af600db18cb2c04b3ed"
    "d03cc744a2888ae40caa232946c5e7e1",
    16,
)

_COMPRESSION_FLAG = 0x80
_INFINITY_FLAG = 0x40
_SORT_FLAG = 0x20
_FLAG_MASK = 0xE0
_HALF_MODULUS = (BASE_MODULUS - 1) // 2

# Jacobian coordinates (X, Y, Z); Z == 0 is the point at infinity.
_IDENTITY = (1, 1, 0)


class CurveError(ValueError):
    """Raised for coordinates or encodings that are not a valid G1 point."""


def _double(point):
    x, y, z = point
    if z == 0 or y == 0:
        return _IDENTITY
    p = BASE_MODULUS
    a = x * x % p
    b = y * y % p
    c = b * b % p
    d = 2 * ((x + b) * (x + b) - a - c) % p
    e = 3 * a % p
    f = e * e % p
    x3 = (f - 2 * d) % p
    y3 = (e * (d - x3) - 8 * c) % p
    z3 = 2 * y * z % p
    return (x3, y3, z3)


def _add(first, second):
    x1, y1, z1 = first
    x2, y2, z2 = second
    if z1 == 0:
        return second
    if z2 == 0:
        return first
    p = BASE_MODULUS
    z1z1 = z1 * z1 % p
    z2z2 = z2 * z2 % p
    u1 = x1 * z2z2 % p
    u2 = x2 * z1z1 % p
    s1 = y1 * z2 * z2z2 % p
    s2 = y2 * z1 * z1z1 % p
    h = (u2 - u1) % p
    r = (s2 - s1) % p
    if h == 0:
        return _double(first) if r == 0 else _IDENTITY
    i = 4 * h * h % p
    j = h * i % p
    rr = 2 * r % p
    v = u1 * i % p
    x3 = (rr * rr - j - 2 * v) % p
    y3 = (rr * (v - x3) - 2 * s1 * j) % p
    z3 = ((z1 + z2) * (z1 + z2) - z1z1 - z2z2) * h % p
    return (x3, y3, z3)


def _negate(point):
    x, y, z = point
    return (x, (-y) % BASE_MODULUS, z)


def _multiply(point, scalar):
    result = _IDENTITY
    for bit in bin(scalar)[2:] if scalar > 0 else "":
        result = _double(result)
        if bit == "1":
            result = _add(result, point)
    return result


def _on_curve(x, y):
    p = BASE_MODULUS
    return (y * y - x * x * x - CURVE_B) % p == 0


class G1Point:
    """An affine point of G1, or the point at infinity."""

    __slots__ = ("x", "y", "infinity")

    def __init__(self, x, y):
        x %= BASE_MODULUS
        y %= BASE_MODULUS
        if not _on_curve(x, y):
            raise CurveError("point is not on the curve")
        self.x = x
        self.y = y
        self.infinity = False

    @classmethod
    def _from_jacobian(cls, point):
        x, y, z = point
        result = cls.__new__(cls)
        if z == 0:
            result.x, result.y, result.infinity = 0, 0, True
            return result
        p = BASE_MODULUS
        z_inv = pow(z, -1, p)
        z_inv2 = z_inv * z_inv % p
        result.x = x * z_inv2 % p
        result.y = y * z_inv2 * z_inv % p
        result.infinity = False
        return result

    def _jacobian(self):
        return _IDENTITY if self.infinity else (self.x, self.y, 1)

    @classmethod
    def generator(cls):
        """The standard generator of G1."""
        return cls(_GENERATOR_X, _GENERATOR_Y)

    @classmethod
    def identity(cls):
        """The point at infinity."""
        return cls._from_jacobian(_IDENTITY)

    def is_identity(self):
        """Whether this is the point at infinity."""
        return self.infinity

    def _is_torsion_free(self):
        return _multiply(self._jacobian(), SCALAR_MODULUS)[2] == 0

    def to_bytes(self):
        """The 48-byte compressed encoding."""
        if self.infinity:
            return bytes([_COMPRESSION_FLAG | _INFINITY_FLAG]) + bytes(COMPRESSED_SIZE - 1)
        encoded = bytearray(self.x.to_bytes(COMPRESSED_SIZE, "big"))
        encoded[0] |= _COMPRESSION_FLAG
        if self.y > _HALF_MODULUS:
            encoded[0] |= _SORT_FLAG
        return bytes(encoded)

    @classmethod
    def from_bytes(cls, data):
        """Decode a compressed point, checking it lies on the curve and in the subgroup."""
        data = bytes(data)
        if len(data) != COMPRESSED_SIZE:
            raise CurveError(f"expected {COMPRESSED_SIZE} bytes, got {len(data)}")
        flags = data[0] & _FLAG_MASK
        if not flags & _COMPRESSION_FLAG:
            raise CurveError("compression flag is not set")
        x = int.from_bytes(bytes([data[0] & ~_FLAG_MASK & 0xFF]) + data[1:], "big")
        if flags & _INFINITY_FLAG:
            if flags & _SORT_FLAG or x != 0:
                raise CurveError("malformed encoding of the point at infinity")
            return cls.identity()
        if x >= BASE_MODULUS:
            raise CurveError("x coordinate is not below the base field modulus")
        p = BASE_MODULUS
        rhs = (x * x * x + CURVE_B) % p
        y = pow(rhs, (p + 1) // 4, p)
        if y * y % p != rhs:
            raise CurveError("x coordinate is not on the curve")
        if (y > _HALF_MODULUS) != bool(flags & _SORT_FLAG):
            y = p - y
        point = cls(x, y)
        if not point._is_torsion_free():
            raise CurveError("point is not in the prime-order subgroup")
        return point

    def __add__(self, other):
        if not isinstance(other, G1Point):
            return NotImplemented
        return G1Point._from_jacobian(_add(self._jacobian(), other._jacobian()))

    def __neg__(self):
        return G1Point._from_jacobian(_negate(self._jacobian()))

    def __sub__(self, other):
        if not isinstance(other, G1Point):
            return NotImplemented
        return self + (-other)

    def __mul__(self, scalar):
        if not isinstance(scalar, int):
            return NotImplemented
        return G1Point._from_jacobian(_multiply(self._jacobian(), scalar % SCALAR_MODULUS))

    __rmul__ = __mul__

    def __eq__(self, other):
        if not isinstance(other, G1Point):
            return NotImplemented
        if self.infinity or other.infinity:
            return self.infinity == other.infinity
        return self.x == other.x and self.y == other.y

    def __hash__(self):
        return hash((self.infinity, self.x, self.y))

    def __repr__(self):
        return f"G1Point({self.to_bytes().hex()})"


def multi_scalar_mul(points, scalars):
    """Sum of ``scalar * point`` over the pairs, by the bucket method."""
    points = list(points)
    scalars = list(scalars)
    if len(points) != len(scalars):
        raise ValueError("points and scalars differ in length")
    pairs = [
        (point._jacobian(), scalar % SCALAR_MODULUS)
        for point, scalar in zip(points, scalars)
        if not point.infinity and scalar % SCALAR_MODULUS
    ]
    if not pairs:
        return G1Point.identity()
    window = max(2, len(pairs).bit_length() - 3)
    mask = (1 << window) - 1
    windows = -(-SCALAR_MODULUS.bit_length() // window)
    result = _IDENTITY
    for index in reversed(range(windows)):
        for _ in range(window):
            result = _double(result)
        buckets = [_IDENTITY] * mask
        shift = index * window
        for point, scalar in pairs:
            digit = (scalar >> shift) & mask
            if digit:
                buckets[digit - 1] = _add(buckets[digit - 1], point)
        running = _IDENTITY
        window_sum = _IDENTITY
        for bucket in reversed(buckets):
            running = _add(running, bucket)
            window_sum = _add(window_sum, running)
        result = _add(result, window_sum)
    return G1Point._from_jacobian(result)