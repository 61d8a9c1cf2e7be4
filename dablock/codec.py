"""Compact integer and byte-vector encoding in the SCALE wire format."""

_SINGLE_BYTE_LIMIT = 1 << 6
_TWO_BYTE_LIMIT = 1 << 14
_FOUR_BYTE_LIMIT = 1 << 30
_BIG_MIN_BYTES = 4
_BIG_MAX_BYTES = 67
_U32_MAX = 2**32 - 1


class CodecError(ValueError):
    """Raised for values that cannot be encoded or bytes that do not decode."""


def encode_compact(value):
    """Encode a non-negative integer in compact form."""
    if value < 0:
        raise CodecError("compact encoding needs a non-negative integer")
    if value < _SINGLE_BYTE_LIMIT:
        return bytes([value << 2])
    if value < _TWO_BYTE_LIMIT:
        return ((value << 2) | 0b01).to_bytes(2, "little")
    if value < _FOUR_BYTE_LIMIT:
        return ((value << 2) | 0b10).to_bytes(4, "little")
    size = max(_BIG_MIN_BYTES, (value.bit_length() + 7) // 8)
    if size > _BIG_MAX_BYTES:
        raise CodecError(f"value needs {size} bytes, more than {_BIG_MAX_BYTES}")
    return bytes([((size - _BIG_MIN_BYTES) << 2) | 0b11]) + value.to_bytes(size, "little")


def _take(data, start, length):
    end = start + length
    if end > len(data):
        raise CodecError("unexpected end of input")
    return data[start:end], end


def decode_compact(data, offset=0):
    """Decode a compact integer at ``offset``; return it with the offset just past it."""
    data = bytes(data)
    if offset < 0 or offset >= len(data):
        raise CodecError("unexpected end of input")
    first = data[offset]
    mode = first & 0b11
    if mode == 0b00:
        return first >> 2, offset + 1
    if mode == 0b01:
        raw, end = _take(data, offset, 2)
        value = int.from_bytes(raw, "little") >> 2
        if value < _SINGLE_BYTE_LIMIT:
            raise CodecError("non-canonical compact encoding")
        return value, end
    if mode == 0b10:
        raw, end = _take(data, offset, 4)
        value = int.from_bytes(raw, "little") >> 2
        if value < _TWO_BYTE_LIMIT:
            raise CodecError("non-canonical compact encoding")
        return value, end
    size = (first >> 2) + _BIG_MIN_BYTES
    raw, end = _take(data, offset + 1, size)
    value = int.from_bytes(raw, "little")
    if value < _FOUR_BYTE_LIMIT or raw[-1] == 0:
        raise CodecError("non-canonical compact encoding")
    return value, end


def _decode_length(data, offset):
    value, offset = decode_compact(data, offset)
    if value > _U32_MAX:
        raise CodecError(f"length {value} does not fit in 32 bits")
    return value, offset


def encode_byte_vectors(items):
    """Encode a sequence of byte strings as a length-prefixed vector of vectors."""
    items = [bytes(item) for item in items]
    parts = [encode_compact(len(items))]
    for item in items:
        parts.append(encode_compact(len(item)))
        parts.append(item)
    return b"".join(parts)


def decode_byte_vectors(data):
    """Decode a vector of byte strings; bytes after it are ignored."""
    data = bytes(data)
    count, offset = _decode_length(data, 0)
    result = []
    for _ in range(count):
        length, offset = _decode_length(data, offset)
        item, offset = _take(data, offset, length)
        result.append(item)
    return result