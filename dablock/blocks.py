"""Laying application data out as a padded block and erasure coding its columns."""

import logging
import time
from dataclasses import dataclass
from itertools import groupby
from operator import attrgetter

from .codec import encode_byte_vectors
from .config import (
    DATA_CHUNK_SIZE,
    EXTENSION_FACTOR,
    LOG_TARGET,
    MINIMUM_BLOCK_SIZE,
    PADDING_TAIL_VALUE,
    SCALAR_SIZE,
    BlockDimensions,
    padded_len_of_pad_iec_9797_1,
)
from .fft import DomainError, EvaluationDomain
from .field import ScalarError, scalar_from_bytes
from .rng import ChaChaRng

_log = logging.getLogger(LOG_TARGET)


class KateError(Exception):
    """Base class for errors while building a block."""


class BlockTooBig(KateError):
    """The data does not fit into the largest allowed block."""


class InvalidChunkLength(KateError):
    """A chunk does not have the size of a scalar."""


class CellLengthExceeded(KateError):
    """A chunk is not a valid scalar, or too many cells were requested."""


@dataclass(frozen=True)
class AppExtrinsic:
    """Opaque extrinsic data tagged with the application it belongs to."""

    app_id: int
    data: bytes

    def __post_init__(self):
        object.__setattr__(self, "data", bytes(self.data))


def group_by_app_id(extrinsics):
    """Group consecutive extrinsics sharing an app id into ``(app_id, [data, ...])``."""
    return [
        (app_id, [e.data for e in group])
        for app_id, group in groupby(extrinsics, key=attrgetter("app_id"))
    ]


def _pad_with_zeroes(data, length):
    return bytes(data[:length]).ljust(length, b"\x00")


def pad_to_chunk(chunk, chunk_size):
    """Widen a data chunk with zeros to ``chunk_size`` bytes."""
    if chunk_size < DATA_CHUNK_SIZE:
        raise ValueError(
            f"chunk size {chunk_size} is smaller than the data chunk size {DATA_CHUNK_SIZE}"
        )
    return _pad_with_zeroes(chunk, chunk_size)


def pad_iec_9797_1(data):
    """Append 0x80 and zeros up to whole data chunks, and split into those chunks."""
    data = bytes(data)
    padded = (data + bytes([PADDING_TAIL_VALUE])).ljust(
        padded_len_of_pad_iec_9797_1(len(data)), b"\x00"
    )
    return [padded[start:start + DATA_CHUNK_SIZE] for start in range(0, len(padded), DATA_CHUNK_SIZE)]


def get_block_dimensions(block_size, max_rows, max_cols, chunk_size):
    """Smallest power-of-two block, with as few rows as possible, holding ``block_size`` bytes."""
    max_dims = BlockDimensions(rows=max_rows, cols=max_cols, chunk_size=chunk_size)
    if block_size > max_dims.size():
        raise BlockTooBig(f"block of {block_size} bytes exceeds {max_dims.size()}")
    if block_size == max_dims.size():
        return max_dims

    nearest_power_2 = 1 if block_size <= 1 else 1 << (block_size - 1).bit_length()
    nearest_power_2 = max(nearest_power_2, MINIMUM_BLOCK_SIZE)
    total_cells = -(-nearest_power_2 // chunk_size)

    if total_cells > max_cols:
        cols, rows = max_cols, total_cells // max_cols
    else:
        cols, rows = total_cells, 1
    return BlockDimensions(rows=rows, cols=cols, chunk_size=chunk_size)


def flatten_and_pad_block(max_rows, max_cols, chunk_size, extrinsics, rng_seed):
    """Lay extrinsics out as a block and fill the rest with seeded random chunks.

    Returns the layout as ``(app_id, chunk_count)`` pairs, the block bytes and its dimensions.
    """
    ordered = sorted(extrinsics, key=attrgetter("app_id"))
    encoded = [(app_id, encode_byte_vectors(items)) for app_id, items in group_by_app_id(ordered)]

    layout = []
    padded_parts = []
    for app_id, data in encoded:
        chunks = pad_iec_9797_1(data)
        layout.append((app_id, len(chunks)))
        padded_parts.extend(pad_to_chunk(chunk, chunk_size) for chunk in chunks)
    block = b"".join(padded_parts)

    block_dims = get_block_dimensions(len(block), max_rows, max_cols, chunk_size)
    if len(block) > block_dims.size():
        raise BlockTooBig(f"block of {len(block)} bytes exceeds {block_dims.size()}")

    rng = ChaChaRng(rng_seed)
    missing = (block_dims.size() - len(block)) // block_dims.chunk_size
    filler = b"".join(
        _pad_with_zeroes(rng.gen_u8_array(DATA_CHUNK_SIZE), chunk_size) for _ in range(missing)
    )
    return layout, block + filler, block_dims


def _to_scalar(chunk):
    if len(chunk) != SCALAR_SIZE:
        raise InvalidChunkLength(f"chunk of {len(chunk)} bytes is not {SCALAR_SIZE} bytes")
    try:
        return scalar_from_bytes(chunk)
    except ScalarError as error:
        raise CellLengthExceeded(str(error)) from error


def extend_data_matrix(block_dims, block):
    """Erasure code the block column by column, doubling each column.

    The result is flat and column-major; original cells land on even rows.
    """
    start = time.perf_counter()
    block = bytes(block)
    rows = block_dims.rows
    extended_rows = rows * EXTENSION_FACTOR
    size = block_dims.chunk_size
    if len(block) % size:
        raise InvalidChunkLength(f"block of {len(block)} bytes is not a whole number of chunks")

    scalars = [_to_scalar(block[pos:pos + size]) for pos in range(0, len(block), size)]

    column_domain = EvaluationDomain(rows)
    extended_domain = EvaluationDomain(extended_rows)
    if column_domain.size != rows:
        raise DomainError(f"row count {rows} is not a power of two")

    result = []
    for first in range(0, len(scalars) - rows + 1, rows):
        coefficients = column_domain.ifft(scalars[first:first + rows])
        result.extend(extended_domain.fft(coefficients + [0] * (extended_rows - rows)))

    _log.info("Time to extend block %.6fs", time.perf_counter() - start)
    return result