"""Block layout constants and the size arithmetic built on them."""

from dataclasses import dataclass

LOG_TARGET = "kate"

SEED_SIZE = 32
SCALAR_SIZE_WIDE = 64
SCALAR_SIZE = 32
# Bytes of payload per cell; each cell is zero padded up to the chunk size.
DATA_CHUNK_SIZE = 31
CHUNK_SIZE = 32
EXTENSION_FACTOR = 2
PROVER_KEY_SIZE = 48
PROOF_SIZE = 48
MAX_PROOFS_REQUEST = 30
# These three must be powers of two because of the FFT.
MINIMUM_BLOCK_SIZE = 128
MAX_BLOCK_ROWS = 256
MAX_BLOCK_COLUMNS = 256
PADDING_TAIL_VALUE = 0x80

_USIZE_MAX = 2**64 - 1


def padded_len_of_pad_iec_9797_1(length):
    """Length of ``length`` bytes after IEC 9797-1 padding to whole data chunks."""
    if length < 0:
        raise ValueError("length must not be negative")
    filled = length + 1
    return filled + (DATA_CHUNK_SIZE - filled % DATA_CHUNK_SIZE) % DATA_CHUNK_SIZE


def padded_len(length, chunk_size):
    """Length of ``length`` bytes after IEC 9797-1 padding and widening every chunk."""
    if chunk_size < DATA_CHUNK_SIZE:
        raise ValueError(
            f"chunk size {chunk_size} is smaller than the data chunk size {DATA_CHUNK_SIZE}"
        )
    iec_len = padded_len_of_pad_iec_9797_1(length)
    extra_per_chunk = chunk_size - DATA_CHUNK_SIZE
    return iec_len + (iec_len // DATA_CHUNK_SIZE) * extra_per_chunk


@dataclass(frozen=True)
class BlockDimensions:
    """Rows, columns and cell size of a data block."""

    rows: int
    cols: int
    chunk_size: int

    def size(self):
        """Total block size in bytes, saturating at the 64-bit maximum."""
        return min(self.rows * self.cols * self.chunk_size, _USIZE_MAX)