"""Recovering application data from a sample of cells of the extended data matrix."""

from dataclasses import dataclass

from .codec import decode_byte_vectors
from .config import CHUNK_SIZE, DATA_CHUNK_SIZE, PADDING_TAIL_VALUE
from .fft import EvaluationDomain
from .field import MODULUS, ScalarError, invert, scalar_from_bytes, scalar_to_bytes

# Multiplicative shift used to move evaluations off the domain during recovery.
_SHIFT_FACTOR = 5


@dataclass(frozen=True)
class ExtendedMatrixDimensions:
    """Rows and columns of the extended (erasure coded) data matrix."""

    rows: int
    cols: int


@dataclass(frozen=True)
class DataCell:
    """A cell of the extended matrix with its 32-byte scalar data, if known."""

    row: int = 0
    col: int = 0
    data: bytes = b""

    def __post_init__(self):
        object.__setattr__(self, "data", bytes(self.data))

    @classmethod
    def new_empty(cls, col, row):
        """A cell at the given position carrying no data."""
        return cls(row=row, col=col, data=b"")


class ReconstructionError(Exception):
    """Base class for errors while reconstructing data from cells."""


class InvalidCell(ReconstructionError):
    """A cell lies outside the matrix."""

    def __init__(self, col, row):
        super().__init__(f"Invalid cell (col {col}, row {row})")
        self.col = col
        self.row = row


class DuplicateCellFound(ReconstructionError):
    """The same cell was given twice."""

    def __init__(self):
        super().__init__("Duplicate cell found")


class InvalidColumn(ReconstructionError):
    """A column holds fewer than half of its rows."""

    def __init__(self, column):
        super().__init__(f"Column {column} contains less than half rows")
        self.column = column


class ColumnReconstructionError(ReconstructionError):
    """A column could not be reconstructed from its cells."""

    def __init__(self, reason):
        super().__init__(f"Cannot reconstruct column: {reason}")
        self.reason = reason


def _map_cells(dimensions, cells):
    """Group cells by column and row, rejecting out-of-range and duplicate cells."""
    result = {}
    for cell in cells:
        if cell.row > dimensions.rows or cell.col > dimensions.cols:
            raise InvalidCell(cell.col, cell.row)
        column = result.setdefault(cell.col, {})
        if cell.row in column:
            raise DuplicateCellFound()
        column[cell.row] = cell
    return result


def data_ranges(layout):
    """Byte range of each application's data in the flattened block.

    ``layout`` holds ``(app_id, chunk_count)`` pairs; the result holds
    ``(app_id, range)`` pairs.
    """
    ranges = []
    start = 0
    for app_id, size in layout:
        end = start + size * CHUNK_SIZE
        ranges.append((app_id, range(start, end)))
        start = end
    return ranges


def app_specific_column_cells(layout, dimensions, app_id):
    """Empty cells of every column holding data of ``app_id``, or None if it has none."""
    span = next((span for app, span in data_ranges(layout) if app == app_id), None)
    if span is None:
        return None

    row_size = dimensions.rows * CHUNK_SIZE
    column_start = span.start * 2 // row_size
    column_end, remainder = divmod(span.stop * 2, row_size)
    if remainder:
        column_end += 1

    return [
        DataCell.new_empty(col, row)
        for col in range(column_start, column_end)
        for row in range(dimensions.rows)
    ]


def unflatten_padded_data(layout, data, chunk_size):
    """Strip chunk widening, IEC 9797-1 padding and block filler, and decode each range.

    ``layout`` holds ``(app_id, range)`` pairs; the result holds
    ``(app_id, [extrinsic, ...])`` pairs.
    """
    data = bytes(data)
    if chunk_size <= DATA_CHUNK_SIZE:
        raise ValueError("Cannot trim to bigger size!")
    if len(data) % chunk_size:
        raise ValueError(f"data of {len(data)} bytes is not a whole number of chunks")

    result = []
    for app_id, span in layout:
        if span.stop > len(data) or span.start > span.stop:
            raise ValueError(f"range {span.start}..{span.stop} is outside the data")
        segment = data[span.start:span.stop]
        whole = len(segment) - len(segment) % chunk_size
        original = b"".join(
            segment[pos:pos + DATA_CHUNK_SIZE] for pos in range(0, whole, chunk_size)
        )
        stripped = original.rstrip(b"\x00")
        if stripped.endswith(bytes([PADDING_TAIL_VALUE])):
            original = stripped[:-1]
        result.append((app_id, decode_byte_vectors(original)))
    return result


def _multiply_by_linear(poly, root):
    """Multiply a polynomial (lowest coefficient first) by ``X - root``."""
    raised = [0, *poly]
    scaled = [root * c % MODULUS for c in poly] + [0]
    return [(a - b) % MODULUS for a, b in zip(raised, scaled)]


def _expand_root_of_unity(eval_domain):
    generator = eval_domain.group_gen
    roots = [1, generator]
    while roots[-1] != 1:
        roots.append(roots[-1] * generator % MODULUS)
    return roots


def _zero_poly_fn(eval_domain, missing_indices, length):
    """The polynomial vanishing on the missing points, and its evaluations on the domain."""
    roots = _expand_root_of_unity(eval_domain)
    stride = eval_domain.size // length
    zero_poly = [1]
    for index in missing_indices:
        zero_poly = _multiply_by_linear(zero_poly, roots[index * stride])
    zero_poly += [0] * (length - len(zero_poly))
    return zero_poly, eval_domain.fft(zero_poly)


def _scaled_by_powers(poly, factor):
    result = []
    power = 1
    for coefficient in poly:
        result.append(coefficient * power % MODULUS)
        power = power * factor % MODULUS
    return result


def _shift_poly(poly):
    return _scaled_by_powers(poly, invert(_SHIFT_FACTOR))


def _unshift_poly(poly):
    return _scaled_by_powers(poly, _SHIFT_FACTOR)


def reconstruct_poly(eval_domain, subset):
    """Recover the original half of the data from a subset of coded evaluations.

    ``subset`` holds one entry per domain point: the scalar, or None if missing.
    """
    subset = list(subset)
    missing = [i for i, value in enumerate(subset) if value is None]
    zero_poly, zero_eval = _zero_poly_fn(eval_domain, missing, len(subset))

    if any(value is None and evaluation != 0 for value, evaluation in zip(subset, zero_eval)):
        raise ColumnReconstructionError("bad zero poly evaluation !")

    evals_with_zero = [
        0 if value is None else value * evaluation % MODULUS
        for value, evaluation in zip(subset, zero_eval)
    ]
    poly_with_zero = _shift_poly(eval_domain.ifft(evals_with_zero))
    shifted_zero_poly = _shift_poly(zero_poly)

    eval_shifted_poly_with_zero = eval_domain.fft(poly_with_zero)
    eval_shifted_zero_poly = eval_domain.fft(shifted_zero_poly)
    try:
        quotient = [
            numerator * invert(denominator) % MODULUS
            for numerator, denominator in zip(eval_shifted_poly_with_zero, eval_shifted_zero_poly)
        ]
    except ScalarError as error:
        raise ColumnReconstructionError(str(error)) from error

    reconstructed = _unshift_poly(eval_domain.ifft(quotient))
    short_domain = EvaluationDomain(eval_domain.size // 2)
    return short_domain.fft(reconstructed)


def reconstruct_column(row_count, cells):
    """Recover the original scalars of one column from at least half of its cells."""
    cells = list(cells)
    if row_count <= 0 or row_count & (row_count - 1):
        raise ColumnReconstructionError(f"row count {row_count} is not a power of two")
    if not row_count // 2 <= len(cells) <= row_count:
        raise ColumnReconstructionError(
            f"{len(cells)} cells given, between {row_count // 2} and {row_count} needed"
        )
    if any(cell.col != cells[0].col for cell in cells):
        raise ColumnReconstructionError("cells belong to different columns")

    by_row = {}
    for cell in cells:
        by_row.setdefault(cell.row, cell)

    try:
        subset = [
            scalar_from_bytes(by_row[row].data) if row in by_row else None
            for row in range(row_count)
        ]
    except ScalarError as error:
        raise ColumnReconstructionError(str(error)) from error

    return reconstruct_poly(EvaluationDomain(row_count), subset)


def reconstruct_app_extrinsics(layout, dimensions, cells, app_id=None):
    """Reconstruct extrinsics from sampled cells, for one application or all of them.

    Columns without any cells are treated as zero; columns that are needed
    must hold at least half of their cells.
    """
    cells_map = _map_cells(dimensions, cells)
    half = dimensions.rows // 2
    parts = []
    for column in range(dimensions.cols):
        column_cells = cells_map.get(column)
        if column_cells is None:
            parts.append(bytes(half * CHUNK_SIZE))
            continue
        if len(column_cells) < half:
            raise InvalidColumn(column)
        scalars = reconstruct_column(dimensions.rows, list(column_cells.values()))
        parts.extend(scalar_to_bytes(scalar) for scalar in scalars)

    ranges = [
        (app, span) for app, span in data_ranges(layout) if app_id is None or app == app_id
    ]
    return unflatten_padded_data(ranges, b"".join(parts), CHUNK_SIZE)