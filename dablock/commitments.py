"""KZG commitments to the rows of an extended block, and proofs for single cells."""

import logging
import time
from dataclasses import dataclass

from .blocks import CellLengthExceeded, extend_data_matrix, flatten_and_pad_block
from .config import (
    EXTENSION_FACTOR,
    LOG_TARGET,
    MAX_BLOCK_COLUMNS,
    MAX_PROOFS_REQUEST,
    PROOF_SIZE,
    SCALAR_SIZE,
)
from .fft import EvaluationDomain
from .field import scalar_to_bytes
from .kzg import public_params as testnet_public_params

_log = logging.getLogger(LOG_TARGET)


@dataclass(frozen=True)
class Cell:
    """Position of a cell in the extended data matrix."""

    row: int
    col: int


def _row(ext_data_matrix, row_index, cols, extended_rows):
    return [ext_data_matrix[row_index + j * extended_rows] for j in range(cols)]


def build_proof(public_params, block_dims, ext_data_matrix, cells):
    """Proofs for the requested cells, each the 48-byte witness followed by the 32-byte value.

    Cells outside the extended matrix are skipped.
    """
    cells = list(cells)
    cols = block_dims.cols
    extended_rows = block_dims.rows * EXTENSION_FACTOR

    if len(cells) > MAX_PROOFS_REQUEST:
        raise CellLengthExceeded(
            f"{len(cells)} cells requested, at most {MAX_PROOFS_REQUEST} allowed"
        )

    prover_key = public_params.trim(cols)
    row_domain = EvaluationDomain(cols)
    row_points = list(row_domain.elements())

    start = time.perf_counter()
    proofs = []
    for cell in cells:
        if not (0 <= cell.row < extended_rows and 0 <= cell.col < cols):
            continue
        polynomial = row_domain.ifft(_row(ext_data_matrix, cell.row, cols, extended_rows))
        witness = prover_key.compute_single_witness(polynomial, row_points[cell.col])
        commitment = prover_key.commit(witness)
        evaluated = ext_data_matrix[cell.row + cell.col * extended_rows]
        proofs.append(commitment.to_bytes() + scalar_to_bytes(evaluated))

    _log.info("Time to build 1 row of proofs %.6fs", time.perf_counter() - start)
    result = b"".join(proofs)
    assert len(result) == len(proofs) * (PROOF_SIZE + SCALAR_SIZE)
    return result


def build_commitments(rows, cols, chunk_size, extrinsics, rng_seed):
    """Lay out and extend a block, then commit to every extended row.

    Returns the layout, the concatenated 48-byte row commitments, the block
    dimensions and the extended matrix.
    """
    start = time.perf_counter()
    layout, block, block_dims = flatten_and_pad_block(
        rows, cols, chunk_size, extrinsics, rng_seed
    )
    _log.info(
        "Rows: %d Cols: %d Size: %d", block_dims.rows, block_dims.cols, len(block)
    )

    ext_data_matrix = extend_data_matrix(block_dims, block)
    extended_rows = block_dims.rows * EXTENSION_FACTOR
    _log.info("Time to prepare %.6fs", time.perf_counter() - start)

    if block_dims.cols > MAX_BLOCK_COLUMNS:
        _log.error("Error on Block dimension %r", block_dims)

    prover_key = testnet_public_params(MAX_BLOCK_COLUMNS).trim(block_dims.cols)
    row_domain = EvaluationDomain(block_dims.cols)

    start = time.perf_counter()
    commitments = b"".join(
        prover_key.commit(
            row_domain.ifft(_row(ext_data_matrix, i, block_dims.cols, extended_rows))
        ).to_bytes()
        for i in range(extended_rows)
    )
    _log.info("Time to build a commitment %.6fs", time.perf_counter() - start)

    return layout, commitments, block_dims, ext_data_matrix