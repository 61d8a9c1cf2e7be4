# dablock

`dablock` lays application data out as a block of 32-byte cells, each
holding a BLS12-381 scalar. It erasure codes every column of the block to
twice its height and commits to each row of the extended matrix with KZG
polynomial commitments. It can also recover the application data from at
least half of the cells of each needed column.

The package also holds a small in-memory model of an application-key
registry, and a transaction check that limits which calls may use a non-zero
application id.

Everything is pure Python and uses only the standard library.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `dablock.config`: block constants (`DATA_CHUNK_SIZE`, `CHUNK_SIZE`,
  `EXTENSION_FACTOR`, `MAX_PROOFS_REQUEST`, `MAX_BLOCK_COLUMNS`, ...),
  the `BlockDimensions` dataclass with its `size()` method, and the length
  helpers `padded_len_of_pad_iec_9797_1` and `padded_len`.
- `dablock.field`: the BLS12-381 scalar field, with scalars as plain ints:
  `scalar_from_bytes`, `scalar_to_bytes`, `scalar_from_bytes_wide`, `invert`.
  Invalid input raises `ScalarError`.
- `dablock.fft`: `EvaluationDomain`, a power-of-two subgroup of roots of unity
  with `elements()`, `fft()` and `ifft()`. Domains that are too large raise
  `DomainError`.
- `dablock.rng`: `ChaChaRng`, a deterministic ChaCha20 generator seeded from
  32 bytes or, through `ChaChaRng.from_u64`, from a 64-bit integer.
- `dablock.curve`: `G1Point` with addition, negation, scalar multiplication,
  48-byte compressed `to_bytes`/`from_bytes`, and `multi_scalar_mul`.
  Invalid points raise `CurveError`.
- `dablock.kzg`: `PublicParameters.setup`, `PublicParameters.trim`,
  `CommitKey.commit`, `CommitKey.compute_single_witness`, and
  `public_params(max_degree)`, which builds parameters from the fixed seed 42
  and caches them per degree. Degree errors raise `KzgError`.
- `dablock.codec`: compact integer encoding (`encode_compact`,
  `decode_compact`) and length-prefixed lists of byte strings
  (`encode_byte_vectors`, `decode_byte_vectors`). Bad input raises
  `CodecError`.
- `dablock.blocks`: `AppExtrinsic`, `group_by_app_id`, `pad_iec_9797_1`,
  `pad_to_chunk`, `get_block_dimensions`, `flatten_and_pad_block` and
  `extend_data_matrix`. Errors derive from `KateError`: `BlockTooBig`,
  `InvalidChunkLength`, `CellLengthExceeded`.
- `dablock.commitments`: `Cell`, `build_commitments` and `build_proof`.
- `dablock.recovery`: `ExtendedMatrixDimensions`, `DataCell`, `data_ranges`,
  `app_specific_column_cells`, `unflatten_padded_data`, `reconstruct_poly`,
  `reconstruct_column` and `reconstruct_app_extrinsics`. Errors derive from
  `ReconstructionError`: `InvalidCell`, `DuplicateCellFound`,
  `InvalidColumn`, `ColumnReconstructionError`.
- `dablock.control`: the `DataAvailability` registry, with `Origin`,
  `AppKeyInfo`, `ControlConfig`, the event records `ApplicationKeyCreated`,
  `DataSubmitted` and `BlockLengthProposalSubmitted`, and errors deriving from
  `ControlError`.
- `dablock.check_app_id`: `CheckAppId`, raising `InvalidAppId` or
  `ForbiddenAppId` (both `InvalidTransaction`).

## Laying out, extending and recovering a block

```python
from dablock.blocks import AppExtrinsic, extend_data_matrix, flatten_and_pad_block
from dablock.field import scalar_to_bytes
from dablock.recovery import (
    DataCell,
    ExtendedMatrixDimensions,
    reconstruct_app_extrinsics,
)

xts = [AppExtrinsic(app_id=1, data=b"hello")]
layout, block, dims = flatten_and_pad_block(32, 4, 32, xts, bytes(32))
matrix = extend_data_matrix(dims, block)

ext_rows = dims.rows * 2
cells = [
    DataCell(row=row, col=col, data=scalar_to_bytes(matrix[col * ext_rows + row]))
    for col in range(dims.cols)
    for row in range(0, ext_rows, 2)
]
extended = ExtendedMatrixDimensions(rows=ext_rows, cols=dims.cols)
print(reconstruct_app_extrinsics(layout, extended, cells, None))
# [(1, [b'hello'])]
```

`flatten_and_pad_block` sorts extrinsics by application id, encodes each
application's extrinsics as one list, pads it with 0x80 and zeros to whole
31-byte chunks and widens each chunk to the chunk size. The layout it returns
lists `(app_id, chunk_count)` pairs. The rest of the block is filled with
random chunks drawn from a `ChaChaRng` keyed by the 32-byte seed, so the same
seed always gives the same block.

`extend_data_matrix` returns the extended matrix as a flat, column-major list
of scalars. The original cells sit on the even rows.

## Commitments and proofs

`build_commitments(rows, cols, chunk_size, extrinsics, seed)` returns the
layout, the 48-byte commitments of every extended row concatenated, the block
dimensions and the extended matrix. `build_proof(params, dims, matrix, cells)`
returns, for each requested `Cell` inside the extended matrix, the 48-byte
witness commitment followed by the 32-byte cell value. Cells outside it are
skipped. More than `MAX_PROOFS_REQUEST` cells raise `CellLengthExceeded`.

The parameters from `public_params` come from a fixed seed and are meant for
testing only. All curve arithmetic is pure Python, so building commitments
for large blocks is slow.

## Application keys

```python
from dablock.check_app_id import CheckAppId
from dablock.control import AppKeyInfo, ControlConfig, DataAvailability, Origin

registry = DataAvailability.from_genesis(
    ControlConfig(),
    [(b"Data Avail", AppKeyInfo(owner=1, id=0)), (b"Ethereum", AppKeyInfo(owner=2, id=1))],
)
new_id = registry.create_application_key(Origin.signed(3), b"New App")   # 2
registry.application_key(b"New App")        # AppKeyInfo(owner=3, id=2)

CheckAppId(new_id).validate(("DataAvailability", "submit_data"), registry)  # True
CheckAppId(0).validate(("System", "remark"), registry)                      # True
```

Creating a key that exists raises `AppKeyAlreadyExists`.
`submit_block_length_proposal` may only be called with `Origin.root()` and
checks the dimensions against the `ControlConfig` bounds. Emitted events are
appended to `registry.events`.

## What the package does not do

- It has no command-line program, network node or RPC service. It is a
  library only.
- It builds proofs but has no function to verify them: there is no pairing
  implementation.
- The registry keeps its state in memory only and stores nothing on disk.