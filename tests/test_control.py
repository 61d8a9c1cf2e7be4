import pytest

from dablock.config import BlockDimensions
from dablock.control import (
    AppKeyAlreadyExists,
    AppKeyInfo,
    ApplicationKeyCreated,
    BadOrigin,
    BlockDimensionsOutOfBounds,
    BlockDimensionsTooSmall,
    BlockLengthProposalSubmitted,
    ControlConfig,
    DataAvailability,
    DataSubmitted,
    GenesisError,
    LastAppIdOverflowed,
    LastBlockLenProposalIdOverflowed,
    Origin,
    ValueTooLong,
)


def genesis():
    return DataAvailability.from_genesis(
        ControlConfig(),
        [
            (b"Data Avail", AppKeyInfo(owner=1, id=0)),
            (b"Ethereum", AppKeyInfo(owner=2, id=1)),
            (b"Polygon", AppKeyInfo(owner=2, id=2)),
        ],
    )


def test_create_application_keys():
    da = genesis()
    new_key = b"New App"
    assert da.application_key(new_key) is None
    assert da.create_application_key(Origin.signed(3), new_key) == 3

    events_before = list(da.events)
    with pytest.raises(AppKeyAlreadyExists):
        da.create_application_key(Origin.signed(2), new_key)
    assert da.events == events_before
    assert da.peek_next_application_id() == 4
    assert da.application_key(new_key) == AppKeyInfo(owner=3, id=3)


def test_create_key_emits_event():
    da = genesis()
    da.create_application_key(Origin.signed(5), b"X")
    assert da.events == [ApplicationKeyCreated(key=b"X", owner=5, id=3)]


def test_genesis_keys_and_next_id():
    da = genesis()
    assert da.application_key(b"Ethereum") == AppKeyInfo(owner=2, id=1)
    assert da.peek_next_application_id() == 3


def test_empty_genesis_next_id_is_one():
    da = DataAvailability.from_genesis(ControlConfig(), [])
    assert da.peek_next_application_id() == 1


def test_genesis_duplicate_ids():
    with pytest.raises(GenesisError):
        DataAvailability.from_genesis(
            ControlConfig(), [(b"a", AppKeyInfo(1, 0)), (b"b", AppKeyInfo(1, 0))]
        )


def test_genesis_key_too_long():
    with pytest.raises(GenesisError):
        DataAvailability.from_genesis(ControlConfig(), [(b"k" * 33, AppKeyInfo(1, 0))])


def test_genesis_id_overflow():
    with pytest.raises(GenesisError):
        DataAvailability.from_genesis(ControlConfig(), [(b"k", AppKeyInfo(1, 2**32 - 1))])


def test_create_key_overflow_leaves_state():
    da = DataAvailability.from_genesis(ControlConfig(), [(b"k", AppKeyInfo(1, 2**32 - 2))])
    with pytest.raises(LastAppIdOverflowed):
        da.create_application_key(Origin.signed(1), b"new")
    assert da.application_key(b"new") is None
    assert da.peek_next_application_id() == 2**32 - 1


def test_create_key_requires_signed():
    da = genesis()
    with pytest.raises(BadOrigin):
        da.create_application_key(Origin.root(), b"key")


def test_create_key_too_long():
    da = genesis()
    with pytest.raises(ValueTooLong):
        da.create_application_key(Origin.signed(1), b"X" * 33)
    assert da.create_application_key(Origin.signed(1), b"X" * 32) == 3


def test_next_application_id_advances():
    da = genesis()
    assert da.next_application_id() == 3
    assert da.next_application_id() == 4
    assert da.peek_next_application_id() == 5


def test_submit_data():
    da = genesis()
    da.submit_data(Origin.signed(7), b"payload")
    assert da.events == [DataSubmitted(who=7, data=b"payload")]


def test_submit_data_too_long():
    da = genesis()
    with pytest.raises(ValueTooLong):
        da.submit_data(Origin.signed(7), bytes(16 * 1024 + 1))
    da.submit_data(Origin.signed(7), bytes(16 * 1024))
    assert len(da.events) == 1


def test_submit_data_requires_signed():
    with pytest.raises(BadOrigin):
        genesis().submit_data(Origin.root(), b"x")


def test_block_length_proposal():
    da = genesis()
    da.submit_block_length_proposal(Origin.root(), 1024, 256)
    assert da.block_length == BlockDimensions(rows=1024, cols=256, chunk_size=32)
    assert da.events == [BlockLengthProposalSubmitted(rows=1024, cols=256)]
    assert da.next_block_len_proposal_id() == 1


def test_block_length_proposal_requires_root():
    with pytest.raises(BadOrigin):
        genesis().submit_block_length_proposal(Origin.signed(1), 64, 64)


@pytest.mark.parametrize("rows, cols", [(1025, 64), (64, 257)])
def test_block_length_out_of_bounds(rows, cols):
    da = genesis()
    with pytest.raises(BlockDimensionsOutOfBounds):
        da.submit_block_length_proposal(Origin.root(), rows, cols)
    assert da.block_length is None


@pytest.mark.parametrize("rows, cols", [(31, 64), (64, 31)])
def test_block_length_too_small(rows, cols):
    with pytest.raises(BlockDimensionsTooSmall):
        genesis().submit_block_length_proposal(Origin.root(), rows, cols)


def test_block_len_proposal_id_overflow():
    da = DataAvailability(ControlConfig(max_block_len_proposal_id=1))
    assert da.next_block_len_proposal_id() == 0
    with pytest.raises(LastBlockLenProposalIdOverflowed):
        da.next_block_len_proposal_id()