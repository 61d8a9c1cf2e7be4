"""Registry of application keys and block length proposals for data availability."""

from dataclasses import dataclass, field

from .config import CHUNK_SIZE, MAX_BLOCK_COLUMNS, BlockDimensions

_U32_MAX = 2**32 - 1


class ControlError(Exception):
    """Base class for errors raised by the data availability registry."""


class BadOrigin(ControlError):
    """The call came from an origin that may not make it."""


class AppKeyAlreadyExists(ControlError):
    """The application key already exists."""


class LastAppIdOverflowed(ControlError):
    """The next application id does not fit in 32 bits."""


class LastBlockLenProposalIdOverflowed(ControlError):
    """The next block length proposal id does not fit in 32 bits."""


class BlockDimensionsOutOfBounds(ControlError):
    """Proposed rows or columns exceed the allowed maximum."""


class BlockDimensionsTooSmall(ControlError):
    """Proposed rows or columns are below the allowed minimum."""


class ValueTooLong(ControlError):
    """A key or data blob is longer than its configured bound."""


class GenesisError(ControlError):
    """The initial application keys are inconsistent."""


@dataclass(frozen=True)
class Origin:
    """Who dispatched a call: a signed account or the root."""

    account: object = None
    is_root: bool = False

    @classmethod
    def signed(cls, account):
        """An origin signed by ``account``."""
        return cls(account=account, is_root=False)

    @classmethod
    def root(cls):
        """The privileged root origin."""
        return cls(account=None, is_root=True)


@dataclass(frozen=True)
class AppKeyInfo:
    """Owner of an application key and the id assigned to it."""

    owner: object
    id: int


@dataclass(frozen=True)
class ControlConfig:
    """Bounds on keys, data and block dimensions."""

    max_app_key_length: int = 32
    max_app_data_length: int = 16 * 1024
    min_block_rows: int = 32
    max_block_rows: int = 1024
    min_block_cols: int = 32
    max_block_cols: int = MAX_BLOCK_COLUMNS
    max_block_len_proposal_id: int = _U32_MAX


@dataclass(frozen=True)
class ApplicationKeyCreated:
    """A new application key was created."""

    key: bytes
    owner: object
    id: int


@dataclass(frozen=True)
class DataSubmitted:
    """An account submitted application data."""

    who: object
    data: bytes


@dataclass(frozen=True)
class BlockLengthProposalSubmitted:
    """The block dimensions were changed."""

    rows: int
    cols: int


def _ensure_signed(origin):
    if origin.is_root or origin.account is None:
        raise BadOrigin("a signed origin is required")
    return origin.account


def _ensure_root(origin):
    if not origin.is_root:
        raise BadOrigin("the root origin is required")


def _bounded(value, limit, what):
    value = bytes(value)
    if len(value) > limit:
        raise ValueTooLong(f"{what} of {len(value)} bytes exceeds {limit}")
    return value


class DataAvailability:
    """State of the registry: application keys, id counters, block length and events."""

    def __init__(self, config=None):
        self.config = config if config is not None else ControlConfig()
        self._next_app_id = 0
        self._last_block_len_id = 0
        self._app_keys = {}
        self.block_length = None
        self.events = []

    @classmethod
    def from_genesis(cls, config, app_keys):
        """Registry seeded with ``(key, AppKeyInfo)`` pairs; ids must be unique."""
        registry = cls(config)
        app_keys = [(bytes(key), info) for key, info in app_keys]
        ids = {info.id for _, info in app_keys}
        if len(ids) != len(app_keys):
            raise GenesisError("genesis contains duplicated application ID")
        for key, info in app_keys:
            if len(key) > registry.config.max_app_key_length:
                raise GenesisError("genesis contains invalid keys")
            registry._app_keys[key] = info
        next_id = max(ids, default=0) + 1
        if next_id > _U32_MAX:
            raise GenesisError("genesis overflows the last application id")
        registry._next_app_id = next_id
        return registry

    def application_key(self, key):
        """Information stored for ``key``, or None."""
        return self._app_keys.get(bytes(key))

    def peek_next_application_id(self):
        """The id the next application key will receive."""
        return self._next_app_id

    def next_application_id(self):
        """Return the next application id and advance the counter."""
        current = self._next_app_id
        if current + 1 > _U32_MAX:
            raise LastAppIdOverflowed("the last application ID overflowed")
        self._next_app_id = current + 1
        return current

    def next_block_len_proposal_id(self):
        """Return the next block length proposal id and advance the counter."""
        current = self._last_block_len_id
        if current + 1 > self.config.max_block_len_proposal_id:
            raise LastBlockLenProposalIdOverflowed(
                "the last block length proposal Id overflowed"
            )
        self._last_block_len_id = current + 1
        return current

    def create_application_key(self, origin, key):
        """Register ``key`` to the signing account; return the assigned id."""
        owner = _ensure_signed(origin)
        key = _bounded(key, self.config.max_app_key_length, "application key")
        if key in self._app_keys:
            raise AppKeyAlreadyExists(f"application key {key!r} already exists")
        app_id = self.next_application_id()
        self._app_keys[key] = AppKeyInfo(owner=owner, id=app_id)
        self.events.append(ApplicationKeyCreated(key=key, owner=owner, id=app_id))
        return app_id

    def submit_data(self, origin, data):
        """Record data submitted by the signing account."""
        who = _ensure_signed(origin)
        data = _bounded(data, self.config.max_app_data_length, "application data")
        self.events.append(DataSubmitted(who=who, data=data))

    def submit_block_length_proposal(self, origin, rows, cols):
        """Set new block dimensions; only the root may do so."""
        _ensure_root(origin)
        config = self.config
        if rows > config.max_block_rows or cols > config.max_block_cols:
            raise BlockDimensionsOutOfBounds(f"{rows}x{cols} exceeds the maximum")
        if rows < config.min_block_rows or cols < config.min_block_cols:
            raise BlockDimensionsTooSmall(f"{rows}x{cols} is below the minimum")
        self.next_block_len_proposal_id()
        self.block_length = BlockDimensions(rows=rows, cols=cols, chunk_size=CHUNK_SIZE)
        self.events.append(BlockLengthProposalSubmitted(rows=rows, cols=cols))