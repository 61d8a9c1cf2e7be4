"""The ChaCha20 stream generator used for seeded block padding and key setup."""

import struct

_MASK32 = 0xFFFFFFFF
_CONSTANTS = (0x61707865, 0x3320646E, 0x79622D32, 0x6B206574)
_ROUNDS = 20


def _rotl(value, count):
    return ((value << count) & _MASK32) | (value >> (32 - count))


def _quarter_round(state, a, b, c, d):
    state[a] = (state[a] + state[b]) & _MASK32
    state[d] = _rotl(state[d] ^ state[a], 16)
    state[c] = (state[c] + state[d]) & _MASK32
    state[b] = _rotl(state[b] ^ state[c], 12)
    state[a] = (state[a] + state[b]) & _MASK32
    state[d] = _rotl(state[d] ^ state[a], 8)
    state[c] = (state[c] + state[d]) & _MASK32
    state[b] = _rotl(state[b] ^ state[c], 7)


def _chacha_block(key, counter):
    initial = [
        *_CONSTANTS,
        *key,
        counter & _MASK32,
        (counter >> 32) & _MASK32,
        0,
        0,
    ]
    state = list(initial)
    for _ in range(_ROUNDS // 2):
        _quarter_round(state, 0, 4, 8, 12)
        _quarter_round(state, 1, 5, 9, 13)
        _quarter_round(state, 2, 6, 10, 14)
        _quarter_round(state, 3, 7, 11, 15)
        _quarter_round(state, 0, 5, 10, 15)
        _quarter_round(state, 1, 6, 11, 12)
        _quarter_round(state, 2, 7, 8, 13)
        _quarter_round(state, 3, 4, 9, 14)
    return [(s + i) & _MASK32 for s, i in zip(state, initial)]


class ChaChaRng:
    """ChaCha20 generator keyed by a 32-byte seed, with a zero stream id."""

    def __init__(self, seed):
        seed = bytes(seed)
        if len(seed) != 32:
            raise ValueError(f"seed must be 32 bytes, got {len(seed)}")
        self._key = struct.unpack("<8I", seed)
        self._counter = 0
        self._buffer = []
        self._index = 0

    @classmethod
    def from_u64(cls, state):
        """Expand a 64-bit value into a seed with a PCG32 step, as seeding from an integer does."""
        mul = 6364136223846793005
        inc = 11634580027462260723
        mask64 = 2**64 - 1
        state &= mask64
        words = []
        for _ in range(8):
            state = (state * mul + inc) & mask64
            xorshifted = (((state >> 18) ^ state) >> 27) & _MASK32
            rot = state >> 59
            words.append(((xorshifted >> rot) | (xorshifted << ((32 - rot) & 31))) & _MASK32)
        return cls(struct.pack("<8I", *words))

    def next_u32(self):
        """Next 32-bit word of the key stream."""
        if self._index >= len(self._buffer):
            self._buffer = _chacha_block(self._key, self._counter)
            self._counter += 1
            self._index = 0
        word = self._buffer[self._index]
        self._index += 1
        return word

    def next_u64(self):
        """Next two words, the first one as the low half."""
        low = self.next_u32()
        high = self.next_u32()
        return (high << 32) | low

    def fill_bytes(self, length):
        """Next ``length`` bytes of the key stream; a partly used word is discarded."""
        words = [self.next_u32() for _ in range(-(-length // 4))]
        return struct.pack(f"<{len(words)}I", *words)[:length]

    def gen_u8_array(self, length):
        """A byte array drawn one byte per word, from each word's low byte."""
        return bytes(self.next_u32() & 0xFF for _ in range(length))