"""SHA-3 and original Keccak hashing (the Keccak-f[1600] sponge)."""

from __future__ import annotations

from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]

_ROUNDS = 24
_MASK64 = (1 << 64) - 1

# Rotation offsets applied in the rho step, indexed by lane.
_RHO_OFFSETS = (
    0, 1, 62, 28, 27,
    36, 44, 6, 55, 20,
    3, 10, 43, 25, 39,
    41, 45, 15, 21, 8,
    18, 2, 61, 56, 14,
)

# After pi, lane i takes the value that lane _PI_SOURCE[i] held before.
_PI_SOURCE = (
    0, 6, 12, 18, 24,
    3, 9, 10, 16, 22,
    1, 7, 13, 19, 20,
    4, 5, 11, 17, 23,
    2, 8, 14, 15, 21,
)

_SUPPORTED_BITS = (224, 256, 384, 512)
_SHA3_PAD = 0x06
_KECCAK_PAD = 0x01


def _make_round_constants() -> tuple[int, ...]:
    """Derive the iota round constants from the Keccak LFSR."""
    constants = []
    lfsr = 1
    for _ in range(_ROUNDS):
        constant = 0
        for j in range(7):
            if lfsr & 1:
                constant |= 1 << ((1 << j) - 1)
            lfsr = ((lfsr << 1) ^ 0x71) & 0xFF if lfsr & 0x80 else lfsr << 1
        constants.append(constant)
    return tuple(constants)


_ROUND_CONSTANTS = _make_round_constants()


def _rotl64(value: int, shift: int) -> int:
    if shift == 0:
        return value
    return ((value << shift) | (value >> (64 - shift))) & _MASK64


def _permute(state: list[int]) -> None:
    """Apply the 24-round Keccak-f[1600] permutation in place."""
    for round_constant in _ROUND_CONSTANTS:
        # theta
        columns = [
            state[x] ^ state[x + 5] ^ state[x + 10] ^ state[x + 15] ^ state[x + 20]
            for x in range(5)
        ]
        for x in range(5):
            d = _rotl64(columns[(x + 1) % 5], 1) ^ columns[(x + 4) % 5]
            for y in range(0, 25, 5):
                state[x + y] ^= d
        # rho and pi
        rotated = [_rotl64(lane, offset) for lane, offset in zip(state, _RHO_OFFSETS)]
        state[:] = [rotated[src] for src in _PI_SOURCE]
        # chi
        for y in range(0, 25, 5):
            row = state[y:y + 5]
            for x in range(5):
                state[y + x] = row[x] ^ (~row[(x + 1) % 5] & _MASK64 & row[(x + 2) % 5])
        # iota
        state[0] ^= round_constant


class Sha3:
    """Incremental SHA-3 or Keccak hash with a digest of ``bits`` bits.

    With ``keccak`` true the original Keccak padding (as used by Ethereum)
    is applied instead of the FIPS 202 SHA-3 padding.
    """

    def __init__(self, bits: int = 256, keccak: bool = False) -> None:
        if bits not in _SUPPORTED_BITS:
            raise ValueError(f"unsupported digest size: {bits} bits")
        self.bits = bits
        self.keccak = keccak
        self.block_size = (1600 - 2 * bits) // 8
        self.digest_size = bits // 8
        self._state = [0] * 25
        self._pending = bytearray()

    @property
    def name(self) -> str:
        return f"{'keccak' if self.keccak else 'sha3'}_{self.bits}"

    def _absorb(self, state: list[int], block: BytesLike) -> None:
        for i in range(self.block_size // 8):
            state[i] ^= int.from_bytes(block[8 * i:8 * i + 8], "little")
        _permute(state)

    def update(self, data: BytesLike) -> "Sha3":
        """Feed more message bytes; returns the hasher for chaining."""
        self._pending += memoryview(data).cast("B")
        whole = len(self._pending) - len(self._pending) % self.block_size
        for start in range(0, whole, self.block_size):
            self._absorb(self._state, self._pending[start:start + self.block_size])
        del self._pending[:whole]
        return self

    def digest(self) -> bytes:
        """Return the digest of everything fed so far without ending the hash."""
        state = list(self._state)
        block = bytearray(self._pending)
        block += bytes(self.block_size - len(block))
        block[len(self._pending)] |= _KECCAK_PAD if self.keccak else _SHA3_PAD
        block[-1] |= 0x80
        self._absorb(state, block)
        out = b"".join(lane.to_bytes(8, "little") for lane in state[: self.block_size // 8])
        return out[: self.digest_size]

    def hexdigest(self) -> str:
        return self.digest().hex()

    def copy(self) -> "Sha3":
        clone = Sha3(self.bits, self.keccak)
        clone._state = list(self._state)
        clone._pending = bytearray(self._pending)
        return clone


def sha3_256(data: BytesLike) -> bytes:
    """SHA3-256 digest of ``data``."""
    return Sha3(256, False).update(data).digest()


def sha3_512(data: BytesLike) -> bytes:
    """SHA3-512 digest of ``data``."""
    return Sha3(512, False).update(data).digest()


def keccak_256(data: BytesLike) -> bytes:
    """Keccak-256 digest of ``data`` (original Keccak padding)."""
    return Sha3(256, True).update(data).digest()


def keccak_512(data: BytesLike) -> bytes:
    """Keccak-512 digest of ``data`` (original Keccak padding)."""
    return Sha3(512, True).update(data).digest()