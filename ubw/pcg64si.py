"""A small 64-bit PCG generator (RXS-M-XS output, single stream)."""

from __future__ import annotations

from dataclasses import dataclass

_MASK64 = (1 << 64) - 1
_MULTIPLIER = 6364136223846793005
_INCREMENT = 1442695040888963407
_OUTPUT_MULTIPLIER = 12605985483714917081


@dataclass
class Pcg64Si:
    """Deterministic pseudo-random generator with 64 bits of state."""

    state: int

    def __post_init__(self) -> None:
        self.state &= _MASK64

    @classmethod
    def from_seed(cls, seed: bytes) -> Pcg64Si:
        """Build a generator from eight seed bytes, read little-endian."""
        seed = bytes(seed)
        if len(seed) != 8:
            raise ValueError(f"seed must be 8 bytes, got {len(seed)}")
        return cls(int.from_bytes(seed, "little"))

    def next_u64(self) -> int:
        old = self.state
        self.state = (old * _MULTIPLIER + _INCREMENT) & _MASK64
        word = (((old >> ((old >> 59) + 5)) ^ old) * _OUTPUT_MULTIPLIER) & _MASK64
        return (word >> 43) ^ word

    def next_u32(self) -> int:
        return self.next_u64() & 0xFFFFFFFF

    def next_bytes(self, n: int) -> bytes:
        """Return ``n`` random bytes, eight per 64-bit draw."""
        if n < 0:
            raise ValueError("byte count must not be negative")
        full, rest = divmod(n, 8)
        out = bytearray()
        for _ in range(full):
            out += self.next_u64().to_bytes(8, "little")
        if rest > 4:
            out += self.next_u64().to_bytes(8, "little")[:rest]
        elif rest:
            out += self.next_u32().to_bytes(4, "little")[:rest]
        return bytes(out)