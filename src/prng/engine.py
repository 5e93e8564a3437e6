"""MT19937 Mersenne Twister engine.

This module provides the state container of the generator:
- ``twist``: regenerates the whole 624-word state vector in place
- ``temper``: the fixed output bit mixing applied to each raw word
- ``MTEngine``: state vector plus cursor, yielding tempered words one at a
  time or in bulk

The recurrence is the standard one (Matsumoto & Nishimura, 1998): period
2**19937 - 1 and 623-dimensional equidistribution at 32-bit accuracy.

Regeneration is vectorised with numpy. Word ``i`` of the new state depends on
old word ``i + 1`` and on word ``i + M``, which for ``i >= N - M`` has already
been regenerated. Splitting the vector into slices of length ``N - M`` keeps
every slice reading only values that are final for this pass.

Instances are not thread-safe. Each thread must own its engine or hold a
lock around every call.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from core.types import UINT32_MASK, WordArray

__all__ = [
    "N",
    "M",
    "MATRIX_A",
    "UPPER_MASK",
    "LOWER_MASK",
    "TEMPERING_MASK_B",
    "TEMPERING_MASK_C",
    "temper",
    "twist",
    "MTEngine",
]

N = 624
M = 397
MATRIX_A = 0x9908B0DF
UPPER_MASK = 0x80000000
LOWER_MASK = 0x7FFFFFFF
TEMPERING_MASK_B = 0x9D2C5680
TEMPERING_MASK_C = 0xEFC60000

# (start, stop, source offset) of each vectorised slice of the twist
_TWIST_SLICES = (
    (0, N - M, M),
    (N - M, 2 * (N - M), 0),
    (2 * (N - M), N - 1, N - M),
)


def temper(y: Any) -> Any:
    """Apply MT19937 output tempering.

    Pure and stateless. Accepts a Python int in [0, 2**32) or a numpy uint32
    array; the return value has the same kind.
    """
    y = y ^ (y >> 11)
    y = y ^ ((y << 7) & TEMPERING_MASK_B)
    y = y ^ ((y << 15) & TEMPERING_MASK_C)
    y = y ^ (y >> 18)
    if isinstance(y, int):
        return y & UINT32_MASK
    return y


def twist(mt: WordArray) -> None:
    """Regenerate all N words of a uint32 state vector in place."""
    for start, stop, src in _TWIST_SLICES:
        y = (mt[start:stop] & UPPER_MASK) | (mt[start + 1 : stop + 1] & LOWER_MASK)
        mt[start:stop] = mt[src : src + stop - start] ^ (y >> 1) ^ ((y & 1) * MATRIX_A)

    # Last word wraps around to the freshly regenerated word 0
    y = (int(mt[N - 1]) & UPPER_MASK) | (int(mt[0]) & LOWER_MASK)
    mt[N - 1] = int(mt[M - 1]) ^ (y >> 1) ^ (MATRIX_A if y & 1 else 0)


class MTEngine:
    """Mersenne Twister state vector and output cursor.

    The engine keeps the raw state words and, once per regeneration, the
    tempered copy of the whole block. Reading the block is equivalent to
    tempering each raw word on read, while keeping the per-draw cost to an
    index lookup.

    Args:
        state: N initial words, not all zero. Usually produced by
            :func:`prng.seeding.expand_seed` or
            :func:`prng.seeding.expand_seed_array`.

    Raises:
        ValueError: If the state has the wrong length, holds values outside
            [0, 2**32), or is all zero (a fixed point of the recurrence).
    """

    __slots__ = ("_state", "_index", "_block", "_words")

    def __init__(self, state: Any) -> None:
        raw = np.asarray(state)
        if raw.shape != (N,):
            raise ValueError(f"state must have shape ({N},), got {raw.shape}")
        if raw.dtype != np.uint32:
            if raw.dtype.kind not in "iu":
                raise ValueError(f"state must hold integers, got dtype {raw.dtype}")
            if raw.min() < 0 or raw.max() > UINT32_MASK:
                raise ValueError("state words must be in [0, 2**32)")
        self._state = np.array(raw, dtype=np.uint32)
        if not self._state.any():
            raise ValueError("state must not be all zero")
        self._index = N
        self._block = np.zeros(N, dtype=np.uint32)
        self._words: list[int] = []

    @property
    def index(self) -> int:
        """Position of the next word in the current block; N means exhausted."""
        return self._index

    def state_copy(self) -> WordArray:
        """Return a copy of the raw (untempered) state vector."""
        return self._state.copy()

    def _regenerate(self) -> None:
        twist(self._state)
        self._block = temper(self._state)
        self._words = self._block.tolist()
        self._index = 0

    def step(self) -> int:
        """Return the next tempered 32-bit word."""
        if self._index >= N:
            self._regenerate()
        word = self._words[self._index]
        self._index += 1
        return word

    def words(self, n: int) -> WordArray:
        """Return the next n tempered words as a uint32 array.

        Consumes exactly the same stream as n calls of :meth:`step`.

        Raises:
            ValueError: If n is negative.
        """
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")
        out = np.empty(n, dtype=np.uint32)
        filled = 0
        while filled < n:
            if self._index >= N:
                self._regenerate()
            take = min(N - self._index, n - filled)
            out[filled : filled + take] = self._block[self._index : self._index + take]
            self._index += take
            filled += take
        return out
