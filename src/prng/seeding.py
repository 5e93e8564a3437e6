"""Seed expansion and seed harvesting.

Two deterministic paths turn seed material into an engine state vector:
- ``expand_seed``: one 32-bit word, expanded by a multiplicative recurrence
- ``expand_seed_array``: any number of words folded into a fixed baseline,
  for runs that need more than 32 bits of seed entropy

Neither path can produce the all-zero vector, which is a fixed point of the
twist. ``make_seed`` is the non-deterministic helper used when the caller has
no seed of its own; the value it returns must be recorded by the caller if
the run is ever to be reproduced, and it is logged at INFO for that reason.
"""

from __future__ import annotations

import os
import time

import numpy as np

from core.logging import get_logger
from core.types import UINT32_MASK, SeedWords, WordArray, validate_seed_words, validate_word
from prng.engine import N

__all__ = [
    "ARRAY_BASELINE_SEED",
    "expand_seed",
    "expand_seed_array",
    "make_seed",
]

logger = get_logger(__name__)

# Scalar seed whose expansion is the starting point of array seeding
ARRAY_BASELINE_SEED = 19650218

_INIT_MULTIPLIER = 1812433253
_ARRAY_FORWARD_MULTIPLIER = 1664525
_ARRAY_BACKWARD_MULTIPLIER = 1566083941
_ARRAY_FINAL_WORD0 = 0x80000000


def _expand_words(seed: int) -> list[int]:
    mt = [0] * N
    mt[0] = seed
    for i in range(1, N):
        prev = mt[i - 1]
        # The "+ i" term keeps the vector non-zero: mt[i] == i whenever mt[i-1] == 0
        mt[i] = (_INIT_MULTIPLIER * (prev ^ (prev >> 30)) + i) & UINT32_MASK
    return mt


def expand_seed(seed: int) -> WordArray:
    """Expand a 32-bit seed into a full N-word state vector.

    Every value in [0, 2**32) is accepted, including 0.

    Args:
        seed: Unsigned 32-bit seed.

    Returns:
        uint32 array of shape (N,).

    Raises:
        TypeError: If seed is not an integer.
        ValueError: If seed is outside [0, 2**32).
    """
    seed = validate_word(seed)
    return np.array(_expand_words(seed), dtype=np.uint32)


def expand_seed_array(seed_words: SeedWords) -> WordArray:
    """Fold a sequence of 32-bit words into a full N-word state vector.

    Starts from ``expand_seed(ARRAY_BASELINE_SEED)`` and mixes the key in with
    a forward pass over ``max(N, len(seed_words))`` positions followed by a
    backward pass over N - 1 positions. Keys longer than N are folded in
    completely; later words wrap around onto earlier state positions. Word 0
    is finally set to 0x80000000, which guarantees a non-zero state even for
    an all-zero key.

    An empty sequence returns the baseline state unchanged, so array seeding
    with no words is identical to scalar seeding with ARRAY_BASELINE_SEED.

    Raises:
        TypeError: If any word is not an integer.
        ValueError: If any word is outside [0, 2**32).
    """
    key = validate_seed_words(seed_words)
    mt = _expand_words(ARRAY_BASELINE_SEED)
    length = len(key)
    if length == 0:
        return np.array(mt, dtype=np.uint32)

    i, j = 1, 0
    for _ in range(max(N, length)):
        prev = mt[i - 1]
        mt[i] = (
            (mt[i] ^ ((prev ^ (prev >> 30)) * _ARRAY_FORWARD_MULTIPLIER)) + key[j] + j
        ) & UINT32_MASK
        i += 1
        j += 1
        if i >= N:
            mt[0] = mt[N - 1]
            i = 1
        if j >= length:
            j = 0

    for _ in range(N - 1):
        prev = mt[i - 1]
        mt[i] = ((mt[i] ^ ((prev ^ (prev >> 30)) * _ARRAY_BACKWARD_MULTIPLIER)) - i) & UINT32_MASK
        i += 1
        if i >= N:
            mt[0] = mt[N - 1]
            i = 1

    mt[0] = _ARRAY_FINAL_WORD0
    return np.array(mt, dtype=np.uint32)


def _fallback_seed() -> int:
    now = time.time_ns()
    seconds, micros = divmod(now // 1000, 1_000_000)
    return (seconds ^ (micros << 12) ^ (os.getpid() << 16) ^ (now >> 32)) & UINT32_MASK


def make_seed() -> int:
    """Harvest an unpredictable 32-bit seed.

    Reads four bytes from the operating system entropy source. If that is
    unavailable, falls back to combining the wall-clock time with the process
    id. Never raises.

    The result is not reproducible. Record it (it is logged at INFO) if the
    run may need to be repeated.

    Returns:
        Unsigned 32-bit seed.
    """
    try:
        seed = int.from_bytes(os.urandom(4), "little")
        source = "os.urandom"
    except (OSError, NotImplementedError) as exc:
        logger.warning("System entropy unavailable (%s); seeding from time and pid", exc)
        seed = _fallback_seed()
        source = "time/pid"
    logger.info("Harvested RNG seed %d from %s", seed, source)
    return seed
