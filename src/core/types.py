"""Core type definitions for the random number library.

This module contains:
- Type aliases for words, word arrays and real-valued sample arrays
- 32-bit word constants shared by the engine and output transforms
- Configuration dataclass describing how a generator is seeded
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

__all__ = [
    "Word",
    "WordArray",
    "RealArray",
    "SeedWords",
    "UINT32_MASK",
    "UINT32_SCALE",
    "DEFAULT_TABLE_BITS",
    "MAX_TABLE_BITS",
    "GeneratorConfig",
    "validate_word",
    "validate_seed_words",
]

# A single unsigned 32-bit value, held as a Python int
Word = int

# A 1D numpy array of dtype uint32
WordArray = np.ndarray

# A 1D numpy array of dtype float64
RealArray = np.ndarray

# Multi-word seed material for array seeding
SeedWords = Sequence[int]

UINT32_MASK = 0xFFFFFFFF
# 2**-32; exact in binary floating point
UINT32_SCALE = 1.0 / 4294967296.0

DEFAULT_TABLE_BITS = 14
MAX_TABLE_BITS = 24


def validate_word(value: Any, *, name: str = "seed") -> int:
    """Check that value is an unsigned 32-bit integer and return it as int.

    Raises:
        TypeError: If value is not an integer (bool is rejected too).
        ValueError: If value lies outside [0, 2**32).
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    value = int(value)
    if not 0 <= value <= UINT32_MASK:
        raise ValueError(f"{name} must be in [0, 2**32), got {value}")
    return value


def validate_seed_words(words: SeedWords) -> tuple[int, ...]:
    """Validate every entry of a seed sequence and return them as a tuple."""
    if isinstance(words, (str, bytes)):
        raise TypeError("seed words must be a sequence of integers")
    return tuple(validate_word(w, name=f"seed word {i}") for i, w in enumerate(words))


@dataclass(frozen=True, slots=True)
class GeneratorConfig:
    """How to seed a generator.

    Exactly one seeding path applies:
    - ``seed_words`` set: array seeding with those words
    - ``seed`` set: scalar seeding
    - neither: a seed is harvested from system entropy (and logged)

    Attributes:
        seed: Scalar 32-bit seed, or None.
        seed_words: Multi-word seed, or None.
        table_bits: log2 of the Gaussian lookup table size.
    """

    seed: int | None = None
    seed_words: tuple[int, ...] | None = None
    table_bits: int = DEFAULT_TABLE_BITS

    def __post_init__(self) -> None:
        if self.seed is not None and self.seed_words is not None:
            raise ValueError("Specify either seed or seed_words, not both")
        if self.seed is not None:
            validate_word(self.seed)
        if self.seed_words is not None:
            object.__setattr__(self, "seed_words", validate_seed_words(self.seed_words))
        if isinstance(self.table_bits, bool) or not isinstance(self.table_bits, int):
            raise TypeError("table_bits must be an integer")
        if not 1 <= self.table_bits <= MAX_TABLE_BITS:
            raise ValueError(f"table_bits must be in [1, {MAX_TABLE_BITS}], got {self.table_bits}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> GeneratorConfig:
        """Build a config from a JSON-style mapping.

        Unknown keys are rejected so that typos in config files surface early.
        """
        allowed = {"seed", "seed_words", "table_bits"}
        unknown = set(data) - allowed
        if unknown:
            raise ValueError(f"Unknown generator config keys: {sorted(unknown)}")
        seed_words = data.get("seed_words")
        return cls(
            seed=data.get("seed"),
            seed_words=tuple(seed_words) if seed_words is not None else None,
            table_bits=data.get("table_bits", DEFAULT_TABLE_BITS),
        )
