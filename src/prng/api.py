"""Handle-style interface to the generator.

Thin functions over :class:`prng.generator.Generator` for callers that prefer
passing a handle around to calling methods. Constructors report resource
exhaustion by returning ``None`` instead of raising; every draw function is
total on a live handle.

Preconditions (not checked at runtime): a handle is used by one thread at a
time, and never after :func:`destroy`.
"""

from __future__ import annotations

from core.logging import get_logger
from core.types import DEFAULT_TABLE_BITS, GeneratorConfig, SeedWords
from prng.generator import Generator
from prng.seeding import make_seed

__all__ = [
    "create",
    "create_from_array",
    "create_from_config",
    "harvest_seed",
    "destroy",
    "next_uniform_u32",
    "next_uniform_real",
    "next_gaussian",
    "next_gaussian_fast",
]

logger = get_logger(__name__)


def create(seed: int, *, table_bits: int = DEFAULT_TABLE_BITS) -> Generator | None:
    """Create a generator from a 32-bit seed, or None if memory is exhausted."""
    try:
        return Generator.from_seed(seed, table_bits=table_bits)
    except MemoryError:
        logger.error("Out of memory creating generator from seed %r", seed)
        return None


def create_from_array(
    seeds: SeedWords, *, table_bits: int = DEFAULT_TABLE_BITS
) -> Generator | None:
    """Create a generator from seed words, or None if memory is exhausted."""
    try:
        return Generator.from_array(seeds, table_bits=table_bits)
    except MemoryError:
        logger.error("Out of memory creating generator from %d seed words", len(seeds))
        return None


def create_from_config(config: GeneratorConfig) -> Generator | None:
    """Create a generator from a config, or None if memory is exhausted."""
    try:
        return Generator.from_config(config)
    except MemoryError:
        logger.error("Out of memory creating generator from %r", config)
        return None


def harvest_seed() -> int:
    """Return a non-reproducible 32-bit seed from system entropy. Never fails."""
    return make_seed()


def destroy(handle: Generator) -> None:
    """Release a generator. The handle must not be used afterwards."""
    handle.close()


def next_uniform_u32(handle: Generator) -> int:
    return handle.next_uniform_u32()


def next_uniform_real(handle: Generator) -> float:
    return handle.next_uniform_real()


def next_gaussian(handle: Generator) -> float:
    return handle.next_gaussian()


def next_gaussian_fast(handle: Generator) -> float:
    return handle.next_gaussian_fast()
