"""Generator handle combining the engine with its output transforms.

A ``Generator`` owns one MT19937 engine, one Box–Muller spare cache and a
reference to the shared Gaussian lookup table. It exposes four value
producing operations, each with a bulk counterpart that consumes exactly the
same stream:

==========================  ===========================  ======================
operation                   bulk form                    distribution
==========================  ===========================  ======================
``next_uniform_u32``        ``uniform_u32_array``        integers in [0, 2**32)
``next_uniform_real``       ``uniform_real_array``       reals in [0, 1)
``next_gaussian``           ``gaussian_array``           N(0, 1), exact
``next_gaussian_fast``      ``gaussian_fast_array``      N(0, 1), table lookup
==========================  ===========================  ======================

Concurrency contract: there is no internal locking. A generator must never
be used from two threads at once; give each thread its own generator (e.g.
seeded from distinct words via :meth:`Generator.from_array`) or guard it
with a lock held by the caller. Using a generator after :meth:`close` is a
caller error.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any

from core.logging import get_logger
from core.types import (
    DEFAULT_TABLE_BITS,
    UINT32_SCALE,
    GeneratorConfig,
    RealArray,
    SeedWords,
    WordArray,
    validate_seed_words,
    validate_word,
)
from prng.engine import MTEngine
from prng.gaussian import BoxMullerGaussian, GaussianTable, get_gaussian_table
from prng.seeding import expand_seed, expand_seed_array, make_seed

__all__ = ["Generator"]

logger = get_logger(__name__)


class Generator:
    """Seeded MT19937 generator with uniform and Gaussian outputs.

    Build instances with :meth:`from_seed`, :meth:`from_array` or
    :meth:`from_config`; the constructor takes an already seeded engine.

    Example:
        >>> gen = Generator.from_seed(1)
        >>> gen.next_uniform_u32()
        1791095845
        >>> 0.0 <= gen.next_uniform_real() < 1.0
        True
    """

    __slots__ = ("_engine", "_gauss", "_table", "_seed_material")

    def __init__(
        self,
        engine: MTEngine,
        *,
        table_bits: int = DEFAULT_TABLE_BITS,
        seed_material: int | tuple[int, ...] | None = None,
    ) -> None:
        self._engine: MTEngine | None = engine
        self._gauss = BoxMullerGaussian()
        self._table: GaussianTable = get_gaussian_table(table_bits)
        self._seed_material = seed_material

    # ------------------------------------------------------------------
    # Construction and lifecycle
    # ------------------------------------------------------------------

    @classmethod
    def from_seed(cls, seed: int, *, table_bits: int = DEFAULT_TABLE_BITS) -> Generator:
        """Create a generator from a single 32-bit seed (any value, 0 included)."""
        seed = validate_word(seed)
        gen = cls(MTEngine(expand_seed(seed)), table_bits=table_bits, seed_material=seed)
        logger.debug("Created generator from seed %d", seed)
        return gen

    @classmethod
    def from_array(
        cls, seed_words: SeedWords, *, table_bits: int = DEFAULT_TABLE_BITS
    ) -> Generator:
        """Create a generator from a sequence of 32-bit seed words.

        Use this when more than 32 bits of seed entropy are needed. An empty
        sequence gives the same stream as ``from_seed(19650218)``.
        """
        words = validate_seed_words(seed_words)
        gen = cls(
            MTEngine(expand_seed_array(words)), table_bits=table_bits, seed_material=words
        )
        logger.debug("Created generator from %d seed words", len(words))
        return gen

    @classmethod
    def from_config(cls, config: GeneratorConfig) -> Generator:
        """Create a generator as described by a GeneratorConfig.

        When the config names no seed, one is harvested with
        :func:`prng.seeding.make_seed`, which logs it.
        """
        if config.seed_words is not None:
            return cls.from_array(config.seed_words, table_bits=config.table_bits)
        seed = config.seed if config.seed is not None else make_seed()
        return cls.from_seed(seed, table_bits=config.table_bits)

    @property
    def seed_material(self) -> int | tuple[int, ...] | None:
        """The scalar seed or seed words this generator was built from."""
        return self._seed_material

    @property
    def table_bits(self) -> int:
        return self._table.bits

    @property
    def closed(self) -> bool:
        return self._engine is None

    def close(self) -> None:
        """Release the engine state. The generator must not be used afterwards."""
        if self._engine is not None:
            self._engine = None
            self._gauss.reset()
            logger.debug("Destroyed generator seeded with %r", self._seed_material)

    def __enter__(self) -> Generator:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._engine is None else "open"
        return f"Generator(seed_material={self._seed_material!r}, {state})"

    # ------------------------------------------------------------------
    # Scalar outputs
    # ------------------------------------------------------------------

    def next_uniform_u32(self) -> int:
        """Return a uniform integer in [0, 2**32)."""
        return self._engine.step()  # type: ignore[union-attr]

    def next_uniform_real(self) -> float:
        """Return a uniform real in [0, 1).

        One 32-bit word scaled by 2**-32; the largest possible value is
        1 - 2**-32, so 1.0 is never returned.
        """
        return self._engine.step() * UINT32_SCALE  # type: ignore[union-attr]

    def next_gaussian(self) -> float:
        """Return a standard normal deviate using the Box–Muller transform.

        Every second call is served from a cached spare without drawing.
        Calls may be freely mixed with the other outputs, but doing so
        changes the sequence each output sees.
        """
        return self._gauss.draw(self)

    def next_gaussian_fast(self) -> float:
        """Return an approximate standard normal deviate from the lookup table.

        Consumes one 32-bit word. Values are limited to 2**table_bits
        distinct quantiles and never exceed ``GAUSSIAN_TABLE_BOUND`` in
        magnitude for the default table, so this must not be used where
        extreme tail samples affect the result.
        """
        return self._table.draw(self)

    # ------------------------------------------------------------------
    # Bulk outputs
    # ------------------------------------------------------------------

    def uniform_u32_array(self, n: int) -> WordArray:
        """Return the next n uniform words as a uint32 array."""
        return self._engine.words(n)  # type: ignore[union-attr]

    def uniform_real_array(self, n: int) -> RealArray:
        """Return the next n uniform reals in [0, 1) as a float64 array."""
        return self._engine.words(n) * UINT32_SCALE  # type: ignore[union-attr]

    def gaussian_array(self, n: int) -> RealArray:
        """Return the next n Box–Muller deviates as a float64 array."""
        return self._gauss.fill(self, n)

    def gaussian_fast_array(self, n: int) -> RealArray:
        """Return the next n table-lookup deviates as a float64 array."""
        return self._table.fill(self, n)

    def state_snapshot(self) -> dict[str, Any]:
        """Describe the generator for diagnostics (no raw state is exposed)."""
        return {
            "seed_material": self._seed_material,
            "table_bits": self._table.bits,
            "closed": self.closed,
            "index": None if self._engine is None else self._engine.index,
            "gaussian_spare_cached": self._gauss.has_spare,
        }
