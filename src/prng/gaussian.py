"""Gaussian output transforms.

Two methods produce standard normal deviates (mean 0, standard deviation 1):

- ``BoxMullerGaussian``: the exact Box–Muller transform. Each pair of
  uniform draws yields two independent deviates; the second is cached and
  returned by the next call. Well studied and free of correlations, this is
  the method to use by default.
- ``GaussianTable``: an inverse-CDF lookup table indexed by one 32-bit draw.
  Faster, but the output takes only 2**bits distinct values and never
  exceeds ``GAUSSIAN_TABLE_BOUND`` in magnitude for the default size. Do not
  use it where extreme tail samples affect the result (rare-event sampling,
  tail statistics); it is intended for bulk noise such as Langevin or
  Brownian dynamics integration.

The table is shared process-wide: it is built once per size, under a lock,
and is read-only afterwards, so any number of generators and threads may read
it without synchronisation.
"""

from __future__ import annotations

import math
import threading
from collections import deque
from dataclasses import dataclass, field

import numpy as np
from scipy.special import erfinv

from core.logging import get_logger
from core.protocols import UInt32Source, UniformSource
from core.types import DEFAULT_TABLE_BITS, MAX_TABLE_BITS, RealArray

__all__ = [
    "GAUSSIAN_TABLE_BOUND",
    "BoxMullerGaussian",
    "GaussianTable",
    "build_gaussian_table",
    "get_gaussian_table",
]

logger = get_logger(__name__)

# Upper bound on the magnitude of any entry of the default 2**14 entry table
GAUSSIAN_TABLE_BOUND = 4.0255485

_TWO_PI = 2.0 * math.pi


def _box_muller_pair(u1: float, u2: float) -> tuple[float, float]:
    r = math.sqrt(-2.0 * math.log(u1))
    theta = _TWO_PI * u2
    return r * math.cos(theta), r * math.sin(theta)


class BoxMullerGaussian:
    """Box–Muller transform with a one-value spare cache.

    Holds the per-generator Gaussian state. The spare is valid only between
    the first and second output of a pair. Not thread-safe.
    """

    __slots__ = ("_spare", "_has_spare")

    def __init__(self) -> None:
        self._spare = 0.0
        self._has_spare = False

    @property
    def has_spare(self) -> bool:
        """Whether the next draw will be served from the cache."""
        return self._has_spare

    def reset(self) -> None:
        """Discard any cached spare value."""
        self._spare = 0.0
        self._has_spare = False

    def draw(self, source: UniformSource) -> float:
        """Return one standard normal deviate.

        Consumes two uniform reals from ``source`` on every other call and
        none on the calls served from the cache. A first uniform of exactly
        0.0 is redrawn, since log(0) is undefined.
        """
        if self._has_spare:
            self._has_spare = False
            return self._spare

        u1 = source.next_uniform_real()
        while u1 == 0.0:
            u1 = source.next_uniform_real()
        u2 = source.next_uniform_real()
        first, self._spare = _box_muller_pair(u1, u2)
        self._has_spare = True
        return first

    def fill(self, source: UniformSource, n: int) -> RealArray:
        """Return the next n deviates as a float64 array.

        Uniforms are drawn in bulk; the transform itself uses the same math
        functions as :meth:`draw`, so the values and the cached spare left
        behind are identical to n calls of :meth:`draw`.

        Raises:
            ValueError: If n is negative.
        """
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")
        out: list[float] = []
        if n and self._has_spare:
            out.append(self._spare)
            self._has_spare = False

        n_pairs = (n - len(out) + 1) // 2
        if n_pairs:
            uniforms = source.uniform_real_array(2 * n_pairs).tolist()
            if 0.0 in uniforms[0::2]:
                # A rejected u1 shifts the pairing; replay the stream one value at a time
                pending = deque(uniforms)

                def pull() -> float:
                    return pending.popleft() if pending else source.next_uniform_real()

                for _ in range(n_pairs):
                    u1 = pull()
                    while u1 == 0.0:
                        u1 = pull()
                    out.extend(_box_muller_pair(u1, pull()))
            else:
                for u1, u2 in zip(uniforms[0::2], uniforms[1::2]):
                    out.extend(_box_muller_pair(u1, u2))

        if len(out) > n:
            self._spare = out.pop()
            self._has_spare = True
        return np.array(out, dtype=np.float64)


@dataclass(frozen=True, eq=False)
class GaussianTable:
    """Read-only inverse normal CDF table.

    Entry ``i`` is the standard normal quantile at ``(i + 0.5) / 2**bits``.
    A draw uses the top ``bits`` bits of a 32-bit word as the index: the
    high bits of MT19937 output have the best equidistribution, and a shift
    maps the full word range onto the table without bias.

    Attributes:
        bits: log2 of the table size.
        values: float64 array of 2**bits entries, not writeable.
    """

    bits: int
    values: np.ndarray
    _entries: tuple[float, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.values.shape != (1 << self.bits,):
            raise ValueError(
                f"values must have shape ({1 << self.bits},), got {self.values.shape}"
            )
        self.values.flags.writeable = False
        object.__setattr__(self, "_entries", tuple(self.values.tolist()))

    @property
    def size(self) -> int:
        return 1 << self.bits

    @property
    def shift(self) -> int:
        """Right shift that turns a 32-bit word into a table index."""
        return 32 - self.bits

    @property
    def max_abs(self) -> float:
        """Largest magnitude in the table (its last entry)."""
        return self._entries[-1]

    def lookup(self, word: int) -> float:
        """Map one 32-bit word to its table entry."""
        return self._entries[word >> self.shift]

    def draw(self, source: UInt32Source) -> float:
        """Return one approximate standard normal deviate (one word consumed)."""
        return self._entries[source.next_uniform_u32() >> self.shift]

    def fill(self, source: UInt32Source, n: int) -> RealArray:
        """Return the next n approximate deviates as a float64 array."""
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")
        words = source.uniform_u32_array(n)
        return self.values[words >> self.shift]


def _check_bits(bits: int) -> int:
    if isinstance(bits, bool) or not isinstance(bits, int):
        raise TypeError("bits must be an integer")
    if not 1 <= bits <= MAX_TABLE_BITS:
        raise ValueError(f"bits must be in [1, {MAX_TABLE_BITS}], got {bits}")
    return bits


def build_gaussian_table(bits: int = DEFAULT_TABLE_BITS) -> GaussianTable:
    """Compute a Gaussian lookup table of 2**bits entries.

    Uses ``sqrt(2) * erfinv(2p - 1)``, the normal quantile function, at the
    midpoints of 2**bits equal probability intervals. Entries are symmetric
    about zero and increasing. The extreme entries are about +-4.0086 for
    bits=14; the table never reaches probabilities finer than 2**-bits.

    Raises:
        ValueError: If bits is outside [1, MAX_TABLE_BITS].
    """
    bits = _check_bits(bits)
    size = 1 << bits
    p = (np.arange(size, dtype=np.float64) + 0.5) / size
    values = math.sqrt(2.0) * erfinv(2.0 * p - 1.0)
    # Enforce exact antisymmetry so the sample mean is not biased by rounding
    half = size // 2
    values[:half] = -values[size - 1 : size - 1 - half : -1]
    return GaussianTable(bits=bits, values=np.ascontiguousarray(values, dtype=np.float64))


_TABLES: dict[int, GaussianTable] = {}
_TABLES_LOCK = threading.Lock()


def get_gaussian_table(bits: int = DEFAULT_TABLE_BITS) -> GaussianTable:
    """Return the process-wide table of 2**bits entries, building it on first use.

    Construction happens at most once per size, under a lock; the returned
    object is never mutated afterwards.
    """
    bits = _check_bits(bits)
    table = _TABLES.get(bits)
    if table is None:
        with _TABLES_LOCK:
            table = _TABLES.get(bits)
            if table is None:
                table = build_gaussian_table(bits)
                _TABLES[bits] = table
                logger.debug("Built Gaussian lookup table with %d entries", table.size)
    return table
