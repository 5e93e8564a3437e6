"""Protocol definitions for the random number library.

This module contains Protocol classes defining the interfaces that the
output transforms depend on:
- UInt32Source: anything producing uniform 32-bit words
- UniformSource: anything producing uniform reals in [0, 1)

The Gaussian transforms are written against these protocols rather than
against the concrete generator, so that tests can wrap a generator and
count how many draws a transform consumes.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.types import RealArray, WordArray

__all__ = ["UInt32Source", "UniformSource"]


@runtime_checkable
class UInt32Source(Protocol):
    """Protocol for sources of uniform unsigned 32-bit words."""

    def next_uniform_u32(self) -> int:
        """Return the next word, uniform over [0, 2**32)."""
        ...

    def uniform_u32_array(self, n: int) -> WordArray:
        """Return the next n words as a uint32 array.

        Must consume the same stream as n calls of next_uniform_u32().
        """
        ...


@runtime_checkable
class UniformSource(Protocol):
    """Protocol for sources of uniform reals in [0, 1)."""

    def next_uniform_real(self) -> float:
        """Return the next real, uniform over [0, 1)."""
        ...

    def uniform_real_array(self, n: int) -> RealArray:
        """Return the next n reals as a float64 array.

        Must consume the same stream as n calls of next_uniform_real().
        """
        ...
