"""Goodness-of-fit statistics for generator output.

This module wraps the scipy.stats tests used by the check suite:
- Kolmogorov–Smirnov against the uniform and standard normal distributions
- Chi-squared over equal-width uniform bins
- Chi-squared over equiprobable standard normal bins
- Chi-squared over the high bits of 32-bit words
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from scipy import stats

from core.types import RealArray, WordArray

__all__ = [
    "GoodnessOfFit",
    "ks_uniform",
    "ks_normal",
    "chi2_uniform",
    "chi2_normal",
    "chi2_u32_high_bits",
]


@dataclass(frozen=True, slots=True)
class GoodnessOfFit:
    """Result of one goodness-of-fit test.

    Attributes:
        test: Test name (e.g. "ks_uniform").
        statistic: Test statistic.
        pvalue: p-value under the null hypothesis.
        n: Number of samples tested.
    """

    test: str
    statistic: float
    pvalue: float
    n: int

    def passed(self, alpha: float) -> bool:
        """Whether the null hypothesis survives at significance level alpha."""
        return self.pvalue >= alpha

    def to_dict(self) -> dict[str, Any]:
        return {"test": self.test, "statistic": self.statistic, "pvalue": self.pvalue, "n": self.n}


def _require_samples(samples: np.ndarray) -> np.ndarray:
    arr = np.asarray(samples)
    if arr.ndim != 1:
        raise ValueError(f"samples must be 1D, got ndim={arr.ndim}")
    if arr.size == 0:
        raise ValueError("samples must not be empty")
    return arr


def _check_bins(bins: int) -> None:
    if bins < 2:
        raise ValueError(f"bins must be >= 2, got {bins}")


def ks_uniform(samples: RealArray) -> GoodnessOfFit:
    """Kolmogorov–Smirnov test against U(0, 1)."""
    arr = _require_samples(samples)
    res = stats.kstest(arr, "uniform")
    return GoodnessOfFit("ks_uniform", float(res.statistic), float(res.pvalue), int(arr.size))


def ks_normal(samples: RealArray) -> GoodnessOfFit:
    """Kolmogorov–Smirnov test against N(0, 1)."""
    arr = _require_samples(samples)
    res = stats.kstest(arr, "norm")
    return GoodnessOfFit("ks_normal", float(res.statistic), float(res.pvalue), int(arr.size))


def _chi2_counts(test: str, counts: np.ndarray, n: int) -> GoodnessOfFit:
    expected = np.full(counts.shape, n / counts.size)
    res = stats.chisquare(counts, expected)
    return GoodnessOfFit(test, float(res.statistic), float(res.pvalue), n)


def chi2_uniform(samples: RealArray, *, bins: int = 100) -> GoodnessOfFit:
    """Chi-squared test of reals in [0, 1) over equal-width bins.

    Raises:
        ValueError: If any sample lies outside [0, 1) or bins < 2.
    """
    arr = _require_samples(samples)
    _check_bins(bins)
    if arr.min() < 0.0 or arr.max() >= 1.0:
        raise ValueError("uniform samples must lie in [0, 1)")
    idx = np.floor(arr * bins).astype(np.int64)
    counts = np.bincount(idx, minlength=bins)
    return _chi2_counts("chi2_uniform", counts, int(arr.size))


def chi2_normal(samples: RealArray, *, bins: int = 64) -> GoodnessOfFit:
    """Chi-squared test against N(0, 1) over equiprobable bins.

    Bin edges are the normal quantiles at k / bins; the outer bins extend to
    infinity.
    """
    arr = _require_samples(samples)
    _check_bins(bins)
    edges = stats.norm.ppf(np.arange(1, bins) / bins)
    idx = np.searchsorted(edges, arr, side="right")
    counts = np.bincount(idx, minlength=bins)
    return _chi2_counts("chi2_normal", counts, int(arr.size))


def chi2_u32_high_bits(words: WordArray, *, bits: int = 8) -> GoodnessOfFit:
    """Chi-squared test of the top ``bits`` bits of 32-bit words."""
    arr = _require_samples(words)
    if not 1 <= bits <= 16:
        raise ValueError(f"bits must be in [1, 16], got {bits}")
    idx = (arr.astype(np.uint32) >> (32 - bits)).astype(np.int64)
    counts = np.bincount(idx, minlength=1 << bits)
    return _chi2_counts("chi2_u32_high_bits", counts, int(arr.size))
