"""Tests for the Gaussian output transforms.

This module tests:
- BoxMullerGaussian: draw accounting, zero rejection, spare cache, bulk fill
- GaussianTable: construction, bound, index extraction, immutability
- get_gaussian_table: process-wide sharing, including across threads
"""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest
from scipy import stats

from core.protocols import UInt32Source, UniformSource
from prng.gaussian import (
    GAUSSIAN_TABLE_BOUND,
    BoxMullerGaussian,
    GaussianTable,
    build_gaussian_table,
    get_gaussian_table,
)
from prng.generator import Generator

# =============================================================================
# Helpers
# =============================================================================


class CountingSource:
    """Uniform source that counts every real it hands out."""

    def __init__(self, gen: Generator) -> None:
        self.gen = gen
        self.draws = 0

    def next_uniform_real(self) -> float:
        self.draws += 1
        return self.gen.next_uniform_real()

    def uniform_real_array(self, n: int) -> np.ndarray:
        self.draws += n
        return self.gen.uniform_real_array(n)


class ScriptedSource:
    """Uniform source replaying a fixed list of values."""

    def __init__(self, values: list[float]) -> None:
        self.values = list(values)
        self.consumed = 0

    def next_uniform_real(self) -> float:
        value = self.values[self.consumed]
        self.consumed += 1
        return value

    def uniform_real_array(self, n: int) -> np.ndarray:
        out = np.array(self.values[self.consumed : self.consumed + n], dtype=np.float64)
        self.consumed += n
        return out


class WordSource:
    """UInt32 source replaying fixed words."""

    def __init__(self, words: list[int]) -> None:
        self.words = list(words)
        self.consumed = 0

    def next_uniform_u32(self) -> int:
        word = self.words[self.consumed]
        self.consumed += 1
        return word

    def uniform_u32_array(self, n: int) -> np.ndarray:
        out = np.array(self.words[self.consumed : self.consumed + n], dtype=np.uint32)
        self.consumed += n
        return out


# =============================================================================
# Tests for BoxMullerGaussian
# =============================================================================


class TestBoxMuller:
    """Tests for the exact Gaussian transform."""

    def test_sources_satisfy_protocol(self) -> None:
        gen = Generator.from_seed(1)
        assert isinstance(CountingSource(gen), UniformSource)
        assert isinstance(gen, UniformSource)
        assert isinstance(gen, UInt32Source)

    def test_two_calls_consume_two_uniforms(self) -> None:
        source = CountingSource(Generator.from_seed(1))
        gauss = BoxMullerGaussian()
        gauss.draw(source)
        assert source.draws == 2
        assert gauss.has_spare
        gauss.draw(source)
        assert source.draws == 2
        assert not gauss.has_spare

    def test_many_calls_consume_one_uniform_each(self) -> None:
        source = CountingSource(Generator.from_seed(5))
        gauss = BoxMullerGaussian()
        for _ in range(1000):
            gauss.draw(source)
        assert source.draws == 1000

    def test_pair_values(self) -> None:
        source = ScriptedSource([0.25, 0.125])
        gauss = BoxMullerGaussian()
        r = math.sqrt(-2.0 * math.log(0.25))
        theta = 2.0 * math.pi * 0.125
        assert gauss.draw(source) == r * math.cos(theta)
        assert gauss.draw(source) == r * math.sin(theta)

    def test_zero_first_uniform_is_redrawn(self) -> None:
        source = ScriptedSource([0.0, 0.25, 0.5])
        gauss = BoxMullerGaussian()
        value = gauss.draw(source)
        assert source.consumed == 3
        assert value == pytest.approx(-math.sqrt(-2.0 * math.log(0.25)))

    def test_zero_second_uniform_is_kept(self) -> None:
        source = ScriptedSource([0.5, 0.0])
        gauss = BoxMullerGaussian()
        assert gauss.draw(source) == math.sqrt(-2.0 * math.log(0.5))
        assert gauss.draw(source) == 0.0
        assert source.consumed == 2

    def test_reset_discards_spare(self) -> None:
        source = ScriptedSource([0.5, 0.25, 0.75, 0.5])
        gauss = BoxMullerGaussian()
        gauss.draw(source)
        gauss.reset()
        assert not gauss.has_spare
        gauss.draw(source)
        assert source.consumed == 4

    @pytest.mark.parametrize("n", [0, 1, 2, 3, 10, 1001])
    @pytest.mark.parametrize("prime_spare", [False, True])
    def test_fill_matches_draws(self, n: int, prime_spare: bool) -> None:
        a = BoxMullerGaussian()
        b = BoxMullerGaussian()
        gen_a = Generator.from_seed(77)
        gen_b = Generator.from_seed(77)
        if prime_spare:
            a.draw(gen_a)
            b.draw(gen_b)
        bulk = a.fill(gen_a, n)
        assert bulk.dtype == np.float64
        assert bulk.tolist() == [b.draw(gen_b) for _ in range(n)]
        assert a.has_spare == b.has_spare
        assert a.draw(gen_a) == b.draw(gen_b)

    def test_fill_with_zero_first_uniform_matches_draws(self) -> None:
        values = [0.0, 0.25, 0.5, 0.75, 0.0, 0.0, 0.5, 0.125, 0.375, 0.625]
        bulk_source = ScriptedSource(values)
        scalar_source = ScriptedSource(values)
        a = BoxMullerGaussian()
        b = BoxMullerGaussian()
        bulk = a.fill(bulk_source, 6)
        assert bulk.tolist() == [b.draw(scalar_source) for _ in range(6)]
        assert bulk_source.consumed == scalar_source.consumed

    def test_fill_negative_raises(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            BoxMullerGaussian().fill(Generator.from_seed(1), -1)


# =============================================================================
# Tests for GaussianTable
# =============================================================================


@pytest.fixture(scope="module")
def default_table() -> GaussianTable:
    return get_gaussian_table()


class TestGaussianTable:
    """Tests for the inverse-CDF lookup table."""

    def test_default_size(self, default_table: GaussianTable) -> None:
        assert default_table.bits == 14
        assert default_table.size == 16384
        assert default_table.values.shape == (16384,)
        assert default_table.shift == 18

    def test_matches_normal_quantiles(self, default_table: GaussianTable) -> None:
        p = (np.arange(16384) + 0.5) / 16384
        np.testing.assert_allclose(default_table.values, stats.norm.ppf(p), rtol=1e-10, atol=1e-12)

    def test_antisymmetric_and_increasing(self, default_table: GaussianTable) -> None:
        values = default_table.values
        np.testing.assert_array_equal(values, -values[::-1])
        assert np.all(np.diff(values) > 0)

    def test_within_documented_bound(self, default_table: GaussianTable) -> None:
        assert np.abs(default_table.values).max() <= GAUSSIAN_TABLE_BOUND
        assert 4.0 < default_table.max_abs <= GAUSSIAN_TABLE_BOUND
        assert default_table.max_abs == default_table.values[-1]

    def test_unit_variance_up_to_truncation(self, default_table: GaussianTable) -> None:
        assert abs(float(default_table.values.mean())) < 1e-12
        assert float(default_table.values.std()) == pytest.approx(1.0, abs=2e-3)

    def test_is_read_only(self, default_table: GaussianTable) -> None:
        with pytest.raises(ValueError):
            default_table.values[0] = 0.0

    def test_index_uses_high_bits(self, default_table: GaussianTable) -> None:
        values = default_table.values
        assert default_table.lookup(0) == values[0]
        assert default_table.lookup((1 << 18) - 1) == values[0]
        assert default_table.lookup(1 << 18) == values[1]
        assert default_table.lookup(0xFFFFFFFF) == values[-1]
        # Low bits never change the index
        assert default_table.lookup(0x80000000) == default_table.lookup(0x8003FFFF)

    def test_draw_consumes_one_word(self, default_table: GaussianTable) -> None:
        source = WordSource([0, 0xFFFFFFFF])
        assert default_table.draw(source) == default_table.values[0]
        assert default_table.draw(source) == default_table.values[-1]
        assert source.consumed == 2

    def test_fill_matches_draw(self, default_table: GaussianTable) -> None:
        words = Generator.from_seed(3).uniform_u32_array(2000).tolist()
        bulk = default_table.fill(WordSource(words), 2000)
        scalar_source = WordSource(words)
        assert bulk.tolist() == [default_table.draw(scalar_source) for _ in range(2000)]

    def test_fill_negative_raises(self, default_table: GaussianTable) -> None:
        with pytest.raises(ValueError):
            default_table.fill(WordSource([]), -1)

    @pytest.mark.parametrize("bits", [1, 4, 10])
    def test_other_sizes(self, bits: int) -> None:
        table = build_gaussian_table(bits)
        assert table.size == 1 << bits
        np.testing.assert_array_equal(table.values, -table.values[::-1])
        expected_max = stats.norm.ppf(1.0 - 0.5 / (1 << bits))
        assert table.max_abs == pytest.approx(expected_max, rel=1e-10)

    def test_one_bit_table(self) -> None:
        table = build_gaussian_table(1)
        assert table.values.tolist() == pytest.approx([-0.6744897501960817, 0.6744897501960817])

    @pytest.mark.parametrize("bits", [0, 25, -3])
    def test_invalid_bits_raise(self, bits: int) -> None:
        with pytest.raises(ValueError, match="bits"):
            build_gaussian_table(bits)
        with pytest.raises(ValueError, match="bits"):
            get_gaussian_table(bits)

    def test_non_integer_bits_raise(self) -> None:
        with pytest.raises(TypeError):
            build_gaussian_table(True)
        with pytest.raises(TypeError):
            get_gaussian_table(14.0)  # type: ignore[arg-type]

    def test_wrong_length_values_rejected(self) -> None:
        with pytest.raises(ValueError, match="shape"):
            GaussianTable(bits=3, values=np.zeros(7))


class TestSharedTable:
    """Tests for the process-wide table cache."""

    def test_same_object_returned(self) -> None:
        assert get_gaussian_table() is get_gaussian_table(14)

    def test_generators_share_table(self) -> None:
        a = Generator.from_seed(1)
        b = Generator.from_seed(2)
        assert a.table_bits == b.table_bits == 14
        # Same seed different generator: identical table outputs for identical words
        assert Generator.from_seed(9).next_gaussian_fast() == Generator.from_seed(9).next_gaussian_fast()

    def test_concurrent_first_use_builds_once(self) -> None:
        bits = 11
        with ThreadPoolExecutor(max_workers=8) as pool:
            tables = list(pool.map(lambda _: get_gaussian_table(bits), range(32)))
        assert all(t is tables[0] for t in tables)
        assert tables[0] is get_gaussian_table(bits)
