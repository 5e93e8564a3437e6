"""Tests for the MT19937 engine.

This module tests:
- temper: scalar and array forms agree
- twist: vectorised regeneration matches the sequential recurrence
- MTEngine: state validation, cursor handling, scalar vs bulk streams
- Golden output words for known seeds
"""

from __future__ import annotations

import numpy as np
import pytest

from prng.engine import (
    LOWER_MASK,
    MATRIX_A,
    UPPER_MASK,
    M,
    MTEngine,
    N,
    temper,
    twist,
)
from prng.seeding import expand_seed

GOLDEN_SEED_1 = [
    1791095845, 4282876139, 3093770124, 4005303368, 491263,
    550290313, 1298508491, 4290846341, 630311759, 1013994432,
]  # fmt: skip

GOLDEN_SEED_5489 = [
    3499211612, 581869302, 3890346734, 3586334585, 545404204,
    4161255391, 3922919429, 949333985, 2715962298, 1323567403,
]  # fmt: skip


def _reference_twist(mt: list[int]) -> list[int]:
    """Sequential textbook recurrence, one word at a time."""
    mt = list(mt)
    for i in range(N):
        y = (mt[i] & UPPER_MASK) | (mt[(i + 1) % N] & LOWER_MASK)
        mt[i] = mt[(i + M) % N] ^ (y >> 1) ^ (MATRIX_A if y & 1 else 0)
    return mt


def _reference_temper(y: int) -> int:
    y ^= y >> 11
    y ^= (y << 7) & 0x9D2C5680
    y ^= (y << 15) & 0xEFC60000
    y ^= y >> 18
    return y & 0xFFFFFFFF


# =============================================================================
# Tests for temper / twist
# =============================================================================


class TestTemper:
    """Tests for output tempering."""

    def test_zero_maps_to_zero(self) -> None:
        assert temper(0) == 0

    def test_scalar_matches_reference(self) -> None:
        for y in (1, 0x80000000, 0xFFFFFFFF, 0x12345678, 0x9908B0DF):
            assert temper(y) == _reference_temper(y)

    def test_array_matches_scalar(self) -> None:
        words = expand_seed(2024)
        tempered = temper(words)
        assert tempered.dtype == np.uint32
        assert tempered.tolist() == [temper(int(w)) for w in words]

    def test_array_input_not_modified(self) -> None:
        words = expand_seed(7)
        before = words.copy()
        temper(words)
        np.testing.assert_array_equal(words, before)


class TestTwist:
    """Tests for vectorised regeneration."""

    @pytest.mark.parametrize("seed", [0, 1, 5489, 0xFFFFFFFF])
    def test_matches_sequential_recurrence(self, seed: int) -> None:
        state = expand_seed(seed)
        expected = _reference_twist(state.tolist())
        twist(state)
        assert state.tolist() == expected

    def test_repeated_twists_match(self) -> None:
        state = expand_seed(99)
        expected = state.tolist()
        for _ in range(3):
            expected = _reference_twist(expected)
            twist(state)
        assert state.tolist() == expected


# =============================================================================
# Tests for MTEngine
# =============================================================================


class TestMTEngine:
    """Tests for the engine state container."""

    def test_rejects_all_zero_state(self) -> None:
        with pytest.raises(ValueError, match="all zero"):
            MTEngine(np.zeros(N, dtype=np.uint32))

    def test_rejects_wrong_length(self) -> None:
        with pytest.raises(ValueError, match="shape"):
            MTEngine(np.ones(N - 1, dtype=np.uint32))

    def test_rejects_out_of_range_words(self) -> None:
        state = [1] * N
        state[5] = 1 << 32
        with pytest.raises(ValueError, match=r"\[0, 2\*\*32\)"):
            MTEngine(state)
        state[5] = -1
        with pytest.raises(ValueError):
            MTEngine(state)

    def test_rejects_float_state(self) -> None:
        with pytest.raises(ValueError, match="integers"):
            MTEngine(np.ones(N, dtype=np.float64))

    def test_accepts_python_int_list(self) -> None:
        engine = MTEngine(expand_seed(1).tolist())
        assert engine.step() == GOLDEN_SEED_1[0]

    def test_copies_input_state(self) -> None:
        state = expand_seed(1)
        engine = MTEngine(state)
        engine.step()
        np.testing.assert_array_equal(state, expand_seed(1))

    def test_fresh_engine_is_exhausted(self) -> None:
        engine = MTEngine(expand_seed(1))
        assert engine.index == N
        engine.step()
        assert engine.index == 1

    def test_golden_seed_1(self) -> None:
        engine = MTEngine(expand_seed(1))
        assert [engine.step() for _ in range(10)] == GOLDEN_SEED_1

    def test_golden_seed_5489(self) -> None:
        engine = MTEngine(expand_seed(5489))
        assert [engine.step() for _ in range(10)] == GOLDEN_SEED_5489

    def test_state_copy_is_raw_and_detached(self) -> None:
        engine = MTEngine(expand_seed(3))
        snapshot = engine.state_copy()
        np.testing.assert_array_equal(snapshot, expand_seed(3))
        snapshot[:] = 0
        assert engine.step() == MTEngine(expand_seed(3)).step()

    @pytest.mark.parametrize("n", [0, 1, 623, 624, 625, 1500])
    def test_words_match_step(self, n: int) -> None:
        a = MTEngine(expand_seed(42))
        b = MTEngine(expand_seed(42))
        # Start mid-block to cover partial blocks on both sides
        for _ in range(100):
            a.step()
            b.step()
        bulk = a.words(n)
        assert bulk.dtype == np.uint32
        assert bulk.tolist() == [b.step() for _ in range(n)]
        assert a.step() == b.step()

    def test_words_advances_index(self) -> None:
        engine = MTEngine(expand_seed(42))
        engine.words(700)
        assert engine.index == 700 - N

    def test_words_negative_raises(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            MTEngine(expand_seed(1)).words(-1)

    def test_outputs_span_full_word_range(self) -> None:
        words = MTEngine(expand_seed(11)).words(200_000)
        assert int(words.max()) > 0xFFF00000
        assert int(words.min()) < 0x00100000
