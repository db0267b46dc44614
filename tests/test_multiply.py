"""
Tests for the multiplication strategies and the selector.

Every strategy must produce the same canonical limbs for the same
inputs, at any size.  Hypothesis drives the equivalence checks; the
Karatsuba threshold is lowered so small examples still recurse.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from hypothesis import given, settings
from hypothesis.strategies import integers, lists

from config import DEFAULT_SETTINGS, EAGER_FFT, SCHOOLBOOK_ONLY, MultiplierSettings
from fft import FftMultiplier
from limbs import LIMB_MASK, int_from_limbs, limbs_from_int
from multiply import (
    KaratsubaMultiplier,
    SimpleMultiplier,
    make_selector,
    multiply_magnitudes,
    schoolbook,
    select_multiplier,
)
from radix import parse_magnitude


A = parse_magnitude("123456789012345678901234567890", 10)[1]
B = parse_magnitude("987654321098765432109876543210", 10)[1]
PRODUCT = parse_magnitude(
    "121932631137021795226185032733622923332237463801111263526900", 10
)[1]

STRATEGIES = [
    SimpleMultiplier(),
    KaratsubaMultiplier(),
    KaratsubaMultiplier(threshold=2),
    FftMultiplier(),
    FftMultiplier(digit_bits=8),
]


def magnitudes(max_limbs=40):
    return integers(min_value=0, max_value=(1 << (32 * max_limbs)) - 1).map(limbs_from_int)


# ---------------------------------------------------------------------------
# Known products
# ---------------------------------------------------------------------------

class TestKnownProducts:
    @pytest.mark.parametrize("strategy", STRATEGIES, ids=repr)
    def test_thirty_digit_operands(self, strategy):
        assert strategy.multiply(A, B) == PRODUCT

    @pytest.mark.parametrize("strategy", STRATEGIES, ids=repr)
    def test_zero_operand(self, strategy):
        assert strategy.multiply((), A) == ()
        assert strategy.multiply(A, ()) == ()

    @pytest.mark.parametrize("strategy", STRATEGIES, ids=repr)
    def test_non_canonical_input_is_trimmed(self, strategy):
        assert strategy.multiply((3, 0, 0), (5, 0)) == (15,)

    @pytest.mark.parametrize("strategy", STRATEGIES, ids=repr)
    def test_all_ones(self, strategy):
        n = 50
        ones = (LIMB_MASK,) * n
        expected = limbs_from_int(((1 << (32 * n)) - 1) ** 2)
        assert strategy.multiply(ones, ones) == expected

    @pytest.mark.parametrize("strategy", STRATEGIES, ids=repr)
    def test_unbalanced(self, strategy):
        long = tuple(range(1, 90))
        short = (LIMB_MASK, 7)
        expected = limbs_from_int(int_from_limbs(long) * int_from_limbs(short))
        assert strategy.multiply(long, short) == expected
        assert strategy.multiply(short, long) == expected

    def test_schoolbook_single_limbs(self):
        assert schoolbook((LIMB_MASK,), (LIMB_MASK,)) == (1, LIMB_MASK - 1)


# ---------------------------------------------------------------------------
# Strategy equivalence
# ---------------------------------------------------------------------------

class TestEquivalence:
    simple = SimpleMultiplier()
    karatsuba = KaratsubaMultiplier(threshold=2)
    fft = FftMultiplier()

    @given(a=magnitudes(), b=magnitudes())
    @settings(max_examples=60, deadline=None)
    def test_all_strategies_agree(self, a, b):
        expected = self.simple.multiply(a, b)
        assert self.karatsuba.multiply(a, b) == expected
        assert self.fft.multiply(a, b) == expected

    @given(a=magnitudes(8), b=magnitudes(8))
    def test_simple_matches_int(self, a, b):
        assert int_from_limbs(self.simple.multiply(a, b)) == int_from_limbs(a) * int_from_limbs(b)

    @given(a=lists(integers(0, LIMB_MASK), max_size=30),
           b=lists(integers(0, LIMB_MASK), max_size=30))
    @settings(deadline=None)
    def test_output_is_canonical(self, a, b):
        for strategy in (self.simple, self.karatsuba, self.fft):
            product = strategy.multiply(a, b)
            assert not product or product[-1] != 0


# ---------------------------------------------------------------------------
# Karatsuba configuration
# ---------------------------------------------------------------------------

class TestKaratsuba:
    def test_threshold_validated(self):
        with pytest.raises(ValueError):
            KaratsubaMultiplier(threshold=1)

    def test_default_threshold_from_settings(self):
        assert KaratsubaMultiplier().threshold == DEFAULT_SETTINGS.karatsuba_threshold

    def test_deep_recursion_stays_shallow(self):
        n = 512
        a = tuple((i * 2654435761) & LIMB_MASK or 1 for i in range(n))
        b = tuple((i * 40503) & LIMB_MASK or 1 for i in range(n))
        expected = limbs_from_int(int_from_limbs(a) * int_from_limbs(b))
        assert KaratsubaMultiplier(threshold=2).multiply(a, b) == expected


# ---------------------------------------------------------------------------
# Selector
# ---------------------------------------------------------------------------

class TestSelector:
    def test_small_uses_simple(self):
        assert isinstance(select_multiplier(1, 1000), SimpleMultiplier)

    def test_medium_uses_karatsuba(self):
        strategy = select_multiplier(64, 64)
        assert isinstance(strategy, KaratsubaMultiplier)
        assert strategy.threshold == DEFAULT_SETTINGS.karatsuba_threshold

    def test_large_uses_fft(self):
        n = DEFAULT_SETTINGS.fft_threshold
        assert isinstance(select_multiplier(n, n), FftMultiplier)

    def test_custom_settings(self):
        custom = MultiplierSettings(karatsuba_threshold=4, fft_threshold=8)
        assert isinstance(select_multiplier(3, 3, custom), SimpleMultiplier)
        assert isinstance(select_multiplier(4, 7, custom), KaratsubaMultiplier)
        assert isinstance(select_multiplier(8, 9, custom), FftMultiplier)

    def test_make_selector_binds_settings(self):
        selector = make_selector(SCHOOLBOOK_ONLY)
        assert isinstance(selector(10_000, 10_000), SimpleMultiplier)

    @pytest.mark.parametrize("cfg", [DEFAULT_SETTINGS, SCHOOLBOOK_ONLY, EAGER_FFT])
    def test_selection_never_changes_result(self, cfg):
        a = tuple(range(1, 40))
        b = tuple(range(100, 160))
        expected = limbs_from_int(int_from_limbs(a) * int_from_limbs(b))
        assert multiply_magnitudes(a, b, make_selector(cfg)) == expected

    def test_injected_selector_is_called(self):
        calls = []

        def spy(left_len, right_len):
            calls.append((left_len, right_len))
            return SimpleMultiplier()

        assert multiply_magnitudes((2,), (3, 1), spy) == (6, 2)
        assert calls == [(1, 2)]

    def test_zero_skips_selector(self):
        def boom(left_len, right_len):
            raise AssertionError("selector should not run")

        assert multiply_magnitudes((), (3,), boom) == ()
