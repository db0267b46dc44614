"""
Tests for the public BigInteger type.

Covers construction, canonical form, conversion, comparison and every
operator, including the pinned end-to-end scenarios.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import copy
import pickle

import pytest

from biginteger import (
    BigInteger,
    DivideByZeroError,
    FftMultiplier,
    FormatError,
    KaratsubaMultiplier,
    SimpleMultiplier,
)
from config import EAGER_FFT, SCHOOLBOOK_ONLY
from multiply import make_selector


S1 = "123456789012345678901234567890"
S2 = "987654321098765432109876543210"
S1_TIMES_S2 = "121932631137021795226185032733622923332237463801111263526900"


def big(text: str) -> BigInteger:
    return BigInteger.from_string(text, 10)


# ---------------------------------------------------------------------------
# Construction and canonical form
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_word_boundary_stays_inline(self):
        x = BigInteger.from_limbs([4294967295], False)
        assert x.is_inline
        assert str(x) == "4294967295"

    def test_two_limbs(self):
        x = BigInteger.from_limbs([1, 1], False)
        assert not x.is_inline
        assert str(x) == str(1 * (2 ** 32) + 1)

    def test_trailing_zero_limbs_trimmed(self):
        x = BigInteger.from_limbs([7, 0, 0])
        assert x.digits() == (7,)
        assert x.is_inline

    def test_negative_empty_magnitude_is_zero(self):
        x = BigInteger.from_limbs([], True)
        assert not x.is_negative
        assert x == BigInteger()

    def test_negative_zero_limbs_canonicalize(self):
        assert not BigInteger.from_limbs([0, 0], True).is_negative

    def test_zero_digits_view(self):
        assert BigInteger().digits() == (0,)

    def test_constructor_matches_from_limbs(self):
        assert BigInteger([1, 2], True) == BigInteger.from_limbs([1, 2], True)

    def test_from_limbs_accepts_generator(self):
        assert BigInteger.from_limbs(x for x in (1, 1)) == (1 << 32) + 1

    def test_limb_out_of_range(self):
        with pytest.raises(ValueError):
            BigInteger.from_limbs([1 << 32])

    def test_from_word(self):
        x = BigInteger.from_word(42, is_negative=True)
        assert x.is_inline
        assert x == -42
        assert not BigInteger.from_word(0, is_negative=True).is_negative

    def test_from_word_rejects_wide_values(self):
        with pytest.raises(ValueError):
            BigInteger.from_word(1 << 32)
        with pytest.raises(TypeError):
            BigInteger.from_word("1")

    def test_from_int(self):
        assert BigInteger.from_int(-(1 << 100)).digits() == (0, 0, 0, 16)
        assert BigInteger.from_int(-(1 << 100)).is_negative
        with pytest.raises(TypeError):
            BigInteger.from_int(1.0)

    def test_zero_string_equals_negative_zero_string(self):
        assert big("0") == big("-0")
        assert not big("-0").is_negative

    def test_immutable(self):
        x = big("5")
        with pytest.raises(AttributeError):
            x._negative = True
        with pytest.raises(AttributeError):
            x.anything = 1
        with pytest.raises(AttributeError):
            del x._store

    def test_pickle_and_copy(self):
        x = big("-" + S1)
        assert pickle.loads(pickle.dumps(x)) == x
        assert copy.deepcopy(x) == x


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------

class TestConversion:
    def test_hex_to_decimal(self):
        x = BigInteger.from_string("ABCDEF123456", 16)
        assert x.to_string(10) == str(0xABCDEF123456)

    def test_default_radix_is_decimal(self):
        assert big(S1).to_string() == S1
        assert str(big("-" + S1)) == "-" + S1

    def test_binary(self):
        assert BigInteger.from_int(-10).to_string(2) == "-1010"

    def test_repr(self):
        assert repr(big("-12")) == "BigInteger.from_string('-12')"

    def test_int(self):
        assert int(big("-" + S1)) == -int(S1)

    def test_bool(self):
        assert not BigInteger()
        assert big("-1")

    def test_bad_string(self):
        with pytest.raises(FormatError):
            big("12x")
        with pytest.raises(FormatError):
            BigInteger.from_string("", 10)
        with pytest.raises(FormatError):
            BigInteger.from_string("\u212a", 36)

    def test_bad_radix(self):
        with pytest.raises(FormatError):
            BigInteger.from_string("10", 37)
        with pytest.raises(FormatError):
            big("10").to_string(1)


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

class TestComparison:
    def test_signs_differ(self):
        assert big("-100") < big("1")
        assert big("0") > big("-1")

    def test_longer_magnitude(self):
        assert big(S1) > big("4294967296") > big("4294967295")
        assert big("-" + S1) < big("-4294967296")

    def test_same_length_negative_inverted(self):
        assert big("-5") < big("-3")
        assert big("-3") >= big("-5")

    def test_equality_and_hash(self):
        a, b = big(S1), BigInteger.from_string(big(S1).to_string(16), 16)
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_compare(self):
        assert big("3").compare(big("4")) == -1
        assert big("4").compare(4) == 0
        assert big("-4").compare(-5) == 1

    def test_compare_with_foreign_type(self):
        with pytest.raises(TypeError):
            big("1").compare("1")
        assert big("1") != "1"
        with pytest.raises(TypeError):
            big("1") < "1"

    def test_mixed_with_int(self):
        assert big("5") == 5
        assert 5 == big("5")
        assert big("5") < 6
        assert hash(big("-5")) == hash(-5)

    def test_sorting(self):
        values = [big(s) for s in ("3", "-1", S1, "0", "-" + S1)]
        assert [int(v) for v in sorted(values)] == sorted(int(v) for v in values)


# ---------------------------------------------------------------------------
# Additive
# ---------------------------------------------------------------------------

class TestAdditive:
    def test_add_carries(self):
        assert big("4294967295") + big("1") == big("4294967296")

    def test_add_opposite_signs(self):
        assert big("5") + big("-8") == big("-3")
        assert big("-5") + big("8") == big("3")

    def test_add_to_zero(self):
        result = big("1") + big("-1")
        assert result == 0
        assert not result.is_negative

    def test_subtract(self):
        assert big("3") - big("10") == big("-7")
        assert big("-3") - big("-3") == 0

    def test_negate(self):
        assert -big("7") == big("-7")
        assert not (-big("0")).is_negative
        assert -(-big(S1)) == big(S1)

    def test_abs_and_pos(self):
        assert abs(big("-9")) == 9
        assert +big("-9") == -9

    def test_int_operands(self):
        assert big("5") + 1 == 6
        assert 1 + big("5") == 6
        assert 10 - big("4") == 6
        assert big("4") - 10 == -6


# ---------------------------------------------------------------------------
# Multiplicative
# ---------------------------------------------------------------------------

class TestMultiplicative:
    def test_thirty_digit_product(self):
        assert big(S1) * big(S2) == big(S1_TIMES_S2)

    @pytest.mark.parametrize("strategy", [
        SimpleMultiplier(), KaratsubaMultiplier(threshold=2), FftMultiplier(),
    ], ids=repr)
    def test_every_strategy(self, strategy):
        assert big(S1).multiply(big(S2), multiplier=strategy) == big(S1_TIMES_S2)

    @pytest.mark.parametrize("cfg", [SCHOOLBOOK_ONLY, EAGER_FFT], ids=["schoolbook", "eager-fft"])
    def test_selector_injection(self, cfg):
        product = big(S1).multiply(big("-" + S2), selector=make_selector(cfg))
        assert product == big("-" + S1_TIMES_S2)

    def test_signs(self):
        assert big("-3") * big("4") == -12
        assert big("-3") * big("-4") == 12
        assert 3 * big("-4") == -12

    def test_zero_product_is_non_negative(self):
        assert not (big("-5") * big("0")).is_negative
        assert not (big("0") * big("-5")).is_negative

    def test_multiply_rejects_foreign_type(self):
        with pytest.raises(TypeError):
            big("2").multiply(2.0)
        with pytest.raises(TypeError):
            big("2") * 2.0

    def test_divide_by_zero(self):
        with pytest.raises(DivideByZeroError):
            BigInteger.from_limbs([1], False) / BigInteger.from_limbs([0], False)

    def test_modulo_by_zero(self):
        with pytest.raises(DivideByZeroError):
            big("1") % big("0")
        with pytest.raises(ZeroDivisionError):
            divmod(big("1"), 0)

    def test_division_truncates(self):
        assert big("-7") / big("2") == -3
        assert big("7") / big("-2") == -3
        assert big("-" + S1) / big("1000000000000") == -(int(S1) // 10 ** 12)

    def test_remainder_takes_dividend_sign(self):
        r = big("-7") % big("2")
        assert r.is_negative
        assert abs(r) < 2
        assert r == -1

    def test_divmod(self):
        q, r = divmod(big("-" + S1), big(S2[:12]))
        assert q * big(S2[:12]) + r == big("-" + S1)
        assert big("17").divmod(5) == (3, 2)

    def test_int_operands(self):
        assert 7 / big("2") == 3
        assert 7 % big("-2") == 1
        assert divmod(-7, big("2")) == (-3, -1)

    def test_divide_and_remainder_methods(self):
        assert big("100").divide(7) == 14
        assert big("100").remainder(7) == 2


# ---------------------------------------------------------------------------
# Bitwise
# ---------------------------------------------------------------------------

class TestBitwiseOperators:
    def test_operators_match_int(self):
        a, b = -int(S1), int(S2)
        x, y = BigInteger.from_int(a), BigInteger.from_int(b)
        assert x & y == a & b
        assert x | y == a | b
        assert x ^ y == a ^ b
        assert ~x == ~a

    def test_int_operands(self):
        assert 12 & big("10") == 8
        assert big("12") | 3 == 15
        assert 5 ^ big("-1") == -6

    def test_shifts(self):
        assert big("-7") >> 1 == -4
        assert big("1") << 100 == 1 << 100
        assert big("1") << 0 == 1
        assert big("5") >> big("1") == 2

    def test_negative_shift_count(self):
        with pytest.raises(ValueError):
            big("1") << -1
        with pytest.raises(ValueError):
            big("1") >> big("-1")

    def test_identities(self):
        x = big("-" + S1)
        assert ~x == -(x + 1)
        assert x & x == x
        assert x ^ x == 0
        assert x | ~x == -1


# ---------------------------------------------------------------------------
# Edge cases
# ---------------------------------------------------------------------------

class TestEdgeCases:
    def test_basic_identities(self):
        zero, one, neg_one = big("0"), big("1"), big("-1")
        assert str(zero * one) == "0"
        assert str(one + neg_one) == "0"
        assert zero == big("0")
        assert one > neg_one
        assert str(one << 0) == "1"

    def test_operators_return_new_instances(self):
        x = big(S1)
        y = x + 0
        assert y == x
        assert y is not x
        assert str(x) == S1
