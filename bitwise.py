"""
Bitwise operators under infinite two's-complement semantics.

Values are stored sign-magnitude, but every operator here behaves as if
a negative number were sign-extended with an endless run of one bits.
The two's-complement limb view of a negative value is ``~magnitude + 1``;
a non-negative value's view is its magnitude.  Views are materialized
only as wide as the longer operand plus one guard limb, whose top bit
then tells the sign of the result.

Operands and results are ``(is_negative, magnitude)`` pairs.
"""

from __future__ import annotations

import operator
from typing import Callable, Sequence

from limbs import (
    LIMB_BITS,
    LIMB_MASK,
    Magnitude,
    add_word,
    has_low_bits,
    shift_left_magnitude,
    shift_right_magnitude,
    sub_magnitudes,
    trim,
)

Signed = tuple[bool, Magnitude]

_SIGN_BIT = 1 << (LIMB_BITS - 1)


# ---------------------------------------------------------------------------
# Two's-complement views
# ---------------------------------------------------------------------------

def _negate_limbs(limbs: Sequence[int]) -> list[int]:
    """``~limbs + 1`` over a fixed width; the final carry falls off."""
    out = []
    carry = 1
    for limb in limbs:
        total = (~limb & LIMB_MASK) + carry
        out.append(total & LIMB_MASK)
        carry = total >> LIMB_BITS
    return out


def to_twos_complement(value: Signed, width: int) -> list[int]:
    """Two's-complement view of *value*, *width* limbs wide."""
    negative, mag = value
    padded = list(mag) + [0] * (width - len(mag))
    return _negate_limbs(padded) if negative else padded


def from_twos_complement(limbs: Sequence[int]) -> Signed:
    """Read a two's-complement limb view back into sign-magnitude form."""
    if limbs and limbs[-1] & _SIGN_BIT:
        return True, trim(_negate_limbs(limbs))
    return False, trim(limbs)


def _apply(op: Callable[[int, int], int], a: Signed, b: Signed) -> Signed:
    width = max(len(a[1]), len(b[1])) + 1
    left = to_twos_complement(a, width)
    right = to_twos_complement(b, width)
    return from_twos_complement([op(x, y) for x, y in zip(left, right)])


# ---------------------------------------------------------------------------
# Logical operators
# ---------------------------------------------------------------------------

def bitwise_and(a: Signed, b: Signed) -> Signed:
    return _apply(operator.and_, a, b)


def bitwise_or(a: Signed, b: Signed) -> Signed:
    return _apply(operator.or_, a, b)


def bitwise_xor(a: Signed, b: Signed) -> Signed:
    return _apply(operator.xor, a, b)


def invert(a: Signed) -> Signed:
    """``~a == -(a + 1)``; computed directly on sign and magnitude."""
    negative, mag = a
    if negative:
        return False, sub_magnitudes(mag, (1,))
    return True, add_word(mag, 1)


# ---------------------------------------------------------------------------
# Shifts
# ---------------------------------------------------------------------------

def check_shift(count: int) -> int:
    if isinstance(count, bool) or not isinstance(count, int):
        raise TypeError(f"shift count must be an int, got {type(count).__name__}")
    if count < 0:
        raise ValueError("negative shift count")
    return count


def shift_left(a: Signed, count: int) -> Signed:
    check_shift(count)
    negative, mag = a
    return negative, shift_left_magnitude(mag, count)


def shift_right(a: Signed, count: int) -> Signed:
    """Arithmetic shift; negative values round toward negative infinity."""
    check_shift(count)
    negative, mag = a
    shifted = shift_right_magnitude(mag, count)
    if negative and has_low_bits(mag, count):
        shifted = add_word(shifted, 1)
    return negative and bool(shifted), shifted
