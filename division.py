"""
Long division on magnitudes and truncating signed division.

Single-limb divisors take the direct path: one pass from the top limb
down, carrying a running remainder.  Longer divisors use normalized long
division (Knuth, TAOCP vol. 2, 4.3.1, Algorithm D):

  1. Shift both operands left so the divisor's top limb has its high bit
     set.
  2. For each quotient limb, estimate it from the top two limbs of the
     current remainder and the divisor's top limb, refine the estimate
     with the divisor's second limb.
  3. Multiply-and-subtract; if that underflows, the estimate was one too
     high, so add the divisor back once.
  4. Shift the final remainder back down.

Signed results truncate toward zero: the quotient sign is the XOR of the
operand signs and the remainder takes the dividend's sign, so that
``a == q * b + r`` and ``|r| < |b|``.
"""

from __future__ import annotations

from typing import Sequence

from limbs import (
    LIMB_BASE,
    LIMB_BITS,
    LIMB_MASK,
    Magnitude,
    compare_magnitudes,
    divmod_word,
    shift_left_magnitude,
    shift_right_magnitude,
    trim,
)

Signed = tuple[bool, Magnitude]


class DivideByZeroError(ZeroDivisionError):
    """Raised when the divisor is zero."""


def divmod_magnitudes(a: Sequence[int], b: Sequence[int]) -> tuple[Magnitude, Magnitude]:
    """Return ``(a // b, a % b)`` for unsigned magnitudes."""
    if not b:
        raise DivideByZeroError("division by zero")
    if compare_magnitudes(a, b) < 0:
        return (), tuple(a)
    if len(b) == 1:
        q, r = divmod_word(a, b[0])
        return q, ((r,) if r else ())
    return _long_divide(a, b)


def _long_divide(a: Sequence[int], b: Sequence[int]) -> tuple[Magnitude, Magnitude]:
    shift = LIMB_BITS - b[-1].bit_length()
    v = shift_left_magnitude(b, shift)
    u = list(shift_left_magnitude(a, shift))
    u.extend([0] * (len(a) + 1 - len(u)))

    n = len(v)
    m = len(u) - n
    v_top, v_next = v[-1], v[-2]
    q = [0] * m

    for j in range(m - 1, -1, -1):
        qhat, rhat = divmod((u[j + n] << LIMB_BITS) | u[j + n - 1], v_top)
        while qhat >= LIMB_BASE or qhat * v_next > ((rhat << LIMB_BITS) | u[j + n - 2]):
            qhat -= 1
            rhat += v_top
            if rhat >= LIMB_BASE:
                break

        borrow = 0
        carry = 0
        for i in range(n):
            product = qhat * v[i] + carry
            carry = product >> LIMB_BITS
            diff = u[i + j] - (product & LIMB_MASK) - borrow
            borrow = 1 if diff < 0 else 0
            u[i + j] = diff & LIMB_MASK
        diff = u[j + n] - carry - borrow
        u[j + n] = diff & LIMB_MASK

        if diff < 0:
            qhat -= 1
            carry = 0
            for i in range(n):
                total = u[i + j] + v[i] + carry
                u[i + j] = total & LIMB_MASK
                carry = total >> LIMB_BITS
            u[j + n] = (u[j + n] + carry) & LIMB_MASK

        q[j] = qhat

    remainder = shift_right_magnitude(trim(u[:n]), shift)
    return trim(q), remainder


def truncated_divmod(a: Signed, b: Signed) -> tuple[Signed, Signed]:
    """Signed division truncating toward zero.

    Operands and results are ``(is_negative, magnitude)`` pairs.
    """
    a_neg, a_mag = a
    b_neg, b_mag = b
    if not b_mag:
        raise DivideByZeroError("division by zero")
    q, r = divmod_magnitudes(a_mag, b_mag)
    return ((a_neg != b_neg) and bool(q), q), (a_neg and bool(r), r)
