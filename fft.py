"""
FFT-based multiplication.

Each operand is re-encoded into small digits (16 bits, or 8 bits for very
long transforms), both digit vectors are transformed with an iterative
radix-2 complex FFT, multiplied pointwise and transformed back.  Rounding
the real parts recovers the exact convolution as long as the floating
point error stays below one half; carries are then propagated in the
digit radix and the digits repacked into 32-bit limbs.

Exactness guard
---------------
Before transforming, the digit width is picked so that

    2 * digit_bits + log2(transform_length) <= PRECISION_BUDGET_BITS

which keeps every convolution term comfortably inside a double's 53-bit
mantissa.  After the inverse transform every coefficient is checked to be
within ROUNDING_TOLERANCE of an integer; if not, the product is redone
with the next narrower digit width.  PrecisionError is raised only when
no width is left, so a wrong product is never returned.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

from limbs import LIMB_BITS, Magnitude, trim

logger = logging.getLogger(__name__)

DIGIT_WIDTHS = (16, 8)
PRECISION_BUDGET_BITS = 48
ROUNDING_TOLERANCE = 0.25


class PrecisionError(ArithmeticError):
    """Raised when the transform cannot guarantee an exact product."""


# ---------------------------------------------------------------------------
# Digit re-encoding
# ---------------------------------------------------------------------------

def split_digits(limbs: Sequence[int], bits: int) -> list[int]:
    """Re-encode 32-bit limbs as little-endian digits of *bits* bits."""
    per_limb = LIMB_BITS // bits
    mask = (1 << bits) - 1
    out = []
    for limb in limbs:
        for _ in range(per_limb):
            out.append(limb & mask)
            limb >>= bits
    while out and out[-1] == 0:
        out.pop()
    return out


def join_digits(coefficients: Sequence[int], bits: int) -> Magnitude:
    """Carry-propagate raw convolution terms and repack them into limbs."""
    mask = (1 << bits) - 1
    digits = []
    carry = 0
    for c in coefficients:
        total = c + carry
        digits.append(total & mask)
        carry = total >> bits
    while carry:
        digits.append(carry & mask)
        carry >>= bits

    per_limb = LIMB_BITS // bits
    limbs = []
    for start in range(0, len(digits), per_limb):
        limb = 0
        for shift, digit in enumerate(digits[start:start + per_limb]):
            limb |= digit << (shift * bits)
        limbs.append(limb)
    return trim(limbs)


def choose_digit_bits(left_len: int, right_len: int) -> tuple[int, int]:
    """Pick the widest safe digit width; returns ``(digit_bits, transform_length)``."""
    for bits in DIGIT_WIDTHS:
        per_limb = LIMB_BITS // bits
        size = transform_length((left_len + right_len) * per_limb)
        if 2 * bits + size.bit_length() - 1 <= PRECISION_BUDGET_BITS:
            return bits, size
    raise PrecisionError(
        f"operands of {left_len} and {right_len} limbs exceed the exact FFT range"
    )


def transform_length(needed: int) -> int:
    """Smallest power of two >= *needed* (and >= 1)."""
    size = 1
    while size < needed:
        size <<= 1
    return size


# ---------------------------------------------------------------------------
# Transform
# ---------------------------------------------------------------------------

def _roots(size: int, inverse: bool) -> list[complex]:
    sign = 1.0 if inverse else -1.0
    step = 2.0 * math.pi / size
    return [
        complex(math.cos(k * step), sign * math.sin(k * step))
        for k in range(size // 2)
    ]


def transform(values: list[complex], inverse: bool = False) -> None:
    """In-place iterative Cooley-Tukey FFT; *values* length must be a power of two.

    The inverse transform is scaled by ``1 / len(values)``.
    """
    n = len(values)
    if n <= 1:
        return

    j = 0
    for i in range(1, n):
        bit = n >> 1
        while j & bit:
            j ^= bit
            bit >>= 1
        j |= bit
        if i < j:
            values[i], values[j] = values[j], values[i]

    roots = _roots(n, inverse)
    size = 2
    while size <= n:
        half = size >> 1
        stride = n // size
        for start in range(0, n, size):
            for k in range(half):
                lo = start + k
                hi = lo + half
                v = values[hi] * roots[k * stride]
                u = values[lo]
                values[lo] = u + v
                values[hi] = u - v
        size <<= 1

    if inverse:
        scale = 1.0 / n
        for i in range(n):
            values[i] *= scale


# ---------------------------------------------------------------------------
# Strategy
# ---------------------------------------------------------------------------

def convolve(left: Magnitude, right: Magnitude, bits: int, size: int) -> Magnitude:
    """Exact product of two magnitudes through one length-*size* transform.

    Raises PrecisionError when any coefficient lands ROUNDING_TOLERANCE or
    further from an integer.
    """
    a = split_digits(left, bits)
    b = split_digits(right, bits)
    fa = [complex(d) for d in a] + [0j] * (size - len(a))
    fb = [complex(d) for d in b] + [0j] * (size - len(b))
    transform(fa)
    transform(fb)
    for i in range(size):
        fa[i] *= fb[i]
    transform(fa, inverse=True)

    terms = len(a) + len(b) - 1
    coefficients = []
    worst = 0.0
    for i in range(terms):
        real = fa[i].real
        rounded = round(real)
        worst = max(worst, abs(real - rounded))
        coefficients.append(int(rounded))
    if worst >= ROUNDING_TOLERANCE:
        raise PrecisionError(
            f"rounding error {worst:.3f} exceeds {ROUNDING_TOLERANCE} "
            f"for a transform of length {size}"
        )
    return join_digits(coefficients, bits)


@dataclass(frozen=True)
class FftMultiplier:
    """O(n log n) multiplication through a floating-point convolution.

    ``digit_bits`` pins the digit width (must divide 32).  By default the
    widest width inside the precision budget is tried first, and a narrower
    one takes over if the rounding check trips.
    """

    digit_bits: int | None = None

    def __post_init__(self):
        bits = self.digit_bits
        if bits is None:
            return
        if isinstance(bits, bool) or not isinstance(bits, int):
            raise TypeError(f"digit_bits must be an int, got {type(bits).__name__}")
        if bits < 1 or LIMB_BITS % bits:
            raise ValueError(
                f"digit_bits must be a positive divisor of {LIMB_BITS}, got {bits}"
            )

    def multiply(self, left: Sequence[int], right: Sequence[int]) -> Magnitude:
        left, right = trim(left), trim(right)
        if not left or not right:
            return ()

        if self.digit_bits is not None:
            bits = self.digit_bits
            size = transform_length((len(left) + len(right)) * (LIMB_BITS // bits))
            if 2 * bits + size.bit_length() - 1 > PRECISION_BUDGET_BITS:
                raise PrecisionError(
                    f"{bits}-bit digits are not exact for a transform of length {size}"
                )
            return convolve(left, right, bits, size)

        bits, size = choose_digit_bits(len(left), len(right))
        while True:
            logger.debug(
                "fft multiply: %d x %d limbs, %d-bit digits, transform length %d",
                len(left), len(right), bits, size,
            )
            try:
                return convolve(left, right, bits, size)
            except PrecisionError:
                narrower = [w for w in DIGIT_WIDTHS if w < bits]
                if not narrower:
                    raise
                bits = narrower[0]
                size = transform_length((len(left) + len(right)) * (LIMB_BITS // bits))
                logger.debug("fft rounding check failed; retrying with %d-bit digits", bits)
