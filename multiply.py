"""
Multiplication strategies and the size-based selector.

All strategies satisfy one contract: given two unsigned little-endian
limb sequences, return the canonical limb tuple of their product.  Sign
handling is the caller's job.  The three implementations are
independent; nothing inherits from anything.

  SimpleMultiplier     schoolbook column accumulation, O(n*m)
  KaratsubaMultiplier  three half-size products per level, O(n^1.585)
  FftMultiplier        floating-point convolution, O(n log n)  (fft.py)

``select_multiplier`` maps operand sizes to one of them.  The choice only
affects speed; any strategy is correct at any size.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, Protocol, Sequence

from config import DEFAULT_SETTINGS, MultiplierSettings
from fft import FftMultiplier
from limbs import (
    LIMB_BITS,
    LIMB_MASK,
    Magnitude,
    add_magnitudes,
    limb_shift_add,
    sub_magnitudes,
    trim,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Strategy protocol
# ---------------------------------------------------------------------------

class Multiplier(Protocol):
    """Anything that multiplies two unsigned limb sequences."""

    def multiply(self, left: Sequence[int], right: Sequence[int]) -> Magnitude: ...


Selector = Callable[[int, int], Multiplier]


# ---------------------------------------------------------------------------
# Schoolbook
# ---------------------------------------------------------------------------

def schoolbook(a: Sequence[int], b: Sequence[int]) -> Magnitude:
    """Column-by-column product; each column total carries into the next."""
    if not a or not b:
        return ()
    la, lb = len(a), len(b)
    out = [0] * (la + lb)
    acc = 0
    for col in range(la + lb - 1):
        for i in range(max(0, col - lb + 1), min(col, la - 1) + 1):
            acc += a[i] * b[col - i]
        out[col] = acc & LIMB_MASK
        acc >>= LIMB_BITS
    out[la + lb - 1] = acc
    return trim(out)


@dataclass(frozen=True)
class SimpleMultiplier:
    """O(n*m) schoolbook multiplication."""

    def multiply(self, left: Sequence[int], right: Sequence[int]) -> Magnitude:
        return schoolbook(trim(left), trim(right))


# ---------------------------------------------------------------------------
# Karatsuba
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class KaratsubaMultiplier:
    """O(n^log2(3)) divide-and-conquer multiplication.

    Operands whose shorter side is below ``threshold`` limbs go to
    schoolbook.  Each level halves the longer operand, so recursion depth
    is logarithmic in the limb count.
    """

    threshold: int = DEFAULT_SETTINGS.karatsuba_threshold

    def __post_init__(self) -> None:
        if self.threshold < 2:
            raise ValueError(f"threshold must be >= 2, got {self.threshold}")

    def multiply(self, left: Sequence[int], right: Sequence[int]) -> Magnitude:
        return self._multiply(trim(left), trim(right))

    def _multiply(self, a: Magnitude, b: Magnitude) -> Magnitude:
        if not a or not b:
            return ()
        if min(len(a), len(b)) < self.threshold:
            return schoolbook(a, b)

        half = max(len(a), len(b)) // 2
        a_lo, a_hi = trim(a[:half]), a[half:]
        b_lo, b_hi = trim(b[:half]), b[half:]

        out = [0] * (len(a) + len(b) + 1)

        # One operand lies entirely below the split: two products suffice
        if not a_hi or not b_hi:
            short, lo, hi = (a, b_lo, b_hi) if not a_hi else (b, a_lo, a_hi)
            limb_shift_add(out, self._multiply(lo, short), 0)
            limb_shift_add(out, self._multiply(hi, short), half)
            return trim(out)

        low = self._multiply(a_lo, b_lo)
        high = self._multiply(a_hi, b_hi)
        cross = self._multiply(add_magnitudes(a_lo, a_hi), add_magnitudes(b_lo, b_hi))
        middle = sub_magnitudes(sub_magnitudes(cross, low), high)

        limb_shift_add(out, low, 0)
        limb_shift_add(out, middle, half)
        limb_shift_add(out, high, 2 * half)
        return trim(out)


# ---------------------------------------------------------------------------
# Selector
# ---------------------------------------------------------------------------

SIMPLE = SimpleMultiplier()
FFT = FftMultiplier()


def select_multiplier(
    left_len: int,
    right_len: int,
    settings: MultiplierSettings = DEFAULT_SETTINGS,
) -> Multiplier:
    """Pick a strategy from operand limb counts."""
    shorter = min(left_len, right_len)
    if shorter < settings.karatsuba_threshold:
        return SIMPLE
    if shorter >= settings.fft_threshold:
        return FFT
    return KaratsubaMultiplier(threshold=settings.karatsuba_threshold)


def make_selector(settings: MultiplierSettings) -> Selector:
    """Bind *settings* into a two-argument selector."""
    return partial(select_multiplier, settings=settings)


def multiply_magnitudes(
    a: Sequence[int],
    b: Sequence[int],
    selector: Selector = select_multiplier,
) -> Magnitude:
    if not a or not b:
        return ()
    strategy = selector(len(a), len(b))
    if not isinstance(strategy, SimpleMultiplier):
        logger.debug(
            "multiply %d x %d limbs with %s", len(a), len(b), type(strategy).__name__
        )
    return strategy.multiply(a, b)
