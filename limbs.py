"""
Limb storage and magnitude primitives.

A magnitude is a tuple of unsigned 32-bit limbs, least-significant first,
with no most-significant zero limbs.  Zero is the empty tuple.

Every engine (radix conversion, multiplication, division, bitwise) works
on magnitudes through the helpers in this module.  They never mutate
their inputs; each returns a fresh, canonical tuple.

The storage layer distinguishes two shapes of the same value:

  InlineLimbs  - a magnitude of at most one limb, kept as a plain word
  HeapLimbs    - a magnitude of two or more limbs, kept as a tuple

Both expose the same read-only ``view()``, so callers never need to know
which shape they hold.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Union


LIMB_BITS = 32
LIMB_BASE = 1 << LIMB_BITS
LIMB_MASK = LIMB_BASE - 1

Magnitude = tuple[int, ...]


# ---------------------------------------------------------------------------
# Storage: small-value / large-value sum type
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InlineLimbs:
    """A magnitude that fits in a single limb (zero included)."""

    value: int

    def view(self) -> Magnitude:
        return (self.value,) if self.value else ()

    def __len__(self) -> int:
        return 1 if self.value else 0


@dataclass(frozen=True)
class HeapLimbs:
    """A magnitude of two or more limbs."""

    limbs: Magnitude

    def view(self) -> Magnitude:
        return self.limbs

    def __len__(self) -> int:
        return len(self.limbs)


LimbStore = Union[InlineLimbs, HeapLimbs]

ZERO_STORE = InlineLimbs(0)


def store_limbs(limbs: Sequence[int]) -> LimbStore:
    """Canonicalize *limbs* and wrap them in the matching storage shape."""
    mag = trim(limbs)
    if len(mag) <= 1:
        return InlineLimbs(mag[0]) if mag else ZERO_STORE
    return HeapLimbs(mag)


def check_limbs(limbs: Iterable[int]) -> Magnitude:
    """Return *limbs* as a tuple, rejecting anything that is not a 32-bit word."""
    out = tuple(limbs)
    for i, limb in enumerate(out):
        if isinstance(limb, bool) or not isinstance(limb, int):
            raise TypeError(f"limb {i} must be an int, got {type(limb).__name__}")
        if not 0 <= limb <= LIMB_MASK:
            raise ValueError(f"limb {i} ({limb}) is outside [0, 2**32)")
    return out


# ---------------------------------------------------------------------------
# Canonical form
# ---------------------------------------------------------------------------

def trim(limbs: Sequence[int]) -> Magnitude:
    """Drop most-significant zero limbs."""
    n = len(limbs)
    while n and limbs[n - 1] == 0:
        n -= 1
    return tuple(limbs[:n])


def limbs_from_int(value: int) -> Magnitude:
    """Split a non-negative Python int into limbs."""
    if value < 0:
        raise ValueError("magnitude must be non-negative")
    out = []
    while value:
        out.append(value & LIMB_MASK)
        value >>= LIMB_BITS
    return tuple(out)


def int_from_limbs(limbs: Sequence[int]) -> int:
    """Reassemble limbs into a non-negative Python int."""
    value = 0
    for limb in reversed(limbs):
        value = (value << LIMB_BITS) | limb
    return value


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

def compare_magnitudes(a: Sequence[int], b: Sequence[int]) -> int:
    """Three-way compare of two canonical magnitudes: -1, 0 or 1."""
    if len(a) != len(b):
        return -1 if len(a) < len(b) else 1
    for i in range(len(a) - 1, -1, -1):
        if a[i] != b[i]:
            return -1 if a[i] < b[i] else 1
    return 0


# ---------------------------------------------------------------------------
# Addition / subtraction
# ---------------------------------------------------------------------------

def add_magnitudes(a: Sequence[int], b: Sequence[int]) -> Magnitude:
    if len(a) < len(b):
        a, b = b, a
    out = [0] * (len(a) + 1)
    carry = 0
    for i in range(len(b)):
        total = a[i] + b[i] + carry
        out[i] = total & LIMB_MASK
        carry = total >> LIMB_BITS
    for i in range(len(b), len(a)):
        total = a[i] + carry
        out[i] = total & LIMB_MASK
        carry = total >> LIMB_BITS
    out[len(a)] = carry
    return trim(out)


def sub_magnitudes(a: Sequence[int], b: Sequence[int]) -> Magnitude:
    """Return ``a - b``.  Requires ``a >= b`` as magnitudes."""
    out = [0] * len(a)
    borrow = 0
    for i in range(len(a)):
        diff = a[i] - borrow - (b[i] if i < len(b) else 0)
        if diff < 0:
            diff += LIMB_BASE
            borrow = 1
        else:
            borrow = 0
        out[i] = diff
    if borrow:
        raise ValueError("subtrahend magnitude exceeds minuend")
    return trim(out)


def add_word(a: Sequence[int], word: int) -> Magnitude:
    """Return ``a + word`` for a single limb *word*."""
    out = list(a)
    carry = word
    i = 0
    while carry:
        if i == len(out):
            out.append(carry)
            break
        total = out[i] + carry
        out[i] = total & LIMB_MASK
        carry = total >> LIMB_BITS
        i += 1
    return trim(out)


# ---------------------------------------------------------------------------
# Single-word multiply / divide
# ---------------------------------------------------------------------------

def mul_word(a: Sequence[int], word: int) -> Magnitude:
    """Return ``a * word`` for a single limb *word*."""
    if not word or not a:
        return ()
    out = [0] * (len(a) + 1)
    carry = 0
    for i, limb in enumerate(a):
        total = limb * word + carry
        out[i] = total & LIMB_MASK
        carry = total >> LIMB_BITS
    out[len(a)] = carry
    return trim(out)


def divmod_word(a: Sequence[int], word: int) -> tuple[Magnitude, int]:
    """Divide by a non-zero single limb; return ``(quotient, remainder)``."""
    out = [0] * len(a)
    rem = 0
    for i in range(len(a) - 1, -1, -1):
        cur = (rem << LIMB_BITS) | a[i]
        out[i] = cur // word
        rem = cur - out[i] * word
    return trim(out), rem


# ---------------------------------------------------------------------------
# Shifts
# ---------------------------------------------------------------------------

def shift_left_magnitude(a: Sequence[int], bits: int) -> Magnitude:
    """Return ``a * 2**bits``."""
    if not a:
        return ()
    limb_shift, bit_shift = divmod(bits, LIMB_BITS)
    out = [0] * limb_shift
    if bit_shift == 0:
        out.extend(a)
        return tuple(out)
    carry = 0
    for limb in a:
        out.append(((limb << bit_shift) | carry) & LIMB_MASK)
        carry = limb >> (LIMB_BITS - bit_shift)
    out.append(carry)
    return trim(out)


def shift_right_magnitude(a: Sequence[int], bits: int) -> Magnitude:
    """Return ``floor(a / 2**bits)``."""
    limb_shift, bit_shift = divmod(bits, LIMB_BITS)
    if limb_shift >= len(a):
        return ()
    src = a[limb_shift:]
    if bit_shift == 0:
        return tuple(src)
    out = [0] * len(src)
    for i in range(len(src)):
        hi = src[i + 1] if i + 1 < len(src) else 0
        out[i] = ((src[i] >> bit_shift) | (hi << (LIMB_BITS - bit_shift))) & LIMB_MASK
    return trim(out)


def has_low_bits(a: Sequence[int], bits: int) -> bool:
    """True when any of the lowest *bits* bits of *a* is set."""
    limb_shift, bit_shift = divmod(bits, LIMB_BITS)
    for i in range(min(limb_shift, len(a))):
        if a[i]:
            return True
    if bit_shift and limb_shift < len(a):
        return bool(a[limb_shift] & ((1 << bit_shift) - 1))
    return False


def limb_shift_add(acc: list[int], part: Sequence[int], offset: int) -> None:
    """Add *part* into *acc* starting at limb *offset*, in place.

    *acc* must be long enough to absorb the final carry.
    """
    carry = 0
    i = offset
    for limb in part:
        total = acc[i] + limb + carry
        acc[i] = total & LIMB_MASK
        carry = total >> LIMB_BITS
        i += 1
    while carry:
        total = acc[i] + carry
        acc[i] = total & LIMB_MASK
        carry = total >> LIMB_BITS
        i += 1
