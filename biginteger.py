"""
Arbitrary-precision signed integers.

``BigInteger`` is an immutable value: a sign flag plus a canonical
magnitude of 32-bit limbs.  Every operator is a thin dispatcher onto one
of the engines and returns a new canonical instance:

  limbs.py     storage, comparison, addition, subtraction, shifts
  radix.py     string <-> magnitude in bases 2..36
  multiply.py  Simple / Karatsuba strategies and the size-based selector
  fft.py       FFT strategy
  division.py  truncating division and remainder
  bitwise.py   AND / OR / XOR / NOT and shifts, two's-complement semantics

Division follows truncation toward zero: ``/`` truncates and ``%`` takes
the dividend's sign.  Right shift rounds toward negative infinity.

Python ints are accepted on either side of every binary operator.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Union

import bitwise
from division import DivideByZeroError, truncated_divmod
from fft import FftMultiplier, PrecisionError
from limbs import (
    LIMB_MASK,
    InlineLimbs,
    LimbStore,
    Magnitude,
    add_magnitudes,
    check_limbs,
    compare_magnitudes,
    int_from_limbs,
    limbs_from_int,
    store_limbs,
    sub_magnitudes,
)
from multiply import (
    KaratsubaMultiplier,
    Multiplier,
    Selector,
    SimpleMultiplier,
    multiply_magnitudes,
    select_multiplier,
)
from radix import FormatError, format_magnitude, parse_magnitude

__all__ = [
    "BigInteger",
    "DivideByZeroError",
    "FftMultiplier",
    "FormatError",
    "KaratsubaMultiplier",
    "Multiplier",
    "PrecisionError",
    "SimpleMultiplier",
    "select_multiplier",
]

Signed = tuple[bool, Magnitude]
Operand = Union["BigInteger", int]


# ---------------------------------------------------------------------------
# Signed core arithmetic
# ---------------------------------------------------------------------------

def compare_signed(a: Signed, b: Signed) -> int:
    a_neg, a_mag = a
    b_neg, b_mag = b
    if a_neg != b_neg:
        return -1 if a_neg else 1
    order = compare_magnitudes(a_mag, b_mag)
    return -order if a_neg else order


def add_signed(a: Signed, b: Signed) -> Signed:
    a_neg, a_mag = a
    b_neg, b_mag = b
    if a_neg == b_neg:
        total = add_magnitudes(a_mag, b_mag)
        return a_neg and bool(total), total
    order = compare_magnitudes(a_mag, b_mag)
    if order == 0:
        return False, ()
    if order > 0:
        return a_neg, sub_magnitudes(a_mag, b_mag)
    return b_neg, sub_magnitudes(b_mag, a_mag)


def negate_signed(a: Signed) -> Signed:
    negative, mag = a
    return (not negative) and bool(mag), mag


# ---------------------------------------------------------------------------
# Value type
# ---------------------------------------------------------------------------

class BigInteger:
    """Immutable arbitrary-precision signed integer."""

    __slots__ = ("_negative", "_store")

    _negative: bool
    _store: LimbStore

    def __init__(self, digits: Iterable[int] = (), is_negative: bool = False) -> None:
        self._init(bool(is_negative), store_limbs(check_limbs(digits)))

    def _init(self, negative: bool, store: LimbStore) -> None:
        object.__setattr__(self, "_store", store)
        object.__setattr__(self, "_negative", negative and len(store) > 0)

    @classmethod
    def _make(cls, negative: bool, mag: Sequence[int]) -> "BigInteger":
        self = object.__new__(cls)
        self._init(negative, store_limbs(mag))
        return self

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self):
        return type(self).from_limbs, (self._store.view(), self._negative)

    # -- construction -------------------------------------------------------

    @classmethod
    def from_limbs(cls, limbs: Iterable[int], is_negative: bool = False) -> "BigInteger":
        """From little-endian 32-bit limbs and a sign flag."""
        return cls(limbs, is_negative)

    @classmethod
    def from_string(cls, text: str, radix: int = 10) -> "BigInteger":
        """Parse an optionally ``-``-prefixed digit string in *radix* (2..36)."""
        negative, mag = parse_magnitude(text, radix)
        return cls._make(negative, mag)

    @classmethod
    def from_word(cls, word: int, is_negative: bool = False) -> "BigInteger":
        """Single machine word fast path; *word* must fit in 32 bits."""
        if isinstance(word, bool) or not isinstance(word, int):
            raise TypeError(f"word must be an int, got {type(word).__name__}")
        if not 0 <= word <= LIMB_MASK:
            raise ValueError(f"word ({word}) is outside [0, 2**32)")
        self = object.__new__(cls)
        self._init(bool(is_negative), InlineLimbs(word))
        return self

    @classmethod
    def from_int(cls, value: int) -> "BigInteger":
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected an int, got {type(value).__name__}")
        return cls._make(value < 0, limbs_from_int(abs(value)))

    # -- accessors ----------------------------------------------------------

    @property
    def is_negative(self) -> bool:
        return self._negative

    @property
    def is_inline(self) -> bool:
        """True when the magnitude is held as a single word."""
        return isinstance(self._store, InlineLimbs)

    def digits(self) -> Magnitude:
        """Little-endian limbs; zero is ``(0,)``."""
        return self._store.view() or (0,)

    @property
    def _signed(self) -> Signed:
        return self._negative, self._store.view()

    # -- conversion ---------------------------------------------------------

    def to_string(self, radix: int = 10) -> str:
        return format_magnitude(self._store.view(), self._negative, radix)

    def __str__(self) -> str:
        return self.to_string(10)

    def __repr__(self) -> str:
        return f"{type(self).__name__}.from_string({self.to_string(10)!r})"

    def __int__(self) -> int:
        value = int_from_limbs(self._store.view())
        return -value if self._negative else value

    def __bool__(self) -> bool:
        return len(self._store) > 0

    def __hash__(self) -> int:
        return hash(int(self))

    # -- comparison ---------------------------------------------------------

    def compare(self, other: Operand) -> int:
        """Three-way compare: -1, 0 or 1."""
        rhs = _coerce(other)
        if rhs is None:
            raise TypeError(f"cannot compare BigInteger with {type(other).__name__}")
        return compare_signed(self._signed, rhs._signed)

    def _compare(self, other: object) -> int | None:
        rhs = _coerce(other)
        if rhs is None:
            return None
        return compare_signed(self._signed, rhs._signed)

    def __eq__(self, other: object) -> bool:
        order = self._compare(other)
        return NotImplemented if order is None else order == 0

    def __ne__(self, other: object) -> bool:
        order = self._compare(other)
        return NotImplemented if order is None else order != 0

    def __lt__(self, other: Operand) -> bool:
        order = self._compare(other)
        return NotImplemented if order is None else order < 0

    def __le__(self, other: Operand) -> bool:
        order = self._compare(other)
        return NotImplemented if order is None else order <= 0

    def __gt__(self, other: Operand) -> bool:
        order = self._compare(other)
        return NotImplemented if order is None else order > 0

    def __ge__(self, other: Operand) -> bool:
        order = self._compare(other)
        return NotImplemented if order is None else order >= 0

    # -- additive -----------------------------------------------------------

    def __neg__(self) -> "BigInteger":
        return self._make(*negate_signed(self._signed))

    def __pos__(self) -> "BigInteger":
        return self

    def __abs__(self) -> "BigInteger":
        return self._make(False, self._store.view())

    def __add__(self, other: Operand) -> "BigInteger":
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self._make(*add_signed(self._signed, rhs._signed))

    def __radd__(self, other: int) -> "BigInteger":
        return self.__add__(other)

    def __sub__(self, other: Operand) -> "BigInteger":
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self._make(*add_signed(self._signed, negate_signed(rhs._signed)))

    def __rsub__(self, other: int) -> "BigInteger":
        lhs = _coerce(other)
        if lhs is None:
            return NotImplemented
        return lhs - self

    # -- multiplicative -----------------------------------------------------

    def multiply(
        self,
        other: Operand,
        multiplier: Multiplier | None = None,
        selector: Selector | None = None,
    ) -> "BigInteger":
        """Product using an explicit *multiplier*, or one chosen by *selector*."""
        rhs = _coerce(other)
        if rhs is None:
            raise TypeError(f"cannot multiply BigInteger by {type(other).__name__}")
        a, b = self._store.view(), rhs._store.view()
        if multiplier is not None:
            mag = multiplier.multiply(a, b)
        else:
            mag = multiply_magnitudes(a, b, selector or select_multiplier)
        return self._make(self._negative != rhs._negative, mag)

    def __mul__(self, other: Operand) -> "BigInteger":
        if _coerce(other) is None:
            return NotImplemented
        return self.multiply(other)

    def __rmul__(self, other: int) -> "BigInteger":
        return self.__mul__(other)

    def divmod(self, other: Operand) -> tuple["BigInteger", "BigInteger"]:
        """Truncating quotient and dividend-signed remainder."""
        rhs = _coerce(other)
        if rhs is None:
            raise TypeError(f"cannot divide BigInteger by {type(other).__name__}")
        q, r = truncated_divmod(self._signed, rhs._signed)
        return self._make(*q), self._make(*r)

    def divide(self, other: Operand) -> "BigInteger":
        return self.divmod(other)[0]

    def remainder(self, other: Operand) -> "BigInteger":
        return self.divmod(other)[1]

    def __truediv__(self, other: Operand) -> "BigInteger":
        if _coerce(other) is None:
            return NotImplemented
        return self.divide(other)

    def __rtruediv__(self, other: int) -> "BigInteger":
        lhs = _coerce(other)
        if lhs is None:
            return NotImplemented
        return lhs.divide(self)

    def __mod__(self, other: Operand) -> "BigInteger":
        if _coerce(other) is None:
            return NotImplemented
        return self.remainder(other)

    def __rmod__(self, other: int) -> "BigInteger":
        lhs = _coerce(other)
        if lhs is None:
            return NotImplemented
        return lhs.remainder(self)

    def __divmod__(self, other: Operand) -> tuple["BigInteger", "BigInteger"]:
        if _coerce(other) is None:
            return NotImplemented
        return self.divmod(other)

    def __rdivmod__(self, other: int) -> tuple["BigInteger", "BigInteger"]:
        lhs = _coerce(other)
        if lhs is None:
            return NotImplemented
        return lhs.divmod(self)

    # -- bitwise ------------------------------------------------------------

    def __invert__(self) -> "BigInteger":
        return self._make(*bitwise.invert(self._signed))

    def __and__(self, other: Operand) -> "BigInteger":
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self._make(*bitwise.bitwise_and(self._signed, rhs._signed))

    def __rand__(self, other: int) -> "BigInteger":
        return self.__and__(other)

    def __or__(self, other: Operand) -> "BigInteger":
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self._make(*bitwise.bitwise_or(self._signed, rhs._signed))

    def __ror__(self, other: int) -> "BigInteger":
        return self.__or__(other)

    def __xor__(self, other: Operand) -> "BigInteger":
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self._make(*bitwise.bitwise_xor(self._signed, rhs._signed))

    def __rxor__(self, other: int) -> "BigInteger":
        return self.__xor__(other)

    def __lshift__(self, count: int) -> "BigInteger":
        return self._make(*bitwise.shift_left(self._signed, _shift_count(count)))

    def __rshift__(self, count: int) -> "BigInteger":
        return self._make(*bitwise.shift_right(self._signed, _shift_count(count)))


def _coerce(value: object) -> BigInteger | None:
    if isinstance(value, BigInteger):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return BigInteger.from_int(value)
    return None


def _shift_count(count: object) -> int:
    if isinstance(count, BigInteger):
        return int(count)
    return count  # validated by bitwise.check_shift
