"""
Radix conversion between strings and magnitudes.

Parsing follows the recurrence ``acc = acc * radix + digit``.  To keep
the number of big-integer steps down, digits are consumed in groups of
``k`` where ``radix**k`` still fits in one limb; each group is folded in
with a single ``acc = acc * radix**k + chunk`` step, which is the same
recurrence applied k digits at a time.

Formatting runs the recurrence backwards: repeated division by
``radix**k`` yields chunks least-significant first, and each chunk is
expanded into k digits.
"""

from __future__ import annotations

import string
from typing import Sequence

from limbs import LIMB_BASE, Magnitude, add_word, divmod_word, mul_word

MIN_RADIX = 2
MAX_RADIX = 36

DIGIT_CHARS = string.digits + string.ascii_lowercase
_DIGIT_VALUES = {ch: i for i, ch in enumerate(DIGIT_CHARS)}
_DIGIT_VALUES.update((ch, i + 10) for i, ch in enumerate(string.ascii_uppercase))


class FormatError(ValueError):
    """Raised for an empty or malformed digit string, or an unsupported radix."""


def check_radix(radix: int) -> int:
    if isinstance(radix, bool) or not isinstance(radix, int):
        raise FormatError(f"radix must be an int, got {type(radix).__name__}")
    if not MIN_RADIX <= radix <= MAX_RADIX:
        raise FormatError(f"radix {radix} is outside [{MIN_RADIX}, {MAX_RADIX}]")
    return radix


def chunk_size(radix: int) -> tuple[int, int]:
    """Largest ``k`` with ``radix**k < 2**32``; returns ``(k, radix**k)``."""
    k, power = 1, radix
    while power * radix < LIMB_BASE:
        power *= radix
        k += 1
    return k, power


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_magnitude(text: str, radix: int = 10) -> tuple[bool, Magnitude]:
    """Parse a signed digit string into ``(is_negative, magnitude)``.

    A negative zero comes back as ``(False, ())``.
    """
    check_radix(radix)
    if not isinstance(text, str):
        raise FormatError(f"expected a str, got {type(text).__name__}")

    negative = text.startswith("-")
    body = text[1:] if negative else text
    if not body:
        raise FormatError(f"no digits in {text!r}")

    values = []
    for pos, ch in enumerate(body, start=len(text) - len(body)):
        digit = _DIGIT_VALUES.get(ch)
        if digit is None or digit >= radix:
            raise FormatError(
                f"invalid character {ch!r} at position {pos} for radix {radix}"
            )
        values.append(digit)

    k, _ = chunk_size(radix)
    head = len(values) % k or k
    acc: Magnitude = ()
    start = 0
    size = head
    while start < len(values):
        chunk = 0
        for digit in values[start:start + size]:
            chunk = chunk * radix + digit
        acc = add_word(mul_word(acc, radix ** size), chunk)
        start += size
        size = k

    return (negative and bool(acc)), acc


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_magnitude(mag: Sequence[int], negative: bool = False, radix: int = 10) -> str:
    """Render a magnitude in *radix*, prefixing ``-`` when *negative*."""
    check_radix(radix)
    if not mag:
        return "0"

    k, power = chunk_size(radix)
    out: list[str] = []
    rest: Sequence[int] = mag
    while rest:
        rest, chunk = divmod_word(rest, power)
        for _ in range(k):
            chunk, digit = divmod(chunk, radix)
            out.append(DIGIT_CHARS[digit])
            if not rest and not chunk:
                break

    if negative:
        out.append("-")
    return "".join(reversed(out))
