"""Machine-readable contracts for multipliers and big integers.

Each contract is a named collection of algebraic properties.  A property
carries a human-readable description, the number of free input values
it needs, and a predicate.  Validation tools iterate over the contracts
to verify implementations and to search for counterexamples.

Layers
------
AlgebraicProperty   one checkable relationship
OperationContract   the properties of one operation family
multiplier_contract()   properties any Multiplier must satisfy;
                        predicates take ``(multiplier, a, b)`` magnitudes
integer_contract()      properties of BigInteger operators;
                        predicates take BigInteger values
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from biginteger import BigInteger
from limbs import int_from_limbs, trim


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    arity: int          # how many free input values the check needs
    check: Callable[..., bool]


@dataclass(frozen=True)
class OperationContract:
    name: str
    properties: list[AlgebraicProperty]

    def __iter__(self):
        return iter(self.properties)

    def __len__(self):
        return len(self.properties)


ROUND_TRIP_RADICES = (2, 3, 10, 16, 36)
SHIFT_COUNTS = (0, 1, 7, 31, 32, 33, 64, 95)


# ---------------------------------------------------------------------------
# Multiplier contract
# ---------------------------------------------------------------------------

def _product_correct(mul, a, b) -> bool:
    return int_from_limbs(mul.multiply(a, b)) == int_from_limbs(a) * int_from_limbs(b)


def _canonical(mul, a, b) -> bool:
    product = mul.multiply(a, b)
    return not product or product[-1] != 0


def multiplier_contract() -> OperationContract:
    """Properties every multiplication strategy must satisfy."""
    return OperationContract(
        name="multiply",
        properties=[
            AlgebraicProperty(
                "product_correct", "multiply(a, b) is the exact product", 2,
                _product_correct,
            ),
            AlgebraicProperty(
                "commutativity", "multiply(a, b) == multiply(b, a)", 2,
                lambda mul, a, b: mul.multiply(a, b) == mul.multiply(b, a),
            ),
            AlgebraicProperty(
                "zero", "multiply(a, []) == []", 1,
                lambda mul, a: mul.multiply(a, ()) == () and mul.multiply((), a) == (),
            ),
            AlgebraicProperty(
                "identity", "multiply(a, [1]) == a", 1,
                lambda mul, a: mul.multiply(a, (1,)) == trim(a),
            ),
            AlgebraicProperty(
                "canonical", "product has no most-significant zero limb", 2,
                _canonical,
            ),
        ],
    )


# ---------------------------------------------------------------------------
# Integer contract
# ---------------------------------------------------------------------------

def _division_law(a: BigInteger, b: BigInteger) -> bool:
    if not b:
        return True
    q, r = a.divmod(b)
    return q * b + r == a and abs(r) < abs(b)


def _remainder_sign(a: BigInteger, b: BigInteger) -> bool:
    if not b:
        return True
    r = a % b
    return not r or r.is_negative == a.is_negative


def _round_trip(a: BigInteger) -> bool:
    return all(
        BigInteger.from_string(a.to_string(radix), radix) == a
        for radix in ROUND_TRIP_RADICES
    )


def _shift_round_trip(a: BigInteger) -> bool:
    return all((a << k) >> k == a for k in SHIFT_COUNTS)


def _order_consistent(a: BigInteger, b: BigInteger) -> bool:
    order = a.compare(b)
    flags = (a < b, a == b, a > b)
    return (
        sum(flags) == 1
        and flags[order + 1]
        and (a <= b) == (order <= 0)
        and (a >= b) == (order >= 0)
        and b.compare(a) == -order
    )


def integer_contract() -> OperationContract:
    """Algebraic laws of the BigInteger operators."""
    return OperationContract(
        name="biginteger",
        properties=[
            AlgebraicProperty(
                "round_trip", "from_string(to_string(a, r), r) == a", 1,
                _round_trip,
            ),
            AlgebraicProperty(
                "add_sub_inverse", "(a + b) - b == a", 2,
                lambda a, b: (a + b) - b == a,
            ),
            AlgebraicProperty(
                "division_law", "a == (a / b) * b + a % b and |a % b| < |b|", 2,
                _division_law,
            ),
            AlgebraicProperty(
                "remainder_sign", "a % b is zero or has the sign of a", 2,
                _remainder_sign,
            ),
            AlgebraicProperty(
                "shift_round_trip", "(a << k) >> k == a", 1,
                _shift_round_trip,
            ),
            AlgebraicProperty(
                "shift_zero", "a >> 0 == a and a << 0 == a", 1,
                lambda a: a >> 0 == a and a << 0 == a,
            ),
            AlgebraicProperty(
                "invert", "~a == -(a + 1)", 1,
                lambda a: ~a == -(a + 1),
            ),
            AlgebraicProperty(
                "and_idempotent", "a & a == a", 1,
                lambda a: a & a == a,
            ),
            AlgebraicProperty(
                "xor_self", "a ^ a == 0", 1,
                lambda a: a ^ a == 0,
            ),
            AlgebraicProperty(
                "or_complement", "a | ~a == -1", 1,
                lambda a: a | ~a == -1,
            ),
            AlgebraicProperty(
                "order_consistent", "compare agrees with <, ==, >, <=, >=", 2,
                _order_consistent,
            ),
        ],
    )
