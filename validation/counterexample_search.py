"""Counterexample search: differential checks against Python's int.

This module runs independently of the test suite.  It draws random
operands of mixed sizes and searches for:

1. Result mismatches: an operator whose BigInteger result differs from
   the same computation on Python ints (adjusted to truncating division).
2. Error mismatches: a zero divisor that does not raise
   DivideByZeroError, or an operator that raises unexpectedly.
3. Contract violations: BigInteger laws that fail for some operands.
4. Strategy disagreements: multipliers that disagree with schoolbook.

Run directly::

    python -m validation.counterexample_search [--rounds N] [--seed S]
"""
from __future__ import annotations

import argparse
import operator
import random
import sys
from dataclasses import dataclass, field
from typing import Callable

sys.path.insert(0, ".")

from biginteger import BigInteger, DivideByZeroError
from config import EAGER_FFT
from contracts import integer_contract
from limbs import LIMB_BITS
from multiply import FFT, SIMPLE, KaratsubaMultiplier


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    operation: str
    inputs: tuple
    expected: str
    actual: str
    description: str

    def describe(self) -> str:
        args = ", ".join(str(x) for x in self.inputs)
        return (
            f"{self.category} / {self.operation}({args}): "
            f"expected {self.expected}, got {self.actual} ({self.description})"
        )


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return not self.counterexamples

    def by_category(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for cx in self.counterexamples:
            counts[cx.category] = counts.get(cx.category, 0) + 1
        return counts

    def summary(self) -> str:
        lines = [
            f"BigInteger vs int: {self.checks_run} checks, "
            f"{len(self.counterexamples)} counterexamples"
        ]
        for category, count in sorted(self.by_category().items()):
            lines.append(f"  {category}: {count}")
        for i, cx in enumerate(self.counterexamples, 1):
            lines.append(f"  [{i}] {cx.describe()}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Reference semantics on Python ints
# ---------------------------------------------------------------------------

def truncdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero (not floor division)."""
    q, r = divmod(a, b)
    if r != 0 and (a < 0) != (b < 0):
        q += 1
    return q


def truncmod(a: int, b: int) -> int:
    return a - truncdiv(a, b) * b


BINARY_OPS: dict[str, tuple[Callable, Callable]] = {
    "add": (operator.add, operator.add),
    "sub": (operator.sub, operator.sub),
    "mul": (operator.mul, operator.mul),
    "div": (operator.truediv, truncdiv),
    "mod": (operator.mod, truncmod),
    "and": (operator.and_, operator.and_),
    "or": (operator.or_, operator.or_),
    "xor": (operator.xor, operator.xor),
}


def random_operand(rng: random.Random, max_limbs: int) -> int:
    """A random int with a random sign and 0..max_limbs limbs."""
    bits = rng.randint(0, max_limbs * LIMB_BITS)
    value = rng.getrandbits(bits) if bits else 0
    return -value if rng.random() < 0.5 else value


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_operator_mismatches(
    pairs: list[tuple[int, int]],
) -> tuple[list[Counterexample], int]:
    """Compare every binary operator with its Python int reference."""
    cxs: list[Counterexample] = []
    checks = 0

    for a, b in pairs:
        big_a, big_b = BigInteger.from_int(a), BigInteger.from_int(b)
        for name, (big_op, int_op) in BINARY_OPS.items():
            checks += 1
            if name in ("div", "mod") and b == 0:
                try:
                    result = big_op(big_a, big_b)
                except DivideByZeroError:
                    continue
                cxs.append(Counterexample(
                    category="missing_error",
                    operation=name,
                    inputs=(a, b),
                    expected="DivideByZeroError",
                    actual=f"result={result}",
                    description="Zero divisor did not raise",
                ))
                continue

            expected = int_op(a, b)
            try:
                actual = big_op(big_a, big_b)
            except Exception as e:
                cxs.append(Counterexample(
                    category="unexpected_error",
                    operation=name,
                    inputs=(a, b),
                    expected=str(expected),
                    actual=f"{type(e).__name__}: {e}",
                    description="Operator raised an unexpected exception",
                ))
                continue
            if int(actual) != expected:
                cxs.append(Counterexample(
                    category="result_mismatch",
                    operation=name,
                    inputs=(a, b),
                    expected=str(expected),
                    actual=str(actual),
                    description="BigInteger result differs from Python int",
                ))

        for count in (0, 1, 31, 32, 63):
            checks += 2
            for name, big_op, int_op in (
                ("lshift", operator.lshift, operator.lshift),
                ("rshift", operator.rshift, operator.rshift),
            ):
                if int(big_op(big_a, count)) != int_op(a, count):
                    cxs.append(Counterexample(
                        category="result_mismatch",
                        operation=name,
                        inputs=(a, count),
                        expected=str(int_op(a, count)),
                        actual=str(big_op(big_a, count)),
                        description="Shift differs from Python int",
                    ))

    return cxs, checks


def search_contract_violations(
    pairs: list[tuple[int, int]],
) -> tuple[list[Counterexample], int]:
    """Check every BigInteger law on the sampled operands."""
    cxs: list[Counterexample] = []
    checks = 0
    contract = integer_contract()

    for a, b in pairs:
        big_a, big_b = BigInteger.from_int(a), BigInteger.from_int(b)
        for prop in contract:
            checks += 1
            args = (big_a, big_b)[:prop.arity]
            if not prop.check(*args):
                cxs.append(Counterexample(
                    category="contract_violation",
                    operation=contract.name,
                    inputs=(a, b)[:prop.arity],
                    expected=prop.description,
                    actual="property does not hold",
                    description=f"Property '{prop.name}' violated",
                ))

    return cxs, checks


def search_strategy_disagreements(
    pairs: list[tuple[int, int]],
) -> tuple[list[Counterexample], int]:
    """Every multiplier must agree with schoolbook on every magnitude pair."""
    cxs: list[Counterexample] = []
    checks = 0
    strategies = {
        "karatsuba": KaratsubaMultiplier(threshold=EAGER_FFT.karatsuba_threshold),
        "fft": FFT,
    }

    for a, b in pairs:
        left = BigInteger.from_int(abs(a)).digits()
        right = BigInteger.from_int(abs(b)).digits()
        expected = SIMPLE.multiply(left, right)
        for name, strategy in strategies.items():
            checks += 1
            actual = strategy.multiply(left, right)
            if actual != expected:
                cxs.append(Counterexample(
                    category="strategy_disagreement",
                    operation=name,
                    inputs=(abs(a), abs(b)),
                    expected=str(expected),
                    actual=str(actual),
                    description=f"{name} disagrees with schoolbook",
                ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(rounds: int = 200, max_limbs: int = 24, seed: int = 0) -> SearchReport:
    """Run the complete search over ``rounds`` random operand pairs."""
    rng = random.Random(seed)
    pairs = [(0, 0), (0, 1), (-1, 1), (-7, 2), (1, -1 << 64)]
    pairs += [
        (random_operand(rng, max_limbs), random_operand(rng, max_limbs))
        for _ in range(rounds)
    ]
    report = SearchReport()

    for search_fn in (
        search_operator_mismatches,
        search_contract_violations,
        search_strategy_disagreements,
    ):
        cxs, checks = search_fn(pairs)
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--rounds", type=int, default=200)
    parser.add_argument("--max-limbs", type=int, default=24)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args(argv)

    report = run_search(args.rounds, args.max_limbs, args.seed)
    print(report.summary())
    if not report.passed:
        sys.exit(1)


if __name__ == "__main__":
    main()
