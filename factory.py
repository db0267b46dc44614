"""
Verified multiplier factory.

The factory does not just construct strategies - it *verifies* them
against the multiplier contract before releasing them.

Flow:
  1. Caller requests a multiplier of a given kind.
  2. Factory builds the implementation from the settings.
  3. Factory checks every contract property on edge-case limb vectors
     and on seeded random samples long enough to reach the strategy's
     recursive or transform path.
  4. If verification passes  -> return the multiplier.
     If verification fails   -> raise, never hand out a broken instance.
"""

from __future__ import annotations

import itertools
import logging
import random
from dataclasses import dataclass, field
from enum import Enum

from config import DEFAULT_SETTINGS, MultiplierSettings
from contracts import AlgebraicProperty, OperationContract, multiplier_contract
from fft import FftMultiplier, PrecisionError
from limbs import LIMB_MASK, Magnitude
from multiply import KaratsubaMultiplier, Multiplier, SimpleMultiplier

logger = logging.getLogger(__name__)


class MultiplierKind(Enum):
    SIMPLE = "simple"
    KARATSUBA = "karatsuba"
    FFT = "fft"


@dataclass
class VerificationResult:
    """Outcome of checking one property over the sample grid.

    ``skipped`` counts samples on which the multiplier raised
    PrecisionError; a property with no unskipped sample does not pass.
    """

    property_name: str
    passed: bool
    counterexample: tuple | None = None
    tests_run: int = 0
    skipped: int = 0

    def __repr__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        text = f"[{status}] {self.property_name} ({self.tests_run} tests"
        text += f", {self.skipped} skipped)" if self.skipped else ")"
        if self.counterexample is not None:
            text += f" on {self.counterexample}"
        return text


@dataclass
class VerificationReport:
    """Every property result for one multiplier."""

    multiplier_name: str
    results: list[VerificationResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    def summary(self) -> str:
        held = sum(r.passed for r in self.results)
        lines = [f"{self.multiplier_name}: {held}/{len(self.results)} properties hold"]
        lines.extend(f"  {r}" for r in self.results)
        return "\n".join(lines)


class VerificationError(Exception):
    """Raised when a multiplier fails its contract."""

    def __init__(self, report: VerificationReport):
        self.report = report
        super().__init__(f"multiplier failed verification\n{report.summary()}")


# ---------------------------------------------------------------------------
# The factory
# ---------------------------------------------------------------------------

class MultiplierFactory:
    """Produces multiplication strategies that have passed their contract."""

    RANDOM_SAMPLES = 12
    SEED = 0x5EED

    @classmethod
    def build(
        cls, kind: MultiplierKind, settings: MultiplierSettings = DEFAULT_SETTINGS
    ) -> Multiplier:
        """Construct a strategy without verifying it."""
        if kind is MultiplierKind.SIMPLE:
            return SimpleMultiplier()
        if kind is MultiplierKind.KARATSUBA:
            return KaratsubaMultiplier(threshold=settings.karatsuba_threshold)
        return FftMultiplier()

    @classmethod
    def create(
        cls, kind: MultiplierKind, settings: MultiplierSettings = DEFAULT_SETTINGS
    ) -> Multiplier:
        """Build, verify, and return a multiplier."""
        multiplier = cls.build(kind, settings)
        report = cls.verify(multiplier, min_length=2 * settings.karatsuba_threshold + 1)
        if not report.passed:
            logger.warning("multiplier %s failed verification", kind.value)
            raise VerificationError(report)
        logger.debug("multiplier %s verified", kind.value)
        return multiplier

    @classmethod
    def verify(
        cls,
        multiplier: Multiplier,
        contract: OperationContract | None = None,
        min_length: int = 8,
    ) -> VerificationReport:
        """Check *multiplier* against every property of *contract*."""
        contract = contract or multiplier_contract()
        samples = _generate_samples(min_length, cls.RANDOM_SAMPLES, cls.SEED)
        report = VerificationReport(multiplier_name=type(multiplier).__name__)
        for prop in contract:
            report.results.append(_verify_property(prop, multiplier, samples))
        return report


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _verify_property(
    prop: AlgebraicProperty, multiplier: Multiplier, samples: list[Magnitude]
) -> VerificationResult:
    if prop.arity == 1:
        combos = ((s,) for s in samples)
    else:
        combos = itertools.product(samples, repeat=prop.arity)

    tests_run = 0
    skipped = 0
    first_skipped = None
    for combo in combos:
        tests_run += 1
        try:
            ok = prop.check(multiplier, *combo)
        except PrecisionError:
            skipped += 1
            if first_skipped is None:
                first_skipped = combo
            continue
        if not ok:
            return VerificationResult(
                property_name=prop.name,
                passed=False,
                counterexample=combo,
                tests_run=tests_run,
                skipped=skipped,
            )
    if tests_run and skipped == tests_run:
        return VerificationResult(
            property_name=prop.name,
            passed=False,
            counterexample=first_skipped,
            tests_run=tests_run,
            skipped=skipped,
        )
    return VerificationResult(
        property_name=prop.name, passed=True, tests_run=tests_run, skipped=skipped
    )


def _generate_samples(min_length: int, count: int, seed: int) -> list[Magnitude]:
    """Edge-case limb vectors plus seeded random ones up to *min_length* limbs."""
    rng = random.Random(seed)
    samples: list[Magnitude] = [
        (),
        (1,),
        (LIMB_MASK,),
        (0, 1),
        (LIMB_MASK, LIMB_MASK),
        (0,) * (min_length - 1) + (1,),
        (LIMB_MASK,) * min_length,
    ]
    while len(samples) < count:
        length = rng.randint(1, min_length)
        limbs = [rng.randint(0, LIMB_MASK) for _ in range(length)]
        limbs[-1] = rng.randint(1, LIMB_MASK)
        samples.append(tuple(limbs))
    return samples
