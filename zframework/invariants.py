"""
Invariant validators for the frame shift residue generator.

If any of these fail, the heuristic filter has started eating primes and
the generator output cannot be trusted.

1. Reference Agreement: counts match a plain Eratosthenes oracle.
2. Iterator Order: next_prime() is strictly increasing, prime-only, and
   ends in a single 0.
3. Residue Preservation: no prime is lost even under extreme parameters.
4. Parameter Rejection: invalid setter writes leave values untouched.
5. Kappa Bounds: kappa(1) == 0 and kappa(n) >= 0.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, Optional

from .config import SieveConfig, MAX_FRAMES
from .density import kappa
from .generator import FrameShiftGenerator, count_primes, generate_primes
from .primes import ReferenceSieve


VALIDATION_RANGES = [
    (1, 100),
    (1000, 2000),
    (10000, 11000),
    (100000, 101000),
]

RESIDUE_CHECK_LIMIT = 100_000


class ResidueLeakError(Exception):
    """Raised when the density filter rejects a true prime."""
    pass


@dataclass
class InvariantResult:
    name: str
    passed: bool
    details: Dict[str, object]
    message: str


def check_reference_agreement(config: SieveConfig,
                              oracle: Optional[ReferenceSieve] = None) -> InvariantResult:
    """Compare count_primes against the oracle over the validation ranges."""
    if oracle is None:
        oracle = ReferenceSieve.covering(max(stop for _, stop in VALIDATION_RANGES))

    mismatches = []
    for start, stop in VALIDATION_RANGES:
        expected = oracle.count(start, stop)
        got = count_primes(start, stop, config)
        if got != expected:
            mismatches.append((start, stop, expected, got))

    passed = not mismatches
    return InvariantResult(
        name="Reference Agreement",
        passed=passed,
        details={"ranges": len(VALIDATION_RANGES), "mismatches": mismatches},
        message=(
            f"{len(VALIDATION_RANGES) - len(mismatches)}/{len(VALIDATION_RANGES)} "
            f"ranges match the reference sieve"
            + ("" if passed else f"; first mismatch {mismatches[0]}")
        ),
    )


def check_iterator_order(config: SieveConfig, stop: int = 1000) -> InvariantResult:
    """Drain [1, stop] by hand and check order, primality and the sentinel."""
    oracle = ReferenceSieve.covering(stop)
    gen = FrameShiftGenerator(1, stop, config)

    produced = []
    p = gen.next_prime()
    while p != 0:
        produced.append(p)
        p = gen.next_prime()
    # Exhausted generators keep returning the sentinel
    trailing_ok = gen.next_prime() == 0 and gen.next_prime() == 0
    gen.cleanup()

    increasing = all(a < b for a, b in zip(produced, produced[1:]))
    all_prime = all(oracle.is_prime(q) for q in produced)
    passed = increasing and all_prime and trailing_ok

    return InvariantResult(
        name="Iterator Order",
        passed=passed,
        details={
            "produced": len(produced),
            "increasing": increasing,
            "all_prime": all_prime,
            "sentinel_stable": trailing_ok,
        },
        message=(
            f"{len(produced)} primes in [1, {stop}], "
            f"{'strictly increasing' if increasing else 'NOT INCREASING'}, "
            f"{'all prime' if all_prime else 'COMPOSITES PRESENT'}, "
            f"sentinel {'stable' if trailing_ok else 'UNSTABLE'}"
        ),
    )


def check_residue_preservation(limit: int = RESIDUE_CHECK_LIMIT) -> InvariantResult:
    """
    Every prime in [1, limit] must survive the most aggressive parameters.

    Primes above 5 are coprime to 30 and never reach the density test.
    A miss here means the filter is being applied to residue-valid
    candidates. This is a HARD FAILURE.
    """
    oracle = ReferenceSieve.covering(limit)
    batch = generate_primes(1, limit, SieveConfig.extreme())

    expected = oracle.primes_in(1, limit)
    missing = np.setdiff1d(expected, batch.primes)

    if len(missing) > 0:
        raise ResidueLeakError(
            f"RESIDUE LEAK: {len(missing)} primes in [1, {limit}] rejected "
            f"under k=0.999, boost=0.001. First missing: "
            f"{[int(m) for m in missing[:10]]}. "
            f"The density test must only see candidates sharing a factor with 30."
        )

    return InvariantResult(
        name="Residue Preservation",
        passed=True,
        details={"expected": len(expected), "produced": batch.count},
        message=f"All {len(expected)} primes in [1, {limit}] preserved under extreme parameters",
    )


def check_parameter_rejection() -> InvariantResult:
    """Out-of-range setter values must be ignored, valid ones applied."""
    cfg = SieveConfig.default()
    before = (cfg.curvature_k, cfg.frame_count_hint, cfg.density_boost)

    cfg.set_parameters(-1.0, MAX_FRAMES + 1, 0.0)
    untouched = (cfg.curvature_k, cfg.frame_count_hint, cfg.density_boost) == before

    cfg.set_parameters(0.5, 999_999, 1.0)
    partial = (cfg.curvature_k == 0.5
               and cfg.frame_count_hint == before[1]
               and cfg.density_boost == 1.0)

    passed = untouched and partial
    return InvariantResult(
        name="Parameter Rejection",
        passed=passed,
        details={"untouched": untouched, "partial_update": partial},
        message=(
            f"invalid writes {'ignored' if untouched else 'APPLIED'}, "
            f"mixed writes {'partially applied' if partial else 'MISHANDLED'}"
        ),
    )


def check_kappa_bounds(limit: int = 1000) -> InvariantResult:
    values = np.array([kappa(n) for n in range(limit + 1)])
    unit_zero = kappa(1) == 0.0
    non_negative = bool(np.all(values >= 0.0))
    passed = unit_zero and non_negative

    return InvariantResult(
        name="Kappa Bounds",
        passed=passed,
        details={"max_kappa": float(values.max()), "kappa_1": kappa(1)},
        message=(
            f"kappa on [0, {limit}]: max {values.max():.4f}, "
            f"{'non-negative' if non_negative else 'NEGATIVE VALUES'}, "
            f"kappa(1) = {kappa(1)}"
        ),
    )


def run_all_invariants(config: Optional[SieveConfig] = None) -> list:
    """
    Run all invariant checks. Returns list of InvariantResult.
    Raises ResidueLeakError if a prime is lost under extreme parameters.
    """
    if config is None:
        config = SieveConfig.default()

    results = []
    results.append(check_reference_agreement(config))
    results.append(check_iterator_order(config))
    results.append(check_residue_preservation())  # Raises on failure
    results.append(check_parameter_rejection())
    results.append(check_kappa_bounds())
    return results
