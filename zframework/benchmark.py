"""
Timing and parameter-sweep helpers.

Times the frame shift generator against the reference oracle over
repeated runs, and sweeps the curvature and density-boost dials to show
that neither changes the prime count on sound inputs.
"""

import time
import numpy as np
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .config import SieveConfig, GOLDEN_RATIO, DEFAULT_CURVATURE_K
from .generator import count_primes, generate_primes
from .primes import ReferenceSieve


DEFAULT_K_VALUES = [0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9]

# Density boost multipliers: none, phi, phi^2, 2*phi
GOLDEN_ENHANCEMENTS = [
    ("None", 1.0),
    ("phi", GOLDEN_RATIO),
    ("phi^2", GOLDEN_RATIO ** 2),
    ("2phi", 2.0 * GOLDEN_RATIO),
]

SCALABILITY_RANGES = [
    (1, 1_000, "Small (1K)"),
    (1, 10_000, "Medium (10K)"),
    (1, 100_000, "Large (100K)"),
    (1, 1_000_000, "XLarge (1M)"),
]


@dataclass
class TimingStats:
    mean: float
    stddev: float
    min: float
    max: float

    @classmethod
    def from_samples(cls, samples: Sequence[float]) -> "TimingStats":
        arr = np.asarray(samples, dtype=np.float64)
        # Population standard deviation over the runs
        return cls(mean=float(arr.mean()), stddev=float(arr.std()),
                   min=float(arr.min()), max=float(arr.max()))


@dataclass
class BenchmarkResult:
    start: int
    stop: int
    generator_count: int
    reference_count: int
    generator_time: TimingStats
    reference_time: TimingStats
    memory_mb: float

    @property
    def matches(self) -> bool:
        return self.generator_count == self.reference_count

    @property
    def slowdown(self) -> float:
        """Generator mean time over reference mean time."""
        if self.reference_time.mean == 0:
            return float("inf")
        return self.generator_time.mean / self.reference_time.mean


@dataclass
class DiffResult:
    start: int
    stop: int
    produced: np.ndarray
    expected: np.ndarray
    missing: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.uint64))
    extra: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.uint64))

    @property
    def clean(self) -> bool:
        return len(self.missing) == 0 and len(self.extra) == 0


@dataclass
class SweepPoint:
    label: str
    curvature_k: float
    density_boost: float
    count: int
    elapsed: float


def benchmark_range(start: int, stop: int, runs: int = 5,
                    config: Optional[SieveConfig] = None) -> BenchmarkResult:
    """Time count_primes and the reference oracle `runs` times each."""
    if runs < 1:
        raise ValueError(f"runs must be >= 1, got {runs}")
    if config is None:
        config = SieveConfig.default()

    ref_times = []
    ref_count = 0
    for _ in range(runs):
        t0 = time.perf_counter()
        ref_count = ReferenceSieve.covering(stop).count(start, stop)
        ref_times.append(time.perf_counter() - t0)

    gen_times = []
    gen_count = 0
    for _ in range(runs):
        t0 = time.perf_counter()
        gen_count = count_primes(start, stop, config)
        gen_times.append(time.perf_counter() - t0)

    return BenchmarkResult(
        start=start,
        stop=stop,
        generator_count=gen_count,
        reference_count=ref_count,
        generator_time=TimingStats.from_samples(gen_times),
        reference_time=TimingStats.from_samples(ref_times),
        memory_mb=config.memory_estimate_mb(start, stop),
    )


def diff_against_reference(start: int, stop: int,
                           config: Optional[SieveConfig] = None) -> DiffResult:
    """Primes the generator missed or invented relative to the oracle."""
    batch = generate_primes(start, stop, config)
    expected = ReferenceSieve.covering(stop).primes_in(start, stop)
    return DiffResult(
        start=start,
        stop=stop,
        produced=batch.primes,
        expected=expected,
        missing=np.setdiff1d(expected, batch.primes),
        extra=np.setdiff1d(batch.primes, expected),
    )


def _timed_count(start: int, stop: int, config: SieveConfig) -> tuple:
    t0 = time.perf_counter()
    count = count_primes(start, stop, config)
    return count, time.perf_counter() - t0


def sweep_curvature(start: int, stop: int,
                    k_values: Optional[List[float]] = None,
                    density_boost: float = GOLDEN_RATIO) -> List[SweepPoint]:
    """Count primes in [start, stop] once per curvature value."""
    if k_values is None:
        k_values = DEFAULT_K_VALUES

    points = []
    for k in k_values:
        cfg = SieveConfig(curvature_k=k, density_boost=density_boost)
        count, elapsed = _timed_count(start, stop, cfg)
        points.append(SweepPoint(label=f"k={k:.1f}", curvature_k=k,
                                 density_boost=density_boost,
                                 count=count, elapsed=elapsed))
    return points


def sweep_density_boost(start: int, stop: int, enhancements=None,
                        curvature_k: float = DEFAULT_CURVATURE_K) -> List[SweepPoint]:
    """Count primes in [start, stop] once per (label, boost) pair."""
    if enhancements is None:
        enhancements = GOLDEN_ENHANCEMENTS

    points = []
    for label, boost in enhancements:
        cfg = SieveConfig(curvature_k=curvature_k, density_boost=boost)
        count, elapsed = _timed_count(start, stop, cfg)
        points.append(SweepPoint(label=label, curvature_k=curvature_k,
                                 density_boost=boost,
                                 count=count, elapsed=elapsed))
    return points
