"""
Tunable parameters for the frame shift residue generator.

Controls the three dials: curvature coefficient (k), frame-count hint,
and density boost. Replaces process-wide globals with an explicit object
that generators read at construction time.
"""

import math
import threading
import warnings
from dataclasses import dataclass, field


GOLDEN_RATIO = 1.6180339887498948482
DEFAULT_CURVATURE_K = 0.3
MAX_FRAMES = 32
RESIDUE_MODULUS = 30  # 2*3*5 wheel basis
MIN_FRAME_SIZE = 1024
FRAME_ALIGNMENT = 64
E_SQUARED = math.e ** 2


def _valid_curvature(k) -> bool:
    return 0.0 < k <= 1.0


def _valid_frame_count(frame_count) -> bool:
    return 0 <= frame_count <= MAX_FRAMES


def _valid_density_boost(boost) -> bool:
    return boost > 0.0


@dataclass
class SieveConfig:
    curvature_k: float = DEFAULT_CURVATURE_K
    frame_count_hint: int = 0  # 0 = adaptive
    density_boost: float = GOLDEN_RATIO
    _lock: threading.Lock = field(default_factory=threading.Lock,
                                  init=False, repr=False, compare=False)

    def __post_init__(self):
        if not _valid_curvature(self.curvature_k):
            raise ValueError(f"curvature_k must be in (0, 1], got {self.curvature_k}")
        if not _valid_frame_count(self.frame_count_hint):
            raise ValueError(f"frame_count_hint must be in [0, {MAX_FRAMES}], "
                             f"got {self.frame_count_hint}")
        if not _valid_density_boost(self.density_boost):
            raise ValueError(f"density_boost must be positive, got {self.density_boost}")

        # 5 is the only prime outside the mod-30 residue classes that reaches
        # the density test. Its density at frame shift 0 must clear the threshold.
        x = 5 / GOLDEN_RATIO
        d5 = 1.0 / (math.log(x) * (1.0 + self.curvature_k) * self.density_boost)
        if d5 < self.threshold:
            warnings.warn(
                f"density(5) = {d5:.4f} is below the rejection threshold "
                f"{self.threshold:.4f} (curvature_k={self.curvature_k}, "
                f"density_boost={self.density_boost}). The prime 5 will be "
                f"filtered out. Lower density_boost or curvature_k.",
                stacklevel=2,
            )

    @property
    def threshold(self) -> float:
        """Density below which a non-residue candidate is rejected."""
        return self.curvature_k * 0.1

    def set_parameters(self, curvature_k: float, frame_count: int,
                       density_boost: float) -> None:
        """
        Update each parameter independently if it passes validation.

        Values that fail validation are ignored and the previous value is
        kept. Nothing is raised for a rejected value.
        """
        with self._lock:
            if _valid_curvature(curvature_k):
                self.curvature_k = curvature_k
            if _valid_frame_count(frame_count):
                self.frame_count_hint = frame_count
            if _valid_density_boost(density_boost):
                self.density_boost = density_boost

    def reset(self) -> None:
        """Restore the default parameters."""
        self.set_parameters(DEFAULT_CURVATURE_K, 0, GOLDEN_RATIO)

    def memory_estimate_mb(self, start: int, stop: int) -> float:
        """Estimate the sieve buffer size in MB for the range [start, stop]."""
        if start > stop:
            return 0.0
        # One byte per candidate; the frame spans the whole range.
        return (stop - start + 1) / (1024 * 1024)

    @classmethod
    def default(cls) -> "SieveConfig":
        return cls()

    @classmethod
    def relaxed(cls) -> "SieveConfig":
        return cls(curvature_k=0.1)

    @classmethod
    def extreme(cls) -> "SieveConfig":
        return cls(curvature_k=0.999, density_boost=0.001)
