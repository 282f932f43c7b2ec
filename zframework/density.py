"""
Heuristic density and curvature estimators.

density(n) is a prime-number-theorem style score 1 / log(n / phi), scaled
by the frame factor and the density boost. The sieve uses it only as a
rejection signal for candidates outside the mod-30 residue classes.

kappa(n) = d(n) * log(n + 1) / e^2 is a standalone analysis metric built on
the divisor function d(n); the sieve never calls it.
"""

import math
import numpy as np

from .config import GOLDEN_RATIO, E_SQUARED


def _density(n: np.ndarray, frame_factor: float, density_boost: float) -> np.ndarray:
    x = n / GOLDEN_RATIO
    # Prevent log(0) or negative values
    x = np.where(x <= 1.0, 2.0, x)
    log_x = np.log(x)
    log_x = np.where(log_x <= 0.0, 1.0, log_x)
    d = 1.0 / (log_x * frame_factor * density_boost)
    return np.where(n <= 1, 0.0, d)


def density(n, frame_factor: float, density_boost: float):
    """
    Density estimate 1 / (log(n / phi) * frame_factor * density_boost).

    Returns 0 for n <= 1. Accepts scalar or array input via numpy
    broadcasting; a scalar input gives a float.
    """
    arr = np.asarray(n, dtype=np.float64)
    result = _density(arr, frame_factor, density_boost)
    if result.ndim == 0:
        return float(result)
    return result


def count_divisors(n: int) -> int:
    """d(n): number of positive divisors of n, by trial division up to sqrt(n)."""
    if n == 0:
        return 0
    if n == 1:
        return 1

    count = 0
    for i in range(1, math.isqrt(n) + 1):
        if n % i == 0:
            count += 1
            if i != n // i:
                count += 1
    return count


def kappa(n: int) -> float:
    """
    Curvature metric d(n) * ln(n + 1) / e^2.

    Zero for n == 0 and for the unit n == 1.
    """
    if n <= 1:
        return 0.0
    return count_divisors(n) * math.log(n + 1) / E_SQUARED
