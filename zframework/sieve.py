"""
Segment sieve engine: bounded Eratosthenes plus residue/density post-filter.

The buffer holds one byte per integer in [frame_start, frame_end]. After
population, a non-zero byte means "currently considered prime". Flags are
only ever cleared.

Post-filter: candidates in one of the eight residue classes coprime to 30
are kept as-is. Any other candidate above 3 is scored by density() and
dropped if the score falls below k * 0.1. For n > 5 those candidates are
already composite, so the density test only ever reaches the prime 5.
"""

import math
import numpy as np

from .config import RESIDUE_MODULUS
from .density import density
from .geometry import frame_factor


RESIDUE_CLASSES_30 = (1, 7, 11, 13, 17, 19, 23, 29)
ALL_RESIDUES_MASK = 0xFF  # one bit per entry of RESIDUE_CLASSES_30

_RESIDUE_ARRAY = np.array(RESIDUE_CLASSES_30, dtype=np.uint64)


def is_valid_residue(n: int) -> bool:
    """True if n mod 30 is coprime to 30."""
    return n % RESIDUE_MODULUS in RESIDUE_CLASSES_30


def _mark_small(sieve: np.ndarray, frame_start: int, frame_end: int) -> None:
    for v in (0, 1):
        if frame_start <= v <= frame_end:
            sieve[v - frame_start] = 0


def _eratosthenes(sieve: np.ndarray, frame_start: int, frame_end: int) -> None:
    """Clear every multiple of p in the frame for p up to sqrt(frame_end) + 1."""
    sqrt_end = math.isqrt(frame_end) + 1
    stop_idx = frame_end - frame_start + 1

    for p in range(2, sqrt_end + 1):
        # p itself already struck off inside the frame
        if frame_start <= p <= frame_end and sieve[p - frame_start] == 0:
            continue

        rem = frame_start % p
        start_multiple = frame_start if rem == 0 else frame_start + (p - rem)

        p_sq = p * p
        if p_sq >= frame_start and p_sq > start_multiple:
            start_multiple = p_sq

        # A prime is never struck by its own first multiple
        if start_multiple == p:
            start_multiple += p
        if start_multiple > frame_end:
            continue

        sieve[start_multiple - frame_start:stop_idx:p] = 0


def _residue_filter(sieve: np.ndarray, frame_start: int, frame_shift: int,
                    curvature_k: float, density_boost: float) -> int:
    offsets = np.flatnonzero(sieve)
    if len(offsets) == 0:
        return 0

    n = offsets.astype(np.uint64) + np.uint64(frame_start)

    small = n <= 1
    sieve[offsets[small]] = 0

    off_residue = (n > 3) & ~np.isin(n % np.uint64(RESIDUE_MODULUS), _RESIDUE_ARRAY)
    if not np.any(off_residue):
        return 0

    ff = frame_factor(frame_shift, curvature_k)
    scores = density(n[off_residue].astype(np.float64), ff, density_boost)
    rejected = offsets[off_residue][scores < curvature_k * 0.1]
    sieve[rejected] = 0
    return len(rejected)


def sieve_frame(sieve: np.ndarray, frame_start: int, frame_end: int,
                frame_shift: int, curvature_k: float,
                density_boost: float) -> int:
    """
    Populate `sieve` for the frame [frame_start, frame_end].

    `sieve` must have at least frame_end - frame_start + 1 entries; it is
    overwritten in place. Returns the number of candidates the density
    filter rejected.
    """
    sieve[:] = 1
    if frame_end < frame_start:
        return 0

    _mark_small(sieve, frame_start, frame_end)
    _eratosthenes(sieve, frame_start, frame_end)
    return _residue_filter(sieve, frame_start, frame_shift,
                           curvature_k, density_boost)
