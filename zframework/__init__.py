"""
zframework -- Frame Shift Residue prime generator.

An experimental alternative to the segmented sieve of Eratosthenes: a
bounded sieve over a single frame, followed by a mod-30 residue filter
with a heuristic density safety net driven by a curvature coefficient k
and a golden-ratio density boost. Educational; much slower than a plain
sieve.
"""

__version__ = "1.0.0"

from .config import SieveConfig, GOLDEN_RATIO, MAX_FRAMES
from .geometry import compute_frame_size, compute_frame_shift
from .density import density, kappa
from .generator import (
    FrameShiftGenerator,
    GeneratorState,
    InvalidRangeError,
    SieveAllocationError,
    PrimeBatch,
    init_generator,
    next_prime,
    cleanup_generator,
    count_primes,
    generate_primes,
)
from .primes import ReferenceSieve
from .invariants import run_all_invariants
