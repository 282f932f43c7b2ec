"""
Frame shift residue prime generator and the aggregate operations built on it.

A generator owns a one-byte-per-integer sieve buffer for a single frame
spanning the whole inclusive range [start, stop], populated once on
construction. next_prime() walks a cursor over the buffer and returns 0
once the range is exhausted.

Memory is O(stop - start). There is no true segmentation despite the
frame terminology: frame_count is always 1 and frame_shift always 0.
"""

import enum
import math
import warnings
import numpy as np
from dataclasses import dataclass
from typing import Iterator, Optional

from .config import SieveConfig
from .sieve import sieve_frame, ALL_RESIDUES_MASK


U64_MAX = 2 ** 64 - 1
_SCAN_CHUNK = 1 << 16  # offsets scanned per refill of the hit cache


class InvalidRangeError(ValueError):
    """Raised when start > stop or a bound is not an unsigned 64-bit value."""
    pass


class SieveAllocationError(MemoryError):
    """Raised when the sieve buffer for a range cannot be allocated."""
    pass


class GeneratorState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    POPULATED = "populated"
    EXHAUSTED = "exhausted"


class FrameShiftGenerator:
    """
    Stateful prime iterator over [start, stop].

    Usage:
        with FrameShiftGenerator(1, 100) as gen:
            p = gen.next_prime()      # 2
        primes = list(FrameShiftGenerator(1, 100))
    """

    def __init__(self, start: int, stop: int,
                 config: Optional[SieveConfig] = None):
        if config is None:
            config = SieveConfig.default()
        _check_range(start, stop)

        self.start = start
        self.stop = stop

        # Single frame covering the entire range
        range_size = stop - start + 1
        self.frame_size = range_size
        self.frame_shift = 0
        self.residue_mask = ALL_RESIDUES_MASK
        self.density_factor = config.density_boost
        self.curvature_k = config.curvature_k
        self.frame_count = 1
        self.sieve_size = range_size
        self.pos = 0
        self.rejected_by_density = 0
        self._exhausted = False
        self._hits = np.zeros(0, dtype=np.intp)
        self._hit_idx = 0

        try:
            self.sieve = np.empty(self.sieve_size, dtype=np.uint8)
        except (MemoryError, ValueError, OverflowError) as e:
            # numpy raises ValueError or OverflowError past the addressable maximum
            self.sieve = None
            raise SieveAllocationError(
                f"cannot allocate {self.sieve_size} byte sieve for "
                f"[{start}, {stop}]"
            ) from e

        self.rejected_by_density = sieve_frame(
            self.sieve, self.frame_start, self.frame_end,
            self.frame_shift, self.curvature_k, self.density_factor,
        )

    @property
    def frame_start(self) -> int:
        return self.start + self.frame_shift

    @property
    def frame_end(self) -> int:
        return min(self.frame_start + self.frame_size, self.stop)

    @property
    def state(self) -> GeneratorState:
        if self.sieve is None:
            return GeneratorState.UNINITIALIZED
        if self._exhausted:
            return GeneratorState.EXHAUSTED
        return GeneratorState.POPULATED

    def next_prime(self) -> int:
        """Next prime in the range, or 0 once the range is exhausted."""
        if self.sieve is None:
            return 0

        frame_start = self.frame_start
        limit = min(self.frame_size, self.stop - frame_start + 1)

        while self.pos < limit:
            if self._hit_idx >= len(self._hits):
                chunk_end = min(self.pos + _SCAN_CHUNK, limit)
                self._hits = np.flatnonzero(self.sieve[self.pos:chunk_end]) + self.pos
                self._hit_idx = 0
                if len(self._hits) == 0:
                    self.pos = chunk_end
                    continue

            idx = int(self._hits[self._hit_idx])
            self._hit_idx += 1
            self.pos = idx + 1
            candidate = frame_start + idx
            if candidate <= 1:
                continue
            return candidate

        self._exhausted = True
        return 0

    def cleanup(self) -> None:
        """Release the sieve buffer and zero all fields. Safe to repeat."""
        self.sieve = None
        self.start = 0
        self.stop = 0
        self.frame_size = 0
        self.frame_shift = 0
        self.residue_mask = 0
        self.density_factor = 0.0
        self.curvature_k = 0.0
        self.frame_count = 0
        self.sieve_size = 0
        self.pos = 0
        self.rejected_by_density = 0
        self._exhausted = False
        self._hits = np.zeros(0, dtype=np.intp)
        self._hit_idx = 0

    def memory_usage_mb(self) -> float:
        """Size of the sieve buffer in MB."""
        if self.sieve is None:
            return 0.0
        return self.sieve.nbytes / (1024 * 1024)

    def __iter__(self) -> Iterator[int]:
        while True:
            p = self.next_prime()
            if p == 0:
                return
            yield p

    def __enter__(self) -> "FrameShiftGenerator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    def __repr__(self) -> str:
        return (f"FrameShiftGenerator(start={self.start}, stop={self.stop}, "
                f"pos={self.pos}, state={self.state.value})")


def _check_range(start: int, stop: int) -> None:
    if start < 0 or stop < 0 or start > U64_MAX or stop > U64_MAX:
        raise InvalidRangeError(
            f"bounds must be unsigned 64-bit integers, got [{start}, {stop}]")
    if start > stop:
        raise InvalidRangeError(f"start must be <= stop, got [{start}, {stop}]")


# Functional aliases for callers that drive a generator by hand

def init_generator(start: int, stop: int,
                   config: Optional[SieveConfig] = None) -> FrameShiftGenerator:
    return FrameShiftGenerator(start, stop, config)


def next_prime(gen: FrameShiftGenerator) -> int:
    return gen.next_prime()


def cleanup_generator(gen: FrameShiftGenerator) -> None:
    gen.cleanup()


@dataclass
class PrimeBatch:
    primes: np.ndarray   # uint64, exact length
    count: int
    status: str = "ok"   # "ok" | "invalid_range" | "out_of_memory"

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def tolist(self) -> list:
        return [int(p) for p in self.primes]

    def __len__(self) -> int:
        return self.count


def _empty_batch(status: str) -> PrimeBatch:
    return PrimeBatch(primes=np.zeros(0, dtype=np.uint64), count=0, status=status)


def estimate_capacity(start: int, stop: int) -> int:
    """Output capacity guess: (stop - start) / ln(stop - start + 1) + 100."""
    span = stop - start
    if span <= 0:
        return 100
    return int(span / math.log(span + 1)) + 100


def count_primes(start: int, stop: int, config: Optional[SieveConfig] = None,
                 strict: bool = False) -> int:
    """
    Count primes in [start, stop] by draining a generator.

    If the generator cannot be built, returns 0 and emits a RuntimeWarning,
    which makes the failure indistinguishable from an empty range by value.
    Pass strict=True to get the exception instead.
    """
    try:
        gen = FrameShiftGenerator(start, stop, config)
    except (InvalidRangeError, SieveAllocationError) as e:
        if strict:
            raise
        warnings.warn(f"count_primes({start}, {stop}) failed: {e}",
                      RuntimeWarning, stacklevel=2)
        return 0

    count = 0
    while gen.next_prime() != 0:
        count += 1
    gen.cleanup()
    return count


def generate_primes(start: int, stop: int,
                    config: Optional[SieveConfig] = None) -> PrimeBatch:
    """
    Collect every prime in [start, stop] into a uint64 array.

    The array is pre-sized from estimate_capacity(), grown by doubling if
    the estimate is short, and trimmed to the exact count. Failures give an
    empty batch whose status says why.
    """
    try:
        _check_range(start, stop)
    except InvalidRangeError:
        return _empty_batch("invalid_range")

    try:
        buf = np.empty(estimate_capacity(start, stop), dtype=np.uint64)
    except (MemoryError, ValueError, OverflowError):
        return _empty_batch("out_of_memory")

    try:
        gen = FrameShiftGenerator(start, stop, config)
    except SieveAllocationError:
        return _empty_batch("out_of_memory")

    count = 0
    for p in gen:
        if count == len(buf):
            buf = np.resize(buf, 2 * len(buf))
        buf[count] = p
        count += 1
    gen.cleanup()

    return PrimeBatch(primes=buf[:count].copy(), count=count)
