"""
Frame geometry for the frame shift residue sieve.

Frame size scales with sqrt(range) by the golden ratio and a constant
curvature adjustment (1 + k * sin(phi * pi / 4)). Frame shift is a bounded
pseudo-periodic offset indexed by frame number. Both are pure.

The generator currently materialises one frame spanning the whole range,
so frame_size and frame_shift here describe the multi-frame layout rather
than the buffer actually allocated.
"""

import math

from .config import GOLDEN_RATIO, MIN_FRAME_SIZE, FRAME_ALIGNMENT


def compute_frame_size(range_size: int, k: float) -> int:
    """
    Frame size for a range of `range_size` integers under curvature k.

    size = floor(sqrt(range) * phi * (1 + k * sin(phi * pi / 4))),
    clamped to MIN_FRAME_SIZE and rounded up to a multiple of FRAME_ALIGNMENT.
    """
    if range_size == 0:
        return MIN_FRAME_SIZE

    base_size = math.sqrt(range_size) * GOLDEN_RATIO
    # Independent of the frame index: a constant adjustment for a given k
    curvature_factor = 1.0 + k * math.sin(GOLDEN_RATIO * math.pi / 4.0)
    frame_size = int(base_size * curvature_factor)

    if frame_size < MIN_FRAME_SIZE:
        frame_size = MIN_FRAME_SIZE

    return (frame_size + FRAME_ALIGNMENT - 1) & ~(FRAME_ALIGNMENT - 1)


def compute_frame_shift(frame_index: int, k: float) -> int:
    """Offset of frame `frame_index` from the range start, in [0, 0xFFFF]."""
    shift_factor = GOLDEN_RATIO ** (frame_index % 8) * k
    return int(shift_factor * 256) & 0xFFFF


def frame_factor(frame_shift: int, k: float) -> float:
    """Density scaling for a frame: 1 + k * cos(frame_shift * pi / phi)."""
    return 1.0 + k * math.cos(frame_shift * math.pi / GOLDEN_RATIO)
