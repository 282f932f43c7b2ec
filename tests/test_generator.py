import numpy as np
import pytest

from zframework.config import SieveConfig
from zframework.generator import (
    FrameShiftGenerator, GeneratorState, InvalidRangeError, SieveAllocationError,
    init_generator, next_prime, cleanup_generator,
)


PRIMES_TO_50 = [2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47]


def _drain(gen):
    out = []
    p = gen.next_prime()
    while p != 0:
        out.append(p)
        p = gen.next_prime()
    return out


def test_initial_fields():
    gen = FrameShiftGenerator(10, 109)
    assert gen.start == 10
    assert gen.stop == 109
    assert gen.frame_size == 100
    assert gen.sieve_size == 100
    assert gen.frame_shift == 0
    assert gen.frame_count == 1
    assert gen.residue_mask == 0xFF
    assert gen.pos == 0
    assert gen.sieve.dtype == np.uint8
    assert len(gen.sieve) == 100
    assert gen.state is GeneratorState.POPULATED


def test_captures_config_at_construction(config):
    config.set_parameters(0.5, 0, 2.0)
    gen = FrameShiftGenerator(1, 100, config)
    config.set_parameters(0.9, 0, 3.0)
    assert gen.density_factor == 2.0
    assert gen.curvature_k == 0.5


def test_sequence_and_sentinel():
    gen = FrameShiftGenerator(1, 50)
    assert _drain(gen) == PRIMES_TO_50
    assert gen.state is GeneratorState.EXHAUSTED
    assert gen.next_prime() == 0
    assert gen.next_prime() == 0


def test_sequence_is_increasing_and_prime(oracle):
    gen = FrameShiftGenerator(50_000, 60_000)
    produced = _drain(gen)
    assert all(a < b for a, b in zip(produced, produced[1:]))
    assert all(oracle.is_prime(p) for p in produced)
    assert produced == [int(p) for p in oracle.primes_in(50_000, 60_000)]


def test_cursor_advances_past_each_prime():
    gen = FrameShiftGenerator(1, 20)
    assert gen.next_prime() == 2
    assert gen.pos == 2
    assert gen.next_prime() == 3
    assert gen.pos == 3


def test_cursor_reaches_end():
    gen = FrameShiftGenerator(1, 20)
    _drain(gen)
    assert gen.pos == gen.sieve_size


def test_scan_crosses_chunk_boundaries(oracle):
    # Spans several refills of the hit cache
    gen = FrameShiftGenerator(0, 200_000)
    assert len(_drain(gen)) == oracle.count(0, 200_000)


def test_range_without_primes():
    gen = FrameShiftGenerator(24, 28)
    assert gen.next_prime() == 0
    assert gen.state is GeneratorState.EXHAUSTED


def test_invalid_range_raises():
    with pytest.raises(InvalidRangeError):
        FrameShiftGenerator(5, 3)


def test_invalid_range_is_value_error():
    with pytest.raises(ValueError):
        init_generator(5, 3)


@pytest.mark.parametrize("start,stop", [(-1, 10), (0, 2 ** 64)])
def test_out_of_u64_bounds_raises(start, stop):
    with pytest.raises(InvalidRangeError):
        FrameShiftGenerator(start, stop)


def test_allocation_failure(monkeypatch):
    real_empty = np.empty

    def failing_empty(shape, dtype=float, *args, **kwargs):
        if dtype is np.uint8:
            raise MemoryError("no room")
        return real_empty(shape, dtype, *args, **kwargs)

    monkeypatch.setattr(np, "empty", failing_empty)
    with pytest.raises(SieveAllocationError):
        FrameShiftGenerator(1, 100)


def test_allocation_error_is_memory_error():
    assert issubclass(SieveAllocationError, MemoryError)


def test_cleanup_zeroes_everything():
    gen = FrameShiftGenerator(1, 100)
    gen.next_prime()
    gen.cleanup()
    assert gen.sieve is None
    assert (gen.start, gen.stop, gen.frame_size, gen.sieve_size, gen.pos) == (0, 0, 0, 0, 0)
    assert gen.density_factor == 0.0
    assert gen.frame_count == 0
    assert gen.state is GeneratorState.UNINITIALIZED


def test_cleanup_twice_is_safe():
    gen = FrameShiftGenerator(1, 100)
    gen.cleanup()
    snapshot = dict(vars(gen))
    gen.cleanup()
    assert gen.sieve is None
    assert {k: v for k, v in vars(gen).items() if k != "_hits"} == \
           {k: v for k, v in snapshot.items() if k != "_hits"}


def test_next_prime_after_cleanup_returns_sentinel():
    gen = FrameShiftGenerator(1, 100)
    cleanup_generator(gen)
    assert next_prime(gen) == 0


def test_iteration_protocol():
    assert list(FrameShiftGenerator(1, 50)) == PRIMES_TO_50


def test_iteration_resumes_from_cursor():
    gen = FrameShiftGenerator(1, 50)
    gen.next_prime()
    gen.next_prime()
    assert list(gen)[0] == 5


def test_context_manager_cleans_up():
    with FrameShiftGenerator(1, 50) as gen:
        assert gen.next_prime() == 2
    assert gen.sieve is None


def test_functional_aliases():
    gen = init_generator(1, 10)
    assert [next_prime(gen) for _ in range(5)] == [2, 3, 5, 7, 0]
    cleanup_generator(gen)
    cleanup_generator(gen)


def test_memory_usage():
    gen = FrameShiftGenerator(1, 1024 * 1024)
    assert gen.memory_usage_mb() == pytest.approx(1.0)
    gen.cleanup()
    assert gen.memory_usage_mb() == 0.0


def test_density_rejections_default_zero():
    assert FrameShiftGenerator(1, 10_000).rejected_by_density == 0


def test_density_rejection_recorded(lossy_config):
    gen = FrameShiftGenerator(1, 10, lossy_config)
    assert gen.rejected_by_density == 1
    assert list(gen) == [2, 3, 7]


def test_default_config_used_when_none():
    gen = FrameShiftGenerator(1, 10)
    assert gen.curvature_k == SieveConfig.default().curvature_k
