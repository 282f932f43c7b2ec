"""
Reference prime oracle.

A plain sieve of Eratosthenes over [0, capacity]. Used as ground truth for
validation, benchmarks and differential tests; the generator never touches it.
"""

import numpy as np


class ReferenceSieve:
    def __init__(self, capacity: int = 1_000_000):
        if capacity < 2:
            raise ValueError(f"capacity must be >= 2, got {capacity}")
        self.capacity = capacity
        self._is_prime = self._sieve(capacity)
        self._primes = np.nonzero(self._is_prime)[0].astype(np.uint64)

    def _sieve(self, n: int) -> np.ndarray:
        """Sieve of Eratosthenes returning a primality table for [0, n]."""
        is_prime = np.ones(n + 1, dtype=bool)
        is_prime[0:2] = False
        for i in range(2, int(np.sqrt(n)) + 1):
            if is_prime[i]:
                is_prime[i * i :: i] = False
        return is_prime

    def _check(self, stop: int) -> None:
        if stop > self.capacity:
            raise ValueError(f"stop={stop} exceeds capacity={self.capacity}")

    @property
    def primes(self) -> np.ndarray:
        return self._primes

    def is_prime(self, n: int) -> bool:
        self._check(n)
        return bool(self._is_prime[n]) if n >= 0 else False

    def primes_in(self, start: int, stop: int) -> np.ndarray:
        """All primes p with start <= p <= stop, as uint64."""
        self._check(stop)
        if start > stop:
            return np.zeros(0, dtype=np.uint64)
        lo = np.searchsorted(self._primes, np.uint64(start), side="left")
        hi = np.searchsorted(self._primes, np.uint64(stop), side="right")
        return self._primes[lo:hi]

    def count(self, start: int, stop: int) -> int:
        """Number of primes in [start, stop]."""
        return len(self.primes_in(start, stop))

    @classmethod
    def covering(cls, stop: int) -> "ReferenceSieve":
        """Smallest oracle that can answer queries up to `stop`."""
        return cls(max(stop, 2))
