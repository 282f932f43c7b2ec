import numpy as np
import pytest

import zframework.invariants as invariants_mod
from zframework.config import SieveConfig
from zframework.generator import PrimeBatch
from zframework.invariants import (
    check_reference_agreement, check_iterator_order, check_residue_preservation,
    check_parameter_rejection, check_kappa_bounds, run_all_invariants,
    ResidueLeakError,
)


def test_reference_agreement(config, oracle):
    result = check_reference_agreement(config, oracle)
    assert result.passed
    assert result.details["mismatches"] == []


def test_reference_agreement_reports_lossy_config(lossy_config, oracle):
    result = check_reference_agreement(lossy_config, oracle)
    assert not result.passed
    # Only [1, 100] contains the prime 5
    assert result.details["mismatches"] == [(1, 100, 25, 24)]


def test_iterator_order(config):
    result = check_iterator_order(config)
    assert result.passed
    assert result.details["produced"] == 168


def test_residue_preservation():
    result = check_residue_preservation(limit=20_000)
    assert result.passed
    assert result.details["expected"] == result.details["produced"] == 2262


def test_residue_leak_is_fatal(monkeypatch):
    def leaky(start, stop, config=None):
        primes = np.array([2, 3, 7, 11], dtype=np.uint64)
        return PrimeBatch(primes=primes, count=len(primes))

    monkeypatch.setattr(invariants_mod, "generate_primes", leaky)
    with pytest.raises(ResidueLeakError, match="RESIDUE LEAK"):
        check_residue_preservation(limit=11)


def test_parameter_rejection():
    assert check_parameter_rejection().passed


def test_kappa_bounds():
    result = check_kappa_bounds(limit=200)
    assert result.passed
    assert result.details["kappa_1"] == 0.0


def test_run_all_invariants():
    results = run_all_invariants()
    assert [r.name for r in results] == [
        "Reference Agreement",
        "Iterator Order",
        "Residue Preservation",
        "Parameter Rejection",
        "Kappa Bounds",
    ]
    assert all(r.passed for r in results)


def test_run_all_invariants_with_relaxed_config():
    assert all(r.passed for r in run_all_invariants(SieveConfig.relaxed()))
