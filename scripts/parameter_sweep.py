"""
Batch parameter sweep for the frame shift residue generator.

Counts primes over each test range for every (k, density boost) pair,
checks each count against the reference sieve, and writes one CSV row per
run. Mirrors the scalability and parameter sections of the benchmark suite.

Output: artifacts/parameter_sweep.csv

Usage:
    python scripts/parameter_sweep.py              # full grid
    python scripts/parameter_sweep.py --smoke      # two small ranges, three k values
"""

import sys
import os
import csv
import time
import argparse

import numpy as np
from tqdm import tqdm

# Allow running as `python scripts/parameter_sweep.py` without install
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from zframework.config import SieveConfig
from zframework.generator import count_primes
from zframework.primes import ReferenceSieve
from zframework.benchmark import DEFAULT_K_VALUES, GOLDEN_ENHANCEMENTS


# --- Constants ---

TEST_RANGES = [
    (1, 1_000),
    (1, 10_000),
    (1, 100_000),
    (1, 1_000_000),
    (100_000, 200_000),
    (1_000_000, 1_100_000),
    (10_000_000, 10_100_000),
]

SMOKE_RANGES = [(1, 1_000), (10_000, 20_000)]
SMOKE_K_VALUES = [0.1, 0.5, 0.9]

FIELDS = ["start", "stop", "curvature_k", "boost_label", "density_boost",
          "count", "reference", "match", "elapsed"]


def run_grid(ranges, k_values, enhancements):
    """Yield one result row per (range, k, boost) triple."""
    oracle = ReferenceSieve.covering(max(stop for _, stop in ranges))
    total = len(ranges) * len(k_values) * len(enhancements)

    with tqdm(total=total, desc="Sweeping", unit="run") as bar:
        for start, stop in ranges:
            expected = oracle.count(start, stop)
            for k in k_values:
                for label, boost in enhancements:
                    cfg = SieveConfig(curvature_k=k, density_boost=boost)
                    t0 = time.perf_counter()
                    n = count_primes(start, stop, cfg)
                    elapsed = time.perf_counter() - t0
                    bar.update(1)
                    yield {
                        "start": start,
                        "stop": stop,
                        "curvature_k": k,
                        "boost_label": label,
                        "density_boost": boost,
                        "count": n,
                        "reference": expected,
                        "match": n == expected,
                        "elapsed": elapsed,
                    }


def main():
    parser = argparse.ArgumentParser(description="Frame shift residue parameter sweep")
    parser.add_argument("--smoke", action="store_true",
                        help="Small grid for a quick check")
    parser.add_argument("--output", type=str,
                        default=os.path.join("artifacts", "parameter_sweep.csv"))
    args = parser.parse_args()

    ranges = SMOKE_RANGES if args.smoke else TEST_RANGES
    k_values = SMOKE_K_VALUES if args.smoke else DEFAULT_K_VALUES

    os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)

    t0 = time.time()
    rows = []
    with open(args.output, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDS)
        writer.writeheader()
        for row in run_grid(ranges, k_values, GOLDEN_ENHANCEMENTS):
            writer.writerow(row)
            rows.append(row)

    elapsed = np.array([r["elapsed"] for r in rows])
    mismatches = [r for r in rows if not r["match"]]

    print(f"\n{len(rows)} runs in {time.time() - t0:.1f}s -> {args.output}")
    print(f"  per-run time: mean {elapsed.mean():.4f}s, "
          f"max {elapsed.max():.4f}s")
    if mismatches:
        print(f"  {len(mismatches)} runs disagree with the reference sieve:")
        for r in mismatches[:10]:
            print(f"    [{r['start']}, {r['stop']}] k={r['curvature_k']} "
                  f"boost={r['boost_label']}: {r['count']} vs {r['reference']}")
        sys.exit(1)
    print("  all counts match the reference sieve")


if __name__ == "__main__":
    main()
