"""
Output formatting and optional matplotlib plotting.
"""

import sys
from typing import List, Optional

from .benchmark import BenchmarkResult, DiffResult, SweepPoint


def format_invariant_report(results: list) -> str:
    """Format invariant check results for terminal output."""
    lines = []
    lines.append("=" * 60)
    lines.append("  INVARIANT VALIDATION REPORT")
    lines.append("=" * 60)

    all_passed = True
    for r in results:
        status = "PASS" if r.passed else "FAIL"
        marker = " [+]" if r.passed else " [X]"
        lines.append(f"{marker} {r.name}: {status}")
        lines.append(f"      {r.message}")
        if not r.passed:
            all_passed = False

    lines.append("-" * 60)
    if all_passed:
        lines.append("  GENERATOR SOUND: All invariants hold.")
    else:
        lines.append("  GENERATOR COMPROMISED: One or more invariants failed.")
    lines.append("=" * 60)

    return "\n".join(lines)


def _format_timing(label: str, t) -> str:
    return (f"  {label:<12s} {t.mean:.6f} +/- {t.stddev:.6f} s "
            f"(min {t.min:.6f}, max {t.max:.6f})")


def format_benchmark(result: BenchmarkResult) -> str:
    """Format a generator-vs-reference timing comparison."""
    lines = []
    lines.append("=" * 60)
    lines.append(f"  BENCHMARK [{result.start}, {result.stop}]")
    lines.append("=" * 60)
    lines.append(_format_timing("Reference:", result.reference_time))
    lines.append(_format_timing("Generator:", result.generator_time))
    lines.append(f"  Sieve buffer: {result.memory_mb:.2f} MB")

    if result.matches:
        lines.append(f"\n  Counts match: {result.generator_count} primes")
    else:
        lines.append(f"\n  COUNT MISMATCH: reference={result.reference_count}, "
                     f"generator={result.generator_count}")

    ratio = result.slowdown
    if ratio > 1.0:
        lines.append(f"  Reference sieve is {ratio:.2f}x faster")
    elif ratio > 0.0:
        lines.append(f"  Generator is {1.0 / ratio:.2f}x faster")
    lines.append("=" * 60)

    return "\n".join(lines)


def format_sweep(title: str, points: List[SweepPoint]) -> str:
    """Format a parameter sweep as a small table."""
    lines = []
    lines.append(f"  {title}")
    lines.append(f"  {'setting':<8s} | {'k':>5s} | {'boost':>7s} | {'time (s)':>9s} | primes")
    lines.append(f"  {'-'*8}-+-{'-'*5}-+-{'-'*7}-+-{'-'*9}-+-------")
    for pt in points:
        lines.append(f"  {pt.label:<8s} | {pt.curvature_k:5.3f} | "
                     f"{pt.density_boost:7.3f} | {pt.elapsed:9.6f} | {pt.count}")

    counts = {pt.count for pt in points}
    if len(counts) > 1:
        lines.append(f"  WARNING: counts vary across settings: {sorted(counts)}")
    return "\n".join(lines)


def format_diff(diff: DiffResult, limit: int = 25) -> str:
    """Format missing/extra primes relative to the reference sieve."""
    lines = []
    lines.append(f"  Range [{diff.start}, {diff.stop}]: "
                 f"generator {len(diff.produced)}, reference {len(diff.expected)}")
    if diff.clean:
        lines.append("  No differences.")
        return "\n".join(lines)

    if len(diff.missing) > 0:
        shown = " ".join(str(int(p)) for p in diff.missing[:limit])
        lines.append(f"  Missing ({len(diff.missing)}): {shown}")
    if len(diff.extra) > 0:
        shown = " ".join(str(int(p)) for p in diff.extra[:limit])
        lines.append(f"  Extra ({len(diff.extra)}): {shown}")
    return "\n".join(lines)


def plot_sweep(points: List[SweepPoint], output_path: Optional[str] = None,
               show: bool = True) -> None:
    """
    Plot sweep timings and counts against the swept setting.
    Requires matplotlib (optional dependency).
    """
    try:
        import matplotlib
        if not show:
            matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError:
        print("matplotlib is required for plotting. Install with: "
              "pip install matplotlib", file=sys.stderr)
        return

    labels = [pt.label for pt in points]
    fig, axes = plt.subplots(2, 1, figsize=(10, 6), sharex=True)

    ax1 = axes[0]
    ax1.plot(labels, [pt.elapsed for pt in points], marker="o")
    ax1.set_ylabel("Time (s)")
    ax1.set_title("Frame shift residue sieve: parameter sweep")

    ax2 = axes[1]
    ax2.plot(labels, [pt.count for pt in points], marker="s", color="tab:green")
    ax2.set_ylabel("Primes found")
    ax2.set_xlabel("Setting")

    plt.tight_layout()

    if output_path:
        plt.savefig(output_path, dpi=150, bbox_inches="tight")
        print(f"Plot saved to {output_path}")
    if show:
        plt.show()
    else:
        plt.close(fig)
