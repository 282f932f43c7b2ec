"""
Command-line interface for the frame shift residue generator.

Usage:
    python -m zframework validate
    python -m zframework count 1 1000000
    python -m zframework generate 1 100
    python -m zframework compare 1 100000 --runs 5
    python -m zframework sweep 10000 50000 --output sweep.png
    python -m zframework info
"""

import sys
import time
import click

from .config import SieveConfig
from .density import kappa
from .generator import (
    FrameShiftGenerator, InvalidRangeError, SieveAllocationError,
    count_primes, generate_primes,
)
from .geometry import compute_frame_size
from .invariants import run_all_invariants, ResidueLeakError
from .benchmark import (
    benchmark_range, diff_against_reference,
    sweep_curvature, sweep_density_boost,
)
from .display import (
    format_invariant_report,
    format_benchmark,
    format_sweep,
    format_diff,
    plot_sweep,
)


PRESETS = ["default", "relaxed", "extreme"]


def _build_config(preset, curvature_k, frame_count, density_boost) -> SieveConfig:
    """Build SieveConfig from CLI options."""
    if preset == "relaxed":
        cfg = SieveConfig.relaxed()
    elif preset == "extreme":
        cfg = SieveConfig.extreme()
    else:
        cfg = SieveConfig.default()

    # Explicit options go through the validated setter; bad values are ignored
    cfg.set_parameters(
        curvature_k if curvature_k is not None else cfg.curvature_k,
        frame_count if frame_count is not None else cfg.frame_count_hint,
        density_boost if density_boost is not None else cfg.density_boost,
    )
    return cfg


def config_options(f):
    f = click.option("--density-boost", type=float, default=None,
                     help="Density boost multiplier (> 0).")(f)
    f = click.option("--frame-count", type=int, default=None,
                     help="Frame count hint (0 = adaptive).")(f)
    f = click.option("--curvature-k", type=float, default=None,
                     help="Curvature coefficient in (0, 1].")(f)
    f = click.option("--preset", type=click.Choice(PRESETS), default="default",
                     help="Parameter preset.")(f)
    return f


@click.group()
def main():
    """Frame shift residue prime generator."""
    pass


@main.command()
@config_options
def validate(preset, curvature_k, frame_count, density_boost):
    """Run all invariant checks."""
    cfg = _build_config(preset, curvature_k, frame_count, density_boost)
    click.echo(f"Configuration: k={cfg.curvature_k}, frames={cfg.frame_count_hint}, "
               f"boost={cfg.density_boost}")
    click.echo("Running invariant checks...\n")

    t0 = time.time()
    try:
        results = run_all_invariants(cfg)
    except ResidueLeakError as e:
        click.echo(f"\nFATAL: {e}", err=True)
        sys.exit(1)

    elapsed = time.time() - t0
    click.echo(format_invariant_report(results))
    click.echo(f"\nCompleted in {elapsed:.1f}s")

    if not all(r.passed for r in results):
        sys.exit(1)


@main.command()
@click.argument("start", type=int)
@click.argument("stop", type=int)
@config_options
def count(start, stop, preset, curvature_k, frame_count, density_boost):
    """Count primes in [START, STOP]."""
    cfg = _build_config(preset, curvature_k, frame_count, density_boost)
    t0 = time.time()
    try:
        n = count_primes(start, stop, cfg, strict=True)
    except (InvalidRangeError, SieveAllocationError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"{n} primes in [{start}, {stop}] ({time.time() - t0:.3f}s)")


@main.command()
@click.argument("start", type=int)
@click.argument("stop", type=int)
@click.option("--limit", type=int, default=None, help="Print at most this many primes.")
@config_options
def generate(start, stop, limit, preset, curvature_k, frame_count, density_boost):
    """Print the primes in [START, STOP]."""
    cfg = _build_config(preset, curvature_k, frame_count, density_boost)
    batch = generate_primes(start, stop, cfg)
    if not batch.ok:
        click.echo(f"Error: generation failed ({batch.status})", err=True)
        sys.exit(1)

    primes = batch.primes if limit is None else batch.primes[:limit]
    click.echo(" ".join(str(int(p)) for p in primes))
    if limit is not None and batch.count > limit:
        click.echo(f"... ({batch.count} total)")


@main.command()
@click.argument("start", type=int)
@click.argument("stop", type=int)
@click.option("--runs", type=int, default=5, help="Timed runs per method.")
@click.option("--diff/--no-diff", default=False,
              help="List primes missing from or extra to the generator output.")
@config_options
def compare(start, stop, runs, diff, preset, curvature_k, frame_count, density_boost):
    """Benchmark against the reference sieve on [START, STOP]."""
    cfg = _build_config(preset, curvature_k, frame_count, density_boost)
    if start > stop:
        click.echo(f"Error: start must be <= stop, got [{start}, {stop}]", err=True)
        sys.exit(1)

    click.echo(f"Comparing on [{start}, {stop}], {runs} runs...\n")
    result = benchmark_range(start, stop, runs, cfg)
    click.echo(format_benchmark(result))

    if diff:
        click.echo("")
        click.echo(format_diff(diff_against_reference(start, stop, cfg)))

    if not result.matches:
        sys.exit(1)


@main.command()
@click.argument("start", type=int)
@click.argument("stop", type=int)
@click.option("--output", "-o", type=str, default=None,
              help="Save curvature sweep plot to file.")
def sweep(start, stop, output):
    """Sweep curvature k and density boost on [START, STOP]."""
    if start > stop:
        click.echo(f"Error: start must be <= stop, got [{start}, {stop}]", err=True)
        sys.exit(1)

    t0 = time.time()
    k_points = sweep_curvature(start, stop)
    boost_points = sweep_density_boost(start, stop)

    click.echo(format_sweep("Curvature Parameter k:", k_points))
    click.echo("")
    click.echo(format_sweep("Golden Ratio Enhancement:", boost_points))
    click.echo(f"\nCompleted in {time.time() - t0:.1f}s")

    if output is not None:
        plot_sweep(k_points, output_path=output, show=False)


@main.command()
@click.argument("start", type=int, default=1)
@click.argument("stop", type=int, default=1_000_000)
@config_options
def info(start, stop, preset, curvature_k, frame_count, density_boost):
    """Show parameters and resource estimates for [START, STOP]."""
    cfg = _build_config(preset, curvature_k, frame_count, density_boost)

    click.echo("=" * 50)
    click.echo("  FRAME SHIFT RESIDUE SIEVE - System Information")
    click.echo("=" * 50)
    click.echo(f"  Curvature (k):         {cfg.curvature_k}")
    click.echo(f"  Frame count hint:      {cfg.frame_count_hint}")
    click.echo(f"  Density boost:         {cfg.density_boost}")
    click.echo(f"  Rejection threshold:   {cfg.threshold:.4f}")

    if start > stop:
        click.echo("=" * 50)
        return

    range_size = stop - start + 1
    click.echo(f"\n  Range:                 [{start}, {stop}]")
    click.echo(f"  Nominal frame size:    {compute_frame_size(range_size, cfg.curvature_k)}")
    click.echo(f"  Materialised frame:    {range_size} (single frame)")
    click.echo(f"  Sieve buffer:          {cfg.memory_estimate_mb(start, stop):.2f} MB")
    click.echo(f"  kappa(stop):           {kappa(stop):.4f}")

    if start >= 0 and range_size <= 1_000:
        with FrameShiftGenerator(start, stop, cfg) as gen:
            click.echo(f"  Density rejections:    {gen.rejected_by_density}")

    click.echo("=" * 50)
