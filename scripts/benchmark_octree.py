#!/usr/bin/env python3
"""
Benchmark octree construction for growing body counts.

Usage:
    uv run python scripts/benchmark_octree.py [--max-step N] [--stride N] [--repeat N]

Examples:
    uv run python scripts/benchmark_octree.py
    uv run python scripts/benchmark_octree.py --csv
    uv run python scripts/benchmark_octree.py --relocate --max-step 512 --output results.json
"""

from __future__ import annotations

import argparse
import json
import math
import time
from typing import Any

from nbody_octree import BoundingVolume, TreeBuilder, random_bodies, tree_summary

SPACE = BoundingVolume.cube(0.0, 1024.0)


def benchmark_build(
    count: int,
    builder: TreeBuilder,
    seed: int,
    repeat: int = 1,
) -> dict[str, Any]:
    """
    Time tree construction for one body count.

    Bodies are generated before the timer starts.

    Returns:
        Dict with timing and tree shape info
    """
    bodies = random_bodies(count, SPACE, seed=seed)

    times = []
    tree = None
    for _ in range(repeat):
        start = time.perf_counter()
        tree = builder.build(SPACE, bodies)
        times.append(time.perf_counter() - start)

    assert tree is not None
    summary = tree_summary(tree)
    return {
        "num_bodies": count,
        "time_seconds": min(times),
        "mean_depth": summary["mean_depth"],
        "max_depth": summary["max_depth"],
        "nodes": summary["nodes"],
    }


def run_benchmarks(
    max_step: int = 256,
    stride: int = 8,
    repeat: int = 1,
    relocate: bool = False,
    seed: int = 42,
    csv: bool = False,
) -> list[dict]:
    """Build trees of 8 * step bodies for step in range(0, max_step, stride)."""
    builder = TreeBuilder(relocate_resident=relocate)
    results = []

    if not csv:
        mode = "relocate" if relocate else "retain"
        print(f"\nBenchmarking octree construction ({mode} residents, best of {repeat})")
        print("=" * 72)
        print(f"{'Bodies':>8s} {'Time (s)':>12s} {'Mean depth':>12s} {'log8(n)':>10s} {'Max depth':>10s}")
        print("-" * 72)

    for step in range(0, max_step, stride):
        count = 8 * step
        result = benchmark_build(count, builder, seed=seed + step, repeat=repeat)
        results.append(result)

        if csv:
            # elapsed,count rows
            print(f"{result['time_seconds']:.9f},{count}")
        else:
            log8 = math.log(count, 8) if count > 0 else 0.0
            print(
                f"{count:>8d} {result['time_seconds']:>12.6f} "
                f"{result['mean_depth']:>12.3f} {log8:>10.3f} {result['max_depth']:>10d}"
            )

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark octree construction")
    parser.add_argument("--max-step", type=int, default=256, help="Upper bound for step (exclusive)")
    parser.add_argument("--stride", type=int, default=8, help="Step increment")
    parser.add_argument("--repeat", type=int, default=1, help="Builds per size, best time is kept")
    parser.add_argument("--relocate", action="store_true", help="Use one-body-per-leaf insertion")
    parser.add_argument("--seed", type=int, default=42, help="Base random seed")
    parser.add_argument("--csv", action="store_true", help="Print elapsed,count rows only")
    parser.add_argument("--output", help="Output JSON file for results")

    args = parser.parse_args()

    results = run_benchmarks(
        max_step=args.max_step,
        stride=args.stride,
        repeat=args.repeat,
        relocate=args.relocate,
        seed=args.seed,
        csv=args.csv,
    )

    if args.output and results:
        with open(args.output, "w") as f:
            json.dump(results, f, indent=2)
        print(f"\nResults saved to {args.output}")


if __name__ == "__main__":
    main()
