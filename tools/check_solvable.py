from __future__ import annotations

import argparse
import os
import sys
import time
from typing import List, Optional

sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from game import generate_level, generate_progressive_level, calculate_optimal_moves_with_timeout  # type: ignore


def process(args: argparse.Namespace) -> None:
    proven: List[int] = []
    unknown = 0
    started = time.monotonic()
    for seed in range(args.start_seed, args.start_seed + args.count):
        if args.colors is not None:
            config = generate_level(args.level, args.colors, args.empty, seed=seed)
        else:
            config = generate_progressive_level(args.level, seed=seed)
        t0 = time.monotonic()
        optimal: Optional[int] = calculate_optimal_moves_with_timeout(
            config.initial_tubes, timeout=args.timeout, max_depth=args.max_depth
        )
        dt = time.monotonic() - t0
        if optimal is None:
            unknown += 1
            if args.verbose:
                print(f"seed={seed}: unknown ({dt:.2f}s)")
        else:
            proven.append(optimal)
            if args.verbose:
                print(f"seed={seed}: {optimal} moves ({dt:.2f}s)")
    total = len(proven) + unknown
    print(f"levels checked: {total} in {time.monotonic() - started:.1f}s")
    print(f"proven solvable: {len(proven)}  unknown: {unknown}")
    if proven:
        print(f"optimal moves: min={min(proven)} avg={sum(proven) / len(proven):.1f} max={max(proven)}")


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(description='Report how many generated levels the solver can prove solvable')
    ap.add_argument('--level', type=int, default=1)
    ap.add_argument('--colors', type=int, default=None, help='Override the level progression color count')
    ap.add_argument('--empty', type=int, default=1)
    ap.add_argument('--count', type=int, default=20)
    ap.add_argument('--start-seed', type=int, default=0)
    ap.add_argument('--timeout', type=float, default=None, help='Solver time budget in seconds (default: COLORSORT_SOLVER_TIMEOUT)')
    ap.add_argument('--max-depth', type=int, default=None, help='Solver depth cap (default: COLORSORT_SOLVER_MAX_DEPTH)')
    ap.add_argument('-v', '--verbose', action='store_true')
    args = ap.parse_args(argv)
    process(args)


if __name__ == '__main__':
    main()
