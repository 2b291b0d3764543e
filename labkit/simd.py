"""Summing the elements at or above a threshold, in scalar and vectorised styles."""

import argparse
import random
import sys
import time
from typing import Callable, List, Optional, Sequence

import numpy as np

NUM_ELEMS = (1 << 16) + 10
OUTER_ITERATIONS = 1 << 16
THRESHOLD = 128

_LANES = 4


def _check_iterations(iterations: int) -> None:
    if iterations < 0:
        raise ValueError("iterations must not be negative")


def sum_threshold(vals: Sequence[int], iterations: int = OUTER_ITERATIONS) -> int:
    """Return the sum of the values >= 128, taken over `iterations` passes."""
    _check_iterations(iterations)
    return sum(v for v in vals if v >= THRESHOLD) * iterations


def sum_unrolled(vals: Sequence[int], iterations: int = OUTER_ITERATIONS) -> int:
    """Same as sum_threshold, handling four elements per step plus a tail."""
    _check_iterations(iterations)
    values = list(vals)
    cut = len(values) // _LANES * _LANES
    total = 0
    for a, b, c, d in zip(*[iter(values[:cut])] * _LANES):
        total += (
            (a if a >= THRESHOLD else 0)
            + (b if b >= THRESHOLD else 0)
            + (c if c >= THRESHOLD else 0)
            + (d if d >= THRESHOLD else 0)
        )
    total += sum(v for v in values[cut:] if v >= THRESHOLD)
    return total * iterations


def _lane_sums(block: np.ndarray, width: int) -> np.ndarray:
    lanes = block.reshape(-1, width)
    return np.where(lanes > THRESHOLD - 1, lanes, 0).sum(axis=0)


def sum_vectorized(vals: Sequence[int], iterations: int = OUTER_ITERATIONS) -> int:
    """Same as sum_threshold, using four-lane vector accumulators and a scalar tail."""
    _check_iterations(iterations)
    arr = np.asarray(vals, dtype=np.int64)
    cut = arr.size // _LANES * _LANES
    total = int(_lane_sums(arr[:cut], _LANES).sum())
    total += int(arr[cut:][arr[cut:] >= THRESHOLD].sum())
    return total * iterations


def sum_vectorized_unrolled(vals: Sequence[int],
                            iterations: int = OUTER_ITERATIONS) -> int:
    """Same as sum_vectorized, consuming four vectors per step before the tails."""
    _check_iterations(iterations)
    arr = np.asarray(vals, dtype=np.int64)
    wide = _LANES * 4
    cut_wide = arr.size // wide * wide
    cut = arr.size // _LANES * _LANES
    acc = _lane_sums(arr[:cut_wide], wide).reshape(-1, _LANES).sum(axis=0)
    acc = acc + _lane_sums(arr[cut_wide:cut], _LANES)
    total = int(acc.sum())
    total += int(arr[cut:][arr[cut:] >= THRESHOLD].sum())
    return total * iterations


def _timed(func: Callable[[Sequence[int], int], int],
           vals: Sequence[int], iterations: int) -> int:
    start = time.process_time()
    result = func(vals, iterations)
    print(f"Time taken: {time.process_time() - start:f} s")
    return result


def main(argv: Optional[List[str]] = None) -> int:
    """Sum a random array with every variant and report mismatches."""
    parser = argparse.ArgumentParser(prog="simd")
    parser.add_argument("--iterations", type=int, default=OUTER_ITERATIONS)
    parser.add_argument("--size", type=int, default=NUM_ELEMS)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    if args.iterations < 0 or args.size < 0:
        parser.error("--iterations and --size must not be negative")

    print("Let's generate a randomized array.")
    rng = random.Random(args.seed)
    vals = [rng.randrange(256) for _ in range(args.size)]

    print("Starting randomized sum.")
    reference = _timed(sum_threshold, vals, args.iterations)
    print(f"Sum: {reference}")

    print("Starting randomized unrolled sum.")
    print(f"Sum: {_timed(sum_unrolled, vals, args.iterations)}")

    print("Starting randomized SIMD sum.")
    simd = _timed(sum_vectorized, vals, args.iterations)
    print(f"Sum: {simd}")
    if simd != reference:
        print(f"OH NO! SIMD sum {simd} doesn't match reference sum {reference}!")

    print("Starting randomized SIMD unrolled sum.")
    simdu = _timed(sum_vectorized_unrolled, vals, args.iterations)
    print(f"Sum: {simdu}")
    if simdu != reference:
        print(f"OH NO! SIMD_UNROLLED sum {simdu} doesn't match reference sum {reference}!")
    return 0


if __name__ == "__main__":
    sys.exit(main())