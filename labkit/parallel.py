"""Threaded dot products and vector additions, with timing reports."""

import argparse
import os
import random
import sys
import threading
import time
from typing import Callable, List, Optional, Sequence, Tuple

DOTP_ARRAY_SIZE = 10_000_000
VADD_ARRAY_SIZE = 10_000_000
REPEAT = 100
TOLERANCE = 0.001


def _check_pair(x: Sequence[float], y: Sequence[float]) -> None:
    if len(x) != len(y):
        raise ValueError(f"vectors differ in length: {len(x)} and {len(y)}")


def _check_threads(threads: int) -> None:
    if threads < 1:
        raise ValueError("thread count must be at least 1")


def _chunks(n: int, threads: int) -> List[Tuple[int, int]]:
    return [(n * t // threads, n * (t + 1) // threads) for t in range(threads)]


def _run_threads(target: Callable[..., None], arguments: List[tuple]) -> None:
    workers = [threading.Thread(target=target, args=args) for args in arguments]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()


def _default_threads() -> int:
    return os.cpu_count() or 1


def gen_array(n: int, seed: Optional[int] = None) -> List[float]:
    """Return n random numbers in [0, 1)."""
    if n < 0:
        raise ValueError("array size must not be negative")
    rng = random.Random(seed)
    return [rng.random() for _ in range(n)]


def dotp_naive(x: Sequence[float], y: Sequence[float]) -> float:
    """Dot product that takes a lock for every single addition."""
    _check_pair(x, y)
    lock = threading.Lock()
    total = 0.0
    for a, b in zip(x, y):
        with lock:
            total += a * b
    return total


def dotp_manual(x: Sequence[float], y: Sequence[float], threads: int = 1) -> float:
    """Dot product where each thread sums its chunk and adds it once under a lock."""
    _check_pair(x, y)
    _check_threads(threads)
    lock = threading.Lock()
    total = 0.0

    def work(lo: int, hi: int) -> None:
        nonlocal total
        partial = sum(a * b for a, b in zip(x[lo:hi], y[lo:hi]))
        with lock:
            total += partial

    _run_threads(work, _chunks(len(x), threads))
    return total


def dotp_reduction(x: Sequence[float], y: Sequence[float], threads: int = 1) -> float:
    """Dot product where per-thread partial sums are combined after all finish."""
    _check_pair(x, y)
    _check_threads(threads)
    partials = [0.0] * threads

    def work(index: int, lo: int, hi: int) -> None:
        partials[index] = sum(a * b for a, b in zip(x[lo:hi], y[lo:hi]))

    _run_threads(work, [(t, lo, hi) for t, (lo, hi) in enumerate(_chunks(len(x), threads))])
    return sum(partials)


def compute_dotp(size: int, repeat: int = REPEAT, max_threads: Optional[int] = None) -> str:
    """Time the dot product variants on random vectors and return the report text."""
    if repeat < 0:
        raise ValueError("repeat must not be negative")
    if max_threads is None:
        max_threads = _default_threads()
    _check_threads(max_threads)
    x, y = gen_array(size), gen_array(size)
    serial = sum(a * b for a, b in zip(x, y))
    lines = []
    result = 0.0
    variants = (("Manual Optimized", dotp_manual), ("Reduction Optimized", dotp_reduction))
    for label, func in variants:
        for threads in range(1, max_threads + 1):
            start = time.perf_counter()
            for _ in range(repeat):
                result = func(x, y, threads)
            elapsed = time.perf_counter() - start
            lines.append(f"{label}: {threads} thread(s) took {elapsed:f} seconds\n")
            if abs(serial - result) > TOLERANCE:
                lines.append("Incorrect result!\n")
                return "".join(lines)

    start = time.perf_counter()
    for _ in range(repeat):
        dotp_naive(x, y)
    elapsed = time.perf_counter() - start
    lines.append(f"Naive: 1 thread(s) took {elapsed:f} seconds\n")
    return "".join(lines)


def v_add_naive(x: Sequence[float], y: Sequence[float]) -> List[float]:
    """Return the element-wise sum of x and y."""
    _check_pair(x, y)
    return [a + b for a, b in zip(x, y)]


def v_add_adjacent(x: Sequence[float], y: Sequence[float], threads: int = 1) -> List[float]:
    """Element-wise sum where thread t handles indices t, t + threads, ..."""
    _check_pair(x, y)
    _check_threads(threads)
    n = len(x)
    z = [0.0] * n

    def work(first: int) -> None:
        for i in range(first, n, threads):
            z[i] = x[i] + y[i]

    _run_threads(work, [(t,) for t in range(threads)])
    return z


def v_add_chunks(x: Sequence[float], y: Sequence[float], threads: int = 1) -> List[float]:
    """Element-wise sum where each thread handles one contiguous chunk."""
    _check_pair(x, y)
    _check_threads(threads)
    z = [0.0] * len(x)

    def work(lo: int, hi: int) -> None:
        z[lo:hi] = [a + b for a, b in zip(x[lo:hi], y[lo:hi])]

    _run_threads(work, _chunks(len(x), threads))
    return z


def hello_threads(threads: Optional[int] = None) -> List[str]:
    """Have each thread produce a greeting line; return the lines in completion order."""
    if threads is None:
        threads = _default_threads()
    _check_threads(threads)
    lines: List[str] = []
    lock = threading.Lock()

    def work(thread_id: int) -> None:
        with lock:
            lines.append(f" hello world {thread_id}")

    _run_threads(work, [(t,) for t in range(threads)])
    return lines


def _run_v_add(size: int, repeat: int) -> int:
    x, y = gen_array(size), gen_array(size)
    oracle = [a + b for a, b in zip(x, y)]
    max_threads = _default_threads()
    variants = (
        ("Optimized adjacent", "v_add optimized adjacent", v_add_adjacent),
        ("Optimized chunks", "v_add optimized chunks", v_add_chunks),
    )
    for label, name, func in variants:
        for threads in range(1, max_threads + 1):
            start = time.perf_counter()
            for _ in range(repeat):
                func(x, y, threads)
            elapsed = time.perf_counter() - start
            if func(x, y, threads) != oracle:
                print(f"{name} does not match oracle")
                return 255
            print(f"{label}: {threads} thread(s) took {elapsed:f} seconds")
    for threads in range(1, max_threads + 1):
        start = time.perf_counter()
        for _ in range(repeat):
            v_add_naive(x, y)
        elapsed = time.perf_counter() - start
        print(f"Naive: {threads} thread(s) took {elapsed:f} seconds")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Run the `dotp`, `vadd` or `hello` benchmark and return the exit status."""
    parser = argparse.ArgumentParser(prog="parallel")
    commands = parser.add_subparsers(dest="command", required=True)
    dotp = commands.add_parser("dotp")
    dotp.add_argument("--size", type=int, default=DOTP_ARRAY_SIZE)
    dotp.add_argument("--repeat", type=int, default=REPEAT)
    vadd = commands.add_parser("vadd")
    vadd.add_argument("--size", type=int, default=VADD_ARRAY_SIZE)
    vadd.add_argument("--repeat", type=int, default=REPEAT)
    hello = commands.add_parser("hello")
    hello.add_argument("--threads", type=int, default=None)
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    if args.command == "hello":
        for line in hello_threads(args.threads):
            print(line)
        return 0
    if args.size < 0 or args.repeat < 0:
        parser.error("--size and --repeat must not be negative")
    if args.command == "dotp":
        print(compute_dotp(args.size, args.repeat))
        return 0
    return _run_v_add(args.size, args.repeat)


if __name__ == "__main__":
    sys.exit(main())