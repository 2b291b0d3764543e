"""Column-major matrix multiplication in every loop order, and matrix transposition."""

import random
import sys
import time
from itertools import product
from typing import Callable, List, Optional, Sequence, Tuple

ORDERINGS = ("ijk", "ikj", "jik", "jki", "kij", "kji")
DEFAULT_N = 1000
TRANSPOSE_USAGE = "Usage: transpose <n> <blocksize>\nExiting."


def _check_square(n: int, *matrices: Sequence) -> None:
    if n < 0:
        raise ValueError("matrix size must not be negative")
    for matrix in matrices:
        if len(matrix) != n * n:
            raise ValueError(f"expected {n * n} elements, got {len(matrix)}")


def multiply(n: int, a: Sequence[float], b: Sequence[float],
             c: Sequence[float], order: str = "ijk") -> List[float]:
    """Return c + a*b for n-by-n column-major matrices, looping in the given order."""
    if order not in ORDERINGS:
        raise ValueError(f"unknown loop order {order!r}")
    _check_square(n, a, b, c)
    pi, pj, pk = (order.index(name) for name in "ijk")
    result = list(c)
    for idx in product(range(n), repeat=3):
        i, j, k = idx[pi], idx[pj], idx[pk]
        result[i + j * n] += a[i + k * n] * b[k + j * n]
    return result


def transpose_naive(n: int, blocksize: int, src: Sequence[int]) -> List[int]:
    """Return the transpose of src, visiting elements row by row."""
    _check_square(n, src)
    dst = [0] * (n * n)
    for x, y in product(range(n), repeat=2):
        dst[y + x * n] = src[x + y * n]
    return dst


def transpose_blocking(n: int, blocksize: int, src: Sequence[int]) -> List[int]:
    """Return the transpose of src, working through blocksize-square tiles."""
    if blocksize <= 0:
        raise ValueError("blocksize must be positive")
    _check_square(n, src)
    dst = [0] * (n * n)
    for bx, by in product(range(0, n, blocksize), repeat=2):
        for x in range(bx, min(bx + blocksize, n)):
            for y in range(by, min(by + blocksize, n)):
                dst[y + x * n] = src[x + y * n]
    return dst


def _timed(call: Callable[[], object]) -> Tuple[object, float]:
    start = time.perf_counter()
    result = call()
    return result, time.perf_counter() - start


def benchmark_orderings(n: int, seed: Optional[int] = None) -> List[Tuple[str, float]]:
    """Time every loop order on random matrices; return (order, Gflop/s) pairs."""
    rng = random.Random(seed)

    def fill() -> List[float]:
        return [rng.random() * 2 - 1 for _ in range(n * n)]

    a, b, c = fill(), fill(), fill()
    results = []
    for order in ORDERINGS:
        c, seconds = _timed(lambda: multiply(n, a, b, c, order))
        gflops = 2e-9 * n * n * n / seconds if seconds > 0 else float("inf")
        results.append((order, gflops))
    return results


def benchmark_transpose(n: int, blocksize: int,
                        seed: Optional[int] = None) -> List[Tuple[str, float]]:
    """Time both transposes on random data; return (description, milliseconds) pairs.

    Raises RuntimeError if a transpose gives a wrong answer.
    """
    rng = random.Random(seed)
    variants = (
        ("naive transpose", transpose_naive),
        ("transpose with blocking", transpose_blocking),
    )
    results = []
    for description, transpose in variants:
        src = [rng.getrandbits(31) for _ in range(n * n)]
        dst, seconds = _timed(lambda: transpose(n, blocksize, src))
        if any(dst[j + i * n] != src[i + j * n] for i, j in product(range(n), repeat=2)):
            raise RuntimeError("Transpose does not result in correct answer")
        results.append((description, seconds * 1e3))
    return results


def _run_multiply(args: List[str]) -> int:
    try:
        n = int(args[0]) if args else DEFAULT_N
    except ValueError:
        print(f"Invalid matrix size: {args[0]}", file=sys.stderr)
        return 1
    for order, gflops in benchmark_orderings(n):
        print(f"{order}:\tn = {n}, {gflops:.3f} Gflop/s")
    print("\n")
    return 0


def _run_transpose(args: List[str]) -> int:
    try:
        n, blocksize = (int(arg) for arg in args)
    except ValueError:
        print(TRANSPOSE_USAGE)
        return 1
    try:
        results = benchmark_transpose(n, blocksize)
    except RuntimeError:
        print("Error!!!! Transpose does not result in correct answer!!")
        return 255
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    for description, milliseconds in results:
        print(f"Testing {description}: {milliseconds:g} milliseconds")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Run `multiply [n]` or `transpose <n> <blocksize>` and return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    commands = {"multiply": _run_multiply, "transpose": _run_transpose}
    if not args or args[0] not in commands:
        print("Usage: multiply [n] | transpose <n> <blocksize>")
        return 1
    return commands[args[0]](args[1:])


if __name__ == "__main__":
    sys.exit(main())