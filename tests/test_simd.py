import random

import pytest

from labkit.simd import (
    NUM_ELEMS,
    main,
    sum_threshold,
    sum_unrolled,
    sum_vectorized,
    sum_vectorized_unrolled,
)


def _random_vals(size, seed):
    rng = random.Random(seed)
    return [rng.randrange(256) for _ in range(size)]


@pytest.mark.parametrize("size", [0, 1, 3, 4, 5, 15, 16, 17, 33, 100, NUM_ELEMS])
def test_variants_agree(size):
    vals = _random_vals(size, size)
    reference = sum_threshold(vals, 3)
    assert sum_unrolled(vals, 3) == reference
    assert sum_vectorized(vals, 3) == reference
    assert sum_vectorized_unrolled(vals, 3) == reference


def test_threshold_boundary():
    vals = [127, 128, 255, 0, 1]
    expected = 128 + 255
    assert sum_threshold(vals, 1) == expected
    assert sum_unrolled(vals, 1) == expected
    assert sum_vectorized(vals, 1) == expected
    assert sum_vectorized_unrolled(vals, 1) == expected


def test_values_below_threshold_are_ignored():
    vals = list(range(128)) * 3
    assert sum_threshold(vals, 5) == 0
    assert sum_unrolled(vals, 5) == 0
    assert sum_vectorized(vals, 5) == 0
    assert sum_vectorized_unrolled(vals, 5) == 0


def test_iterations_scale_the_sum():
    vals = _random_vals(37, 7)
    assert sum_threshold(vals, 6) == 6 * sum_threshold(vals, 1)
    assert sum_unrolled(vals, 6) == 6 * sum_unrolled(vals, 1)
    assert sum_vectorized(vals, 6) == 6 * sum_vectorized(vals, 1)
    assert sum_vectorized_unrolled(vals, 6) == 6 * sum_vectorized_unrolled(vals, 1)


def test_zero_iterations_give_zero():
    vals = _random_vals(20, 1)
    assert sum_threshold(vals, 0) == 0
    assert sum_unrolled(vals, 0) == 0
    assert sum_vectorized(vals, 0) == 0
    assert sum_vectorized_unrolled(vals, 0) == 0


def test_default_iterations_do_not_overflow():
    vals = [255] * NUM_ELEMS
    expected = 255 * NUM_ELEMS * (1 << 16)
    assert sum_threshold(vals) == expected
    assert sum_unrolled(vals) == expected
    assert sum_vectorized(vals) == expected
    assert sum_vectorized_unrolled(vals) == expected


def test_negative_iterations_rejected():
    with pytest.raises(ValueError):
        sum_threshold([200], -1)
    with pytest.raises(ValueError):
        sum_unrolled([200], -1)
    with pytest.raises(ValueError):
        sum_vectorized([200], -1)
    with pytest.raises(ValueError):
        sum_vectorized_unrolled([200], -1)


def test_main_reports_matching_sums(capsys):
    assert main(["--iterations", "2", "--size", "50", "--seed", "3"]) == 0
    out = capsys.readouterr().out
    assert out.count("Sum: ") == 4
    assert "OH NO" not in out
    assert out.startswith("Let's generate a randomized array.\n")


def test_main_rejects_negative_size():
    with pytest.raises(SystemExit):
        main(["--size", "-1"])