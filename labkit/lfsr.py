"""A 16-bit linear feedback shift register."""

from typing import Iterator

_MASK = 0xFFFF
_TAPS = (0, 2, 3, 5)


def lfsr_calculate(reg: int) -> int:
    """Advance the register by one step and return the new value."""
    if not 0 <= reg <= _MASK:
        raise ValueError(f"register value {reg} does not fit in 16 bits")
    feedback = 0
    for tap in _TAPS:
        feedback ^= (reg >> tap) & 1
    return (reg >> 1) | (feedback << 15)


def lfsr_numbers(seed: int, steps: int) -> Iterator[int]:
    """Yield seed, then the register value after every further `steps` shifts."""
    if steps < 0:
        raise ValueError("steps must not be negative")
    reg = seed
    while True:
        yield reg
        for _ in range(steps):
            reg = lfsr_calculate(reg)


def cycle_length(seed: int, steps: int) -> int:
    """Count the distinct numbers produced before the sequence repeats."""
    seen = set()
    for reg in lfsr_numbers(seed, steps):
        if reg in seen:
            return len(seen)
        seen.add(reg)
    raise AssertionError("unreachable")