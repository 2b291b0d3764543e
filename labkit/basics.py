"""Small warm-up programs: control flow, greetings and a summing loop."""

from itertools import takewhile
from typing import Iterable

MAX_LEN = 80
PROMPT = "What's your name?\n"

_HEADER = "Berkeley eccentrics:\n====================\n"

# Each case lists the lines printed when the switch enters at that case,
# including those reached by falling through.
_ECCENTRICS = {
    0: ("Yoshua", "Triangle Man"),
    1: ("Triangle Man",),
    2: ("Chinese Erhu Guy", "Yoshua"),
    3: ("Yoshua",),
    4: ("Dr. Jokemon",),
    5: ("Hat Lady", "I don't know these people!"),
}
_UNKNOWN = ("I don't know these people!",)


def eccentric(v0: int, v1: int, v2: int, v3: int) -> str:
    """Return the eccentrics report selected by the four values."""
    lines = [_HEADER, "Happy " * max(v0, 0), "\n"]
    lines.extend(f"{name}\n" for name in _ECCENTRICS.get(v1, _UNKNOWN))
    cheer = "Go" if v3 == 3 else "Boo"
    team = "BEARS" if v2 else "CARDINAL"
    lines.append(f"{cheer} {team}!\n")
    return "".join(lines)


def farewell() -> str:
    """Return the closing message of the hello program."""
    return "Thanks for waddling through this program. Have a nice day."


def greet(name: str) -> str:
    """Return the greeting for a name read as one line of at most 79 characters."""
    line = name[: MAX_LEN - 1]
    newline = line.find("\n")
    if newline != -1:
        line = line[: newline + 1]
    return (
        f"Hey, {line}I just really wanted to say hello to you.\n"
        "I hope you have a wonderful day."
    )


def fun(x: int) -> int:
    """Return -x * (x + 1)."""
    return -x * (x + 1)


def sum_transformed(source: Iterable[int]) -> int:
    """Sum fun() over the values of source up to the first zero."""
    return sum(fun(value) for value in takewhile(lambda v: v != 0, source))