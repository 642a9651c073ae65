"""Park-Miller minimal standard pseudo-random generator."""

from __future__ import annotations

from collections.abc import Iterator

_MODULUS = 0x7FFFFFFF
_U64 = 1 << 64


def do_rand(ctx: int) -> int:
    """Advance the state ``ctx`` and return the new state.

    The result lies in ``[0, 0x7ffffffd]`` and is also the next state.
    """
    x = (ctx % _U64) % 0x7FFFFFFE + 1
    hi, lo = divmod(x, 127773)
    x = 16807 * lo - 2836 * hi
    if x < 0:
        x += _MODULUS
    return x - 1


class ParkMiller:
    """A seeded stream of Park-Miller numbers."""

    def __init__(self, seed: int = 1) -> None:
        self.state = seed

    def rand(self) -> int:
        """Return the next number and advance the state."""
        self.state = do_rand(self.state)
        return self.state

    def __iter__(self) -> Iterator[int]:
        while True:
            yield self.rand()