"""A 48-bit linear congruential generator matching the rand48 family."""

from __future__ import annotations

INT_MAX = 2**31 - 1

_MULTIPLIER = 0x5DEECE66D
_INCREMENT = 0xB
_MASK = (1 << 48) - 1
_SEED_LOW = 0x330E

DEFAULT_SEED = 1


class Rand48:
    """Deterministic pseudo-random source with the rand48 recurrence.

    Given the same seed it produces the same sequence as the classic
    ``srand48``/``lrand48`` pair, so clustering runs are reproducible.
    """

    def __init__(self, seed: int = DEFAULT_SEED) -> None:
        self._state = 0
        self.seed(seed)

    def seed(self, seed: int) -> None:
        """Reset the generator; only the low 32 bits of ``seed`` are used."""
        self._state = (((seed & 0xFFFFFFFF) << 16) | _SEED_LOW) & _MASK

    def _step(self) -> int:
        self._state = (_MULTIPLIER * self._state + _INCREMENT) & _MASK
        return self._state

    def lrand48(self) -> int:
        """Return a non-negative integer uniformly drawn from [0, 2**31)."""
        return self._step() >> 17

    def uniform(self) -> float:
        """Return ``lrand48() / INT_MAX``, a value in [0, 1]."""
        return self.lrand48() / INT_MAX