import random
from typing import Any, Sequence

from seasonfx.logger import get_logger

log = get_logger("rng")


class RNGService:
    """Shared random source for particle construction.

    Unseeded in the running app; tests seed it (or pass their own
    instance) so sampled parameters can be pinned.
    """

    _instance: "RNGService | None" = None

    def __init__(self, seed: int | float | str | bytes | bytearray | None = None):
        self._generator = random.Random(seed)
        log.debug(f"RNG initialized with seed: {seed!r}")

    @classmethod
    def get(cls) -> "RNGService":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def seed(self, a: int | float | str | bytes | bytearray | None = None) -> None:
        self._generator.seed(a)

    def random(self) -> float:
        """Return the next random floating point number in the range [0.0, 1.0)."""
        return self._generator.random()

    def uniform(self, a: float, b: float) -> float:
        """Return a random floating point number N such that a <= N <= b for a <= b."""
        return self._generator.uniform(a, b)

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        return self._generator.randint(a, b)

    def chance(self, probability: float) -> bool:
        """True with the given probability; used for kind splits."""
        return self._generator.random() < probability

    def choice(self, seq: Sequence[Any]) -> Any:
        return self._generator.choice(seq)
