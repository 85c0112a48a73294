"""Deterministic random source for tests and scripted playthroughs."""

import random
from collections.abc import Iterable, Sequence
from typing import Any


# ---------------------------------------------------------------------------
# ScriptedRandom: replays queued draws, falls back to a seeded generator
# ---------------------------------------------------------------------------

class ScriptedRandom(random.Random):
    """random.Random whose draws can be pinned.

    ``values`` feed random() (and therefore uniform()); ``picks`` are
    indices consumed by choice(). Once a queue runs dry the seeded
    generator takes over, so unpinned draws stay reproducible.
    """

    def __init__(self, values: Iterable[float] = (), picks: Iterable[int] = (), seed: int = 0) -> None:
        super().__init__(seed)
        self.values = list(values)
        self.picks = list(picks)

    def random(self) -> float:
        if self.values:
            return self.values.pop(0)
        return super().random()

    def getrandbits(self, k: int) -> int:
        # Defined here so shuffle() and unpinned choice() draw from the
        # seeded bit stream instead of consuming scripted random() values
        return super().getrandbits(k)

    def choice(self, seq: Sequence[Any]) -> Any:
        if self.picks:
            return seq[self.picks.pop(0)]
        return super().choice(seq)
