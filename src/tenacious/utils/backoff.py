"""Exponential backoff with jitter for retried API calls."""

import random


class Backoff:
    """Per-call backoff state.

    Each call to :meth:`duration` returns the wait for the current attempt
    and advances the attempt counter. Instances hold their own random
    source and must not be shared between calls.
    """

    def __init__(
        self,
        minimum: float = 0.1,
        maximum: float = 60.0,
        factor: float = 1.5,
        jitter: bool = True,
        rng: random.Random | None = None,
    ):
        """Initialize backoff state.

        Args:
            minimum: Shortest wait in seconds.
            maximum: Longest wait in seconds.
            factor: Growth factor applied per attempt.
            jitter: Randomize each wait between ``minimum`` and the computed bound.
            rng: Random source; a fresh OS-seeded one is created if omitted.
        """
        self.minimum = minimum
        self.maximum = maximum
        self.factor = factor
        self.jitter = jitter
        self.attempt = 0
        self._rng = rng or random.Random()

    def duration(self) -> float:
        """Return the wait for the current attempt and advance the counter."""
        try:
            bound = self.minimum * self.factor**self.attempt
        except OverflowError:
            bound = self.maximum
        self.attempt += 1

        capped = max(self.minimum, min(self.maximum, bound))
        if self.jitter:
            return self.minimum + self._rng.random() * (capped - self.minimum)
        return capped
