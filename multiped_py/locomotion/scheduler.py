import time


class TickScheduler:
    """
    Feeds a GaitGenerator with elapsed time read from a monotonic clock.

    The clock is injectable so tests can step time by hand.
    """

    def __init__(self, generator, clock=time.monotonic):
        self.generator = generator
        self._clock = clock
        self._last = None

    def tick(self, command=None):
        now = self._clock()
        dt = 0.0 if self._last is None else max(0.0, now - self._last)
        self._last = now
        return self.generator.update(dt, command)

    def reset(self):
        self._last = None
