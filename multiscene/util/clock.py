"""A system to measure frame time."""

import statistics
import time
from collections import deque

from multiscene.config import FPS_SAMPLE_SIZE
from multiscene.types import DeltaTime


class Clock:
    """Measure wall-clock time between frames and track framerate.

    The first tick after construction reports a delta of zero so the
    animation does not jump by however long startup took. Every later delta
    is the real elapsed time, so motion stays independent of frame rate.
    """

    def __init__(self) -> None:
        self.last_time: float | None = None
        self.time_samples: deque[float] = deque(maxlen=FPS_SAMPLE_SIZE)

    def tick(self) -> DeltaTime:
        """Measures the time since the last tick and returns the delta."""
        current_time = time.perf_counter()
        if self.last_time is None:
            self.last_time = current_time
            return DeltaTime(0.0)

        # perf_counter is monotonic; the clamp only guards patched clocks.
        delta_time = DeltaTime(max(0.0, current_time - self.last_time))
        self.last_time = current_time
        self.time_samples.append(delta_time)
        return delta_time

    @property
    def last_fps(self) -> float:
        """The FPS of the most recent frame."""
        if not self.time_samples or self.time_samples[-1] == 0:
            return 0
        return 1 / self.time_samples[-1]

    @property
    def mean_fps(self) -> float:
        """The FPS of the sampled frames overall."""
        if not self.time_samples:
            return 0
        try:
            return 1 / statistics.fmean(self.time_samples)
        except ZeroDivisionError:
            return 0
