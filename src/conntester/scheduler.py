import logging
import math
import threading
import time
from typing import Callable, Optional
from .domain.models import ProbeResult

logger = logging.getLogger("conntester")

MIN_REPEAT_INTERVAL = 0.001
DEFAULT_REPEAT_INTERVAL = 1.0

def resolve_interval(repeat: Optional[float]) -> Optional[float]:
    """
    Maps the raw repeat setting onto a tick period.
    None, zero, negative and NaN disable repetition. Anything between 0 and 1ms is
    taken as "repeat with the default period" rather than a real interval.
    """
    if repeat is None or not repeat > 0:
        return None
    if repeat < MIN_REPEAT_INTERVAL:
        return DEFAULT_REPEAT_INTERVAL
    return float(repeat)

def run_once(cycle: Callable[[], ProbeResult]) -> int:
    """Single-shot mode. Exit code follows the connection step only."""
    result = cycle()
    return 0 if result.success else 1

class Scheduler:
    """
    Fixed-period ticker running one synchronous probe cycle per tick.

    The first cycle fires one interval after `run_forever` starts. A cycle that
    overruns its slot makes the next tick fire late; missed ticks are dropped,
    never queued, so cycles can not overlap.
    """
    def __init__(
        self,
        cycle: Callable[[], ProbeResult],
        interval: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if not 0 < interval < math.inf:
            raise ValueError(f"interval must be positive and finite, got {interval}")
        self.cycle = cycle
        self.interval = interval
        self._clock = clock
        self._stop = threading.Event()
        self.ticks = 0

    def stop(self) -> None:
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def run_forever(self) -> None:
        next_tick = self._clock() + self.interval
        while not self._stop.wait(max(0.0, next_tick - self._clock())):
            self.ticks += 1
            try:
                self.cycle()
            except Exception:
                # the loop outlives any single cycle
                logger.exception("Probe cycle raised unexpectedly")

            next_tick += self.interval
            now = self._clock()
            if next_tick <= now:
                next_tick = now
