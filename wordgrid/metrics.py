import logging
import time
from collections import Counter
from contextlib import contextmanager

logger = logging.getLogger("wordgrid")


def _ms(ns: int) -> float:
    return round(ns / 1_000_000, 1)


class StageTimer:
    """Wall-clock time per named stage of a load/solve run.

    Entering the same stage again adds to its total, so a loop of solves can
    share one timer.
    """

    def __init__(self):
        self._started_ns = time.perf_counter_ns()
        self._stage_ns: Counter[str] = Counter()
        self.runs: Counter[str] = Counter()

    @contextmanager
    def stage(self, name: str):
        t0 = time.perf_counter_ns()
        try:
            yield
        finally:
            spent = time.perf_counter_ns() - t0
            self._stage_ns[name] += spent
            self.runs[name] += 1
            logger.info("stage=%s elapsed=%.1fms", name, _ms(spent))

    @property
    def timings(self) -> dict[str, float]:
        return {name: _ms(ns) for name, ns in self._stage_ns.items()}

    def elapsed_ms(self, name: str) -> float:
        return _ms(self._stage_ns.get(name, 0))

    @property
    def total_ms(self) -> float:
        return _ms(time.perf_counter_ns() - self._started_ns)

    def summary(self) -> dict[str, float]:
        return {**self.timings, "total": self.total_ms}
