"""Sampling interval tracking."""

from __future__ import annotations

from .characterization import RunningStatistic


class TimeIntervalTracker:
    """Accumulate inter-sample time deltas (seconds).

    The sample ceiling is a sizing hint only: it is exposed through
    :attr:`is_full` but never stops accumulation.
    """

    def __init__(self, total_samples: int | None = None) -> None:
        self._stats = RunningStatistic()
        self._total_samples = total_samples

    @property
    def total_samples(self) -> int | None:
        """Configured ceiling, or ``None`` when unbounded."""

        return self._total_samples

    def configure(self, total_samples: int | None) -> None:
        if total_samples is not None and total_samples <= 0:
            raise ValueError("total_samples must be positive")
        self._total_samples = total_samples

    def add_interval(self, delta_seconds: float) -> None:
        self._stats.update(delta_seconds)

    @property
    def count(self) -> int:
        return self._stats.count

    @property
    def is_full(self) -> bool:
        if self._total_samples is None:
            return False
        return self._stats.count >= self._total_samples

    @property
    def average_interval(self) -> float | None:
        return self._stats.mean

    @property
    def interval_variance(self) -> float | None:
        return self._stats.variance

    @property
    def interval_standard_deviation(self) -> float | None:
        return self._stats.standard_deviation

    def reset(self) -> None:
        self._stats.reset()
