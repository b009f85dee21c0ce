"""Streaming noise characterization for motion-sensor channels.

Statistics are accumulated in a single pass with Welford's update so that exact
mean and population variance are available without storing sample history.
Noise power spectral density is derived under a white-noise assumption: a flat
spectrum sampled every ``dt`` seconds has ``PSD = variance * dt``.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Sequence


@dataclass
class RunningStatistic:
    """Online mean/variance estimator.

    Attributes:
        count: Number of observations incorporated so far.
        running_mean: Current mean (meaningless while ``count == 0``).
        m2: Sum of squared deviations from the mean.
    """

    count: int = 0
    running_mean: float = 0.0
    m2: float = 0.0

    def update(self, value: float) -> None:
        self.count += 1
        delta = value - self.running_mean
        self.running_mean += delta / self.count
        delta2 = value - self.running_mean
        self.m2 += delta * delta2

    @property
    def mean(self) -> float | None:
        if self.count == 0:
            return None
        return self.running_mean

    @property
    def variance(self) -> float | None:
        """Population variance (not Bessel-corrected)."""

        if self.count == 0:
            return None
        return self.m2 / self.count

    @property
    def standard_deviation(self) -> float | None:
        variance = self.variance
        if variance is None:
            return None
        return math.sqrt(variance)

    def reset(self) -> None:
        self.count = 0
        self.running_mean = 0.0
        self.m2 = 0.0


class ChannelNoiseAccumulator:
    """Track per-channel noise statistics for one sensor.

    A single-channel accumulator is used by norm estimators: the one channel
    already holds the measurement norm. With more channels (typically an x/y/z
    triad) an additional statistic tracks the Euclidean norm of each reading.
    """

    def __init__(self, channels: int = 3) -> None:
        if channels <= 0:
            raise ValueError("channels must be positive")
        self._channels = channels
        self._stats = [RunningStatistic() for _ in range(channels)]
        self._norm = RunningStatistic() if channels > 1 else self._stats[0]
        # Average sampling interval (seconds) used to derive PSD values.
        self.time_interval: float | None = None

    @property
    def channels(self) -> int:
        return self._channels

    @property
    def count(self) -> int:
        return self._stats[0].count

    def process(self, values: Sequence[float]) -> None:
        """Incorporate one reading; ``values`` must hold one value per channel."""

        if len(values) != self._channels:
            raise ValueError(f"Expected {self._channels} channel values, got {len(values)}")
        for stats, value in zip(self._stats, values):
            stats.update(value)
        if self._channels > 1:
            self._norm.update(math.sqrt(sum(value * value for value in values)))

    def statistic(self, index: int) -> RunningStatistic:
        return self._stats[index]

    def average(self, index: int) -> float | None:
        return self._stats[index].mean

    def variance(self, index: int) -> float | None:
        return self._stats[index].variance

    def standard_deviation(self, index: int) -> float | None:
        return self._stats[index].standard_deviation

    @property
    def average_norm(self) -> float | None:
        return self._norm.mean

    @property
    def norm_variance(self) -> float | None:
        return self._norm.variance

    @property
    def norm_standard_deviation(self) -> float | None:
        return self._norm.standard_deviation

    @property
    def average_standard_deviation(self) -> float | None:
        """Mean of the per-channel standard deviations."""

        if self.count == 0:
            return None
        return sum(stats.standard_deviation for stats in self._stats) / self._channels

    def psd(self, index: int) -> float | None:
        """Noise power spectral density of a channel (unit^2 * s)."""

        variance = self._stats[index].variance
        if variance is None or self.time_interval is None:
            return None
        return variance * self.time_interval

    def root_psd(self, index: int) -> float | None:
        psd = self.psd(index)
        if psd is None:
            return None
        return math.sqrt(psd)

    @property
    def average_noise_psd(self) -> float | None:
        psds = [self.psd(index) for index in range(self._channels)]
        if psds[0] is None:
            return None
        return sum(psds) / self._channels

    @property
    def noise_root_psd_norm(self) -> float | None:
        """Euclidean norm of the per-channel root PSD values."""

        psds = [self.psd(index) for index in range(self._channels)]
        if psds[0] is None:
            return None
        return math.sqrt(sum(psds))

    def reset(self) -> None:
        for stats in self._stats:
            stats.reset()
        if self._channels > 1:
            self._norm.reset()
        self.time_interval = None
