"""Accumulation session orchestrating noise statistics for one sensor.

The session is driven by a single producer: measurements and accuracy changes
are delivered one at a time, synchronously, in non-decreasing timestamp order.
Out-of-order delivery is a caller error and is not detected. Duration limits
are evaluated against sample timestamps, never against wall-clock time, so a
duration-bounded run only completes when samples keep arriving.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Protocol, Sequence

import logging

from .characterization import ChannelNoiseAccumulator
from .intervals import TimeIntervalTracker
from .models import NoiseResult, Sample, SensorAccuracy
from .stop_policy import DEFAULT_MAX_DURATION_MILLIS, DEFAULT_MAX_SAMPLES, StopMode, is_complete

NANOS_PER_SECOND = 1e9


class InvalidStateError(RuntimeError):
    """Raised when a lifecycle operation is not allowed in the current state."""


class SessionState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


class ChannelAccumulator(Protocol):
    """Protocol for per-channel noise accumulators."""

    time_interval: float | None

    @property
    def channels(self) -> int:
        """Number of channel values expected per reading."""

    def process(self, values: Sequence[float]) -> None:
        """Incorporate one reading."""

    def average(self, index: int) -> float | None: ...

    def variance(self, index: int) -> float | None: ...

    def standard_deviation(self, index: int) -> float | None: ...

    def psd(self, index: int) -> float | None: ...

    def root_psd(self, index: int) -> float | None: ...

    @property
    def average_norm(self) -> float | None: ...

    @property
    def norm_variance(self) -> float | None: ...

    @property
    def norm_standard_deviation(self) -> float | None: ...

    @property
    def average_standard_deviation(self) -> float | None: ...

    @property
    def average_noise_psd(self) -> float | None: ...

    @property
    def noise_root_psd_norm(self) -> float | None: ...

    def reset(self) -> None:
        """Discard all accumulated statistics."""


class IntervalTracker(Protocol):
    """Protocol for sampling interval trackers."""

    def configure(self, total_samples: int | None) -> None:
        """Set the sample ceiling (``None`` for unbounded)."""

    def add_interval(self, delta_seconds: float) -> None:
        """Incorporate one inter-sample interval."""

    @property
    def average_interval(self) -> float | None: ...

    @property
    def interval_variance(self) -> float | None: ...

    @property
    def interval_standard_deviation(self) -> float | None: ...

    def reset(self) -> None:
        """Discard all accumulated intervals."""


class AccumulationSession:
    """Accumulate samples until the configured stop policy is met.

    Lifecycle: ``IDLE -> RUNNING -> COMPLETED``; ``start()`` begins a new run
    from any state except ``RUNNING``, ``stop()`` abandons a running run and
    ``reset()`` discards accumulated data while preserving configuration.
    """

    def __init__(
        self,
        stop_mode: StopMode = StopMode.MAX_SAMPLES_OR_DURATION,
        max_samples: int = DEFAULT_MAX_SAMPLES,
        max_duration_millis: int = DEFAULT_MAX_DURATION_MILLIS,
        channels: ChannelAccumulator | None = None,
        intervals: IntervalTracker | None = None,
        on_completed: Callable[["AccumulationSession"], None] | None = None,
        on_unreliable: Callable[["AccumulationSession"], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Create the session.

        Args:
            stop_mode: Rule deciding when a run is complete.
            max_samples: Sample limit for sample-bounded modes.
            max_duration_millis: Duration limit for duration-bounded modes.
            channels: Channel accumulator (defaults to an x/y/z triad).
            intervals: Sampling interval tracker.
            on_completed: Invoked once per completed run.
            on_unreliable: Invoked when the result becomes unreliable.
            logger: Optional logger override.
        """

        if max_samples <= 0:
            raise ValueError("max_samples must be positive")
        if max_duration_millis <= 0:
            raise ValueError("max_duration_millis must be positive")
        self._stop_mode = StopMode(stop_mode)
        self._max_samples = max_samples
        self._max_duration_millis = max_duration_millis
        self._channels = channels if channels is not None else ChannelNoiseAccumulator()
        self._intervals = intervals if intervals is not None else TimeIntervalTracker()
        self.on_completed = on_completed
        self.on_unreliable = on_unreliable
        self._logger = logger or logging.getLogger(__name__)

        self._state = SessionState.IDLE
        self._initial_timestamp_nanos = 0
        self._end_timestamp_nanos = 0
        self._processed_count = 0
        self._result_unreliable = False
        self._result: NoiseResult | None = None
        self._clear()

    # Configuration

    @property
    def stop_mode(self) -> StopMode:
        return self._stop_mode

    @property
    def max_samples(self) -> int:
        return self._max_samples

    @property
    def max_duration_millis(self) -> int:
        return self._max_duration_millis

    @property
    def channels(self) -> ChannelAccumulator:
        return self._channels

    @property
    def intervals(self) -> IntervalTracker:
        return self._intervals

    # Lifecycle

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is SessionState.RUNNING

    @property
    def result_available(self) -> bool:
        return self._state is SessionState.COMPLETED

    @property
    def result_unreliable(self) -> bool:
        return self._result_unreliable

    def start(self) -> None:
        """Begin a new run, discarding any previous data."""

        if self._state is SessionState.RUNNING:
            raise InvalidStateError("Accumulation already running")
        self._clear()
        self._state = SessionState.RUNNING
        self._logger.info(
            "accumulation_started",
            extra={
                "stop_mode": self._stop_mode.value,
                "max_samples": self._max_samples,
                "max_duration_millis": self._max_duration_millis,
            },
        )

    def stop(self) -> None:
        """Abandon a running run; does nothing in any other state."""

        if self._state is not SessionState.RUNNING:
            return
        self._state = SessionState.IDLE
        self._logger.info("accumulation_stopped", extra={"processed_count": self._processed_count})

    def reset(self) -> None:
        """Discard accumulated data, keeping configuration and run state.

        A completed run returns to idle because its result is discarded.
        """

        self._clear()
        if self._state is SessionState.COMPLETED:
            self._state = SessionState.IDLE

    def _clear(self) -> None:
        self._channels.reset()
        self._intervals.reset()
        if self._stop_mode is StopMode.MAX_DURATION_ONLY:
            self._intervals.configure(None)
        else:
            self._intervals.configure(self._max_samples)
        self._initial_timestamp_nanos = 0
        self._end_timestamp_nanos = 0
        self._processed_count = 0
        self._result_unreliable = False
        self._result = None

    # Measurement handling

    def process(self, sample: Sample) -> bool:
        """Incorporate one sample.

        Returns:
            True if this sample completed the run. Samples delivered while the
            session is not running are ignored and return False.
        """

        if self._state is not SessionState.RUNNING:
            self._logger.debug(
                "sample_ignored",
                extra={"state": self._state.value, "timestamp_nanos": sample.timestamp_nanos},
            )
            return False

        # Channel values first: a malformed reading must not leave timestamps half-updated.
        self._channels.process(sample.values)

        timestamp = sample.timestamp_nanos
        if self._processed_count == 0:
            self._initial_timestamp_nanos = timestamp
        else:
            delta = (timestamp - self._end_timestamp_nanos) / NANOS_PER_SECOND
            self._intervals.add_interval(delta)
        self._end_timestamp_nanos = timestamp
        self._processed_count += 1
        # Keep live PSD values in step with the observed sampling rate.
        self._channels.time_interval = self._intervals.average_interval

        if sample.accuracy == SensorAccuracy.UNRELIABLE:
            self._mark_unreliable()

        if not is_complete(
            self._processed_count,
            self.elapsed_nanos,
            self._max_samples,
            self._max_duration_millis,
            self._stop_mode,
        ):
            return False

        self._complete()
        return True

    def notify_accuracy(self, accuracy: SensorAccuracy) -> None:
        """Handle an out-of-band accuracy change reported by the sensor."""

        if accuracy == SensorAccuracy.UNRELIABLE:
            self._mark_unreliable()

    def _mark_unreliable(self) -> None:
        if self._result_unreliable:
            return
        self._result_unreliable = True
        self._logger.warning(
            "result_unreliable",
            extra={"state": self._state.value, "processed_count": self._processed_count},
        )
        if self.on_unreliable is not None:
            self.on_unreliable(self)

    def _complete(self) -> None:
        # A single-sample run has no interval; its zero variance yields zero PSD.
        average_interval = self._intervals.average_interval
        self._channels.time_interval = average_interval if average_interval is not None else 0.0
        self._state = SessionState.COMPLETED
        self._result = self._snapshot()
        self._logger.info(
            "accumulation_completed",
            extra={
                "processed_count": self._processed_count,
                "elapsed_nanos": self.elapsed_nanos,
                "unreliable": self._result_unreliable,
            },
        )
        if self.on_completed is not None:
            self.on_completed(self)

    def _snapshot(self) -> NoiseResult:
        indices = range(self._channels.channels)
        return NoiseResult(
            averages=tuple(self._channels.average(i) for i in indices),
            variances=tuple(self._channels.variance(i) for i in indices),
            standard_deviations=tuple(self._channels.standard_deviation(i) for i in indices),
            psds=tuple(self._channels.psd(i) for i in indices),
            root_psds=tuple(self._channels.root_psd(i) for i in indices),
            average_norm=self._channels.average_norm,
            norm_variance=self._channels.norm_variance,
            norm_standard_deviation=self._channels.norm_standard_deviation,
            average_standard_deviation=self._channels.average_standard_deviation,
            average_noise_psd=self._channels.average_noise_psd,
            noise_root_psd_norm=self._channels.noise_root_psd_norm,
            average_time_interval=self._intervals.average_interval,
            time_interval_variance=self._intervals.interval_variance,
            time_interval_standard_deviation=self._intervals.interval_standard_deviation,
            elapsed_nanos=self.elapsed_nanos,
            processed_count=self._processed_count,
            unreliable=self._result_unreliable,
        )

    # Snapshot accessors

    @property
    def result(self) -> NoiseResult | None:
        """Frozen result of the completed run, or None."""

        return self._result if self._state is SessionState.COMPLETED else None

    @property
    def processed_count(self) -> int:
        return self._processed_count

    @property
    def initial_timestamp_nanos(self) -> int:
        return self._initial_timestamp_nanos

    @property
    def end_timestamp_nanos(self) -> int:
        return self._end_timestamp_nanos

    @property
    def elapsed_nanos(self) -> int:
        return self._end_timestamp_nanos - self._initial_timestamp_nanos

    @property
    def elapsed_seconds(self) -> float:
        return self.elapsed_nanos / NANOS_PER_SECOND

    def average(self, index: int) -> float | None:
        return self._channels.average(index)

    def variance(self, index: int) -> float | None:
        return self._channels.variance(index)

    def standard_deviation(self, index: int) -> float | None:
        return self._channels.standard_deviation(index)

    def psd(self, index: int) -> float | None:
        return self._channels.psd(index)

    def root_psd(self, index: int) -> float | None:
        return self._channels.root_psd(index)

    @property
    def average_norm(self) -> float | None:
        return self._channels.average_norm

    @property
    def norm_variance(self) -> float | None:
        return self._channels.norm_variance

    @property
    def norm_standard_deviation(self) -> float | None:
        return self._channels.norm_standard_deviation

    @property
    def average_standard_deviation(self) -> float | None:
        return self._channels.average_standard_deviation

    @property
    def average_noise_psd(self) -> float | None:
        return self._channels.average_noise_psd

    @property
    def noise_root_psd_norm(self) -> float | None:
        return self._channels.noise_root_psd_norm

    @property
    def average_time_interval(self) -> float | None:
        return self._intervals.average_interval

    @property
    def time_interval_variance(self) -> float | None:
        return self._intervals.interval_variance

    @property
    def time_interval_standard_deviation(self) -> float | None:
        return self._intervals.interval_standard_deviation
