"""Noise estimator facade binding a measurement source to a session.

This module provides a single, discoverable entry point: the estimator owns the
source subscription, converts raw readings into accumulated channels and
forwards completion and reliability events to optional listeners.
"""

from __future__ import annotations

from typing import Callable

import logging
import math

from .characterization import ChannelNoiseAccumulator
from .config import AccumulationConfig, NoiseEstimatorSettings
from .intervals import TimeIntervalTracker
from .logging_utils import configure_logging
from .models import ChannelLayout, NoiseResult, Sample, SensorAccuracy
from .session import AccumulationSession, InvalidStateError
from .sources import MeasurementSource, enu_to_ned

EstimatorListener = Callable[["NoiseEstimator"], None]


class NoiseEstimator:
    """Estimate static sensor noise from a measurement source.

    Runs stop on their own when the session's stop policy is met: the source is
    detached first, then ``completed_listener`` is invoked with the estimator.
    An ``on_completed`` callback set on the injected session runs inside
    ``session.process()``, before the source is detached. An ``on_unreliable``
    callback set on the session is kept and runs before ``unreliable_listener``.
    """

    def __init__(
        self,
        source: MeasurementSource,
        session: AccumulationSession,
        completed_listener: EstimatorListener | None = None,
        unreliable_listener: EstimatorListener | None = None,
        layout: ChannelLayout = ChannelLayout.TRIAD,
        convert_to_ned: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self._source = source
        self._session = session
        self.completed_listener = completed_listener
        self.unreliable_listener = unreliable_listener
        self._layout = ChannelLayout(layout)
        self._convert_to_ned = convert_to_ned
        self._logger = logger or logging.getLogger(__name__)
        # A callback already set on the session keeps firing, ahead of unreliable_listener.
        self._session_unreliable = session.on_unreliable
        self._session.on_unreliable = self._handle_unreliable
        self._source.register(self._handle_sample, self._handle_accuracy_changed)

    @property
    def session(self) -> AccumulationSession:
        return self._session

    @property
    def layout(self) -> ChannelLayout:
        return self._layout

    @property
    def running(self) -> bool:
        return self._session.running

    @property
    def result_available(self) -> bool:
        return self._session.result_available

    @property
    def result_unreliable(self) -> bool:
        return self._session.result_unreliable

    @property
    def result(self) -> NoiseResult | None:
        return self._session.result

    @property
    def processed_count(self) -> int:
        return self._session.processed_count

    @property
    def elapsed_nanos(self) -> int:
        return self._session.elapsed_nanos

    def start(self) -> None:
        """Start accumulating measurements from the source.

        Raises:
            InvalidStateError: If already running or the source is unavailable.
                The session is left untouched in both cases.
        """

        if self._session.running:
            raise InvalidStateError("Estimator already running")
        if not self._source.start():
            self._logger.error("source_start_failed", extra={"source": self._source.__class__.__name__})
            raise InvalidStateError("Unavailable sensor")
        self._session.start()

    def stop(self) -> None:
        """Detach from the source; safe to call when not running."""

        if not self._session.running:
            return
        self._source.stop()
        self._session.stop()

    def reset(self) -> None:
        self._session.reset()

    def _channel_values(self, values: tuple[float, ...]) -> tuple[float, ...]:
        if self._convert_to_ned:
            values = enu_to_ned(values)
        if self._layout is ChannelLayout.NORM:
            return (math.sqrt(sum(value * value for value in values)),)
        return values

    def _handle_sample(self, sample: Sample) -> None:
        converted = Sample(
            values=self._channel_values(sample.values),
            timestamp_nanos=sample.timestamp_nanos,
            accuracy=sample.accuracy,
        )
        if self._session.process(converted):
            self._source.stop()
            if self.completed_listener is not None:
                self.completed_listener(self)

    def _handle_accuracy_changed(self, accuracy: SensorAccuracy) -> None:
        self._session.notify_accuracy(accuracy)

    def _handle_unreliable(self, session: AccumulationSession) -> None:
        if self._session_unreliable is not None:
            self._session_unreliable(session)
        if self.unreliable_listener is not None:
            self.unreliable_listener(self)


def build_session(
    config: AccumulationConfig,
    logger: logging.Logger | None = None,
) -> AccumulationSession:
    """Create a session whose channel count matches the configured layout."""

    channels = 1 if config.layout is ChannelLayout.NORM else 3
    return AccumulationSession(
        stop_mode=config.stop_mode,
        max_samples=config.max_samples,
        max_duration_millis=config.max_duration_millis,
        channels=ChannelNoiseAccumulator(channels),
        intervals=TimeIntervalTracker(),
        logger=logger,
    )


def build_noise_estimator(
    source: MeasurementSource,
    settings: NoiseEstimatorSettings | None = None,
    completed_listener: EstimatorListener | None = None,
    unreliable_listener: EstimatorListener | None = None,
    logger: logging.Logger | None = None,
) -> NoiseEstimator:
    """Create a NoiseEstimator with logging and defaults applied."""

    settings = settings or NoiseEstimatorSettings()
    configure_logging(settings.logging)

    config = settings.accumulation
    return NoiseEstimator(
        source,
        build_session(config, logger=logger),
        completed_listener=completed_listener,
        unreliable_listener=unreliable_listener,
        layout=config.layout,
        convert_to_ned=config.convert_to_ned,
        logger=logger,
    )
