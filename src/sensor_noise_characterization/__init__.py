"""Top-level package for streaming motion-sensor noise characterization."""

from .characterization import ChannelNoiseAccumulator, RunningStatistic
from .config import AccumulationConfig, LoggingConfig, NoiseEstimatorSettings
from .estimator import NoiseEstimator, build_noise_estimator, build_session
from .intervals import TimeIntervalTracker
from .logging_utils import JsonFormatter, configure_logging
from .models import ChannelLayout, NoiseResult, Sample, SampleModel, SensorAccuracy
from .session import (
    AccumulationSession,
    ChannelAccumulator,
    IntervalTracker,
    InvalidStateError,
    SessionState,
)
from .sources import (
    MeasurementSource,
    ReplayMeasurementSource,
    enu_to_ned,
    load_records,
    open_replay_file,
    parse_sample_line,
)
from .stop_policy import DEFAULT_MAX_DURATION_MILLIS, DEFAULT_MAX_SAMPLES, StopMode, is_complete

__all__ = [
    "RunningStatistic",
    "ChannelNoiseAccumulator",
    "TimeIntervalTracker",
    "StopMode",
    "is_complete",
    "DEFAULT_MAX_SAMPLES",
    "DEFAULT_MAX_DURATION_MILLIS",
    "AccumulationSession",
    "ChannelAccumulator",
    "IntervalTracker",
    "InvalidStateError",
    "SessionState",
    "Sample",
    "SampleModel",
    "SensorAccuracy",
    "ChannelLayout",
    "NoiseResult",
    "MeasurementSource",
    "ReplayMeasurementSource",
    "enu_to_ned",
    "load_records",
    "open_replay_file",
    "parse_sample_line",
    "NoiseEstimator",
    "build_noise_estimator",
    "build_session",
    "AccumulationConfig",
    "LoggingConfig",
    "NoiseEstimatorSettings",
    "JsonFormatter",
    "configure_logging",
]
