"""Measurement and result models."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChannelLayout(str, Enum):
    """How sensor readings map onto accumulated channels."""

    # One channel per axis plus the Euclidean norm.
    TRIAD = "triad"
    # A single channel holding the norm of each reading.
    NORM = "norm"


class SensorAccuracy(IntEnum):
    """Accuracy reported by the sensor subsystem (platform numbering)."""

    UNRELIABLE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3


@dataclass(frozen=True)
class Sample:
    """One timestamped, accuracy-tagged set of channel readings."""

    values: tuple[float, ...]
    timestamp_nanos: int
    accuracy: SensorAccuracy = SensorAccuracy.HIGH


class SampleModel(BaseModel):
    """Validated measurement record (e.g. a replayed recording row).

    A record without values is an out-of-band accuracy change.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    timestamp_nanos: int = Field(ge=0)
    accuracy: SensorAccuracy = SensorAccuracy.HIGH
    values: tuple[float, ...] = ()

    @field_validator("accuracy", mode="before")
    @classmethod
    def _accuracy_by_name(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        text = value.strip()
        if text.isdigit():
            return int(text)
        try:
            return SensorAccuracy[text.upper()]
        except KeyError as exc:
            raise ValueError(f"Unknown accuracy {value!r}") from exc

    @property
    def is_accuracy_event(self) -> bool:
        return not self.values

    def to_sample(self) -> Sample:
        if self.is_accuracy_event:
            raise ValueError("Accuracy events carry no channel values")
        return Sample(values=self.values, timestamp_nanos=self.timestamp_nanos, accuracy=self.accuracy)


@dataclass(frozen=True)
class NoiseResult:
    """Frozen snapshot of a completed accumulation run.

    Per-channel tuples are indexed by channel. PSD values are expressed in
    squared measurement units times seconds; interval statistics in seconds.
    """

    averages: tuple[float, ...]
    variances: tuple[float, ...]
    standard_deviations: tuple[float, ...]
    psds: tuple[float, ...]
    root_psds: tuple[float, ...]
    average_norm: float
    norm_variance: float
    norm_standard_deviation: float
    average_standard_deviation: float
    average_noise_psd: float
    noise_root_psd_norm: float
    average_time_interval: float | None
    time_interval_variance: float | None
    time_interval_standard_deviation: float | None
    elapsed_nanos: int
    processed_count: int
    unreliable: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
