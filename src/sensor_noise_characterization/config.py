"""Configuration management for noise estimation."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
import tomllib

from .models import ChannelLayout
from .stop_policy import DEFAULT_MAX_DURATION_MILLIS, DEFAULT_MAX_SAMPLES, StopMode


class LoggingConfig(BaseModel):
    """Logging configuration settings."""

    # Logging severity threshold (INFO/DEBUG/etc.).
    level: str = Field(default="INFO", description="Logging level")
    # Emit JSON if True; otherwise emit a human-readable format.
    json_format: bool = Field(default=True, description="Emit JSON logs")
    # Optional file path for log output; if None, logs go to stderr.
    log_file: str | None = Field(default=None, description="Optional log file path")
    # Maximum size (bytes) before log rotation.
    max_bytes: int = Field(default=1_000_000, description="Max log file size before rotation")
    # Number of backup files to retain.
    backup_count: int = Field(default=3, description="Number of rotated log files to keep")


class AccumulationConfig(BaseModel):
    """Stop policy and channel layout of an accumulation run."""

    stop_mode: StopMode = Field(default=StopMode.MAX_SAMPLES_OR_DURATION, description="Completion rule")
    # Only used by MAX_SAMPLES_ONLY and MAX_SAMPLES_OR_DURATION.
    max_samples: int = Field(default=DEFAULT_MAX_SAMPLES, gt=0, description="Samples before completion")
    # Only used by MAX_DURATION_ONLY and MAX_SAMPLES_OR_DURATION.
    max_duration_millis: int = Field(
        default=DEFAULT_MAX_DURATION_MILLIS, gt=0, description="Duration (ms) before completion"
    )
    layout: ChannelLayout = Field(default=ChannelLayout.TRIAD, description="Triad or norm-only channels")
    # Device readings arrive in ENU; set to accumulate local NED axes instead.
    convert_to_ned: bool = Field(default=False, description="Convert ENU triads to NED")


class NoiseEstimatorSettings(BaseSettings):
    """Configuration settings loaded from env or optional TOML."""

    # Environment keys use SNC_ prefix and "__" nesting.
    model_config = SettingsConfigDict(env_prefix="SNC_", env_nested_delimiter="__", extra="ignore")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    accumulation: AccumulationConfig = Field(default_factory=AccumulationConfig)

    @classmethod
    def from_toml(cls, path: str | Path) -> "NoiseEstimatorSettings":
        data = tomllib.loads(Path(path).read_text())
        return cls(**data)
