"""Completion rules for accumulation runs."""

from __future__ import annotations

from enum import Enum

NANOS_PER_MILLI = 1_000_000

DEFAULT_MAX_SAMPLES = 1000
DEFAULT_MAX_DURATION_MILLIS = 20_000


class StopMode(str, Enum):
    """Determines when an accumulation run is considered complete."""

    MAX_SAMPLES_ONLY = "max_samples_only"
    MAX_DURATION_ONLY = "max_duration_only"
    MAX_SAMPLES_OR_DURATION = "max_samples_or_duration"


def is_complete(
    processed_count: int,
    elapsed_nanos: int,
    max_samples: int,
    max_duration_millis: int,
    mode: StopMode,
) -> bool:
    """Return True once the run described by the arguments must stop.

    The duration limit is inclusive: a run whose elapsed time equals
    ``max_duration_millis`` is complete.
    """

    mode = StopMode(mode)
    if processed_count <= 0:
        return False
    samples_reached = processed_count >= max_samples
    duration_reached = elapsed_nanos >= max_duration_millis * NANOS_PER_MILLI
    if mode is StopMode.MAX_SAMPLES_ONLY:
        return samples_reached
    if mode is StopMode.MAX_DURATION_ONLY:
        return duration_reached
    if mode is StopMode.MAX_SAMPLES_OR_DURATION:
        return samples_reached or duration_reached
    raise ValueError(f"Unknown stop mode {mode}")
