"""Measurement sources feeding accumulation sessions.

Platform sensor access lives outside this package; anything that can deliver
timestamped readings implements :class:`MeasurementSource`. A replay source is
provided for recorded data and tests.
"""

from __future__ import annotations

from typing import Callable, Iterable, Protocol, Sequence

import logging

from pydantic import ValidationError

from .models import Sample, SampleModel, SensorAccuracy

SampleCallback = Callable[[Sample], None]
AccuracyCallback = Callable[[SensorAccuracy], None]


class MeasurementSource(Protocol):
    """Protocol for sensor measurement providers."""

    def register(self, on_sample: SampleCallback, on_accuracy_changed: AccuracyCallback) -> None:
        """Register the callbacks receiving measurements and accuracy changes."""

    def start(self) -> bool:
        """Begin delivering measurements; return False if unavailable."""

    def stop(self) -> None:
        """Stop delivering measurements."""


def enu_to_ned(values: Sequence[float]) -> tuple[float, float, float]:
    """Convert a device ENU triad to local NED coordinates."""

    if len(values) != 3:
        raise ValueError("ENU to NED conversion requires a triad")
    east, north, up = values
    return (north, east, -up)


def parse_sample_line(line: str) -> SampleModel | None:
    """Parse ``timestamp_nanos,accuracy[,v1,...,vn]``.

    Blank lines and ``#`` comments return None; a header row starting with
    ``timestamp`` is skipped the same way.
    """

    text = line.strip()
    if not text or text.startswith("#") or text.lower().startswith("timestamp"):
        return None
    fields = [field.strip() for field in text.split(",")]
    if len(fields) < 2:
        raise ValueError(f"Malformed sample line: {line!r}")
    try:
        return SampleModel(
            timestamp_nanos=fields[0],
            accuracy=fields[1],
            values=tuple(float(field) for field in fields[2:]),
        )
    except ValidationError as exc:
        raise ValueError(f"Invalid sample line {line!r}: {exc.errors()}") from exc


def load_records(lines: Iterable[str]) -> list[SampleModel]:
    records = []
    for line in lines:
        record = parse_sample_line(line)
        if record is not None:
            records.append(record)
    return records


class ReplayMeasurementSource:
    """Deliver recorded measurements synchronously.

    ``start()`` arms the source; ``replay()`` then pushes records to the
    registered callbacks until the recording is exhausted or ``stop()`` is
    called (typically by a completed estimator).
    """

    def __init__(self, records: Iterable[SampleModel], logger: logging.Logger | None = None) -> None:
        self._records = list(records)
        self._logger = logger or logging.getLogger(__name__)
        self._on_sample: SampleCallback | None = None
        self._on_accuracy_changed: AccuracyCallback | None = None
        self._active = False
        self._position = 0

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "ReplayMeasurementSource":
        return cls(load_records(lines))

    @property
    def active(self) -> bool:
        return self._active

    @property
    def remaining(self) -> int:
        return len(self._records) - self._position

    def register(self, on_sample: SampleCallback, on_accuracy_changed: AccuracyCallback) -> None:
        self._on_sample = on_sample
        self._on_accuracy_changed = on_accuracy_changed

    def start(self) -> bool:
        if self._on_sample is None or not self.remaining:
            return False
        self._active = True
        return True

    def stop(self) -> None:
        self._active = False

    def replay(self) -> int:
        """Deliver pending records; return how many were delivered."""

        delivered = 0
        while self._active and self._position < len(self._records):
            record = self._records[self._position]
            self._position += 1
            delivered += 1
            if record.is_accuracy_event:
                if self._on_accuracy_changed is not None:
                    self._on_accuracy_changed(record.accuracy)
            else:
                self._on_sample(record.to_sample())
        if self._position >= len(self._records):
            self._active = False
        self._logger.debug("replay_finished", extra={"delivered": delivered, "remaining": self.remaining})
        return delivered


def open_replay_file(path: str) -> ReplayMeasurementSource:
    """Create a replay source from a recording file."""

    with open(path, "r", encoding="utf-8") as stream:
        return ReplayMeasurementSource.from_lines(stream)
