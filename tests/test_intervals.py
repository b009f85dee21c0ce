import pytest

from sensor_noise_characterization.intervals import TimeIntervalTracker


def test_interval_statistics() -> None:
    tracker = TimeIntervalTracker()
    assert tracker.average_interval is None
    for delta in [0.01, 0.03]:
        tracker.add_interval(delta)
    assert tracker.average_interval == pytest.approx(0.02)
    assert tracker.interval_variance == pytest.approx(1e-4)
    assert tracker.interval_standard_deviation == pytest.approx(0.01)


def test_unbounded_tracker_is_never_full() -> None:
    tracker = TimeIntervalTracker()
    tracker.configure(None)
    for _ in range(100):
        tracker.add_interval(0.02)
    assert not tracker.is_full


def test_ceiling_does_not_stop_accumulation() -> None:
    tracker = TimeIntervalTracker(total_samples=2)
    tracker.add_interval(0.02)
    assert not tracker.is_full
    tracker.add_interval(0.02)
    assert tracker.is_full
    tracker.add_interval(0.02)
    assert tracker.count == 3


def test_reset_keeps_ceiling() -> None:
    tracker = TimeIntervalTracker()
    tracker.configure(10)
    tracker.add_interval(0.5)
    tracker.reset()
    assert tracker.count == 0
    assert tracker.average_interval is None
    assert tracker.total_samples == 10


def test_configure_rejects_non_positive_ceiling() -> None:
    tracker = TimeIntervalTracker()
    with pytest.raises(ValueError):
        tracker.configure(0)
