import math

import pytest

from sensor_noise_characterization.characterization import ChannelNoiseAccumulator, RunningStatistic


def test_running_statistic_empty_has_no_values() -> None:
    stats = RunningStatistic()
    assert stats.mean is None
    assert stats.variance is None
    assert stats.standard_deviation is None


def test_running_statistic_population_variance() -> None:
    stats = RunningStatistic()
    for value in [2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0]:
        stats.update(value)
    assert stats.count == 8
    assert stats.mean == pytest.approx(5.0)
    # Population form: m2 / n, not m2 / (n - 1).
    assert stats.variance == pytest.approx(4.0)
    assert stats.standard_deviation == pytest.approx(2.0)


def test_running_statistic_constant_values_have_zero_variance() -> None:
    for count in (1, 2, 25):
        stats = RunningStatistic()
        for _ in range(count):
            stats.update(0.137)
        assert stats.variance == 0.0
        assert stats.standard_deviation == 0.0


def test_running_statistic_reset() -> None:
    stats = RunningStatistic()
    stats.update(1.0)
    stats.update(3.0)
    stats.reset()
    assert stats.count == 0
    assert stats.mean is None


def test_running_statistic_propagates_nan() -> None:
    stats = RunningStatistic()
    stats.update(1.0)
    stats.update(float("nan"))
    assert math.isnan(stats.mean)
    assert math.isnan(stats.variance)


def test_triad_norm_of_constant_readings() -> None:
    accumulator = ChannelNoiseAccumulator(3)
    for _ in range(10):
        accumulator.process((3.0, 4.0, 0.0))
    assert accumulator.average_norm == 5.0
    assert accumulator.norm_variance == 0.0
    assert [accumulator.variance(i) for i in range(3)] == [0.0, 0.0, 0.0]
    assert accumulator.average(0) == 3.0
    assert accumulator.average(1) == 4.0


def test_accumulator_rejects_wrong_channel_count() -> None:
    accumulator = ChannelNoiseAccumulator(3)
    with pytest.raises(ValueError):
        accumulator.process((1.0, 2.0))
    assert accumulator.count == 0


def test_accumulator_requires_channels() -> None:
    with pytest.raises(ValueError):
        ChannelNoiseAccumulator(0)


def test_psd_requires_time_interval() -> None:
    accumulator = ChannelNoiseAccumulator(3)
    accumulator.process((1.0, 0.0, 0.0))
    accumulator.process((-1.0, 0.0, 0.0))
    assert accumulator.psd(0) is None
    assert accumulator.noise_root_psd_norm is None

    accumulator.time_interval = 0.01
    assert accumulator.variance(0) == pytest.approx(1.0)
    assert accumulator.psd(0) == pytest.approx(0.01)
    assert accumulator.root_psd(0) == pytest.approx(0.1)
    assert accumulator.psd(1) == 0.0
    assert accumulator.average_noise_psd == pytest.approx(0.01 / 3)
    assert accumulator.noise_root_psd_norm == pytest.approx(0.1)


def test_average_standard_deviation_is_mean_of_channels() -> None:
    accumulator = ChannelNoiseAccumulator(3)
    accumulator.process((1.0, 2.0, 0.0))
    accumulator.process((-1.0, -2.0, 0.0))
    # Per-channel standard deviations are 1, 2 and 0.
    assert accumulator.average_standard_deviation == pytest.approx(1.0)


def test_single_channel_is_its_own_norm() -> None:
    accumulator = ChannelNoiseAccumulator(1)
    for value in [9.7, 9.9]:
        accumulator.process((value,))
    assert accumulator.average_norm == pytest.approx(9.8)
    assert accumulator.norm_variance == pytest.approx(accumulator.variance(0))

    accumulator.time_interval = 0.02
    assert accumulator.noise_root_psd_norm == pytest.approx(accumulator.root_psd(0))


def test_accumulator_reset_clears_interval() -> None:
    accumulator = ChannelNoiseAccumulator(3)
    accumulator.process((1.0, 1.0, 1.0))
    accumulator.time_interval = 0.02
    accumulator.reset()
    assert accumulator.count == 0
    assert accumulator.average_norm is None
    assert accumulator.time_interval is None
    assert accumulator.average_standard_deviation is None
