import pytest

from sensor_noise_characterization.models import Sample, SensorAccuracy
from sensor_noise_characterization.sources import ReplayMeasurementSource, enu_to_ned, parse_sample_line


def test_parse_sample_line_with_named_accuracy() -> None:
    record = parse_sample_line("1000, high, 0.1, -0.2, 9.8\n")
    assert record.timestamp_nanos == 1000
    assert record.accuracy is SensorAccuracy.HIGH
    assert record.to_sample() == Sample(values=(0.1, -0.2, 9.8), timestamp_nanos=1000)


def test_parse_sample_line_with_numeric_accuracy() -> None:
    record = parse_sample_line("5,0")
    assert record.accuracy is SensorAccuracy.UNRELIABLE
    assert record.is_accuracy_event
    with pytest.raises(ValueError):
        record.to_sample()


def test_parse_sample_line_skips_headers_and_comments() -> None:
    assert parse_sample_line("timestamp_nanos,accuracy,x,y,z") is None
    assert parse_sample_line("# recorded at rest") is None
    assert parse_sample_line("   ") is None


def test_parse_sample_line_rejects_invalid_rows() -> None:
    with pytest.raises(ValueError):
        parse_sample_line("1000")
    with pytest.raises(ValueError):
        parse_sample_line("-5,HIGH,1.0")
    with pytest.raises(ValueError):
        parse_sample_line("5,SUPERB,1.0")


def test_replay_delivers_samples_and_accuracy_events() -> None:
    source = ReplayMeasurementSource.from_lines(["0,HIGH,1.0", "10,LOW", "20,HIGH,2.0"])
    samples: list[Sample] = []
    accuracies: list[SensorAccuracy] = []
    source.register(samples.append, accuracies.append)

    assert source.start()
    assert source.replay() == 3
    assert [sample.values for sample in samples] == [(1.0,), (2.0,)]
    assert accuracies == [SensorAccuracy.LOW]
    assert not source.active


def test_replay_halts_when_stopped() -> None:
    source = ReplayMeasurementSource.from_lines([f"{i},HIGH,1.0" for i in range(5)])
    samples: list[Sample] = []

    def on_sample(sample: Sample) -> None:
        samples.append(sample)
        if len(samples) == 2:
            source.stop()

    source.register(on_sample, lambda accuracy: None)
    source.start()
    assert source.replay() == 2
    assert source.remaining == 3


def test_replay_start_fails_without_records_or_listener() -> None:
    empty = ReplayMeasurementSource([])
    empty.register(lambda sample: None, lambda accuracy: None)
    assert not empty.start()

    unregistered = ReplayMeasurementSource.from_lines(["0,HIGH,1.0"])
    assert not unregistered.start()


def test_enu_to_ned() -> None:
    assert enu_to_ned((1.0, 2.0, 3.0)) == (2.0, 1.0, -3.0)
    with pytest.raises(ValueError):
        enu_to_ned((1.0, 2.0))
