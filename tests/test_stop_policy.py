from sensor_noise_characterization.stop_policy import StopMode, is_complete

SECOND = 1_000_000_000


def test_samples_only_ignores_duration() -> None:
    assert not is_complete(2, 10 * SECOND, 3, 1000, StopMode.MAX_SAMPLES_ONLY)
    assert is_complete(3, 0, 3, 1000, StopMode.MAX_SAMPLES_ONLY)
    assert is_complete(4, 0, 3, 1000, StopMode.MAX_SAMPLES_ONLY)


def test_duration_only_is_inclusive() -> None:
    assert not is_complete(500, SECOND - 1, 3, 1000, StopMode.MAX_DURATION_ONLY)
    assert is_complete(3, SECOND, 3, 1000, StopMode.MAX_DURATION_ONLY)


def test_samples_or_duration_triggers_on_either() -> None:
    mode = StopMode.MAX_SAMPLES_OR_DURATION
    assert not is_complete(2, SECOND // 2, 3, 1000, mode)
    assert is_complete(3, SECOND // 2, 3, 1000, mode)
    assert is_complete(2, SECOND, 3, 1000, mode)


def test_never_complete_before_first_sample() -> None:
    for mode in StopMode:
        assert not is_complete(0, 0, 1, 1, mode)


def test_mode_accepts_string_values() -> None:
    assert is_complete(3, 0, 3, 1000, "max_samples_only")
    assert not is_complete(3, 0, 3, 1000, "max_duration_only")
