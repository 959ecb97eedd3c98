from accessibility import (
    accuracy_band,
    calculate_accuracy,
    calculate_average_time,
    format_time,
    format_time_verbose,
    time_band,
)


def test_format_time():
    assert format_time(0) == "0:00"
    assert format_time(125) == "2:05"
    assert format_time_verbose(45) == "45s"
    assert format_time_verbose(125) == "2m 5s"


def test_time_band():
    assert time_band(30, 120) == "comfortable"
    assert time_band(70, 120) == "on-pace"
    assert time_band(100, 120) == "rushed"
    assert time_band(120, 120) == "over-time"


def test_accuracy_band():
    assert accuracy_band(0.95) == "excellent"
    assert accuracy_band(0.7) == "good"
    assert accuracy_band(0.5) == "fair"
    assert accuracy_band(0.2) == "needs-work"


def test_averages():
    assert calculate_average_time([]) == 0
    assert calculate_average_time([1, 2]) == 2
    assert calculate_average_time([10, 20, 40]) == 23
    assert calculate_accuracy(0, 0) == 0.0
    assert calculate_accuracy(3, 4) == 0.75
