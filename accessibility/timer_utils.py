"""
Timer helpers for practice sessions.
"""

from typing import Literal, Sequence

TimeBand = Literal["comfortable", "on-pace", "rushed", "over-time"]
AccuracyBand = Literal["excellent", "good", "fair", "needs-work"]


def format_time(seconds: int) -> str:
    mins, secs = divmod(int(seconds), 60)
    return f"{mins}:{secs:02d}"


def format_time_verbose(seconds: int) -> str:
    mins, secs = divmod(int(seconds), 60)
    if mins == 0:
        return f"{secs}s"
    return f"{mins}m {secs}s"


def time_band(seconds: float, target_seconds: float) -> TimeBand:
    """Classify elapsed time against a target (the UI colours these green to red)."""
    ratio = seconds / target_seconds
    if ratio < 0.5:
        return "comfortable"
    if ratio < 0.8:
        return "on-pace"
    if ratio < 1.0:
        return "rushed"
    return "over-time"


def accuracy_band(accuracy: float) -> AccuracyBand:
    if accuracy >= 0.9:
        return "excellent"
    if accuracy >= 0.7:
        return "good"
    if accuracy >= 0.5:
        return "fair"
    return "needs-work"


def calculate_average_time(times: Sequence[float]) -> int:
    if not times:
        return 0
    # Half-up rounding to whole seconds
    return int(sum(times) / len(times) + 0.5)


def calculate_accuracy(correct: int, total: int) -> float:
    if total == 0:
        return 0.0
    return correct / total
