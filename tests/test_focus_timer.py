import pytest

from accessibility import AppSettings, FocusTimer, format_clock


def short_settings(**adhd):
    settings = AppSettings()
    settings.adhd.break_interval_minutes = 1
    settings.adhd.break_duration_minutes = 1
    for key, value in adhd.items():
        setattr(settings.adhd, key, value)
    return settings


@pytest.fixture
def notes():
    return []


@pytest.fixture
def timer(notes):
    return FocusTimer(short_settings(), notify=lambda message, description: notes.append((message, description)))


def test_format_clock():
    assert format_clock(0) == "00:00"
    assert format_clock(65) == "01:05"
    assert format_clock(-5) == "00:00"


def test_initial_state(timer):
    assert timer.seconds_left == 60
    assert timer.is_running is False
    assert timer.progress == 0
    assert timer.formatted == "01:00"


def test_start_pause_announcements(timer):
    assert timer.start_pause() == "Timer started. 01:00 remaining."
    assert timer.is_running is True
    assert timer.start_pause() == "Timer paused"
    assert timer.is_running is False


def test_tick_only_counts_while_running(timer):
    timer.tick(10)
    assert timer.seconds_left == 60

    timer.start_pause()
    timer.tick(30)
    assert timer.formatted == "00:30"
    assert timer.progress == pytest.approx(50.0)


def test_work_completion_starts_break(timer, notes):
    timer.start_pause()
    timer.tick(60)

    assert timer.sessions_completed == 1
    assert timer.is_break is True
    assert timer.is_running is True
    assert timer.seconds_left == 60
    assert notes[-1] == ("Great work! Time for a break.", "You've completed 1 focus session today.")


def test_break_completion_returns_to_stopped_work(timer, notes):
    timer.start_pause()
    timer.tick(120)

    assert timer.is_break is False
    assert timer.is_running is False
    assert timer.seconds_left == 60
    assert notes[-1][0] == "Break complete! Ready to focus?"


def test_break_does_not_autostart_without_reminders(notes):
    timer = FocusTimer(short_settings(break_reminders=False), notify=lambda m, d: notes.append(m))
    timer.start_pause()
    timer.tick(60)

    assert timer.is_break is True
    assert timer.is_running is False


def test_skip_counts_sessions_with_plural_message(timer, notes):
    timer.skip()
    timer.skip()
    timer.skip()

    assert timer.sessions_completed == 2
    assert notes[-1][1] == "You've completed 2 focus sessions today."


def test_reset_restores_phase_length(timer, notes):
    timer.start_pause()
    timer.tick(15)
    timer.reset()

    assert timer.seconds_left == 60
    assert timer.is_running is False
    assert notes[-1] == ("Timer reset", None)


def test_apply_settings_while_stopped_resets_countdown(timer):
    timer.apply_settings(short_settings(break_interval_minutes=2))
    assert timer.seconds_left == 120


def test_apply_settings_while_running_keeps_countdown(timer):
    timer.start_pause()
    timer.tick(5)
    timer.apply_settings(short_settings(break_interval_minutes=2))
    assert timer.seconds_left == 55


def test_completion_sound_uses_volume_and_failures_are_ignored():
    volumes = []
    FocusTimer(short_settings(), play_sound=volumes.append).skip()
    assert volumes == [0.5]

    def broken(volume):
        raise RuntimeError("no audio device")

    timer = FocusTimer(short_settings(), play_sound=broken)
    timer.skip()
    assert timer.sessions_completed == 1


def test_sound_respects_settings():
    volumes = []
    settings = short_settings()
    settings.sound_enabled = False
    FocusTimer(settings, play_sound=volumes.append).skip()
    assert volumes == []
