"""
Pomodoro-style focus timer for students who need structured breaks.

The timer has no clock of its own: callers drive it with `tick(seconds)`,
which keeps it deterministic and easy to host in any event loop.
"""

import logging
from typing import Callable, Optional

from .settings import AppSettings

logger = logging.getLogger(__name__)

Notifier = Callable[[str, Optional[str]], None]
SoundPlayer = Callable[[float], None]


def format_clock(seconds: int) -> str:
    """Format seconds as zero-padded MM:SS."""
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins:02d}:{secs:02d}"


def _no_notify(message: str, description: Optional[str] = None) -> None:
    logger.debug("[FocusTimer] %s %s", message, description or "")


class FocusTimer:
    """Work/break countdown with session counting."""

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        notify: Optional[Notifier] = None,
        play_sound: Optional[SoundPlayer] = None,
    ):
        self.settings = settings or AppSettings()
        self.notify = notify or _no_notify
        self.play_sound = play_sound
        self.is_running = False
        self.is_break = False
        self.sessions_completed = 0
        self.seconds_left = self.work_duration

    @property
    def work_duration(self) -> int:
        return self.settings.adhd.break_interval_minutes * 60

    @property
    def break_duration(self) -> int:
        return self.settings.adhd.break_duration_minutes * 60

    @property
    def total_duration(self) -> int:
        return self.break_duration if self.is_break else self.work_duration

    @property
    def progress(self) -> float:
        """Percent of the current phase that has elapsed."""
        total = self.total_duration
        return (total - self.seconds_left) / total * 100

    @property
    def formatted(self) -> str:
        return format_clock(self.seconds_left)

    @property
    def enabled(self) -> bool:
        return self.settings.adhd.focus_timer_enabled

    def start_pause(self) -> str:
        """Toggle running state and return the screen-reader announcement."""
        if self.is_running:
            announcement = "Timer paused"
        else:
            announcement = f"Timer started. {self.formatted} remaining."
        self.is_running = not self.is_running
        self.notify(announcement, None)
        return announcement

    def reset(self) -> None:
        self.is_running = False
        self.seconds_left = self.total_duration
        self.notify("Timer reset", None)

    def skip(self) -> None:
        self._complete()

    def tick(self, seconds: int = 1) -> None:
        """Advance the countdown by whole seconds while running."""
        for _ in range(max(0, int(seconds))):
            if not self.is_running:
                return
            if self.seconds_left <= 1:
                self.seconds_left = 0
                self._complete()
            else:
                self.seconds_left -= 1

    def apply_settings(self, settings: AppSettings) -> None:
        """Swap in new settings; a stopped timer restarts its countdown."""
        self.settings = settings
        if not self.is_running:
            self.seconds_left = self.total_duration

    def _complete(self) -> None:
        self._play_completion_sound()

        if self.is_break:
            self.notify("Break complete! Ready to focus?", "Click Start to begin your next focus session.")
            self.is_break = False
            self.seconds_left = self.work_duration
            self.is_running = False
            return

        self.sessions_completed += 1
        count = self.sessions_completed
        self.notify(
            "Great work! Time for a break.",
            f"You've completed {count} focus session{'' if count == 1 else 's'} today.",
        )
        self.is_break = True
        self.seconds_left = self.break_duration
        self.is_running = self.settings.adhd.break_reminders

    def _play_completion_sound(self) -> None:
        if not (self.play_sound and self.settings.timer_sounds and self.settings.sound_enabled):
            return
        try:
            self.play_sound(self.settings.sound_volume)
        except Exception as e:
            logger.debug("[FocusTimer] Completion sound failed: %s", e)
