"""Accessibility settings, dyslexia styling and the focus timer."""

from .settings import (
    ACCESSIBILITY_PRESETS,
    ADHDSettings,
    AppSettings,
    SettingsStore,
    merge_settings,
    normalize_updates,
)
from .dyslexia import DyslexiaStyles, accessibility_styles, chunk_content, dyslexia_styles
from .focus_timer import FocusTimer, format_clock
from .timer_utils import (
    accuracy_band,
    calculate_accuracy,
    calculate_average_time,
    format_time,
    format_time_verbose,
    time_band,
)

__all__ = [
    "ACCESSIBILITY_PRESETS",
    "ADHDSettings",
    "AppSettings",
    "SettingsStore",
    "merge_settings",
    "normalize_updates",
    "DyslexiaStyles",
    "accessibility_styles",
    "chunk_content",
    "dyslexia_styles",
    "FocusTimer",
    "format_clock",
    "accuracy_band",
    "calculate_accuracy",
    "calculate_average_time",
    "format_time",
    "format_time_verbose",
    "time_band",
]
