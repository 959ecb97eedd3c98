"""
Learner settings: display, accessibility, ADHD scaffolding and practice
preferences, plus the presets that switch several of them at once.
"""

import logging
import threading
from typing import Any, Dict, Literal, Optional

from pydantic import Field

from shared.models import CamelModel, TutoringMode

logger = logging.getLogger(__name__)

Theme = Literal["light", "dark", "system"]
SizeOption = Literal["small", "medium", "large"]
ColorOverlay = Literal["none", "cream", "blue", "green", "pink"]
ColorBlindMode = Literal["none", "deuteranopia", "protanopia", "tritanopia"]
AccessibilityPreset = Literal["default", "dyslexia", "adhd", "colorblind", "custom"]

_HH_MM = r"^([01]\d|2[0-3]):[0-5]\d$"


class ADHDSettings(CamelModel):
    sos_protocol_always_visible: bool = False
    break_reminders: bool = True
    break_interval_minutes: int = Field(default=25, ge=1, le=180)
    break_duration_minutes: int = Field(default=5, ge=1, le=60)
    focus_timer_enabled: bool = True
    minimize_distractions: bool = False  # hide non-essential UI
    task_sequencing: bool = False  # one step at a time
    progress_chunking: bool = True


class AppSettings(CamelModel):
    # Display
    theme: Theme = "dark"
    math_font_size: SizeOption = "medium"

    # Audio
    sound_enabled: bool = True
    sound_volume: float = Field(default=0.5, ge=0.0, le=1.0)
    timer_sounds: bool = True

    # Dyslexia support
    dyslexia_mode: bool = False
    dyslexia_font: bool = False
    dyslexia_line_spacing: float = Field(default=1.5, ge=1.0, le=3.0)
    dyslexia_color_overlay: ColorOverlay = "none"
    dyslexia_simplified_language: bool = False

    # Reading ruler
    reading_ruler: bool = False
    reading_ruler_height: int = Field(default=60, gt=0)  # pixels
    reading_ruler_opacity: float = Field(default=0.2, ge=0.0, le=1.0)

    # Colour blind support
    color_blind_mode: ColorBlindMode = "none"
    color_blind_use_patterns: bool = False

    # General accessibility
    reduced_motion: bool = False
    high_contrast: bool = False
    font_size: SizeOption = "medium"

    adhd: ADHDSettings = Field(default_factory=ADHDSettings)

    # Learning preferences
    show_hints_automatically: bool = False
    show_multiple_solution_paths: bool = True
    emphasize_golden_words: bool = True
    show_progress_animations: bool = True

    # Practice
    timed_mode: bool = False
    default_timer_seconds: int = Field(default=120, gt=0)
    show_progress: bool = True
    confirm_before_submit: bool = True

    # Review reminders
    review_reminder_enabled: bool = True
    review_reminder_time: str = Field(default="18:00", pattern=_HH_MM)
    target_reviews_per_day: int = Field(default=10, ge=0)
    adaptive_difficulty: bool = True

    # Notifications
    daily_warmup_reminder: bool = True
    warmup_reminder_time: str = Field(default="09:00", pattern=_HH_MM)
    streak_reminders: bool = True

    # AI tutor
    default_tutoring_mode: TutoringMode = "socratic"
    auto_save_sessions: bool = True
    show_citations: bool = True


ACCESSIBILITY_PRESETS: Dict[str, Dict[str, Any]] = {
    "default": {},
    "dyslexia": {
        "dyslexia_mode": True,
        "dyslexia_font": True,
        "dyslexia_line_spacing": 1.75,
        "dyslexia_color_overlay": "cream",
        "dyslexia_simplified_language": True,
        "reading_ruler": True,
        "font_size": "large",
        "reduced_motion": True,
    },
    "adhd": {
        "adhd": {
            "sos_protocol_always_visible": True,
            "break_reminders": True,
            "break_interval_minutes": 25,
            "break_duration_minutes": 5,
            "focus_timer_enabled": True,
            "minimize_distractions": True,
            "task_sequencing": True,
            "progress_chunking": True,
        },
        "show_progress_animations": False,
        "reduced_motion": True,
        "confirm_before_submit": True,
    },
    "colorblind": {
        "color_blind_mode": "deuteranopia",
        "color_blind_use_patterns": True,
        "high_contrast": True,
    },
    "custom": {},
}

_THEME_CYCLE = {"dark": "light", "light": "system", "system": "dark"}


def _field_names(model) -> Dict[str, str]:
    """Map both alias and attribute name of every field to the attribute name."""
    names: Dict[str, str] = {}
    for name, info in model.model_fields.items():
        names[name] = name
        if info.alias:
            names[info.alias] = name
    return names


def normalize_updates(updates: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a camelCase (or snake_case) partial update into snake_case keys.

    Raises KeyError naming the first unknown field.
    """
    top_level = _field_names(AppSettings)
    adhd_fields = _field_names(ADHDSettings)
    normalized: Dict[str, Any] = {}
    for key, value in updates.items():
        if key not in top_level:
            raise KeyError(key)
        name = top_level[key]
        if name == "adhd" and isinstance(value, dict):
            adhd: Dict[str, Any] = {}
            for adhd_key, adhd_value in value.items():
                if adhd_key not in adhd_fields:
                    raise KeyError(f"adhd.{adhd_key}")
                adhd[adhd_fields[adhd_key]] = adhd_value
            value = adhd
        normalized[name] = value
    return normalized


def merge_settings(current: AppSettings, updates: Dict[str, Any]) -> AppSettings:
    """Apply snake_case `updates` on top of `current`; `adhd` is merged key by key."""
    merged = current.model_dump()
    for key, value in updates.items():
        if key == "adhd" and isinstance(value, dict):
            merged["adhd"] = {**merged["adhd"], **value}
        else:
            merged[key] = value
    return AppSettings.model_validate(merged)


class SettingsStore:
    """Holds the current settings for the process."""

    def __init__(self, settings: Optional[AppSettings] = None):
        self._lock = threading.Lock()
        self._settings = settings or AppSettings()

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def _replace(self, settings: AppSettings) -> AppSettings:
        self._settings = settings
        return settings

    def update(self, updates: Dict[str, Any]) -> AppSettings:
        with self._lock:
            return self._replace(merge_settings(self._settings, updates))

    def toggle_theme(self) -> AppSettings:
        with self._lock:
            theme = _THEME_CYCLE[self._settings.theme]
            return self._replace(self._settings.model_copy(update={"theme": theme}))

    def toggle_dyslexia_mode(self) -> AppSettings:
        with self._lock:
            enabling = not self._settings.dyslexia_mode
            return self._replace(
                self._settings.model_copy(
                    update={
                        "dyslexia_mode": enabling,
                        "dyslexia_font": True if enabling else self._settings.dyslexia_font,
                    }
                )
            )

    def toggle_adhd_scaffold(self, key: str) -> AppSettings:
        with self._lock:
            current = getattr(self._settings.adhd, key, None)
            if not isinstance(current, bool):
                raise ValueError(f"Unknown ADHD scaffold: {key}")
            return self._replace(merge_settings(self._settings, {"adhd": {key: not current}}))

    def set_tutoring_mode(self, mode: TutoringMode) -> AppSettings:
        with self._lock:
            return self._replace(merge_settings(self._settings, {"default_tutoring_mode": mode}))

    def apply_preset(self, preset: str) -> AppSettings:
        if preset not in ACCESSIBILITY_PRESETS:
            raise ValueError(f"Unknown accessibility preset: {preset}")
        with self._lock:
            logger.info("Applying accessibility preset: %s", preset)
            return self._replace(merge_settings(self._settings, ACCESSIBILITY_PRESETS[preset]))

    def reset(self) -> AppSettings:
        with self._lock:
            return self._replace(AppSettings())
