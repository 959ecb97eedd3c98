"""
Styling variables for dyslexia mode and the other root-level accessibility
options. The client applies them to the document root as-is.
"""

import re
from typing import Dict, List

from pydantic import Field

from shared.models import CamelModel

from .settings import AppSettings

DYSLEXIA_FONT_FAMILY = "OpenDyslexic, sans-serif"

OVERLAY_COLORS = {
    "cream": "oklch(0.96 0.01 85)",
    "blue": "oklch(0.92 0.03 240)",
    "green": "oklch(0.92 0.03 150)",
    "pink": "oklch(0.92 0.03 350)",
}

BASE_FONT_SIZES = {"small": "14px", "medium": "16px", "large": "18px"}
MATH_FONT_SIZES = {"small": "0.9em", "medium": "1em", "large": "1.2em"}

_SENTENCE = re.compile(r"[^.!?]+[.!?]+")


class DyslexiaStyles(CamelModel):
    css_variables: Dict[str, str] = Field(default_factory=dict)
    root_classes: List[str] = Field(default_factory=list)


def dyslexia_styles(settings: AppSettings) -> DyslexiaStyles:
    variables: Dict[str, str] = {}
    classes: List[str] = []

    if settings.dyslexia_font:
        variables["--font-family-base"] = DYSLEXIA_FONT_FAMILY

    if settings.dyslexia_mode:
        variables["--line-height-base"] = f"{settings.dyslexia_line_spacing:g}"
        classes.append("dyslexia-mode")

    if settings.dyslexia_color_overlay != "none":
        variables["--background-overlay"] = OVERLAY_COLORS[settings.dyslexia_color_overlay]
        classes.append("dyslexia-overlay")

    return DyslexiaStyles(css_variables=variables, root_classes=classes)


def accessibility_styles(settings: AppSettings) -> DyslexiaStyles:
    """Dyslexia styles plus font sizes, motion, contrast and distraction classes."""
    styles = dyslexia_styles(settings)
    variables = dict(styles.css_variables)
    classes = list(styles.root_classes)

    variables["--base-font-size"] = BASE_FONT_SIZES[settings.font_size]
    variables["--math-font-size"] = MATH_FONT_SIZES[settings.math_font_size]

    if settings.reduced_motion:
        classes.append("reduce-motion")
    if settings.high_contrast:
        classes.append("high-contrast")
    if settings.adhd.minimize_distractions:
        classes.append("minimize-distractions")

    return DyslexiaStyles(css_variables=variables, root_classes=classes)


def chunk_content(content: str, chunk_size: int = 3) -> List[str]:
    """Split text into sentences and group them into short paragraphs."""
    if chunk_size < 1:
        raise ValueError("chunk_size must be at least 1")
    sentences = _SENTENCE.findall(content) or [content]
    return [
        "".join(sentences[i:i + chunk_size]).strip()
        for i in range(0, len(sentences), chunk_size)
    ]
