"""
Request bodies and query filters for the tutor API.
"""

import re
from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import Field, StringConstraints, field_validator

from shared.models import CamelModel, ChatMessage, TutoringMode

MAX_IMAGE_MB = 5
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")

_BASE64 = re.compile(r"^[A-Za-z0-9+/=]+$")
_DATA_URI = re.compile(r"^data:([^;]+);base64,(.+)$", re.DOTALL)

TutorMessage = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=5000)]


class TutorContext(CamelModel):
    extracted_problem: Optional[str] = None
    message_history: Optional[List[ChatMessage]] = Field(default=None, max_length=50)
    problem_context: Optional[str] = None
    reference_materials: Optional[List[str]] = None


class AITutorRequest(CamelModel):
    message: TutorMessage
    mode: TutoringMode
    context: Optional[TutorContext] = None
    streaming: bool = False


def split_image_data(image: str):
    """Return (media_type, base64_payload) for a data URI or bare base64 string."""
    match = _DATA_URI.match(image)
    if match:
        return match.group(1), match.group(2)
    return "image/jpeg", image


def image_size_mb(image: str) -> float:
    payload = image.split(",")[1] if "," in image else image
    return (len(payload) * 3 / 4) / (1024 * 1024)


class OCROptions(CamelModel):
    validate_latex: bool = True
    extract_plain_text: bool = True
    confidence_threshold: float = Field(default=0.7, ge=0.0, le=1.0)


class OCRRequest(CamelModel):
    image: str = Field(min_length=1)
    options: Optional[OCROptions] = None

    @field_validator("image")
    @classmethod
    def check_image(cls, value: str) -> str:
        if value.startswith("data:image/"):
            parts = value.split(",")
            if len(parts) != 2 or not parts[1]:
                raise ValueError("Invalid image data format")
            media_type, _ = split_image_data(value)
            if media_type not in ALLOWED_IMAGE_TYPES:
                raise ValueError("Unsupported image type")
        elif not _BASE64.match(value):
            raise ValueError("Invalid image data format")

        if image_size_mb(value) > MAX_IMAGE_MB:
            raise ValueError(f"Image too large (max {MAX_IMAGE_MB}MB)")
        return value


class SessionCreate(CamelModel):
    uploaded_image: Optional[str] = None
    extracted_problem: str = Field(min_length=1, max_length=10000)
    original_problem_text: Optional[str] = None
    mode: TutoringMode
    messages: List[ChatMessage]
    problems_solved: List[str] = Field(default_factory=list)
    concepts_covered: List[str] = Field(default_factory=list)
    duration: int = Field(ge=0)
    questions_asked: int = Field(ge=0)
    hints_given: int = Field(ge=0)
    completed: bool
    tags: List[str] = Field(default_factory=list)
    unit: Optional[str] = None


SortField = Literal["timestamp", "duration", "questionsAsked", "lastUpdated"]


class SessionFilter(CamelModel):
    page: int = Field(default=1, gt=0)
    limit: int = Field(default=20, gt=0, le=100)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    mode: Optional[TutoringMode] = None
    completed: Optional[bool] = None
    tags: Optional[List[str]] = None
    unit: Optional[str] = None
    sort_by: SortField = "lastUpdated"
    sort_order: Literal["asc", "desc"] = "desc"


class LatexCleanRequest(CamelModel):
    content: str = Field(max_length=100000)


class LatexValidateRequest(CamelModel):
    expressions: List[str] = Field(min_length=1, max_length=100)
