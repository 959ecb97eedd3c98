"""
Shared Pydantic models for the tutor API.

Wire models use camelCase aliases because the web client speaks camelCase;
Python code works with the snake_case field names.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any, List, Literal
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from enum import Enum


TutoringMode = Literal["socratic", "explanation"]


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class MessageRole(str, Enum):
    """Roles for conversation messages."""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ConversationMessage(BaseModel):
    """A single message sent to an LLM provider."""
    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: Optional[Dict[str, Any]] = None


class LLMProvider(str, Enum):
    """Supported LLM providers."""
    ANTHROPIC = "anthropic"
    OPENAI = "openai"


class Citation(CamelModel):
    """Reference to a notation entry, golden word, or mathematical fact."""
    type: Literal["notation", "golden-word", "common-mistake", "reference"]
    title: str
    content: str
    link: Optional[str] = None


class MessageMetadata(CamelModel):
    hint_level: Optional[int] = Field(default=None, ge=1, le=3)
    solution_step: Optional[int] = None
    reference_type: Optional[Literal["formula", "theorem", "definition", "example"]] = None


class ChatMessage(CamelModel):
    """A tutoring conversation turn as stored by the client."""
    role: Literal["user", "assistant"]
    content: str
    timestamp: str
    latex: Optional[List[str]] = None
    citations: Optional[List[Any]] = None
    metadata: Optional[Any] = None


class OCRResult(CamelModel):
    success: bool
    latex: str = ""
    confidence: float = 0.0
    plain_text: str = ""
    error: Optional[str] = None
    processing_time: int = 0  # milliseconds


class TutoringSession(CamelModel):
    """A saved AI tutoring session."""
    id: str
    timestamp: str
    last_updated: str
    uploaded_image: Optional[str] = None
    extracted_problem: str
    original_problem_text: Optional[str] = None
    mode: TutoringMode
    messages: List[ChatMessage] = Field(default_factory=list)
    problems_solved: List[str] = Field(default_factory=list)
    concepts_covered: List[str] = Field(default_factory=list)
    duration: int = 0  # seconds
    questions_asked: int = 0
    hints_given: int = 0
    completed: bool = False
    tags: List[str] = Field(default_factory=list)
    unit: Optional[str] = None


class SessionStats(CamelModel):
    total_sessions: int
    completed_sessions: int
    total_duration: int
    average_duration: float
    total_questions_asked: int
    average_questions_per_session: float
    mode_breakdown: Dict[str, int] = Field(default_factory=dict)
    unit_breakdown: Dict[str, int] = Field(default_factory=dict)

