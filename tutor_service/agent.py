"""
Tutor agent: turns a student question into a checked, render-ready reply.
"""

import logging
import re
import time
from typing import Any, Dict, List, Optional, Sequence

from shared.analytics import track_ai_usage
from shared.errors import InternalServerError, RateLimitError
from shared.llm_client import LLMError, UnifiedLLMClient
from shared.models import Citation, ChatMessage, ConversationMessage, LLMProvider, MessageRole
from latex_tools import AIResponseValidator, LaTeXPostProcessor, LatexValidator

from .schemas import AITutorRequest

logger = logging.getLogger(__name__)

MAX_TOKENS = 2048
TEMPERATURE = 0.7
HISTORY_WINDOW = 10
PROVIDER_RETRY_SECONDS = 60

SYSTEM_PROMPTS = {
    "socratic": """You are a skilled PreCalculus tutor using the Socratic method. Your goal is to guide students to discover solutions themselves through thoughtful questions.

Core Principles:
- Never give direct answers - ask leading questions
- Build on student's current understanding
- Help students identify misconceptions
- Encourage critical thinking and pattern recognition
- Validate correct reasoning, redirect incorrect thinking
- Reference notation tables and mathematical definitions when relevant

When providing mathematical content:
- Use proper LaTeX notation wrapped in $ or $$
- Cite relevant mathematical properties, theorems, or formulas
- Highlight common mistakes students should avoid
- Break complex problems into manageable steps""",
    "explanation": """You are an expert PreCalculus tutor providing clear, detailed explanations. Your goal is to teach concepts thoroughly while building understanding.

Core Principles:
- Provide step-by-step explanations with clear reasoning
- Use proper mathematical notation and terminology
- Explain the "why" behind each step
- Connect to broader mathematical concepts
- Highlight common pitfalls and misconceptions
- Include examples to reinforce learning

When providing mathematical content:
- Use proper LaTeX notation wrapped in $ or $$
- Cite relevant mathematical properties, theorems, or formulas
- Show all intermediate steps clearly
- Explain intuition behind mathematical operations""",
}

_DISPLAY_MATH = re.compile(r"\$\$([^$]+)\$\$")
_INLINE_MATH = re.compile(r"\$([^$]+)\$")
_CITATION = re.compile(r"\b(theorem|formula|identity|property|rule|law):\s*([^.]+)", re.IGNORECASE)


def build_context(
    extracted_problem: Optional[str] = None,
    message_history: Optional[Sequence[ChatMessage]] = None,
    reference_materials: Optional[Sequence[str]] = None,
) -> str:
    parts: List[str] = []

    if extracted_problem:
        parts.append(f"Current Problem:\n{extracted_problem}")

    if reference_materials:
        parts.append("\nReference Materials:\n" + "\n".join(reference_materials))

    if message_history:
        recent = message_history[-HISTORY_WINDOW:]
        conversation = "\n".join(f"{msg.role}: {msg.content}" for msg in recent)
        parts.append(f"\nRecent Conversation:\n{conversation}")

    return "\n\n".join(parts)


def extract_latex(content: str) -> List[str]:
    """Unique math expressions, display math first, in order of appearance."""
    found: List[str] = []
    # Inline scan runs on the text with display blocks blanked out
    for pattern, text in ((_DISPLAY_MATH, content), (_INLINE_MATH, _DISPLAY_MATH.sub(" ", content))):
        for match in pattern.finditer(text):
            expression = match.group(1).strip()
            if expression and expression not in found:
                found.append(expression)
    return found


def extract_citations(content: str) -> List[Citation]:
    return [
        Citation(type="reference", title=match.group(1)[:1].upper() + match.group(1)[1:], content=match.group(2).strip())
        for match in _CITATION.finditer(content)
    ]


class TutorAgent:
    """Calls the LLM for a tutoring turn and post-processes the reply."""

    def __init__(self, llm_client: UnifiedLLMClient):
        self.llm_client = llm_client

    async def respond(self, request: AITutorRequest) -> Dict[str, Any]:
        context = request.context
        context_string = build_context(
            context.extracted_problem if context else None,
            context.message_history if context else None,
            context.reference_materials if context else None,
        )
        user_message = (
            f"{context_string}\n\nStudent's Question: {request.message}" if context_string else request.message
        )
        if request.streaming:
            logger.info("Streaming requested; serving a complete response")

        messages = [
            ConversationMessage(role=MessageRole.SYSTEM, content=SYSTEM_PROMPTS[request.mode]),
            ConversationMessage(role=MessageRole.USER, content=user_message),
        ]

        started = time.perf_counter()
        try:
            raw, provider = await self.llm_client.generate_response(
                messages,
                preferred_provider=LLMProvider.ANTHROPIC,
                max_tokens=MAX_TOKENS,
                temperature=TEMPERATURE,
            )
        except LLMError as e:
            logger.error("AI Tutor API Error: %s", e)
            track_ai_usage(request.mode, e.provider.value if e.provider else "none", success=False)
            if e.status_code == 429:
                raise RateLimitError(PROVIDER_RETRY_SECONDS) from e
            raise InternalServerError(f"AI service error: {e}") from e

        duration_ms = int((time.perf_counter() - started) * 1000)
        track_ai_usage(request.mode, provider.value, success=bool(raw), duration_ms=duration_ms)

        if not raw:
            raise InternalServerError("No response from AI")

        processed = LaTeXPostProcessor.process_response(raw)
        if processed.changed:
            logger.info("LaTeX post-processing fixed %d issue(s)", len(processed.issues))
            logger.debug(LaTeXPostProcessor.generate_report(processed))

        content = processed.cleaned
        latex = extract_latex(content)
        citations = extract_citations(content)

        for expression in latex:
            result = LatexValidator.validate(expression)
            if not result.valid:
                logger.warning("Invalid LaTeX in AI response: %s %s", expression, result.errors)

        validation = AIResponseValidator.validate(content, latex, citations)
        if not validation.valid or validation.requires_human_review:
            logger.warning(
                "AI Response Validation Issues: valid=%s review=%s confidence=%.2f risk=%s errors=%s warnings=%s",
                validation.valid,
                validation.requires_human_review,
                validation.confidence,
                validation.risk_level,
                validation.errors,
                validation.warnings,
            )

        return {
            "content": content,
            "latex": latex,
            "citations": [citation.to_wire() for citation in citations],
            "validation": {
                "confidence": validation.confidence,
                "riskLevel": validation.risk_level,
                "warnings": validation.warnings,
            },
            "postProcessing": {
                "changed": processed.changed,
                "issues": [issue.model_dump(exclude_none=True) for issue in processed.issues],
            },
        }
