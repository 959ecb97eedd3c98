"""
Heuristic quality checks for AI tutor replies.

Scores a reply before it is shown to a student: invalid LaTeX, overconfident
or hedging language, uncited claims and self-contradictions all lower the
confidence and raise the risk level. Nothing here raises; findings are data.
"""

import re
from typing import Any, List, Literal, Optional, Sequence

from pydantic import BaseModel, Field

from .validator import LatexValidator

RiskLevel = Literal["low", "medium", "high"]

_RISK_ORDER = {"low": 0, "medium": 1, "high": 2}

HALLUCINATION_INDICATORS = [
    "as we all know",
    "obviously",
    "clearly",
    "it's common knowledge",
    "everyone knows",
    "it goes without saying",
    "needless to say",
]

UNCERTAINTY_PHRASES = [
    "i think",
    "probably",
    "might be",
    "could be",
    "i'm not sure",
    "perhaps",
    "maybe",
    "possibly",
    "seems like",
    "appears to",
]

MATHEMATICAL_CLAIM_KEYWORDS = [
    "theorem", "formula", "identity", "property", "law", "rule", "always",
    "never", "proof", "definition", "axiom", "lemma", "corollary",
]

CONTRADICTION_PAIRS = [
    ("always", "never"),
    ("correct", "incorrect"),
    ("true", "false"),
    ("increase", "decrease"),
    ("greater", "less"),
]

_NUMERIC_CLAIM_PATTERNS = [
    re.compile(r"equals?\s+([0-9.]+)", re.IGNORECASE),
    re.compile(r"is\s+([0-9.]+)", re.IGNORECASE),
    re.compile(r"approximately\s+([0-9.]+)", re.IGNORECASE),
    re.compile(r"about\s+([0-9.]+)", re.IGNORECASE),
]

SHORT_EXPLANATION_CHARS = 50
MAX_DECIMAL_PLACES = 10


class LatexCheck(BaseModel):
    latex: str
    valid: bool
    errors: Optional[List[str]] = None


class ResponseValidation(BaseModel):
    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    latex_validations: List[LatexCheck] = Field(default_factory=list)
    requires_human_review: bool = False
    confidence: float = 1.0
    risk_level: RiskLevel = "low"


def escalate_risk(current: RiskLevel, target: RiskLevel) -> RiskLevel:
    return target if _RISK_ORDER[target] > _RISK_ORDER[current] else current


def _field(message: Any, name: str, default=None):
    if isinstance(message, dict):
        return message.get(name, default)
    return getattr(message, name, default)


class AIResponseValidator:

    @classmethod
    def validate(
        cls,
        content: str,
        latex: Optional[Sequence[str]] = None,
        citations: Optional[Sequence[Any]] = None,
    ) -> ResponseValidation:
        errors: List[str] = []
        warnings: List[str] = []
        latex_validations: List[LatexCheck] = []
        requires_review = False
        confidence = 1.0
        risk: RiskLevel = "low"

        for expression in latex or []:
            result = LatexValidator.validate(expression)
            latex_validations.append(
                LatexCheck(latex=expression, valid=result.valid, errors=None if result.valid else result.errors)
            )
            if not result.valid:
                errors.append(f"Invalid LaTeX: {expression}")
                errors.extend(result.errors)
                confidence *= 0.7
                risk = "high"
            if result.warnings:
                warnings.extend(f"LaTeX: {w}" for w in result.warnings)
                confidence *= 0.95

        lowered = content.lower()

        for indicator in HALLUCINATION_INDICATORS:
            if indicator in lowered:
                warnings.append(f'Potential hallucination indicator detected: "{indicator}"')
                requires_review = True
                confidence *= 0.8
                risk = escalate_risk(risk, "medium")

        for phrase in UNCERTAINTY_PHRASES:
            if phrase in lowered:
                warnings.append(f'Uncertain language detected: "{phrase}"')
                confidence *= 0.9
                risk = escalate_risk(risk, "medium")

        has_claims = cls.detect_mathematical_claims(content)
        if has_claims and not citations:
            warnings.append("Mathematical claims detected without citations - consider adding references")
            confidence *= 0.85
            risk = escalate_risk(risk, "medium")

        if len(content) < SHORT_EXPLANATION_CHARS and has_claims:
            warnings.append("Response is very short for a mathematical explanation")
            confidence *= 0.9

        if cls.detect_contradictions(content):
            errors.append("Potential contradiction detected in explanation")
            requires_review = True
            confidence *= 0.6
            risk = "high"

        for claim in cls.extract_numeric_claims(content):
            if not cls.validate_numeric_claim(claim):
                warnings.append(f'Suspicious numeric claim: "{claim}"')
                confidence *= 0.95

        if len(warnings) > 3:
            requires_review = True
            risk = escalate_risk(risk, "medium")

        if errors:
            requires_review = True
            risk = "high"

        return ResponseValidation(
            valid=not errors,
            errors=errors,
            warnings=warnings,
            latex_validations=latex_validations,
            requires_human_review=requires_review,
            confidence=max(0.0, min(1.0, confidence)),
            risk_level=risk,
        )

    @classmethod
    def validate_session_message(cls, message: Any, previous_messages: Optional[Sequence[Any]] = None) -> ResponseValidation:
        """Validate one conversation turn. Only assistant turns are checked."""
        if _field(message, "role") != "assistant":
            return ResponseValidation(valid=True)

        validation = cls.validate(
            _field(message, "content", ""),
            _field(message, "latex"),
            _field(message, "citations"),
        )

        if previous_messages:
            issues = cls.check_consistency_with_history(message, previous_messages)
            if issues:
                validation.warnings.extend(f"Consistency: {issue}" for issue in issues)
                validation.confidence *= 0.9
                validation.risk_level = escalate_risk(validation.risk_level, "medium")

        return validation

    @staticmethod
    def detect_mathematical_claims(content: str) -> bool:
        lowered = content.lower()
        return any(keyword in lowered for keyword in MATHEMATICAL_CLAIM_KEYWORDS)

    @staticmethod
    def detect_contradictions(content: str) -> bool:
        # Keyword co-occurrence only
        lowered = content.lower()
        return any(pos in lowered and neg in lowered for pos, neg in CONTRADICTION_PAIRS)

    @staticmethod
    def extract_numeric_claims(content: str) -> List[str]:
        claims: List[str] = []
        for pattern in _NUMERIC_CLAIM_PATTERNS:
            claims.extend(match.group(0) for match in pattern.finditer(content))
        return claims

    @staticmethod
    def validate_numeric_claim(claim: str) -> bool:
        match = re.search(r"[0-9.]+", claim)
        if not match:
            return True
        number = match.group(0)
        try:
            float(number)
        except ValueError:
            return False
        decimals = number.split(".")[1] if "." in number else ""
        return len(decimals) <= MAX_DECIMAL_PLACES

    @staticmethod
    def check_consistency_with_history(message: Any, history: Sequence[Any]) -> List[str]:
        issues: List[str] = []
        current = _field(message, "content", "").lower()
        for previous in history:
            if _field(previous, "role") != "assistant":
                continue
            earlier = _field(previous, "content", "").lower()
            if "always" in current and "never" in earlier:
                issues.append("Contradicts previous statement about always/never")
            if "correct" in current and "incorrect" in earlier:
                issues.append("Contradicts previous correctness assessment")
        return issues

    @classmethod
    def quick_validate(cls, content: str, latex: Optional[Sequence[str]] = None) -> bool:
        validation = cls.validate(content, latex)
        return validation.valid and not validation.requires_human_review

    @staticmethod
    def get_validation_summary(validation: ResponseValidation) -> str:
        percent = f"{validation.confidence * 100:.0f}%"
        if validation.valid and not validation.requires_human_review:
            return f"✓ Response validated (confidence: {percent})"

        parts = []
        if validation.errors:
            parts.append(f"{len(validation.errors)} error(s)")
        if validation.warnings:
            parts.append(f"{len(validation.warnings)} warning(s)")
        if validation.requires_human_review:
            parts.append("requires human review")
        parts.append(f"confidence: {percent}")
        parts.append(f"risk: {validation.risk_level}")
        return f"⚠ {', '.join(parts)}"
