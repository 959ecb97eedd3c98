import pytest

from latex_tools import AIResponseValidator
from latex_tools.response_validator import ResponseValidation, escalate_risk
from shared.models import ChatMessage

NEUTRAL = "Factor the expression by grouping the terms carefully and compare both sides step by step."


def test_neutral_reply_is_low_risk():
    validation = AIResponseValidator.validate(NEUTRAL, [r"x^2 + 5x + 6"])

    assert validation.valid is True
    assert validation.requires_human_review is False
    assert validation.confidence == 1.0
    assert validation.risk_level == "low"
    assert validation.latex_validations[0].valid is True


def test_overconfident_language_needs_review():
    validation = AIResponseValidator.validate("Obviously we factor by grouping here, then compare both sides.")

    assert validation.requires_human_review is True
    assert validation.risk_level == "medium"
    assert validation.confidence == pytest.approx(0.8)
    assert 'Potential hallucination indicator detected: "obviously"' in validation.warnings


def test_uncertain_language_lowers_confidence():
    validation = AIResponseValidator.validate("Maybe we should factor by grouping and compare both sides first.")

    assert validation.confidence == pytest.approx(0.9)
    assert validation.risk_level == "medium"


def test_invalid_latex_is_high_risk():
    validation = AIResponseValidator.validate(NEUTRAL, [r"\href{x}{y}"])

    assert validation.valid is False
    assert validation.risk_level == "high"
    assert validation.requires_human_review is True
    assert validation.errors[0] == r"Invalid LaTeX: \href{x}{y}"
    assert validation.latex_validations[0].errors == [r"Forbidden command detected: \href"]


def test_contradiction_is_an_error():
    validation = AIResponseValidator.validate("The result is always positive, so it is never negative here.")

    assert validation.valid is False
    assert "Potential contradiction detected in explanation" in validation.errors
    assert validation.risk_level == "high"


def test_claims_without_citations_are_flagged():
    content = "Use the quotient formula to rewrite the expression and then simplify each of the terms."
    flagged = AIResponseValidator.validate(content)
    cited = AIResponseValidator.validate(content, citations=[{"type": "reference"}])

    assert any("without citations" in w for w in flagged.warnings)
    assert not any("without citations" in w for w in cited.warnings)


def test_over_precise_numbers_are_suspicious():
    validation = AIResponseValidator.validate("Rounded, x equals 3.14159265358979 in this exercise of ours.")

    assert 'Suspicious numeric claim: "equals 3.14159265358979"' in validation.warnings
    assert AIResponseValidator.validate_numeric_claim("equals 2.5") is True


def test_user_messages_always_pass():
    message = ChatMessage(role="user", content="obviously this is always never true", timestamp="2025-01-01T00:00:00Z")
    assert AIResponseValidator.validate_session_message(message).valid is True


def test_history_consistency_check():
    previous = [{"role": "assistant", "content": "That step was incorrect."}]
    message = {"role": "assistant", "content": "Now your answer is correct, nice grouping of the terms there."}

    validation = AIResponseValidator.validate_session_message(message, previous)

    assert "Consistency: Contradicts previous correctness assessment" in validation.warnings
    assert validation.risk_level == "medium"


def test_quick_validate():
    assert AIResponseValidator.quick_validate(NEUTRAL) is True
    assert AIResponseValidator.quick_validate("Clearly this works, compare the sides of it.") is False


def test_validation_summary():
    assert AIResponseValidator.get_validation_summary(ResponseValidation(valid=True)) == (
        "✓ Response validated (confidence: 100%)"
    )
    summary = AIResponseValidator.get_validation_summary(
        ResponseValidation(valid=False, errors=["x"], requires_human_review=True, confidence=0.5, risk_level="high")
    )
    assert summary == "⚠ 1 error(s), requires human review, confidence: 50%, risk: high"


def test_escalate_risk_never_lowers():
    assert escalate_risk("high", "medium") == "high"
    assert escalate_risk("low", "medium") == "medium"
