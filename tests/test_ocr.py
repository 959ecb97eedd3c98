import asyncio
import json

import httpx
import pytest

from shared.llm_client import LLMError
from shared.models import OCRResult
from tutor_service.ocr import MATHPIX_URL, OCRService, check_extracted_latex
from tutor_service.schemas import OCROptions

IMAGE = "data:image/png;base64,aGVsbG8="


@pytest.fixture
def mathpix_settings(settings):
    return settings.model_copy(update={"mathpix_app_id": "app-id", "mathpix_app_key": "app-key"})


@pytest.fixture
def vision_only_settings(settings):
    return settings.model_copy(update={"mathpix_app_id": None, "mathpix_app_key": None})


def mathpix_transport(payload, status_code=200, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)


def run(coro):
    return asyncio.run(coro)


def test_mathpix_success(mathpix_settings):
    seen = []
    transport = mathpix_transport({"latex_styled": r"\frac{1}{2}", "text": r"$\frac{1}{2}$", "confidence": 0.95}, seen=seen)
    service = OCRService(mathpix_settings, transport=transport)

    result = run(service.extract(IMAGE))

    assert result.success is True
    assert result.latex == r"\frac{1}{2}"
    assert result.plain_text == r"$\frac{1}{2}$"
    assert result.confidence == 0.95
    assert str(seen[0].url) == MATHPIX_URL
    assert seen[0].headers["app_id"] == "app-id"
    body = json.loads(seen[0].content)
    assert body["src"] == IMAGE
    assert body["formats"] == ["text", "latex_styled"]


def test_bare_base64_is_sent_as_jpeg_data_uri(mathpix_settings):
    seen = []
    service = OCRService(mathpix_settings, transport=mathpix_transport({"text": "x", "confidence": 0.9}, seen=seen))

    run(service.mathpix("aGVsbG8=", OCROptions()))

    assert json.loads(seen[0].content)["src"] == "data:image/jpeg;base64,aGVsbG8="


def test_mathpix_invalid_latex_lowers_confidence(mathpix_settings):
    service = OCRService(mathpix_settings, transport=mathpix_transport({"latex_styled": r"\href{a}{b}", "confidence": 0.9}))

    result = run(service.mathpix(IMAGE, OCROptions()))

    assert result.success is True
    assert result.confidence == pytest.approx(0.63)
    assert result.error.startswith("LaTeX validation warnings: ")


def test_mathpix_missing_confidence_defaults_to_half(mathpix_settings):
    service = OCRService(mathpix_settings, transport=mathpix_transport({"text": "x + 1"}))
    result = run(service.mathpix(IMAGE, OCROptions(extract_plain_text=False)))

    assert result.confidence == 0.5
    assert result.latex == "x + 1"
    assert result.plain_text == ""


def test_low_mathpix_confidence_falls_back_to_vision(mathpix_settings, fake_llm_factory):
    llm = fake_llm_factory(vision_reply="$$x^2 + 1$$")
    service = OCRService(mathpix_settings, llm, transport=mathpix_transport({"text": "x", "confidence": 0.3}))

    result = run(service.extract(IMAGE))

    assert result.latex == "$$x^2 + 1$$"
    assert result.confidence == 0.8
    assert result.plain_text == "x^2 + 1"
    assert llm.images == [("image/png", "aGVsbG8=")]


def test_mathpix_error_with_failing_vision_keeps_mathpix_error(mathpix_settings, fake_llm_factory):
    llm = fake_llm_factory(vision_error=LLMError("vision down"))
    service = OCRService(mathpix_settings, llm, transport=mathpix_transport({"error": "bad key"}, status_code=401))

    result = run(service.extract(IMAGE))

    assert result.success is False
    assert result.error == "Mathpix API error: bad key"


def test_vision_only_without_client(vision_only_settings):
    result = run(OCRService(vision_only_settings).extract(IMAGE))

    assert result.success is False
    assert result.error == "Missing required environment variable: ANTHROPIC_API_KEY"


def test_vision_only_uses_llm(vision_only_settings, fake_llm_factory):
    llm = fake_llm_factory(vision_reply="  $y = mx + b$  ")
    result = run(OCRService(vision_only_settings, llm).extract(IMAGE))

    assert result.success is True
    assert result.latex == "$y = mx + b$"
    assert result.plain_text == "y = mx + b"


def test_check_extracted_latex():
    assert check_extracted_latex(OCRResult(success=True, latex="")) == (True, [])
    assert check_extracted_latex(OCRResult(success=True, latex=r"\sqrt{x}")) == (True, [])
    passed, warnings = check_extracted_latex(OCRResult(success=True, latex=r"\url{x}"))
    assert passed is False
    assert warnings == [r"Forbidden command detected: \url"]
