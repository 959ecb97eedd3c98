"""
Math OCR: Mathpix first when configured, Claude vision as the fallback.
"""

import logging
import re
import time
from typing import List, Optional, Tuple

import httpx

from shared.config import Settings
from shared.llm_client import LLMError, UnifiedLLMClient
from shared.models import OCRResult
from latex_tools import LatexValidator

from .schemas import OCROptions, split_image_data

logger = logging.getLogger(__name__)

MATHPIX_URL = "https://api.mathpix.com/v3/text"
MATHPIX_TIMEOUT_SECONDS = 30.0
MIN_MATHPIX_CONFIDENCE = 0.5
VISION_CONFIDENCE = 0.8
INVALID_LATEX_PENALTY = 0.7

VISION_PROMPT = """Extract all mathematical expressions from this image and convert them to LaTeX format.

Instructions:
- Use proper LaTeX notation
- Wrap inline math in $ $
- Wrap display math in $$ $$
- If there's text, preserve it alongside the math
- Be precise with mathematical notation

Respond with only the extracted LaTeX and text, nothing else."""

_STRIP_DELIMITERS = re.compile(r"\$\$?([^$]+)\$\$?")


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class OCRService:
    """Extracts LaTeX from an uploaded problem image."""

    def __init__(
        self,
        settings: Settings,
        llm_client: Optional[UnifiedLLMClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.llm_client = llm_client
        self._transport = transport

    async def mathpix(self, image: str, options: OCROptions) -> OCRResult:
        started = time.perf_counter()
        src = image if image.startswith("data:") else f"data:image/jpeg;base64,{image}"

        try:
            async with httpx.AsyncClient(timeout=MATHPIX_TIMEOUT_SECONDS, transport=self._transport) as client:
                response = await client.post(
                    MATHPIX_URL,
                    headers={
                        "app_id": self.settings.mathpix_app_id or "",
                        "app_key": self.settings.mathpix_app_key or "",
                    },
                    json={
                        "src": src,
                        "formats": ["text", "latex_styled"],
                        "math_inline_delimiters": ["$", "$"],
                        "math_display_delimiters": ["$$", "$$"],
                    },
                )
            if response.is_error:
                try:
                    reason = response.json().get("error") or response.reason_phrase
                except ValueError:
                    reason = response.reason_phrase
                raise RuntimeError(f"Mathpix API error: {reason}")
            data = response.json()
        except (httpx.HTTPError, RuntimeError, ValueError) as e:
            logger.warning("Mathpix OCR failed: %s", e)
            return OCRResult(success=False, error=str(e) or "OCR processing failed", processing_time=_elapsed_ms(started))

        latex = data.get("latex_styled") or data.get("text") or ""
        plain_text = (data.get("text") or "") if options.extract_plain_text else ""
        confidence = data.get("confidence") or 0.5

        if options.validate_latex and latex:
            validation = LatexValidator.validate(latex)
            if not validation.valid:
                logger.warning("Extracted LaTeX validation failed: %s", validation.errors)
                return OCRResult(
                    success=True,
                    latex=latex,
                    confidence=confidence * INVALID_LATEX_PENALTY,
                    plain_text=plain_text,
                    error="LaTeX validation warnings: " + ", ".join(validation.errors),
                    processing_time=_elapsed_ms(started),
                )

        if confidence < options.confidence_threshold:
            logger.warning("Low OCR confidence: %s", confidence)

        return OCRResult(
            success=True,
            latex=latex,
            confidence=confidence,
            plain_text=plain_text,
            processing_time=_elapsed_ms(started),
        )

    async def vision(self, image: str, options: OCROptions) -> OCRResult:
        started = time.perf_counter()
        media_type, payload = split_image_data(image)

        if self.llm_client is None:
            return OCRResult(
                success=False,
                error="Missing required environment variable: ANTHROPIC_API_KEY",
                processing_time=_elapsed_ms(started),
            )

        try:
            text = await self.llm_client.describe_image(payload, media_type, VISION_PROMPT)
        except LLMError as e:
            logger.warning("Claude Vision OCR failed: %s", e)
            return OCRResult(success=False, error=str(e) or "Claude Vision OCR failed", processing_time=_elapsed_ms(started))

        latex = text.strip()
        plain_text = _STRIP_DELIMITERS.sub(r"\1", latex) if options.extract_plain_text else ""
        return OCRResult(
            success=True,
            latex=latex,
            confidence=VISION_CONFIDENCE,
            plain_text=plain_text,
            processing_time=_elapsed_ms(started),
        )

    async def extract(self, image: str, options: Optional[OCROptions] = None) -> OCRResult:
        options = options or OCROptions()

        if self.settings.has_mathpix:
            logger.info("Processing OCR with Mathpix...")
            result = await self.mathpix(image, options)
            if not result.success or result.confidence < MIN_MATHPIX_CONFIDENCE:
                logger.info("Mathpix failed or low confidence, trying Claude Vision...")
                fallback = await self.vision(image, options)
                if fallback.success and fallback.confidence > result.confidence:
                    result = fallback
            return result

        logger.info("Processing OCR with Claude Vision...")
        return await self.vision(image, options)


def check_extracted_latex(result: OCRResult) -> Tuple[bool, List[str]]:
    """Final safety check on the chosen result; returns (passed, warnings)."""
    if not result.latex:
        return True, []
    validation = LatexValidator.validate(result.latex)
    return validation.valid, validation.errors
