"""
Unified LLM client for the tutor's providers.
"""

import logging
from typing import List, Optional, Dict, Any
from abc import ABC, abstractmethod

import openai
import anthropic

from .models import ConversationMessage, LLMProvider, MessageRole
from .config import get_settings

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Provider call failed. `status_code` mirrors the upstream HTTP status when known."""

    def __init__(self, message: str, provider: Optional[LLMProvider] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    async def generate_response(
        self,
        messages: List[ConversationMessage],
        max_tokens: int = 1000,
        temperature: float = 0.7,
        model: Optional[str] = None,
    ) -> str:
        """Generate a response from the LLM."""
        pass


class AnthropicClient(LLMClient):
    """Anthropic API client."""

    def __init__(self, api_key: str, default_model: str = "claude-sonnet-4-5-20250929"):
        self.client = anthropic.AsyncAnthropic(api_key=api_key)
        self.default_model = default_model

    @staticmethod
    def _split_messages(messages: List[ConversationMessage]):
        system_messages = [msg.content for msg in messages if msg.role == MessageRole.SYSTEM]
        conversation = [
            {"role": msg.role.value, "content": msg.content}
            for msg in messages
            if msg.role != MessageRole.SYSTEM
        ]
        return "\n".join(system_messages), conversation

    @staticmethod
    def _first_text(response) -> str:
        for block in getattr(response, "content", None) or []:
            if getattr(block, "type", None) == "text":
                return block.text
        return ""

    async def generate_response(
        self,
        messages: List[ConversationMessage],
        max_tokens: int = 1000,
        temperature: float = 0.7,
        model: Optional[str] = None,
    ) -> str:
        """Generate response using Anthropic API."""
        system, conversation = self._split_messages(messages)
        kwargs: Dict[str, Any] = {
            "model": model or self.default_model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": conversation,
        }
        if system:
            kwargs["system"] = system

        try:
            logger.debug(">>> [Anthropic] About to call Anthropic API")
            response = await self.client.messages.create(**kwargs)
            logger.debug("<<< [Anthropic] Anthropic API call returned")
        except anthropic.APIStatusError as e:
            raise LLMError(f"Anthropic API error: {e.message}", LLMProvider.ANTHROPIC, e.status_code) from e
        except anthropic.APIError as e:
            raise LLMError(f"Anthropic API error: {e}", LLMProvider.ANTHROPIC) from e

        return self._first_text(response)

    async def describe_image(
        self,
        image_base64: str,
        media_type: str,
        prompt: str,
        max_tokens: int = 1024,
        model: Optional[str] = None,
    ) -> str:
        """Send one image plus an instruction and return the text reply."""
        try:
            logger.debug(">>> [Anthropic] About to call Anthropic vision API")
            response = await self.client.messages.create(
                model=model or self.default_model,
                max_tokens=max_tokens,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "image",
                                "source": {"type": "base64", "media_type": media_type, "data": image_base64},
                            },
                            {"type": "text", "text": prompt},
                        ],
                    }
                ],
            )
        except anthropic.APIStatusError as e:
            raise LLMError(f"Claude Vision API error: {e.message}", LLMProvider.ANTHROPIC, e.status_code) from e
        except anthropic.APIError as e:
            raise LLMError(f"Claude Vision API error: {e}", LLMProvider.ANTHROPIC) from e

        return self._first_text(response)


class OpenAIClient(LLMClient):
    """OpenAI API client."""

    def __init__(self, api_key: str, default_model: str = "gpt-4o-mini"):
        self.client = openai.AsyncOpenAI(api_key=api_key)
        self.default_model = default_model or "gpt-4o-mini"

    async def generate_response(
        self,
        messages: List[ConversationMessage],
        max_tokens: int = 1000,
        temperature: float = 0.7,
        model: Optional[str] = None,
    ) -> str:
        """Generate response using OpenAI API."""
        selected_model = model or self.default_model
        openai_messages = [
            {"role": msg.role.value, "content": msg.content}
            for msg in messages
        ]

        try:
            logger.debug(">>> [OpenAI] About to call OpenAI API")
            response = await self.client.chat.completions.create(
                model=selected_model,
                messages=openai_messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
            logger.debug("<<< [OpenAI] OpenAI API call returned")
            return response.choices[0].message.content or ""
        except openai.BadRequestError as e:
            # Newer models reject 'max_tokens' in favour of 'max_completion_tokens'
            if "max_tokens" not in str(e):
                raise LLMError(f"OpenAI API error: {e.message}", LLMProvider.OPENAI, e.status_code) from e
            logger.info("[OpenAI] Retrying with 'max_completion_tokens'...")
            try:
                response = await self.client.chat.completions.create(
                    model=selected_model,
                    messages=openai_messages,
                    max_completion_tokens=max_tokens,
                    temperature=temperature,
                )
            except openai.APIStatusError as e2:
                raise LLMError(f"OpenAI API error: {e2.message}", LLMProvider.OPENAI, e2.status_code) from e2
            return response.choices[0].message.content or ""
        except openai.APIStatusError as e:
            raise LLMError(f"OpenAI API error: {e.message}", LLMProvider.OPENAI, e.status_code) from e
        except openai.APIError as e:
            raise LLMError(f"OpenAI API error: {e}", LLMProvider.OPENAI) from e


class UnifiedLLMClient:
    """
    Unified client that routes requests to the configured providers.
    Tries the preferred provider first and falls back in order.
    """

    def __init__(self, settings=None):
        self.settings = settings or get_settings()
        self.clients: Dict[LLMProvider, LLMClient] = {}

        if self.settings.anthropic_api_key:
            self.clients[LLMProvider.ANTHROPIC] = AnthropicClient(
                self.settings.anthropic_api_key,
                self.settings.anthropic_model,
            )
            logger.info("[LLM] Anthropic client initialized (model: %s)", self.settings.anthropic_model)

        if self.settings.openai_api_key:
            self.clients[LLMProvider.OPENAI] = OpenAIClient(
                self.settings.openai_api_key,
                self.settings.openai_model,
            )
            logger.info("[LLM] OpenAI client initialized (model: %s)", self.settings.openai_model)

        logger.info("[LLM] Available providers: %s", [p.value for p in self.clients])

    @staticmethod
    def _infer_provider_from_model(model_id: Optional[str]) -> Optional[LLMProvider]:
        if not model_id:
            return None
        mid = model_id.lower()
        if mid.startswith("claude") or "sonnet" in mid:
            return LLMProvider.ANTHROPIC
        if mid.startswith("gpt-") or mid.startswith("o3") or mid.startswith("o4"):
            return LLMProvider.OPENAI
        return None

    def _providers_to_try(self, preferred: Optional[LLMProvider], model: Optional[str]) -> List[LLMProvider]:
        inferred = self._infer_provider_from_model(model)
        if inferred is not None:
            preferred = inferred

        order: List[LLMProvider] = []
        if preferred and preferred in self.clients:
            order.append(preferred)
        for provider in (LLMProvider.ANTHROPIC, LLMProvider.OPENAI):
            if provider in self.clients and provider not in order:
                order.append(provider)
        return order

    async def generate_response(
        self,
        messages: List[ConversationMessage],
        preferred_provider: Optional[LLMProvider] = LLMProvider.ANTHROPIC,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        model: Optional[str] = None,
        allow_fallback: bool = True,
    ) -> tuple[str, LLMProvider]:
        """
        Generate response with provider selection and optional fallback.

        Returns:
            Tuple of (response_text, provider_used)
        """
        providers = self._providers_to_try(preferred_provider, model)
        if not providers:
            raise LLMError("No LLM providers configured")
        if not allow_fallback:
            providers = providers[:1]

        last_error: Optional[LLMError] = None
        for provider in providers:
            try:
                logger.info("[LLM] Trying provider: %s", provider.value)
                # A model id only applies to the provider it was inferred for
                provider_model = model if self._infer_provider_from_model(model) == provider else None
                text = await self.clients[provider].generate_response(
                    messages, max_tokens, temperature, provider_model
                )
                logger.info("[LLM] Successfully used provider: %s", provider.value)
                return text, provider
            except LLMError as e:
                logger.warning("[LLM] Provider %s failed: %s", provider.value, e)
                last_error = e

        raise last_error

    async def describe_image(self, image_base64: str, media_type: str, prompt: str, max_tokens: int = 1024) -> str:
        """Vision requests are served by Anthropic only."""
        client = self.clients.get(LLMProvider.ANTHROPIC)
        if client is None:
            raise LLMError("Missing required environment variable: ANTHROPIC_API_KEY")
        return await client.describe_image(
            image_base64, media_type, prompt, max_tokens=max_tokens, model=self.settings.vision_model
        )

    def get_available_providers(self) -> List[LLMProvider]:
        """Get list of available providers."""
        return list(self.clients.keys())


# Global client instance
_llm_client = None


def get_llm_client() -> UnifiedLLMClient:
    """Get the global LLM client instance."""
    global _llm_client
    if _llm_client is None:
        _llm_client = UnifiedLLMClient()
    return _llm_client
