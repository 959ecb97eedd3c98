import pytest
from fastapi.testclient import TestClient

from shared.config import get_settings
from shared.models import LLMProvider
from shared.rate_limiter import rate_limiter
from tutor_service import dependencies
from tutor_service.main import app


class FakeLLMClient:
    """Stands in for UnifiedLLMClient; records the messages it was sent."""

    def __init__(self, reply="", error=None, vision_reply="", vision_error=None):
        self.reply = reply
        self.error = error
        self.vision_reply = vision_reply
        self.vision_error = vision_error
        self.calls = []
        self.images = []

    async def generate_response(self, messages, preferred_provider=LLMProvider.ANTHROPIC, max_tokens=1000,
                                temperature=0.7, model=None, allow_fallback=True):
        self.calls.append(messages)
        if self.error:
            raise self.error
        return self.reply, LLMProvider.ANTHROPIC

    async def describe_image(self, image_base64, media_type, prompt, max_tokens=1024):
        self.images.append((media_type, image_base64))
        if self.vision_error:
            raise self.vision_error
        return self.vision_reply

    def get_available_providers(self):
        return [LLMProvider.ANTHROPIC]


@pytest.fixture(autouse=True)
def clean_state():
    rate_limiter.clear()
    dependencies.get_session_store().clear()
    dependencies.get_settings_store().reset()
    yield
    app.dependency_overrides.clear()
    rate_limiter.clear()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def fake_llm_factory():
    return FakeLLMClient
