"""
Process-wide service instances, exposed as FastAPI dependencies so tests can
swap them through `app.dependency_overrides`.
"""

from accessibility import SettingsStore
from shared.config import get_settings
from shared.llm_client import get_llm_client
from shared.models import LLMProvider

from .agent import TutorAgent
from .ocr import OCRService
from .sessions import SessionStore

_session_store = SessionStore()
_settings_store = SettingsStore()


def get_tutor_agent() -> TutorAgent:
    return TutorAgent(get_llm_client())


def get_ocr_service() -> OCRService:
    settings = get_settings()
    llm_client = get_llm_client()
    vision = llm_client if LLMProvider.ANTHROPIC in llm_client.get_available_providers() else None
    return OCRService(settings, vision)


def get_session_store() -> SessionStore:
    return _session_store


def get_settings_store() -> SettingsStore:
    return _settings_store
