import pytest

from shared.config import Settings, get_settings, require_env
from shared.errors import InternalServerError


def test_settings_read_aliases():
    settings = Settings(AI_TUTOR_RATE_LIMIT=3, ENVIRONMENT="production")

    assert settings.ai_tutor_rate_limit == 3
    assert settings.is_production is True


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("OCR_RATE_LIMIT", "7")
    monkeypatch.setenv("ENABLE_OCR", "false")

    settings = Settings()

    assert settings.ocr_rate_limit == 7
    assert settings.enable_ocr is False


def test_tutor_service_port_overrides(monkeypatch):
    monkeypatch.setenv("TUTOR_SERVICE_PORT", "9100")
    assert Settings().service_port == 9100


def test_has_mathpix_needs_both_credentials():
    assert Settings(MATHPIX_APP_ID="id", MATHPIX_APP_KEY="key").has_mathpix is True
    assert Settings(MATHPIX_APP_ID="id", MATHPIX_APP_KEY="").has_mathpix is False


def test_get_settings_is_process_wide():
    assert get_settings() is get_settings()


def test_require_env(monkeypatch):
    monkeypatch.setenv("PRECALC_TEST_VALUE", "present")
    assert require_env("PRECALC_TEST_VALUE") == "present"

    monkeypatch.delenv("PRECALC_TEST_VALUE")
    with pytest.raises(InternalServerError) as exc:
        require_env("PRECALC_TEST_VALUE")
    assert exc.value.message == "Missing required environment variable: PRECALC_TEST_VALUE"
    assert exc.value.status_code == 500
