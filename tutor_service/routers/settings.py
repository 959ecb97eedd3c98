import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError as PydanticValidationError

from shared.errors import NotFoundError, ValidationError, create_success_response
from accessibility import ACCESSIBILITY_PRESETS, SettingsStore, accessibility_styles, normalize_updates

from ..dependencies import get_settings_store

logger = logging.getLogger(__name__)


def _wire(store: SettingsStore) -> Dict[str, Any]:
    return store.settings.model_dump(by_alias=True)


def get_router() -> APIRouter:
    router = APIRouter(prefix="/api/settings", tags=["settings"])

    @router.get("")
    async def read_settings(store: SettingsStore = Depends(get_settings_store)):
        return create_success_response(_wire(store))

    @router.patch("")
    async def update_settings(
        updates: Dict[str, Any] = Body(...),
        store: SettingsStore = Depends(get_settings_store),
    ):
        try:
            store.update(normalize_updates(updates))
        except KeyError as e:
            raise ValidationError(f"Unknown setting: {e.args[0]}")
        except PydanticValidationError as e:
            errors = [
                {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ]
            raise ValidationError("Invalid settings", {"errors": errors})
        return create_success_response(_wire(store))

    @router.post("/presets/{preset}")
    async def apply_preset(preset: str, store: SettingsStore = Depends(get_settings_store)):
        if preset not in ACCESSIBILITY_PRESETS:
            raise NotFoundError("Preset")
        store.apply_preset(preset)
        return create_success_response(_wire(store))

    @router.post("/reset")
    async def reset_settings(store: SettingsStore = Depends(get_settings_store)):
        store.reset()
        logger.info("Settings reset to defaults")
        return create_success_response(_wire(store))

    @router.get("/styles")
    async def styles(store: SettingsStore = Depends(get_settings_store)):
        """CSS custom properties and root classes for the current settings."""
        return create_success_response(accessibility_styles(store.settings).model_dump(by_alias=True))

    return router
