"""Configuration API endpoints"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from models.config import ConfigResponse, ConfigUpdateRequest
from services.config_manager import ConfigManager

router = APIRouter()


@router.get("", response_model=ConfigResponse)
async def get_config() -> ConfigResponse:
    """Get current diff configuration"""
    config_manager = ConfigManager.get_instance()
    return ConfigResponse(
        unchangedContextLimit=config_manager.get_context_limit(),
        emitNavigation=config_manager.get_navigation(),
    )


@router.put("")
async def update_config(request: ConfigUpdateRequest) -> dict[str, Any]:
    """Update diff configuration"""
    config_manager = ConfigManager.get_instance()
    diff_config = dict(config_manager.get_config().get("diff", {}))

    # Update only provided fields
    if request.unbounded:
        diff_config["unchangedContextLimit"] = None
    elif request.unchangedContextLimit is not None:
        diff_config["unchangedContextLimit"] = request.unchangedContextLimit
    if request.emitNavigation is not None:
        diff_config["emitNavigation"] = request.emitNavigation

    config_manager.set("diff", diff_config)

    return {"status": "success", "message": "Configuration updated"}
