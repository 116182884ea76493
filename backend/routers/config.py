"""Configuration API endpoints"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from services.config_manager import ConfigManager
from services.errors import SummarizationError
from services.llm_service import LLMService

from .deps import get_config_manager

router = APIRouter()


class ConfigUpdateRequest(BaseModel):
    """Request to update configuration"""

    provider: str | None = None
    gemini: dict | None = None
    openai: dict | None = None
    vllm: dict | None = None
    summary: dict | None = None


class ConfigResponse(BaseModel):
    """Configuration response"""

    provider: str
    gemini: dict
    openai: dict
    vllm: dict
    summary: dict


class ValidateResponse(BaseModel):
    """Validation response"""

    valid: bool
    message: str
    provider: str


def mask_key(key: str) -> str:
    """Mask an API key for display"""
    if not key:
        return ""
    if len(key) <= 8:
        return "*" * len(key)
    return key[:4] + "*" * (len(key) - 8) + key[-4:]


@router.get("", response_model=ConfigResponse)
async def get_config(config_manager: ConfigManager = Depends(get_config_manager)) -> ConfigResponse:
    """Get current configuration"""
    config = config_manager.get_config()

    gemini = config.get("gemini", {}).copy()
    openai = config.get("openai", {}).copy()
    vllm = config.get("vllm", {}).copy()

    gemini["apiKey"] = mask_key(gemini.get("apiKey", ""))
    openai["apiKey"] = mask_key(openai.get("apiKey", ""))
    vllm["apiKey"] = mask_key(vllm.get("apiKey", ""))

    return ConfigResponse(
        provider=config.get("provider", "gemini"),
        gemini=gemini,
        openai=openai,
        vllm=vllm,
        summary=config.get("summary", {}),
    )


@router.put("")
async def update_config(
    request: ConfigUpdateRequest,
    config_manager: ConfigManager = Depends(get_config_manager),
) -> dict[str, Any]:
    """Update configuration"""
    current_config = config_manager.get_config()

    # Update only provided fields
    if request.provider:
        current_config["provider"] = request.provider
    for section in ("gemini", "openai", "vllm", "summary"):
        update = getattr(request, section)
        if update:
            current_config[section] = {**current_config.get(section, {}), **update}

    try:
        config_manager.save_config(current_config)
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return {"status": "success", "message": "Configuration updated"}


@router.post("/validate", response_model=ValidateResponse)
async def validate_config(config_manager: ConfigManager = Depends(get_config_manager)) -> ValidateResponse:
    """Validate current configuration by testing LLM connection"""
    config = config_manager.get_config()
    provider = config.get("provider", "gemini")

    try:
        llm_service = LLMService(config)
        response = await llm_service.generate_response("Say 'OK' if you can hear me.")
    except SummarizationError as e:
        return ValidateResponse(
            valid=False,
            message=f"Connection failed: {e.message}",
            provider=provider,
        )

    if response:
        return ValidateResponse(
            valid=True,
            message=f"Successfully connected to {provider}",
            provider=provider,
        )
    return ValidateResponse(
        valid=False,
        message="Received empty response from LLM",
        provider=provider,
    )
