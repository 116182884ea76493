"""Summarization API endpoint"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from models.compare import SummarizeRequest, SummarizeResponse
from services.config_manager import ConfigManager
from services.errors import ProviderNotConfiguredError, SummarizationError
from services.llm_service import IDENTICAL_SUMMARY, LLMService

from .deps import get_config_manager

router = APIRouter()


@router.post("", response_model=SummarizeResponse)
async def summarize(
    request: SummarizeRequest,
    config_manager: ConfigManager = Depends(get_config_manager),
) -> SummarizeResponse:
    """Summarize a change description with the configured provider"""
    # Check for no changes before calling the provider
    if request.additions == 0 and request.deletions == 0:
        return SummarizeResponse(summary=IDENTICAL_SUMMARY)

    if not request.change_description:
        raise HTTPException(status_code=400, detail="Change description is required")

    limit = config_manager.max_description_chars()
    if len(request.change_description) > limit:
        request = request.model_copy(update={"change_description": request.change_description[:limit]})

    llm_service = LLMService(config_manager.get_config())
    try:
        summary = await llm_service.summarize_changes(request)
    except ProviderNotConfiguredError as e:
        raise HTTPException(status_code=500, detail=e.message)
    except SummarizationError as e:
        raise HTTPException(status_code=502, detail=f"Failed to generate summary: {e.message}")

    return SummarizeResponse(summary=summary)
