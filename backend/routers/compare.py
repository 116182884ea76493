"""Comparison session API endpoints"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from models.compare import RunComparisonRequest, SessionSnapshot
from services.comparison_session import ComparisonSession
from services.errors import (
    ComparisonInProgressError,
    InputMissingError,
    StaleSessionError,
    SummarizationError,
)

from .deps import get_session

router = APIRouter()


@router.get("/session", response_model=SessionSnapshot)
async def get_current_session(session: ComparisonSession = Depends(get_session)) -> SessionSnapshot:
    """Get the active comparison session"""
    return session.snapshot()


@router.post("/run", response_model=SessionSnapshot)
async def run_comparison(
    request: RunComparisonRequest,
    session: ComparisonSession = Depends(get_session),
) -> SessionSnapshot:
    """Compare two documents and summarize the changes"""
    try:
        return await session.run_comparison(
            request.document_a,
            request.document_b,
            label_a=request.label_a,
            label_b=request.label_b,
        )
    except InputMissingError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except (ComparisonInProgressError, StaleSessionError) as e:
        raise HTTPException(status_code=409, detail=e.message)
    except SummarizationError as e:
        raise HTTPException(status_code=502, detail=e.message)


@router.post("/new", response_model=SessionSnapshot)
async def new_comparison(session: ComparisonSession = Depends(get_session)) -> SessionSnapshot:
    """Reset the session, abandoning any comparison in flight"""
    return session.new_session()


@router.post("/example", response_model=SessionSnapshot)
async def load_example(session: ComparisonSession = Depends(get_session)) -> SessionSnapshot:
    """Load the built-in example document pair"""
    return session.load_example()


@router.get("/report", response_class=PlainTextResponse)
async def share_report(session: ComparisonSession = Depends(get_session)) -> str:
    """Plain-text report of the current result"""
    try:
        return session.share_report()
    except InputMissingError as e:
        raise HTTPException(status_code=400, detail=e.message)
