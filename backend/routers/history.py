"""Comparison history API endpoints"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from models.compare import SessionSnapshot
from models.history import HistoryEntry, HistoryEntrySummary
from services.comparison_session import ComparisonSession
from services.errors import HistoryEntryNotFoundError, PersistenceError
from services.history_store import HistoryStore

from .deps import get_history_store, get_session

router = APIRouter()


@router.get("", response_model=list[HistoryEntrySummary])
async def list_history(store: HistoryStore = Depends(get_history_store)) -> list[HistoryEntrySummary]:
    """List past comparisons, most recent first"""
    return store.summaries()


@router.get("/{entry_id}", response_model=HistoryEntry)
async def get_history_entry(entry_id: str, store: HistoryStore = Depends(get_history_store)) -> HistoryEntry:
    """Get one stored comparison"""
    try:
        return store.load(entry_id)
    except HistoryEntryNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/{entry_id}/load", response_model=SessionSnapshot)
async def load_history_entry(
    entry_id: str,
    session: ComparisonSession = Depends(get_session),
) -> SessionSnapshot:
    """Make a stored comparison the active session"""
    try:
        return session.load_history_entry(entry_id)
    except HistoryEntryNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.delete("/{entry_id}")
async def delete_history_entry(
    entry_id: str,
    session: ComparisonSession = Depends(get_session),
) -> dict[str, Any]:
    """Delete a stored comparison; unknown ids are a no-op"""
    try:
        deleted = session.delete_history_entry(entry_id)
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=e.message)

    return {
        "success": True,
        "deleted": deleted,
        "message": "History item deleted" if deleted else "History item not found",
    }


@router.delete("")
async def clear_history(store: HistoryStore = Depends(get_history_store)) -> dict[str, Any]:
    """Delete every stored comparison"""
    try:
        store.clear()
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=e.message)
    return {"success": True, "message": "History cleared"}
