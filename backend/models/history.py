"""History data models"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from .diff import ComparisonResult

HISTORY_SCHEMA_VERSION = 1


class HistoryEntry(BaseModel):
    """Durable record of a completed comparison"""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    created_at: datetime
    document_a: str
    document_b: str
    label_a: str | None = None
    label_b: str | None = None
    summary: str | None = None
    result: ComparisonResult


class HistoryEntrySummary(BaseModel):
    """Sidebar projection of a history entry"""

    id: str
    title: str
    created_at: datetime


class HistoryFile(BaseModel):
    """On-disk layout of the history store"""

    version: int = HISTORY_SCHEMA_VERSION
    entries: list[HistoryEntry] = []
