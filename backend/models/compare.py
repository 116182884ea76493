"""Comparison session data models"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from .diff import ChangeStats, ComparisonResult


class SessionState(str, Enum):
    """Lifecycle of a comparison session"""

    IDLE = "idle"
    COMPARING = "comparing"
    SUMMARIZING = "summarizing"
    COMPLETE = "complete"
    FAILED = "failed"


class RunComparisonRequest(BaseModel):
    """Request to compare two documents"""

    document_a: str
    document_b: str
    label_a: str | None = None  # e.g. source file name
    label_b: str | None = None


class SessionSnapshot(BaseModel):
    """Current working state of the comparison session"""

    state: SessionState = SessionState.IDLE
    document_a: str = ""
    document_b: str = ""
    label_a: str | None = None
    label_b: str | None = None
    result: ComparisonResult | None = None
    stats: ChangeStats | None = None
    summary: str | None = None
    error: str | None = None
    processing_time: float | None = None  # seconds
    history_entry_id: str | None = None
    generation: int = 0


class SummarizeRequest(BaseModel):
    """Input handed to the summarization provider"""

    change_description: str
    additions: int
    deletions: int


class SummarizeResponse(BaseModel):
    """Summary returned by the summarization provider"""

    summary: str


class ParseResponse(BaseModel):
    """Plain text extracted from an uploaded document"""

    text: str
    file_name: str | None = None
    media_type: str
