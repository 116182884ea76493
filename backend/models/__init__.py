"""Models module - Pydantic data models"""

from .compare import (
    ParseResponse,
    RunComparisonRequest,
    SessionSnapshot,
    SessionState,
    SummarizeRequest,
    SummarizeResponse,
)
from .diff import ChangeStats, Chunk, ChunkKind, ComparisonResult
from .history import HISTORY_SCHEMA_VERSION, HistoryEntry, HistoryEntrySummary, HistoryFile

__all__ = [
    # Diff models
    "Chunk",
    "ChunkKind",
    "ComparisonResult",
    "ChangeStats",
    # History models
    "HISTORY_SCHEMA_VERSION",
    "HistoryEntry",
    "HistoryEntrySummary",
    "HistoryFile",
    # Session models
    "SessionState",
    "SessionSnapshot",
    "RunComparisonRequest",
    "SummarizeRequest",
    "SummarizeResponse",
    "ParseResponse",
]
