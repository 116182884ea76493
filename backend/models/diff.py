"""Diff-related data models"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ChunkKind(str, Enum):
    """Edit classification of a chunk"""

    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"


class Chunk(BaseModel):
    """A maximal run of lines sharing one edit classification"""

    text: str  # line units concatenated, terminators included
    kind: ChunkKind


class ComparisonResult(BaseModel):
    """Complete line-level comparison of two documents"""

    chunks: list[Chunk] = []
    additions: int = 0  # number of added chunks, not lines
    deletions: int = 0  # number of removed chunks, not lines

    def original_text(self) -> str:
        """Rebuild the original document from unchanged and removed chunks"""
        return "".join(c.text for c in self.chunks if c.kind != ChunkKind.ADDED)

    def modified_text(self) -> str:
        """Rebuild the modified document from unchanged and added chunks"""
        return "".join(c.text for c in self.chunks if c.kind != ChunkKind.REMOVED)


class ChangeStats(BaseModel):
    """Line counts derived from a chunk list"""

    added_lines: int
    removed_lines: int
    unchanged_lines: int
    total_lines: int
    changed_percent: int  # 0-100
