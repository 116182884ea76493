"""
Change Statistics - Line counts and impact derived from a chunk list
"""

from __future__ import annotations

from typing import Iterable

from models.diff import ChangeStats, Chunk, ChunkKind


def count_lines(text: str) -> int:
    """Count non-empty newline-delimited segments"""
    return sum(1 for segment in text.split("\n") if segment)


def compute_stats(chunks: Iterable[Chunk]) -> ChangeStats:
    """Recount added/removed/unchanged lines from stored chunks.

    These are line counts. ComparisonResult.additions / deletions count chunks
    and are not the same number for multi-line chunks.
    """
    added = removed = unchanged = 0

    for chunk in chunks:
        lines = count_lines(chunk.text)
        if chunk.kind == ChunkKind.ADDED:
            added += lines
        elif chunk.kind == ChunkKind.REMOVED:
            removed += lines
        else:
            unchanged += lines

    total = added + removed + unchanged
    changed_percent = round(100 * (added + removed) / total) if total > 0 else 0

    return ChangeStats(
        added_lines=added,
        removed_lines=removed,
        unchanged_lines=unchanged,
        total_lines=total,
        changed_percent=changed_percent,
    )
