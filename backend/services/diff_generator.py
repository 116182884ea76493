"""
Diff Generator Service - Line-level comparison of two text documents
"""

from __future__ import annotations

import re
from typing import Sequence

from models.diff import Chunk, ChunkKind, ComparisonResult

_LINE_RE = re.compile(r"[^\n]*\n|[^\n]+")

_PREFIXES = {
    ChunkKind.ADDED: "+ ",
    ChunkKind.REMOVED: "- ",
    ChunkKind.UNCHANGED: "  ",
}


def tokenize(text: str) -> list[str]:
    """Split text into line units, each keeping its trailing newline"""
    return _LINE_RE.findall(text)


def _predecessor(v: dict[int, int], k: int, d: int, n: int, m: int) -> int | None:
    """Pick the diagonal a d-step path on diagonal k extends from.

    Moves that would leave the n x m edit grid are never taken. On equal reach the
    deletion (coming from diagonal k - 1) wins.
    """
    can_insert = k < d and (k + 1) in v and v[k + 1] - k <= m
    can_delete = k > -d and (k - 1) in v and v[k - 1] + 1 <= n
    if can_insert and (not can_delete or v[k + 1] > v[k - 1]):
        return k + 1
    if can_delete:
        return k - 1
    return None


def _shortest_edit(a: Sequence[str], b: Sequence[str]) -> list[tuple[int, int]]:
    """Myers greedy search for a shortest edit script.

    Returns the matched (index into a, index into b) pairs of the script, in
    document order. Only the furthest point of each reached diagonal is kept per
    step, so the trace grows with the edit distance rather than with n * m.
    """
    n, m = len(a), len(b)
    v: dict[int, int] = {}
    trace: list[dict[int, int]] = []

    for d in range(n + m + 1):
        trace.append(dict(v))
        for k in range(-d, d + 1, 2):
            if d == 0:
                x = 0
            else:
                prev_k = _predecessor(v, k, d, n, m)
                if prev_k is None:
                    v.pop(k, None)
                    continue
                x = v[prev_k] + 1 if prev_k == k - 1 else v[prev_k]
            y = x - k
            while x < n and y < m and a[x] == b[y]:
                x += 1
                y += 1
            v[k] = x
            if x == n and y == m:
                return _backtrack(trace, n, m)

    raise AssertionError("edit search did not reach the end of both sequences")


def _backtrack(trace: list[dict[int, int]], n: int, m: int) -> list[tuple[int, int]]:
    matches: list[tuple[int, int]] = []
    x, y = n, m

    for d in range(len(trace) - 1, 0, -1):
        v = trace[d]
        prev_k = _predecessor(v, x - y, d, n, m)
        prev_x = v[prev_k]
        # point right after the edit, before the snake
        mid_x = prev_x + 1 if prev_k == x - y - 1 else prev_x

        while x > mid_x:
            x -= 1
            y -= 1
            matches.append((x, y))
        x, y = prev_x, prev_x - prev_k

    while x > 0:
        x -= 1
        y -= 1
        matches.append((x, y))

    matches.reverse()
    return matches


def _align(a: Sequence[str], b: Sequence[str]) -> list[tuple[int, int]]:
    """Matched line pairs of a shortest edit script from a to b.

    The search always runs with the two sequences in the same order, whichever is
    passed first, and the pairs are transposed back. Swapping the inputs therefore
    mirrors the alignment.
    """
    if (len(a), list(a)) < (len(b), list(b)):
        return [(i, j) for j, i in _shortest_edit(b, a)]
    return _shortest_edit(a, b)


def diff_lines(a: Sequence[str], b: Sequence[str]) -> list[Chunk]:
    """Compute the chunk stream turning line sequence a into b"""
    prefix = 0
    while prefix < len(a) and prefix < len(b) and a[prefix] == b[prefix]:
        prefix += 1

    suffix = 0
    while (
        suffix < len(a) - prefix
        and suffix < len(b) - prefix
        and a[len(a) - 1 - suffix] == b[len(b) - 1 - suffix]
    ):
        suffix += 1

    mid_a = a[prefix : len(a) - suffix]
    mid_b = b[prefix : len(b) - suffix]

    chunks: list[Chunk] = []
    unchanged: list[str] = list(a[:prefix])

    def flush_unchanged():
        if unchanged:
            chunks.append(Chunk(text="".join(unchanged), kind=ChunkKind.UNCHANGED))
            unchanged.clear()

    def flush_gap(removed: Sequence[str], added: Sequence[str]):
        if removed or added:
            flush_unchanged()
        if removed:
            chunks.append(Chunk(text="".join(removed), kind=ChunkKind.REMOVED))
        if added:
            chunks.append(Chunk(text="".join(added), kind=ChunkKind.ADDED))

    i = j = 0
    for match_a, match_b in _align(mid_a, mid_b):
        flush_gap(mid_a[i:match_a], mid_b[j:match_b])
        unchanged.append(mid_a[match_a])
        i, j = match_a + 1, match_b + 1
    flush_gap(mid_a[i:], mid_b[j:])

    unchanged.extend(a[len(a) - suffix :])
    flush_unchanged()

    return chunks


def compare_text(original: str, modified: str) -> ComparisonResult:
    """Diff two documents and count added/removed chunks"""
    chunks = diff_lines(tokenize(original), tokenize(modified))
    return ComparisonResult(
        chunks=chunks,
        additions=sum(1 for c in chunks if c.kind == ChunkKind.ADDED),
        deletions=sum(1 for c in chunks if c.kind == ChunkKind.REMOVED),
    )


def format_change_description(chunks: Sequence[Chunk]) -> str:
    """Render chunks as prefixed lines ("+ ", "- ", two spaces)"""
    lines = []
    for chunk in chunks:
        prefix = _PREFIXES[chunk.kind]
        for line in chunk.text.splitlines():
            lines.append(f"{prefix}{line}")
    return "\n".join(lines)


class DiffGenerator:
    """Generate line-level comparisons for document pairs"""

    def compare(self, original_content: str, new_content: str) -> ComparisonResult:
        """Generate structured comparison from original and new content"""
        return compare_text(original_content, new_content)

    def format_change_description(self, result: ComparisonResult) -> str:
        """Render a comparison as a reviewable change description"""
        return format_change_description(result.chunks)
