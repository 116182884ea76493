"""
History Store - Durable, most-recent-first list of completed comparisons

The whole list is stored as one JSON document and rewritten on every mutation.
There is no entry limit, so the file grows with every completed comparison.
"""

from __future__ import annotations

import json
import os
import tempfile
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from models.diff import Chunk, ChunkKind, ComparisonResult
from models.history import HISTORY_SCHEMA_VERSION, HistoryEntry, HistoryEntrySummary, HistoryFile
from services.errors import HistoryEntryNotFoundError, PersistenceError

SNIPPET_LENGTH = 15


def generate_title(
    label_a: str | None,
    label_b: str | None,
    document_a: str,
    document_b: str,
) -> str:
    """Derive a sidebar title from source labels, or from document snippets"""
    if label_a and label_b:
        return f"{label_a} vs {label_b}"
    if label_a:
        return f"{label_a} vs Text"
    if label_b:
        return f"Text vs {label_b}"

    snippet_a = document_a[:SNIPPET_LENGTH].replace("\n", " ") if document_a else "Empty"
    snippet_b = document_b[:SNIPPET_LENGTH].replace("\n", " ") if document_b else "Empty"
    return f"{snippet_a}... vs {snippet_b}..."


def new_entry_id() -> str:
    return uuid.uuid4().hex


def _upgrade_legacy_entry(item: dict[str, Any]) -> dict[str, Any]:
    """Map a record from the original browser history format to the current schema"""
    diff_result = item.get("diffResult") or {}
    chunks = []
    for part in diff_result.get("diffs", []):
        if part.get("added"):
            kind = ChunkKind.ADDED
        elif part.get("removed"):
            kind = ChunkKind.REMOVED
        else:
            kind = ChunkKind.UNCHANGED
        chunks.append(Chunk(text=part["value"], kind=kind))

    return {
        "id": str(item["id"]),
        "title": item["title"],
        "created_at": item["timestamp"],
        "document_a": item["doc1"],
        "document_b": item["doc2"],
        "label_a": item.get("fileName1"),
        "label_b": item.get("fileName2"),
        "summary": item.get("summary"),
        "result": ComparisonResult(
            chunks=chunks,
            additions=diff_result.get("additions", 0),
            deletions=diff_result.get("deletions", 0),
        ),
    }


def parse_history(raw: Any) -> list[HistoryEntry]:
    """Validate stored history, dropping records that no longer parse.

    Raises PersistenceError when the document as a whole is unusable.
    """
    if isinstance(raw, list):
        # legacy format: bare list without a schema version
        records = []
        for item in raw:
            try:
                records.append(_upgrade_legacy_entry(item))
            except (KeyError, TypeError, AttributeError, ValidationError) as e:
                print(f"[HistoryStore] Dropping unreadable legacy record: {e}")
    elif isinstance(raw, dict):
        version = raw.get("version")
        if version != HISTORY_SCHEMA_VERSION:
            raise PersistenceError(f"Unsupported history schema version: {version!r}")
        records = raw.get("entries")
        if not isinstance(records, list):
            raise PersistenceError("History entries are not a list")
    else:
        raise PersistenceError(f"Unexpected history document type: {type(raw).__name__}")

    entries = []
    for record in records:
        try:
            entries.append(HistoryEntry.model_validate(record))
        except ValidationError as e:
            print(f"[HistoryStore] Dropping invalid history record: {e.error_count()} error(s)")
    return entries


class HistoryStore:
    """Persisted list of history entries, most recent first"""

    _instance = None

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._entries: list[HistoryEntry] = self._load()

    @classmethod
    def get_instance(cls) -> "HistoryStore":
        """Get singleton instance bound to the configured history file"""
        if cls._instance is None:
            from services.config_manager import ConfigManager

            cls._instance = HistoryStore(ConfigManager.get_instance().history_path())
        return cls._instance

    @classmethod
    def reset_instance(cls):
        cls._instance = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> list[HistoryEntry]:
        """Read the history file; an unreadable file yields an empty store"""
        if not self._path.exists():
            return []

        try:
            with open(self._path, encoding="utf-8") as f:
                raw = json.load(f)
            entries = parse_history(raw)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, PersistenceError) as e:
            print(f"[HistoryStore] Discarding unreadable history at {self._path}: {e}")
            return []

        print(f"[HistoryStore] Loaded {len(entries)} history entries")
        return entries

    def _persist(self, entries: list[HistoryEntry]):
        """Atomically rewrite the whole history file with these entries"""
        document = HistoryFile(entries=entries).model_dump_json(indent=2)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".history-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(document)
                os.replace(tmp_name, self._path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to save history: {e}") from e

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def summaries(self) -> list[HistoryEntrySummary]:
        return [
            HistoryEntrySummary(id=e.id, title=e.title, created_at=e.created_at)
            for e in self._entries
        ]

    def record(self, entry: HistoryEntry):
        """Prepend an entry and persist"""
        entries = [entry, *self._entries]
        self._persist(entries)
        self._entries = entries

    def remove(self, entry_id: str) -> bool:
        """Delete the entry with this id; returns False when there was none"""
        remaining = [e for e in self._entries if e.id != entry_id]
        if len(remaining) == len(self._entries):
            return False
        self._persist(remaining)
        self._entries = remaining
        return True

    def load(self, entry_id: str) -> HistoryEntry:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        raise HistoryEntryNotFoundError(entry_id)

    def clear(self):
        self._persist([])
        self._entries = []

    def create_entry(
        self,
        document_a: str,
        document_b: str,
        result: ComparisonResult,
        summary: str | None,
        label_a: str | None = None,
        label_b: str | None = None,
    ) -> HistoryEntry:
        """Build a new entry for a completed comparison and record it"""
        entry = HistoryEntry(
            id=new_entry_id(),
            title=generate_title(label_a, label_b, document_a, document_b),
            created_at=datetime.now(timezone.utc),
            document_a=document_a,
            document_b=document_b,
            label_a=label_a,
            label_b=label_b,
            summary=summary,
            result=result,
        )
        self.record(entry)
        return entry
