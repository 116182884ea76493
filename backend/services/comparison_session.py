"""
Comparison Session - Orchestrates one comparison from input to summary

States: idle -> comparing -> summarizing -> complete, or -> failed.
Summarization is the only await. Every reset bumps a generation counter, and a
summary that comes back for an older generation is discarded.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable

from models.compare import SessionSnapshot, SessionState, SummarizeRequest
from models.diff import ComparisonResult
from services.change_stats import compute_stats
from services.config_manager import DEFAULT_MAX_DESCRIPTION_CHARS
from services.diff_generator import DiffGenerator
from services.errors import (
    ComparisonInProgressError,
    DocDiffError,
    InputMissingError,
    PersistenceError,
    StaleSessionError,
    SummarizationError,
)
from services.history_store import HistoryStore
from services.llm_service import IDENTICAL_SUMMARY

Summarizer = Callable[[SummarizeRequest], Awaitable[str]]

EXAMPLE_DOC_A = """Contract Agreement
Date: January 1, 2024
Party A: Tech Corp
Party B: John Doe

1. Term: This agreement shall last for 12 months.
2. Compensation: Party B shall be paid $50 per hour.
3. Termination: 2 weeks notice required.
"""

EXAMPLE_DOC_B = """Contract Agreement
Date: January 15, 2024
Party A: Tech Corp
Party B: John Doe

1. Term: This agreement shall last for 24 months.
2. Compensation: Party B shall be paid $60 per hour.
3. Termination: 4 weeks notice required immediately.
"""

EXAMPLE_LABEL_A = "Contract_v1.txt"
EXAMPLE_LABEL_B = "Contract_v2.txt"

_BUSY_STATES = (SessionState.COMPARING, SessionState.SUMMARIZING)


def is_example_pair(document_a: str, document_b: str) -> bool:
    return document_a == EXAMPLE_DOC_A and document_b == EXAMPLE_DOC_B


class ComparisonSession:
    """Working state of the active comparison plus its replay operations"""

    def __init__(
        self,
        history_store: HistoryStore,
        summarizer: Summarizer,
        max_description_chars: int = DEFAULT_MAX_DESCRIPTION_CHARS,
    ):
        self.history_store = history_store
        self._summarizer = summarizer
        self.max_description_chars = max_description_chars
        self._diff_generator = DiffGenerator()
        self._generation = 0
        self._reset()

    def _reset(self):
        self.state = SessionState.IDLE
        self.document_a = ""
        self.document_b = ""
        self.label_a: str | None = None
        self.label_b: str | None = None
        self.result: ComparisonResult | None = None
        self.summary: str | None = None
        self.error: str | None = None
        self.processing_time: float | None = None
        self.history_entry_id: str | None = None

    @property
    def generation(self) -> int:
        return self._generation

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self.state,
            document_a=self.document_a,
            document_b=self.document_b,
            label_a=self.label_a,
            label_b=self.label_b,
            result=self.result,
            stats=compute_stats(self.result.chunks) if self.result else None,
            summary=self.summary,
            error=self.error,
            processing_time=self.processing_time,
            history_entry_id=self.history_entry_id,
            generation=self._generation,
        )

    # ========== Replay API ==========

    def new_session(self) -> SessionSnapshot:
        """Abandon whatever is in progress and start over"""
        self._generation += 1
        self._reset()
        return self.snapshot()

    def load_example(self) -> SessionSnapshot:
        self._generation += 1
        self._reset()
        self.document_a = EXAMPLE_DOC_A
        self.document_b = EXAMPLE_DOC_B
        self.label_a = EXAMPLE_LABEL_A
        self.label_b = EXAMPLE_LABEL_B
        return self.snapshot()

    def load_history_entry(self, entry_id: str) -> SessionSnapshot:
        """Replay a stored comparison without re-running the diff"""
        entry = self.history_store.load(entry_id)
        self._generation += 1
        self._reset()
        self.state = SessionState.COMPLETE
        self.document_a = entry.document_a
        self.document_b = entry.document_b
        self.label_a = entry.label_a
        self.label_b = entry.label_b
        self.result = entry.result
        self.summary = entry.summary
        self.history_entry_id = entry.id
        return self.snapshot()

    def delete_history_entry(self, entry_id: str) -> bool:
        return self.history_store.remove(entry_id)

    async def run_comparison(
        self,
        document_a: str,
        document_b: str,
        label_a: str | None = None,
        label_b: str | None = None,
    ) -> SessionSnapshot:
        """Diff both documents, summarize the changes and record history"""
        if not document_a or not document_b:
            raise InputMissingError("Please provide both documents to compare.")
        if self.state in _BUSY_STATES:
            raise ComparisonInProgressError("A comparison is already running.")

        self._generation += 1
        token = self._generation
        self._reset()
        self.document_a = document_a
        self.document_b = document_b
        self.label_a = label_a
        self.label_b = label_b
        self.state = SessionState.COMPARING
        start_time = time.perf_counter()

        try:
            result = self._diff_generator.compare(document_a, document_b)
            self.result = result
            description = self._diff_generator.format_change_description(result)

            self.state = SessionState.SUMMARIZING
            if result.additions == 0 and result.deletions == 0:
                summary = IDENTICAL_SUMMARY
            else:
                request = SummarizeRequest(
                    change_description=description[: self.max_description_chars],
                    additions=result.additions,
                    deletions=result.deletions,
                )
                summary = await self._summarizer(request)
        except asyncio.CancelledError:
            if token == self._generation:
                self.state = SessionState.FAILED
                self.error = "The comparison was cancelled before the summary arrived."
                print(f"[ComparisonSession] Comparison for generation {token} was cancelled")
            raise
        except Exception as e:
            if token != self._generation:
                raise StaleSessionError("Comparison was superseded by a newer session.") from e
            self.state = SessionState.FAILED
            self.error = f"An error occurred while analyzing the documents: {e}"
            print(f"[ComparisonSession] Comparison failed: {e}")
            if isinstance(e, DocDiffError):
                raise
            raise SummarizationError(str(e)) from e

        if token != self._generation:
            print(f"[ComparisonSession] Discarding stale summary for generation {token}")
            raise StaleSessionError("Comparison was superseded by a newer session.")

        self.summary = summary
        self.processing_time = time.perf_counter() - start_time
        self.state = SessionState.COMPLETE

        if not is_example_pair(document_a, document_b):
            try:
                entry = self.history_store.create_entry(
                    document_a,
                    document_b,
                    result,
                    summary,
                    label_a=label_a,
                    label_b=label_b,
                )
                self.history_entry_id = entry.id
            except PersistenceError as e:
                print(f"[ComparisonSession] Could not save history entry: {e}")

        return self.snapshot()

    def share_report(self) -> str:
        """Plain-text report of the current result, ready to paste elsewhere"""
        if self.result is None or not self.summary:
            raise InputMissingError("Run a comparison before sharing a report.")

        if self.processing_time is not None:
            elapsed = f"{self.processing_time:.2f}s"
        else:
            elapsed = "N/A"

        lines = [
            "DocDiff AI Report",
            "----------------------",
            f"Time: {elapsed}",
            f"Added: {self.result.additions} block(s)",
            f"Removed: {self.result.deletions} block(s)",
            "",
            "AI Summary:",
            self.summary,
            "",
            "----------------------",
            "Generated by DocDiff AI",
        ]
        return "\n".join(lines)
