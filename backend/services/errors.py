"""
Error taxonomy for the comparison engine and its collaborators.

Every error is scoped to a single operation or session; none of them should
take the server down. Routers translate them into HTTP responses.
"""

from __future__ import annotations


class DocDiffError(Exception):
    """Base class for all DocDiff errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputMissingError(DocDiffError):
    """One or both documents are empty, or there is nothing to report yet"""


class ExtractionError(DocDiffError):
    """Text extraction from an uploaded document failed"""

    def __init__(self, message: str, unsupported: bool = False):
        super().__init__(message)
        self.unsupported = unsupported


class SummarizationError(DocDiffError):
    """Summarization provider failed or is not configured"""


class PersistenceError(DocDiffError):
    """Stored history could not be read or written"""


class HistoryEntryNotFoundError(DocDiffError):
    """No history entry with the requested id"""

    def __init__(self, entry_id: str):
        super().__init__(f"History entry not found: {entry_id}")
        self.entry_id = entry_id


class ComparisonInProgressError(DocDiffError):
    """A comparison is already running for the active session"""


class StaleSessionError(DocDiffError):
    """A result arrived for a session that is no longer active"""


class ProviderNotConfiguredError(SummarizationError):
    """Summarization provider has no credentials or is unknown"""
