"""Shared FastAPI dependencies"""

from __future__ import annotations

from models.compare import SummarizeRequest
from services.comparison_session import ComparisonSession
from services.config_manager import ConfigManager
from services.history_store import HistoryStore
from services.llm_service import summarize_changes

_session: ComparisonSession | None = None


async def summarize_with_config(request: SummarizeRequest) -> str:
    """Summarize using the configuration as it is at call time"""
    config = ConfigManager.get_instance().get_config()
    return await summarize_changes(request, config)


def get_config_manager() -> ConfigManager:
    return ConfigManager.get_instance()


def get_history_store() -> HistoryStore:
    return HistoryStore.get_instance()


def get_session() -> ComparisonSession:
    """Process-wide comparison session"""
    global _session
    if _session is None:
        config_manager = ConfigManager.get_instance()
        _session = ComparisonSession(
            history_store=HistoryStore.get_instance(),
            summarizer=summarize_with_config,
            max_description_chars=config_manager.max_description_chars(),
        )
    return _session


def reset_session():
    global _session
    _session = None
