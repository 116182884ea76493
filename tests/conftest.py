"""
Shared test fixtures.

Every test gets its own config directory so the singletons never touch the
user's ~/.docdiff.
"""

from pathlib import Path

import pytest

from routers import deps
from services.config_manager import ConfigManager
from services.history_store import HistoryStore


@pytest.fixture(autouse=True)
def config_dir(tmp_path: Path, monkeypatch) -> Path:
    """Point the config manager at a temp dir and reset singletons."""
    directory = tmp_path / "config"
    monkeypatch.setenv("DOCDIFF_CONFIG_DIR", str(directory))
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    ConfigManager.reset_instance()
    HistoryStore.reset_instance()
    deps.reset_session()
    yield directory
    ConfigManager.reset_instance()
    HistoryStore.reset_instance()
    deps.reset_session()


@pytest.fixture
def history_path(tmp_path: Path) -> Path:
    return tmp_path / "history" / "history.json"


@pytest.fixture
def history_store(history_path: Path) -> HistoryStore:
    return HistoryStore(history_path)


class FakeSummarizer:
    """Records requests and returns a canned summary."""

    def __init__(self, summary: str = "- **Term** changed"):
        self.summary = summary
        self.requests = []

    async def __call__(self, request):
        self.requests.append(request)
        return self.summary


@pytest.fixture
def summarizer() -> FakeSummarizer:
    return FakeSummarizer()
