"""Services module - Business logic layer"""

from .change_stats import compute_stats
from .comparison_session import ComparisonSession
from .config_manager import ConfigManager
from .diff_generator import DiffGenerator, compare_text, diff_lines, tokenize
from .document_parser import extract_text
from .history_store import HistoryStore, generate_title
from .llm_service import LLMService, summarize_changes

__all__ = [
    "LLMService",
    "summarize_changes",
    "ConfigManager",
    "DiffGenerator",
    "tokenize",
    "diff_lines",
    "compare_text",
    "compute_stats",
    "ComparisonSession",
    "HistoryStore",
    "generate_title",
    "extract_text",
]
