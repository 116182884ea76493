"""Routers module - FastAPI route handlers"""

from . import compare, config, documents, history, summarize

__all__ = ["compare", "config", "documents", "history", "summarize"]
