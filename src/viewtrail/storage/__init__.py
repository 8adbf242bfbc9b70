"""
Persistence for merged watch history.
"""

from __future__ import annotations

from .history_store import HistoryStore, StoredHistory

__all__ = ["HistoryStore", "StoredHistory"]
