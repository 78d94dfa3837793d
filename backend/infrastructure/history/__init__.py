"""Analysis history adapters."""

from infrastructure.history.http_history_client import HttpHistoryClient
from infrastructure.history.in_memory_history_repository import InMemoryHistoryRepository

__all__ = ["HttpHistoryClient", "InMemoryHistoryRepository"]
