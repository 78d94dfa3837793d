"""Analysis history store.

Keeps the signed-in user's history in memory, in sync with the history
repository, together with a loading flag and the last error message for
the UI.
"""

from typing import List, Optional
import logging

from domain.analysis.entities.analysis_result import AnalysisResult
from domain.analysis.ports.history_repository import IHistoryRepository

logger = logging.getLogger(__name__)

SAVE_FAILED = "Failed to save analysis"
DELETE_FAILED = "Failed to delete analysis"
FETCH_FAILED = "Failed to fetch history"


class AnalysisHistoryService:
    """
    History state holder.

    Every operation sets `is_loading` while running and clears `error`
    when it starts. On failure `error` holds a short message and the
    exception is re-raised.

    Example:
        >>> service = AnalysisHistoryService(InMemoryHistoryRepository())
        >>> await service.add_analysis(result, "me@example.com")
        >>> service.history[0].id == result.id
        True
    """

    def __init__(self, repository: IHistoryRepository, page_size: int = 10):
        self._repository = repository
        self.page_size = page_size
        self.history: List[AnalysisResult] = []
        self.is_loading = False
        self.error: Optional[str] = None

    async def add_analysis(self, result: AnalysisResult, user_id: str) -> None:
        """Save, then reload the first page so the list matches the server."""
        self._start()
        try:
            await self._repository.save(user_id, result)
            self.history = await self._repository.list(user_id, limit=self.page_size)
        except Exception:
            self._fail(SAVE_FAILED)
            raise
        self.is_loading = False

    async def delete_analysis(self, analysis_id: str, user_id: str) -> None:
        self._start()
        try:
            await self._repository.delete(user_id, analysis_id)
        except Exception:
            self._fail(DELETE_FAILED)
            raise
        self.history = [item for item in self.history if item.id != analysis_id]
        self.is_loading = False

    async def fetch_history(self, user_id: str) -> List[AnalysisResult]:
        self._start()
        try:
            self.history = await self._repository.list(user_id, limit=self.page_size)
        except Exception:
            self._fail(FETCH_FAILED)
            raise
        self.is_loading = False
        return self.history

    def clear_history(self) -> None:
        """Forget the local list; the server copy is untouched."""
        self.history = []

    def _start(self) -> None:
        self.is_loading = True
        self.error = None

    def _fail(self, message: str) -> None:
        logger.exception("History operation failed", extra={"error_message": message})
        self.error = message
        self.is_loading = False
