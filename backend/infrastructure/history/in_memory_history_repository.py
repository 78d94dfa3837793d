"""In-memory analysis history.

Implements IHistoryRepository for tests and local runs. Not thread-safe;
data is lost on restart.
"""

from copy import deepcopy
from typing import Dict, List

from domain.analysis.entities.analysis_result import AnalysisResult


class InMemoryHistoryRepository:
    """
    Dictionary-backed history, newest first.

    Example:
        >>> repository = InMemoryHistoryRepository()
        >>> await repository.save("user123", result)
        >>> await repository.list("user123")
    """

    def __init__(self) -> None:
        self._storage: Dict[str, Dict[str, AnalysisResult]] = {}

    async def save(self, user_id: str, result: AnalysisResult) -> None:
        # Deep copy so later mutation by the caller is not persisted
        self._storage.setdefault(user_id, {})[result.id] = deepcopy(result)

    async def list(self, user_id: str, limit: int = 10, offset: int = 0) -> List[AnalysisResult]:
        results = sorted(
            self._storage.get(user_id, {}).values(),
            key=lambda r: r.timestamp,
            reverse=True,
        )
        return [deepcopy(r) for r in results[offset:offset + limit]]

    async def delete(self, user_id: str, analysis_id: str) -> None:
        self._storage.get(user_id, {}).pop(analysis_id, None)

    def count(self, user_id: str) -> int:
        return len(self._storage.get(user_id, {}))

    def clear(self) -> None:
        self._storage.clear()
