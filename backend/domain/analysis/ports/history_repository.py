"""Port for analysis history persistence."""

from typing import List, Protocol

from domain.analysis.entities.analysis_result import AnalysisResult


class IHistoryRepository(Protocol):
    """
    Per-user store of analysis results.

    Implementations:
    - HttpHistoryClient (remote history endpoint)
    - InMemoryHistoryRepository (tests, local runs)
    """

    async def save(self, user_id: str, result: AnalysisResult) -> None:
        """
        Persist one result.

        Raises:
            HistoryError: When the store rejects the record
        """
        ...

    async def list(self, user_id: str, limit: int = 10, offset: int = 0) -> List[AnalysisResult]:
        """Most recent results first."""
        ...

    async def delete(self, user_id: str, analysis_id: str) -> None:
        ...
