"""Unit tests for InMemoryHistoryRepository."""

import pytest

from domain.analysis.entities.analysis_result import AnalysisResult
from infrastructure.history.in_memory_history_repository import InMemoryHistoryRepository


@pytest.fixture
def repository() -> InMemoryHistoryRepository:
    return InMemoryHistoryRepository()


class TestInMemoryHistoryRepository:
    """Test dictionary-backed history."""

    @pytest.mark.asyncio
    async def test_save_and_list_newest_first(self, repository: InMemoryHistoryRepository) -> None:
        await repository.save("u1", AnalysisResult(id="old", timestamp=1000))
        await repository.save("u1", AnalysisResult(id="new", timestamp=2000))

        results = await repository.list("u1")

        assert [r.id for r in results] == ["new", "old"]

    @pytest.mark.asyncio
    async def test_pagination(self, repository: InMemoryHistoryRepository) -> None:
        for i in range(5):
            await repository.save("u1", AnalysisResult(id=str(i), timestamp=i))

        page = await repository.list("u1", limit=2, offset=1)

        assert [r.id for r in page] == ["3", "2"]

    @pytest.mark.asyncio
    async def test_users_are_isolated(self, repository: InMemoryHistoryRepository) -> None:
        await repository.save("u1", AnalysisResult(id="a"))

        assert await repository.list("u2") == []

    @pytest.mark.asyncio
    async def test_delete(self, repository: InMemoryHistoryRepository) -> None:
        await repository.save("u1", AnalysisResult(id="a"))
        await repository.delete("u1", "a")
        await repository.delete("u1", "missing")

        assert repository.count("u1") == 0

    @pytest.mark.asyncio
    async def test_stored_copy(self, repository: InMemoryHistoryRepository) -> None:
        """Test caller mutation after save is not persisted."""
        result = AnalysisResult(id="a")
        await repository.save("u1", result)
        result.medication_alerts = ["late alert"]

        stored = await repository.list("u1")
        assert stored[0].medication_alerts is None
