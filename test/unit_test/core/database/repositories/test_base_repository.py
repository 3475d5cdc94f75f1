"""Unit tests for the generic repository and query builder.

CRUD calls run against a mocked session so only the session protocol is
checked; the query builder is checked on compiled SQL.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlmodel import select

from interior_manager.core.database.entities.projects import Project
from interior_manager.core.database.repositories.base import QueryBuilder
from interior_manager.core.database.repositories.projects import ProjectRepository


class TestSQLModelRepository:
    """Tests for the shared CRUD implementation."""

    @pytest.fixture
    def mock_session(self):
        """Mock async database session."""
        session = AsyncMock()
        session.add = MagicMock()
        session.commit = AsyncMock()
        session.refresh = AsyncMock()
        session.delete = AsyncMock()
        session.get = AsyncMock()
        return session

    @pytest.fixture
    def repository(self, mock_session):
        return ProjectRepository(mock_session)

    async def test_create_commits_and_refreshes(self, repository, mock_session):
        project = Project(title="Mehta Villa")

        result = await repository.create(project)

        mock_session.add.assert_called_once_with(project)
        mock_session.commit.assert_called_once()
        mock_session.refresh.assert_called_once_with(project)
        assert result is project

    async def test_get_by_id(self, repository, mock_session):
        project = Project(title="Mehta Villa")
        mock_session.get.return_value = project

        assert await repository.get_by_id(project.id) is project
        mock_session.get.assert_called_once_with(Project, project.id)

    async def test_delete_missing(self, repository, mock_session):
        mock_session.get.return_value = None

        assert await repository.delete("missing") is False
        mock_session.delete.assert_not_called()
        mock_session.commit.assert_not_called()

    async def test_delete_existing(self, repository, mock_session):
        project = Project(title="Mehta Villa")
        mock_session.get.return_value = project

        assert await repository.delete(project.id) is True
        mock_session.delete.assert_called_once_with(project)
        mock_session.commit.assert_called_once()


class TestQueryBuilder:
    @staticmethod
    def _sql(stmt) -> str:
        return str(stmt.compile(compile_kwargs={"literal_binds": True}))

    def test_none_filters_are_skipped(self):
        stmt = QueryBuilder.apply_filters(select(Project), Project, {"status": "pending", "assigned_employee_id": None})
        sql = self._sql(stmt)

        assert "projects.status = 'pending'" in sql
        assert "assigned_employee_id =" not in sql

    def test_unknown_columns_are_skipped(self):
        stmt = QueryBuilder.apply_filters(select(Project), Project, {"colour": "blue"})
        assert "WHERE" not in self._sql(stmt)

    def test_pagination(self):
        sql = self._sql(QueryBuilder.apply_pagination(select(Project), 10, 20))
        assert "LIMIT 10" in sql
        assert "OFFSET 20" in sql

    def test_no_pagination(self):
        sql = self._sql(QueryBuilder.apply_pagination(select(Project), None, None))
        assert "LIMIT" not in sql
        assert "OFFSET" not in sql
