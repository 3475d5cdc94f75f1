"""
Unit tests for FastAPI application lifespan management.

Tests verify that startup prepares the database and seeds the permission
catalog, that startup failures do not stop the server, and that shutdown
closes the push client.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI

from interior_manager.server.main import lifespan

pytestmark = pytest.mark.asyncio


def _session_maker():
    session = AsyncMock()
    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=session)
    ctx.__aexit__ = AsyncMock(return_value=None)
    return MagicMock(return_value=ctx), session


class TestLifespanStartup:
    """Test application startup lifespan events."""

    async def test_startup_initializes_database_and_permissions(self):
        maker, session = _session_maker()

        with (
            patch("interior_manager.server.main.init_db", new_callable=AsyncMock) as mock_init_db,
            patch("interior_manager.server.main.async_session_maker", maker),
            patch("interior_manager.server.main.RBACService") as mock_rbac,
            patch("interior_manager.server.main.close_push_client", new_callable=AsyncMock),
        ):
            mock_rbac.return_value.seed_permissions = AsyncMock(return_value=40)

            async with lifespan(FastAPI()):
                mock_init_db.assert_called_once()
                mock_rbac.assert_called_once_with(session)
                mock_rbac.return_value.seed_permissions.assert_called_once()

    async def test_startup_logs_success(self):
        maker, _ = _session_maker()

        with (
            patch("interior_manager.server.main.init_db", new_callable=AsyncMock),
            patch("interior_manager.server.main.async_session_maker", maker),
            patch("interior_manager.server.main.RBACService") as mock_rbac,
            patch("interior_manager.server.main.close_push_client", new_callable=AsyncMock),
            patch("interior_manager.server.main.logger") as mock_logger,
        ):
            mock_rbac.return_value.seed_permissions = AsyncMock(return_value=0)

            async with lifespan(FastAPI()):
                pass

            calls = [call[0][0] for call in mock_logger.info.call_args_list]
            assert any("Starting up" in call for call in calls)
            assert any("Database initialized successfully" in call for call in calls)

    async def test_startup_survives_database_errors(self):
        with (
            patch("interior_manager.server.main.init_db", new_callable=AsyncMock) as mock_init_db,
            patch("interior_manager.server.main.RBACService") as mock_rbac,
            patch("interior_manager.server.main.close_push_client", new_callable=AsyncMock),
            patch("interior_manager.server.main.logger") as mock_logger,
        ):
            mock_init_db.side_effect = Exception("Database connection failed")

            async with lifespan(FastAPI()):
                pass

            mock_rbac.assert_not_called()
            mock_logger.error.assert_called_once()
            assert "Database initialization failed" in mock_logger.error.call_args[0][0]


class TestLifespanShutdown:
    async def test_shutdown_closes_push_client(self):
        maker, _ = _session_maker()

        with (
            patch("interior_manager.server.main.init_db", new_callable=AsyncMock),
            patch("interior_manager.server.main.async_session_maker", maker),
            patch("interior_manager.server.main.RBACService") as mock_rbac,
            patch("interior_manager.server.main.close_push_client", new_callable=AsyncMock) as mock_close,
        ):
            mock_rbac.return_value.seed_permissions = AsyncMock(return_value=0)

            async with lifespan(FastAPI()):
                mock_close.assert_not_called()

            mock_close.assert_called_once()
