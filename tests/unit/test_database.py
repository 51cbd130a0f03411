"""Unit tests for database URLs and request sessions."""
import pytest
from unittest.mock import AsyncMock, MagicMock

from app.db import database
from app.db.database import async_database_url, engine_options, get_db, sync_database_url


class TestDatabaseUrls:
    """Test driver mapping for the app engine and for migrations."""

    def test_async_url(self):
        """Test that plain URLs get async drivers."""
        assert async_database_url("postgresql://u:p@db/sayur") == "postgresql+asyncpg://u:p@db/sayur"
        assert async_database_url("postgres://u:p@db/sayur") == "postgresql+asyncpg://u:p@db/sayur"
        assert async_database_url("sqlite:///./sayur.db") == "sqlite+aiosqlite:///./sayur.db"
        assert async_database_url("sqlite+aiosqlite:///:memory:") == "sqlite+aiosqlite:///:memory:"

    def test_sync_url(self):
        """Test that migrations get sync drivers whatever was configured."""
        assert sync_database_url("postgresql+asyncpg://u:p@db/sayur") == "postgresql://u:p@db/sayur"
        assert sync_database_url("postgres://u:p@db/sayur") == "postgresql://u:p@db/sayur"
        assert sync_database_url("sqlite+aiosqlite:///./sayur.db") == "sqlite:///./sayur.db"

    def test_engine_options(self):
        """Test that only server databases get pool checks."""
        assert engine_options("sqlite+aiosqlite:///:memory:") == {}
        assert engine_options("postgresql+asyncpg://db/sayur")["pool_pre_ping"] is True


class TestGetDb:
    """Test the request-scoped session dependency."""

    @pytest.mark.asyncio
    async def test_failed_request_rolls_back(self, monkeypatch):
        """Test that an error inside the request rolls the session back."""
        session = AsyncMock()
        factory = MagicMock()
        factory.return_value.__aenter__.return_value = session
        monkeypatch.setattr(database, "AsyncSessionLocal", factory)

        dependency = get_db()
        assert await dependency.__anext__() is session

        with pytest.raises(RuntimeError):
            await dependency.athrow(RuntimeError("handler failed"))
        session.rollback.assert_awaited_once()
        factory.return_value.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_successful_request_no_rollback(self, monkeypatch):
        """Test that a normal request only closes the session."""
        session = AsyncMock()
        factory = MagicMock()
        factory.return_value.__aenter__.return_value = session
        monkeypatch.setattr(database, "AsyncSessionLocal", factory)

        dependency = get_db()
        await dependency.__anext__()
        with pytest.raises(StopAsyncIteration):
            await dependency.__anext__()

        session.rollback.assert_not_awaited()
        factory.return_value.__aexit__.assert_awaited_once()
