"""Shared test fixtures and configuration."""
import pytest
import os
from pathlib import Path
from unittest.mock import AsyncMock
import httpx
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app
os.environ.setdefault("WHATSAPP_VERIFY_TOKEN", "test-verify-token")
os.environ.setdefault("WHATSAPP_TOKEN", "test-token")
os.environ.setdefault("WHATSAPP_PHONE_NUMBER_ID", "1234567890")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BUSINESS_NAME", "Test Sayur")

from app.main import app
from app.db.database import get_db
from app.db.models import Base
from app.db.seed import seed_reference_data
from app.core.dependencies import (
    get_conversation_store,
    get_message_deduplicator,
    get_messenger,
)
from app.services.catalog.database_catalog import DatabaseCatalogProvider
from app.services.catalog.in_memory_catalog import InMemoryCatalogProvider
from app.services.catalog.repository import CatalogRepository
from app.services.conversation.dedup import InMemoryMessageDeduplicator
from app.services.conversation.handler import WhatsAppConversationHandler
from app.services.conversation.state import InMemoryConversationStore


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def test_db(test_db_engine):
    """Create test database session."""
    async_session = async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def test_catalog_path():
    """Return path to test catalog YAML file."""
    return Path(__file__).parent / "fixtures" / "test_catalog.yaml"


@pytest.fixture
async def seeded_db(test_db, test_catalog_path):
    """Database session with the test products, aliases and zones."""
    await seed_reference_data(test_db, test_catalog_path)
    return test_db


@pytest.fixture
def test_catalog_repository(test_catalog_path):
    """Catalog repository over the YAML test catalog."""
    return CatalogRepository(InMemoryCatalogProvider(catalog_file=str(test_catalog_path)))


@pytest.fixture
def mock_messenger():
    """Outbound messenger that records calls instead of hitting the Graph API."""
    messenger = AsyncMock()
    messenger.send_text = AsyncMock(return_value=True)
    messenger.send_menu_buttons = AsyncMock(return_value=True)
    return messenger


@pytest.fixture
def conversation_store():
    """Fresh conversation state store."""
    return InMemoryConversationStore(ttl_seconds=3600)


@pytest.fixture
def deduplicator():
    """Fresh processed-message registry."""
    return InMemoryMessageDeduplicator(ttl_seconds=3600)


@pytest.fixture
def conversation_handler(seeded_db, mock_messenger, conversation_store, deduplicator):
    """Conversation handler wired to the seeded test database."""
    return WhatsAppConversationHandler(
        seeded_db,
        mock_messenger,
        conversation_store,
        deduplicator,
        CatalogRepository(DatabaseCatalogProvider(seeded_db)),
    )


@pytest.fixture
async def api_client(seeded_db, mock_messenger, conversation_store, deduplicator):
    """HTTP client against the app with test database and mocked messenger."""
    async def _override_get_db():
        yield seeded_db

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_messenger] = lambda: mock_messenger
    app.dependency_overrides[get_conversation_store] = lambda: conversation_store
    app.dependency_overrides[get_message_deduplicator] = lambda: deduplicator

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client

    # Clear overrides
    app.dependency_overrides.clear()
