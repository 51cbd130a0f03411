"""FastAPI dependencies."""
from typing import Optional
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.database import get_db
from app.services.catalog.database_catalog import DatabaseCatalogProvider
from app.services.catalog.in_memory_catalog import InMemoryCatalogProvider
from app.services.catalog.repository import CatalogRepository
from app.services.conversation.dedup import InMemoryMessageDeduplicator
from app.services.conversation.state import ConversationStateStore, InMemoryConversationStore
from app.services.messaging.whatsapp import WhatsAppMessenger

# Module-level stores (persist across requests, one per process)
_conversation_store = InMemoryConversationStore(ttl_seconds=settings.draft_ttl_minutes * 60)
_message_deduplicator = InMemoryMessageDeduplicator(
    ttl_seconds=settings.processed_message_ttl_minutes * 60
)
_file_catalog_provider: Optional[InMemoryCatalogProvider] = None


def get_conversation_store() -> ConversationStateStore:
    """Get the conversation state store."""
    return _conversation_store


def get_message_deduplicator() -> InMemoryMessageDeduplicator:
    """Get the processed-message registry."""
    return _message_deduplicator


def get_messenger() -> WhatsAppMessenger:
    """Get outbound WhatsApp messenger."""
    return WhatsAppMessenger()


def get_catalog_repository(db: AsyncSession = Depends(get_db)) -> CatalogRepository:
    """Get catalog repository: YAML file when configured, else the products table."""
    global _file_catalog_provider
    if settings.catalog_file:
        if _file_catalog_provider is None:
            _file_catalog_provider = InMemoryCatalogProvider(catalog_file=settings.catalog_file)
        return CatalogRepository(provider=_file_catalog_provider)
    return CatalogRepository(provider=DatabaseCatalogProvider(db))
