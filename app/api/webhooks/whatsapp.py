"""WhatsApp Cloud API webhook endpoints."""
import logging
from fastapi import APIRouter, Request, Depends, Query
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.core.config import settings
from app.core.dependencies import (
    get_catalog_repository,
    get_conversation_store,
    get_message_deduplicator,
    get_messenger,
)
from app.services.catalog.repository import CatalogRepository
from app.services.conversation.dedup import InMemoryMessageDeduplicator
from app.services.conversation.handler import WhatsAppConversationHandler
from app.services.conversation.state import ConversationStateStore
from app.services.messaging.whatsapp import WhatsAppMessenger

router = APIRouter()
logger = logging.getLogger(__name__)


def get_conversation_handler(
    db: AsyncSession = Depends(get_db),
    messenger: WhatsAppMessenger = Depends(get_messenger),
    state_store: ConversationStateStore = Depends(get_conversation_store),
    deduplicator: InMemoryMessageDeduplicator = Depends(get_message_deduplicator),
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
) -> WhatsAppConversationHandler:
    """Get conversation handler."""
    return WhatsAppConversationHandler(
        db, messenger, state_store, deduplicator, catalog_repository
    )


@router.get("/whatsapp")
async def verify_webhook(
    mode: str = Query(None, alias="hub.mode"),
    token: str = Query(None, alias="hub.verify_token"),
    challenge: str = Query(None, alias="hub.challenge"),
):
    """
    Webhook subscription handshake.

    Echoes the challenge only when the verify token matches.
    """
    if mode == "subscribe" and token == settings.whatsapp_verify_token:
        logger.info("[WEBHOOK VERIFY] Subscription verified")
        return PlainTextResponse(content=challenge or "", status_code=200)

    logger.warning(f"[WEBHOOK VERIFY] Rejected verification - mode: {mode}")
    return PlainTextResponse(content="Forbidden", status_code=403)


@router.post("/whatsapp")
async def handle_webhook(
    request: Request,
    handler: WhatsAppConversationHandler = Depends(get_conversation_handler),
):
    """
    Handle inbound WhatsApp events.

    Always answers 200 with a status tag, including on internal errors,
    so the provider does not retry business-logic failures.
    """
    try:
        body = await request.json()
    except ValueError:
        logger.warning("[WEBHOOK] Body is not valid JSON")
        return JSONResponse({"status": "ignored"}, status_code=200)

    try:
        status = await handler.handle_payload(body)
        logger.info(f"[WEBHOOK] Processed event - status: {status}")
        return JSONResponse({"status": status}, status_code=200)

    except Exception as e:
        logger.error(
            f"[WEBHOOK] Error processing event - Error: {type(e).__name__}: {str(e)}",
            exc_info=True,
        )
        # Still acknowledge so WhatsApp does not keep retrying
        return JSONResponse({"status": "error-but-ack"}, status_code=200)
