"""WhatsApp conversation handler."""
import logging
from typing import Any, Dict
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.models import PaymentMethod
from app.services.catalog.repository import CatalogRepository
from app.services.conversation.confirmation import ConfirmationInterpreter
from app.services.conversation.dedup import InMemoryMessageDeduplicator
from app.services.conversation.state import ConversationState, ConversationStateStore
from app.services.messaging import templates
from app.services.messaging.inbound import InboundMessage, extract_message, is_whatsapp_event
from app.services.messaging.whatsapp import WhatsAppMessenger
from app.services.ordering.parser import ManualOrderParser
from app.services.ordering.resolver import ItemResolver
from app.services.ordering.validator import DraftValidator
from app.services.persistence.orders import OrderPersistenceService
from app.services.persistence.zones import ZoneRepository
from app.services.text.normalizer import normalize_text
from app.services.zones.detector import ZoneDetector

logger = logging.getLogger(__name__)

MENU_KEYWORDS = {"menu", "start", "halo", "hai", "mulai"}

# Typed fallbacks for people who reply with a number instead of a button
NUMERIC_CHOICES = {"1": "catalog", "2": "manual", "3": "cs"}

BUTTON_CHOICES = {"order_catalog": "catalog", "order_manual": "manual", "chat_cs": "cs"}


class WhatsAppConversationHandler:
    """Routes one inbound webhook event through the order intake flow."""

    def __init__(
        self,
        db: AsyncSession,
        messenger: WhatsAppMessenger,
        state_store: ConversationStateStore,
        deduplicator: InMemoryMessageDeduplicator,
        catalog_repository: CatalogRepository,
    ):
        self.db = db
        self.messenger = messenger
        self.state_store = state_store
        self.deduplicator = deduplicator
        self.parser = ManualOrderParser()
        self.validator = DraftValidator()
        self.resolver = ItemResolver(
            catalog_repository,
            fuzzy_min_length=settings.alias_fuzzy_min_length,
            short_max_length=settings.alias_short_max_length,
            short_max_distance=settings.alias_short_max_distance,
            long_max_distance=settings.alias_long_max_distance,
        )
        self.interpreter = ConfirmationInterpreter()
        zone_detector = ZoneDetector(
            ZoneRepository(db), threshold=settings.zone_match_threshold
        )
        self.order_persistence = OrderPersistenceService(db, zone_detector)

    async def handle_payload(self, body: Dict[str, Any]) -> str:
        """
        Process a webhook body.

        Returns:
            Status tag for the acknowledgement body
        """
        if not is_whatsapp_event(body):
            return "ignored"

        message = extract_message(body)
        if message is None:
            # Delivery/read status callbacks carry no message
            return "no-message"

        if self.deduplicator.seen_before(message.message_id):
            logger.info(
                f"[CONVERSATION] Skipping redelivered message {message.message_id} from {message.phone}"
            )
            return "duplicate"

        if message.type in ("interactive", "button") and message.button_id is not None:
            choice = BUTTON_CHOICES.get(message.button_id)
            if choice:
                await self.handle_menu_selection(message.phone, choice)
            return "ok-button"

        if message.type == "text":
            return await self.handle_text(message)

        await self.send_menu(message.phone)
        return "ok-other-type"

    async def handle_text(self, message: InboundMessage) -> str:
        """Manual order, confirmation, menu keyword or fallback."""
        text = normalize_text(message.text or "")

        if self.parser.is_manual_order(text.trimmed):
            return await self.handle_manual_order(message)

        state = await self.state_store.get(message.phone)
        payment_method = self.interpreter.interpret(text.compact, has_draft=state is not None)
        if payment_method is not None:
            return await self.handle_confirmation(message, state, payment_method)

        if text.normalized in MENU_KEYWORDS:
            await self.send_menu(message.phone)
            return "ok-menu"

        choice = NUMERIC_CHOICES.get(text.normalized)
        if choice:
            await self.handle_menu_selection(message.phone, choice)
            return f"ok-{text.normalized}"

        await self.send_menu(message.phone)
        return "ok-fallback-text"

    async def handle_manual_order(self, message: InboundMessage) -> str:
        """Parse, validate and resolve a manual order, then ask for confirmation."""
        draft = self.parser.parse(message.phone, message.text or "")

        errors = self.validator.validate(draft)
        if errors:
            logger.info(f"[CONVERSATION] Incomplete manual order from {message.phone}: {errors}")
            await self.messenger.send_text(message.phone, templates.draft_errors(errors))
            return "manual-order-invalid"

        result = await self.resolver.resolve_draft(draft)
        if not result.ok:
            await self.messenger.send_text(message.phone, templates.draft_errors(result.errors))
            return "manual-order-invalid"

        state = ConversationState(parsed=draft, resolved_items=result.items)
        # Replaces any earlier unconfirmed draft for this phone
        await self.state_store.put(message.phone, state)

        logger.info(
            f"[CONVERSATION] Draft stored for {message.phone} - {len(result.items)} items, "
            f"subtotal {state.subtotal}"
        )
        await self.messenger.send_text(message.phone, templates.draft_summary(state))
        return "ok-manual-order"

    async def handle_confirmation(
        self,
        message: InboundMessage,
        state: ConversationState,
        payment_method: PaymentMethod,
    ) -> str:
        """Commit the stored draft and send the order confirmation."""
        try:
            result = await self.order_persistence.commit_order(
                message.phone,
                state,
                payment_method,
                display_name=message.profile_name,
                source_message_id=message.message_id,
            )
        except Exception as e:
            logger.error(
                f"[CONVERSATION] Order commit failed - Phone: {message.phone}, "
                f"Items: {len(state.resolved_items)}, Payment: {payment_method.value}, "
                f"Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            await self.messenger.send_text(message.phone, templates.commit_failed_message())
            return "error-commit"

        await self.state_store.delete(message.phone)
        await self.messenger.send_text(
            message.phone,
            templates.order_confirmation(result, settings.transfer_instructions),
        )
        return "ok-order-committed"

    async def send_menu(self, phone: str) -> None:
        await self.messenger.send_menu_buttons(phone, templates.menu_greeting(settings.business_name))

    async def handle_menu_selection(self, phone: str, choice: str) -> None:
        """Reply to a main menu choice."""
        if choice == "catalog":
            await self.messenger.send_text(phone, templates.catalog_instructions())
        elif choice == "manual":
            await self.messenger.send_text(phone, templates.manual_order_instructions())
        elif choice == "cs":
            await self.messenger.send_text(
                phone, templates.chat_cs_message(settings.cs_whatsapp_number)
            )
