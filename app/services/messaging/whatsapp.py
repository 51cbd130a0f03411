"""Outbound WhatsApp messaging via the Cloud API."""
import logging
from typing import Any, Dict, List, Optional

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

MENU_BUTTONS = [
    ("order_catalog", "Order katalog"),
    ("order_manual", "Order manual"),
    ("chat_cs", "Chat CS"),
]


class WhatsAppMessenger:
    """
    Sends text and button messages.

    Delivery failures are logged and reported as False, never raised: the
    webhook has to acknowledge the inbound event either way.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self.client = client
        self.messages_url = (
            f"{settings.whatsapp_api_base_url.rstrip('/')}/{settings.whatsapp_api_version}"
            f"/{settings.whatsapp_phone_number_id}/messages"
        )
        self.headers = {
            "Authorization": f"Bearer {settings.whatsapp_token}",
            "Content-Type": "application/json",
        }

    async def _post(self, payload: Dict[str, Any], label: str) -> bool:
        to = payload.get("to")
        try:
            if self.client is not None:
                response = await self.client.post(
                    self.messages_url, json=payload, headers=self.headers
                )
            else:
                async with httpx.AsyncClient(timeout=settings.whatsapp_timeout_seconds) as client:
                    response = await client.post(
                        self.messages_url, json=payload, headers=self.headers
                    )
        except httpx.HTTPError as e:
            logger.error(
                f"[WHATSAPP] {label} to {to} failed - Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            return False

        if response.status_code >= 400:
            logger.error(
                f"[WHATSAPP] {label} to {to} rejected - Status: {response.status_code}, "
                f"Body: {response.text[:500]}"
            )
            return False

        logger.debug(f"[WHATSAPP] {label} sent to {to}")
        return True

    async def send_text(self, to: str, body: str) -> bool:
        """Send a plain text message."""
        payload = {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "text",
            "text": {"preview_url": False, "body": body},
        }
        return await self._post(payload, "text")

    async def send_menu_buttons(self, to: str, body: str) -> bool:
        """Send the three-button main menu."""
        buttons: List[Dict[str, Any]] = [
            {"type": "reply", "reply": {"id": button_id, "title": title}}
            for button_id, title in MENU_BUTTONS
        ]
        payload = {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "interactive",
            "interactive": {
                "type": "button",
                "body": {"text": body},
                "action": {"buttons": buttons},
            },
        }
        return await self._post(payload, "menu buttons")
