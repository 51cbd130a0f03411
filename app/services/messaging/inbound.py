"""Inbound WhatsApp webhook payload extraction."""
from typing import Any, Dict, Optional
from pydantic import BaseModel

WHATSAPP_OBJECT = "whatsapp_business_account"


class InboundMessage(BaseModel):
    """The single message we act on from a webhook event."""

    phone: str
    type: str
    message_id: Optional[str] = None
    text: Optional[str] = None
    button_id: Optional[str] = None
    profile_name: Optional[str] = None


def _first(items: Any) -> Dict[str, Any]:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return {}


def is_whatsapp_event(body: Any) -> bool:
    return isinstance(body, dict) and body.get("object") == WHATSAPP_OBJECT


def extract_message(body: Dict[str, Any]) -> Optional[InboundMessage]:
    """
    Pull the first message out of a Cloud API webhook body.

    Returns None for events without a message (delivery/read statuses) or
    without a sender.
    """
    value = _first(_first(body.get("entry")).get("changes")).get("value") or {}
    message = _first(value.get("messages"))
    sender = message.get("from")
    if not message or not sender:
        return None

    contact = _first(value.get("contacts"))
    profile_name = (contact.get("profile") or {}).get("name")

    message_type = message.get("type") or "unknown"
    text = None
    button_id = None
    if message_type == "text":
        text = (message.get("text") or {}).get("body") or ""
    elif message_type == "interactive":
        interactive = message.get("interactive") or {}
        if interactive.get("type") == "button_reply":
            button_id = (interactive.get("button_reply") or {}).get("id")
    elif message_type == "button":
        button_id = (message.get("button") or {}).get("payload")

    return InboundMessage(
        phone=str(sender),
        type=message_type,
        message_id=message.get("id"),
        text=text,
        button_id=button_id,
        profile_name=profile_name,
    )
