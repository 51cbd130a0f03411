"""Manual order parsing service."""
import logging
import re
from typing import List, Optional

from app.services.ordering.models import ManualOrderDraft, RawItemLine
from app.services.text.keywords import KeywordSet
from app.services.text.normalizer import normalize_words

logger = logging.getLogger(__name__)

NAME_KEYWORDS = KeywordSet("name", ["nama", "nm", "nma", "namaa", "name"])
ADDRESS_KEYWORDS = KeywordSet(
    "address",
    ["alamat lengkap", "alamat", "almt", "alamt", "alamaat", "address", "addr"],
)
ORDER_KEYWORDS = KeywordSet(
    "order",
    ["orderan", "order", "oder", "ordr", "pesanan", "pesan"],
)

# Checked in this order; a line matching two sets goes to the first.
SECTION_KEYWORDS = [
    ("name", NAME_KEYWORDS),
    ("address", ADDRESS_KEYWORDS),
    ("order", ORDER_KEYWORDS),
]

_LINE_SPLIT = re.compile(r"\r?\n")
_BULLET = re.compile(r"^[-•*·>\s]*(?:\d+[.)]\s+)?")  # "- ", "• ", "1. ", "2) "
_HEADER_MARKUP = "*_~ \t"
_VALUE_LEAD = ":-*_~ \t"


class ManualOrderParser:
    """Split a NAMA / ALAMAT / ORDER chat message into a draft."""

    def _match_section(self, line: str) -> Optional[tuple]:
        """Return (section, remainder) when the line starts with a section keyword."""
        header = line.lstrip(_HEADER_MARKUP)
        for section, keywords in SECTION_KEYWORDS:
            remainder = keywords.match_prefix(header)
            if remainder is not None:
                return section, remainder.lstrip(_VALUE_LEAD).strip()
        return None

    def is_manual_order(self, text: str) -> bool:
        """
        Decide whether a message should be handled as a manual order.

        Every keyword family must appear somewhere in the message, and at
        least one line must start with a section keyword.
        """
        normalized = normalize_words(text)
        if not all(keywords.found_in(normalized) for _, keywords in SECTION_KEYWORDS):
            return False
        return any(
            self._match_section(line.strip()) is not None
            for line in _LINE_SPLIT.split(text or "")
            if line.strip()
        )

    def parse(self, customer_phone: str, text: str) -> ManualOrderDraft:
        """
        Parse a manual order message.

        Args:
            customer_phone: Sender phone number
            text: Raw message text

        Returns:
            ManualOrderDraft; any field may be empty
        """
        lines = [line.strip() for line in _LINE_SPLIT.split(text or "")]
        lines = [line for line in lines if line]

        section = None
        name_parts: List[str] = []
        address_parts: List[str] = []
        items: List[RawItemLine] = []

        for line in lines:
            matched = self._match_section(line)
            if matched is not None:
                section, content = matched
            else:
                content = line

            if not content or section is None:
                continue

            if section == "name":
                name_parts.append(content)
            elif section == "address":
                address_parts.append(content)
            elif section == "order":
                cleaned = _BULLET.sub("", content).strip()
                if cleaned:
                    items.append(RawItemLine(raw=cleaned))

        draft = ManualOrderDraft(
            customer_phone=customer_phone,
            raw_text=text,
            name=" ".join(name_parts) or None,
            address=" ".join(address_parts) or None,
            items=items,
        )
        logger.debug(
            f"[PARSER] Draft for {customer_phone}: name={draft.name!r}, "
            f"address={draft.address!r}, items={len(draft.items)}"
        )
        return draft
