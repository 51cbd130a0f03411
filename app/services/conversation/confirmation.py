"""Confirmation and payment method detection for follow-up replies."""
from typing import Optional

from app.db.models import PaymentMethod
from app.services.text.keywords import KeywordSet

# Matched as substrings of the compact (alphanumeric-only) reply, so
# "transferrr", "tff" and "ok cod" all count.
TRANSFER_KEYWORDS = KeywordSet(
    "transfer", ["transfer", "transfr", "trasfer", "tranfer", "trf", "tf"]
)
COD_KEYWORDS = KeywordSet("cod", ["cod", "cash"])
OK_KEYWORDS = KeywordSet("ok", ["ok"])


class ConfirmationInterpreter:
    """
    Decides whether a reply confirms the stored draft, and how it is paid.

    Any reply containing "ok" confirms, including words that merely
    contain it ("oke", "okey", but also "bokek"). Spaces are gone in the
    compact form, so "ok" spanning two words also confirms: "halo kak"
    becomes "halokak" and commits the draft as COD.
    """

    def payment_method(self, compact_text: str) -> Optional[PaymentMethod]:
        """Payment method signalled by a reply, or None if it is not a confirmation."""
        if TRANSFER_KEYWORDS.found_in_compact(compact_text):
            return PaymentMethod.TRANSFER
        if COD_KEYWORDS.found_in_compact(compact_text):
            return PaymentMethod.COD
        if OK_KEYWORDS.found_in_compact(compact_text):
            return PaymentMethod.COD
        return None

    def interpret(self, compact_text: str, has_draft: bool) -> Optional[PaymentMethod]:
        """Payment method to commit with, or None when nothing should be committed."""
        if not has_draft:
            return None
        return self.payment_method(compact_text)
