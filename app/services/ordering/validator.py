"""Manual order draft validation."""
from typing import List
from app.services.ordering.models import ManualOrderDraft


class DraftValidator:
    """Reports missing sections of a parsed manual order."""

    def validate(self, draft: ManualOrderDraft) -> List[str]:
        """
        Check that a draft has a name, an address and at least one item line.

        Returns:
            List of user-facing error messages (empty when valid)
        """
        errors = []

        if not draft.name or not draft.name.strip():
            errors.append("NAMA belum diisi")

        if not draft.address or not draft.address.strip():
            errors.append("ALAMAT belum diisi")

        if not draft.items:
            errors.append("ORDER belum ada item")

        return errors
