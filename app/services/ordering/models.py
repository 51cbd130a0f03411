"""Order intake models."""
from typing import List, Optional
from pydantic import BaseModel, Field


class RawItemLine(BaseModel):
    """One unparsed order line."""

    raw: str


class ManualOrderDraft(BaseModel):
    """Name / address / order sections parsed from one chat message."""

    customer_phone: str
    raw_text: str
    name: Optional[str] = None
    address: Optional[str] = None
    items: List[RawItemLine] = []


class ParsedItem(BaseModel):
    """Order line with quantity and unit words stripped."""

    raw: str
    alias_text: str
    qty: float = Field(gt=0)


class ResolvedItem(BaseModel):
    """Order line matched to a catalog product."""

    raw: str
    alias_text: str
    product_id: int
    product_name: str
    unit_price: float
    qty: float
    line_total: float


class ResolutionResult(BaseModel):
    """Outcome of resolving a draft against the catalog."""

    ok: bool
    draft: ManualOrderDraft
    items: List[ResolvedItem] = []
    errors: List[str] = []
    error_kind: Optional[str] = None  # invalid_draft, invalid_lines, unresolved_items, no_valid_items

    @property
    def subtotal(self) -> float:
        return sum(item.line_total for item in self.items)
