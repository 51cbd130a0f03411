"""Item resolution against the product catalog."""
import logging
from typing import Dict, List, Optional

from app.services.catalog.base import CatalogProduct
from app.services.catalog.repository import CatalogRepository
from app.services.ordering.item_parser import parse_item_line
from app.services.ordering.models import (
    ManualOrderDraft,
    ParsedItem,
    ResolutionResult,
    ResolvedItem,
)
from app.services.text.keywords import levenshtein_distance

logger = logging.getLogger(__name__)

NO_VALID_ITEMS_ERROR = "Tidak ada item yang bisa dibaca di bagian ORDER"


class ItemResolver:
    """Maps parsed order lines to catalog products (exact, then Levenshtein)."""

    def __init__(
        self,
        catalog_repository: CatalogRepository,
        fuzzy_min_length: int = 4,
        short_max_length: int = 5,
        short_max_distance: int = 1,
        long_max_distance: int = 2,
    ):
        self.catalog_repository = catalog_repository
        self.fuzzy_min_length = fuzzy_min_length
        self.short_max_length = short_max_length
        self.short_max_distance = short_max_distance
        self.long_max_distance = long_max_distance

    def match_alias(
        self, alias_text: str, alias_map: Dict[str, CatalogProduct]
    ) -> Optional[CatalogProduct]:
        """
        Find the product for an alias string.

        Exact lookup first. Otherwise the closest alias by edit distance,
        accepted within 1 edit for aliases up to 5 characters and 2 edits
        beyond. Inputs shorter than 4 characters never fuzzy match. Ties
        keep the first candidate in alias map order.
        """
        key = alias_text.lower().strip()
        if not key:
            return None

        exact = alias_map.get(key)
        if exact is not None:
            return exact

        if len(key) < self.fuzzy_min_length:
            return None

        best_product = None
        best_distance = None
        for candidate, product in alias_map.items():
            if max(len(key), len(candidate)) < self.fuzzy_min_length:
                continue
            distance = levenshtein_distance(key, candidate)
            if best_distance is None or distance < best_distance:
                best_distance = distance
                best_product = product

        if best_distance is None:
            return None

        allowed = (
            self.short_max_distance
            if len(key) <= self.short_max_length
            else self.long_max_distance
        )
        if best_distance <= allowed:
            logger.info(
                f"[RESOLVER] Fuzzy matched '{key}' -> '{best_product.name}' (distance {best_distance})"
            )
            return best_product
        return None

    async def resolve_draft(self, draft: ManualOrderDraft) -> ResolutionResult:
        """
        Parse and resolve every item line of a draft.

        All lines must resolve; a single failure fails the whole draft with
        the full list of errors.
        """
        line_errors: List[str] = []
        parsed_items: List[ParsedItem] = []

        for line in draft.items:
            parsed = parse_item_line(line.raw)
            if parsed is None:
                line_errors.append(f'"{line.raw}": jumlah atau nama item tidak terbaca')
            else:
                parsed_items.append(parsed)

        if not parsed_items:
            return ResolutionResult(
                ok=False,
                draft=draft,
                errors=[NO_VALID_ITEMS_ERROR] + line_errors,
                error_kind="no_valid_items",
            )

        alias_map = await self.catalog_repository.get_alias_map()

        resolved: List[ResolvedItem] = []
        unresolved_errors: List[str] = []
        for parsed in parsed_items:
            product = self.match_alias(parsed.alias_text, alias_map)
            if product is None:
                unresolved_errors.append(
                    f'"{parsed.raw}": item tidak dikenali (dicari: "{parsed.alias_text}")'
                )
                continue
            resolved.append(
                ResolvedItem(
                    raw=parsed.raw,
                    alias_text=parsed.alias_text,
                    product_id=product.id,
                    product_name=product.name,
                    unit_price=product.price,
                    qty=parsed.qty,
                    line_total=parsed.qty * product.price,
                )
            )

        errors = line_errors + unresolved_errors
        if errors:
            logger.info(f"[RESOLVER] Draft from {draft.customer_phone} failed: {errors}")
            return ResolutionResult(
                ok=False,
                draft=draft,
                errors=errors,
                error_kind="unresolved_items" if unresolved_errors else "invalid_lines",
            )

        return ResolutionResult(ok=True, draft=draft, items=resolved)
