"""Catalog repository."""
from typing import Dict, List
from app.services.catalog.base import CatalogProduct, CatalogProvider


class CatalogRepository:
    """Repository for catalog lookups used by the item resolver."""

    def __init__(self, provider: CatalogProvider):
        self.provider = provider

    async def get_products(self) -> List[CatalogProduct]:
        """Get all products."""
        return await self.provider.get_products()

    async def get_alias_map(self) -> Dict[str, CatalogProduct]:
        """
        Build the alias -> product map.

        Explicit aliases come first in provider order; each product's own
        lowercased name is added afterwards unless an alias already uses it.
        The first entry wins when two products share an alias.
        """
        alias_map: Dict[str, CatalogProduct] = {}
        for entry in await self.provider.get_alias_entries():
            if entry.alias and entry.alias not in alias_map:
                alias_map[entry.alias] = entry.product

        for product in await self.provider.get_products():
            name = product.name.lower().strip()
            if name and name not in alias_map:
                alias_map[name] = product

        return alias_map
