"""In-memory catalog provider."""
import yaml
from pathlib import Path
from typing import List, Optional
from app.services.catalog.base import AliasEntry, CatalogProduct, CatalogProvider


class InMemoryCatalogProvider(CatalogProvider):
    """In-memory catalog provider using YAML configuration."""

    def __init__(self, catalog_file: Optional[str] = None):
        """Initialize with optional catalog file path."""
        if catalog_file is None:
            catalog_file = Path(__file__).parents[2] / "db" / "data" / "reference.yaml"
        self.catalog_file = Path(catalog_file)
        self._products: Optional[List[CatalogProduct]] = None
        self._aliases: Optional[List[AliasEntry]] = None

    async def _load_catalog(self) -> None:
        """Load products and aliases from the YAML file."""
        if self._products is not None:
            return

        with open(self.catalog_file, "r") as f:
            data = yaml.safe_load(f) or {}

        products = []
        aliases = []
        for index, entry in enumerate(data.get("products", []), start=1):
            product = CatalogProduct(
                id=entry.get("id", index),
                sku=entry["sku"],
                name=entry["name"],
                price=entry["price"],
            )
            products.append(product)
            for alias in entry.get("aliases", []):
                aliases.append(AliasEntry(alias=str(alias).lower().strip(), product=product))

        self._products = products
        self._aliases = aliases

    async def get_products(self) -> List[CatalogProduct]:
        """Get all products."""
        await self._load_catalog()
        return list(self._products)

    async def get_alias_entries(self) -> List[AliasEntry]:
        """Get all aliases in file order."""
        await self._load_catalog()
        return list(self._aliases)
