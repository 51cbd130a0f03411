"""Catalog provider backed by the products and product_aliases tables."""
from typing import List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Product, ProductAlias
from app.services.catalog.base import AliasEntry, CatalogProduct, CatalogProvider


def _to_catalog_product(product: Product) -> CatalogProduct:
    return CatalogProduct(id=product.id, sku=product.sku, name=product.name, price=product.price)


class DatabaseCatalogProvider(CatalogProvider):
    """Reads active products and their aliases from the database."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_products(self) -> List[CatalogProduct]:
        """Get all active products."""
        result = await self.db.execute(
            select(Product).where(Product.is_active.is_(True)).order_by(Product.id)
        )
        return [_to_catalog_product(product) for product in result.scalars().all()]

    async def get_alias_entries(self) -> List[AliasEntry]:
        """Get aliases of active products, ordered by alias text."""
        result = await self.db.execute(
            select(ProductAlias, Product)
            .join(Product, ProductAlias.product_id == Product.id)
            .where(Product.is_active.is_(True))
            .order_by(ProductAlias.alias)
        )
        return [
            AliasEntry(alias=alias.alias.lower().strip(), product=_to_catalog_product(product))
            for alias, product in result.all()
        ]
