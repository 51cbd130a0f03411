"""Catalog provider interface."""
from abc import ABC, abstractmethod
from typing import List
from pydantic import BaseModel


class CatalogProduct(BaseModel):
    """Sellable product."""

    id: int
    sku: str
    name: str
    price: float


class AliasEntry(BaseModel):
    """A known alias string and the product it maps to."""

    alias: str
    product: CatalogProduct


class CatalogProvider(ABC):
    """Abstract base class for catalog providers."""

    @abstractmethod
    async def get_products(self) -> List[CatalogProduct]:
        """Get all active products."""
        pass

    @abstractmethod
    async def get_alias_entries(self) -> List[AliasEntry]:
        """Get all product aliases."""
        pass
