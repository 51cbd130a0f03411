"""Reference data seeding (catalog and delivery zones)."""
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Product, ProductAlias, Zone

logger = logging.getLogger(__name__)

DEFAULT_SEED_FILE = Path(__file__).parent / "data" / "reference.yaml"


def load_reference_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a reference data YAML file."""
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


async def seed_reference_data(db: AsyncSession, path: Union[str, Path] = DEFAULT_SEED_FILE) -> None:
    """
    Seed products, aliases and zones from YAML.

    Each table is only seeded when it is empty, so running this on every
    startup never duplicates or overwrites admin edits.
    """
    data = load_reference_file(path)

    product_count = (await db.execute(select(func.count(Product.id)))).scalar() or 0
    if product_count == 0:
        for entry in data.get("products", []):
            product = Product(sku=entry["sku"], name=entry["name"], price=int(entry["price"]))
            for alias in entry.get("aliases", []):
                product.aliases.append(ProductAlias(alias=str(alias).lower().strip()))
            db.add(product)
        logger.info(f"[SEED] Seeded {len(data.get('products', []))} products from {path}")

    zone_count = (await db.execute(select(func.count(Zone.id)))).scalar() or 0
    if zone_count == 0:
        for entry in data.get("zones", []):
            db.add(
                Zone(
                    code=entry["code"],
                    name=entry["name"],
                    area_group=entry.get("area_group"),
                    delivery_fee=entry.get("delivery_fee"),
                )
            )
        logger.info(f"[SEED] Seeded {len(data.get('zones', []))} zones from {path}")

    await db.commit()
