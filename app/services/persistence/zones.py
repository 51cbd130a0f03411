"""Zone persistence service."""
from typing import List
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Zone
from app.services.zones.models import ZoneRecord


class ZoneRepository:
    """Read access to the zones table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_zones(self) -> List[ZoneRecord]:
        """Get all active zones ordered by id."""
        try:
            result = await self.db.execute(
                select(Zone).where(Zone.is_active.is_(True)).order_by(Zone.id)
            )
        except SQLAlchemyError:
            # Leave the session usable for the writes that follow
            await self.db.rollback()
            raise
        return [ZoneRecord.model_validate(zone) for zone in result.scalars().all()]
