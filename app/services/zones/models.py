"""Zone models."""
from typing import Optional
from pydantic import BaseModel


class ZoneRecord(BaseModel):
    """Zone row as read from the zones table."""

    id: int
    code: str
    name: str
    area_group: Optional[str] = None
    delivery_fee: Optional[int] = None  # None = no fee configured, 0 = free

    class Config:
        from_attributes = True


class ZoneMatch(BaseModel):
    """Result of zone detection. All fields None when nothing matched."""

    zone_id: Optional[int] = None
    zone_code: Optional[str] = None
    zone_name: Optional[str] = None
    delivery_fee_db: Optional[int] = None
    score: float = 0.0
    source: Optional[str] = None  # "keyword" or "rule"

    @property
    def detected(self) -> bool:
        return self.zone_code is not None

    @property
    def delivery_fee(self) -> int:
        """Fee used in order totals; an unconfigured fee counts as 0."""
        return self.delivery_fee_db or 0
