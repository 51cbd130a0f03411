"""Customer persistence service."""
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.db.models import Customer


class CustomerPersistenceService:
    """Service for persisting customer data."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_customer_by_phone(self, phone: str) -> Optional[Customer]:
        """Get customer by WhatsApp phone number."""
        result = await self.db.execute(
            select(Customer).where(Customer.phone == phone)
        )
        return result.scalar_one_or_none()

    async def find_or_create(
        self, phone: str, name: Optional[str] = None, address: Optional[str] = None
    ) -> Customer:
        """
        Return the customer for a phone number, creating it if needed.

        Name and address are only written on creation; a returning
        customer's stored details are never overwritten. The new row is
        flushed, not committed, so it joins the caller's transaction.
        """
        existing_customer = await self.get_customer_by_phone(phone)
        if existing_customer:
            return existing_customer

        customer = Customer(phone=phone, name=name, address=address)
        self.db.add(customer)
        await self.db.flush()
        return customer
