"""Order persistence service."""
import logging
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db.models import (
    Order,
    OrderItem,
    OrderStatus,
    Payment,
    PaymentMethod,
    PaymentStatus,
    Zone,
)
from app.services.conversation.state import ConversationState
from app.services.ordering.models import ResolvedItem
from app.services.persistence.customers import CustomerPersistenceService
from app.services.zones.detector import ZoneDetector
from app.services.zones.models import ZoneMatch

logger = logging.getLogger(__name__)


class CommitResult(BaseModel):
    """What was written for a confirmed order."""

    order_id: int
    customer_id: int
    items: List[ResolvedItem]
    subtotal: float
    delivery_fee: float
    discount: float
    grand_total: float
    payment_method: PaymentMethod
    zone: ZoneMatch


class OrderPersistenceService:
    """Service for persisting order data."""

    def __init__(self, db: AsyncSession, zone_detector: ZoneDetector):
        self.db = db
        self.zone_detector = zone_detector
        self.customers = CustomerPersistenceService(db)

    async def commit_order(
        self,
        phone: str,
        state: ConversationState,
        payment_method: PaymentMethod,
        display_name: Optional[str] = None,
        source_message_id: Optional[str] = None,
    ) -> CommitResult:
        """
        Write a confirmed draft: customer, order, items and payment.

        Zone detection runs first since it only reads. All writes share one
        transaction; any failure rolls back everything, so no order header is
        left without its items. Errors propagate to the caller.
        """
        draft = state.parsed
        zone = await self.zone_detector.detect(draft.address)

        subtotal = sum(item.line_total for item in state.resolved_items)
        delivery_fee = zone.delivery_fee
        discount = 0
        grand_total = subtotal + delivery_fee - discount

        try:
            customer = await self.customers.find_or_create(
                phone, name=draft.name or display_name, address=draft.address
            )

            order = Order(
                customer_id=customer.id,
                address_text=draft.address,
                zone_id=zone.zone_id,
                zone_code=zone.zone_code,
                subtotal=subtotal,
                delivery_fee=delivery_fee,
                discount=discount,
                grand_total=grand_total,
                payment_method=payment_method,
                status=OrderStatus.PENDING,
                raw_text=draft.raw_text,
                source_message_id=source_message_id,
            )
            self.db.add(order)
            await self.db.flush()

            for item in state.resolved_items:
                self.db.add(
                    OrderItem(
                        order_id=order.id,
                        product_id=item.product_id,
                        item_name=item.product_name,
                        raw_text=item.raw,
                        quantity=item.qty,
                        unit_price=item.unit_price,
                        line_total=item.line_total,
                    )
                )

            self.db.add(
                Payment(
                    order_id=order.id,
                    method=payment_method,
                    amount=grand_total,
                    status=PaymentStatus.PENDING,
                )
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            f"[ORDER COMMIT] Order {order.id} for {phone} - {len(state.resolved_items)} items, "
            f"subtotal {subtotal}, fee {delivery_fee}, zone {zone.zone_code}, {payment_method.value}"
        )

        return CommitResult(
            order_id=order.id,
            customer_id=customer.id,
            items=state.resolved_items,
            subtotal=subtotal,
            delivery_fee=delivery_fee,
            discount=discount,
            grand_total=grand_total,
            payment_method=payment_method,
            zone=zone,
        )

    async def get_order_by_id(self, order_id: int) -> Optional[Order]:
        """Get order by ID with items and payments."""
        result = await self.db.execute(
            select(Order)
            .where(Order.id == order_id)
            .options(selectinload(Order.items), selectinload(Order.payments))
        )
        return result.scalar_one_or_none()

    async def update_status(self, order_id: int, status: OrderStatus) -> Optional[Order]:
        """Update an order's status. Returns None when the order does not exist."""
        order = await self.get_order_by_id(order_id)
        if order:
            order.status = status
            await self.db.commit()
            await self.db.refresh(order)
        return order

    async def list_orders_between(
        self,
        start: datetime,
        end: datetime,
        zone_query: Optional[str] = None,
        payment_method: Optional[PaymentMethod] = None,
    ) -> List[Order]:
        """Orders created in [start, end), optionally filtered by zone name/code and payment."""
        query = (
            select(Order)
            .outerjoin(Zone, Order.zone_id == Zone.id)
            .where(Order.created_at >= start, Order.created_at < end)
            .options(
                selectinload(Order.items),
                selectinload(Order.payments),
                selectinload(Order.customer),
                selectinload(Order.zone),
            )
            .order_by(Order.created_at)
        )
        if zone_query:
            pattern = f"%{zone_query}%"
            query = query.where(or_(Zone.name.ilike(pattern), Order.zone_code.ilike(pattern)))
        if payment_method:
            query = query.where(Order.payment_method == payment_method)

        result = await self.db.execute(query)
        return list(result.scalars().all())
