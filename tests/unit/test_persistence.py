"""Unit tests for persistence services (customers and orders)."""
import pytest
from datetime import datetime, timedelta
from unittest.mock import AsyncMock
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from app.db.models import Customer, Order, OrderItem, OrderStatus, Payment, PaymentMethod, PaymentStatus
from app.services.conversation.state import ConversationState
from app.services.ordering.models import ManualOrderDraft, ResolvedItem
from app.services.persistence.customers import CustomerPersistenceService
from app.services.persistence.orders import OrderPersistenceService
from app.services.persistence.zones import ZoneRepository
from app.services.zones.detector import ZoneDetector


def make_state(address: str = "Graha Family blok A2", name: str = "Budi") -> ConversationState:
    draft = ManualOrderDraft(
        customer_phone="628111",
        raw_text="NAMA: Budi\nALAMAT: ...\nORDER:\n- Bayam 2 ikat\n- Wortel 1",
        name=name,
        address=address,
    )
    items = [
        ResolvedItem(
            raw="Bayam 2 ikat",
            alias_text="bayam",
            product_id=1,
            product_name="Bayam",
            unit_price=5000,
            qty=2,
            line_total=10000,
        ),
        ResolvedItem(
            raw="Wortel 1",
            alias_text="wortel",
            product_id=2,
            product_name="Wortel",
            unit_price=3000,
            qty=1,
            line_total=3000,
        ),
    ]
    return ConversationState(parsed=draft, resolved_items=items)


def order_service(db) -> OrderPersistenceService:
    return OrderPersistenceService(db, ZoneDetector(ZoneRepository(db)))


async def count_rows(db, model) -> int:
    return (await db.execute(select(func.count(model.id)))).scalar()


class TestCustomerPersistence:
    """Test customer persistence service."""

    @pytest.mark.asyncio
    async def test_find_or_create_new(self, test_db):
        """Test creating a customer on first contact."""
        service = CustomerPersistenceService(test_db)

        customer = await service.find_or_create("628111", name="Budi", address="Graha Famili")

        assert customer.id is not None
        assert customer.phone == "628111"
        assert customer.name == "Budi"

    @pytest.mark.asyncio
    async def test_find_or_create_keeps_existing(self, test_db):
        """Test that a returning customer's details are not overwritten."""
        service = CustomerPersistenceService(test_db)
        first = await service.find_or_create("628111", name="Budi", address="Graha Famili")
        await test_db.commit()

        second = await service.find_or_create("628111", name="Budi Baru", address="Pakuwon City")

        assert second.id == first.id
        assert second.name == "Budi"
        assert second.address == "Graha Famili"
        assert await count_rows(test_db, Customer) == 1


class TestOrderPersistence:
    """Test order persistence service."""

    @pytest.mark.asyncio
    async def test_commit_order(self, seeded_db):
        """Test that a commit writes customer, order, items and payment."""
        result = await order_service(seeded_db).commit_order(
            "628111", make_state(), PaymentMethod.COD, source_message_id="wamid.1"
        )

        assert result.subtotal == 13000
        assert result.delivery_fee == 10000
        assert result.grand_total == 23000
        assert result.zone.zone_code == "GRAHA_FAMILI"

        order = await order_service(seeded_db).get_order_by_id(result.order_id)
        assert order.status == OrderStatus.PENDING
        assert order.payment_method == PaymentMethod.COD
        assert order.zone_code == "GRAHA_FAMILI"
        assert order.zone_id is not None
        assert order.source_message_id == "wamid.1"
        assert [(i.item_name, i.quantity, i.line_total) for i in order.items] == [
            ("Bayam", 2, 10000),
            ("Wortel", 1, 3000),
        ]
        assert len(order.payments) == 1
        assert order.payments[0].status == PaymentStatus.PENDING
        assert order.payments[0].method == PaymentMethod.COD
        assert order.payments[0].amount == 23000

    @pytest.mark.asyncio
    async def test_commit_order_transfer(self, seeded_db):
        """Test that the payment method is the only difference for transfer."""
        result = await order_service(seeded_db).commit_order(
            "628111", make_state(), PaymentMethod.TRANSFER
        )

        order = await order_service(seeded_db).get_order_by_id(result.order_id)
        assert order.payment_method == PaymentMethod.TRANSFER
        assert order.payments[0].method == PaymentMethod.TRANSFER
        assert order.subtotal == 13000

    @pytest.mark.asyncio
    async def test_commit_order_unknown_zone(self, seeded_db):
        """Test that an undetected zone adds no delivery fee."""
        result = await order_service(seeded_db).commit_order(
            "628111", make_state(address="Perumahan Citra Harmoni"), PaymentMethod.COD
        )

        order = await order_service(seeded_db).get_order_by_id(result.order_id)
        assert order.zone_id is None
        assert order.zone_code is None
        assert order.delivery_fee == 0
        assert order.grand_total == 13000

    @pytest.mark.asyncio
    async def test_commit_uses_profile_name_when_draft_has_none(self, seeded_db):
        """Test the WhatsApp profile name as a fallback customer name."""
        await order_service(seeded_db).commit_order(
            "628222", make_state(name=None), PaymentMethod.COD, display_name="Sari WA"
        )

        customer = await CustomerPersistenceService(seeded_db).get_customer_by_phone("628222")
        assert customer.name == "Sari WA"

    @pytest.mark.asyncio
    async def test_commit_reuses_customer(self, seeded_db):
        """Test that two orders from one phone share a customer."""
        service = order_service(seeded_db)

        first = await service.commit_order("628111", make_state(), PaymentMethod.COD)
        second = await service.commit_order("628111", make_state(name="Lain"), PaymentMethod.COD)

        assert first.customer_id == second.customer_id
        assert await count_rows(seeded_db, Customer) == 1
        assert await count_rows(seeded_db, Order) == 2

    @pytest.mark.asyncio
    async def test_commit_failure_rolls_back(self, seeded_db, monkeypatch):
        """Test that a failed commit leaves no partial order behind."""
        monkeypatch.setattr(
            seeded_db, "commit", AsyncMock(side_effect=SQLAlchemyError("write failed"))
        )

        with pytest.raises(SQLAlchemyError):
            await order_service(seeded_db).commit_order("628111", make_state(), PaymentMethod.COD)

        assert await count_rows(seeded_db, Order) == 0
        assert await count_rows(seeded_db, OrderItem) == 0
        assert await count_rows(seeded_db, Payment) == 0
        assert await count_rows(seeded_db, Customer) == 0

    @pytest.mark.asyncio
    async def test_update_status(self, seeded_db):
        """Test updating an order's status."""
        service = order_service(seeded_db)
        result = await service.commit_order("628111", make_state(), PaymentMethod.COD)

        order = await service.update_status(result.order_id, OrderStatus.ON_DELIVERY)

        assert order.status == OrderStatus.ON_DELIVERY
        assert await service.update_status(9999, OrderStatus.COMPLETED) is None

    @pytest.mark.asyncio
    async def test_list_orders_between_filters(self, seeded_db):
        """Test date window, zone and payment filters."""
        service = order_service(seeded_db)
        await service.commit_order("628111", make_state(), PaymentMethod.COD)
        await service.commit_order(
            "628222", make_state(address="Pakuwon City"), PaymentMethod.TRANSFER
        )

        start = datetime.utcnow() - timedelta(hours=1)
        end = datetime.utcnow() + timedelta(hours=1)

        assert len(await service.list_orders_between(start, end)) == 2
        assert len(await service.list_orders_between(end, end + timedelta(days=1))) == 0

        graha = await service.list_orders_between(start, end, zone_query="graha")
        assert [o.zone_code for o in graha] == ["GRAHA_FAMILI"]

        transfers = await service.list_orders_between(start, end, payment_method=PaymentMethod.TRANSFER)
        assert [o.customer.phone for o in transfers] == ["628222"]
