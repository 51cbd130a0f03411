"""Admin and driver order endpoints."""
import logging
import re
from datetime import datetime, timedelta
from typing import List, Optional
from fastapi import APIRouter, Depends, Request, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel

from app.db.database import get_db
from app.db.models import Order, OrderStatus, PaymentMethod
from app.services.persistence.orders import OrderPersistenceService
from app.services.persistence.zones import ZoneRepository
from app.services.zones.detector import ZoneDetector


router = APIRouter()
logger = logging.getLogger(__name__)

# Orders are dispatched per local (WIB) calendar day; created_at is UTC.
BUSINESS_UTC_OFFSET = timedelta(hours=7)
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class StatusUpdateRequest(BaseModel):
    """Status update request body."""
    orderId: Optional[int] = None
    status: Optional[str] = None


class OrderStatusResponse(BaseModel):
    """Updated order reference."""
    id: int
    status: str


class StatusUpdateResponse(BaseModel):
    """Status update response body."""
    ok: bool
    order: OrderStatusResponse


class DispatchOrderResponse(BaseModel):
    """One order in the dispatch list."""
    id: int
    customer_name: str | None = None
    address_text: str | None = None
    payment_method: str | None = None
    order_status: str
    payment_status: str | None = None
    grand_total: float
    order_items_text: str


class ZoneStatsResponse(BaseModel):
    """Per-zone totals."""
    orderCount: int = 0
    codCount: int = 0
    tfCount: int = 0
    totalAmount: float = 0


class ZoneGroupResponse(BaseModel):
    """Orders of one zone."""
    zoneCode: str
    zoneName: str
    stats: ZoneStatsResponse
    orders: List[DispatchOrderResponse] = []


class DispatchResponse(BaseModel):
    """Orders of one day grouped by zone."""
    date: str
    zones: List[ZoneGroupResponse] = []


def get_order_persistence(db: AsyncSession = Depends(get_db)) -> OrderPersistenceService:
    """Get order persistence service."""
    return OrderPersistenceService(db, ZoneDetector(ZoneRepository(db)))


def _items_text(order: Order) -> str:
    parts = []
    for item in order.items:
        qty = int(item.quantity) if float(item.quantity).is_integer() else item.quantity
        parts.append(f"{item.item_name} x{qty}")
    return ", ".join(parts)


def group_orders_by_zone(orders: List[Order]) -> List[ZoneGroupResponse]:
    """Group orders by zone, sorted by zone name."""
    groups = {}
    for order in orders:
        zone_code = order.zone_code or "UNKNOWN"
        zone_name = order.zone.name if order.zone else (order.zone_code or "Unknown Zone")
        key = (zone_code, zone_name)
        group = groups.get(key)
        if group is None:
            group = ZoneGroupResponse(zoneCode=zone_code, zoneName=zone_name, stats=ZoneStatsResponse())
            groups[key] = group

        payment_method = order.payment_method.value if order.payment_method else None
        group.orders.append(
            DispatchOrderResponse(
                id=order.id,
                customer_name=order.customer.name if order.customer else None,
                address_text=order.address_text,
                payment_method=payment_method,
                order_status=order.status.value,
                payment_status=order.payments[0].status.value if order.payments else None,
                grand_total=order.grand_total,
                order_items_text=_items_text(order),
            )
        )
        group.stats.orderCount += 1
        if order.payment_method == PaymentMethod.COD:
            group.stats.codCount += 1
        if order.payment_method == PaymentMethod.TRANSFER:
            group.stats.tfCount += 1
        group.stats.totalAmount += order.grand_total or 0

    return sorted(groups.values(), key=lambda g: g.zoneName)


@router.post("/api/admin/orders/status", response_model=StatusUpdateResponse)
async def update_order_status(
    request: Request,
    body: StatusUpdateRequest,
    order_persistence: OrderPersistenceService = Depends(get_order_persistence),
):
    """Update the status of one order."""
    logger.info(
        f"[ADMIN STATUS UPDATE] Request received - orderId: {body.orderId}, status: {body.status}, "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )

    if not body.orderId or not body.status:
        raise HTTPException(status_code=400, detail="orderId atau status kosong")

    try:
        status = OrderStatus(body.status.upper())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Status tidak dikenal: {body.status}")

    try:
        order = await order_persistence.update_status(body.orderId, status)
    except Exception as e:
        logger.error(
            f"[ADMIN STATUS UPDATE] Error updating order {body.orderId} - "
            f"Error: {type(e).__name__}: {str(e)}",
            exc_info=True,
        )
        raise HTTPException(status_code=500, detail="Server error saat update status")

    if order is None:
        raise HTTPException(status_code=404, detail=f"Order {body.orderId} tidak ditemukan")

    return StatusUpdateResponse(
        ok=True, order=OrderStatusResponse(id=order.id, status=order.status.value)
    )


@router.get("/api/orders/dispatch", response_model=DispatchResponse)
async def get_dispatch_orders(
    request: Request,
    date: Optional[str] = None,
    zone: Optional[str] = None,
    pay: str = "ALL",
    order_persistence: OrderPersistenceService = Depends(get_order_persistence),
):
    """Orders of one local day grouped by zone, for the admin and driver views."""
    logger.info(
        f"[DISPATCH] Request received - date: {date}, zone: {zone}, pay: {pay}, "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )

    if date and _DATE_PATTERN.match(date):
        try:
            day = datetime.strptime(date, "%Y-%m-%d")
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Tanggal tidak valid: {date}")
    else:
        local_now = datetime.utcnow() + BUSINESS_UTC_OFFSET
        day = datetime(local_now.year, local_now.month, local_now.day)

    payment_method = None
    if pay and pay.upper() != "ALL":
        try:
            payment_method = PaymentMethod(pay.upper())
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Metode bayar tidak dikenal: {pay}")

    start = day - BUSINESS_UTC_OFFSET
    end = start + timedelta(days=1)

    try:
        orders = await order_persistence.list_orders_between(
            start, end, zone_query=(zone or "").strip() or None, payment_method=payment_method
        )
    except Exception as e:
        logger.error(
            f"[DISPATCH] Error fetching orders - Error: {type(e).__name__}: {str(e)}",
            exc_info=True,
        )
        raise HTTPException(status_code=500, detail="Server error saat mengambil order")

    zones = group_orders_by_zone(orders)
    logger.info(f"[DISPATCH] {len(orders)} orders in {len(zones)} zones for {day.date()}")
    return DispatchResponse(date=day.strftime("%Y-%m-%d"), zones=zones)
