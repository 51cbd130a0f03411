"""Database models."""
import enum
from datetime import datetime
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class OrderStatus(str, enum.Enum):
    """Order lifecycle status."""

    DRAFT = "DRAFT"
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    ON_DELIVERY = "ON_DELIVERY"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentMethod(str, enum.Enum):
    """How the customer pays."""

    COD = "COD"
    TRANSFER = "TRANSFER"


class PaymentStatus(str, enum.Enum):
    """Payment record status."""

    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class Customer(Base):
    """Customer identified by WhatsApp phone number."""

    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    phone = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    orders = relationship("Order", back_populates="customer")


class Zone(Base):
    """Delivery zone."""

    __tablename__ = "zones"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    area_group = Column(String, nullable=True)
    delivery_fee = Column(Integer, nullable=True)  # NULL = no fee configured
    is_active = Column(Boolean, default=True, nullable=False)


class Product(Base):
    """Catalog product."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    sku = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    price = Column(Integer, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    aliases = relationship("ProductAlias", back_populates="product", cascade="all, delete-orphan")


class ProductAlias(Base):
    """Known synonym for a product."""

    __tablename__ = "product_aliases"

    id = Column(Integer, primary_key=True, index=True)
    alias = Column(String, unique=True, index=True, nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    # Relationships
    product = relationship("Product", back_populates="aliases")


class Order(Base):
    """Order model."""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    address_text = Column(Text, nullable=True)
    zone_id = Column(Integer, ForeignKey("zones.id"), nullable=True)
    zone_code = Column(String, nullable=True)  # kept even when zone_id is unknown
    subtotal = Column(Float, default=0, nullable=False)
    delivery_fee = Column(Float, default=0, nullable=False)
    discount = Column(Float, default=0, nullable=False)
    grand_total = Column(Float, default=0, nullable=False)
    payment_method = Column(Enum(PaymentMethod, native_enum=False), nullable=True)
    status = Column(
        Enum(OrderStatus, native_enum=False), default=OrderStatus.PENDING, nullable=False
    )
    raw_text = Column(Text, nullable=True)
    source_message_id = Column(String, nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    customer = relationship("Customer", back_populates="orders")
    zone = relationship("Zone")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")
    payments = relationship("Payment", back_populates="order", cascade="all, delete-orphan")


class OrderItem(Base):
    """Order item model."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=True)
    item_name = Column(String, nullable=False)
    raw_text = Column(Text, nullable=True)
    quantity = Column(Float, default=1, nullable=False)
    unit_price = Column(Float, nullable=False)
    line_total = Column(Float, nullable=False)

    # Relationships
    order = relationship("Order", back_populates="items")


class Payment(Base):
    """Payment record for an order."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False)
    method = Column(Enum(PaymentMethod, native_enum=False), nullable=False)
    amount = Column(Float, nullable=False)
    status = Column(
        Enum(PaymentStatus, native_enum=False), default=PaymentStatus.PENDING, nullable=False
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    order = relationship("Order", back_populates="payments")
