from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from storefront.database import Base

# transaction_statuses.id
TRANSACTION_PENDING = 1
TRANSACTION_PENDING_CAPTURE = 2
TRANSACTION_DECLINED = 3
TRANSACTION_REFUNDED = 4
TRANSACTION_PARTIALLY_REFUNDED = 5

# statuses.id
ORDER_CLEARED = 1
ORDER_REFUNDED = 2
ORDER_CANCELLED = 3

TRANSACTION_STATUS_NAMES = {
    TRANSACTION_PENDING: "Pending",
    TRANSACTION_PENDING_CAPTURE: "Pending capture",
    TRANSACTION_DECLINED: "Declined",
    TRANSACTION_REFUNDED: "Refunded",
    TRANSACTION_PARTIALLY_REFUNDED: "Partially refunded",
}

ORDER_STATUS_NAMES = {
    ORDER_CLEARED: "Cleared",
    ORDER_REFUNDED: "Refunded",
    ORDER_CANCELLED: "Cancelled",
}


def utcnow() -> datetime:
    # Naive UTC, matching the timezone-less DateTime columns
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampMixin:
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class Widget(TimestampMixin, Base):
    __tablename__ = "widgets"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, default="")
    inventory_level = Column(Integer, default=0)
    price = Column(Integer, nullable=False)              # cents
    image = Column(String(255))
    is_recurring = Column(Boolean, default=False, nullable=False)
    plan_id = Column(String(255), default="")            # Stripe price/plan ID


class Customer(TimestampMixin, Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True)
    first_name = Column(String(255))
    last_name = Column(String(255))
    email = Column(String(255))


class TransactionStatus(TimestampMixin, Base):
    __tablename__ = "transaction_statuses"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)


class Transaction(TimestampMixin, Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    amount = Column(Integer, nullable=False)             # cents
    currency = Column(String(10))
    last_four = Column(String(4))
    bank_return_code = Column(String(255))               # Stripe charge ID
    expiry_month = Column(Integer, default=0)
    expiry_year = Column(Integer, default=0)
    payment_intent = Column(String(255), index=True)     # Stripe PaymentIntent ID
    payment_method = Column(String(255))                 # Stripe PaymentMethod ID
    transaction_status_id = Column(Integer, ForeignKey("transaction_statuses.id"))


class Status(TimestampMixin, Base):
    __tablename__ = "statuses"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)


class Order(TimestampMixin, Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    widget_id = Column(Integer, ForeignKey("widgets.id"), nullable=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True)
    status_id = Column(Integer, ForeignKey("statuses.id"))  # cleared | refunded | cancelled
    quantity = Column(Integer, default=1, nullable=False)
    amount = Column(Integer, nullable=False)

    widget = relationship("Widget")
    transaction = relationship("Transaction")
    customer = relationship("Customer")


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    first_name = Column(String(255))
    last_name = Column(String(255))
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(60), nullable=False)        # bcrypt hash
