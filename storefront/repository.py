"""
Typed queries over the storefront tables.

Every order listing left-joins orders -> widgets -> transactions -> customers,
so an order whose transaction or customer reference is null is still
returned, with the missing relation set to ``None``.
"""
import logging
from typing import List, Optional, Tuple

import bcrypt
from sqlalchemy import func
from sqlalchemy.orm import Session, contains_eager

from storefront.models import (
    ORDER_STATUS_NAMES,
    TRANSACTION_STATUS_NAMES,
    Customer,
    Order,
    Status,
    Transaction,
    TransactionStatus,
    User,
    Widget,
)

logger = logging.getLogger(__name__)

ORDER_TYPES = {"order": False, "subscription": True}


class AuthenticationError(Exception):
    pass


def get_widget(db: Session, widget_id: int) -> Optional[Widget]:
    return db.get(Widget, widget_id)


def _insert(db: Session, row) -> int:
    db.add(row)
    db.commit()
    return row.id


def insert_customer(db: Session, customer: Customer) -> int:
    """Insert a customer and return its id."""
    return _insert(db, customer)


def insert_transaction(db: Session, txn: Transaction) -> int:
    """Insert a transaction and return its id."""
    return _insert(db, txn)


def insert_order(db: Session, order: Order) -> int:
    """Insert an order and return its id."""
    return _insert(db, order)


def _joined_orders(db: Session):
    return (
        db.query(Order)
        .outerjoin(Order.widget)
        .outerjoin(Order.transaction)
        .outerjoin(Order.customer)
        .options(
            contains_eager(Order.widget),
            contains_eager(Order.transaction),
            contains_eager(Order.customer),
        )
    )


def get_all_orders(db: Session, order_type: str) -> List[Order]:
    """
    All one-off orders (``order_type="order"``) or subscriptions
    (``order_type="subscription"``), newest first.
    """
    if order_type not in ORDER_TYPES:
        logger.warning(f"Unknown order type: {order_type}")
        return []

    return (
        _joined_orders(db)
        .filter(Widget.is_recurring == ORDER_TYPES[order_type])
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def get_all_orders_paginated(
    db: Session, order_type: str, page_size: int, page: int
) -> Tuple[List[Order], int, int]:
    """
    One page of ``get_all_orders``.

    Returns ``(orders, last_page, total_records)`` where ``last_page`` is
    ``total_records // page_size``.
    """
    if page_size < 1:
        raise ValueError("page_size must be at least 1")

    if order_type not in ORDER_TYPES:
        logger.warning(f"Unknown order type: {order_type}")
        return [], 0, 0

    recurring = ORDER_TYPES[order_type]
    offset = (max(page, 1) - 1) * page_size

    orders = (
        _joined_orders(db)
        .filter(Widget.is_recurring == recurring)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(page_size)
        .offset(offset)
        .all()
    )

    total_records = (
        db.query(func.count(Order.id))
        .outerjoin(Widget, Order.widget_id == Widget.id)
        .filter(Widget.is_recurring == recurring)
        .scalar()
    )

    last_page = total_records // page_size

    return orders, last_page, total_records


def get_order_by_id(db: Session, order_id: int) -> Optional[Order]:
    return _joined_orders(db).filter(Order.id == order_id).first()


def update_order_status(db: Session, order_id: int, status_id: int) -> bool:
    """Set an order's status. Returns False when no such order exists."""
    updated = db.query(Order).filter_by(id=order_id).update({"status_id": status_id})
    db.commit()
    return updated > 0


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter_by(email=email.lower()).first()


def authenticate(db: Session, email: str, password: str) -> int:
    """Check a user's credentials and return the user id."""
    user = get_user_by_email(db, email)
    if user is None:
        raise AuthenticationError("invalid credentials")

    if not bcrypt.checkpw(password.encode("utf-8"), user.password.encode("utf-8")):
        raise AuthenticationError("incorrect password")

    return user.id


def update_password_for_user(db: Session, user: User, password_hash: str) -> None:
    db.query(User).filter_by(id=user.id).update({"password": password_hash})
    db.commit()


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def seed_lookup_tables(db: Session) -> None:
    """Insert any missing transaction and order status rows."""
    for status_id, name in TRANSACTION_STATUS_NAMES.items():
        if db.get(TransactionStatus, status_id) is None:
            db.add(TransactionStatus(id=status_id, name=name))

    for status_id, name in ORDER_STATUS_NAMES.items():
        if db.get(Status, status_id) is None:
            db.add(Status(id=status_id, name=name))

    db.commit()
