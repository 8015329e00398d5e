import logging
from typing import List

import stripe
from fastapi import APIRouter, Depends, HTTPException

from storefront import repository
from storefront.auth import create_token, verify_token
from storefront.database import SessionLocal
from storefront.models import User
from storefront.schemas import (
    Credentials,
    OrderOut,
    PageRequest,
    PaginatedOrders,
    PasswordUpdate,
    PaymentIntentRequest,
    StatusUpdate,
    WidgetOut,
)
from storefront.stripe_service import create_payment_intent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/payment-intent")
def payment_intent(request: PaymentIntentRequest):
    try:
        intent = create_payment_intent(request.amount, request.currency)
    except stripe.StripeError as exc:
        logger.error(f"Creating payment intent failed: {exc}")
        raise HTTPException(status_code=502, detail="Payment processor error")

    return {"client_secret": intent.client_secret}


@router.get("/widget/{widget_id}", response_model=WidgetOut)
def widget(widget_id: int):
    db = SessionLocal()
    try:
        found = repository.get_widget(db, widget_id)
        if found is None:
            raise HTTPException(status_code=404, detail="Widget not found")
        return WidgetOut.model_validate(found)
    finally:
        db.close()


@router.post("/authenticate")
def authenticate(credentials: Credentials):
    db = SessionLocal()
    try:
        user_id = repository.authenticate(db, credentials.email, credentials.password)
    except repository.AuthenticationError:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    finally:
        db.close()

    return {"token": create_token(user_id), "token_type": "bearer"}


@router.get("/admin/orders/{order_type}", response_model=List[OrderOut])
def all_orders(order_type: str, user_id=Depends(verify_token)):
    if order_type not in repository.ORDER_TYPES:
        raise HTTPException(status_code=404, detail="Unknown order type")

    db = SessionLocal()
    try:
        return [OrderOut.from_order(o) for o in repository.get_all_orders(db, order_type)]
    finally:
        db.close()


def _paginated(order_type: str, request: PageRequest) -> PaginatedOrders:
    db = SessionLocal()
    try:
        orders, last_page, total_records = repository.get_all_orders_paginated(
            db, order_type, request.page_size, request.page
        )
        return PaginatedOrders(
            orders=[OrderOut.from_order(o) for o in orders],
            current_page=request.page,
            page_size=request.page_size,
            last_page=last_page,
            total_records=total_records,
        )
    finally:
        db.close()


@router.post("/admin/all-sales", response_model=PaginatedOrders)
def all_sales(request: PageRequest, user_id=Depends(verify_token)):
    return _paginated("order", request)


@router.post("/admin/all-subscriptions", response_model=PaginatedOrders)
def all_subscriptions(request: PageRequest, user_id=Depends(verify_token)):
    return _paginated("subscription", request)


@router.get("/admin/get-sale/{order_id}", response_model=OrderOut)
def get_sale(order_id: int, user_id=Depends(verify_token)):
    db = SessionLocal()
    try:
        order = repository.get_order_by_id(db, order_id)
        if order is None:
            raise HTTPException(status_code=404, detail="Order not found")
        return OrderOut.from_order(order)
    finally:
        db.close()


@router.post("/admin/orders/{order_id}/status")
def update_status(order_id: int, request: StatusUpdate, user_id=Depends(verify_token)):
    db = SessionLocal()
    try:
        if not repository.update_order_status(db, order_id, request.status_id):
            raise HTTPException(status_code=404, detail="Order not found")
    finally:
        db.close()

    logger.info(f"Order {order_id} set to status {request.status_id} by user {user_id}")
    return {"id": order_id, "status_id": request.status_id}


@router.post("/admin/password")
def change_password(request: PasswordUpdate, user_id=Depends(verify_token)):
    db = SessionLocal()
    try:
        user = db.get(User, user_id)
        if user is None:
            raise HTTPException(status_code=404, detail="User not found")
        repository.update_password_for_user(db, user, repository.hash_password(request.password))
    finally:
        db.close()

    logger.info(f"Password changed for user {user_id}")
    return {"id": user_id}
