"""
Checkout workflow: turns a payment confirmed client-side with Stripe.js into
customer, transaction and order rows.

The three inserts commit one at a time. If a later insert fails the earlier
rows are left in place; nothing compensates for them.
"""
import logging

import stripe
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront import repository
from storefront.models import (
    ORDER_CLEARED,
    TRANSACTION_PENDING_CAPTURE,
    Customer,
    Order,
    Transaction,
)
from storefront.schemas import CheckoutForm, TransactionData
from storefront.stripe_service import bank_return_code, get_payment_method, retrieve_payment_intent

logger = logging.getLogger(__name__)


class CheckoutError(Exception):
    pass


def get_transaction_data(form: CheckoutForm) -> TransactionData:
    """Combine the posted form with the intent and card details held by Stripe."""
    intent = retrieve_payment_intent(form.payment_intent)
    method = get_payment_method(form.payment_method)

    if intent.amount != form.payment_amount:
        logger.warning(
            f"Posted amount {form.payment_amount} differs from confirmed amount "
            f"{intent.amount} for {form.payment_intent}"
        )

    return TransactionData(
        first_name=form.first_name,
        last_name=form.last_name,
        email=form.email,
        payment_intent_id=form.payment_intent,
        payment_method_id=form.payment_method,
        payment_amount=intent.amount,
        payment_currency=intent.currency,
        last_four=method.card.last4,
        expiry_month=method.card.exp_month,
        expiry_year=method.card.exp_year,
        bank_return_code=bank_return_code(intent),
    )


def save_customer(db: Session, first_name: str, last_name: str, email: str) -> int:
    customer = Customer(first_name=first_name, last_name=last_name, email=email)
    return repository.insert_customer(db, customer)


def save_transaction(db: Session, txn_data: TransactionData) -> int:
    txn = Transaction(
        amount=txn_data.payment_amount,
        currency=txn_data.payment_currency,
        last_four=txn_data.last_four,
        expiry_month=txn_data.expiry_month,
        expiry_year=txn_data.expiry_year,
        payment_intent=txn_data.payment_intent_id,
        payment_method=txn_data.payment_method_id,
        bank_return_code=txn_data.bank_return_code,
        transaction_status_id=TRANSACTION_PENDING_CAPTURE,
    )
    return repository.insert_transaction(db, txn)


def save_order(db: Session, widget_id, transaction_id: int, customer_id: int, amount: int) -> int:
    order = Order(
        widget_id=widget_id,
        transaction_id=transaction_id,
        customer_id=customer_id,
        status_id=ORDER_CLEARED,
        quantity=1,
        amount=amount,
    )
    return repository.insert_order(db, order)


def complete_checkout(db: Session, form: CheckoutForm) -> TransactionData:
    """
    Record a successful payment.

    Returns the receipt data. Raises CheckoutError if the Stripe lookups or
    any insert fails; later steps are skipped.
    """
    try:
        txn_data = get_transaction_data(form)
    except stripe.StripeError as exc:
        logger.error(f"Stripe lookup failed for {form.payment_intent}: {exc}")
        raise CheckoutError("could not retrieve payment details") from exc

    step = "customer"
    try:
        customer_id = save_customer(db, txn_data.first_name, txn_data.last_name, txn_data.email)
        logger.info(f"Created customer {customer_id}")

        step = "transaction"
        txn_id = save_transaction(db, txn_data)
        logger.info(f"Created transaction {txn_id} for {txn_data.payment_intent_id}")

        step = "order"
        order_id = save_order(db, form.product_id, txn_id, customer_id, txn_data.payment_amount)
        logger.info(f"Created order {order_id} for widget {form.product_id}")
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Saving {step} failed for {txn_data.payment_intent_id}: {exc}")
        raise CheckoutError(f"could not save {step}") from exc

    return txn_data
