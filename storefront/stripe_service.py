import os
from pathlib import Path
from dotenv import load_dotenv
import stripe

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BASE_DIR / ".env")

stripe.api_key = os.getenv("STRIPE_SECRET_KEY")


def create_payment_intent(amount: int, currency: str):
    return stripe.PaymentIntent.create(
        amount=amount,
        currency=currency,
        payment_method_types=["card"],
    )


def retrieve_payment_intent(payment_intent_id: str):
    return stripe.PaymentIntent.retrieve(payment_intent_id)


def get_payment_method(payment_method_id: str):
    return stripe.PaymentMethod.retrieve(payment_method_id)


def bank_return_code(intent) -> str:
    # latest_charge is an ID unless the intent was retrieved with it expanded
    charge = intent.latest_charge
    if charge is None:
        return ""
    if isinstance(charge, str):
        return charge
    return charge.id
