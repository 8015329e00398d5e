import logging
import os
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from storefront.checkout import CheckoutError, complete_checkout
from storefront.database import SessionLocal
from storefront.repository import get_widget
from storefront.schemas import CheckoutForm, TransactionData

logger = logging.getLogger(__name__)

router = APIRouter()

templates_dir = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(templates_dir))


def render(request: Request, name: str, context: Optional[dict] = None, stripe_js: bool = False):
    context = dict(context or {})
    context["stripe_js"] = stripe_js
    context["publishable_key"] = os.getenv("STRIPE_KEY", "")
    return templates.TemplateResponse(request, name, context)


@router.get("/", response_class=HTMLResponse)
def home(request: Request):
    return render(request, "home.html")


@router.get("/virtual-terminal", response_class=HTMLResponse)
def virtual_terminal(request: Request):
    return render(request, "terminal.html", stripe_js=True)


@router.get("/widget/{widget_id}", response_class=HTMLResponse)
def charge_once(request: Request, widget_id: int):
    db = SessionLocal()
    try:
        widget = get_widget(db, widget_id)
    finally:
        db.close()

    if widget is None:
        logger.error(f"Widget {widget_id} not found")
        raise HTTPException(status_code=404, detail="Widget not found")

    return render(request, "buy-once.html", {"widget": widget}, stripe_js=True)


@router.post("/payment-succeeded")
def payment_succeeded(
    request: Request,
    first_name: str = Form(...),
    last_name: str = Form(...),
    cardholder_email: str = Form(...),
    payment_intent: str = Form(...),
    payment_method: str = Form(...),
    payment_amount: int = Form(...),
    payment_currency: str = Form(...),
    product_id: Optional[int] = Form(None),
):
    form = CheckoutForm(
        first_name=first_name,
        last_name=last_name,
        email=cardholder_email,
        payment_intent=payment_intent,
        payment_method=payment_method,
        payment_amount=payment_amount,
        payment_currency=payment_currency,
        product_id=product_id,
    )

    db = SessionLocal()
    try:
        txn_data = complete_checkout(db, form)
    except CheckoutError:
        raise HTTPException(status_code=500, detail="Checkout failed")
    finally:
        db.close()

    request.session["receipt"] = txn_data.model_dump()
    return RedirectResponse(url="/receipt", status_code=303)


@router.get("/receipt", response_class=HTMLResponse)
def receipt(request: Request):
    data = request.session.pop("receipt", None)
    if data is None:
        return RedirectResponse(url="/", status_code=303)

    return render(request, "receipt.html", {"txn": TransactionData(**data)})
