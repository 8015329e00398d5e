from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CheckoutForm(BaseModel):
    first_name: str
    last_name: str
    email: str
    payment_intent: str
    payment_method: str
    payment_amount: int
    payment_currency: str
    product_id: Optional[int] = None


class TransactionData(BaseModel):
    """Receipt view model kept in the session between checkout and /receipt."""

    first_name: str
    last_name: str
    email: str
    payment_intent_id: str
    payment_method_id: str
    payment_amount: int
    payment_currency: str
    last_four: str
    expiry_month: int
    expiry_year: int
    bank_return_code: str


class WidgetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = 0
    name: str = ""
    description: Optional[str] = ""
    inventory_level: Optional[int] = 0
    price: int = 0
    image: Optional[str] = ""
    is_recurring: bool = False
    plan_id: Optional[str] = ""


class WidgetSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = 0
    name: str = ""


class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = 0
    amount: int = 0
    currency: Optional[str] = ""
    last_four: Optional[str] = ""
    expiry_month: Optional[int] = 0
    expiry_year: Optional[int] = 0
    payment_intent: Optional[str] = ""
    bank_return_code: Optional[str] = ""


class CustomerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = 0
    first_name: Optional[str] = ""
    last_name: Optional[str] = ""
    email: Optional[str] = ""


class OrderOut(BaseModel):
    id: int
    widget_id: int = 0
    transaction_id: int = 0
    customer_id: int = 0
    status_id: int = 0
    quantity: int = 0
    amount: int = 0
    widget: WidgetSummary = Field(default_factory=WidgetSummary)
    transaction: TransactionOut = Field(default_factory=TransactionOut)
    customer: CustomerOut = Field(default_factory=CustomerOut)

    @classmethod
    def from_order(cls, order) -> "OrderOut":
        # Missing relations from the left joins render as empty objects.
        return cls(
            id=order.id,
            widget_id=order.widget_id or 0,
            transaction_id=order.transaction_id or 0,
            customer_id=order.customer_id or 0,
            status_id=order.status_id or 0,
            quantity=order.quantity,
            amount=order.amount,
            widget=WidgetSummary.model_validate(order.widget) if order.widget else WidgetSummary(),
            transaction=TransactionOut.model_validate(order.transaction) if order.transaction else TransactionOut(),
            customer=CustomerOut.model_validate(order.customer) if order.customer else CustomerOut(),
        )


class PageRequest(BaseModel):
    page_size: int = Field(gt=0)
    page: int = Field(default=1, ge=1)


class PaginatedOrders(BaseModel):
    orders: List[OrderOut]
    current_page: int
    page_size: int
    last_page: int
    total_records: int


class StatusUpdate(BaseModel):
    status_id: int


class PaymentIntentRequest(BaseModel):
    amount: int = Field(gt=0)
    currency: str = "usd"


class Credentials(BaseModel):
    email: str
    password: str


class PasswordUpdate(BaseModel):
    password: str = Field(min_length=8)
