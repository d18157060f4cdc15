# =============================================================================
# core/models/order.py - Order Schemas
# =============================================================================
# These models define the API contract for checkout and fulfilment:
# - OrderStatus / PaymentStatus / PaymentMethod: Enums stored on orders
# - OrderCreate: Checkout payload from the storefront
# - StatusUpdate / TrackingUpdate: Artist fulfilment actions
# - OrderSummary: Trimmed view returned by the customer order lookup
#
# Order flow:
#   pending -> (payment) -> processing -> shipped -> delivered
#   any open state -> cancelled | refunded
# =============================================================================

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from .customer import Address


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    STRIPE = "stripe"
    PAYPAL = "paypal"
    CREDIT_CARD = "credit_card"


class CustomerInfo(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=120)
    phone: str | None = None


class OrderItemRequest(BaseModel):
    product_id: UUID
    quantity: int = Field(..., ge=1, le=100)


class OrderCreate(BaseModel):
    """
    Checkout payload.

    Prices are never taken from the client; every line is re-priced from
    the product row.

    Example:
        {
            "customer": {"email": "sam@example.com", "name": "Sam"},
            "items": [{"product_id": "8c1f...", "quantity": 2}],
            "shipping_address": {...},
            "payment_method": "stripe"
        }
    """
    customer: CustomerInfo
    items: list[OrderItemRequest] = Field(..., min_length=1)
    shipping_address: Address
    billing_address: Address | None = None
    payment_method: PaymentMethod = PaymentMethod.STRIPE
    customer_notes: str | None = Field(default=None, max_length=1000)


class ConfirmPayment(BaseModel):
    payment_intent_id: str | None = None
    transaction_id: str | None = None


class StatusUpdate(BaseModel):
    status: OrderStatus
    note: str | None = Field(default=None, max_length=500)


class TrackingUpdate(BaseModel):
    carrier: str = Field(..., min_length=1)
    tracking_number: str = Field(..., min_length=1)
    estimated_delivery: datetime | None = None


class OrderSummary(BaseModel):
    """Order as shown on the public "find my order" page."""
    order_number: str
    status: OrderStatus
    payment_status: PaymentStatus
    total: float
    items_count: int
    created_at: datetime | None = None
    tracking: dict | None = None
