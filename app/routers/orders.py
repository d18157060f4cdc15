# =============================================================================
# app/routers/orders.py - Order Endpoints
# =============================================================================
# Checkout and order lookup are public (guest checkout). Fulfilment actions
# require an artist who has items in the order.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, status
from pydantic import EmailStr

from app.auth import AuthArtist, get_current_artist
from core.models.order import ConfirmPayment, OrderCreate, OrderSummary, StatusUpdate, TrackingUpdate
from core.services.order_service import OrderService
from workers.tasks import enqueue, send_order_confirmation_email

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_order(data: OrderCreate):
    """
    Place an order.

    Returns the stored order and, for Stripe payments, the PaymentIntent
    client secret the storefront uses to collect the card.
    """
    result = OrderService.create_order(data)
    enqueue(send_order_confirmation_email, result["order"]["order_number"])

    response = {"order": result["order"]}
    if result["client_secret"]:
        response["client_secret"] = result["client_secret"]
    return response


@router.get("/customer/{email}", response_model=list[OrderSummary])
async def orders_for_customer(email: Annotated[EmailStr, Path()]):
    """Order summaries for an email address (no addresses or payment details)."""
    return OrderService.summaries_for_email(email)


@router.get("/artist/me")
async def orders_for_artist(artist: AuthArtist = Depends(get_current_artist)):
    """Paid orders containing the artist's items."""
    return OrderService.orders_for_artist(artist.id)


@router.get("/{order_number}")
async def get_order(order_number: Annotated[str, Path(min_length=1)]):
    return OrderService.get_by_number(order_number)


@router.post("/{order_id}/confirm-payment")
async def confirm_payment(
    order_id: Annotated[UUID, Path(description="Order UUID")],
    data: ConfirmPayment | None = None,
):
    order = OrderService.confirm_payment(order_id, data or ConfirmPayment())
    return {"message": "Payment confirmed", "order": order}


@router.put("/{order_id}/update-status")
async def update_status(
    order_id: Annotated[UUID, Path(description="Order UUID")],
    data: StatusUpdate,
    artist: AuthArtist = Depends(get_current_artist),
):
    order = OrderService.update_status(order_id, artist.id, data, updated_by=artist.name)
    return {"message": "Order status updated", "order": order}


@router.post("/{order_id}/add-tracking")
async def add_tracking(
    order_id: Annotated[UUID, Path(description="Order UUID")],
    data: TrackingUpdate,
    artist: AuthArtist = Depends(get_current_artist),
):
    order = OrderService.add_tracking(order_id, artist.id, data, updated_by=artist.name)
    return {"message": "Tracking information added", "order": order}
