# =============================================================================
# app/routers/cart.py - Cart Quote Endpoint
# =============================================================================
# The cart itself lives in the browser. This endpoint prices a posted cart
# with the same rules the storefront uses so the two never disagree.
# =============================================================================

from fastapi import APIRouter
from pydantic import BaseModel, Field

from core.cart import Cart, CartItem, CartTotals

router = APIRouter()


class CartQuoteRequest(BaseModel):
    items: list[CartItem] = Field(default_factory=list)


class CartQuoteResponse(BaseModel):
    items: list[CartItem]
    totals: CartTotals


@router.post("/quote", response_model=CartQuoteResponse)
async def quote_cart(data: CartQuoteRequest):
    """
    Price a cart.

    Lines with the same product id are merged. The response includes the
    amount still needed for free shipping.
    """
    cart = Cart()
    for item in data.items:
        cart.add_item(item.model_dump(), quantity=item.quantity)

    return CartQuoteResponse(items=cart.items, totals=cart.totals())
