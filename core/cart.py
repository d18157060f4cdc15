# =============================================================================
# core/cart.py - Shopping Cart
# =============================================================================
# The storefront keeps the cart in the browser (localStorage key "wa_cart")
# as a JSON array of items. This module is the server-side twin of that
# array: same item shape, same totals, so a cart posted from the browser
# can be re-priced and quoted by the API.
#
# Usage:
#   cart = Cart.from_json(raw)
#   cart.add_item(product, quantity=2)
#   totals = cart.totals()
# =============================================================================

from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from app.config import settings
from core.pricing import to_cents

logger = logging.getLogger(__name__)

STORAGE_KEY = "wa_cart"
DEFAULT_ARTIST_NAME = "Local Artist"


class CartItem(BaseModel):
    """One line in the cart."""
    id: str
    name: str
    price: float = Field(..., ge=0)
    image: str = ""
    artist: str = DEFAULT_ARTIST_NAME
    artist_id: str | None = None
    quantity: int = Field(default=1, ge=1)

    @property
    def line_total(self) -> float:
        return to_cents(Decimal(str(self.price)) * self.quantity)


class CartTotals(BaseModel):
    subtotal: float
    item_count: int
    donation: float
    shipping: float
    total: float
    free_shipping_remaining: float = Field(
        default=0.0,
        description="How much more the customer needs to spend for free shipping"
    )


def _normalize_product(product: dict[str, Any], quantity: int) -> CartItem:
    """Build a CartItem from whatever product shape the page had on hand."""
    artist = product.get("artist")
    if isinstance(artist, dict):
        artist_name = artist.get("business_name") or artist.get("name") or DEFAULT_ARTIST_NAME
        artist_id = product.get("artist_id") or artist.get("id")
    else:
        artist_name = artist or DEFAULT_ARTIST_NAME
        artist_id = product.get("artist_id")

    return CartItem(
        id=str(product["id"]),
        name=product.get("name", ""),
        price=float(product.get("price", 0)),
        image=product.get("image_url") or product.get("thumbnail_url") or product.get("image") or "",
        artist=artist_name,
        artist_id=str(artist_id) if artist_id else None,
        quantity=quantity,
    )


class Cart:
    """
    In-memory cart with the same semantics as the storefront cart.

    Lines are keyed by product id; adding an existing product merges
    quantities instead of creating a second line.
    """

    def __init__(self, items: list[CartItem] | None = None):
        self.items: list[CartItem] = list(items or [])

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_item(self, product: dict[str, Any], quantity: int = 1) -> CartItem:
        """Add a product, merging into an existing line when present."""
        if quantity < 1:
            raise ValueError("quantity must be at least 1")

        item = _normalize_product(product, quantity)
        existing = self._find(item.id)
        if existing is not None:
            existing.quantity += quantity
            return existing

        self.items.append(item)
        return item

    def remove_item(self, product_id: str) -> None:
        self.items = [item for item in self.items if item.id != str(product_id)]

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """Set a line's quantity; zero or less removes it. Unknown ids are ignored."""
        item = self._find(str(product_id))
        if item is None:
            return
        if quantity <= 0:
            self.remove_item(product_id)
        else:
            item.quantity = quantity

    def clear(self) -> None:
        self.items = []

    # -------------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------------

    def totals(self) -> CartTotals:
        """
        Cart summary shown in the dropdown and on the cart page.

        - donation: 5% of subtotal (informational, not added to total)
        - shipping: free when subtotal is over the threshold, flat rate otherwise
        """
        subtotal = Decimal("0")
        for item in self.items:
            subtotal += Decimal(str(item.line_total))

        item_count = sum(item.quantity for item in self.items)
        donation = subtotal * Decimal(str(settings.HOMELESS_CONTRIBUTION_RATE))
        threshold = Decimal(str(settings.FREE_SHIPPING_THRESHOLD))

        if subtotal > threshold:
            shipping = Decimal("0")
            remaining = Decimal("0")
        else:
            shipping = Decimal(str(settings.CART_FLAT_SHIPPING))
            remaining = threshold - subtotal

        return CartTotals(
            subtotal=to_cents(subtotal),
            item_count=item_count,
            donation=to_cents(donation),
            shipping=to_cents(shipping),
            total=to_cents(subtotal + shipping),
            free_shipping_remaining=to_cents(remaining),
        )

    # -------------------------------------------------------------------------
    # Persistence (browser localStorage format)
    # -------------------------------------------------------------------------

    def to_json(self) -> str:
        return json.dumps([item.model_dump() for item in self.items])

    @classmethod
    def from_json(cls, raw: str | None) -> "Cart":
        """Load a cart; missing or corrupt data yields an empty cart."""
        if not raw:
            return cls()
        try:
            data = json.loads(raw)
            return cls([CartItem(**entry) for entry in data])
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            logger.warning(f"Discarding unreadable cart: {e}")
            return cls()

    def _find(self, product_id: str) -> CartItem | None:
        for item in self.items:
            if item.id == product_id:
                return item
        return None

    def __len__(self) -> int:
        return len(self.items)
