# =============================================================================
# core/services/order_service.py - Order Business Logic
# =============================================================================
# Checkout, payment confirmation and fulfilment.
#
# Checkout flow:
# 1. Every requested line is re-priced from the product row
#    (customer_price, shipping_cost, free_shipping)
# 2. Stock and status are validated before anything is written
# 3. Order + order_items are inserted with status pending
# 4. A Stripe PaymentIntent is created when paying by Stripe
#
# Stock is only decremented when payment is confirmed.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import generate_order_number
from core.models.order import (
    ConfirmPayment,
    OrderCreate,
    OrderStatus,
    OrderSummary,
    PaymentMethod,
    PaymentStatus,
    StatusUpdate,
    TrackingUpdate,
)
from core.models.product import ProductStatus
from core.pricing import OrderLine, order_totals, to_cents
from core.services.payment_service import PaymentService
from app.exceptions import (
    InsufficientStockError,
    OrderAlreadyPaidError,
    OrderNotFoundError,
    OwnershipError,
    ProductNotFoundError,
    ProductUnavailableError,
)

logger = logging.getLogger(__name__)

ORDER_SELECT = "*, items:order_items(*)"
PRODUCT_COLUMNS = (
    "id, name, status, stock_quantity, customer_price, shipping_cost, free_shipping, "
    "image_url, thumbnail_url, artist_id, artist:artists(id, name, business_name)"
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def history_entry(status: str, note: str | None = None, updated_by: str | None = None) -> dict[str, Any]:
    return {
        "status": status,
        "note": note,
        "updated_by": updated_by,
        "timestamp": _now(),
    }


class OrderService:
    """
    Service for order operations.

    Provides a clean interface between API routes and database.
    """

    # -------------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------------

    @staticmethod
    def price_items(data: OrderCreate) -> tuple[list[dict[str, Any]], list[OrderLine]]:
        """
        Validate requested items and build order_items rows.

        Raises:
            ProductNotFoundError: If a product doesn't exist
            ProductUnavailableError: If a product isn't active
            InsufficientStockError: If stock is too low
        """
        rows: list[dict[str, Any]] = []
        lines: list[OrderLine] = []

        # Repeated lines for one product are checked against stock as a single line
        quantities: dict[UUID, int] = {}
        for requested in data.items:
            quantities[requested.product_id] = quantities.get(requested.product_id, 0) + requested.quantity

        for product_id, quantity in quantities.items():
            product = SupabaseClient.fetch_by_id("products", product_id, columns=PRODUCT_COLUMNS)
            if not product:
                raise ProductNotFoundError(str(product_id))

            if product.get("status") != ProductStatus.ACTIVE.value:
                raise ProductUnavailableError(product["name"], product.get("status", "unknown"))

            available = product.get("stock_quantity") or 0
            if available < quantity:
                raise InsufficientStockError(product["name"], available, quantity)

            line = OrderLine(
                unit_price=product["customer_price"],
                quantity=quantity,
                shipping_cost=product.get("shipping_cost") or 0,
                free_shipping=bool(product.get("free_shipping")),
            )
            lines.append(line)

            artist = product.get("artist") or {}
            rows.append({
                "product_id": product["id"],
                "artist_id": product.get("artist_id"),
                "product_name": product["name"],
                "product_image": product.get("image_url") or product.get("thumbnail_url"),
                "artist_name": artist.get("business_name") or artist.get("name"),
                "quantity": quantity,
                "price": to_cents(line.unit_price),
                "subtotal": line.subtotal,
            })

        return rows, lines

    @staticmethod
    def create_order(data: OrderCreate) -> dict[str, Any]:
        """
        Create an order from a checkout payload.

        Returns:
            {"order": order_with_items, "client_secret": str | None}
        """
        item_rows, lines = OrderService.price_items(data)
        totals = order_totals(lines)

        shipping_address = data.shipping_address.model_dump(mode="json")
        billing_address = (
            data.billing_address.model_dump(mode="json") if data.billing_address else shipping_address
        )
        customer = SupabaseClient.fetch_one("customers", "email", data.customer.email.lower(), columns="id")

        order_row = {
            "order_number": generate_order_number(),
            "customer_id": customer["id"] if customer else None,
            "customer_email": data.customer.email.lower(),
            "customer_name": data.customer.name,
            "customer_phone": data.customer.phone,
            "shipping_address": shipping_address,
            "billing_address": billing_address,
            **totals.model_dump(),
            "payment_method": data.payment_method.value,
            "payment_status": PaymentStatus.PENDING.value,
            "status": OrderStatus.PENDING.value,
            "status_history": [history_entry(OrderStatus.PENDING.value, "Order placed")],
            "customer_notes": data.customer_notes,
        }

        order = SupabaseClient.insert("orders", order_row)[0]
        try:
            items = SupabaseClient.insert(
                "order_items",
                [{**row, "order_id": order["id"]} for row in item_rows],
            )
            order["items"] = items
            logger.info(f"Created order {order['order_number']} ({len(items)} items, total {order['total']})")

            client_secret = None
            if data.payment_method == PaymentMethod.STRIPE:
                if PaymentService.enabled():
                    intent = PaymentService.create_payment_intent(
                        order["total"],
                        {"order_id": order["id"], "order_number": order["order_number"]},
                    )
                    SupabaseClient.update_by_id("orders", order["id"], {"payment_intent_id": intent["id"]})
                    order["payment_intent_id"] = intent["id"]
                    client_secret = intent["client_secret"]
                else:
                    logger.warning(f"Stripe not configured; order {order['order_number']} has no PaymentIntent")
        except Exception as e:
            OrderService._abandon_checkout(order, str(e))
            raise

        return {"order": order, "client_secret": client_secret}

    @staticmethod
    def _abandon_checkout(order: dict[str, Any], reason: str) -> None:
        """Cancel an order whose items or PaymentIntent could not be created."""
        logger.error(f"Checkout for order {order['order_number']} failed, cancelling: {reason}")
        history = list(order.get("status_history") or [])
        history.append(history_entry(OrderStatus.CANCELLED.value, "Checkout failed"))
        try:
            SupabaseClient.update_by_id("orders", order["id"], {
                "status": OrderStatus.CANCELLED.value,
                "payment_status": PaymentStatus.FAILED.value,
                "status_history": history,
            })
        except Exception as e:
            logger.error(f"Could not cancel order {order['order_number']}: {e}")

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    @staticmethod
    def get_by_number(order_number: str) -> dict[str, Any]:
        order = SupabaseClient.fetch_one("orders", "order_number", order_number, columns=ORDER_SELECT)
        if not order:
            raise OrderNotFoundError(order_number)
        return order

    @staticmethod
    def get_by_id(order_id: str | UUID) -> dict[str, Any]:
        order = SupabaseClient.fetch_by_id("orders", order_id, columns=ORDER_SELECT)
        if not order:
            raise OrderNotFoundError(str(order_id))
        return order

    @staticmethod
    def orders_for_email(email: str) -> list[dict[str, Any]]:
        """Orders (with items) placed with an email, newest first."""
        client = SupabaseClient.get_client()
        response = (
            client.table("orders")
            .select(ORDER_SELECT)
            .eq("customer_email", email.strip().lower())
            .order("created_at", desc=True)
            .execute()
        )
        return response.data or []

    @staticmethod
    def summaries_for_email(email: str) -> list[OrderSummary]:
        """Public order lookup: no addresses or payment ids."""
        return [
            OrderSummary(
                order_number=order["order_number"],
                status=order["status"],
                payment_status=order["payment_status"],
                total=order["total"],
                items_count=sum(item.get("quantity") or 0 for item in order.get("items") or []),
                created_at=order.get("created_at"),
                tracking=order.get("tracking"),
            )
            for order in OrderService.orders_for_email(email)
        ]

    @staticmethod
    def orders_for_artist(artist_id: str | UUID) -> list[dict[str, Any]]:
        """
        Paid orders containing at least one of the artist's items.

        Only the artist's own items are included in each order.
        """
        client = SupabaseClient.get_client()
        response = (
            client.table("orders")
            .select("*, items:order_items!inner(*)")
            .eq("items.artist_id", str(artist_id))
            .eq("payment_status", PaymentStatus.PAID.value)
            .order("created_at", desc=True)
            .execute()
        )
        return response.data or []

    # -------------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------------

    @staticmethod
    def confirm_payment(order_id: str | UUID, data: ConfirmPayment) -> dict[str, Any]:
        """
        Mark an order paid and move stock.

        For each item: stock decreases, sales increase and the product
        becomes `sold` when no stock is left.

        Raises:
            OrderNotFoundError: If the order doesn't exist
            OrderAlreadyPaidError: If payment was already confirmed
        """
        order = OrderService.get_by_id(order_id)
        if order.get("payment_status") == PaymentStatus.PAID.value:
            raise OrderAlreadyPaidError(str(order_id))

        history = list(order.get("status_history") or [])
        history.append(history_entry(OrderStatus.PROCESSING.value, "Payment received"))

        changes = {
            "payment_status": PaymentStatus.PAID.value,
            "paid_at": _now(),
            "status": OrderStatus.PROCESSING.value,
            "status_history": history,
        }
        if data.transaction_id:
            changes["transaction_id"] = data.transaction_id
        if data.payment_intent_id:
            changes["payment_intent_id"] = data.payment_intent_id

        updated = SupabaseClient.update_by_id("orders", order["id"], changes) or {**order, **changes}
        updated["items"] = order.get("items") or []

        for item in updated["items"]:
            OrderService._record_sale(item["product_id"], item["quantity"])

        logger.info(f"Payment confirmed for order {order['order_number']}")
        return updated

    @staticmethod
    def _record_sale(product_id: str, quantity: int) -> None:
        product = SupabaseClient.fetch_by_id("products", product_id, columns="id, stock_quantity, sales, status")
        if not product:
            logger.warning(f"Product {product_id} vanished before sale could be recorded")
            return

        stock = max((product.get("stock_quantity") or 0) - quantity, 0)
        changes = {
            "stock_quantity": stock,
            "sales": (product.get("sales") or 0) + quantity,
        }
        if stock == 0:
            changes["status"] = ProductStatus.SOLD.value
        SupabaseClient.update_by_id("products", product_id, changes)

    # -------------------------------------------------------------------------
    # Fulfilment (artists)
    # -------------------------------------------------------------------------

    @staticmethod
    def _owned_order(order_id: str | UUID, artist_id: str | UUID) -> dict[str, Any]:
        order = OrderService.get_by_id(order_id)
        if not any(str(item.get("artist_id")) == str(artist_id) for item in order.get("items") or []):
            raise OwnershipError("order")
        return order

    @staticmethod
    def update_status(
        order_id: str | UUID,
        artist_id: str | UUID,
        update: StatusUpdate,
        updated_by: str | None = None,
    ) -> dict[str, Any]:
        """
        Change order status and append to the history.

        Raises:
            OrderNotFoundError: If the order doesn't exist
            OwnershipError: If the artist has no items in the order
        """
        order = OrderService._owned_order(order_id, artist_id)
        return OrderService._apply_status(order, update.status, update.note, updated_by)

    @staticmethod
    def _apply_status(
        order: dict[str, Any],
        status: OrderStatus,
        note: str | None,
        updated_by: str | None,
        tracking: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        history = list(order.get("status_history") or [])
        history.append(history_entry(status.value, note, updated_by))

        tracking = dict(tracking if tracking is not None else order.get("tracking") or {})
        if status == OrderStatus.SHIPPED and not tracking.get("shipped_at"):
            tracking["shipped_at"] = _now()
        elif status == OrderStatus.DELIVERED:
            tracking["delivered_at"] = _now()

        changes = {"status": status.value, "status_history": history}
        if tracking:
            changes["tracking"] = tracking

        updated = SupabaseClient.update_by_id("orders", order["id"], changes) or {**order, **changes}
        updated["items"] = order.get("items") or []
        logger.info(f"Order {order['order_number']} -> {status.value}")
        return updated

    @staticmethod
    def add_tracking(
        order_id: str | UUID,
        artist_id: str | UUID,
        update: TrackingUpdate,
        updated_by: str | None = None,
    ) -> dict[str, Any]:
        """Attach carrier tracking and mark the order shipped."""
        order = OrderService._owned_order(order_id, artist_id)

        tracking = dict(order.get("tracking") or {})
        tracking.update({
            "carrier": update.carrier,
            "tracking_number": update.tracking_number,
            "estimated_delivery": update.estimated_delivery.isoformat() if update.estimated_delivery else None,
        })

        return OrderService._apply_status(
            order,
            OrderStatus.SHIPPED,
            f"Shipped via {update.carrier}",
            updated_by,
            tracking=tracking,
        )
