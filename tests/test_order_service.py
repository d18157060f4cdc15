# =============================================================================
# tests/test_order_service.py - Checkout and Fulfilment Tests
# =============================================================================
# Run with: pytest tests/test_order_service.py -v
# =============================================================================

from unittest.mock import patch

import pytest

from app.exceptions import (
    InsufficientStockError,
    OrderAlreadyPaidError,
    OrderNotFoundError,
    OwnershipError,
    PaymentError,
    ProductNotFoundError,
    ProductUnavailableError,
)
from core.models.order import ConfirmPayment, OrderCreate, StatusUpdate, TrackingUpdate
from core.services.order_service import OrderService
from lib.supabase_client import SupabaseClientError
from tests.conftest import ARTIST_ID, ORDER_ID, OTHER_ARTIST_ID, PRODUCT_ID, client_with_tables, query_chain


@pytest.fixture
def mock_db():
    with patch("core.services.order_service.SupabaseClient") as mock:
        yield mock


@pytest.fixture
def mock_payments():
    with patch("core.services.order_service.PaymentService") as mock:
        mock.enabled.return_value = False
        yield mock


def inserted(table, rows):
    """Echo inserted rows back with ids, like PostgREST does."""
    if isinstance(rows, list):
        return [{"id": f"{table}-{index}", **row} for index, row in enumerate(rows)]
    return [{"id": ORDER_ID, **rows}]


# =============================================================================
# Checkout
# =============================================================================

class TestPriceItems:
    """Validation of requested items."""

    def test_builds_item_rows_from_product(self, mock_db, product_row, checkout_payload):
        mock_db.fetch_by_id.return_value = product_row

        rows, lines = OrderService.price_items(OrderCreate(**checkout_payload))

        assert rows == [{
            "product_id": PRODUCT_ID,
            "artist_id": ARTIST_ID,
            "product_name": "Stoneware Mug",
            "product_image": product_row["image_url"],
            "artist_name": "Cascade Pottery Studio",
            "quantity": 2,
            "price": 44.00,
            "subtotal": 88.00,
        }]
        assert lines[0].shipping_cost == 8.00

    def test_missing_product(self, mock_db, checkout_payload):
        mock_db.fetch_by_id.return_value = None

        with pytest.raises(ProductNotFoundError):
            OrderService.price_items(OrderCreate(**checkout_payload))

    def test_inactive_product(self, mock_db, product_row, checkout_payload):
        product_row["status"] = "sold"
        mock_db.fetch_by_id.return_value = product_row

        with pytest.raises(ProductUnavailableError):
            OrderService.price_items(OrderCreate(**checkout_payload))

    def test_insufficient_stock(self, mock_db, product_row, checkout_payload):
        product_row["stock_quantity"] = 1
        mock_db.fetch_by_id.return_value = product_row

        with pytest.raises(InsufficientStockError) as exc_info:
            OrderService.price_items(OrderCreate(**checkout_payload))

        assert exc_info.value.details == {"available": 1, "requested": 2}

    def test_repeated_lines_share_stock(self, mock_db, product_row, checkout_payload):
        # Arrange
        product_row["stock_quantity"] = 3
        mock_db.fetch_by_id.return_value = product_row
        checkout_payload["items"] = [
            {"product_id": PRODUCT_ID, "quantity": 2},
            {"product_id": PRODUCT_ID, "quantity": 2},
        ]

        # Act
        with pytest.raises(InsufficientStockError) as exc_info:
            OrderService.price_items(OrderCreate(**checkout_payload))

        # Assert
        assert exc_info.value.details == {"available": 3, "requested": 4}

    def test_repeated_lines_merged_into_one_row(self, mock_db, product_row, checkout_payload):
        product_row["stock_quantity"] = 5
        mock_db.fetch_by_id.return_value = product_row
        checkout_payload["items"] = [
            {"product_id": PRODUCT_ID, "quantity": 1},
            {"product_id": PRODUCT_ID, "quantity": 3},
        ]

        rows, lines = OrderService.price_items(OrderCreate(**checkout_payload))

        assert len(rows) == 1
        assert rows[0]["quantity"] == 4
        assert rows[0]["subtotal"] == 176.00
        mock_db.fetch_by_id.assert_called_once()


class TestCreateOrder:
    """Tests for order creation."""

    def test_creates_pending_order_with_totals(self, mock_db, mock_payments, product_row, checkout_payload):
        # Arrange
        mock_db.fetch_by_id.return_value = product_row
        mock_db.fetch_one.return_value = None
        mock_db.insert.side_effect = inserted

        # Act
        result = OrderService.create_order(OrderCreate(**checkout_payload))

        # Assert
        order = result["order"]
        assert result["client_secret"] is None
        assert order["customer_email"] == "sam@example.com"
        assert order["customer_id"] is None
        assert order["subtotal"] == 88.00
        assert order["shipping_cost"] == 8.00
        assert order["tax"] == 8.80
        assert order["total"] == 104.80
        assert order["status"] == "pending"
        assert order["payment_status"] == "pending"
        assert order["status_history"][0]["note"] == "Order placed"
        assert order["billing_address"] == order["shipping_address"]
        assert order["items"][0]["order_id"] == ORDER_ID

    def test_links_existing_customer(self, mock_db, mock_payments, product_row, checkout_payload):
        mock_db.fetch_by_id.return_value = product_row
        mock_db.fetch_one.return_value = {"id": "customer-1"}
        mock_db.insert.side_effect = inserted

        result = OrderService.create_order(OrderCreate(**checkout_payload))

        assert result["order"]["customer_id"] == "customer-1"

    def test_stripe_payment_intent(self, mock_db, mock_payments, product_row, checkout_payload):
        mock_db.fetch_by_id.return_value = product_row
        mock_db.fetch_one.return_value = None
        mock_db.insert.side_effect = inserted
        mock_payments.enabled.return_value = True
        mock_payments.create_payment_intent.return_value = {"id": "pi_123", "client_secret": "pi_123_secret"}

        result = OrderService.create_order(OrderCreate(**checkout_payload))

        assert result["client_secret"] == "pi_123_secret"
        assert result["order"]["payment_intent_id"] == "pi_123"
        amount, metadata = mock_payments.create_payment_intent.call_args.args
        assert amount == 104.80
        assert metadata["order_id"] == ORDER_ID

    def test_payment_failure_cancels_order(self, mock_db, mock_payments, product_row, checkout_payload):
        # Arrange
        mock_db.fetch_by_id.return_value = product_row
        mock_db.fetch_one.return_value = None
        mock_db.insert.side_effect = inserted
        mock_payments.enabled.return_value = True
        mock_payments.create_payment_intent.side_effect = PaymentError("card network down")

        # Act
        with pytest.raises(PaymentError):
            OrderService.create_order(OrderCreate(**checkout_payload))

        # Assert
        order_id, changes = mock_db.update_by_id.call_args.args[1:]
        assert order_id == ORDER_ID
        assert changes["status"] == "cancelled"
        assert changes["payment_status"] == "failed"
        assert changes["status_history"][-1]["note"] == "Checkout failed"

    def test_item_insert_failure_cancels_order(self, mock_db, mock_payments, product_row, checkout_payload):
        mock_db.fetch_by_id.return_value = product_row
        mock_db.fetch_one.return_value = None

        def insert(table, rows):
            if table == "order_items":
                raise SupabaseClientError("insert failed")
            return inserted(table, rows)

        mock_db.insert.side_effect = insert

        with pytest.raises(SupabaseClientError):
            OrderService.create_order(OrderCreate(**checkout_payload))

        assert mock_db.update_by_id.call_args.args[2]["status"] == "cancelled"
        mock_payments.create_payment_intent.assert_not_called()
        mock_db.update_by_id.assert_called_once_with("orders", ORDER_ID, {"payment_intent_id": "pi_123"})

    def test_paypal_orders_skip_stripe(self, mock_db, mock_payments, product_row, checkout_payload):
        checkout_payload["payment_method"] = "paypal"
        mock_db.fetch_by_id.return_value = product_row
        mock_db.fetch_one.return_value = None
        mock_db.insert.side_effect = inserted
        mock_payments.enabled.return_value = True

        OrderService.create_order(OrderCreate(**checkout_payload))

        mock_payments.create_payment_intent.assert_not_called()

    def test_nothing_written_when_validation_fails(self, mock_db, mock_payments, product_row, checkout_payload):
        product_row["stock_quantity"] = 0
        mock_db.fetch_by_id.return_value = product_row

        with pytest.raises(InsufficientStockError):
            OrderService.create_order(OrderCreate(**checkout_payload))

        mock_db.insert.assert_not_called()


# =============================================================================
# Lookups
# =============================================================================

class TestLookups:

    def test_unknown_order_number(self, mock_db):
        mock_db.fetch_one.return_value = None

        with pytest.raises(OrderNotFoundError):
            OrderService.get_by_number("WA-00000000-XXXX")

    def test_summaries_hide_addresses(self, mock_db, order_row):
        order_row["shipping_address"] = {"line1": "1 Pike St"}
        orders = query_chain(data=[order_row])
        mock_db.get_client.return_value = client_with_tables(orders=orders)

        summaries = OrderService.summaries_for_email(" Sam@Example.com ")

        orders.eq.assert_called_once_with("customer_email", "sam@example.com")
        assert len(summaries) == 1
        summary = summaries[0].model_dump()
        assert summary["items_count"] == 2
        assert "shipping_address" not in summary


# =============================================================================
# Payment confirmation
# =============================================================================

class TestConfirmPayment:
    """Tests for payment confirmation and stock movement."""

    def test_marks_paid_and_moves_stock(self, mock_db, order_row, product_row):
        # Arrange: Order for 2 of a product with 3 in stock
        stock_rows = {PRODUCT_ID: {"id": PRODUCT_ID, "stock_quantity": 3, "sales": 1, "status": "active"}}
        mock_db.fetch_by_id.side_effect = lambda table, row_id, columns="*": (
            order_row if table == "orders" else stock_rows.get(row_id)
        )
        mock_db.update_by_id.side_effect = lambda table, row_id, changes: {**order_row, **changes}

        # Act
        order = OrderService.confirm_payment(ORDER_ID, ConfirmPayment(transaction_id="txn_1"))

        # Assert: Order is paid and processing
        assert order["payment_status"] == "paid"
        assert order["status"] == "processing"
        assert order["transaction_id"] == "txn_1"
        assert order["status_history"][-1]["note"] == "Payment received"

        # Assert: Stock decremented, sales incremented
        mock_db.update_by_id.assert_any_call("products", PRODUCT_ID, {"stock_quantity": 1, "sales": 3})

    def test_last_unit_marks_product_sold(self, mock_db, order_row):
        stock_rows = {PRODUCT_ID: {"id": PRODUCT_ID, "stock_quantity": 2, "sales": 0, "status": "active"}}
        mock_db.fetch_by_id.side_effect = lambda table, row_id, columns="*": (
            order_row if table == "orders" else stock_rows.get(row_id)
        )
        mock_db.update_by_id.return_value = None

        OrderService.confirm_payment(ORDER_ID, ConfirmPayment())

        mock_db.update_by_id.assert_any_call(
            "products", PRODUCT_ID, {"stock_quantity": 0, "sales": 2, "status": "sold"}
        )

    def test_already_paid(self, mock_db, order_row):
        order_row["payment_status"] = "paid"
        mock_db.fetch_by_id.return_value = order_row

        with pytest.raises(OrderAlreadyPaidError) as exc_info:
            OrderService.confirm_payment(ORDER_ID, ConfirmPayment())

        assert exc_info.value.status_code == 400
        mock_db.update_by_id.assert_not_called()


# =============================================================================
# Fulfilment
# =============================================================================

class TestFulfilment:

    def test_artist_without_items_is_rejected(self, mock_db, order_row):
        mock_db.fetch_by_id.return_value = order_row

        with pytest.raises(OwnershipError):
            OrderService.update_status(ORDER_ID, OTHER_ARTIST_ID, StatusUpdate(status="shipped"))

    def test_status_change_appends_history(self, mock_db, order_row):
        mock_db.fetch_by_id.return_value = order_row
        mock_db.update_by_id.side_effect = lambda table, row_id, changes: {**order_row, **changes}

        order = OrderService.update_status(
            ORDER_ID, ARTIST_ID, StatusUpdate(status="delivered", note="Left at door"), updated_by="Dana"
        )

        assert order["status"] == "delivered"
        assert len(order["status_history"]) == 2
        assert order["status_history"][-1]["updated_by"] == "Dana"
        assert "delivered_at" in order["tracking"]

    def test_add_tracking_ships_order(self, mock_db, order_row):
        mock_db.fetch_by_id.return_value = order_row
        mock_db.update_by_id.side_effect = lambda table, row_id, changes: {**order_row, **changes}

        order = OrderService.add_tracking(
            ORDER_ID, ARTIST_ID, TrackingUpdate(carrier="USPS", tracking_number="9400")
        )

        assert order["status"] == "shipped"
        assert order["tracking"]["carrier"] == "USPS"
        assert order["tracking"]["tracking_number"] == "9400"
        assert "shipped_at" in order["tracking"]
        assert order["status_history"][-1]["note"] == "Shipped via USPS"
