# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for request/response models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Partial updates only report the fields that were sent
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

import pytest
from pydantic import ValidationError

from core.models import (
    ArtistApplication,
    ArtistUpdate,
    CustomerUpdate,
    OrderCreate,
    OrderStatus,
    ProcessingTime,
    ProductCreate,
    ProductListParams,
    ProductSort,
    ProductStatus,
    ProductUpdate,
    StatusUpdate,
    public_artist,
)


# =============================================================================
# Product Models
# =============================================================================

class TestProductCreate:

    def test_defaults(self):
        product = ProductCreate(name="Mug", price=32.00)

        assert product.shipping_cost == 8.00
        assert product.status == ProductStatus.ACTIVE
        assert product.processing_time == ProcessingTime.THREE_TO_FIVE_DAYS
        assert product.stock_quantity == 1

    def test_tags_are_stripped(self):
        product = ProductCreate(name="Mug", price=32.00, tags=[" clay ", "", "  ", "blue"])

        assert product.tags == ["clay", "blue"]

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            ProductCreate(name="Mug", price=-1)

    def test_unknown_processing_time_rejected(self):
        with pytest.raises(ValidationError):
            ProductCreate(name="Mug", price=1, processing_time="someday")


class TestProductUpdate:

    def test_changes_only_include_sent_fields(self):
        # Arrange: Client sends just a new price
        update = ProductUpdate(price=50.00)

        # Act
        changes = update.changes()

        # Assert: Nothing else leaks into the update
        assert changes == {"price": 50.00}

    def test_unknown_fields_are_ignored(self):
        update = ProductUpdate(**{"name": "Bowl", "artist_id": "someone-else", "views": 9999})

        assert update.changes() == {"name": "Bowl"}

    def test_enums_serialized_for_database(self):
        update = ProductUpdate(status="archived")

        assert update.changes() == {"status": "archived"}


class TestProductListParams:

    def test_defaults(self):
        params = ProductListParams()

        assert params.page == 1
        assert params.limit == 12
        assert params.sort == ProductSort.CREATED_AT
        assert params.order == "desc"

    def test_camel_case_sort_accepted(self):
        assert ProductListParams(sort="customerPrice").sort == ProductSort.CUSTOMER_PRICE
        assert ProductListParams(sort="createdAt").sort == ProductSort.CREATED_AT

    @pytest.mark.parametrize("field,value", [("page", 0), ("limit", 101), ("order", "sideways")])
    def test_out_of_range_rejected(self, field, value):
        with pytest.raises(ValidationError):
            ProductListParams(**{field: value})


# =============================================================================
# Artist Models
# =============================================================================

class TestArtistModels:

    def test_application_password_optional(self):
        application = ArtistApplication(name="Dana", email="dana@example.com")

        assert application.password is None
        assert application.is_homeless is False

    def test_application_requires_valid_email(self):
        with pytest.raises(ValidationError):
            ArtistApplication(name="Dana", email="not-an-email")

    def test_update_changes(self):
        update = ArtistUpdate(bio="New bio", social_media={"instagram": "@dana"})

        changes = update.changes()

        assert changes["bio"] == "New bio"
        assert changes["social_media"]["instagram"] == "@dana"
        assert "name" not in changes

    def test_public_artist_drops_password_hash(self, artist_row):
        public = public_artist(artist_row)

        assert "password_hash" not in public
        assert public["email"] == artist_row["email"]

    def test_public_artist_none(self):
        assert public_artist(None) is None


class TestCustomerUpdate:

    def test_address_serialized(self):
        update = CustomerUpdate(address={"line1": "1 Pike St", "city": "Seattle", "state": "WA", "zip_code": "98101"})

        assert update.changes()["address"]["country"] == "US"


# =============================================================================
# Order Models
# =============================================================================

class TestOrderCreate:

    def test_valid_checkout(self, checkout_payload):
        order = OrderCreate(**checkout_payload)

        assert order.items[0].quantity == 2
        assert order.billing_address is None

    def test_empty_cart_rejected(self, checkout_payload):
        checkout_payload["items"] = []

        with pytest.raises(ValidationError):
            OrderCreate(**checkout_payload)

    def test_quantity_limits(self, checkout_payload):
        checkout_payload["items"][0]["quantity"] = 0

        with pytest.raises(ValidationError):
            OrderCreate(**checkout_payload)

    def test_unknown_payment_method_rejected(self, checkout_payload):
        checkout_payload["payment_method"] = "bitcoin"

        with pytest.raises(ValidationError):
            OrderCreate(**checkout_payload)


class TestStatusUpdate:

    def test_valid_status(self):
        assert StatusUpdate(status="shipped").status == OrderStatus.SHIPPED

    def test_invalid_status(self):
        with pytest.raises(ValidationError):
            StatusUpdate(status="lost")
