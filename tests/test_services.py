# =============================================================================
# tests/test_services.py - Artist, Customer, Category, Storage and Payment Tests
# =============================================================================
# Run with: pytest tests/test_services.py -v
# =============================================================================

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
import stripe

from app.auth.passwords import hash_password, password_fingerprint
from app.config import settings
from app.exceptions import (
    AccountStatusError,
    CategoryNotFoundError,
    EmailAlreadyRegisteredError,
    ImageProcessingError,
    InvalidCredentialsError,
    InvalidRequestError,
    InvalidTokenError,
    OwnershipError,
    PaymentError,
    StorageDeleteError,
    StorageUploadError,
    WeakPasswordError,
)
from core.models.artist import ArtistApplication, ArtistRegister
from core.models.customer import CustomerRegister, CustomerUpdate
from core.services.artist_service import ArtistService
from core.services.category_service import CategoryService
from core.services.customer_service import CustomerService
from core.services.earnings_service import build_report
from core.services.payment_service import PaymentService, to_minor_units
from core.services.storage_service import StorageService
from tests.conftest import ARTIST_ID, CATEGORY_ID, OTHER_ARTIST_ID, client_with_tables, query_chain
from tests.test_images import make_image

PUBLIC_URL = "https://test-project.supabase.co/storage/v1/object/public"


# =============================================================================
# Artists
# =============================================================================

@pytest.fixture
def artist_db():
    with patch("core.services.artist_service.SupabaseClient") as mock:
        yield mock


class TestArtistAccounts:
    """Tests for artist registration, applications and login."""

    def test_register_creates_pending_artist(self, artist_db):
        # Arrange
        artist_db.fetch_one.return_value = None
        artist_db.insert.side_effect = lambda table, row: [{"id": ARTIST_ID, **row}]
        data = ArtistRegister(
            name="Dana Reyes",
            email="Dana@Example.com",
            password="long enough",
            business_name="Cascade Pottery Studio",
        )

        # Act
        artist = ArtistService.register(data)

        # Assert
        assert artist["email"] == "dana@example.com"
        assert artist["status"] == "pending"
        assert artist["verified"] is False
        assert artist["slug"] == "cascade-pottery-studio"
        assert "password_hash" not in artist
        stored = artist_db.insert.call_args.args[1]
        assert stored["password_hash"].startswith("$2")

    def test_duplicate_email(self, artist_db, artist_row):
        artist_db.fetch_one.return_value = artist_row

        with pytest.raises(EmailAlreadyRegisteredError):
            ArtistService.register(ArtistRegister(name="Dana", email="dana@example.com", password="long enough"))

        artist_db.insert.assert_not_called()

    def test_weak_password(self, artist_db):
        artist_db.fetch_one.return_value = None

        with pytest.raises(WeakPasswordError):
            ArtistService.register(ArtistRegister(name="Dana", email="dana@example.com", password="short"))

    def test_application_without_password(self, artist_db):
        artist_db.fetch_one.return_value = None
        artist_db.insert.side_effect = lambda table, row: [{"id": ARTIST_ID, **row}]

        artist = ArtistService.apply(ArtistApplication(name="Dana Reyes", email="dana@example.com", categories=["pottery"]))

        stored = artist_db.insert.call_args.args[1]
        assert "password_hash" not in stored
        assert stored["slug"] == "dana-reyes"
        assert artist["categories"] == ["pottery"]

    def test_login_records_last_login(self, artist_db, artist_row):
        artist_row["password_hash"] = hash_password("long enough")
        artist_db.fetch_one.return_value = artist_row

        artist = ArtistService.authenticate("DANA@example.com", "long enough")

        assert artist["id"] == ARTIST_ID
        artist_db.fetch_one.assert_called_once_with("artists", "email", "dana@example.com")
        assert "last_login" in artist_db.update_by_id.call_args.args[2]

    def test_wrong_password(self, artist_db, artist_row):
        artist_row["password_hash"] = hash_password("long enough")
        artist_db.fetch_one.return_value = artist_row

        with pytest.raises(InvalidCredentialsError) as exc_info:
            ArtistService.authenticate("dana@example.com", "not the password")

        assert exc_info.value.status_code == 401

    def test_suspended_artist_cannot_login(self, artist_db, artist_row):
        artist_row["password_hash"] = hash_password("long enough")
        artist_row["status"] = "suspended"
        artist_db.fetch_one.return_value = artist_row

        with pytest.raises(AccountStatusError) as exc_info:
            ArtistService.authenticate("dana@example.com", "long enough")

        assert exc_info.value.status_code == 403

    def test_change_password_checks_current(self, artist_db):
        artist_db.fetch_by_id.return_value = {"id": ARTIST_ID, "password_hash": hash_password("old password")}

        with pytest.raises(InvalidCredentialsError):
            ArtistService.change_password(ARTIST_ID, "wrong password", "new password")


class TestArtistDirectory:

    def test_list_filters_by_city_and_category(self, artist_db, artist_row):
        artists = query_chain(data=[artist_row], count=1)
        artist_db.get_client.return_value = client_with_tables(artists=artists)

        result = ArtistService.list_artists(city="seat", category="pottery")

        artists.ilike.assert_called_once_with("city", "%seat%")
        artists.contains.assert_called_once_with("categories", ["pottery"])
        assert "password_hash" not in result["artists"][0]
        assert result["pagination"]["total"] == 1


class TestArtistStats:
    """Dashboard numbers come from paid order items only."""

    def test_stats(self, artist_db, monkeypatch):
        monkeypatch.setattr(settings, "HOMELESS_CONTRIBUTION_RATE", 0.05)
        monkeypatch.setattr(settings, "CONTRIBUTION_BASE", "customer_price")
        products = query_chain(data=[
            {"id": "p1", "name": "Mug", "status": "active", "sales": 2, "customer_price": 44.0, "updated_at": "2026-02-01"},
            {"id": "p2", "name": "Bowl", "status": "sold", "sales": 1, "customer_price": 66.0, "updated_at": "2026-03-01"},
            {"id": "p3", "name": "Vase", "status": "draft", "sales": 0, "customer_price": 20.0, "updated_at": "2026-01-01"},
        ])
        items = query_chain(data=[
            {"quantity": 2, "subtotal": 88.0},
            {"quantity": 1, "subtotal": 66.0},
        ])
        artist_db.get_client.return_value = client_with_tables(products=products, order_items=items)

        stats = ArtistService.get_stats(ARTIST_ID)

        assert stats.total_products == 3
        assert stats.active_products == 1
        assert stats.sold_products == 1
        assert stats.total_sales == 3
        assert stats.total_revenue == 154.00
        assert stats.homelessness_contribution == 7.70
        assert stats.contribution_base == "customer_price"
        assert [p.name for p in stats.recent_products] == ["Bowl", "Mug"]
        items.eq.assert_any_call("order.payment_status", "paid")

    def test_stats_agree_with_earnings_report_on_artist_price(self, artist_db, monkeypatch):
        # Arrange
        monkeypatch.setattr(settings, "HOMELESS_CONTRIBUTION_RATE", 0.05)
        monkeypatch.setattr(settings, "MARKETPLACE_FEE_RATE", 0.10)
        monkeypatch.setattr(settings, "CONTRIBUTION_BASE", "artist_price")
        rows = [{"quantity": 1, "subtotal": 110.0, "order": {"order_number": "AM-1", "created_at": "2026-03-01"}}]
        artist_db.get_client.return_value = client_with_tables(
            products=query_chain(data=[]), order_items=query_chain(data=rows)
        )

        # Act
        stats = ArtistService.get_stats(ARTIST_ID)
        report = build_report(rows)

        # Assert
        assert stats.homelessness_contribution == 5.00
        assert stats.homelessness_contribution == report.homelessness_contribution
        assert stats.contribution_base == "artist_price"


class TestPasswordReset:
    """A reset link stops working once the password it was issued for changes."""

    def test_reset_with_current_fingerprint(self, artist_db):
        stored = hash_password("old password")
        artist_db.fetch_by_id.return_value = {"id": ARTIST_ID, "password_hash": stored}

        ArtistService.reset_password(ARTIST_ID, password_fingerprint(stored), "new password")

        table, artist_id, changes = artist_db.update_by_id.call_args.args
        assert (table, artist_id) == ("artists", ARTIST_ID)
        assert changes["password_hash"] != stored

    def test_stale_fingerprint_rejected(self, artist_db):
        artist_db.fetch_by_id.return_value = {"id": ARTIST_ID, "password_hash": hash_password("changed")}

        with pytest.raises(InvalidTokenError):
            ArtistService.reset_password(ARTIST_ID, password_fingerprint("$2b$10$older"), "new password")
        artist_db.update_by_id.assert_not_called()


# =============================================================================
# Customers
# =============================================================================

@pytest.fixture
def customer_db():
    with patch("core.services.customer_service.SupabaseClient") as mock:
        yield mock


class TestCustomers:

    def test_register(self, customer_db):
        customer_db.fetch_one.return_value = None
        customer_db.insert.side_effect = lambda table, row: [{"id": "c1", **row}]

        customer = CustomerService.register(
            CustomerRegister(email="Sam@Example.com", password="long enough", name="Sam Lee")
        )

        assert customer["email"] == "sam@example.com"
        assert "password_hash" not in customer

    def test_register_duplicate(self, customer_db):
        customer_db.fetch_one.return_value = {"id": "c1"}

        with pytest.raises(EmailAlreadyRegisteredError):
            CustomerService.register(CustomerRegister(email="sam@example.com", password="long enough", name="Sam"))

    def test_authenticate(self, customer_db):
        customer_db.fetch_one.return_value = {
            "id": "c1",
            "email": "sam@example.com",
            "password_hash": hash_password("long enough"),
        }

        assert CustomerService.authenticate("sam@example.com", "long enough")["id"] == "c1"
        with pytest.raises(InvalidCredentialsError):
            CustomerService.authenticate("sam@example.com", "nope nope nope")

    def test_update_profile_only_sends_changes(self, customer_db):
        customer_db.update_by_id.return_value = {"id": "c1", "name": "Sam L", "password_hash": "x"}

        updated = CustomerService.update_profile("c1", CustomerUpdate(name="Sam L"))

        customer_db.update_by_id.assert_called_once_with("customers", "c1", {"name": "Sam L"})
        assert "password_hash" not in updated


# =============================================================================
# Categories
# =============================================================================

@pytest.fixture
def category_db():
    with patch("core.services.category_service.SupabaseClient") as mock:
        yield mock


class TestCategories:

    def test_inactive_category_not_found(self, category_db):
        category_db.fetch_one.return_value = {"id": CATEGORY_ID, "slug": "pottery", "is_active": False}

        with pytest.raises(CategoryNotFoundError):
            CategoryService.get_category("pottery")

    def test_refresh_product_count(self, category_db):
        products = query_chain(count=7)
        category_db.get_client.return_value = client_with_tables(products=products)

        count = CategoryService.refresh_product_count(CATEGORY_ID)

        assert count == 7
        category_db.update_by_id.assert_called_once_with("categories", CATEGORY_ID, {"product_count": 7})

    def test_refresh_without_category(self, category_db):
        assert CategoryService.refresh_product_count(None) is None
        category_db.get_client.assert_not_called()


# =============================================================================
# Storage
# =============================================================================

@pytest.fixture
def storage_db():
    with patch("core.services.storage_service.SupabaseClient") as mock:
        bucket = MagicMock()
        bucket.get_public_url.side_effect = lambda path: f"{PUBLIC_URL}/bucket/{path}"
        mock.get_client.return_value.storage.from_.return_value = bucket
        yield mock, bucket


class TestStorage:
    """Tests for image upload and delete."""

    def test_parse_public_url(self):
        bucket, path = StorageService.parse_public_url(f"{PUBLIC_URL}/product-images/product-1-2.jpg")

        assert bucket == "product-images"
        assert path == "product-1-2.jpg"

    @pytest.mark.parametrize("url", [
        "https://example.com/mug.jpg",
        f"{PUBLIC_URL}/someone-elses-bucket/file.jpg",
        f"{PUBLIC_URL}/product-images/",
    ])
    def test_parse_rejects_foreign_urls(self, url):
        with pytest.raises(InvalidRequestError):
            StorageService.parse_public_url(url)

    def test_product_upload_stores_main_and_thumbnail(self, storage_db):
        _, bucket = storage_db

        result = StorageService.upload_product_image(ARTIST_ID, make_image(1600, 900), "mug.png")

        assert bucket.upload.call_count == 2
        assert result["filename"].startswith(f"{ARTIST_ID}/product-")
        assert "thumb-" in result["thumbnail_url"]
        options = bucket.upload.call_args.kwargs["file_options"]
        assert options["content-type"] == "image/jpeg"

    def test_undecodable_upload(self, storage_db):
        with pytest.raises(ImageProcessingError):
            StorageService.upload_product_image(ARTIST_ID, b"nope", "mug.png")

    def test_upload_failure(self, storage_db):
        _, bucket = storage_db
        bucket.upload.side_effect = RuntimeError("bucket is full")

        with pytest.raises(StorageUploadError):
            StorageService.upload_artist_image(ARTIST_ID, make_image(600, 600), "me.png", kind="profile")

    def test_unknown_artist_image_kind(self, storage_db):
        with pytest.raises(InvalidRequestError):
            StorageService.upload_artist_image(ARTIST_ID, make_image(10, 10), "me.png", kind="banner")

    def test_quiet_delete_swallows_failures(self, storage_db):
        _, bucket = storage_db
        bucket.remove.side_effect = RuntimeError("gone")

        StorageService.delete_image_quietly(f"{PUBLIC_URL}/artist-images/{ARTIST_ID}/profile-1.jpg", ARTIST_ID)
        StorageService.delete_image_quietly(None, ARTIST_ID)

        with pytest.raises(StorageDeleteError):
            StorageService.delete_image(f"{PUBLIC_URL}/artist-images/{ARTIST_ID}/profile-1.jpg", ARTIST_ID)

    def test_delete_own_image(self, storage_db):
        _, bucket = storage_db

        StorageService.delete_image(f"{PUBLIC_URL}/product-images/{ARTIST_ID}/product-1.jpg", ARTIST_ID)

        bucket.remove.assert_called_once_with([f"{ARTIST_ID}/product-1.jpg"])

    @pytest.mark.parametrize("path", [
        f"{OTHER_ARTIST_ID}/product-1.jpg",
        "product-1.jpg",
        f"{ARTIST_ID}/../{OTHER_ARTIST_ID}/product-1.jpg",
    ])
    def test_delete_refuses_other_artists_images(self, storage_db, path):
        # Arrange
        _, bucket = storage_db

        # Act / Assert
        with pytest.raises(OwnershipError):
            StorageService.delete_image(f"{PUBLIC_URL}/product-images/{path}", ARTIST_ID)
        bucket.remove.assert_not_called()

    def test_ensure_buckets_creates_missing(self, storage_db):
        mock, _ = storage_db
        storage = mock.get_client.return_value.storage
        storage.list_buckets.return_value = [SimpleNamespace(name="product-images")]

        created = StorageService.ensure_buckets()

        assert created == ["artist-images"]
        storage.create_bucket.assert_called_once_with("artist-images", options={"public": True})


# =============================================================================
# Payments
# =============================================================================

class TestPayments:

    def test_minor_units(self):
        assert to_minor_units(104.80) == 10480
        assert to_minor_units(0.015) == 2

    def test_creates_intent_in_cents(self):
        intent = SimpleNamespace(id="pi_1", client_secret="pi_1_secret")

        with patch("core.services.payment_service.stripe.PaymentIntent.create", return_value=intent) as create:
            result = PaymentService.create_payment_intent(104.80, {"order_number": "WA-1"})

        assert result == {"id": "pi_1", "client_secret": "pi_1_secret"}
        assert create.call_args.kwargs["amount"] == 10480
        assert create.call_args.kwargs["currency"] == "usd"

    def test_stripe_error_becomes_payment_error(self):
        with patch(
            "core.services.payment_service.stripe.PaymentIntent.create",
            side_effect=stripe.CardError("declined", None, "card_declined"),
        ):
            with pytest.raises(PaymentError) as exc_info:
                PaymentService.create_payment_intent(10.0, {})

        assert exc_info.value.status_code == 502
