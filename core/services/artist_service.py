# =============================================================================
# core/services/artist_service.py - Artist Business Logic
# =============================================================================
# Handles artist profiles, applications, accounts and dashboard stats.
#
# Emails are stored lowercased; lookups lowercase their input.
# Rows returned to clients go through public_artist() to drop the
# password hash.
# =============================================================================

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import page_range, pagination_meta, slugify
from core.models.artist import (
    ArtistApplication,
    ArtistRegister,
    ArtistSort,
    ArtistStats,
    ArtistStatus,
    ArtistUpdate,
    TopProduct,
    public_artist,
)
from core.models.order import PaymentStatus
from core.models.product import ProductStatus
from core.pricing import contribution_factor, default_contribution_base, to_cents
from app.auth.passwords import hash_password, password_fingerprint, validate_password, verify_password
from app.exceptions import (
    AccountStatusError,
    ArtistNotFoundError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InvalidTokenError,
)

logger = logging.getLogger(__name__)

FEATURED_LIMIT = 6
RECENT_SALES_LIMIT = 5


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ArtistService:
    """
    Service for artist operations.

    Provides a clean interface between API routes and database.
    """

    # -------------------------------------------------------------------------
    # Public directory
    # -------------------------------------------------------------------------

    @staticmethod
    def list_artists(
        city: str | None = None,
        category: str | None = None,
        sort: ArtistSort = ArtistSort.CREATED_AT,
        page: int = 1,
        limit: int = 12,
    ) -> dict[str, Any]:
        """
        List active artists.

        Args:
            city: Case-insensitive partial city match
            category: Category slug the artist works in
            sort: Sort column (descending)
            page: 1-indexed page
            limit: Page size
        """
        client = SupabaseClient.get_client()
        query = (
            client.table("artists")
            .select("*", count="exact")
            .eq("status", ArtistStatus.ACTIVE.value)
        )
        if city:
            query = query.ilike("city", f"%{city}%")
        if category:
            query = query.contains("categories", [category])

        start, end = page_range(page, limit)
        response = query.order(sort.value, desc=True).range(start, end).execute()

        return {
            "artists": [public_artist(row) for row in response.data or []],
            "pagination": pagination_meta(page, limit, response.count or 0),
        }

    @staticmethod
    def featured_artists() -> list[dict[str, Any]]:
        """Active, verified artists."""
        client = SupabaseClient.get_client()
        response = (
            client.table("artists")
            .select("*")
            .eq("status", ArtistStatus.ACTIVE.value)
            .eq("verified", True)
            .order("created_at", desc=True)
            .limit(FEATURED_LIMIT)
            .execute()
        )
        return [public_artist(row) for row in response.data or []]

    @staticmethod
    def get_artist(artist_id: str | UUID) -> dict[str, Any]:
        """
        Raises:
            ArtistNotFoundError: If the artist doesn't exist
        """
        artist = SupabaseClient.fetch_by_id("artists", artist_id)
        if not artist:
            raise ArtistNotFoundError(str(artist_id))
        return public_artist(artist)

    @staticmethod
    def get_artist_by_slug(slug: str) -> dict[str, Any]:
        artist = SupabaseClient.fetch_one("artists", "slug", slug)
        if not artist:
            raise ArtistNotFoundError(slug)
        return public_artist(artist)

    @staticmethod
    def find_by_email(email: str) -> dict[str, Any] | None:
        """Full artist row (including password hash) or None."""
        return SupabaseClient.fetch_one("artists", "email", email.strip().lower())

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    @staticmethod
    def _create(fields: dict[str, Any], password: str | None) -> dict[str, Any]:
        email = fields["email"].strip().lower()
        if ArtistService.find_by_email(email):
            raise EmailAlreadyRegisteredError(email)

        row = {
            **fields,
            "email": email,
            "slug": slugify(fields.get("business_name") or fields["name"]),
            "status": ArtistStatus.PENDING.value,
            "verified": False,
        }
        if password:
            validate_password(password)
            row["password_hash"] = hash_password(password)

        artist = SupabaseClient.insert("artists", row)[0]
        logger.info(f"Created artist: {artist['id']} ({email})")
        return artist

    @staticmethod
    def apply(application: ArtistApplication) -> dict[str, Any]:
        """
        Store a public artist application in pending status.

        Raises:
            EmailAlreadyRegisteredError: If the email is taken
        """
        fields = application.model_dump(mode="json", exclude={"password"}, exclude_none=True)
        return public_artist(ArtistService._create(fields, application.password))

    @staticmethod
    def register(data: ArtistRegister) -> dict[str, Any]:
        """
        Self-service registration. The account waits for admin approval.

        Raises:
            EmailAlreadyRegisteredError: If the email is taken
            WeakPasswordError: If the password is too short
        """
        fields = data.model_dump(mode="json", exclude={"password"}, exclude_none=True)
        return public_artist(ArtistService._create(fields, data.password))

    @staticmethod
    def authenticate(email: str, password: str) -> dict[str, Any]:
        """
        Verify credentials and record the login.

        Returns:
            Public artist profile

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
            AccountStatusError: Account is suspended
        """
        artist = ArtistService.find_by_email(email)
        if not artist or not verify_password(password, artist.get("password_hash")):
            raise InvalidCredentialsError()

        if artist.get("status") == ArtistStatus.SUSPENDED.value:
            raise AccountStatusError(
                ArtistStatus.SUSPENDED.value,
                "Your account has been suspended. Please contact support.",
            )

        SupabaseClient.update_by_id("artists", artist["id"], {"last_login": _now()})
        logger.info(f"Artist logged in: {artist['id']}")
        return public_artist(artist)

    @staticmethod
    def set_password(artist_id: str | UUID, password: str) -> None:
        validate_password(password)
        updated = SupabaseClient.update_by_id(
            "artists",
            artist_id,
            {"password_hash": hash_password(password), "updated_at": _now()},
        )
        if not updated:
            raise ArtistNotFoundError(str(artist_id))
        logger.info(f"Password updated for artist: {artist_id}")

    @staticmethod
    def reset_password(artist_id: str | UUID, fingerprint: str, password: str) -> None:
        """
        Set a new password from a reset link.

        Raises:
            InvalidTokenError: If the password changed since the link was issued
            WeakPasswordError: If the new password is too short
        """
        validate_password(password)
        artist = SupabaseClient.fetch_by_id("artists", artist_id, columns="id, password_hash")
        if not artist:
            raise ArtistNotFoundError(str(artist_id))
        if password_fingerprint(artist.get("password_hash")) != fingerprint:
            raise InvalidTokenError("Reset link has already been used. Please request a new one.")
        ArtistService.set_password(artist_id, password)

    @staticmethod
    def change_password(artist_id: str | UUID, current_password: str, new_password: str) -> None:
        """
        Raises:
            InvalidCredentialsError: If the current password is wrong
            WeakPasswordError: If the new password is too short
        """
        validate_password(new_password)
        artist = SupabaseClient.fetch_by_id("artists", artist_id, columns="id, password_hash")
        if not artist:
            raise ArtistNotFoundError(str(artist_id))
        if not verify_password(current_password, artist.get("password_hash")):
            raise InvalidCredentialsError("Current password is incorrect")
        ArtistService.set_password(artist_id, new_password)

    @staticmethod
    def update_profile(artist_id: str | UUID, data: ArtistUpdate) -> dict[str, Any]:
        changes = data.changes()
        if not changes:
            return ArtistService.get_artist(artist_id)

        changes["updated_at"] = _now()
        updated = SupabaseClient.update_by_id("artists", artist_id, changes)
        if not updated:
            raise ArtistNotFoundError(str(artist_id))

        logger.info(f"Updated artist profile: {artist_id}")
        return public_artist(updated)

    # -------------------------------------------------------------------------
    # Dashboard
    # -------------------------------------------------------------------------

    @staticmethod
    def paid_order_items(artist_id: str | UUID) -> list[dict[str, Any]]:
        """Order items for this artist on orders that have been paid."""
        client = SupabaseClient.get_client()
        response = (
            client.table("order_items")
            .select("*, order:orders!inner(id, order_number, created_at, payment_status)")
            .eq("artist_id", str(artist_id))
            .eq("order.payment_status", PaymentStatus.PAID.value)
            .execute()
        )
        return response.data or []

    @staticmethod
    def get_stats(artist_id: str | UUID) -> ArtistStats:
        """
        Dashboard numbers.

        Revenue counts only items on paid orders. The contribution follows
        the configured contribution base, the same way the earnings report
        computes it.
        """
        client = SupabaseClient.get_client()
        response = (
            client.table("products")
            .select("id, name, status, sales, customer_price, image_url, updated_at")
            .eq("artist_id", str(artist_id))
            .execute()
        )
        products = response.data or []

        items = ArtistService.paid_order_items(artist_id)
        revenue = sum((Decimal(str(item.get("subtotal") or 0)) for item in items), Decimal("0"))
        base = default_contribution_base()
        contribution = revenue * Decimal(str(contribution_factor(base)))

        selling = sorted(
            (p for p in products if (p.get("sales") or 0) > 0),
            key=lambda p: p.get("updated_at") or "",
            reverse=True,
        )[:RECENT_SALES_LIMIT]

        return ArtistStats(
            total_products=len(products),
            active_products=sum(1 for p in products if p.get("status") == ProductStatus.ACTIVE.value),
            sold_products=sum(1 for p in products if p.get("status") == ProductStatus.SOLD.value),
            total_sales=sum(item.get("quantity") or 0 for item in items),
            total_revenue=to_cents(revenue),
            homelessness_contribution=to_cents(contribution),
            contribution_base=base.value,
            recent_products=[TopProduct(**p) for p in selling],
        )
